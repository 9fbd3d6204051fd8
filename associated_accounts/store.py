"""
associated_accounts.store
-------------------------
The association ledger.

Each association id moves absent -> active -> revoked and never back. A store
call either commits the envelope, both index entries and the notification
together, or raises and leaves the provider untouched.
"""

from __future__ import annotations
import threading
from typing import Callable, Iterable, List, Optional, Tuple

from .address import account_hash
from .canonical import association_id
from .crypto import SignatureVerifier, default_verifier
from .errors import (
    InvalidAssociation, AssociationAlreadyExists, AssociationNotFound,
    AssociationAlreadyRevoked, UnauthorizedRevocation, TimestampOutOfRange,
)
from .constants import UINT40_MAX
from .events import AssociationCreated, AssociationRevoked, AssociationEvent, event_from_dict
from .logger import get_logger
from .record import SignedAssociationRecord
from .storage import StorageProvider, InMemoryStorage, EventRecord, load_storage_provider
from .transport import BaseTransport, NullTransport, transport_factory
from .utils import now_unix

log = get_logger("associated_accounts.store")

Clock = Callable[[], int]


def in_force(sar: SignedAssociationRecord, now: int) -> bool:
    """Validity window and revocation checks applied when an envelope is stored."""
    rec = sar.record
    return (
        rec.valid_at <= now
        and (rec.valid_until == 0 or now < rec.valid_until)
        and (sar.revoked_at == 0 or now < sar.revoked_at)
    )


def is_active(sar: SignedAssociationRecord, now: int) -> bool:
    """Stricter than in_force: a record with valid_at == 0 is never listed as active."""
    return sar.record.valid_at > 0 and in_force(sar, now)


class AssociationStore:
    def __init__(
        self,
        storage: Optional[StorageProvider] = None,
        verifier: Optional[SignatureVerifier] = None,
        clock: Optional[Clock] = None,
        transport: Optional[BaseTransport] = None,
    ):
        self.storage = storage or InMemoryStorage()
        self.verifier = verifier or default_verifier()
        self.clock = clock or now_unix
        self.transport = transport or NullTransport()
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def store_association(self, sar: SignedAssociationRecord) -> bytes:
        """
        Validate and commit a signed envelope. Returns the association id.

        Raises AssociationAlreadyExists for a known id and InvalidAssociation
        when the validity window or either signature fails. Unsupported key or
        chain types propagate as-is.
        """
        rec = sar.record
        aid = association_id(rec)

        with self._lock:
            if self.storage.has_association(aid):
                raise AssociationAlreadyExists(aid.hex())

            now = self.clock()
            if not in_force(sar, now):
                log.debug("store rejected", extra={"event": "association.rejected", "association_id": aid, "reason": "window"})
                raise InvalidAssociation()

            if not self.verifier.verify(rec.initiator, sar.initiator_key_type, sar.initiator_signature, aid):
                log.debug("store rejected", extra={"event": "association.rejected", "association_id": aid, "reason": "initiator_signature"})
                raise InvalidAssociation()
            if not self.verifier.verify(rec.approver, sar.approver_key_type, sar.approver_signature, aid):
                log.debug("store rejected", extra={"event": "association.rejected", "association_id": aid, "reason": "approver_signature"})
                raise InvalidAssociation()

            event = AssociationCreated(
                association_id=aid,
                initiator_hash=account_hash(rec.initiator),
                approver_hash=account_hash(rec.approver),
                sar=sar,
            )
            with self.storage.transaction():
                self._apply_created(event)
                self.storage.log_event(event.topic, event.to_dict())

        log.info("association created", extra={"event": event.topic, "association_id": aid})
        self.transport.publish(event.topic, event.to_dict())
        return aid

    def revoke_association(self, association_id: bytes, revoked_at: int, caller: bytes) -> int:
        """
        Mark an association revoked on behalf of `caller` (one of its two accounts).

        The committed time is never earlier than now. Returns it.
        """
        if not 0 <= revoked_at <= UINT40_MAX:
            raise TimestampOutOfRange("revoked_at", revoked_at)

        with self._lock:
            sar = self.storage.get_association(association_id)
            if sar is None:
                raise AssociationNotFound(association_id.hex())
            if sar.is_revoked:
                raise AssociationAlreadyRevoked(association_id.hex())

            caller_hash = account_hash(caller)
            if caller_hash not in (account_hash(sar.record.initiator), account_hash(sar.record.approver)):
                log.warning("revocation denied", extra={"event": "association.revoke_denied", "association_id": association_id, "account_hash": caller_hash})
                raise UnauthorizedRevocation(association_id.hex())

            effective = max(revoked_at, self.clock())
            event = AssociationRevoked(association_id=association_id, revoker_hash=caller_hash, revoked_at=effective)
            with self.storage.transaction():
                self._apply_revoked(event)
                self.storage.log_event(event.topic, event.to_dict())

        log.info("association revoked", extra={"event": event.topic, "association_id": association_id, "revoked_at": effective})
        self.transport.publish(event.topic, event.to_dict())
        return effective

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_association(self, association_id: bytes) -> SignedAssociationRecord:
        with self._lock:
            sar = self.storage.get_association(association_id)
        if sar is None:
            raise AssociationNotFound(association_id.hex())
        return sar

    def get_association_ids_for_account(self, account: bytes) -> List[bytes]:
        with self._lock:
            return self.storage.get_index(account_hash(account))

    def get_associations_for_account(self, account: bytes) -> List[SignedAssociationRecord]:
        with self._lock:
            return [self.storage.get_association(aid) for aid in self.storage.get_index(account_hash(account))]

    def get_active_associations_for_account(self, account: bytes) -> List[SignedAssociationRecord]:
        now = self.clock()
        return [sar for sar in self.get_associations_for_account(account) if is_active(sar, now)]

    def are_accounts_associated(self, account1: bytes, account2: bytes) -> bool:
        now = self.clock()
        return any(in_force(sar, now) for sar in self._between(account1, account2))

    def get_association_between_accounts(self, account1: bytes, account2: bytes) -> Tuple[bool, Optional[SignedAssociationRecord]]:
        matches = self._between(account1, account2)
        return (True, matches[0]) if matches else (False, None)

    def _between(self, account1: bytes, account2: bytes) -> List[SignedAssociationRecord]:
        # the entry must link exactly these two accounts; a == b only matches self-associations
        pair = {account_hash(account1), account_hash(account2)}
        return [
            sar for sar in self.get_associations_for_account(account1)
            if {account_hash(sar.record.initiator), account_hash(sar.record.approver)} == pair
        ]

    # ------------------------------------------------------------------
    # Replay
    # ------------------------------------------------------------------
    def _apply_created(self, event: AssociationCreated) -> None:
        self.storage.put_association(event.association_id, event.sar)
        self.storage.append_index(event.initiator_hash, event.association_id)
        if event.approver_hash != event.initiator_hash:
            self.storage.append_index(event.approver_hash, event.association_id)

    def _apply_revoked(self, event: AssociationRevoked) -> None:
        sar = self.storage.get_association(event.association_id)
        if sar is None:
            raise AssociationNotFound(event.association_id.hex())
        self.storage.put_association(event.association_id, sar.with_revocation(event.revoked_at))

    def replay(self, events: Iterable[AssociationEvent | EventRecord]) -> int:
        """
        Rebuild state from notifications, in order, without re-verifying them.
        The log is trusted: it only ever contains changes this store committed.
        """
        count = 0
        with self._lock, self.storage.transaction():
            for ev in events:
                if isinstance(ev, EventRecord):
                    ev = event_from_dict(ev.topic, ev.payload)
                if isinstance(ev, AssociationCreated):
                    self._apply_created(ev)
                else:
                    self._apply_revoked(ev)
                self.storage.log_event(ev.topic, ev.to_dict())
                count += 1
        log.info(f"replayed {count} events", extra={"event": "association.replay"})
        return count

    @classmethod
    def from_events(cls, events: Iterable[AssociationEvent | EventRecord], **kwargs) -> "AssociationStore":
        store = cls(**kwargs)
        store.replay(events)
        return store


def load_association_store(config: dict | None = None, **kwargs) -> AssociationStore:
    """
    Build a store from a config dict, falling back to the environment:

        AA_STORAGE_PROVIDER  memory | sqlite
        AA_DB_PATH           sqlite file path
        AA_TRANSPORT         local | none
    """
    config = config or {}
    return AssociationStore(
        storage=load_storage_provider(config),
        transport=transport_factory(config),
        **kwargs,
    )
