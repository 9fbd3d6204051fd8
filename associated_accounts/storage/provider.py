# associated_accounts/storage/provider.py
from __future__ import annotations
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from associated_accounts.record import SignedAssociationRecord
from associated_accounts.storage.models import EventRecord


class StorageProvider:
    """
    Persistence contract for the association ledger.

    Holds the id -> envelope map, the account-hash -> [id] index and the
    notification log. Providers do no validation; AssociationStore decides
    what gets written and wraps each mutation in transaction().
    """

    @contextmanager
    def transaction(self) -> Iterator[None]:
        yield

    # associations
    def has_association(self, association_id: bytes) -> bool: ...
    def get_association(self, association_id: bytes) -> Optional[SignedAssociationRecord]: ...
    def put_association(self, association_id: bytes, sar: SignedAssociationRecord) -> None: ...

    # account index
    def append_index(self, account_hash: bytes, association_id: bytes) -> None: ...
    def get_index(self, account_hash: bytes) -> List[bytes]: ...

    # notification log
    def log_event(self, topic: str, payload: Dict[str, Any]) -> None: ...
    def list_events(self) -> List[EventRecord]: ...

    def close(self) -> None:
        return
