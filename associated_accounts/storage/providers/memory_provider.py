from typing import Optional, Dict, Any, List
from associated_accounts.record import SignedAssociationRecord
from associated_accounts.storage.models import EventRecord
from associated_accounts.storage.provider import StorageProvider


class InMemoryStorage(StorageProvider):
    # transaction() is the inherited no-op; the store validates before any write
    def __init__(self):
        self.associations: Dict[bytes, SignedAssociationRecord] = {}
        self.index: Dict[bytes, List[bytes]] = {}
        self.events: List[EventRecord] = []

    def has_association(self, association_id: bytes) -> bool:
        return association_id in self.associations

    def get_association(self, association_id: bytes) -> Optional[SignedAssociationRecord]:
        return self.associations.get(association_id)

    def put_association(self, association_id: bytes, sar: SignedAssociationRecord) -> None:
        self.associations[association_id] = sar

    def append_index(self, account_hash: bytes, association_id: bytes) -> None:
        self.index.setdefault(account_hash, []).append(association_id)

    def get_index(self, account_hash: bytes) -> List[bytes]:
        return list(self.index.get(account_hash, ()))

    # notification log
    def log_event(self, topic: str, payload: Dict[str, Any]) -> None:
        self.events.append(EventRecord(seq=len(self.events) + 1, topic=topic, payload=payload))

    def list_events(self) -> List[EventRecord]:
        return list(self.events)
