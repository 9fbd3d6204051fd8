# associated_accounts/events.py

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Union

from .constants import TOPIC_ASSOCIATION_CREATED, TOPIC_ASSOCIATION_REVOKED
from .record import SignedAssociationRecord
from .utils import to_hex, from_hex


@dataclass(frozen=True)
class AssociationCreated:
    association_id: bytes
    initiator_hash: bytes
    approver_hash: bytes
    sar: SignedAssociationRecord

    topic = TOPIC_ASSOCIATION_CREATED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "association_id": to_hex(self.association_id),
            "initiator_hash": to_hex(self.initiator_hash),
            "approver_hash": to_hex(self.approver_hash),
            "sar": self.sar.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AssociationCreated":
        return cls(
            association_id=from_hex(data["association_id"]),
            initiator_hash=from_hex(data["initiator_hash"]),
            approver_hash=from_hex(data["approver_hash"]),
            sar=SignedAssociationRecord.from_dict(data["sar"]),
        )


@dataclass(frozen=True)
class AssociationRevoked:
    association_id: bytes
    revoker_hash: bytes
    revoked_at: int

    topic = TOPIC_ASSOCIATION_REVOKED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "association_id": to_hex(self.association_id),
            "revoker_hash": to_hex(self.revoker_hash),
            "revoked_at": self.revoked_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AssociationRevoked":
        return cls(
            association_id=from_hex(data["association_id"]),
            revoker_hash=from_hex(data["revoker_hash"]),
            revoked_at=int(data["revoked_at"]),
        )


AssociationEvent = Union[AssociationCreated, AssociationRevoked]

_BY_TOPIC = {
    TOPIC_ASSOCIATION_CREATED: AssociationCreated,
    TOPIC_ASSOCIATION_REVOKED: AssociationRevoked,
}


def event_from_dict(topic: str, data: Dict[str, Any]) -> AssociationEvent:
    cls = _BY_TOPIC.get(topic)
    if cls is None:
        raise ValueError(f"Unknown association event topic: {topic}")
    return cls.from_dict(data)
