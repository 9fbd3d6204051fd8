"""
associated_accounts.record
--------------------------
Defines the association payload and the signed envelope around it.

- AssociationRecord: the proposal both parties sign (immutable)
- SignedAssociationRecord: key types, both signatures and the revocation mark

Bytes fields travel as 0x-prefixed hex in dict form, which is what storage
providers and notifications persist.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Dict

from .constants import EMPTY_INTERFACE_ID, UINT40_MAX, KEY_TYPE_K1
from .utils import to_hex, from_hex


def _check_uint40(name: str, value: int) -> None:
    if not 0 <= value <= UINT40_MAX:
        raise ValueError(f"{name} must fit in uint40, got {value}")


@dataclass(frozen=True)
class AssociationRecord:
    initiator: bytes
    approver: bytes
    valid_at: int = 0
    valid_until: int = 0                     # 0 = never expires
    interface_id: bytes = EMPTY_INTERFACE_ID  # optional tag describing `data`
    data: bytes = b""

    def __post_init__(self):
        if len(self.interface_id) != 4:
            raise ValueError("interface_id must be exactly 4 bytes")
        _check_uint40("valid_at", self.valid_at)
        _check_uint40("valid_until", self.valid_until)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "initiator": to_hex(self.initiator),
            "approver": to_hex(self.approver),
            "valid_at": self.valid_at,
            "valid_until": self.valid_until,
            "interface_id": to_hex(self.interface_id),
            "data": to_hex(self.data),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AssociationRecord":
        return cls(
            initiator=from_hex(data["initiator"]),
            approver=from_hex(data["approver"]),
            valid_at=int(data.get("valid_at", 0)),
            valid_until=int(data.get("valid_until", 0)),
            interface_id=from_hex(data.get("interface_id", "0x00000000")),
            data=from_hex(data.get("data", "0x")),
        )


@dataclass(frozen=True)
class SignedAssociationRecord:
    record: AssociationRecord
    initiator_key_type: int = KEY_TYPE_K1
    approver_key_type: int = KEY_TYPE_K1
    initiator_signature: bytes = b""
    approver_signature: bytes = b""
    revoked_at: int = 0                      # 0 = not revoked

    @property
    def is_revoked(self) -> bool:
        return self.revoked_at != 0

    def with_revocation(self, revoked_at: int) -> "SignedAssociationRecord":
        _check_uint40("revoked_at", revoked_at)
        return replace(self, revoked_at=revoked_at)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "record": self.record.to_dict(),
            "initiator_key_type": self.initiator_key_type,
            "approver_key_type": self.approver_key_type,
            "initiator_signature": to_hex(self.initiator_signature),
            "approver_signature": to_hex(self.approver_signature),
            "revoked_at": self.revoked_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SignedAssociationRecord":
        """Reconstruct an envelope from its dict form (inverse of to_dict)."""
        return cls(
            record=AssociationRecord.from_dict(data["record"]),
            initiator_key_type=int(data.get("initiator_key_type", KEY_TYPE_K1)),
            approver_key_type=int(data.get("approver_key_type", KEY_TYPE_K1)),
            initiator_signature=from_hex(data.get("initiator_signature", "0x")),
            approver_signature=from_hex(data.get("approver_signature", "0x")),
            revoked_at=int(data.get("revoked_at", 0)),
        )
