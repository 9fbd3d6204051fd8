"""
associated_accounts.canonical
-----------------------------
Typed-data (EIP-712 style) hashing of association records.

The identifier does not depend on which party is the initiator: both
addresses are hashed and the two hashes are sorted before they enter the
struct hash. Signatures are always produced over this identifier.
"""

from __future__ import annotations
from functools import lru_cache
from typing import Tuple

from .constants import (
    PROTOCOL_NAME, PROTOCOL_VERSION, EIP712_DOMAIN_TYPE, ASSOCIATION_RECORD_TYPE,
)
from .record import AssociationRecord
from .utils import keccak, uint256

DOMAIN_TYPEHASH = keccak(EIP712_DOMAIN_TYPE.encode("utf-8"))
ASSOCIATION_RECORD_TYPEHASH = keccak(ASSOCIATION_RECORD_TYPE.encode("utf-8"))


@lru_cache(maxsize=None)
def domain_separator(name: str = PROTOCOL_NAME, version: str = PROTOCOL_VERSION) -> bytes:
    return keccak(
        DOMAIN_TYPEHASH
        + keccak(name.encode("utf-8"))
        + keccak(version.encode("utf-8"))
    )


def sorted_party_hashes(record: AssociationRecord) -> Tuple[bytes, bytes]:
    a, b = sorted((keccak(record.initiator), keccak(record.approver)))
    return a, b


def struct_hash(record: AssociationRecord) -> bytes:
    lo, hi = sorted_party_hashes(record)
    return keccak(
        ASSOCIATION_RECORD_TYPEHASH
        + lo
        + hi
        + record.interface_id.ljust(32, b"\x00")   # bytes4 is left-aligned
        + keccak(record.data)
        + uint256(record.valid_at)
        + uint256(record.valid_until)
    )


def association_id(record: AssociationRecord) -> bytes:
    return keccak(b"\x19\x01" + domain_separator() + struct_hash(record))
