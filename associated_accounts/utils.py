"""
associated_accounts.utils
-------------------------
Lightweight helpers for keccak hashing, hex codecs, timestamping and canonical JSON serialization.
Everything that ends up inside a hash or a persisted row goes through here so encodings stay uniform.
"""

from __future__ import annotations
import json, time
from typing import Any, Dict
from eth_utils import keccak as _keccak, encode_hex, decode_hex


def keccak(data: bytes) -> bytes:
    return _keccak(primitive=data)

def to_hex(b: bytes) -> str:
    return encode_hex(b)

def from_hex(s: str) -> bytes:
    return decode_hex(s)

def now_unix() -> int:
    return int(time.time())

def now_ts() -> str:
    # RFC3339 / ISO 8601 in UTC, second precision
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())

def uint256(value: int) -> bytes:
    return value.to_bytes(32, "big")

def canonical_json(obj: Dict[str, Any]) -> bytes:
    # Deterministic, minimal JSON for persisted rows and event payloads
    return json.dumps(obj, separators=(",", ":"), sort_keys=True, ensure_ascii=False).encode("utf-8")
