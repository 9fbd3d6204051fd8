# associated_accounts/storage/models.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict

from associated_accounts.utils import now_ts


@dataclass
class EventRecord:
    """
    Storage-level representation of one notification in the append-only log.

    `seq` is assigned by the provider and fixes replay order.
    """
    seq: int
    topic: str
    payload: Dict[str, Any]
    ts: str = field(default_factory=now_ts)
