from __future__ import annotations
from typing import Any, Callable, Dict, Optional
import json

Handler = Callable[[Dict[str, Any]], None]


class TransportError(Exception):
    pass


class BaseTransport:
    """
    Notification bus contract.

    The store publishes one dict per committed state change; observers
    subscribe by topic. Payloads are the to_dict() form of the event.
    """
    name: str = "base"

    def publish(self, topic: str, payload: bytes | dict) -> Any:
        raise NotImplementedError

    def subscribe(self, topic: str, handler: Handler) -> Any:
        raise NotImplementedError

    @staticmethod
    def to_dict(payload: bytes | dict) -> dict:
        if isinstance(payload, dict):
            return payload
        return json.loads(payload.decode("utf-8"))


class NullTransport(BaseTransport):
    """Drops every notification. For stores nobody observes."""
    name = "none"

    def publish(self, topic: str, payload: bytes | dict) -> None:
        return None

    def subscribe(self, topic: str, handler: Optional[Handler] = None) -> None:
        return None
