# associated_accounts/transport/__init__.py
import os
from associated_accounts.transport.transport_base import BaseTransport, NullTransport, TransportError
from associated_accounts.transport.transport_local import LocalAdapter


def transport_factory(config: dict | None = None) -> BaseTransport:
    """
    Resolve the notification bus:
      - "local" → in-process pub/sub (default)
      - "none"  → notifications are dropped
    """
    config = config or {}
    mode = (config.get("transport") or os.getenv("AA_TRANSPORT", "local")).lower()

    if mode == "local":
        return LocalAdapter()

    if mode == "none":
        return NullTransport()

    raise ValueError(f"Unknown transport: {mode}")


__all__ = [
    "BaseTransport",
    "NullTransport",
    "LocalAdapter",
    "TransportError",
    "transport_factory",
]
