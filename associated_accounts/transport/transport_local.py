# associated_accounts/transport/transport_local.py

from collections import defaultdict
from typing import Dict, List

from associated_accounts.logger import get_logger
from associated_accounts.transport.transport_base import BaseTransport, Handler, TransportError

log = get_logger("associated_accounts.transport.local")


class LocalAdapter(BaseTransport):
    """
    In-process pub/sub. Handlers run synchronously inside publish(), so an
    observer sees every notification before the store call returns.

    A handler that raises does not undo the committed change; the error is
    logged and the remaining handlers still run.
    """

    name = "local"

    def __init__(self):
        self.handlers: Dict[str, List[Handler]] = defaultdict(list)

    def subscribe(self, topic: str, handler: Handler) -> None:
        if not callable(handler):
            raise TransportError(f"handler for {topic} is not callable")
        self.handlers[topic].append(handler)
        log.debug(f"subscribed to {topic}", extra={"event": "transport.subscribe"})

    def publish(self, topic: str, payload) -> int:
        message = self.to_dict(payload)
        handlers = list(self.handlers.get(topic, ()))
        log.info(f"LOCAL PUB {topic} to {len(handlers)} handlers", extra={"event": "transport.publish"})
        delivered = 0
        for handler in handlers:
            try:
                handler(message)
                delivered += 1
            except Exception:
                log.exception(f"handler failed on {topic}", extra={"event": "transport.handler_error"})
        return delivered
