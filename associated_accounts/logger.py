"""
associated_accounts.logger
--------------------------
One JSON object per line, UTC timestamps. Structured context goes in
``extra``; the keys listed in CONTEXT_FIELDS are lifted into the JSON line,
with bytes rendered as 0x hex, e.g.

    log.info("association created", extra={"event": "association.created", "association_id": aid})
"""

import logging, json, sys, time, os

CONTEXT_FIELDS = ("event", "association_id", "account_hash", "key_type", "reason", "revoked_at")


class JsonFormatter(logging.Formatter):
    converter = time.gmtime

    def format(self, record: logging.LogRecord) -> str:
        line = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%SZ"),
            "level": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        for key in CONTEXT_FIELDS:
            if hasattr(record, key):
                value = getattr(record, key)
                line[key] = "0x" + value.hex() if isinstance(value, (bytes, bytearray)) else value
        if record.exc_info:
            line["exc"] = self.formatException(record.exc_info)
        return json.dumps(line, default=str)


def get_logger(name="associated_accounts", level=None, to_file=None):
    """Structured logger shared by the codec, verifier, store and transports."""
    logger = logging.getLogger(name)
    logger.setLevel(level or os.getenv("AA_LOG_LEVEL", "INFO").upper())

    if not logger.handlers:
        formatter = JsonFormatter()
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

        if to_file:
            os.makedirs(os.path.dirname(to_file) or ".", exist_ok=True)
            file_handler = logging.FileHandler(to_file)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger
