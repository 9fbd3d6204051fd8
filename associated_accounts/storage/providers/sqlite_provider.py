from __future__ import annotations
from contextlib import contextmanager
from typing import Optional, Dict, Any, List
import json, sqlite3, os
from associated_accounts.record import SignedAssociationRecord
from associated_accounts.storage.models import EventRecord
from associated_accounts.storage.provider import StorageProvider
from associated_accounts.utils import canonical_json, now_ts, to_hex, from_hex


class SQLiteStorage(StorageProvider):
    def __init__(self, path="db/associations.db"):
        # If no directory, default to current working directory
        dir_path = os.path.dirname(path) or "."
        os.makedirs(dir_path, exist_ok=True)
        self.db = sqlite3.connect(path, check_same_thread=False)

        self._init()

    def _init(self) -> None:
        c = self.db.cursor()

        c.execute("""CREATE TABLE IF NOT EXISTS associations(
            association_id TEXT PRIMARY KEY,
            sar TEXT NOT NULL,
            revoked_at INTEGER NOT NULL DEFAULT 0
        )""")
        c.execute("""CREATE TABLE IF NOT EXISTS account_index(
            pos INTEGER PRIMARY KEY AUTOINCREMENT,
            account_hash TEXT NOT NULL,
            association_id TEXT NOT NULL
        )""")
        c.execute("CREATE INDEX IF NOT EXISTS account_index_hash ON account_index(account_hash)")
        c.execute("""CREATE TABLE IF NOT EXISTS events(
            seq INTEGER PRIMARY KEY AUTOINCREMENT,
            ts TEXT,
            topic TEXT NOT NULL,
            payload TEXT NOT NULL
        )""")

        self.db.commit()

    @contextmanager
    def transaction(self):
        # sqlite3 connection context: commit on success, rollback on error
        with self.db:
            yield

    def has_association(self, association_id: bytes) -> bool:
        cur = self.db.execute("SELECT 1 FROM associations WHERE association_id=?", (to_hex(association_id),))
        return cur.fetchone() is not None

    def get_association(self, association_id: bytes) -> Optional[SignedAssociationRecord]:
        cur = self.db.execute("SELECT sar FROM associations WHERE association_id=?", (to_hex(association_id),))
        row = cur.fetchone()
        if not row: return None
        return SignedAssociationRecord.from_dict(json.loads(row[0]))

    def put_association(self, association_id: bytes, sar: SignedAssociationRecord) -> None:
        self.db.execute(
            "INSERT INTO associations(association_id,sar,revoked_at) VALUES(?,?,?) "
            "ON CONFLICT(association_id) DO UPDATE SET sar=excluded.sar, revoked_at=excluded.revoked_at",
            (to_hex(association_id), canonical_json(sar.to_dict()).decode("utf-8"), sar.revoked_at)
        )

    def append_index(self, account_hash: bytes, association_id: bytes) -> None:
        self.db.execute("INSERT INTO account_index(account_hash,association_id) VALUES(?,?)",
                        (to_hex(account_hash), to_hex(association_id)))

    def get_index(self, account_hash: bytes) -> List[bytes]:
        cur = self.db.execute(
            "SELECT association_id FROM account_index WHERE account_hash=? ORDER BY pos",
            (to_hex(account_hash),)
        )
        return [from_hex(r[0]) for r in cur.fetchall()]

    def log_event(self, topic: str, payload: Dict[str, Any]) -> None:
        self.db.execute("INSERT INTO events(ts,topic,payload) VALUES(?,?,?)",
                        (now_ts(), topic, canonical_json(payload).decode("utf-8")))

    def list_events(self) -> List[EventRecord]:
        cur = self.db.execute("SELECT seq, topic, payload, ts FROM events ORDER BY seq")
        return [
            EventRecord(seq=seq, topic=topic, payload=json.loads(payload), ts=ts)
            for seq, topic, payload, ts in cur.fetchall()
        ]

    def close(self):
        self.db.close()
