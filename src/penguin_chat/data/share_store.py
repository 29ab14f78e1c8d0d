import json
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime

import aiosqlite

from ..chat.conversation import Conversation, message_from_dict, message_to_dict

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS share_snapshots (
    token TEXT PRIMARY KEY,
    messages_json TEXT NOT NULL,
    created_at TEXT NOT NULL
);
"""


def _now() -> str:
    return datetime.now(UTC).isoformat()


def _token() -> str:
    return uuid.uuid4().hex


def share_url(origin: str, token: str) -> str:
    return f"{origin.rstrip('/')}/chat/{token}"


@dataclass(frozen=True)
class ShareSnapshot:
    token: str
    conversation: Conversation
    created_at: str


class ShareSnapshotStore:
    """Write-once store of shared conversation snapshots, keyed by token.

    Snapshots live in a local SQLite file; there is no update or delete.
    """

    def __init__(self, path: str) -> None:
        self._path = path
        self._db: aiosqlite.Connection | None = None

    @property
    def db(self) -> aiosqlite.Connection:
        """Return the database connection, raising if not initialized."""
        if self._db is None:
            raise RuntimeError("ShareSnapshotStore not initialized, call initialize() first")
        return self._db

    async def initialize(self) -> None:
        self._db = await aiosqlite.connect(self._path)
        self._db.row_factory = aiosqlite.Row
        await self._db.executescript(SCHEMA_SQL)
        await self._db.commit()

    async def close(self) -> None:
        if self._db:
            await self._db.close()

    async def save(self, conversation: Conversation) -> str:
        token = _token()
        messages_json = json.dumps([message_to_dict(m) for m in conversation])
        await self.db.execute(
            "INSERT INTO share_snapshots (token, messages_json, created_at) VALUES (?, ?, ?)",
            (token, messages_json, _now()),
        )
        await self.db.commit()
        return token

    async def load_snapshot(self, token: str) -> ShareSnapshot | None:
        cursor = await self.db.execute(
            "SELECT token, messages_json, created_at FROM share_snapshots WHERE token = ?",
            (token,),
        )
        row = await cursor.fetchone()
        if not row:
            return None
        messages = tuple(message_from_dict(m) for m in json.loads(row["messages_json"]))
        return ShareSnapshot(
            token=row["token"],
            conversation=Conversation(messages),
            created_at=row["created_at"],
        )

    async def load(self, token: str) -> Conversation | None:
        snapshot = await self.load_snapshot(token)
        return snapshot.conversation if snapshot else None
