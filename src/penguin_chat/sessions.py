import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field

from .auth import ProfileDirectory
from .chat.orchestrator import ChatOrchestrator, SnapshotStore
from .config import SESSION_TTL_MINUTES
from .gateway.base import AssistantGateway

logger = logging.getLogger(__name__)


@dataclass
class Session:
    id: str
    user_id: str
    orchestrator: ChatOrchestrator
    last_used: float = field(default_factory=time.monotonic)
    reply_task: asyncio.Task | None = None

    def touch(self) -> None:
        self.last_used = time.monotonic()


class SessionRegistry:
    """One ChatOrchestrator per open chat; idle sessions expire after the TTL."""

    def __init__(
        self,
        gateway: AssistantGateway,
        share_store: SnapshotStore,
        directory: ProfileDirectory,
        ttl_minutes: float = SESSION_TTL_MINUTES,
    ) -> None:
        self._gateway = gateway
        self._share_store = share_store
        self._directory = directory
        self._ttl_secs = ttl_minutes * 60
        self._sessions: dict[str, Session] = {}

    def create(self, user_id: str) -> Session:
        self.expire()
        # consulted on every send
        orchestrator = ChatOrchestrator(
            self._gateway,
            self._share_store,
            may_chat=lambda: self._directory.may_chat(user_id),
        )
        session = Session(id=str(uuid.uuid4()), user_id=user_id, orchestrator=orchestrator)
        self._sessions[session.id] = session
        logger.info("Opened session %s for user %s", session.id, user_id)
        return session

    def get(self, session_id: str) -> Session | None:
        self.expire()
        session = self._sessions.get(session_id)
        if session:
            session.touch()
        return session

    def expire(self) -> int:
        cutoff = time.monotonic() - self._ttl_secs
        stale = [
            sid
            for sid, s in self._sessions.items()
            if s.last_used < cutoff and not s.orchestrator.busy
        ]
        for sid in stale:
            del self._sessions[sid]
        if stale:
            logger.info("Expired %d idle sessions", len(stale))
        return len(stale)
