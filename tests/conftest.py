import asyncio

import pytest
import pytest_asyncio

from penguin_chat.auth import Profile, ProfileDirectory
from penguin_chat.chat.orchestrator import ChatOrchestrator
from penguin_chat.data.share_store import ShareSnapshotStore


class FakeGateway:
    """Records every ask() call; replies from a queue, raises, or waits on a gate."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, list[dict]]] = []
        self.replies: list[str] = []
        self.error: Exception | None = None
        self.gate: asyncio.Event | None = None

    async def ask(self, message: str, history: list[dict]) -> str:
        self.calls.append((message, history))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.replies.pop(0) if self.replies else "ok"

    async def close(self) -> None:
        pass


class Access:
    def __init__(self) -> None:
        self.allowed = True

    def __call__(self) -> bool:
        return self.allowed


@pytest_asyncio.fixture
async def share_store(tmp_path):
    store = ShareSnapshotStore(str(tmp_path / "shares.db"))
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def access():
    return Access()


@pytest.fixture
def orchestrator(gateway, share_store, access):
    return ChatOrchestrator(gateway, share_store, may_chat=access)


@pytest.fixture
def directory():
    return ProfileDirectory(
        [
            Profile(user_id="alice", email="alice@example.com", is_approved=True),
            Profile(user_id="root", email="root@example.com", is_admin=True),
            Profile(user_id="bob", email="bob@example.com"),
        ]
    )
