from typing import Protocol


class AssistantGateway(Protocol):
    """The single call boundary to the assistant backend.

    ``ask`` sends one request and returns the reply text, or raises
    ``GatewayError``. Implementations do not retry.
    """

    async def ask(self, message: str, history: list[dict]) -> str: ...

    async def close(self) -> None: ...


def window(history: list[dict], limit: int) -> list[dict]:
    """Keep the most recent ``limit`` history entries (all of them when limit <= 0)."""
    if limit <= 0 or len(history) <= limit:
        return list(history)
    return list(history[-limit:])
