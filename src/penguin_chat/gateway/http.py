"""
HTTP assistant gateway.

Speaks the plain request/response shape used by hosted chat functions:
- Endpoint: POST <ASSISTANT_URL>
- Request: {"message": str, "conversation_history": [{"role", "content"}, ...]}
- Response: {"response": str}
"""

import logging

import httpx

from ..config import ASSISTANT_URL, GATEWAY_TIMEOUT_SECS, HISTORY_WINDOW
from ..errors import GatewayError
from .base import window

logger = logging.getLogger(__name__)


class HttpGateway:
    def __init__(
        self,
        url: str = ASSISTANT_URL,
        timeout: float = GATEWAY_TIMEOUT_SECS,
        history_window: int = HISTORY_WINDOW,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not url:
            raise ValueError("HttpGateway needs an assistant URL (set ASSISTANT_URL)")
        self._url = url
        self._history_window = history_window
        self._client = httpx.AsyncClient(
            headers={"Content-Type": "application/json", **(headers or {})},
            timeout=timeout,
            transport=transport,
        )

    async def ask(self, message: str, history: list[dict]) -> str:
        payload = {
            "message": message,
            "conversation_history": window(history, self._history_window),
        }
        try:
            response = await self._client.post(self._url, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning("Assistant request failed with status %d", e.response.status_code)
            raise GatewayError(f"Assistant returned HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.warning("Assistant request error: %s", e)
            raise GatewayError(f"Assistant request failed: {e}") from e
        except ValueError as e:
            raise GatewayError("Assistant returned invalid JSON") from e

        reply = data.get("response") if isinstance(data, dict) else None
        if not isinstance(reply, str) or not reply.strip():
            raise GatewayError("Assistant response has no 'response' text")
        return reply

    async def close(self) -> None:
        await self._client.aclose()
