import asyncio
import logging
import time

from claude_agent_sdk import (
    AssistantMessage,
    ClaudeAgentOptions,
    ClaudeSDKClient,
    ResultMessage,
    TextBlock,
)

from ..config import GATEWAY_TIMEOUT_SECS, HISTORY_WINDOW, MAX_AGENT_TURNS, MODEL
from ..errors import GatewayError
from .base import window
from .prompts import build_prompt_with_history, build_system_prompt

logger = logging.getLogger(__name__)

# Claude Code built-in tools, all denied for chat turns
BUILTIN_TOOLS = [
    "Bash",
    "BashOutput",
    "KillShell",
    "Read",
    "Write",
    "Edit",
    "MultiEdit",
    "NotebookEdit",
    "Glob",
    "Grep",
    "WebFetch",
    "WebSearch",
    "Task",
    "TodoWrite",
    "ExitPlanMode",
]


class ClaudeGateway:
    """Answers chat messages through the Claude Agent SDK, without tools."""

    def __init__(
        self,
        model: str = MODEL,
        timeout_secs: float = GATEWAY_TIMEOUT_SECS,
        history_window: int = HISTORY_WINDOW,
    ) -> None:
        self._model = model
        self._timeout = timeout_secs
        self._history_window = history_window

    def _options(self) -> ClaudeAgentOptions:
        return ClaudeAgentOptions(
            system_prompt=build_system_prompt(),
            model=self._model,
            allowed_tools=[],
            disallowed_tools=list(BUILTIN_TOOLS),
            max_turns=MAX_AGENT_TURNS,
        )

    async def ask(self, message: str, history: list[dict]) -> str:
        prompt = build_prompt_with_history(message, window(history, self._history_window))
        t0 = time.time()
        try:
            text = await asyncio.wait_for(self._run(prompt), timeout=self._timeout)
        except GatewayError:
            raise
        except TimeoutError as e:
            raise GatewayError(f"Assistant timed out after {self._timeout:g}s") from e
        except Exception as e:
            logger.exception("Error in agent run")
            raise GatewayError(str(e)) from e
        logger.info("Assistant replied in %d ms", round((time.time() - t0) * 1000))
        return text

    async def _run(self, prompt: str) -> str:
        parts: list[str] = []
        async with ClaudeSDKClient(options=self._options()) as client:
            await client.query(prompt)
            async for message in client.receive_response():
                if isinstance(message, AssistantMessage):
                    for block in message.content:
                        if isinstance(block, TextBlock) and block.text and block.text.strip():
                            parts.append(block.text)
                elif isinstance(message, ResultMessage) and message.is_error:
                    raise GatewayError(f"Assistant run failed: {message.result or 'unknown error'}")
        if not parts:
            raise GatewayError("Assistant returned an empty response")
        return "\n\n".join(parts)

    async def close(self) -> None:
        pass
