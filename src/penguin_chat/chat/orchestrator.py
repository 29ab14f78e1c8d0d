import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol

from ..errors import Unauthorized
from ..gateway.base import AssistantGateway
from . import conversation as model
from .conversation import Attachment, Conversation, Message, Role

logger = logging.getLogger(__name__)

APOLOGY = "Sorry, I couldn't get a response just now. Please try again in a moment."


class Phase(StrEnum):
    IDLE = "idle"
    AWAITING_ASSISTANT = "awaiting_assistant"


@dataclass
class PendingState:
    phase: Phase = Phase.IDLE
    reply_target_id: str | None = None
    last_error: str | None = None


@dataclass(frozen=True)
class ChatState:
    """What the presentation layer renders."""

    messages: tuple[Message, ...]
    phase: Phase
    reply_target_id: str | None
    share_token: str | None
    last_error: str | None

    @property
    def typing(self) -> bool:
        return self.phase is Phase.AWAITING_ASSISTANT


@dataclass(frozen=True)
class Exchange:
    """One outstanding request to the assistant."""

    user_message: Message
    history: list[dict]


class SnapshotStore(Protocol):
    async def save(self, conversation: Conversation) -> str: ...


# --- Intents ---


@dataclass(frozen=True)
class Send:
    text: str = ""
    files: tuple[Attachment, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Reply:
    message_id: str


@dataclass(frozen=True)
class CancelReply:
    pass


@dataclass(frozen=True)
class NewChat:
    pass


@dataclass(frozen=True)
class Share:
    pass


Intent = Send | Reply | CancelReply | NewChat | Share


class ChatOrchestrator:
    """State machine for one chat session.

    Owns the conversation and the pending state. At most one assistant request
    is outstanding at a time; a send while awaiting is ignored.
    """

    def __init__(
        self,
        gateway: AssistantGateway,
        share_store: SnapshotStore,
        may_chat: Callable[[], bool],
    ) -> None:
        self._gateway = gateway
        self._share_store = share_store
        self._may_chat = may_chat
        self._conversation = model.seed()
        self._pending = PendingState()
        self._share_token: str | None = None
        self._generation = 0

    @property
    def conversation(self) -> Conversation:
        return self._conversation

    @property
    def busy(self) -> bool:
        return self._pending.phase is Phase.AWAITING_ASSISTANT

    @property
    def state(self) -> ChatState:
        return ChatState(
            messages=self._conversation.messages,
            phase=self._pending.phase,
            reply_target_id=self._pending.reply_target_id,
            share_token=self._share_token,
            last_error=self._pending.last_error,
        )

    # --- Sending ---

    def submit(self, text: str, files: Sequence[Attachment] = ()) -> Exchange | None:
        """Append the user message and enter AWAITING_ASSISTANT.

        Returns None (and changes nothing) for empty input or while a reply is
        pending. Raises Unauthorized, also without changing anything, when the
        account may not chat.
        """
        text = text.strip()
        files = tuple(files)
        if not text and not files:
            return None
        if not self._may_chat():
            raise Unauthorized()
        if self.busy:
            logger.info("Ignoring send while awaiting the assistant")
            return None

        history = model.history_for(self._conversation)
        message = Message(
            role=Role.USER,
            body=text or model.describe_files(files),
            attachments=files,
            reply_target=self._pending.reply_target_id,
        )
        self._conversation = model.append(self._conversation, message)
        self._pending.reply_target_id = None
        self._pending.last_error = None
        self._pending.phase = Phase.AWAITING_ASSISTANT
        return Exchange(user_message=message, history=history)

    async def resolve(self, exchange: Exchange) -> Message:
        """Wait for the gateway and record its reply (or the apology)."""
        try:
            body = await self._gateway.ask(exchange.user_message.body, exchange.history)
        except asyncio.CancelledError as e:
            self.assistant_failed(e)
            raise
        except Exception as e:
            return self.assistant_failed(e)
        return self.assistant_replied(body)

    async def send(self, text: str, files: Sequence[Attachment] = ()) -> Message | None:
        exchange = self.submit(text, files)
        if exchange is None:
            return None
        return await self.resolve(exchange)

    def assistant_replied(self, body: str) -> Message:
        self._require_pending()
        message = Message(role=Role.ASSISTANT, body=body)
        self._conversation = model.append(self._conversation, message)
        self._pending.phase = Phase.IDLE
        return message

    def assistant_failed(self, reason: BaseException | str) -> Message:
        self._require_pending()
        logger.warning("Assistant request failed: %s", reason)
        message = Message(role=Role.ASSISTANT, body=APOLOGY)
        self._conversation = model.append(self._conversation, message)
        self._pending.last_error = str(reason) or type(reason).__name__
        self._pending.phase = Phase.IDLE
        return message

    def _require_pending(self) -> None:
        if not self.busy:
            raise RuntimeError("No assistant request is pending")

    # --- Other intents ---

    def new_chat(self) -> bool:
        if self.busy:
            logger.info("Ignoring new chat while awaiting the assistant")
            return False
        self._conversation = model.reset()
        self._pending = PendingState()
        self._share_token = None
        self._generation += 1
        return True

    def reply(self, message_id: str) -> bool:
        if message_id not in self._conversation:
            return False
        self._pending.reply_target_id = message_id
        return True

    def cancel_reply(self) -> None:
        self._pending.reply_target_id = None

    async def share(self) -> str:
        generation = self._generation
        token = await self._share_store.save(self._conversation)
        # a new chat started during the save must not inherit this token
        if generation == self._generation:
            self._share_token = token
        logger.info("Shared conversation snapshot %s (%d messages)", token, len(self._conversation))
        return token

    async def dispatch(self, intent: Intent) -> Message | bool | str | None:
        if isinstance(intent, Send):
            return await self.send(intent.text, intent.files)
        elif isinstance(intent, Reply):
            return self.reply(intent.message_id)
        elif isinstance(intent, CancelReply):
            return self.cancel_reply()
        elif isinstance(intent, NewChat):
            return self.new_chat()
        elif isinstance(intent, Share):
            return await self.share()
        raise TypeError(f"Unknown intent: {intent!r}")
