import uuid
from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import StrEnum
from pathlib import PurePath

from ..config import ASSISTANT_NAME
from ..errors import InvalidReply

GREETING = (
    f"Hello! I'm {ASSISTANT_NAME}, your intelligent assistant. I can help you with coding, "
    "mathematics, general reasoning, and much more. Feel free to send me text, images, "
    "documents, or audio files - I'm here to help!"
)

_TEXT_EXTENSIONS = {".txt", ".md", ".csv", ".json", ".log"}


def _now() -> datetime:
    return datetime.now(UTC)


def _uuid() -> str:
    return str(uuid.uuid4())


class Role(StrEnum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Attachment:
    """Descriptor of a file sent with a message. The bytes never reach the core."""

    name: str
    size_bytes: int = 0
    media_type: str = "application/octet-stream"

    @property
    def kind(self) -> str:
        if self.media_type.startswith("image/"):
            return "image"
        if self.media_type.startswith("audio/"):
            return "audio"
        if self.media_type.startswith("video/"):
            return "video"
        if "text" in self.media_type or PurePath(self.name).suffix.lower() in _TEXT_EXTENSIONS:
            return "text"
        return "file"

    @property
    def size_label(self) -> str:
        return f"{self.size_bytes / 1024 / 1024:.2f} MB"


@dataclass(frozen=True)
class Message:
    role: Role
    body: str
    id: str = field(default_factory=_uuid)
    created_at: datetime = field(default_factory=_now)
    attachments: tuple[Attachment, ...] = ()
    reply_target: str | None = None


@dataclass(frozen=True)
class Conversation:
    """Ordered, immutable log of messages for one session."""

    messages: tuple[Message, ...] = ()

    def __len__(self) -> int:
        return len(self.messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self.messages)

    def __contains__(self, message_id: object) -> bool:
        return any(m.id == message_id for m in self.messages)

    def get(self, message_id: str) -> Message | None:
        for m in self.messages:
            if m.id == message_id:
                return m
        return None

    @property
    def last(self) -> Message:
        return self.messages[-1]


def seed() -> Conversation:
    return Conversation((Message(role=Role.ASSISTANT, body=GREETING),))


def reset() -> Conversation:
    """Start over. The previous conversation is not archived anywhere."""
    return seed()


def append(conv: Conversation, message: Message) -> Conversation:
    if message.reply_target is not None and message.reply_target not in conv:
        raise InvalidReply(message.reply_target)
    if message.id in conv:
        raise ValueError(f"Duplicate message id {message.id!r}")
    return replace(conv, messages=conv.messages + (message,))


def history_for(conv: Conversation) -> list[dict]:
    """Role/content pairs in log order, as handed to the assistant gateway."""
    return [{"role": str(m.role), "content": m.body} for m in conv]


def describe_files(files: list[Attachment] | tuple[Attachment, ...]) -> str:
    return f"Uploaded {len(files)} file(s): {', '.join(f.name for f in files)}"


# --- Serialization ---


def message_to_dict(message: Message) -> dict:
    return {
        "id": message.id,
        "role": str(message.role),
        "body": message.body,
        "created_at": message.created_at.isoformat(),
        "attachments": [
            {"name": a.name, "size_bytes": a.size_bytes, "media_type": a.media_type}
            for a in message.attachments
        ],
        "reply_target": message.reply_target,
    }


def message_from_dict(data: dict) -> Message:
    return Message(
        id=data["id"],
        role=Role(data["role"]),
        body=data["body"],
        created_at=datetime.fromisoformat(data["created_at"]),
        attachments=tuple(Attachment(**a) for a in data.get("attachments", [])),
        reply_target=data.get("reply_target"),
    )
