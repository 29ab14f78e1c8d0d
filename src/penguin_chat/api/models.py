from typing import Literal

from pydantic import BaseModel, Field


class AttachmentIn(BaseModel):
    name: str
    size_bytes: int = Field(default=0, ge=0)
    media_type: str = "application/octet-stream"


class AttachmentOut(AttachmentIn):
    kind: str
    size_label: str


class ChatRequest(BaseModel):
    message: str = ""
    attachments: list[AttachmentIn] = []


class SessionRequest(BaseModel):
    user_id: str


class IntentRequest(BaseModel):
    type: Literal["reply", "cancel_reply", "new_chat", "share"]
    message_id: str | None = None


class SegmentOut(BaseModel):
    type: Literal["prose", "code"]
    text: str
    language: str | None = None


class MessageOut(BaseModel):
    id: str
    role: str
    content: str
    created_at: str
    attachments: list[AttachmentOut]
    reply_to: str | None
    segments: list[SegmentOut]


class SessionOut(BaseModel):
    session_id: str
    state: str
    typing: bool
    messages: list[MessageOut]
    reply_target_id: str | None
    share_token: str | None
    share_url: str | None
    last_error: str | None


class ShareOut(BaseModel):
    token: str
    url: str
    created_at: str
    messages: list[MessageOut]
