import asyncio
import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse
from sse_starlette.sse import EventSourceResponse

from ..chat.content import Code
from ..chat.conversation import Attachment, Message
from ..chat.orchestrator import CancelReply, Intent, NewChat, Reply, Share
from ..chat.render import render_conversation_html, segments_for
from ..config import ASSISTANT_NAME, PUBLIC_ORIGIN
from ..data.share_store import share_url
from ..errors import Unauthorized
from ..sessions import Session
from .models import (
    AttachmentOut,
    ChatRequest,
    IntentRequest,
    MessageOut,
    SegmentOut,
    SessionOut,
    SessionRequest,
    ShareOut,
)
from .sse import sse_done, sse_error, sse_init, sse_message, sse_status

logger = logging.getLogger(__name__)
router = APIRouter()


def _origin(request: Request) -> str:
    return PUBLIC_ORIGIN or str(request.base_url).rstrip("/")


def _message_out(message: Message) -> MessageOut:
    segments = [
        SegmentOut(type="code", text=seg.text, language=seg.language)
        if isinstance(seg, Code)
        else SegmentOut(type="prose", text=seg.text)
        for seg in segments_for(message)
    ]
    return MessageOut(
        id=message.id,
        role=str(message.role),
        content=message.body,
        created_at=message.created_at.isoformat(),
        attachments=[
            AttachmentOut(
                name=a.name,
                size_bytes=a.size_bytes,
                media_type=a.media_type,
                kind=a.kind,
                size_label=a.size_label,
            )
            for a in message.attachments
        ],
        reply_to=message.reply_target,
        segments=segments,
    )


def _session_out(session: Session, request: Request) -> SessionOut:
    state = session.orchestrator.state
    return SessionOut(
        session_id=session.id,
        state=str(state.phase),
        typing=state.typing,
        messages=[_message_out(m) for m in state.messages],
        reply_target_id=state.reply_target_id,
        share_token=state.share_token,
        share_url=share_url(_origin(request), state.share_token) if state.share_token else None,
        last_error=state.last_error,
    )


def _get_session(request: Request, session_id: str) -> Session:
    session = request.app.state.sessions.get(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


@router.post("/api/sessions")
async def create_session(req: SessionRequest, request: Request) -> SessionOut:
    session = request.app.state.sessions.create(req.user_id)
    return _session_out(session, request)


@router.get("/api/sessions/{session_id}")
async def get_session(session_id: str, request: Request) -> SessionOut:
    return _session_out(_get_session(request, session_id), request)


@router.post("/api/sessions/{session_id}/messages")
async def send_message(session_id: str, req: ChatRequest, request: Request):
    session = _get_session(request, session_id)
    orchestrator = session.orchestrator

    if not req.message.strip() and not req.attachments:
        raise HTTPException(status_code=422, detail="Message text or attachments required")

    files = [
        Attachment(name=a.name, size_bytes=a.size_bytes, media_type=a.media_type)
        for a in req.attachments
    ]
    try:
        exchange = orchestrator.submit(req.message, files)
    except Unauthorized as e:
        raise HTTPException(status_code=403, detail=str(e)) from e
    if exchange is None:
        raise HTTPException(status_code=409, detail="Still waiting for the previous reply")

    # Detached from the stream; a client disconnect must not strand the session
    # in awaiting_assistant.
    reply_task = asyncio.create_task(orchestrator.resolve(exchange))
    session.reply_task = reply_task

    async def event_generator():
        yield sse_init({"session_id": session_id})
        yield sse_message(_message_out(exchange.user_message).model_dump())
        yield sse_status("typing")
        try:
            reply = await asyncio.shield(reply_task)
        except Exception as e:
            logger.exception("Error in chat stream")
            yield sse_error(str(e))
            yield sse_done({"error": str(e)})
            return

        state = orchestrator.state
        if state.last_error:
            yield sse_error(state.last_error)
        yield sse_message(_message_out(reply).model_dump())
        yield sse_done({"state": str(state.phase), "message_count": len(state.messages)})

    return EventSourceResponse(event_generator(), ping=15)


@router.post("/api/sessions/{session_id}/intents")
async def dispatch_intent(session_id: str, req: IntentRequest, request: Request) -> SessionOut:
    session = _get_session(request, session_id)
    orchestrator = session.orchestrator

    intent: Intent
    if req.type == "reply":
        if not req.message_id:
            raise HTTPException(status_code=422, detail="message_id is required for reply")
        intent = Reply(req.message_id)
    elif req.type == "cancel_reply":
        intent = CancelReply()
    elif req.type == "new_chat":
        intent = NewChat()
    else:
        intent = Share()

    result = await orchestrator.dispatch(intent)
    if isinstance(intent, NewChat) and result is False:
        raise HTTPException(status_code=409, detail="Still waiting for the previous reply")
    return _session_out(session, request)


@router.get("/api/shares/{token}")
async def get_share(token: str, request: Request) -> ShareOut:
    snapshot = await request.app.state.share_store.load_snapshot(token)
    if not snapshot:
        raise HTTPException(status_code=404, detail="Shared chat not found")
    return ShareOut(
        token=snapshot.token,
        url=share_url(_origin(request), snapshot.token),
        created_at=snapshot.created_at,
        messages=[_message_out(m) for m in snapshot.conversation],
    )


@router.get("/chat/{token}", response_class=HTMLResponse)
async def view_share(token: str, request: Request):
    snapshot = await request.app.state.share_store.load_snapshot(token)
    if not snapshot:
        raise HTTPException(status_code=404, detail="Shared chat not found")
    return HTMLResponse(
        render_conversation_html(snapshot.conversation, title=f"{ASSISTANT_NAME} shared chat")
    )
