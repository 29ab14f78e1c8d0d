from datetime import datetime
from html import escape

from ..config import ASSISTANT_NAME
from .content import Code, Prose, Segment, parse
from .conversation import Conversation, Message, Role


def segments_for(message: Message) -> list[Segment]:
    """Assistant text is parsed for fenced code; user text is shown verbatim."""
    if message.role is Role.ASSISTANT:
        return parse(message.body)
    return [Prose(message.body)]


def format_time(ts: datetime) -> str:
    return ts.strftime("%H:%M")


def _render_segment(seg: Segment) -> str:
    if isinstance(seg, Code):
        return (
            '<div class="code">'
            f'<div class="code-lang">{escape(seg.language or "code")}</div>'
            f"<pre><code>{escape(seg.text)}</code></pre>"
            "</div>"
        )
    return f'<p class="prose">{escape(seg.text)}</p>'


def render_message_html(message: Message) -> str:
    role = str(message.role)
    author = ASSISTANT_NAME if message.role is Role.ASSISTANT else "You"
    parts = [f'<div class="message {role}" id="m-{escape(message.id)}">']
    parts.append(f'<div class="author">{escape(author)}</div>')
    if message.reply_target:
        parts.append(
            f'<a class="reply-to" href="#m-{escape(message.reply_target)}">in reply</a>'
        )
    for a in message.attachments:
        parts.append(
            f'<div class="attachment {a.kind}">{escape(a.name)} '
            f'<span class="size">{a.size_label}</span></div>'
        )
    parts.extend(_render_segment(seg) for seg in segments_for(message))
    parts.append(f'<div class="time">{format_time(message.created_at)}</div>')
    parts.append("</div>")
    return "\n".join(parts)


def render_conversation_html(conversation: Conversation, *, title: str) -> str:
    body = "\n".join(render_message_html(m) for m in conversation)
    return (
        "<!doctype html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '  <meta charset="utf-8" />\n'
        f"  <title>{escape(title)}</title>\n"
        "  <style>body{font-family:system-ui,Segoe UI,Roboto,sans-serif;max-width:960px;margin:2rem auto;line-height:1.6;padding:0 1rem;}"
        ".message{margin:1rem 0;padding:0.75rem 1rem;border-radius:12px;border:1px solid #ddd;}"
        ".user{background:#eef6ff;}.prose{white-space:pre-wrap;margin:0.25rem 0;}"
        ".code pre{background:#1e1e1e;color:#eee;padding:0.75rem;overflow-x:auto;}"
        ".code-lang,.time,.author{font-size:0.75rem;opacity:0.7;}</style>\n"
        "</head>\n"
        "<body>\n"
        f"<h1>{escape(title)}</h1>\n"
        f"{body}\n"
        "</body>\n"
        "</html>\n"
    )
