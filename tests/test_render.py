from datetime import UTC, datetime

from penguin_chat.chat.content import Code, Prose
from penguin_chat.chat.conversation import Attachment, Message, Role, append, seed
from penguin_chat.chat.render import (
    format_time,
    render_conversation_html,
    render_message_html,
    segments_for,
)


def test_user_text_is_not_parsed():
    msg = Message(role=Role.USER, body="my code ```py\nx\n```")
    assert segments_for(msg) == [Prose("my code ```py\nx\n```")]


def test_assistant_text_is_parsed():
    msg = Message(role=Role.ASSISTANT, body="Try:\n```sh\nls\n```")
    assert segments_for(msg) == [Prose("Try:\n"), Code(text="ls", language="sh")]


def test_format_time():
    assert format_time(datetime(2026, 1, 2, 9, 5, tzinfo=UTC)) == "09:05"


def test_message_html_escapes_and_labels_code():
    msg = Message(role=Role.ASSISTANT, body="<b>hi</b>\n```\nif a < b: pass\n```")
    html = render_message_html(msg)
    assert "&lt;b&gt;hi&lt;/b&gt;" in html
    assert "if a &lt; b: pass" in html
    assert '<div class="code-lang">code</div>' in html


def test_message_html_shows_attachments_and_reply_link():
    conv = seed()
    msg = Message(
        role=Role.USER,
        body="see attached",
        attachments=(Attachment("report.pdf", 1048576, "application/pdf"),),
        reply_target=conv.last.id,
    )
    html = render_message_html(msg)
    assert "report.pdf" in html
    assert "1.00 MB" in html
    assert f'href="#m-{conv.last.id}"' in html


def test_conversation_html():
    conv = append(seed(), Message(role=Role.USER, body="hello there"))
    page = render_conversation_html(conv, title="Shared")
    assert page.startswith("<!doctype html>")
    assert "<title>Shared</title>" in page
    assert "hello there" in page
    assert page.count('<div class="message ') == 2
