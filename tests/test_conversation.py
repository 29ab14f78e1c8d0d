import pytest

from penguin_chat.chat.conversation import (
    GREETING,
    Attachment,
    Message,
    Role,
    append,
    describe_files,
    history_for,
    reset,
    seed,
)
from penguin_chat.errors import InvalidReply


def test_seed_has_single_greeting():
    conv = seed()
    assert len(conv) == 1
    assert conv.last.role is Role.ASSISTANT
    assert conv.last.body == GREETING


def test_append_returns_new_conversation():
    conv = seed()
    msg = Message(role=Role.USER, body="hello")
    longer = append(conv, msg)
    assert len(conv) == 1
    assert len(longer) == 2
    assert longer.last is msg
    assert msg.id in longer


def test_append_rejects_unknown_reply_target():
    conv = seed()
    with pytest.raises(InvalidReply) as exc:
        append(conv, Message(role=Role.USER, body="re", reply_target="missing"))
    assert exc.value.target_id == "missing"


def test_append_accepts_existing_reply_target():
    conv = seed()
    greeting_id = conv.last.id
    conv = append(conv, Message(role=Role.USER, body="re", reply_target=greeting_id))
    assert conv.last.reply_target == greeting_id


def test_append_rejects_duplicate_id():
    conv = seed()
    with pytest.raises(ValueError):
        append(conv, Message(role=Role.USER, body="dup", id=conv.last.id))


def test_history_keeps_order_and_drops_links_and_files():
    conv = seed()
    conv = append(
        conv,
        Message(
            role=Role.USER,
            body="see file",
            attachments=(Attachment("a.png", 10, "image/png"),),
            reply_target=conv.last.id,
        ),
    )
    conv = append(conv, Message(role=Role.ASSISTANT, body="nice picture"))
    assert history_for(conv) == [
        {"role": "assistant", "content": GREETING},
        {"role": "user", "content": "see file"},
        {"role": "assistant", "content": "nice picture"},
    ]


def test_reset_discards_everything():
    conv = append(seed(), Message(role=Role.USER, body="hello"))
    fresh = reset()
    assert len(fresh) == 1
    assert fresh.last.body == GREETING
    assert fresh.last.id != conv.messages[0].id


def test_get_by_id():
    conv = seed()
    assert conv.get(conv.last.id) is conv.last
    assert conv.get("nope") is None


@pytest.mark.parametrize(
    "attachment, kind",
    [
        (Attachment("cat.png", 1, "image/png"), "image"),
        (Attachment("song.mp3", 1, "audio/mpeg"), "audio"),
        (Attachment("clip.mp4", 1, "video/mp4"), "video"),
        (Attachment("notes.txt", 1), "text"),
        (Attachment("page.html", 1, "text/html"), "text"),
        (Attachment("archive.zip", 1, "application/zip"), "file"),
    ],
)
def test_attachment_kind(attachment, kind):
    assert attachment.kind == kind


def test_attachment_size_label():
    assert Attachment("big.bin", 1572864).size_label == "1.50 MB"


def test_describe_files():
    files = [Attachment("a.png"), Attachment("b.txt")]
    assert describe_files(files) == "Uploaded 2 file(s): a.png, b.txt"
