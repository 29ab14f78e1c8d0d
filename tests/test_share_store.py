import pytest

from penguin_chat.chat.conversation import Attachment, Message, Role, append, seed
from penguin_chat.data.share_store import share_url


@pytest.mark.asyncio
async def test_save_then_load(share_store):
    conv = seed()
    conv = append(
        conv,
        Message(
            role=Role.USER,
            body="look ```py\nprint(1)\n```",
            attachments=(Attachment("shot.png", 2048, "image/png"),),
            reply_target=conv.last.id,
        ),
    )
    token = await share_store.save(conv)

    loaded = await share_store.load(token)
    assert loaded == conv
    assert loaded.messages[1].attachments[0].media_type == "image/png"


@pytest.mark.asyncio
async def test_unknown_token_is_none(share_store):
    assert await share_store.load("does-not-exist") is None
    assert await share_store.load_snapshot("does-not-exist") is None


@pytest.mark.asyncio
async def test_tokens_are_unique(share_store):
    conv = seed()
    tokens = {await share_store.save(conv) for _ in range(5)}
    assert len(tokens) == 5


@pytest.mark.asyncio
async def test_snapshot_metadata(share_store):
    token = await share_store.save(seed())
    snapshot = await share_store.load_snapshot(token)
    assert snapshot.token == token
    assert snapshot.created_at
    assert len(snapshot.conversation) == 1


def test_share_url_shape():
    assert share_url("https://chat.example.com/", "abc123") == "https://chat.example.com/chat/abc123"
