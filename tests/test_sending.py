import asyncio
import random

from openconv.models import FileAttachment, User
from openconv.seed import SeedDataset
from openconv.sending import SendConfirmed, SendFailed, SendPipeline
from openconv.source import MockMessageSource
from openconv.store import AppStore


def _pipeline(failure_rate: float):
    store = AppStore()
    store.login(User(id="u1", display_name="Alice", email="alice@example.com"))
    source = MockMessageSource(
        SeedDataset(),
        fetch_delay=(0, 0),
        send_delay=(0, 0),
        failure_rate=failure_rate,
        rng=random.Random(7),
    )
    return store, SendPipeline(store, source)


def test_send_inserts_before_confirmation():
    store, sender = _pipeline(0)

    async def _run():
        outgoing = sender.send_message("ch1", "Hello")
        msg = store.get_message(outgoing.message.id)
        assert msg is not None
        assert msg.content == msg.encrypted_content == "Hello"
        assert msg.sender_id == "u1"
        assert msg.nonce.startswith("mock-nonce-")
        assert msg.edited_at is None
        assert store.state.message_ids_by_channel["ch1"] == [msg.id]
        assert sender.pending == 1
        return await outgoing.confirmation

    result = asyncio.run(_run())
    assert isinstance(result, SendConfirmed)
    assert result.ok is True
    assert result.echo.content == "Hello"
    assert result.echo.nonce == result.message.nonce
    assert sender.pending == 0
    # the echo is not indexed
    assert len(store.state.message_ids_by_channel["ch1"]) == 1


def test_rejected_send_keeps_message():
    store, sender = _pipeline(1.0)

    async def _run():
        outgoing = sender.send_message("ch1", "Will fail")
        return outgoing.message, await outgoing.confirmation

    message, result = asyncio.run(_run())
    assert isinstance(result, SendFailed)
    assert result.ok is False
    assert result.reason == "Failed to send message"
    assert store.get_message(message.id) is not None
    assert store.state.message_ids_by_channel["ch1"] == [message.id]


def test_attachments_are_carried():
    store, sender = _pipeline(0)
    attachment = FileAttachment(
        id="f1",
        file_name="notes.pdf",
        file_size=1024,
        mime_type="application/pdf",
        url="https://placeholder.test/notes.pdf",
    )

    async def _run():
        outgoing = sender.send_message("ch1", "see file", [attachment])
        await outgoing.confirmation
        return outgoing.message

    message = asyncio.run(_run())
    assert store.get_message(message.id).attachments == [attachment]


def test_drain_waits_for_all_confirmations():
    store, sender = _pipeline(0)

    async def _run():
        for n in range(3):
            sender.send_message("ch1", f"msg {n}")
        return await sender.drain()

    results = asyncio.run(_run())
    assert len(results) == 3
    assert all(r.ok for r in results)
    assert [m.content for m in store.messages_for_channel("ch1")] == ["msg 0", "msg 1", "msg 2"]
    assert asyncio.run(sender.drain()) == []
