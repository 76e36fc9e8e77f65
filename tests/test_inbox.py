from datetime import datetime, timedelta, timezone

import pytest

from openconv.inbox import Inbox, mentions_user
from openconv.models import Channel, Guild, Message, User
from openconv.store import AppStore

BASE = datetime(2024, 2, 10, 15, 0, tzinfo=timezone.utc)


def _msg(n: int, channel: str, sender: str, content: str = "hello") -> Message:
    return Message(
        id=f"m{n}",
        channel_id=channel,
        sender_id=sender,
        content=content,
        encrypted_content=content,
        nonce=f"n{n}",
        created_at=BASE + timedelta(seconds=n),
    )


def _inbox() -> Inbox:
    store = AppStore()
    store.login(User(id="me", display_name="Alice Chen", email="alice@example.com"))
    store.add_guild(Guild(id="g1", name="Guild", owner_id="me"))
    store.add_channel(Channel(id="ch1", guild_id="g1", name="general"))
    store.add_channel(Channel(id="ch2", guild_id="g1", name="random"))
    return Inbox(store)


@pytest.mark.parametrize(
    "content, expected",
    [
        ("hey @Alice Chen, look", True),
        ("@alice chen!", True),
        ("ping @Alice Chenney", False),
        ("email alice@Alice Chen", False),
        ("Alice Chen without the at", False),
    ],
)
def test_mentions_user(content, expected):
    assert mentions_user(content, "Alice Chen") is expected


def test_mentions_user_empty_name():
    assert mentions_user("@ hello", "") is False


def test_background_channel_counts_unread():
    inbox = _inbox()
    inbox.open_channel("ch1")
    inbox.receive(_msg(1, "ch2", "bob"))
    inbox.receive(_msg(2, "ch2", "bob"))
    store = inbox.store
    assert store.unread_count("ch2") == 2
    assert store.guild_has_unread("g1") is True
    assert store.mention_count("g1") == 0


def test_active_channel_stays_read():
    inbox = _inbox()
    inbox.open_channel("ch1")
    inbox.receive(_msg(1, "ch1", "bob"))
    store = inbox.store
    assert store.unread_count("ch1") == 0
    assert store.state.last_read_by_channel["ch1"] == "m1"
    assert store.state.last_visited_guild_id == "g1"
    assert store.state.last_visited_channel_by_guild["g1"] == "ch1"


def test_own_and_repeated_messages_do_not_count():
    inbox = _inbox()
    inbox.receive(_msg(1, "ch2", "me"))
    inbox.receive(_msg(2, "ch2", "bob"))
    inbox.receive(_msg(2, "ch2", "bob"))
    assert inbox.store.unread_count("ch2") == 1
    assert inbox.store.state.message_ids_by_channel["ch2"] == ["m1", "m2"]


def test_mention_bumps_guild_counter():
    inbox = _inbox()
    inbox.receive(_msg(1, "ch2", "bob", "@Alice Chen can you review?"))
    inbox.receive(_msg(2, "ch2", "me", "@Alice Chen note to self"))
    assert inbox.store.mention_count("g1") == 1


def test_opening_channel_clears_unread():
    inbox = _inbox()
    inbox.receive(_msg(1, "ch2", "bob"))
    inbox.receive(_msg(2, "ch2", "bob"))
    inbox.open_channel("ch2")
    assert inbox.store.unread_count("ch2") == 0
    assert inbox.store.state.last_read_by_channel["ch2"] == "m2"
