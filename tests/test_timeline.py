from datetime import datetime, timedelta, timezone

from openconv.models import Message
from openconv.timeline import DateSeparator, MessageGroup, group_messages

BASE = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def _msg(n: int, sender: str, at: datetime) -> Message:
    return Message(
        id=f"m{n}",
        channel_id="ch1",
        sender_id=sender,
        content=f"message {n}",
        encrypted_content=f"message {n}",
        nonce=f"nonce-{n}",
        created_at=at,
    )


def _flatten(items) -> list:
    return [m for item in items if isinstance(item, MessageGroup) for m in item.messages]


def test_empty_input_gives_no_items():
    assert group_messages([]) == []


def test_same_sender_one_minute_apart_is_one_group():
    msgs = [_msg(i, "alice", BASE + timedelta(minutes=i)) for i in range(3)]
    items = group_messages(msgs)
    assert items == [DateSeparator("2024-03-01"), MessageGroup("alice", msgs)]


def test_six_minute_gap_starts_new_group():
    msgs = [
        _msg(1, "alice", BASE),
        _msg(2, "alice", BASE + timedelta(minutes=6)),
    ]
    items = group_messages(msgs)
    groups = [i for i in items if isinstance(i, MessageGroup)]
    assert len(groups) == 2
    assert [g.messages for g in groups] == [[msgs[0]], [msgs[1]]]


def test_gap_is_measured_from_last_message_of_group():
    msgs = [
        _msg(1, "alice", BASE),
        _msg(2, "alice", BASE + timedelta(minutes=4)),
        _msg(3, "alice", BASE + timedelta(minutes=8)),
    ]
    groups = [i for i in group_messages(msgs) if isinstance(i, MessageGroup)]
    assert len(groups) == 1


def test_exactly_five_minutes_splits():
    msgs = [
        _msg(1, "alice", BASE),
        _msg(2, "alice", BASE + timedelta(milliseconds=300_000)),
    ]
    groups = [i for i in group_messages(msgs) if isinstance(i, MessageGroup)]
    assert len(groups) == 2

    msgs[1] = _msg(2, "alice", BASE + timedelta(milliseconds=299_999))
    groups = [i for i in group_messages(msgs) if isinstance(i, MessageGroup)]
    assert len(groups) == 1


def test_sender_change_starts_new_group():
    msgs = [
        _msg(1, "alice", BASE),
        _msg(2, "bob", BASE + timedelta(seconds=10)),
        _msg(3, "alice", BASE + timedelta(seconds=20)),
    ]
    items = group_messages(msgs)
    assert [type(i).__name__ for i in items] == [
        "DateSeparator",
        "MessageGroup",
        "MessageGroup",
        "MessageGroup",
    ]
    assert [i.sender_id for i in items[1:]] == ["alice", "bob", "alice"]


def test_date_boundary_forces_new_group():
    late = datetime(2024, 3, 1, 23, 59, tzinfo=timezone.utc)
    msgs = [
        _msg(1, "alice", late),
        _msg(2, "alice", late + timedelta(minutes=2)),
    ]
    items = group_messages(msgs)
    assert items == [
        DateSeparator("2024-03-01"),
        MessageGroup("alice", [msgs[0]]),
        DateSeparator("2024-03-02"),
        MessageGroup("alice", [msgs[1]]),
    ]


def test_date_uses_utc_calendar_day():
    eastern = timezone(timedelta(hours=-5))
    # 21:00 at UTC-5 is 02:00 the next day in UTC
    msg = _msg(1, "alice", datetime(2024, 3, 1, 21, 0, tzinfo=eastern))
    assert group_messages([msg])[0] == DateSeparator("2024-03-02")


def test_concatenated_groups_reproduce_input():
    senders = ["alice", "alice", "bob", "bob", "carol", "alice", "alice", "bob"]
    gaps = [0, 1, 2, 30, 1, 600, 1, 2000]
    at = BASE
    msgs = []
    for n, (sender, gap) in enumerate(zip(senders, gaps)):
        at = at + timedelta(minutes=gap)
        msgs.append(_msg(n, sender, at))
    items = group_messages(msgs)
    assert _flatten(items) == msgs
    separators = [i.date for i in items if isinstance(i, DateSeparator)]
    assert separators == sorted(set(separators))
    assert isinstance(items[0], DateSeparator)


def test_to_wire_shapes():
    msgs = [_msg(1, "alice", BASE)]
    sep, group = group_messages(msgs)
    assert sep.to_wire() == {"type": "date-separator", "date": "2024-03-01"}
    wire = group.to_wire()
    assert wire["type"] == "message-group"
    assert wire["senderId"] == "alice"
    assert wire["messages"][0]["channelId"] == "ch1"
