from datetime import datetime, timezone

from openconv.models import ChannelType, PresenceStatus
from openconv.seed import USER_NAMES, build_demo_dataset, seed_store
from openconv.store import AppStore

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def test_dataset_is_deterministic():
    a = build_demo_dataset(NOW)
    b = build_demo_dataset(NOW)
    assert [u.id for u in a.users] == [u.id for u in b.users]
    assert [m.id for m in a.messages] == [m.id for m in b.messages]
    assert a.messages[10].created_at == b.messages[10].created_at


def test_dataset_shape():
    data = build_demo_dataset(NOW, messages_per_channel=30)
    assert len(data.users) == len(USER_NAMES)
    assert len(data.guilds) == 4
    assert len(data.roles) == 12
    text = [c for c in data.channels if c.channel_type is ChannelType.TEXT]
    assert len(data.messages) == 30 * len(text)
    assert all(m.created_at < NOW for m in data.messages)
    statuses = list(data.presence.values())
    assert statuses.count(PresenceStatus.ONLINE) == 5
    assert statuses.count(PresenceStatus.OFFLINE) == 3
    for guild in data.guilds:
        members = [m for m in data.members if m.guild_id == guild.id]
        assert members
        assert all(len(m.roles) == 1 for m in members)


def test_messages_are_ascending_per_channel():
    data = build_demo_dataset(NOW, messages_per_channel=50)
    by_channel = {}
    for msg in data.messages:
        by_channel.setdefault(msg.channel_id, []).append(msg.created_at)
    for stamps in by_channel.values():
        assert stamps == sorted(stamps)


def test_seed_store_loads_newest_page_and_navigation():
    data = build_demo_dataset(NOW)
    store = AppStore()
    calls = []
    store.subscribe(lambda action, state: calls.append(action))
    seed_store(store, data)
    assert calls == ["hydrate"]

    state = store.state
    assert state.guild_ids == [g.id for g in data.guilds]
    first_guild = data.guilds[0].id
    assert state.last_visited_guild_id == first_guild
    general = state.channel_ids_by_guild[first_guild][0]
    assert state.last_visited_channel_by_guild[first_guild] == general
    assert len(state.message_ids_by_channel[general]) == 20
    assert state.has_more[general] is True
    for ids in state.channel_ids_by_guild.values():
        positions = [state.channels_by_id[cid].position for cid in ids]
        assert positions == sorted(positions)


def test_seed_store_keeps_valid_restored_navigation():
    data = build_demo_dataset(NOW, messages_per_channel=5)
    guild = data.guilds[1]
    channel = [c for c in data.channels if c.guild_id == guild.id][2]
    store = AppStore()
    store.hydrate(
        last_visited_guild_id=guild.id,
        last_visited_channel_by_guild={guild.id: channel.id, data.guilds[0].id: "gone"},
    )
    seed_store(store, data)
    state = store.state
    assert state.last_visited_guild_id == guild.id
    assert state.last_visited_channel_by_guild[guild.id] == channel.id
    first = data.guilds[0].id
    assert state.last_visited_channel_by_guild[first] == state.channel_ids_by_guild[first][0]
    assert state.has_more[channel.id] is False


def test_seed_store_drops_unknown_guild():
    data = build_demo_dataset(NOW, messages_per_channel=0)
    store = AppStore()
    store.hydrate(last_visited_guild_id="left-long-ago")
    seed_store(store, data)
    assert store.state.last_visited_guild_id == data.guilds[0].id
    assert store.state.message_ids_by_channel == {}
