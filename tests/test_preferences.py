import asyncio
from datetime import timedelta

from openconv.db import session as db_session
from openconv.db.models import PreferenceRow
from openconv.db.session import close_db, get_session, init_db
from openconv.models import as_utc, utcnow
from openconv.preferences import Preferences, PreferenceStore, PreferenceSync
from openconv.store import PREFERENCE_FIELDS, AppStore


def _reset_db() -> None:
    db_session._engine = None
    db_session._Session = None


def test_missing_profile_loads_defaults():
    async def _run():
        _reset_db()
        await init_db("sqlite+aiosqlite://")
        prefs = await PreferenceStore().load("nobody")
        await close_db()
        return prefs

    prefs = asyncio.run(_run())
    assert prefs == Preferences()
    assert prefs.theme == "dark"
    assert prefs.member_list_visible is True


def test_save_then_load():
    async def _run():
        _reset_db()
        await init_db("sqlite+aiosqlite://")
        backend = PreferenceStore()
        prefs = Preferences(
            last_visited_guild_id="g1",
            last_visited_channel_by_guild={"g1": "c2"},
            theme="light",
            channel_sidebar_visible=False,
        )
        await backend.save("default", prefs)
        await backend.save("default", prefs.model_copy(update={"member_list_visible": False}))
        loaded = await backend.load("default")
        other = await backend.load("other")
        await close_db()
        return loaded, other

    loaded, other = asyncio.run(_run())
    assert loaded.last_visited_channel_by_guild == {"g1": "c2"}
    assert loaded.theme == "light"
    assert loaded.channel_sidebar_visible is False
    assert loaded.member_list_visible is False
    assert other == Preferences()


def test_corrupt_row_loads_defaults():
    async def _run():
        _reset_db()
        await init_db("sqlite+aiosqlite://")
        async with get_session() as db:
            db.add(PreferenceRow(profile="broken", data_json="{oops"))
            await db.commit()
        prefs = await PreferenceStore().load("broken")
        await close_db()
        return prefs

    assert asyncio.run(_run()) == Preferences()


def test_apply_and_capture_state():
    store = AppStore()
    Preferences(
        last_visited_guild_id="g9",
        theme="light",
        member_list_visible=False,
    ).apply(store)
    assert store.state.last_visited_guild_id == "g9"
    assert store.state.theme == "light"
    assert store.state.member_list_visible is False
    captured = Preferences.from_state(store.state)
    assert captured.to_wire()["lastVisitedGuildId"] == "g9"
    assert captured.to_wire()["memberListVisible"] is False


def test_sync_writes_preference_changes():
    async def _run():
        _reset_db()
        await init_db("sqlite+aiosqlite://")
        backend = PreferenceStore()
        store = AppStore()
        sync = PreferenceSync(store, backend, "default")
        store.set_theme("light")
        store.set_last_visited_channel("g1", "c1")
        store.increment_unread("c1")
        await sync.flush()
        loaded = await backend.load("default")
        sync.close()
        store.toggle_member_list()
        await asyncio.sleep(0)
        after_close = await backend.load("default")
        await close_db()
        return loaded, after_close

    loaded, after_close = asyncio.run(_run())
    assert loaded.theme == "light"
    assert loaded.last_visited_channel_by_guild == {"g1": "c1"}
    assert after_close.member_list_visible is True


def test_preferences_cover_the_persisted_state_fields():
    assert set(Preferences.model_fields) == set(PREFERENCE_FIELDS)


def test_tampered_theme_loads_defaults():
    async def _run():
        _reset_db()
        await init_db("sqlite+aiosqlite://")
        async with get_session() as db:
            db.add(PreferenceRow(profile="odd", data_json='{"theme": "neon"}'))
            await db.commit()
        prefs = await PreferenceStore().load("odd")
        await close_db()
        return prefs

    assert asyncio.run(_run()).theme == "dark"


def test_saved_row_carries_utc_timestamp():
    async def _run():
        _reset_db()
        await init_db("sqlite+aiosqlite://")
        await PreferenceStore().save("default", Preferences(theme="light"))
        async with get_session() as db:
            row = await db.get(PreferenceRow, "default")
        await close_db()
        return row

    row = asyncio.run(_run())
    assert abs(as_utc(row.updated_at) - utcnow()) < timedelta(minutes=1)
