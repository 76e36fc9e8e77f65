from datetime import datetime, timezone

from openconv.member_list import (
    ONLINE_FALLBACK_ROLE,
    group_members_by_role,
    highest_role,
)
from openconv.models import Member, PresenceStatus, Role, member_key

JOINED = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _role(role_id: str, name: str, position: int) -> Role:
    return Role(id=role_id, guild_id="g1", name=name, color="#fff", position=position)


def _member(user_id: str, *roles: str) -> Member:
    return Member(user_id=user_id, guild_id="g1", roles=list(roles), joined_at=JOINED)


def _index(members):
    by_id = {member_key(m.guild_id, m.user_id): m for m in members}
    return list(by_id), by_id


ADMIN = _role("admin", "Admin", 2)
MOD = _role("mod", "Moderator", 1)
MEMBER = _role("member", "Member", 0)
ROLES = {r.id: r for r in (ADMIN, MOD, MEMBER)}


def test_admin_and_member_groups_with_offline_last():
    members = [
        _member("u1", "admin"),
        _member("u2", "member"),
        _member("u3", "member"),
        _member("u4", "member"),
    ]
    presence = {
        "u1": PresenceStatus.ONLINE,
        "u2": PresenceStatus.OFFLINE,
        "u3": PresenceStatus.ONLINE,
        "u4": PresenceStatus.IDLE,
    }
    keys, by_id = _index(members)
    groups = group_members_by_role(keys, by_id, ROLES, presence)
    assert [g.role.name for g in groups] == ["Admin", "Member"]
    assert [m.user_id for m in groups[1].members] == ["u3", "u4", "u2"]
    assert groups[1].count == 3


def test_highest_role_wins_and_ties_keep_first_seen():
    twin = _role("twin", "Twin", 1)
    roles = {**ROLES, "twin": twin}
    assert highest_role(_member("u1", "member", "admin", "mod"), roles) is ADMIN
    assert highest_role(_member("u2", "mod", "twin"), roles) is MOD
    assert highest_role(_member("u3", "twin", "mod"), roles) is twin


def test_unresolvable_roles_fall_back_to_lowest_bucket():
    members = [_member("u1", "ghost"), _member("u2"), _member("u3", "member")]
    keys, by_id = _index(members)
    groups = group_members_by_role(keys, by_id, ROLES, {})
    assert [g.role.id for g in groups] == ["member", ONLINE_FALLBACK_ROLE.id]
    assert groups[-1].role.position == -1
    assert groups[-1].role.name == "Online"
    assert [m.user_id for m in groups[-1].members] == ["u1", "u2"]


def test_missing_member_keys_are_skipped():
    keys, by_id = _index([_member("u1", "admin")])
    groups = group_members_by_role(["g1-nobody", *keys], by_id, ROLES, {})
    assert len(groups) == 1
    assert groups[0].count == 1


def test_groups_strictly_descending_and_online_first():
    members = [
        _member(f"u{i}", ["member", "mod", "admin"][i % 3]) for i in range(12)
    ]
    statuses = list(PresenceStatus)
    presence = {m.user_id: statuses[i % 4] for i, m in enumerate(members)}
    keys, by_id = _index(members)
    groups = group_members_by_role(keys, by_id, ROLES, presence)
    positions = [g.role.position for g in groups]
    assert positions == sorted(positions, reverse=True)
    assert len(set(positions)) == len(positions)
    for group in groups:
        flags = [presence[m.user_id] is not PresenceStatus.OFFLINE for m in group.members]
        assert flags == sorted(flags, reverse=True)


def test_unknown_presence_counts_as_offline():
    members = [_member("u1", "member"), _member("u2", "member")]
    keys, by_id = _index(members)
    groups = group_members_by_role(keys, by_id, ROLES, {"u2": PresenceStatus.DND})
    assert [m.user_id for m in groups[0].members] == ["u2", "u1"]
