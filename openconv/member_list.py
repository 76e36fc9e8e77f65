from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Sequence

from .models import Member, PresenceStatus, Role

# Bucket for members without any resolvable role. The "Online" label is what
# the member list has always shown for it, even though offline members land
# here too.
ONLINE_FALLBACK_ROLE = Role(
    id="__online__",
    guild_id="",
    name="Online",
    color="var(--text-primary)",
    position=-1,
)


@dataclass
class RoleGroup:
    role: Role
    members: List[Member] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.members)


@dataclass
class _Bucket:
    role: Role
    online: List[Member] = field(default_factory=list)
    offline: List[Member] = field(default_factory=list)


def highest_role(member: Member, roles_by_id: Mapping[str, Role]) -> Role | None:
    """Highest-position role of ``member``; the first one seen wins a tie."""
    best: Role | None = None
    for role_id in member.roles:
        role = roles_by_id.get(role_id)
        if role is not None and (best is None or role.position > best.position):
            best = role
    return best


def group_members_by_role(
    member_keys: Sequence[str],
    members_by_id: Mapping[str, Member],
    roles_by_id: Mapping[str, Role],
    presence_by_user_id: Mapping[str, PresenceStatus],
) -> list[RoleGroup]:
    """Bucket members under their highest role, online members first.

    Groups come back sorted by descending role position; keys without a
    member record are skipped.
    """
    buckets: Dict[str, _Bucket] = {}
    for key in member_keys:
        member = members_by_id.get(key)
        if member is None:
            continue
        role = highest_role(member, roles_by_id) or ONLINE_FALLBACK_ROLE
        bucket = buckets.get(role.id)
        if bucket is None:
            bucket = buckets[role.id] = _Bucket(role)
        status = PresenceStatus(presence_by_user_id.get(member.user_id, PresenceStatus.OFFLINE))
        if status.is_online:
            bucket.online.append(member)
        else:
            bucket.offline.append(member)

    ordered = sorted(buckets.values(), key=lambda b: b.role.position, reverse=True)
    return [RoleGroup(b.role, [*b.online, *b.offline]) for b in ordered]
