from __future__ import annotations

from fastapi import APIRouter, Depends

from ...context import AppContext
from ...member_list import group_members_by_role
from ...models import Guild
from ..deps import get_ctx, require_guild
from ..schemas import PresenceBody

router = APIRouter(prefix="/api")


@router.get("/guilds/{guild_id}/members")
async def list_member_groups(
    guild: Guild = Depends(require_guild), ctx: AppContext = Depends(get_ctx)
) -> list[dict]:
    state = ctx.store.state
    groups = group_members_by_role(
        ctx.store.member_keys(guild.id),
        state.members_by_id,
        state.roles_by_id,
        state.presence_by_user_id,
    )
    payload = []
    for group in groups:
        rows = []
        for member in group.members:
            user = ctx.store.get_user(member.user_id)
            rows.append(
                {
                    "userId": member.user_id,
                    "displayName": member.nickname
                    or (user.display_name if user else member.user_id),
                    "presence": ctx.store.presence_of(member.user_id).value,
                    "roleColor": group.role.color,
                }
            )
        payload.append(
            {
                "role": group.role.to_wire(),
                "count": group.count,
                "members": rows,
            }
        )
    return payload


@router.put("/presence/{user_id}")
async def update_presence(
    user_id: str, body: PresenceBody, ctx: AppContext = Depends(get_ctx)
) -> dict:
    ctx.store.update_presence(user_id, body.status)
    return {"userId": user_id, "status": ctx.store.presence_of(user_id).value}
