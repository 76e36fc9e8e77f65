from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...context import AppContext
from ...models import Channel, Guild
from ..deps import get_ctx, require_guild
from ..schemas import CreateChannelBody, CreateGuildBody, UpdateGuildBody

router = APIRouter(prefix="/api")


def _guild_payload(ctx: AppContext, guild: Guild) -> dict:
    store = ctx.store
    return {
        **guild.to_wire(),
        "mentionCount": store.mention_count(guild.id),
        "hasUnread": store.guild_has_unread(guild.id),
        "lastVisitedChannelId": store.state.last_visited_channel_by_guild.get(guild.id),
    }


def _channel_payload(ctx: AppContext, channel: Channel) -> dict:
    return {
        **channel.to_wire(),
        "unreadCount": ctx.store.unread_count(channel.id),
        "hasMore": ctx.store.state.has_more.get(channel.id, False),
    }


@router.get("/guilds")
async def list_guilds(ctx: AppContext = Depends(get_ctx)) -> list[dict]:
    return [_guild_payload(ctx, g) for g in ctx.store.guilds()]


@router.post("/guilds", status_code=status.HTTP_201_CREATED)
async def create_guild(body: CreateGuildBody, ctx: AppContext = Depends(get_ctx)) -> dict:
    guild = ctx.store.create_guild(body.name, body.icon_url)
    return _guild_payload(ctx, guild)


@router.patch("/guilds/{guild_id}")
async def update_guild(
    body: UpdateGuildBody,
    guild: Guild = Depends(require_guild),
    ctx: AppContext = Depends(get_ctx),
) -> dict:
    ctx.store.update_guild(guild.id, name=body.name, icon_url=body.icon_url)
    return _guild_payload(ctx, ctx.store.get_guild(guild.id))


@router.delete("/guilds/{guild_id}", status_code=status.HTTP_204_NO_CONTENT)
async def leave_guild(guild_id: str, ctx: AppContext = Depends(get_ctx)) -> None:
    ctx.store.leave_guild(guild_id)


@router.get("/guilds/{guild_id}/channels")
async def list_channels(
    guild: Guild = Depends(require_guild), ctx: AppContext = Depends(get_ctx)
) -> list[dict]:
    return [_channel_payload(ctx, c) for c in ctx.store.channels_for_guild(guild.id)]


@router.post("/guilds/{guild_id}/channels", status_code=status.HTTP_201_CREATED)
async def create_channel(
    body: CreateChannelBody,
    guild: Guild = Depends(require_guild),
    ctx: AppContext = Depends(get_ctx),
) -> dict:
    channel = ctx.store.create_channel(guild.id, body.name, body.channel_type, body.category)
    return _channel_payload(ctx, channel)


@router.post("/guilds/{guild_id}/mentions/reset")
async def reset_mentions(
    guild: Guild = Depends(require_guild), ctx: AppContext = Depends(get_ctx)
) -> dict:
    ctx.store.reset_guild_mentions(guild.id)
    return _guild_payload(ctx, guild)
