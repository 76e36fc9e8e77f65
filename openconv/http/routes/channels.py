from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from ...context import AppContext
from ...errors import MessageSourceError
from ...models import Channel
from ...timeline import group_messages
from ..deps import get_ctx, require_channel
from ..schemas import ReadBody

router = APIRouter(prefix="/api")


def _pagination_state(ctx: AppContext, channel_id: str) -> dict:
    state = ctx.store.state
    return {
        "hasMore": state.has_more.get(channel_id, False),
        "loading": state.loading_messages.get(channel_id, False),
    }


@router.delete("/channels/{channel_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_channel(channel_id: str, ctx: AppContext = Depends(get_ctx)) -> None:
    ctx.store.delete_channel(channel_id)


@router.get("/channels/{channel_id}/timeline")
async def get_timeline(
    channel: Channel = Depends(require_channel), ctx: AppContext = Depends(get_ctx)
) -> dict:
    items = group_messages(ctx.store.messages_for_channel(channel.id))
    return {
        "channelId": channel.id,
        "items": [item.to_wire() for item in items],
        "unreadCount": ctx.store.unread_count(channel.id),
        "typingUsers": list(ctx.store.state.typing_users.get(channel.id, [])),
        **_pagination_state(ctx, channel.id),
    }


@router.post("/channels/{channel_id}/older")
async def load_older(
    channel: Channel = Depends(require_channel), ctx: AppContext = Depends(get_ctx)
) -> dict:
    try:
        added = await ctx.pagination.load_older(channel.id)
    except MessageSourceError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.reason)
    return {"added": added, **_pagination_state(ctx, channel.id)}


@router.post("/channels/{channel_id}/open")
async def open_channel(
    channel: Channel = Depends(require_channel), ctx: AppContext = Depends(get_ctx)
) -> dict:
    await ctx.open_channel(channel.id)
    return {
        "channelId": channel.id,
        "lastReadMessageId": ctx.store.state.last_read_by_channel.get(channel.id),
        "unreadCount": ctx.store.unread_count(channel.id),
    }


@router.post("/channels/{channel_id}/read")
async def mark_read(
    body: ReadBody,
    channel: Channel = Depends(require_channel),
    ctx: AppContext = Depends(get_ctx),
) -> dict:
    if body.message_id:
        ctx.store.mark_channel_read(channel.id, body.message_id)
    else:
        ctx.store.mark_channel_read_latest(channel.id)
    return {
        "channelId": channel.id,
        "lastReadMessageId": ctx.store.state.last_read_by_channel.get(channel.id),
        "unreadCount": ctx.store.unread_count(channel.id),
    }
