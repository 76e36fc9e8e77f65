from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status

from ..context import AppContext
from ..models import Channel, Guild


def get_ctx(request: Request) -> AppContext:
    return request.app.state.ctx


def require_guild(guild_id: str, ctx: AppContext = Depends(get_ctx)) -> Guild:
    guild = ctx.store.get_guild(guild_id)
    if guild is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown guild")
    return guild


def require_channel(channel_id: str, ctx: AppContext = Depends(get_ctx)) -> Channel:
    channel = ctx.store.get_channel(channel_id)
    if channel is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown channel")
    return channel
