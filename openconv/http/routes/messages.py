from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from ...context import AppContext
from ...models import Channel
from ..deps import get_ctx, require_channel
from ..schemas import EditBody, SendBody

router = APIRouter(prefix="/api")


@router.post("/channels/{channel_id}/messages", status_code=status.HTTP_201_CREATED)
async def send_message(
    body: SendBody,
    channel: Channel = Depends(require_channel),
    ctx: AppContext = Depends(get_ctx),
) -> dict:
    outgoing = ctx.sender.send_message(channel.id, body.content, body.attachments)
    return outgoing.message.to_wire()


@router.patch("/messages/{message_id}")
async def edit_message(
    message_id: str, body: EditBody, ctx: AppContext = Depends(get_ctx)
) -> dict:
    if ctx.store.get_message(message_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown message")
    ctx.store.edit_message(message_id, body.content)
    return ctx.store.get_message(message_id).to_wire()


@router.delete("/messages/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_message(message_id: str, ctx: AppContext = Depends(get_ctx)) -> None:
    ctx.store.delete_message(message_id)
