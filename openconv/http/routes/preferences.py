from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from ...context import AppContext
from ...preferences import Preferences
from ...store.ui import THEMES
from ..deps import get_ctx
from ..schemas import PreferencesPatch, ResizeBody

router = APIRouter(prefix="/api")


@router.get("/preferences")
async def get_preferences(ctx: AppContext = Depends(get_ctx)) -> dict:
    return Preferences.from_state(ctx.store.state).to_wire()


@router.patch("/preferences")
async def update_preferences(
    body: PreferencesPatch, ctx: AppContext = Depends(get_ctx)
) -> dict:
    store = ctx.store
    if body.theme is not None:
        if body.theme not in THEMES:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Unknown theme {body.theme}",
            )
        store.set_theme(body.theme)
    if (
        body.channel_sidebar_visible is not None
        and body.channel_sidebar_visible != store.state.channel_sidebar_visible
    ):
        store.toggle_channel_sidebar()
    if body.member_list_visible is not None:
        store.set_member_list_visible(body.member_list_visible)
    return Preferences.from_state(store.state).to_wire()


@router.post("/ui/resize", status_code=status.HTTP_202_ACCEPTED)
async def window_resized(body: ResizeBody, ctx: AppContext = Depends(get_ctx)) -> dict:
    ctx.resize.on_resize(body.width)
    return {"width": body.width}
