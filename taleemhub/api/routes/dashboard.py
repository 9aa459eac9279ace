"""Dashboard layout routes — per-user, per-role widget personalization."""

from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from ...dashboard.store import DashboardWidgetStore
from ...dependencies import get_dashboard_store

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


# --- Request bodies ---

class WidgetRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    widget_id: str = Field(alias="widgetId")


class MoveRequest(WidgetRequest):
    direction: Literal["up", "down"]


class ReorderRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_index: int = Field(alias="fromIndex")
    to_index: int = Field(alias="toIndex")


# --- Helpers ---

async def _store(user_id: str, role: str) -> DashboardWidgetStore:
    """Resolve the store on the event loop so mutations never interleave."""
    return get_dashboard_store(user_id, role)


def _response(store: DashboardWidgetStore, changed: bool) -> dict:
    return {"changed": changed, **store.snapshot()}


# --- Endpoints ---

@router.get("/layouts/{user_id}/{role}")
async def get_layout(store: DashboardWidgetStore = Depends(_store)):
    """Current widget layout for the identity."""
    return _response(store, changed=False)


@router.post("/layouts/{user_id}/{role}/toggle")
async def toggle_widget(body: WidgetRequest, store: DashboardWidgetStore = Depends(_store)):
    """Show or hide one widget."""
    return _response(store, store.toggle(body.widget_id))


@router.post("/layouts/{user_id}/{role}/move")
async def move_widget(body: MoveRequest, store: DashboardWidgetStore = Depends(_store)):
    """Move one widget a single slot up or down."""
    return _response(store, store.move(body.widget_id, body.direction))


@router.post("/layouts/{user_id}/{role}/reorder")
async def reorder_widgets(body: ReorderRequest, store: DashboardWidgetStore = Depends(_store)):
    """Move the widget at one position to another."""
    return _response(store, store.reorder(body.from_index, body.to_index))


@router.post("/layouts/{user_id}/{role}/reset")
async def reset_layout(store: DashboardWidgetStore = Depends(_store)):
    """Restore the starter widget set."""
    store.reset_to_default()
    return _response(store, changed=True)


@router.post("/layouts/{user_id}/{role}/drag/start")
async def drag_start(body: WidgetRequest, store: DashboardWidgetStore = Depends(_store)):
    store.drag_start(body.widget_id)
    return _response(store, changed=False)


@router.post("/layouts/{user_id}/{role}/drag/over")
async def drag_over(body: WidgetRequest, store: DashboardWidgetStore = Depends(_store)):
    return _response(store, store.drag_over(body.widget_id))


@router.post("/layouts/{user_id}/{role}/drag/end")
async def drag_end(store: DashboardWidgetStore = Depends(_store)):
    store.drag_end()
    return _response(store, changed=False)
