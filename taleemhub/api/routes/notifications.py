"""Notification routes — push intake and notification interaction."""

from fastapi import APIRouter, HTTPException, Request

from ...dependencies import get_notification_bridge, get_notification_platform
from ...notifications.events import NotificationEvent, PushEvent

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _find_notification(tag: str):
    notification = get_notification_platform().get_notification(tag)
    if notification is None:
        raise HTTPException(status_code=404, detail="Notification not found")
    return notification


@router.post("/push", status_code=201)
async def receive_push(request: Request):
    """Deliver a push message. The raw request body is the message data."""
    body = await request.body()
    bridge = get_notification_bridge()
    results = await bridge.dispatch(PushEvent(body or None))
    notification = results[0]
    return notification.to_dict()


@router.get("/")
async def list_notifications():
    """Notifications currently on display."""
    return [n.to_dict() for n in get_notification_platform().notifications]


@router.get("/windows")
async def list_windows():
    """Open application windows."""
    return [w.to_dict() for w in get_notification_platform().windows]


@router.post("/{tag}/click")
async def click_notification(tag: str, action: str = ""):
    """Activate a displayed notification and route to its target window."""
    notification = _find_notification(tag)
    bridge = get_notification_bridge()
    results = await bridge.dispatch(NotificationEvent("notificationclick", notification, action=action))
    window = results[0] if results else None
    return {
        "tag": tag,
        "window": window.to_dict() if window is not None else None,
    }


@router.post("/{tag}/close")
async def close_notification(tag: str):
    """Dismiss a displayed notification."""
    notification = _find_notification(tag)
    notification.close()
    await get_notification_bridge().dispatch(NotificationEvent("notificationclose", notification))
    return {"tag": tag, "closed": True}
