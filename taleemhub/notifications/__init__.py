"""Push notification delivery package."""

from .bridge import BridgeState, NotificationBridge
from .events import (
    ActivateEvent,
    EventTimeoutError,
    ExtendableEvent,
    InstallEvent,
    NotificationEvent,
    PushEvent,
)
from .payload import NotificationOptions, NotificationPayload, PushMessageData, parse_push_data
from .platform import (
    HeadlessPlatform,
    Notification,
    NotificationDisplayError,
    NotificationPlatform,
    WindowClient,
)

__all__ = [
    "ActivateEvent",
    "BridgeState",
    "EventTimeoutError",
    "ExtendableEvent",
    "HeadlessPlatform",
    "InstallEvent",
    "Notification",
    "NotificationBridge",
    "NotificationDisplayError",
    "NotificationEvent",
    "NotificationOptions",
    "NotificationPayload",
    "NotificationPlatform",
    "PushEvent",
    "PushMessageData",
    "WindowClient",
    "parse_push_data",
]
