"""Notification delivery bridge.

Translates push messages into displayed notifications and routes
notification clicks back into an application window. One bridge exists
per process; between events it is idle.
"""

from enum import Enum
from typing import Any, Callable, Optional

from ..utils.logging import get_logger
from .events import (
    ActivateEvent,
    ExtendableEvent,
    InstallEvent,
    NotificationEvent,
    PushEvent,
)
from .payload import (
    DEFAULT_BADGE,
    DEFAULT_ICON,
    NotificationOptions,
    build_notification,
    parse_push_data,
)
from .platform import Notification, NotificationPlatform, WindowClient

logger = get_logger("notifications.bridge")

DEFAULT_CLICK_URL = "/dashboard"


class BridgeState(str, Enum):
    IDLE = "idle"
    INSTALLING = "installing"
    ACTIVATING = "activating"
    ACTIVE = "active"


class NotificationBridge:
    """Routes install/activate/push/click/close events to their handlers."""

    def __init__(
        self,
        platform: NotificationPlatform,
        default_click_url: str = DEFAULT_CLICK_URL,
        event_timeout: Optional[float] = 10.0,
    ) -> None:
        self._platform = platform
        self._default_click_url = default_click_url
        self._event_timeout = event_timeout
        self._state = BridgeState.IDLE
        self._handlers: dict[str, Callable[[Any], None]] = {
            "install": self.on_install,
            "activate": self.on_activate,
            "push": self.on_push,
            "notificationclick": self.on_notification_click,
            "notificationclose": self.on_notification_close,
        }
        self._total_events = 0
        self._total_displayed = 0
        self._total_failed = 0

    @property
    def state(self) -> BridgeState:
        return self._state

    @property
    def platform(self) -> NotificationPlatform:
        return self._platform

    async def dispatch(self, event: ExtendableEvent) -> list[Any]:
        """Run the handler for ``event`` and wait for the work it registered.

        Failures in that work are logged and re-raised to the caller.
        """
        handler = self._handlers.get(event.type)
        if handler is None:
            logger.warning("bridge_unknown_event_type", event_type=event.type)
            return []

        self._total_events += 1
        try:
            handler(event)
            return await event.settle(self._event_timeout)
        except Exception as exc:
            self._total_failed += 1
            logger.error("bridge_event_failed", event_type=event.type, error=str(exc))
            raise

    # --- Lifecycle ---

    def on_install(self, event: InstallEvent) -> None:
        logger.info("bridge_installing")
        self._state = BridgeState.INSTALLING
        event.wait_until(self._platform.skip_waiting())

    def on_activate(self, event: ActivateEvent) -> None:
        logger.info("bridge_activating")
        self._state = BridgeState.ACTIVATING
        event.wait_until(self._activate())

    async def _activate(self) -> None:
        await self._platform.claim_clients()
        self._state = BridgeState.ACTIVE
        logger.info("bridge_active")

    # --- Push ---

    def on_push(self, event: PushEvent) -> None:
        payload = parse_push_data(event.data)
        title, options = build_notification(payload)
        logger.info("push_received", title=title, tag=options.tag, has_data=event.data is not None)
        event.wait_until(self._display(title, options))

    async def _display(self, title: str, options: NotificationOptions) -> Notification:
        notification = await self._platform.show_notification(title, options)
        self._total_displayed += 1
        return notification

    # --- Notification interaction ---

    def on_notification_click(self, event: NotificationEvent) -> None:
        notification = event.notification
        notification.close()
        url = (notification.data or {}).get("url")
        if not isinstance(url, str) or not url:
            url = self._default_click_url
        logger.info("notification_clicked", tag=notification.tag, url=url, action=event.action)
        event.wait_until(self._focus_or_open(url))

    async def _focus_or_open(self, url: str) -> Optional[WindowClient]:
        """Reuse the first same-origin window, otherwise open a new one."""
        clients = await self._platform.match_clients(include_uncontrolled=True)
        for client in clients:
            if self._platform.origin in client.url and client.focusable:
                await client.navigate(url)
                return await client.focus()
        if self._platform.supports_open_window:
            return await self._platform.open_window(url)
        return None

    def on_notification_close(self, event: NotificationEvent) -> None:
        logger.info("notification_closed", tag=event.notification.tag)

    # --- Direct display ---

    async def show_local_notification(self, title: str, **options: Any) -> bool:
        """Display a notification without a push message.

        Caller options override the default icon, badge and vibrate pattern.
        Returns False when the platform refuses.
        """
        merged = {"icon": DEFAULT_ICON, "badge": DEFAULT_BADGE, **options}
        try:
            await self._display(title, NotificationOptions.model_validate(merged))
            return True
        except Exception as exc:
            self._total_failed += 1
            logger.error("local_notification_failed", title=title, error=str(exc))
            return False

    def get_stats(self) -> dict:
        return {
            "state": self._state.value,
            "total_events": self._total_events,
            "total_displayed": self._total_displayed,
            "total_failed": self._total_failed,
        }
