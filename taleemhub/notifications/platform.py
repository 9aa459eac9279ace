"""Platform abstraction for displaying notifications and managing app windows.

``NotificationPlatform`` is the surface the bridge talks to. The headless
implementation keeps displayed notifications and open windows in memory;
it backs the HTTP service and the test suite.
"""

import itertools
from abc import ABC, abstractmethod
from typing import Callable, Optional
from urllib.parse import urljoin

from ..utils.logging import get_logger
from .payload import NotificationOptions

logger = get_logger("notifications.platform")


class NotificationDisplayError(Exception):
    """Raised when the platform refuses to display a notification."""


class Notification:
    """A displayed notification."""

    def __init__(
        self,
        title: str,
        options: NotificationOptions,
        on_close: Optional[Callable[["Notification"], None]] = None,
    ) -> None:
        self.title = title
        self.options = options
        self.closed = False
        self._on_close = on_close

    @property
    def tag(self) -> str:
        return self.options.tag

    @property
    def body(self) -> str:
        return self.options.body

    @property
    def data(self) -> dict:
        return self.options.data

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self._on_close is not None:
            self._on_close(self)

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            **self.options.model_dump(by_alias=True),
            "closed": self.closed,
        }


class WindowClient(ABC):
    """An open application window or tab."""

    url: str

    @property
    def focusable(self) -> bool:
        return True

    @abstractmethod
    async def navigate(self, url: str) -> "WindowClient":
        """Load ``url`` in this window."""

    @abstractmethod
    async def focus(self) -> "WindowClient":
        """Bring this window to the foreground."""


class NotificationPlatform(ABC):
    """Host services available to the notification bridge."""

    origin: str
    supports_open_window: bool = True

    @abstractmethod
    async def show_notification(self, title: str, options: NotificationOptions) -> Notification:
        """Display a system notification."""

    @abstractmethod
    async def match_clients(self, include_uncontrolled: bool = True) -> list[WindowClient]:
        """List open application windows."""

    @abstractmethod
    async def open_window(self, url: str) -> Optional[WindowClient]:
        """Open a new application window at ``url``."""

    @abstractmethod
    async def skip_waiting(self) -> None:
        """Activate this version without waiting for older instances to drain."""

    @abstractmethod
    async def claim_clients(self) -> None:
        """Take control of every open application window."""


class HeadlessWindow(WindowClient):
    _ids = itertools.count(1)

    def __init__(self, platform: "HeadlessPlatform", url: str, controlled: bool = False) -> None:
        self.id = next(self._ids)
        self._platform = platform
        self.url = url
        self.controlled = controlled
        self.focused = False

    async def navigate(self, url: str) -> "HeadlessWindow":
        self.url = urljoin(self._platform.origin + "/", url)
        return self

    async def focus(self) -> "HeadlessWindow":
        for window in self._platform.windows:
            window.focused = window is self
        return self

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "url": self.url,
            "controlled": self.controlled,
            "focused": self.focused,
        }


class HeadlessPlatform(NotificationPlatform):
    """In-memory platform.

    Notifications sharing a tag replace one another, matching how browsers
    group notifications by tag.
    """

    def __init__(self, origin: str, permission: str = "granted") -> None:
        self.origin = origin.rstrip("/")
        self.permission = permission
        self.windows: list[HeadlessWindow] = []
        self._notifications: dict[str, Notification] = {}
        self.waiting_skipped = False
        self.clients_claimed = False

    @property
    def notifications(self) -> list[Notification]:
        return list(self._notifications.values())

    def get_notification(self, tag: str) -> Optional[Notification]:
        return self._notifications.get(tag)

    def _forget(self, notification: Notification) -> None:
        if self._notifications.get(notification.tag) is notification:
            del self._notifications[notification.tag]

    async def show_notification(self, title: str, options: NotificationOptions) -> Notification:
        if self.permission != "granted":
            raise NotificationDisplayError(f"notification permission is {self.permission}")
        notification = Notification(title, options, on_close=self._forget)
        replaced = self._notifications.get(notification.tag)
        if replaced is not None:
            replaced.closed = True
            logger.debug("notification_replaced", tag=notification.tag)
        self._notifications[notification.tag] = notification
        return notification

    async def match_clients(self, include_uncontrolled: bool = True) -> list[WindowClient]:
        if include_uncontrolled:
            return list(self.windows)
        return [w for w in self.windows if w.controlled]

    async def open_window(self, url: str) -> Optional[WindowClient]:
        window = HeadlessWindow(self, urljoin(self.origin + "/", url), controlled=True)
        self.windows.append(window)
        await window.focus()
        return window

    def add_window(self, url: str, controlled: bool = False) -> HeadlessWindow:
        window = HeadlessWindow(self, url, controlled=controlled)
        self.windows.append(window)
        return window

    async def skip_waiting(self) -> None:
        self.waiting_skipped = True

    async def claim_clients(self) -> None:
        for window in self.windows:
            window.controlled = True
        self.clients_claimed = True
