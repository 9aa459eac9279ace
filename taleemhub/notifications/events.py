"""Lifecycle and notification events delivered to the bridge.

Handlers run synchronously and hand any asynchronous work to
``wait_until``. The dispatcher then awaits ``settle()`` so the event is
only complete once every registered awaitable has finished.
"""

import asyncio
from typing import Any, Awaitable, Optional

from .payload import PushMessageData


class EventTimeoutError(Exception):
    """Raised when work registered on an event does not finish in time."""

    def __init__(self, event_type: str, timeout: float) -> None:
        super().__init__(f"{event_type} event did not settle within {timeout:.1f}s")
        self.event_type = event_type
        self.timeout = timeout


class ExtendableEvent:
    """Base event whose lifetime can be extended with ``wait_until``."""

    type: str = "event"

    def __init__(self) -> None:
        self._pending: list[asyncio.Future] = []

    def wait_until(self, awaitable: Awaitable[Any]) -> None:
        """Keep the event open until ``awaitable`` completes."""
        self._pending.append(asyncio.ensure_future(awaitable))

    @property
    def pending(self) -> int:
        return sum(1 for f in self._pending if not f.done())

    async def settle(self, timeout: Optional[float] = None) -> list[Any]:
        """Await all registered work, cancelling it once ``timeout`` elapses."""
        if not self._pending:
            return []
        try:
            return await asyncio.wait_for(asyncio.gather(*self._pending), timeout)
        except asyncio.TimeoutError as exc:
            raise EventTimeoutError(self.type, timeout or 0.0) from exc


class InstallEvent(ExtendableEvent):
    type = "install"


class ActivateEvent(ExtendableEvent):
    type = "activate"


class PushEvent(ExtendableEvent):
    """A push message; ``data`` is None when the message carried no body."""

    type = "push"

    def __init__(self, data: bytes | str | None = None) -> None:
        super().__init__()
        self.data: Optional[PushMessageData] = PushMessageData(data) if data else None


class NotificationEvent(ExtendableEvent):
    """Click or close on a displayed notification."""

    def __init__(self, type: str, notification, action: str = "") -> None:
        super().__init__()
        if type not in ("notificationclick", "notificationclose"):
            raise ValueError(f"unsupported notification event type: {type}")
        self.type = type
        self.notification = notification
        self.action = action
