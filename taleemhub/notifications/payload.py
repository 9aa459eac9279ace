"""Push payload normalization.

Push services deliver an opaque body. When it is a JSON object its fields
are merged over the defaults below; anything else is shown as plain text.
"""

import json
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..utils.logging import get_logger

logger = get_logger("notifications.payload")

DEFAULT_TITLE = "TaleemHub"
DEFAULT_BODY = "You have a new notification"
DEFAULT_ICON = "/pwa-192x192.png"
DEFAULT_BADGE = "/favicon-16x16.png"
DEFAULT_TAG = "taleemhub-notification"
DEFAULT_VIBRATE = [100, 50, 100]


class NotificationAction(BaseModel):
    model_config = ConfigDict(extra="ignore")

    action: str
    title: str


class NotificationPayload(BaseModel):
    """Wire shape sent by the push service. Every field is optional."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    title: Any = DEFAULT_TITLE
    body: Any = DEFAULT_BODY
    icon: Any = DEFAULT_ICON
    badge: Any = DEFAULT_BADGE
    tag: Any = DEFAULT_TAG
    data: Any = Field(default_factory=dict)
    actions: Any = Field(default_factory=list)
    require_interaction: Any = Field(default=False, alias="requireInteraction")


class NotificationOptions(BaseModel):
    """Options handed to the platform when displaying a notification."""

    model_config = ConfigDict(populate_by_name=True)

    body: str = DEFAULT_BODY
    icon: str = DEFAULT_ICON
    badge: str = DEFAULT_BADGE
    tag: str = DEFAULT_TAG
    vibrate: list[int] = Field(default_factory=lambda: list(DEFAULT_VIBRATE))
    data: dict[str, Any] = Field(default_factory=dict)
    actions: list[NotificationAction] = Field(default_factory=list)
    require_interaction: bool = Field(default=False, alias="requireInteraction")


class PushMessageData:
    """Raw push message body with JSON and text accessors."""

    def __init__(self, raw: bytes | str) -> None:
        self._raw = raw.encode("utf-8") if isinstance(raw, str) else raw

    def text(self) -> str:
        return self._raw.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.text())

    def __bool__(self) -> bool:
        return True


def _text_or_default(value: Any, default: str) -> str:
    if not value:
        return default
    return value if isinstance(value, str) else str(value)


def _coerce_actions(value: Any) -> list[NotificationAction]:
    if not isinstance(value, list):
        return []
    actions = []
    for item in value:
        if isinstance(item, dict) and "action" in item and "title" in item:
            actions.append(NotificationAction(action=str(item["action"]), title=str(item["title"])))
    return actions


def build_notification(payload: NotificationPayload) -> tuple[str, NotificationOptions]:
    """Turn a merged payload into a title and display options."""
    data = payload.data if isinstance(payload.data, dict) and payload.data else {}
    options = NotificationOptions(
        body=_text_or_default(payload.body, ""),
        icon=_text_or_default(payload.icon, DEFAULT_ICON),
        badge=_text_or_default(payload.badge, DEFAULT_BADGE),
        tag=_text_or_default(payload.tag, DEFAULT_TAG),
        data=data,
        actions=_coerce_actions(payload.actions),
        require_interaction=bool(payload.require_interaction),
    )
    return _text_or_default(payload.title, DEFAULT_TITLE), options


def parse_push_data(data: Optional[PushMessageData]) -> NotificationPayload:
    """Merge a push body over the default payload.

    Non-JSON bodies, and JSON that is not an object, become the notification
    body verbatim.
    """
    if data is None:
        return NotificationPayload()
    try:
        parsed = data.json()
    except (ValueError, RecursionError):
        logger.debug("push_payload_not_json")
        return NotificationPayload(body=data.text())
    if not isinstance(parsed, dict):
        return NotificationPayload(body=data.text())
    return NotificationPayload.model_validate(parsed)
