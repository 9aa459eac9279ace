"""Dashboard widget types, the starter widget set, and the storage key scheme."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

STORAGE_KEY_PREFIX = "dashboard_layout"


class WidgetConfig(BaseModel):
    """One dashboard panel: stable id, label, visibility and display position."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    visible: bool = True
    order: int


class DashboardLayout(BaseModel):
    """Persisted form of a user's widget set."""

    model_config = ConfigDict(populate_by_name=True)

    widgets: list[WidgetConfig]
    last_modified: Optional[datetime] = Field(default=None, alias="lastModified")

    @model_validator(mode="after")
    def _unique_ids(self) -> "DashboardLayout":
        ids = [w.id for w in self.widgets]
        if len(ids) != len(set(ids)):
            raise ValueError("widget ids must be unique within a layout")
        return self

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


DEFAULT_WIDGETS: tuple[WidgetConfig, ...] = (
    WidgetConfig(id="stats", title="Quick Stats", visible=True, order=0),
    WidgetConfig(id="requests", title="Data Requests", visible=True, order=1),
    WidgetConfig(id="visits", title="Recent Visits", visible=True, order=2),
    WidgetConfig(id="activities", title="Activities", visible=True, order=3),
    WidgetConfig(id="staff", title="Staff Overview", visible=True, order=4),
    WidgetConfig(id="calendar", title="Leave Calendar", visible=True, order=5),
)


def default_widgets() -> list[WidgetConfig]:
    """Fresh list holding the starter configuration."""
    return list(DEFAULT_WIDGETS)


def storage_key(user_id: str, user_role: str) -> str:
    """Composite key a (user, role) layout is persisted under."""
    return f"{STORAGE_KEY_PREFIX}_{user_id}_{user_role}"


def reindex(widgets: list[WidgetConfig]) -> list[WidgetConfig]:
    """Return widgets with ``order`` rewritten to match list position.

    Entries already at the right position are returned as the same objects.
    """
    return [
        w if w.order == i else w.model_copy(update={"order": i})
        for i, w in enumerate(widgets)
    ]
