"""Dashboard personalization store.

Keeps one user's ordered, visibility-flagged widget list in memory and
mirrors every change to key-value storage under a per-(user, role) key.
Guest identities are never written, so shared devices do not accumulate
layouts for unauthenticated sessions.

Mutations are synchronous and each one is followed by at most one write.
There is no cross-process coordination: when two writers share a key the
last write wins.
"""

from datetime import datetime, timezone
from typing import Callable, Literal, Optional

from pydantic import ValidationError

from ..storage.base import KeyValueStorage, StorageError
from ..utils.logging import get_logger
from .drag import DragSession
from .widgets import (
    DashboardLayout,
    WidgetConfig,
    default_widgets,
    reindex,
    storage_key,
)

logger = get_logger("dashboard.store")

Direction = Literal["up", "down"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def load_widgets(storage: KeyValueStorage, key: str) -> list[WidgetConfig]:
    """Read a persisted layout, falling back to the starter set.

    Stored widgets are sorted by ``order`` and re-indexed densely so the
    in-memory list always satisfies the permutation invariant.
    """
    try:
        raw = storage.get_item(key)
        if raw:
            layout = DashboardLayout.model_validate_json(raw)
            return reindex(sorted(layout.widgets, key=lambda w: w.order))
    except (StorageError, ValidationError, ValueError) as exc:
        logger.error("layout_load_failed", key=key, error=str(exc))
    return default_widgets()


class DashboardWidgetStore:
    """Per-identity widget layout with toggle/move/reorder/reset and drag tracking."""

    def __init__(
        self,
        storage: KeyValueStorage,
        user_id: str,
        user_role: str,
        guest_user_id: str = "guest",
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._storage = storage
        self._guest_user_id = guest_user_id
        self._clock = clock or _utcnow
        self._drag = DragSession()
        self._user_id = user_id
        self._user_role = user_role
        self._widgets: list[WidgetConfig] = []
        self._last_modified: Optional[datetime] = None
        self.load(user_id, user_role)

    # --- Identity ---

    @property
    def user_id(self) -> str:
        return self._user_id

    @property
    def user_role(self) -> str:
        return self._user_role

    @property
    def storage_key(self) -> str:
        return storage_key(self._user_id, self._user_role)

    @property
    def is_guest(self) -> bool:
        return self._user_id == self._guest_user_id

    def load(self, user_id: str, user_role: str) -> list[WidgetConfig]:
        """Discard in-memory state and read the layout for ``(user_id, user_role)``."""
        self._user_id = user_id
        self._user_role = user_role
        self._drag.end()
        self._widgets = load_widgets(self._storage, self.storage_key)
        self._last_modified = None
        logger.debug("layout_loaded", key=self.storage_key, widgets=len(self._widgets))
        return self.widgets

    def set_identity(self, user_id: str, user_role: str) -> bool:
        """Reload when the identity pair changed. Returns True if a reload happened."""
        if (user_id, user_role) == (self._user_id, self._user_role):
            return False
        logger.info(
            "layout_identity_changed",
            previous=self.storage_key,
            current=storage_key(user_id, user_role),
        )
        self.load(user_id, user_role)
        return True

    # --- Views ---

    @property
    def widgets(self) -> list[WidgetConfig]:
        return list(self._widgets)

    @property
    def visible_widgets(self) -> list[WidgetConfig]:
        return sorted((w for w in self._widgets if w.visible), key=lambda w: w.order)

    @property
    def last_modified(self) -> Optional[datetime]:
        return self._last_modified

    @property
    def dragged_widget(self) -> Optional[str]:
        return self._drag.source_id

    def index_of(self, widget_id: str) -> int:
        for i, w in enumerate(self._widgets):
            if w.id == widget_id:
                return i
        return -1

    # --- Mutations ---

    def toggle(self, widget_id: str) -> bool:
        """Flip visibility of one widget. Returns False when the id is unknown."""
        index = self.index_of(widget_id)
        if index == -1:
            return False
        widgets = list(self._widgets)
        target = widgets[index]
        widgets[index] = target.model_copy(update={"visible": not target.visible})
        self._commit(widgets)
        return True

    def move(self, widget_id: str, direction: Direction) -> bool:
        """Move a widget one slot up or down. Returns False on a no-op."""
        if direction not in ("up", "down"):
            raise ValueError(f"direction must be 'up' or 'down', got {direction!r}")
        current = self.index_of(widget_id)
        if current == -1:
            return False
        if direction == "up":
            target = max(0, current - 1)
        else:
            target = min(len(self._widgets) - 1, current + 1)
        if target == current:
            return False
        self._commit(self._splice(current, target))
        return True

    def reorder(self, from_index: int, to_index: int) -> bool:
        """Move the widget at ``from_index`` to ``to_index``.

        An out-of-range source is ignored; the destination is clamped to the
        list bounds.
        """
        count = len(self._widgets)
        if not 0 <= from_index < count:
            logger.warning("reorder_index_out_of_range", from_index=from_index, size=count)
            return False
        to_index = max(0, min(count - 1, to_index))
        if from_index == to_index:
            return False
        self._commit(self._splice(from_index, to_index))
        return True

    def reset_to_default(self) -> list[WidgetConfig]:
        self._commit(default_widgets())
        return self.widgets

    # --- Drag session ---

    def drag_start(self, widget_id: str) -> None:
        self._drag.start(widget_id)

    def drag_end(self) -> None:
        self._drag.end()

    def drag_over(self, target_id: str) -> bool:
        """Reorder the dragged widget into the hovered widget's slot."""
        source_id = self._drag.hover_target(target_id)
        if source_id is None:
            return False
        from_index = self.index_of(source_id)
        to_index = self.index_of(target_id)
        if from_index == -1 or to_index == -1:
            return False
        return self.reorder(from_index, to_index)

    # --- Internals ---

    def _splice(self, from_index: int, to_index: int) -> list[WidgetConfig]:
        widgets = list(self._widgets)
        moved = widgets.pop(from_index)
        widgets.insert(to_index, moved)
        return reindex(widgets)

    def _commit(self, widgets: list[WidgetConfig]) -> None:
        self._widgets = widgets
        self._last_modified = self._clock()
        self._persist()

    def _persist(self) -> None:
        if self.is_guest:
            return
        layout = DashboardLayout(widgets=self._widgets, last_modified=self._last_modified)
        try:
            self._storage.set_item(self.storage_key, layout.to_json())
        except StorageError as exc:
            # In-memory state stays authoritative for this session
            logger.error("layout_persist_failed", key=self.storage_key, error=str(exc))

    def snapshot(self) -> dict:
        """Serializable view used by the HTTP layer."""
        return {
            "userId": self._user_id,
            "userRole": self._user_role,
            "storageKey": self.storage_key,
            "persisted": not self.is_guest,
            "widgets": [w.model_dump() for w in self._widgets],
            "visibleWidgets": [w.model_dump() for w in self.visible_widgets],
            "draggedWidget": self.dragged_widget,
            "lastModified": self._last_modified.isoformat() if self._last_modified else None,
        }
