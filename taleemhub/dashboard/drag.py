"""Drag-and-drop session state for widget reordering."""

from enum import Enum
from typing import Optional


class DragState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


class DragSession:
    """Two-state machine: idle, or dragging a single source widget.

    Hovering over another widget while dragging does not change the
    source id; only ``end()`` returns the session to idle.
    """

    def __init__(self) -> None:
        self._source_id: Optional[str] = None

    @property
    def state(self) -> DragState:
        return DragState.IDLE if self._source_id is None else DragState.DRAGGING

    @property
    def source_id(self) -> Optional[str]:
        return self._source_id

    @property
    def active(self) -> bool:
        return self._source_id is not None

    def start(self, widget_id: str) -> None:
        self._source_id = widget_id

    def end(self) -> None:
        self._source_id = None

    def hover_target(self, target_id: str) -> Optional[str]:
        """Return the source id when hovering ``target_id`` should trigger a reorder."""
        if self._source_id is None or self._source_id == target_id:
            return None
        return self._source_id
