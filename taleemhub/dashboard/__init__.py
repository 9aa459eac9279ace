"""Dashboard personalization package."""

from .drag import DragSession, DragState
from .store import DashboardWidgetStore, load_widgets
from .widgets import (
    DEFAULT_WIDGETS,
    DashboardLayout,
    WidgetConfig,
    default_widgets,
    storage_key,
)

__all__ = [
    "DEFAULT_WIDGETS",
    "DashboardLayout",
    "DashboardWidgetStore",
    "DragSession",
    "DragState",
    "WidgetConfig",
    "default_widgets",
    "load_widgets",
    "storage_key",
]
