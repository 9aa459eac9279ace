"""Shared test fixtures."""

import os
import tempfile
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
import pytest_asyncio

# Force test config BEFORE any app imports
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["APP_ORIGIN"] = "https://taleemhub.test"
os.environ["LOG_DIR"] = tempfile.mkdtemp(prefix="taleemhub-logs-")

from taleemhub.dashboard.widgets import DashboardLayout, WidgetConfig, storage_key
from taleemhub.notifications.bridge import NotificationBridge
from taleemhub.notifications.platform import HeadlessPlatform
from taleemhub.storage.base import KeyValueStorage
from taleemhub.storage.memory import MemoryStorage

ORIGIN = "https://taleemhub.test"
FIXED_NOW = datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)


# --- Storage fixtures ---

@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def mock_storage():
    """Storage double that records writes and holds nothing."""
    storage = MagicMock(spec=KeyValueStorage)
    storage.get_item.return_value = None
    return storage


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


def _seed_layout(storage, user_id: str, role: str, ids: list[str], visible: dict | None = None):
    """Persist a layout holding ``ids`` in order."""
    visible = visible or {}
    layout = DashboardLayout(
        widgets=[
            WidgetConfig(id=wid, title=wid.title(), visible=visible.get(wid, True), order=i)
            for i, wid in enumerate(ids)
        ],
        last_modified=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )
    storage.set_item(storage_key(user_id, role), layout.to_json())


@pytest.fixture
def seed_layout():
    return _seed_layout


# --- Notification fixtures ---

@pytest.fixture
def platform():
    return HeadlessPlatform(origin=ORIGIN)


@pytest.fixture
def bridge(platform):
    return NotificationBridge(platform=platform, default_click_url="/dashboard", event_timeout=1.0)


# --- API fixtures ---

def _reset_singletons():
    """Reset module-level singletons so each API test starts clean."""
    import taleemhub.database as db_mod
    import taleemhub.dependencies as dep_mod

    db_mod._engine = None
    db_mod._session_factory = None
    dep_mod._config_instance = None
    dep_mod._storage = None
    dep_mod._notification_platform = None
    dep_mod._notification_bridge = None
    dep_mod._install_prompt_store = None
    dep_mod._dashboard_stores = None


@pytest_asyncio.fixture
async def client():
    """Async HTTP client against the app with in-memory storage."""
    from httpx import ASGITransport, AsyncClient

    from taleemhub.main import app

    _reset_singletons()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    _reset_singletons()
