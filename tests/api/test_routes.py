"""API tests — dashboard, notification and install routes over the ASGI app."""

import json

import pytest

pytestmark = pytest.mark.asyncio

ORIGIN = "https://taleemhub.test"
BASE = "/api/v1/dashboard/layouts"


def _ids(body, field="widgets"):
    return [w["id"] for w in body[field]]


# -----------------------------------------------------------------------
# Service
# -----------------------------------------------------------------------

async def test_root_and_health(client):
    resp = await client.get("/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "operational"

    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["storage"] == "memory"


async def test_request_id_echoed(client):
    resp = await client.get("/", headers={"X-Request-ID": "req-123"})
    assert resp.headers["X-Request-ID"] == "req-123"


# -----------------------------------------------------------------------
# Dashboard
# -----------------------------------------------------------------------

async def test_default_layout(client):
    resp = await client.get(f"{BASE}/u1/AEO")
    assert resp.status_code == 200
    body = resp.json()
    assert body["storageKey"] == "dashboard_layout_u1_AEO"
    assert body["persisted"] is True
    assert _ids(body) == ["stats", "requests", "visits", "activities", "staff", "calendar"]


async def test_toggle_and_visible_widgets(client):
    resp = await client.post(f"{BASE}/u1/AEO/toggle", json={"widgetId": "staff"})
    body = resp.json()
    assert body["changed"] is True
    assert "staff" not in _ids(body, "visibleWidgets")
    assert len(body["widgets"]) == 6


async def test_move_and_reorder(client):
    resp = await client.post(f"{BASE}/u1/DEO/move", json={"widgetId": "visits", "direction": "up"})
    assert _ids(resp.json())[:3] == ["stats", "visits", "requests"]

    resp = await client.post(f"{BASE}/u1/DEO/move", json={"widgetId": "stats", "direction": "up"})
    assert resp.json()["changed"] is False

    resp = await client.post(f"{BASE}/u1/DEO/reorder", json={"fromIndex": 0, "toIndex": 2})
    body = resp.json()
    assert _ids(body)[:3] == ["visits", "requests", "stats"]
    assert [w["order"] for w in body["widgets"]] == [0, 1, 2, 3, 4, 5]


async def test_invalid_direction_rejected(client):
    resp = await client.post(f"{BASE}/u1/AEO/move", json={"widgetId": "stats", "direction": "left"})
    assert resp.status_code == 422
    assert resp.json()["error"] is True


async def test_reset(client):
    await client.post(f"{BASE}/u1/AEO/toggle", json={"widgetId": "stats"})
    resp = await client.post(f"{BASE}/u1/AEO/reset")
    body = resp.json()
    assert all(w["visible"] for w in body["widgets"])


async def test_drag_session(client):
    await client.post(f"{BASE}/u1/AEO/drag/start", json={"widgetId": "stats"})
    resp = await client.post(f"{BASE}/u1/AEO/drag/over", json={"widgetId": "visits"})
    body = resp.json()
    assert body["changed"] is True
    assert body["draggedWidget"] == "stats"
    assert _ids(body)[2] == "stats"

    resp = await client.post(f"{BASE}/u1/AEO/drag/end")
    assert resp.json()["draggedWidget"] is None


async def test_guest_layout_not_persisted(client):
    import taleemhub.dependencies as dep_mod

    resp = await client.post(f"{BASE}/guest/TEACHER/toggle", json={"widgetId": "stats"})
    assert resp.json()["persisted"] is False
    assert dep_mod.get_storage().get_item("dashboard_layout_guest_TEACHER") is None


async def test_layout_written_to_storage(client):
    import taleemhub.dependencies as dep_mod

    await client.post(f"{BASE}/9/CEO/toggle", json={"widgetId": "calendar"})
    stored = json.loads(dep_mod.get_storage().get_item("dashboard_layout_9_CEO"))
    assert stored["widgets"][5]["visible"] is False
    assert "lastModified" in stored


async def test_store_map_is_bounded(client, monkeypatch):
    import taleemhub.dependencies as dep_mod

    monkeypatch.setenv("DASHBOARD_STORE_MAX_ENTRIES", "50")
    for i in range(200):
        resp = await client.get(f"{BASE}/u{i}/AEO")
        assert resp.status_code == 200

    assert len(dep_mod._dashboard_stores) == 50


async def test_evicted_identity_reloads_saved_layout(client, monkeypatch):
    monkeypatch.setenv("DASHBOARD_STORE_MAX_ENTRIES", "2")
    await client.post(f"{BASE}/u0/AEO/toggle", json={"widgetId": "staff"})
    await client.get(f"{BASE}/u1/AEO")
    await client.get(f"{BASE}/u2/AEO")

    resp = await client.get(f"{BASE}/u0/AEO")
    visible = _ids(resp.json(), "visibleWidgets")
    assert "staff" not in visible


# -----------------------------------------------------------------------
# Notifications
# -----------------------------------------------------------------------

async def test_push_json_payload(client):
    resp = await client.post(
        "/api/v1/notifications/push",
        content=json.dumps({"title": "Test", "body": "Hello", "tag": "t1"}),
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["title"] == "Test"
    assert body["body"] == "Hello"
    assert body["icon"] == "/pwa-192x192.png"

    resp = await client.get("/api/v1/notifications/")
    assert [n["tag"] for n in resp.json()] == ["t1"]


async def test_push_plain_text(client):
    resp = await client.post("/api/v1/notifications/push", content=b"Plain text alert")
    body = resp.json()
    assert body["title"] == "TaleemHub"
    assert body["body"] == "Plain text alert"


async def test_click_opens_window(client):
    await client.post(
        "/api/v1/notifications/push",
        content=json.dumps({"tag": "q1", "data": {"url": "/queries/1"}}),
    )
    resp = await client.post("/api/v1/notifications/q1/click")
    assert resp.status_code == 200
    assert resp.json()["window"]["url"] == f"{ORIGIN}/queries/1"

    resp = await client.get("/api/v1/notifications/windows")
    assert len(resp.json()) == 1

    resp = await client.get("/api/v1/notifications/")
    assert resp.json() == []


async def test_close_notification(client):
    await client.post("/api/v1/notifications/push", content=json.dumps({"tag": "c1"}))
    resp = await client.post("/api/v1/notifications/c1/close")
    assert resp.json()["closed"] is True

    resp = await client.post("/api/v1/notifications/c1/click")
    assert resp.status_code == 404


async def test_display_failure_maps_to_502(client):
    import taleemhub.dependencies as dep_mod

    dep_mod.get_notification_platform().permission = "denied"
    resp = await client.post("/api/v1/notifications/push", content=b"hi")
    assert resp.status_code == 502


# -----------------------------------------------------------------------
# Install prompt
# -----------------------------------------------------------------------

async def test_install_prompt_flow(client):
    resp = await client.get("/api/v1/pwa/install/")
    assert resp.json()["offer"] is False

    resp = await client.post("/api/v1/pwa/install/prompt", json={"platforms": ["web"]})
    assert resp.json()["offer"] is True

    resp = await client.post("/api/v1/pwa/install/take")
    assert resp.json()["prompt"] == {"platforms": ["web"]}

    resp = await client.post("/api/v1/pwa/install/outcome", json={"outcome": "accepted"})
    body = resp.json()
    assert body["permanentlyDismissed"] is True
    assert body["lastOutcome"] == "accepted"

    resp = await client.post("/api/v1/pwa/install/take")
    assert resp.status_code == 404
