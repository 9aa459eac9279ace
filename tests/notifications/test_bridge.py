"""Tests for NotificationBridge — push display, click routing and lifecycle."""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest

from taleemhub.notifications.bridge import BridgeState, NotificationBridge
from taleemhub.notifications.events import (
    ActivateEvent,
    EventTimeoutError,
    ExtendableEvent,
    InstallEvent,
    NotificationEvent,
    PushEvent,
)
from taleemhub.notifications.platform import HeadlessPlatform, NotificationDisplayError

ORIGIN = "https://taleemhub.test"


async def _push(bridge, body):
    results = await bridge.dispatch(PushEvent(body))
    return results[0]


class TestPush:
    @pytest.mark.asyncio
    async def test_json_payload_displayed(self, bridge, platform):
        notification = await _push(bridge, json.dumps({"title": "Test", "body": "Hello"}))

        assert notification.title == "Test"
        assert notification.body == "Hello"
        assert notification.options.icon == "/pwa-192x192.png"
        assert notification.options.badge == "/favicon-16x16.png"
        assert notification.tag == "taleemhub-notification"
        assert platform.notifications == [notification]

    @pytest.mark.asyncio
    async def test_plain_text_payload_displayed(self, bridge):
        notification = await _push(bridge, b"Plain text alert")
        assert notification.title == "TaleemHub"
        assert notification.body == "Plain text alert"

    @pytest.mark.asyncio
    async def test_empty_push_uses_defaults(self, bridge):
        notification = await _push(bridge, None)
        assert notification.title == "TaleemHub"
        assert notification.body == "You have a new notification"

    @pytest.mark.asyncio
    async def test_deeply_nested_json_still_displayed(self, bridge, platform):
        raw = "[" * 100_000 + "]" * 100_000
        notification = await _push(bridge, raw)
        assert notification.body == raw
        assert platform.notifications == [notification]

    @pytest.mark.asyncio
    async def test_same_tag_replaces_notification(self, bridge, platform):
        first = await _push(bridge, json.dumps({"body": "one", "tag": "queries"}))
        second = await _push(bridge, json.dumps({"body": "two", "tag": "queries"}))
        await _push(bridge, json.dumps({"body": "three", "tag": "visits"}))

        assert first.closed is True
        assert platform.get_notification("queries") is second
        assert len(platform.notifications) == 2

    @pytest.mark.asyncio
    async def test_display_failure_propagates(self):
        platform = HeadlessPlatform(origin=ORIGIN, permission="denied")
        bridge = NotificationBridge(platform=platform)

        with pytest.raises(NotificationDisplayError):
            await bridge.dispatch(PushEvent("hello"))
        assert bridge.get_stats()["total_failed"] == 1

    @pytest.mark.asyncio
    async def test_event_times_out_when_display_stalls(self, platform):
        async def _stall(title, options):
            await asyncio.sleep(5)

        platform.show_notification = AsyncMock(side_effect=_stall)
        bridge = NotificationBridge(platform=platform, event_timeout=0.05)

        with pytest.raises(EventTimeoutError):
            await bridge.dispatch(PushEvent("hello"))

    @pytest.mark.asyncio
    async def test_dispatch_waits_for_display(self, platform):
        finished = []

        async def _slow(title, options):
            await asyncio.sleep(0.01)
            finished.append(title)

        platform.show_notification = AsyncMock(side_effect=_slow)
        bridge = NotificationBridge(platform=platform)

        await bridge.dispatch(PushEvent(json.dumps({"title": "Slow"})))
        assert finished == ["Slow"]


class TestNotificationClick:
    @pytest.mark.asyncio
    async def test_focuses_existing_same_origin_window(self, bridge, platform):
        window = platform.add_window(f"{ORIGIN}/calendar")
        notification = await _push(bridge, json.dumps({"data": {"url": "/queries/9"}}))

        results = await bridge.dispatch(NotificationEvent("notificationclick", notification))

        assert results == [window]
        assert notification.closed is True
        assert window.url == f"{ORIGIN}/queries/9"
        assert window.focused is True
        assert len(platform.windows) == 1
        assert platform.notifications == []

    @pytest.mark.asyncio
    async def test_opens_window_when_none_match(self, bridge, platform):
        foreign = platform.add_window("https://other.example/page")
        notification = await _push(bridge, json.dumps({"data": {"url": "/visits"}}))

        results = await bridge.dispatch(NotificationEvent("notificationclick", notification))

        opened = results[0]
        assert opened is not foreign
        assert opened.url == f"{ORIGIN}/visits"
        assert foreign.url == "https://other.example/page"
        assert len(platform.windows) == 2

    @pytest.mark.asyncio
    async def test_missing_url_defaults_to_dashboard(self, bridge, platform):
        notification = await _push(bridge, json.dumps({"title": "No link"}))
        results = await bridge.dispatch(NotificationEvent("notificationclick", notification))
        assert results[0].url == f"{ORIGIN}/dashboard"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", [5, {"path": "/visits"}, ["/a"], ""])
    async def test_unusable_url_defaults_to_dashboard(self, bridge, platform, url):
        window = platform.add_window(f"{ORIGIN}/calendar")
        notification = await _push(bridge, json.dumps({"data": {"url": url}}))

        results = await bridge.dispatch(NotificationEvent("notificationclick", notification))

        assert results == [window]
        assert window.url == f"{ORIGIN}/dashboard"
        assert bridge.get_stats()["total_failed"] == 0

    @pytest.mark.asyncio
    async def test_only_first_matching_window_used(self, bridge, platform):
        first = platform.add_window(f"{ORIGIN}/a")
        second = platform.add_window(f"{ORIGIN}/b")
        notification = await _push(bridge, json.dumps({"data": {"url": "/c"}}))

        await bridge.dispatch(NotificationEvent("notificationclick", notification))

        assert first.url == f"{ORIGIN}/c"
        assert second.url == f"{ORIGIN}/b"
        assert second.focused is False

    @pytest.mark.asyncio
    async def test_uncontrolled_windows_are_considered(self, bridge, platform):
        window = platform.add_window(f"{ORIGIN}/home", controlled=False)
        notification = await _push(bridge, "ping")
        await bridge.dispatch(NotificationEvent("notificationclick", notification))
        assert window.focused is True

    @pytest.mark.asyncio
    async def test_no_window_opened_when_platform_cannot(self, bridge, platform):
        platform.supports_open_window = False
        notification = await _push(bridge, "ping")
        results = await bridge.dispatch(NotificationEvent("notificationclick", notification))
        assert results == [None]
        assert platform.windows == []


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_install_skips_waiting(self, bridge, platform):
        assert bridge.state is BridgeState.IDLE
        await bridge.dispatch(InstallEvent())
        assert bridge.state is BridgeState.INSTALLING
        assert platform.waiting_skipped is True

    @pytest.mark.asyncio
    async def test_activate_claims_clients(self, bridge, platform):
        window = platform.add_window(f"{ORIGIN}/", controlled=False)
        await bridge.dispatch(InstallEvent())
        await bridge.dispatch(ActivateEvent())
        assert bridge.state is BridgeState.ACTIVE
        assert platform.clients_claimed is True
        assert window.controlled is True

    @pytest.mark.asyncio
    async def test_close_event_changes_nothing(self, bridge, platform):
        notification = await _push(bridge, "ping")
        notification.close()
        results = await bridge.dispatch(NotificationEvent("notificationclose", notification))
        assert results == []
        assert platform.windows == []

    @pytest.mark.asyncio
    async def test_unknown_event_type_ignored(self, bridge):
        event = ExtendableEvent()
        event.type = "sync"
        assert await bridge.dispatch(event) == []
        assert bridge.get_stats()["total_events"] == 0

    def test_notification_event_rejects_unknown_type(self):
        with pytest.raises(ValueError):
            NotificationEvent("notificationshow", notification=None)


class TestLocalNotification:
    @pytest.mark.asyncio
    async def test_local_notification_shown_with_defaults(self, bridge, platform):
        assert await bridge.show_local_notification("Reminder", body="Submit leave form", tag="leave") is True
        shown = platform.get_notification("leave")
        assert shown.title == "Reminder"
        assert shown.options.icon == "/pwa-192x192.png"
        assert shown.options.vibrate == [100, 50, 100]

    @pytest.mark.asyncio
    async def test_local_notification_failure_returns_false(self):
        platform = HeadlessPlatform(origin=ORIGIN, permission="denied")
        bridge = NotificationBridge(platform=platform)
        assert await bridge.show_local_notification("Reminder") is False
