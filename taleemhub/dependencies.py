"""FastAPI dependency injection providers."""

from .config import TaleemHubConfig, get_config
from .utils.logging import get_logger

_dep_logger = get_logger("dependencies")

_config_instance: TaleemHubConfig | None = None
_storage = None
_notification_platform = None
_notification_bridge = None
_install_prompt_store = None
_dashboard_stores = None


def get_app_config() -> TaleemHubConfig:
    """Get the application config singleton."""
    global _config_instance
    if _config_instance is None:
        _config_instance = get_config()
    return _config_instance


def get_storage():
    """Get the key-value storage singleton for the configured backend."""
    global _storage
    if _storage is None:
        config = get_app_config()
        if config.storage_backend == "memory":
            from .storage.memory import MemoryStorage
            _storage = MemoryStorage()
        elif config.storage_backend == "file":
            from .storage.file import FileStorage
            _storage = FileStorage(config.storage_file_path)
        else:
            from .database import create_tables, get_session_factory
            from .storage.sql import SQLStorage
            create_tables(config)
            _storage = SQLStorage(get_session_factory(config))
        _dep_logger.info("storage_backend_selected", backend=_storage.name)
    return _storage


def get_dashboard_store(user_id: str, role: str):
    """Get the widget store for one (user, role) identity.

    Stores are kept per identity so drag sessions survive across requests.
    The map is bounded; an evicted identity reloads its layout from storage
    and only loses an in-progress drag.
    """
    global _dashboard_stores
    from .dashboard.store import DashboardWidgetStore
    from .dashboard.widgets import storage_key
    from .utils.cache import TTLCache

    config = get_app_config()
    if _dashboard_stores is None:
        _dashboard_stores = TTLCache(
            default_ttl=config.dashboard_store_ttl,
            max_entries=config.dashboard_store_max_entries,
        )
    return _dashboard_stores.get_or_create(
        storage_key(user_id, role),
        lambda: DashboardWidgetStore(
            storage=get_storage(),
            user_id=user_id,
            user_role=role,
            guest_user_id=config.guest_user_id,
        ),
    )


def get_notification_platform():
    """Get the headless notification platform singleton."""
    global _notification_platform
    if _notification_platform is None:
        from .notifications.platform import HeadlessPlatform
        config = get_app_config()
        _notification_platform = HeadlessPlatform(origin=config.app_origin)
    return _notification_platform


def get_notification_bridge():
    """Get the Notification Bridge singleton."""
    global _notification_bridge
    if _notification_bridge is None:
        from .notifications.bridge import NotificationBridge
        config = get_app_config()
        _notification_bridge = NotificationBridge(
            platform=get_notification_platform(),
            default_click_url=config.default_click_url,
            event_timeout=config.notification_event_timeout,
        )
    return _notification_bridge


def get_install_prompt_store():
    """Get the deferred install prompt singleton."""
    global _install_prompt_store
    if _install_prompt_store is None:
        from .pwa.install_prompt import InstallPromptStore
        _install_prompt_store = InstallPromptStore(storage=get_storage())
    return _install_prompt_store
