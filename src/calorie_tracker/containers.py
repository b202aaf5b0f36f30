"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from calorie_tracker.adapters.memory_kv_store import InMemoryKeyValueStore
from calorie_tracker.adapters.supabase_kv_store import SupabaseKeyValueStore
from calorie_tracker.config import Settings
from calorie_tracker.services.alerts import InMemoryAlertFeed
from calorie_tracker.services.dashboard import DashboardService
from calorie_tracker.services.profiles import ProfileService
from calorie_tracker.services.reconciler import ReconcilerService
from calorie_tracker.services.scheduler import RefreshTask
from calorie_tracker.services.settings import SettingsService
from calorie_tracker.services.storage import JsonStorage, KeyValueStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    storage: JsonStorage
    alert_feed: InMemoryAlertFeed
    profile_service: ProfileService
    reconciler: ReconcilerService
    dashboard_service: DashboardService
    settings_service: SettingsService
    refresh_task: RefreshTask
    close_resources: Callable[[], Awaitable[None]]


def build_store(settings: Settings) -> KeyValueStore:
    """Create the configured key-value backend."""
    if settings.storage_backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError(
                "supabase_url and supabase_service_key are required "
                "for the supabase storage backend"
            )
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseKeyValueStore(
            client=client,
            table=settings.supabase_table,
            namespace=settings.storage_namespace,
        )
    return InMemoryKeyValueStore()


def build_container(
    settings: Settings | None = None, store: KeyValueStore | None = None
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    storage = JsonStorage(store or build_store(resolved_settings))
    alert_feed = InMemoryAlertFeed(max_size=resolved_settings.alert_history_size)
    profile_service = ProfileService(storage)
    reconciler = ReconcilerService(storage, save_guard=resolved_settings.save_guard)
    dashboard_service = DashboardService(
        storage=storage,
        reconciler=reconciler,
        profile_service=profile_service,
        alerts=alert_feed,
        timezone_name=resolved_settings.timezone,
    )
    settings_service = SettingsService(
        profile_service=profile_service,
        reconciler=reconciler,
        alerts=alert_feed,
    )
    refresh_task = RefreshTask(
        refresh=dashboard_service.refresh,
        interval_seconds=resolved_settings.refresh_interval_seconds,
    )

    async def close_resources() -> None:
        await refresh_task.stop()

    return AppContainer(
        settings=resolved_settings,
        storage=storage,
        alert_feed=alert_feed,
        profile_service=profile_service,
        reconciler=reconciler,
        dashboard_service=dashboard_service,
        settings_service=settings_service,
        refresh_task=refresh_task,
        close_resources=close_resources,
    )
