"""Dependency container wiring for the sync client."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from nutrition_sync.adapters.json_file_cache_store import JsonFileCacheStore
from nutrition_sync.adapters.rest_gateway import HttpxRestGateway
from nutrition_sync.adapters.supabase_gateway import SupabaseGateway
from nutrition_sync.app_logging import configure_logging
from nutrition_sync.config import (
    BACKEND_REST,
    BACKEND_SUPABASE,
    Settings,
    parse_targets,
    resolve_backend,
)
from nutrition_sync.services.auth import AuthService
from nutrition_sync.services.cache import CacheStore, InMemoryCacheStore
from nutrition_sync.services.context import SyncContext
from nutrition_sync.services.custom_meals import CustomMealRepository
from nutrition_sync.services.gateway import LocalOnlyGateway, RemoteGateway
from nutrition_sync.services.hashing import (
    PasswordHasher,
    PlaintextHasher,
    Sha256Hasher,
)
from nutrition_sync.services.logs import LogRepository
from nutrition_sync.services.profiles import ProfileService
from nutrition_sync.services.stats import StatsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    context: SyncContext
    cache_store: CacheStore
    gateway: RemoteGateway
    auth_service: AuthService
    profile_service: ProfileService
    log_repository: LogRepository
    custom_meal_repository: CustomMealRepository
    stats_service: StatsService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    configure_logging()
    resolved_settings = settings or Settings()
    cache_store: CacheStore = (
        JsonFileCacheStore.create(resolved_settings.cache_path)
        if resolved_settings.cache_path
        else InMemoryCacheStore()
    )
    gateway = build_gateway(resolved_settings, cache_store)
    hasher: PasswordHasher = (
        PlaintextHasher()
        if resolved_settings.allow_plaintext_hashing
        else Sha256Hasher()
    )
    context = SyncContext()
    log_repository = LogRepository(cache_store, gateway, context)

    async def close_resources() -> None:
        await gateway.close()

    return AppContainer(
        settings=resolved_settings,
        context=context,
        cache_store=cache_store,
        gateway=gateway,
        auth_service=AuthService(cache_store, gateway, hasher, context),
        profile_service=ProfileService(cache_store, gateway, context),
        log_repository=log_repository,
        custom_meal_repository=CustomMealRepository(cache_store, gateway, context),
        stats_service=StatsService(log_repository, parse_targets(resolved_settings)),
        close_resources=close_resources,
    )


def build_gateway(settings: Settings, cache_store: CacheStore) -> RemoteGateway:
    """Select the remote gateway once from configuration."""
    backend = resolve_backend(settings)
    if backend == BACKEND_SUPABASE:
        return SupabaseGateway(url=settings.supabase_url, key=settings.supabase_key)
    if backend == BACKEND_REST:
        return HttpxRestGateway.create(
            base_url=settings.backend_url,
            store=cache_store,
            timeout_seconds=settings.http_timeout_seconds,
        )
    return LocalOnlyGateway()
