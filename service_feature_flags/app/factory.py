"""
Wiring for the feature flag resolver.
"""

from typing import Optional

import httpx

from shared.cache import KeyValueCache, RedisKeyValueCache
from shared.config import AccessSettings, get_settings
from shared.metrics import MetricsCollector
from .adapters.flag_authority import FlagAuthorityClient
from .resolver import FlagResolver


def build_flag_resolver(
    settings: Optional[AccessSettings] = None,
    *,
    cache: Optional[KeyValueCache] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    metrics: Optional[MetricsCollector] = None,
) -> FlagResolver:
    """Assemble a resolver from settings, defaulting to a Redis cache."""
    settings = settings or get_settings()
    config = settings.feature_flag_config()
    authority = FlagAuthorityClient(
        config.core_url,
        http_client,
        timeout=settings.remote_timeout,
    )
    return FlagResolver(
        cache if cache is not None else RedisKeyValueCache.from_url(settings.redis_url),
        authority,
        config,
        metrics=metrics,
    )
