"""
Read-through cached feature flag resolution.
"""

import inspect
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from pydantic import ValidationError

from shared.cache import KeyValueCache
from shared.cache_keys import feature_flag_key
from shared.config import FeatureFlagConfig
from shared.errors import InvalidContextError, MalformedResponseError
from shared.logging import get_logger, set_user_context
from shared.metrics import MetricsCollector
from .adapters.flag_authority import FlagAuthorityClient
from .models import FlagContext, FlagRecord

FlagCallback = Callable[[bool], Union[None, Awaitable[None]]]
ContextLike = Union[FlagContext, Mapping[str, Any]]

CACHE_TYPE = "feature_flag"


class FlagResolver:
    """Resolves boolean flags, consulting the cache before the decision API.

    Concurrent misses for the same key each call the authority; there is no
    single-flight coordination. ``default_value`` is only a hint for the
    authority and is never substituted locally when a lookup fails.
    """

    def __init__(
        self,
        cache: KeyValueCache,
        authority: FlagAuthorityClient,
        config: Optional[FeatureFlagConfig] = None,
        *,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.cache = cache
        self.authority = authority
        self.config = config or FeatureFlagConfig()
        self.metrics = metrics
        self.logger = get_logger("feature_flags.resolver")

    @staticmethod
    def cache_key(flag_name: str, context: ContextLike) -> str:
        ctx = _coerce_context(context)
        return feature_flag_key(flag_name, ctx.user_id, ctx.organization_id, ctx.extra_fields)

    async def resolve(self, context: ContextLike, flag_name: str, default_value: bool = True) -> bool:
        """Return the flag value for ``context``."""
        record = await self.resolve_record(context, flag_name, default_value)
        return record.flag.value

    async def resolve_record(
        self,
        context: ContextLike,
        flag_name: str,
        default_value: bool = True,
    ) -> FlagRecord:
        """Return the full flag record, from cache when possible."""
        ctx = _coerce_context(context)
        set_user_context(ctx.user_id, ctx.organization_id)
        cache_key = self.cache_key(flag_name, ctx)

        cached = await self.cache.get(cache_key)
        if cached is not None:
            self._record_lookup(hit=True)
            self.logger.debug("Cache hit for flag", flag=flag_name, cache_key=cache_key)
            return self._parse_cached(cached, flag_name, cache_key)

        self._record_lookup(hit=False)
        self.logger.debug("Cache miss for flag", flag=flag_name, cache_key=cache_key)

        try:
            record = await self.authority.fetch_flag(ctx, flag_name, default_value)
        except Exception:
            self._record_remote("error")
            raise
        self._record_remote("success")

        await self.cache.set(cache_key, record.model_dump_json(), self.config.ttl)
        self.logger.info("Cached flag", flag=flag_name, value=record.flag.value, ttl=self.config.ttl)
        return record

    async def resolve_with_callback(
        self,
        callback: FlagCallback,
        context: ContextLike,
        flag_name: str,
        default_value: bool = True,
    ) -> None:
        """Resolve the flag, then pass its value to ``callback``.

        Resolution errors propagate before the callback runs. Awaitable
        callback results are awaited.
        """
        value = await self.resolve(context, flag_name, default_value)
        result = callback(value)
        if inspect.isawaitable(result):
            await result

    def _parse_cached(self, cached: str, flag_name: str, cache_key: str) -> FlagRecord:
        try:
            return FlagRecord.model_validate_json(cached)
        except ValidationError as exc:
            self.logger.error("Corrupt cached flag record", flag=flag_name, cache_key=cache_key)
            raise MalformedResponseError(
                f'Corrupt cache entry for flag "{flag_name}" at {cache_key}: {cached}',
                body=cached,
                details={"flag": flag_name, "source": "cache"},
            ) from exc

    def _record_lookup(self, hit: bool):
        if self.metrics:
            self.metrics.record_cache_lookup(CACHE_TYPE, hit)

    def _record_remote(self, outcome: str):
        if self.metrics:
            self.metrics.record_remote_request("feature_flag", outcome)


def _coerce_context(context: ContextLike) -> FlagContext:
    if isinstance(context, FlagContext):
        return context
    try:
        return FlagContext.model_validate(dict(context))
    except ValidationError as exc:
        missing = [".".join(str(part) for part in error["loc"]) for error in exc.errors()]
        raise InvalidContextError(
            f"Flag context is missing required fields: {', '.join(missing)}",
            details={"missing": missing},
        ) from exc
