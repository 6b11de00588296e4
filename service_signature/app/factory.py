"""
Wiring for the signature verifier.
"""

from functools import partial
from typing import Optional

import httpx

from shared.cache import KeyValueCache, RedisKeyValueCache
from shared.config import AccessSettings, get_settings
from shared.metrics import MetricsCollector
from .adapters.signature_authority import SignatureAuthorityClient
from .hashing import compute_signature
from .verifier import SignatureVerifier


def build_signature_verifier(
    settings: Optional[AccessSettings] = None,
    *,
    cache: Optional[KeyValueCache] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    metrics: Optional[MetricsCollector] = None,
) -> SignatureVerifier:
    """Assemble a verifier from settings, defaulting to a Redis cache."""
    settings = settings or get_settings()
    config = settings.signature_config()
    authority = SignatureAuthorityClient(
        config.base_url,
        http_client,
        timeout=settings.remote_timeout,
    )
    return SignatureVerifier(
        cache if cache is not None else RedisKeyValueCache.from_url(settings.redis_url),
        authority,
        config,
        metrics=metrics,
    )


def build_signer(settings: Optional[AccessSettings] = None):
    """Return ``compute_signature`` bound to the configured salt round."""
    settings = settings or get_settings()
    return partial(compute_signature, salt_round=settings.signature_salt_round)
