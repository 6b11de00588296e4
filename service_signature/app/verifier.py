"""
Request signature verification backed by a read-through credential cache.
"""

from typing import Callable, Mapping, Optional

from pydantic import ValidationError

from shared.cache import KeyValueCache
from shared.cache_keys import signature_key
from shared.config import SignatureConfig
from shared.errors import MissingCredentialError
from shared.logging import get_logger, mask_key
from shared.metrics import MetricsCollector
from .adapters.signature_authority import SignatureAuthorityClient
from .hashing import compare_hash, signature_payload
from .models import (
    HeaderValue,
    PUBLIC_KEY_HEADER,
    SIGNATURE_HEADER,
    SignatureCredential,
    SignedRequest,
)

CACHE_TYPE = "signature"


class SignatureVerifier:
    """Verifies ``x-api-key`` / ``x-api-signature`` request headers."""

    def __init__(
        self,
        cache: KeyValueCache,
        authority: SignatureAuthorityClient,
        config: Optional[SignatureConfig] = None,
        *,
        compare: Callable[[str, str], bool] = compare_hash,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.cache = cache
        self.authority = authority
        self.config = config or SignatureConfig()
        self.compare = compare
        self.metrics = metrics
        self.logger = get_logger("signature.verifier")

    def uses_signature(self, headers: Mapping[str, HeaderValue]) -> bool:
        """Return True if a single public key header is present."""
        _single_header(SignedRequest(headers=headers), PUBLIC_KEY_HEADER)
        return True

    async def verify(self, request: SignedRequest) -> SignatureCredential:
        """Verify a request; raises ``MissingCredentialError`` on any failure."""
        public_key = _single_header(request, PUBLIC_KEY_HEADER)
        signature = _single_header(request, SIGNATURE_HEADER)
        return await self.verify_with_key(request.query_text, request.body_text, public_key, signature)

    async def verify_with_key(
        self,
        query: str,
        body: str,
        public_key: str,
        signature: str,
    ) -> SignatureCredential:
        """Verify already serialized request parts against ``signature``."""
        credential = await self.get_credential(public_key)

        if not self.compare(signature_payload(query, body, public_key), signature):
            self.logger.warning("Signature mismatch", public_key=mask_key(public_key))
            self._record_verification("mismatch")
            raise MissingCredentialError()

        self._record_verification("success")
        return credential

    async def get_credential(self, public_key: str) -> SignatureCredential:
        """Return the credential for ``public_key``, from cache when possible."""
        cache_key = signature_key(public_key)
        cached = await self.cache.get(cache_key)

        if cached is not None:
            self._record_lookup(hit=True)
            try:
                return SignatureCredential.model_validate_json(cached)
            except ValidationError as e:
                self.logger.error("Corrupt cached credential", public_key=mask_key(public_key))
                self._record_verification("error")
                raise MissingCredentialError() from e

        self._record_lookup(hit=False)
        try:
            credential = await self.authority.fetch_credential(public_key)
        except MissingCredentialError:
            self._record_remote("error")
            self._record_verification("unknown_key")
            raise
        self._record_remote("success")

        await self.cache.set(cache_key, credential.model_dump_json(), self.config.ttl)
        self.logger.info("Cached signature credential", public_key=mask_key(public_key), ttl=self.config.ttl)
        return credential

    def _record_lookup(self, hit: bool):
        if self.metrics:
            self.metrics.record_cache_lookup(CACHE_TYPE, hit)

    def _record_remote(self, outcome: str):
        if self.metrics:
            self.metrics.record_remote_request("signature", outcome)

    def _record_verification(self, status: str):
        if self.metrics:
            self.metrics.record_signature_verification(status)


def _single_header(request: SignedRequest, name: str) -> str:
    value = request.header(name)
    if not isinstance(value, str):
        raise MissingCredentialError()
    return value
