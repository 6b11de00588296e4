"""
Client for the signature management API.
"""

from typing import Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from shared.errors import MissingCredentialError
from shared.logging import get_logger, mask_key
from ..models import SignatureCredential, SignatureEnvelope


class SignatureAuthorityClient:
    """Looks up the credential registered for a public key.

    Every failure, including transport errors, is reported as
    ``MissingCredentialError``; details only go to the log.
    """

    def __init__(
        self,
        base_url: str,
        http_client: Optional[httpx.AsyncClient] = None,
        *,
        timeout: float = 10.0,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self._client = http_client
        self.logger = get_logger("signature.authority")

    async def fetch_credential(self, public_key: str) -> SignatureCredential:
        url = f"{self.base_url}/signature/verify/{quote(public_key, safe='')}"
        try:
            response = await self._get(url)
        except httpx.HTTPError as e:
            self.logger.error(
                "Signature authority unreachable",
                public_key=mask_key(public_key),
                error=str(e),
            )
            raise MissingCredentialError() from e

        if response.status_code != 200:
            self.logger.warning(
                "Signature authority rejected key",
                public_key=mask_key(public_key),
                status_code=response.status_code,
            )
            raise MissingCredentialError()

        try:
            envelope = SignatureEnvelope.model_validate_json(response.text)
        except ValidationError as e:
            self.logger.error(
                "Unexpected signature authority response",
                public_key=mask_key(public_key),
                error=str(e),
            )
            raise MissingCredentialError() from e

        if envelope.data is None:
            self.logger.warning("Signature authority returned no credential", public_key=mask_key(public_key))
            raise MissingCredentialError()

        return envelope.data

    async def _get(self, url: str) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(url)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(url)
