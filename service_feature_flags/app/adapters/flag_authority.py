"""
Client for the remote feature flag decision API.
"""

import json
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from shared.cache_keys import canonical_json
from shared.errors import MalformedResponseError, RemoteAuthorityError
from shared.logging import get_logger
from ..models import FlagContext, FlagRecord


class FlagAuthorityClient:
    """Posts flag evaluation requests to the decision API.

    Transport failures (``httpx.TransportError``) are not caught here and
    reach the caller unchanged. Nothing is retried.
    """

    def __init__(
        self,
        core_url: str,
        http_client: Optional[httpx.AsyncClient] = None,
        *,
        timeout: float = 10.0,
    ):
        self.core_url = core_url
        self.timeout = timeout
        self._client = http_client
        self.logger = get_logger("feature_flags.authority")

    async def fetch_flag(
        self,
        context: FlagContext,
        flag_name: str,
        default_value: bool = True,
    ) -> FlagRecord:
        """Evaluate ``flag_name`` remotely and return the validated record."""
        payload = {
            "context": context.to_payload(),
            "flag_name": flag_name,
            "default_value": default_value,
        }
        response = await self._post(payload)
        context_text = canonical_json(context.to_payload())

        if not response.is_success:
            self.logger.error(
                "Flag authority returned an error",
                flag=flag_name,
                status_code=response.status_code,
            )
            raise RemoteAuthorityError(
                f'API error fetching flag "{flag_name}" for context {context_text}: '
                f"Status {response.status_code}, Body: {response.text}",
                status=response.status_code,
                body=response.text,
                details={"flag": flag_name},
            )

        return self._parse_record(response.text, flag_name, context_text)

    async def _post(self, payload: Dict[str, Any]) -> httpx.Response:
        headers = {"content-type": "application/json; charset=utf-8"}
        if self._client is not None:
            return await self._client.post(self.core_url, json=payload, headers=headers)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(self.core_url, json=payload, headers=headers)

    def _parse_record(self, body: str, flag_name: str, context_text: str) -> FlagRecord:
        def malformed() -> MalformedResponseError:
            self.logger.error("Unexpected flag authority response", flag=flag_name, body=body)
            return MalformedResponseError(
                f'Unexpected API response structure for flag "{flag_name}", '
                f"context {context_text}: {body}",
                body=body,
                details={"flag": flag_name, "source": "remote"},
            )

        try:
            document = json.loads(body)
        except ValueError:
            raise malformed()

        data = document.get("data") if isinstance(document, dict) else None
        flag = data.get("flag") if isinstance(data, dict) else None
        if not isinstance(flag, dict) or not isinstance(flag.get("value"), bool):
            raise malformed()

        # The flag name is optional in responses; fall back to the requested one.
        data = {**data, "flag": {"name": flag_name, **flag}}
        try:
            return FlagRecord.model_validate(data)
        except ValidationError:
            raise malformed()
