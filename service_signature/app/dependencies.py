"""
FastAPI integration for signature verification.
"""

import json
from typing import Dict

from fastapi import HTTPException, Request

from shared.errors import MissingCredentialError
from shared.logging import get_logger, set_request_id
from .models import REQUEST_ID_HEADER, HeaderValue, SignatureCredential, SignedRequest
from .verifier import SignatureVerifier


async def signed_request_from(request: Request) -> SignedRequest:
    """Build a SignedRequest from a Starlette request."""
    headers: Dict[str, HeaderValue] = {}
    for name in request.headers.keys():
        if name in headers:
            continue
        values = request.headers.getlist(name)
        headers[name] = values[0] if len(values) == 1 else values

    raw_body = await request.body()
    body = None
    if raw_body:
        try:
            body = json.loads(raw_body)
        except ValueError:
            body = raw_body.decode("utf-8", errors="replace")

    return SignedRequest(headers=headers, query=dict(request.query_params), body=body)


class SignatureGuard:
    """Route dependency that rejects requests without a valid signature.

    Usage::

        guard = SignatureGuard(verifier)

        @app.post("/orders")
        async def create_order(credential=Depends(guard)):
            ...
    """

    def __init__(self, verifier: SignatureVerifier):
        self.verifier = verifier
        self.logger = get_logger("signature.guard")

    async def __call__(self, request: Request) -> SignatureCredential:
        request_id = set_request_id(request.headers.get(REQUEST_ID_HEADER))
        signed = await signed_request_from(request)
        try:
            credential = await self.verifier.verify(signed)
        except MissingCredentialError as e:
            self.logger.info("Rejected unsigned request", path=request.url.path)
            raise HTTPException(status_code=e.status_code, detail=e.message) from e

        request.state.request_id = request_id
        request.state.signature_credential = credential
        return credential
