"""
Signature Service package for the access guard.

Verifies signed requests carrying ``x-api-key`` and ``x-api-signature``
headers:

- app.models: SignatureCredential and the framework-neutral SignedRequest.
- app.hashing: bcrypt signature computation and comparison.
- app.adapters: HTTP client for the signature management API.
- app.verifier: read-through credential cache plus hash check.
- app.dependencies: FastAPI dependency that maps failures to 401.
- app.factory: assembles a verifier from environment settings.
"""

from .dependencies import SignatureGuard, signed_request_from
from .factory import build_signature_verifier, build_signer
from .hashing import compare_hash, compute_signature, signature_payload
from .models import SignatureCredential, SignedRequest
from .verifier import SignatureVerifier

__all__ = [
    "SignatureCredential",
    "SignatureGuard",
    "SignatureVerifier",
    "SignedRequest",
    "build_signature_verifier",
    "build_signer",
    "compare_hash",
    "compute_signature",
    "signature_payload",
    "signed_request_from",
]
