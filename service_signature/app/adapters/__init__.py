"""
Adapters package for the Signature Service.

HTTP client wrappers for the signature management API.
"""

from .signature_authority import SignatureAuthorityClient

__all__ = ["SignatureAuthorityClient"]
