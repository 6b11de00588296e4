"""
Adapters package for the Feature Flag Service.

HTTP client wrappers for the remote flag decision API.
"""

from .flag_authority import FlagAuthorityClient

__all__ = ["FlagAuthorityClient"]
