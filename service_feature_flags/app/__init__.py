"""
Feature Flag Service package for the access guard.

Resolves boolean feature flags for a caller context:

- app.models: FlagContext and FlagRecord.
- app.adapters: HTTP client for the remote decision API.
- app.resolver: read-through cache in front of the decision API.
- app.factory: assembles a resolver from environment settings.
"""

from .factory import build_flag_resolver
from .models import FlagContext, FlagRecord, FlagValue
from .resolver import FlagResolver

__all__ = [
    "FlagContext",
    "FlagRecord",
    "FlagResolver",
    "FlagValue",
    "build_flag_resolver",
]
