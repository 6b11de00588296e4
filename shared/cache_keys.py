"""
Cache key composition and JSON canonicalisation helpers.
"""

import hashlib
import json
from typing import Any, Mapping, Optional

FEATURE_FLAG_PREFIX = "feature-flag"
SIGNATURE_PREFIX = "signature"


def canonical_json(value: Any, *, sort_keys: bool = False) -> str:
    """Compact JSON encoding with no whitespace and non-ASCII kept as-is."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, sort_keys=sort_keys, default=str)


def context_digest(*parts: Any) -> str:
    """Short SHA-256 digest over the sorted canonical JSON of ``parts``."""
    encoded = canonical_json(list(parts), sort_keys=True).encode("utf-8")
    return hashlib.sha256(encoded).hexdigest()[:16]


def feature_flag_key(
    flag_name: str,
    user_id: Any,
    organization_id: Any,
    extra: Optional[Mapping[str, Any]] = None,
) -> str:
    """Build the cache key for one flag evaluated in one caller context.

    The readable segments help when inspecting Redis; the trailing digest
    covers every field, so values containing ``:`` cannot collide.
    """
    digest = context_digest(flag_name, user_id, organization_id, dict(extra or {}))
    return f"{FEATURE_FLAG_PREFIX}:{flag_name}:user:{user_id}:org:{organization_id}:ctx:{digest}"


def signature_key(public_key: str) -> str:
    """Build the cache key for a signature credential."""
    return f"{SIGNATURE_PREFIX}:{public_key}"
