"""
Salted request signature hashing with bcrypt.

bcrypt reads at most 72 bytes of input, so the combined payload is reduced
to its SHA-256 hex digest before hashing. Every byte of the payload
therefore affects the result. Signatures produced by clients that bcrypt the
raw payload directly do not verify against this scheme.
"""

import hashlib

import bcrypt

from shared.cache_keys import canonical_json
from shared.config import DEFAULT_SALT_ROUND


def signature_payload(query: str, body: str, public_key: str) -> str:
    """Combine the request parts into the string that gets signed.

    ``query`` and ``body`` are already serialized; they are JSON-encoded a
    second time so the ``|`` separators stay unambiguous.
    """
    return f"{public_key}|{canonical_json(query)}|{canonical_json(body)}"


def _digest(plain: str) -> bytes:
    return hashlib.sha256(plain.encode("utf-8")).hexdigest().encode("ascii")


def hash_payload(plain: str, salt_round: int = DEFAULT_SALT_ROUND) -> str:
    """Hash an already combined payload with a fresh salt."""
    return bcrypt.hashpw(_digest(plain), bcrypt.gensalt(rounds=salt_round)).decode("ascii")


def compute_signature(query: str, body: str, public_key: str, salt_round: int = DEFAULT_SALT_ROUND) -> str:
    """Return the signature a client must send for this request."""
    return hash_payload(signature_payload(query, body, public_key), salt_round)


def compare_hash(plain: str, hashed: str) -> bool:
    """Check ``plain`` against a hash produced by ``hash_payload``.

    Anything that is not a bcrypt hash compares as a mismatch.
    """
    try:
        return bcrypt.checkpw(_digest(plain), hashed.encode("utf-8"))
    except ValueError:
        return False
