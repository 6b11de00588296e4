"""
Unit tests for signature hashing.
"""

import json

import bcrypt
import pytest

from service_signature.app.hashing import (
    compare_hash,
    compute_signature,
    hash_payload,
    signature_payload,
)

FAST_ROUNDS = 4


class TestSignaturePayload:
    """Test cases for payload composition."""

    def test_payload_format(self):
        """Test the key and JSON-encoded parts are pipe separated."""
        payload = signature_payload('{"a":"1"}', "", "pk-1")

        assert payload == 'pk-1|"{\\"a\\":\\"1\\"}"|""'

    def test_payload_keeps_non_ascii(self):
        """Test non-ASCII characters are not escaped."""
        assert signature_payload("", json.dumps("café", ensure_ascii=False), "pk") == 'pk|""|"\\"café\\""'


class TestComputeSignature:
    """Test cases for compute_signature and compare_hash."""

    @pytest.fixture
    def parts(self):
        return {
            "query": '{"page":"1"}',
            "body": '{"amount":100,"currency":"IDR","note":"' + "x" * 200 + '"}',
            "public_key": "pk-live-1234567890",
        }

    def test_round_trip(self, parts):
        """Test a computed signature verifies against the same inputs."""
        hashed = compute_signature(parts["query"], parts["body"], parts["public_key"], salt_round=FAST_ROUNDS)

        plain = signature_payload(parts["query"], parts["body"], parts["public_key"])
        assert compare_hash(plain, hashed) is True

    def test_hash_is_salted(self, parts):
        """Test two signatures of the same payload differ."""
        first = compute_signature(parts["query"], parts["body"], parts["public_key"], salt_round=FAST_ROUNDS)
        second = compute_signature(parts["query"], parts["body"], parts["public_key"], salt_round=FAST_ROUNDS)

        assert first != second

    def test_salt_round_is_encoded(self, parts):
        """Test the configured cost factor is used."""
        hashed = compute_signature(parts["query"], parts["body"], parts["public_key"], salt_round=5)

        assert hashed.startswith("$2b$05$")

    @pytest.mark.parametrize("position", [0, 10, 40, 150, -1])
    def test_single_character_mutation_fails(self, parts, position):
        """Test mutating any character of a long payload is detected."""
        plain = signature_payload(parts["query"], parts["body"], parts["public_key"])
        hashed = hash_payload(plain, salt_round=FAST_ROUNDS)

        chars = list(plain)
        chars[position] = "#" if chars[position] != "#" else "$"
        assert compare_hash("".join(chars), hashed) is False

    def test_invalid_hash_is_mismatch(self):
        """Test values that are not bcrypt hashes do not raise."""
        assert compare_hash("pk|\"\"|\"\"", "not-a-hash") is False
        assert compare_hash("pk|\"\"|\"\"", "") is False

    def test_raw_payload_hash_is_rejected(self):
        """Test hashes of the undigested payload do not verify."""
        plain = signature_payload("{}", "", "pk-short")
        raw = bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=FAST_ROUNDS)).decode("ascii")

        assert compare_hash(plain, raw) is False
        assert compare_hash(plain, hash_payload(plain, salt_round=FAST_ROUNDS)) is True
