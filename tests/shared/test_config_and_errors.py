"""
Unit tests for shared configuration and error handling.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import ValidationError

from shared.config import AccessSettings, FeatureFlagConfig, SignatureConfig
from shared.errors import (
    MalformedResponseError,
    MissingCredentialError,
    RemoteAuthorityError,
    register_error_handlers,
)

ENV_VARS = [
    "ACCESS_FEATURE_FLAG_CORE_URL",
    "CORE_URL_FEATURE_FLAG",
    "ACCESS_FEATURE_FLAG_TTL",
    "ACCESS_SIGNATURE_BASE_URL",
    "SIGNATURE_API_CORE_MANAGEMENT",
    "ACCESS_SIGNATURE_TTL",
    "SIGNATURE_REDIS_EXPIRE",
    "ACCESS_SIGNATURE_SALT_ROUND",
    "SIGNATURE_SALT_ROUND",
    "ACCESS_REDIS_URL",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Remove configuration variables from the environment."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestAccessSettings:
    """Test cases for AccessSettings."""

    def test_defaults(self, clean_env):
        """Test documented default values."""
        settings = AccessSettings(_env_file=None)

        flags = settings.feature_flag_config()
        signatures = settings.signature_config()
        assert flags.core_url == "http://localhost:7750/v1/feature-flag/dso"
        assert flags.ttl == 1800
        assert signatures.base_url == "http://localhost:7750"
        assert signatures.ttl == 300
        assert signatures.salt_round == 10

    def test_legacy_environment_names(self, clean_env):
        """Test legacy variable names are honoured."""
        clean_env.setenv("CORE_URL_FEATURE_FLAG", "http://flags.internal/dso/")
        clean_env.setenv("SIGNATURE_API_CORE_MANAGEMENT", "http://sig.internal")
        clean_env.setenv("SIGNATURE_REDIS_EXPIRE", "120")
        clean_env.setenv("SIGNATURE_SALT_ROUND", "12")

        settings = AccessSettings(_env_file=None)

        assert settings.feature_flag_config().core_url == "http://flags.internal/dso"
        assert settings.signature_config().base_url == "http://sig.internal"
        assert settings.signature_config().ttl == 120
        assert settings.signature_config().salt_round == 12

    def test_prefixed_names_win(self, clean_env):
        """Test ACCESS_ names take precedence over legacy names."""
        clean_env.setenv("ACCESS_SIGNATURE_TTL", "45")
        clean_env.setenv("SIGNATURE_REDIS_EXPIRE", "120")

        assert AccessSettings(_env_file=None).signature_ttl == 45

    def test_explicit_overrides(self, clean_env):
        """Test keyword overrides."""
        settings = AccessSettings(_env_file=None, feature_flag_ttl=60)

        assert settings.feature_flag_config().ttl == 60

    def test_invalid_salt_round(self, clean_env):
        """Test bcrypt cost bounds are enforced."""
        with pytest.raises(ValidationError):
            SignatureConfig(salt_round=3)
        with pytest.raises(ValidationError):
            FeatureFlagConfig(ttl=0)


class TestErrors:
    """Test cases for shared error types."""

    def test_remote_authority_error(self):
        """Test status and body are carried."""
        error = RemoteAuthorityError("failed", status=500, body="Internal Server Error")

        assert error.status == 500
        assert error.body == "Internal Server Error"
        assert error.to_response().details == {"status": 500, "body": "Internal Server Error"}

    def test_missing_credential_defaults(self):
        """Test the unauthorized error defaults."""
        error = MissingCredentialError()

        assert error.message == "Unauthorized"
        assert error.status_code == 401
        assert MissingCredentialError("Signature not found").message == "Signature not found"

    def test_error_handler_renders_response(self):
        """Test access layer errors map to JSON with their status code."""
        app = FastAPI()
        register_error_handlers(app)

        @app.get("/flag")
        async def flag():
            raise MalformedResponseError("bad shape", body="{}")

        @app.get("/signed")
        async def signed():
            raise MissingCredentialError()

        client = TestClient(app)

        response = client.get("/flag")
        assert response.status_code == 502
        assert response.json()["code"] == "MALFORMED_RESPONSE"
        assert response.json()["details"]["body"] == "{}"

        response = client.get("/signed")
        assert response.status_code == 401
        assert response.json()["message"] == "Unauthorized"
