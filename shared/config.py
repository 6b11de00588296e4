"""
Shared configuration management for the access guard services.

Environment variables are read once, when ``AccessSettings`` is built by a
factory. Resolver and verifier classes only ever see the plain config
structs below.
"""

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_FEATURE_FLAG_CORE_URL = "http://localhost:7750/v1/feature-flag/dso"
DEFAULT_FEATURE_FLAG_TTL = 60 * 30
DEFAULT_SIGNATURE_BASE_URL = "http://localhost:7750"
DEFAULT_SIGNATURE_TTL = 300
DEFAULT_SALT_ROUND = 10


def _strip_trailing_slash(value: str) -> str:
    return value.rstrip("/")


class FeatureFlagConfig(BaseModel):
    """Settings consumed by the feature flag resolver."""

    ttl: int = Field(default=DEFAULT_FEATURE_FLAG_TTL, gt=0, description="Cache TTL in seconds")
    core_url: str = Field(default=DEFAULT_FEATURE_FLAG_CORE_URL, description="Flag decision endpoint")

    normalize_url = field_validator("core_url")(_strip_trailing_slash)


class SignatureConfig(BaseModel):
    """Settings consumed by the signature verifier."""

    ttl: int = Field(default=DEFAULT_SIGNATURE_TTL, gt=0, description="Cache TTL in seconds")
    base_url: str = Field(default=DEFAULT_SIGNATURE_BASE_URL, description="Signature management base URL")
    salt_round: int = Field(default=DEFAULT_SALT_ROUND, ge=4, le=31, description="bcrypt cost factor")

    normalize_url = field_validator("base_url")(_strip_trailing_slash)


class AccessSettings(BaseSettings):
    """Environment-backed settings for both services."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Environment
    env: str = Field(default="local", validation_alias=AliasChoices("ACCESS_ENV", "env"))
    log_level: str = Field(default="info", validation_alias=AliasChoices("ACCESS_LOG_LEVEL", "log_level"))

    # External services
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        validation_alias=AliasChoices("ACCESS_REDIS_URL", "redis_url"),
    )
    remote_timeout: float = Field(
        default=10.0,
        gt=0,
        validation_alias=AliasChoices("ACCESS_REMOTE_TIMEOUT", "remote_timeout"),
    )

    # Feature flags
    feature_flag_core_url: str = Field(
        default=DEFAULT_FEATURE_FLAG_CORE_URL,
        validation_alias=AliasChoices(
            "ACCESS_FEATURE_FLAG_CORE_URL", "CORE_URL_FEATURE_FLAG", "feature_flag_core_url"
        ),
    )
    feature_flag_ttl: int = Field(
        default=DEFAULT_FEATURE_FLAG_TTL,
        gt=0,
        validation_alias=AliasChoices("ACCESS_FEATURE_FLAG_TTL", "feature_flag_ttl"),
    )

    # Signatures
    signature_base_url: str = Field(
        default=DEFAULT_SIGNATURE_BASE_URL,
        validation_alias=AliasChoices(
            "ACCESS_SIGNATURE_BASE_URL", "SIGNATURE_API_CORE_MANAGEMENT", "signature_base_url"
        ),
    )
    signature_ttl: int = Field(
        default=DEFAULT_SIGNATURE_TTL,
        gt=0,
        validation_alias=AliasChoices("ACCESS_SIGNATURE_TTL", "SIGNATURE_REDIS_EXPIRE", "signature_ttl"),
    )
    signature_salt_round: int = Field(
        default=DEFAULT_SALT_ROUND,
        ge=4,
        le=31,
        validation_alias=AliasChoices(
            "ACCESS_SIGNATURE_SALT_ROUND", "SIGNATURE_SALT_ROUND", "signature_salt_round"
        ),
    )

    def feature_flag_config(self) -> FeatureFlagConfig:
        return FeatureFlagConfig(ttl=self.feature_flag_ttl, core_url=self.feature_flag_core_url)

    def signature_config(self) -> SignatureConfig:
        return SignatureConfig(
            ttl=self.signature_ttl,
            base_url=self.signature_base_url,
            salt_round=self.signature_salt_round,
        )


def get_settings(**overrides) -> AccessSettings:
    """Load settings from the environment, applying explicit overrides."""
    return AccessSettings(**overrides)
