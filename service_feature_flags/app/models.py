"""
Feature flag data models.
"""

from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictBool


class FlagContext(BaseModel):
    """Caller context a flag is evaluated for.

    ``user_id`` and ``organization_id`` must be present because they are
    part of the cache key; their values are not checked. Any additional
    fields are kept and forwarded to the decision API untouched.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    user_id: Any = Field(
        validation_alias=AliasChoices("user_id", "userID", "userId"),
        serialization_alias="userID",
    )
    organization_id: Any = Field(
        validation_alias=AliasChoices("organization_id", "organizationId"),
        serialization_alias="organizationId",
    )

    @property
    def extra_fields(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})

    def to_payload(self) -> Dict[str, Any]:
        """Context as sent to the decision API."""
        return self.model_dump(mode="json", by_alias=True)


class FlagValue(BaseModel):
    """Name and evaluated value of a flag."""

    name: Optional[str] = None
    value: StrictBool


class FlagRecord(BaseModel):
    """Decision returned by the flag authority and stored in the cache."""

    flag: FlagValue
    last_fetched_time: Any = None

    @property
    def value(self) -> bool:
        return self.flag.value
