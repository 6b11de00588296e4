"""
Signature data models.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Mapping, Optional, Union

from pydantic import BaseModel

from shared.cache_keys import canonical_json

HeaderValue = Union[str, List[str], None]

PUBLIC_KEY_HEADER = "x-api-key"
SIGNATURE_HEADER = "x-api-signature"
REQUEST_ID_HEADER = "x-request-id"


class SignatureCredential(BaseModel):
    """Credential registered for a public key."""

    id: str
    app_name: str
    public_key: str
    scope: str
    expired_at: Optional[datetime] = None
    created_at: datetime
    description: str = ""


class SignatureEnvelope(BaseModel):
    """Response body of the signature management API."""

    data: Optional[SignatureCredential] = None


@dataclass
class SignedRequest:
    """Framework-neutral view of an inbound request.

    Header names are matched case-insensitively. A header sent more than
    once is represented as a list.
    """

    headers: Mapping[str, HeaderValue] = field(default_factory=dict)
    query: Any = None
    body: Any = None

    def header(self, name: str) -> HeaderValue:
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None

    @property
    def query_text(self) -> str:
        return canonical_json(self.query) if self.query is not None else ""

    @property
    def body_text(self) -> str:
        return canonical_json(self.body) if self.body is not None else ""
