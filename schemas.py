"""
Identity schema for the contact card service.

One IdentityRecord is built at startup and shared, read-only, by every
request. Optional fields use "" for absent so templates and the vCard
encoder can test presence with plain truthiness.
"""
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from errors import ConfigValidationError

REQUIRED_FIELDS = ("display_name", "canonical_url")


class IdentityRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    display_name: str = Field(..., description="Shown as page title and vCard FN")
    canonical_url: str = Field(..., description="Base identity URL, encoded into the QR image")
    email: str = Field("", description="mailto contact")
    phone: str = Field("", description="tel contact")
    bluesky: str = Field("", description="Bluesky profile URL")
    github: str = Field("", description="GitHub profile URL")
    whatsapp: str = Field("", description="WhatsApp chat URL")
    facebook: str = Field("", description="Facebook profile URL")


def build(fields: Mapping[str, Optional[str]]) -> IdentityRecord:
    """Validate required fields in order and return a frozen record.

    Only the first missing required field is reported.
    """
    for name in REQUIRED_FIELDS:
        if not fields.get(name):
            raise ConfigValidationError(name)
    values = {
        name: fields.get(name) or ""
        for name in IdentityRecord.model_fields
    }
    return IdentityRecord(**values)
