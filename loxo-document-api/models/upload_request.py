from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Any, Optional


def _blank_to_none(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list, bool)):
        return None
    value = str(value).strip()
    return value or None


def _to_person_id(value: Any) -> Optional[int]:
    """Coerce to a positive integer id; anything else counts as missing"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            return None
    if isinstance(value, int) and value > 0:
        return value
    return None


class InboundRecipientData(BaseModel):
    """The nested "data" object of the inbound body"""
    slug: Optional[str] = None
    email: Optional[str] = None
    personID: Optional[int] = None

    @field_validator("slug", "email", mode="before")
    @classmethod
    def normalize_text(cls, v):
        return _blank_to_none(v)

    @field_validator("personID", mode="before")
    @classmethod
    def normalize_person_id(cls, v):
        return _to_person_id(v)


class InboundPayload(BaseModel):
    """
    Inbound JSON body. Every field is optional here; the request parser decides
    which ones are required for the configured recipient strategy.
    """
    fileUrl: Optional[str] = None
    data: Optional[InboundRecipientData] = None

    @field_validator("fileUrl", mode="before")
    @classmethod
    def normalize_file_url(cls, v):
        return _blank_to_none(v)

    @field_validator("data", mode="before")
    @classmethod
    def normalize_data(cls, v):
        return v if isinstance(v, dict) else None


class UploadRequest(BaseModel):
    """A validated upload request ready for the pipeline"""
    document_url: str = Field(..., description="Pre-signed or public URL of the document to copy")
    agency_slug: str = Field(..., description="Loxo agency slug")
    person_id: Optional[int] = Field(None, description="Loxo person id, when supplied directly")
    recipient_email: Optional[str] = Field(None, description="Email used to look up the person id")

    @model_validator(mode="after")
    def check_recipient(self) -> "UploadRequest":
        if self.person_id is None and not self.recipient_email:
            raise ValueError("either person_id or recipient_email is required")
        return self

    @staticmethod
    def parse_person_id(value: Any) -> Optional[int]:
        return _to_person_id(value)
