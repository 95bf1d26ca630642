"""
Pydantic models for the intermediate and final results of an upload.
"""

from typing import List, Optional
from pydantic import BaseModel, Field


class PersonRecord(BaseModel):
    id: int

    model_config = {
        'extra': 'ignore',
    }


class PersonSearchResponse(BaseModel):
    """Body of GET /api/{slug}/people"""
    people: List[PersonRecord] = Field(default_factory=list)


class FetchedDocument(BaseModel):
    """Document bytes downloaded from the caller-supplied URL"""
    content: bytes = Field(..., description="Entire response body")
    filename: str = Field(..., description="Filename sent with the multipart part")

    @property
    def size(self) -> int:
        return len(self.content)


class PublishOutcome(BaseModel):
    """Result of POSTing the document to Loxo"""
    success: bool
    status_code: Optional[int] = Field(None, description="Upstream status, None when no response was received")


class HandlerResponse(BaseModel):
    """Status and plain-text message returned to the inbound caller"""
    status_code: int
    message: str = ""
