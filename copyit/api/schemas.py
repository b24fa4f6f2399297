"""
API Request and Response Schemas

This module defines all Pydantic models for API requests and responses.
Separated from endpoints to keep concerns separated and enable reuse.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, StrictStr


def to_iso(value: datetime) -> str:
    """Render a naive UTC timestamp as ISO-8601 with a Z suffix."""
    return value.isoformat(timespec="milliseconds") + "Z"


class CreateSnippetRequest(BaseModel):
    """Request model for snippet creation."""
    content: Optional[StrictStr] = Field(None, description="The text to share")
    ttl_seconds: Optional[Any] = Field(
        None,
        description="Lifetime in seconds, clamped to 60..604800 (default 86400)"
    )
    one_time: bool = Field(False, description="Allow only a single retrieval")


class CreateSnippetResponse(BaseModel):
    """Response model for snippet creation."""
    path: str = Field(..., description="The allocated path")
    url: str = Field(..., description="The complete snippet URL")
    expires_at: str = Field(..., description="Expiry time (ISO-8601, UTC)")
    created_at: str = Field(..., description="Creation time (ISO-8601, UTC)")
