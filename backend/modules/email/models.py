"""
Email module data models.
"""

from typing import Optional

from pydantic import BaseModel, Field


class EmailMessage(BaseModel):
    """An outgoing email."""

    to: str = Field(..., description="Recipient address")
    subject: str
    text: str = Field(..., description="Plain-text body")
    html: Optional[str] = Field(None, description="HTML alternative body")


class EmailResult(BaseModel):
    """Outcome of a send attempt. Sending never raises."""

    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None
