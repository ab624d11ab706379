"""Pydantic schemas for the lead relay."""

from pydantic import BaseModel, Field, field_validator


class LeadRequest(BaseModel):
    """Raw lead as posted by the landing page form."""
    name: str = Field(default="", description="Visitor name")
    contact: str = Field(default="", description="Telegram username, with or without @")
    message: str = Field(default="", description="Optional free-text message")

    @field_validator("name", "contact", "message", mode="before")
    @classmethod
    def strip_text(cls, v):
        """Missing or null fields count as empty; strings are trimmed."""
        if v is None:
            return ""
        if isinstance(v, str):
            return v.strip()
        return v


class LeadSubmission(BaseModel):
    """Lead that passed validation; contact is the bare handle, message is HTML-escaped."""
    name: str
    contact: str
    message: str = ""


class RelayResponse(BaseModel):
    """Schema for every relay answer."""
    success: bool
    message: str
