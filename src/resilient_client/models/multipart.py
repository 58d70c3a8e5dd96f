"""Multipart form part with an optional mime type and charset."""

from pydantic import BaseModel, ConfigDict, Field


class MultiPartNameValuePair(BaseModel):
    """
    One text part of a multipart/form-data request body.

    When mime_type is not set the part is sent as plain form data.
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Form field name")
    value: str = Field(..., description="Text value of the part")
    mime_type: str | None = Field(default=None, description="Content type, e.g. 'application/json'")
    charset: str = Field(default="utf-8", description="Charset used to encode the value")

    def content_type(self) -> str | None:
        """Content-Type header for this part, or None for a plain form field."""
        if self.mime_type is None:
            return None
        return f"{self.mime_type}; charset={self.charset}"

    def encoded_value(self) -> bytes:
        return self.value.encode(self.charset)
