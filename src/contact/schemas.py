"""Contact-form request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator
from pydantic.networks import validate_email
from pydantic_core import PydanticCustomError

MESSAGE_MIN_LENGTH = 10


class InquiryCreate(BaseModel):
    name: str = Field(min_length=1)
    email: str
    phone: str | None = None
    company: str | None = None
    message: str

    @field_validator("email")
    @classmethod
    def _valid_email(cls, value: str) -> str:
        # Stored as submitted; only display-name forms ("Jane <jane@x.com>") are reduced to the address
        _, normalized = validate_email(value)
        return value if value.lower() == normalized.lower() else normalized

    @field_validator("message")
    @classmethod
    def _message_long_enough(cls, value: str) -> str:
        if len(value) < MESSAGE_MIN_LENGTH:
            raise PydanticCustomError(
                "string_too_short",
                "Message must be at least {min_length} characters",
                {"min_length": MESSAGE_MIN_LENGTH},
            )
        return value


class InquiryResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: str | None
    company: str | None
    message: str
    created_at: datetime | None = Field(default=None, serialization_alias="createdAt")

    model_config = {"from_attributes": True}
