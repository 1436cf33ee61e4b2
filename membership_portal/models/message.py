"""Direct message models"""

from pydantic import Field, field_validator

from membership_portal.models.common import CamelModel, RequestModel


class MessageCreateRequest(RequestModel):
    sender_id: str = Field(min_length=1)
    receiver_id: str = Field(min_length=1)
    content: str

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Message cannot be empty")
        return v


class MarkReadRequest(RequestModel):
    user_id: str = Field(min_length=1)
    other_user_id: str = Field(min_length=1)


class MessageResponse(CamelModel):
    id: str
    sender_id: str
    receiver_id: str
    content: str
    timestamp: str
    is_read: bool = False


class MarkReadResponse(CamelModel):
    updated: int


class UnreadCountResponse(CamelModel):
    count: int
