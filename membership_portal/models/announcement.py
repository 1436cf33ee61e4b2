"""Announcement models"""

from typing import Optional

from pydantic import Field

from membership_portal.models.common import CamelModel, RequestModel


class AnnouncementCreateRequest(RequestModel):
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    date: Optional[str] = None
    is_important: bool = False


class AnnouncementResponse(CamelModel):
    id: str
    title: str
    content: str
    date: str
    is_important: bool = False
