"""Announcement routes"""

import logging
from typing import List

from fastapi import APIRouter

from membership_portal.models import AnnouncementCreateRequest, AnnouncementResponse, StatusMessage
from membership_portal.services.announcement_service import announcement_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=List[AnnouncementResponse])
async def list_announcements():
    """Announcements, newest first"""
    return announcement_service.list()


@router.post("", response_model=AnnouncementResponse, status_code=201)
async def create_announcement(request: AnnouncementCreateRequest):
    return announcement_service.create(request)


@router.delete("/{announcement_id:path}", response_model=StatusMessage, response_model_exclude_none=True)
async def delete_announcement(announcement_id: str):
    announcement_service.delete(announcement_id)
    return StatusMessage(message="Announcement deleted")
