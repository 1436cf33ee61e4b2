"""User routes - member records and administrative edits"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Query

from membership_portal.models import (
    ExpiryUpdateRequest,
    ReassignIdRequest,
    ReminderResponse,
    StatusMessage,
    StatusUpdateRequest,
    UserResponse,
    UserStatsResponse,
    UserUpdateRequest,
)
from membership_portal.services.membership_service import membership_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/users", response_model=List[UserResponse])
async def list_users():
    """All users; lapsed memberships are marked Expired as they are read"""
    return membership_service.get_users()


@router.get("/users/directory", response_model=List[UserResponse])
async def member_directory(
    viewer_is_admin: bool = Query(False, alias="viewerIsAdmin"),
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
):
    """Searchable member directory"""
    return membership_service.directory(viewer_is_admin, search, category, state)


@router.get("/users/expiring", response_model=List[UserResponse])
async def expiring_members(within_days: Optional[int] = Query(None, alias="withinDays", ge=0)):
    """Members due for renewal"""
    return membership_service.list_expiring(within_days)


@router.get("/users/stats", response_model=UserStatsResponse)
async def membership_stats():
    return membership_service.stats()


@router.post("/users/reminders", response_model=ReminderResponse)
async def send_reminders():
    """Email every member due for renewal"""
    return membership_service.send_expiry_reminders()


@router.post("/users/update-id", response_model=StatusMessage, response_model_exclude_none=True)
async def reassign_user_id(request: ReassignIdRequest):
    """Change a member's id, carrying payments and messages along"""
    membership_service.reassign_id(request.current_id, request.new_id)
    return StatusMessage(message="ID updated successfully")


@router.get("/user", response_model=UserResponse)
async def get_user_by_query(user_id: str = Query(..., alias="id")):
    return membership_service.get_user(user_id)


# Ids may contain "/" (membership numbers), so the id routes use the path
# converter. The /status and /expiry routes must be registered first.

@router.put("/users/{user_id:path}/status", response_model=UserResponse)
async def update_user_status(user_id: str, request: StatusUpdateRequest):
    return membership_service.update_status(user_id, request.status)


@router.put("/users/{user_id:path}/expiry", response_model=UserResponse)
async def update_user_expiry(user_id: str, request: ExpiryUpdateRequest):
    return membership_service.update_expiry(user_id, request.expiry_date)


@router.get("/users/{user_id:path}", response_model=UserResponse)
async def get_user(user_id: str):
    return membership_service.get_user(user_id)


@router.put("/users/{user_id:path}", response_model=UserResponse)
async def update_user(user_id: str, updates: UserUpdateRequest):
    """Partial profile update"""
    return membership_service.update_user(user_id, updates)
