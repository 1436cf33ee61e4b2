"""Direct message routes (clients poll; there is no push channel)"""

import logging
from typing import List

from fastapi import APIRouter, Query

from membership_portal.models import (
    MarkReadRequest,
    MarkReadResponse,
    MessageCreateRequest,
    MessageResponse,
    UnreadCountResponse,
    UserResponse,
)
from membership_portal.services.message_service import message_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", response_model=MessageResponse, status_code=201)
async def send_message(request: MessageCreateRequest):
    return message_service.send(request)


@router.get("/chat", response_model=List[MessageResponse])
async def get_conversation(
    user_id: str = Query(..., alias="userId"),
    other_user_id: str = Query(..., alias="otherUserId"),
):
    """Messages between two users, oldest first"""
    return message_service.list_conversation(user_id, other_user_id)


@router.get("/conversations", response_model=List[UserResponse])
async def get_conversations(user_id: str = Query(..., alias="userId")):
    """Users the given user has exchanged messages with"""
    return message_service.list_counterparts(user_id)


@router.put("/read", response_model=MarkReadResponse)
async def mark_read(request: MarkReadRequest):
    updated = message_service.mark_read(request.user_id, request.other_user_id)
    return MarkReadResponse(updated=updated)


@router.get("/unread", response_model=UnreadCountResponse)
async def unread_count(user_id: str = Query(..., alias="userId")):
    return UnreadCountResponse(count=message_service.unread_count(user_id))
