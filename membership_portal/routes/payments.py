"""Payment routes"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Query

from membership_portal.models import (
    PaymentCreateRequest,
    PaymentResponse,
    PaymentStatus,
    PaymentStatusUpdate,
    StatusMessage,
)
from membership_portal.services.payment_service import payment_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=List[PaymentResponse])
async def list_payments(user_id: Optional[str] = Query(None, alias="userId")):
    """Whole ledger, or one member's payments, newest first"""
    if user_id:
        return payment_service.list_by_user(user_id)
    return payment_service.list_all()


@router.get("/{user_id:path}", response_model=List[PaymentResponse])
async def list_user_payments(user_id: str):
    return payment_service.list_by_user(user_id)


@router.post("", response_model=PaymentResponse, status_code=201)
async def submit_payment(request: PaymentCreateRequest):
    """Member renewal claim; awaits admin confirmation unless a status is given"""
    return payment_service.create(request, default_status=PaymentStatus.PENDING)


@router.post("/manual", response_model=PaymentResponse, status_code=201)
async def record_payment(request: PaymentCreateRequest):
    """Admin-entered payment (Successful unless a status is given)"""
    return payment_service.create(request, default_status=PaymentStatus.SUCCESSFUL)


@router.put("/{payment_id:path}", response_model=PaymentResponse)
async def update_payment_status(payment_id: str, request: PaymentStatusUpdate):
    return payment_service.update_status(payment_id, request.status)


@router.delete("/{payment_id:path}", response_model=StatusMessage, response_model_exclude_none=True)
async def delete_payment(payment_id: str):
    payment_service.delete(payment_id)
    return StatusMessage(message="Payment deleted")
