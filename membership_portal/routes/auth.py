"""Authentication routes"""

import logging

from fastapi import APIRouter

from membership_portal.models import (
    LoginRequest,
    PasswordResetConfirm,
    PasswordResetRequest,
    RegisterRequest,
    StatusMessage,
    UserResponse,
)
from membership_portal.services.membership_service import membership_service
from membership_portal.services.session_service import session_service

logger = logging.getLogger(__name__)
router = APIRouter()


# Password hashing is CPU-bound: these handlers are plain functions so they run in the threadpool

@router.post("/login", response_model=UserResponse)
def login(request: LoginRequest):
    """Check credentials and return the member record"""
    return membership_service.login(request.email, request.password)


@router.post("/register", response_model=UserResponse, status_code=201)
def register(request: RegisterRequest):
    """
    Register a new member.
    The account starts Pending until an administrator approves it.
    """
    return membership_service.register(request)


@router.post("/request-reset", response_model=StatusMessage, response_model_exclude_none=True)
async def request_reset(request: PasswordResetRequest):
    """Issue a password reset code (unknown emails get the same answer)"""
    debug_token = membership_service.request_password_reset(request.email)
    if debug_token:
        return StatusMessage(
            message="Email credentials not configured. Use this code to reset:",
            debug_token=debug_token,
        )
    return StatusMessage(message="If this email exists, a reset code has been sent.")


@router.post("/confirm-reset", response_model=StatusMessage, response_model_exclude_none=True)
def confirm_reset(request: PasswordResetConfirm):
    membership_service.confirm_password_reset(request.email, request.token, request.new_password)
    return StatusMessage(message="Password updated successfully. You can now log in.")


@router.post("/logout", response_model=StatusMessage, response_model_exclude_none=True)
async def logout():
    session_service.clear()
    return StatusMessage(message="Logged out")
