"""Authentication and password reset models"""

from typing import Optional

from pydantic import EmailStr, Field

from membership_portal.models.common import CamelModel, RequestModel


class LoginRequest(RequestModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class PasswordResetRequest(RequestModel):
    email: EmailStr


class PasswordResetConfirm(RequestModel):
    email: EmailStr
    token: str = Field(min_length=1)
    new_password: str


class StatusMessage(CamelModel):
    """Plain acknowledgement; debug_token is only set when email is not configured"""
    message: str
    debug_token: Optional[str] = None
