"""Models package - Pydantic models for API request/response"""

from membership_portal.models.common import CamelModel, RequestModel, parse_request
from membership_portal.models.user import (
    UserRole,
    MembershipStatus,
    MembershipCategory,
    BusinessCategory,
    UserDocuments,
    RegisterRequest,
    UserUpdateRequest,
    StatusUpdateRequest,
    ExpiryUpdateRequest,
    ReassignIdRequest,
    UserResponse,
    UserStatsResponse,
    ReminderResponse,
    sanitize_user,
)
from membership_portal.models.payment import (
    PaymentStatus,
    PaymentCreateRequest,
    PaymentStatusUpdate,
    PaymentResponse,
)
from membership_portal.models.message import (
    MessageCreateRequest,
    MarkReadRequest,
    MessageResponse,
    MarkReadResponse,
    UnreadCountResponse,
)
from membership_portal.models.announcement import (
    AnnouncementCreateRequest,
    AnnouncementResponse,
)
from membership_portal.models.auth import (
    LoginRequest,
    PasswordResetRequest,
    PasswordResetConfirm,
    StatusMessage,
)

__all__ = [
    # Common
    "CamelModel",
    "RequestModel",
    "parse_request",
    # User
    "UserRole",
    "MembershipStatus",
    "MembershipCategory",
    "BusinessCategory",
    "UserDocuments",
    "RegisterRequest",
    "UserUpdateRequest",
    "StatusUpdateRequest",
    "ExpiryUpdateRequest",
    "ReassignIdRequest",
    "UserResponse",
    "UserStatsResponse",
    "ReminderResponse",
    "sanitize_user",
    # Payment
    "PaymentStatus",
    "PaymentCreateRequest",
    "PaymentStatusUpdate",
    "PaymentResponse",
    # Message
    "MessageCreateRequest",
    "MarkReadRequest",
    "MessageResponse",
    "MarkReadResponse",
    "UnreadCountResponse",
    # Announcement
    "AnnouncementCreateRequest",
    "AnnouncementResponse",
    # Auth
    "LoginRequest",
    "PasswordResetRequest",
    "PasswordResetConfirm",
    "StatusMessage",
]
