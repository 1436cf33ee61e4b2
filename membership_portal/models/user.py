"""User models - membership records, registration and admin edits"""

from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import Field, field_validator

from membership_portal.config import settings
from membership_portal.models.common import CamelModel, RequestModel


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


class MembershipStatus(str, Enum):
    PENDING = "Pending"
    ACTIVE = "Active"
    SUSPENDED = "Suspended"
    EXPIRED = "Expired"


class MembershipCategory(str, Enum):
    """Known membership tiers; the stored category is free-form beyond these"""
    CORPORATE = "Corporate Member"
    PATRON = "Patron"
    ASSOCIATE = "Associate Member"
    PROFESSIONAL = "Professional Member"
    HONORARY = "Honorary Member"


class BusinessCategory(str, Enum):
    LASTMILE_COLLECTOR = "Lastmile Collector"
    AGGREGATOR = "Aggregator"
    PROCESSOR = "Processor"
    RECYCLER = "Recycler"
    OTHER = "Other"


# Never leave the service layer
SENSITIVE_FIELDS = ("password_hash", "password", "reset_token", "reset_token_expiry")

DOCUMENT_FIELDS = ("cac", "logo", "evidence", "membership_id_card", "membership_certificate")

Number = Union[int, float, str]


def sanitize_user(user: Optional[dict]) -> Optional[dict]:
    """Return a copy of a stored user without credentials"""
    if user is None:
        return None
    return {key: value for key, value in user.items() if key not in SENSITIVE_FIELDS}


class UserDocuments(RequestModel):
    """Uploaded and issued files, embedded as data URLs"""
    cac: Optional[str] = None
    logo: Optional[str] = None
    evidence: Optional[str] = None
    membership_id_card: Optional[str] = None
    membership_certificate: Optional[str] = None

    @field_validator(*DOCUMENT_FIELDS)
    @classmethod
    def validate_size(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v.encode("utf-8")) > settings.max_document_bytes:
            limit_mb = settings.max_document_bytes // (1024 * 1024)
            raise ValueError(f"File exceeds the {limit_mb}MB limit")
        return v


class ProfileFields(RequestModel):
    """Profile attributes shared by registration and partial updates"""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    gender: Optional[str] = None
    dob: Optional[str] = None
    business_name: Optional[str] = None
    business_address: Optional[str] = None
    business_state: Optional[str] = None
    business_city: Optional[str] = None
    business_commencement: Optional[str] = None
    business_category: Optional[str] = None
    category: Optional[str] = None
    states_of_operation: Optional[str] = None
    material_types: Optional[List[str]] = None
    machinery_deployed: Optional[List[str]] = None
    monthly_volume: Optional[Number] = None
    employees: Optional[Number] = None
    areas_of_interest: Optional[List[str]] = None
    related_association: Optional[str] = None
    related_association_name: Optional[str] = None
    profile_image: Optional[str] = None
    documents: Optional[UserDocuments] = None


class RegisterRequest(ProfileFields):
    """Self-service registration.

    Required fields default to empty so that the registration rules can report
    every missing one at once instead of stopping at the first.
    """
    email: str = ""
    password: str = ""
    confirm_password: Optional[str] = None


class UserUpdateRequest(ProfileFields):
    """Partial update; id, email, role, password and join date are not editable here"""
    status: Optional[MembershipStatus] = None
    expiry_date: Optional[str] = None


class StatusUpdateRequest(RequestModel):
    status: MembershipStatus


class ExpiryUpdateRequest(RequestModel):
    expiry_date: str


class ReassignIdRequest(RequestModel):
    current_id: str = Field(min_length=1)
    new_id: str = Field(min_length=1)

    @field_validator("current_id", "new_id")
    @classmethod
    def strip_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("ID cannot be blank")
        return v


class UserResponse(CamelModel):
    """User as returned to callers (credentials stripped)"""
    id: str
    email: str
    role: UserRole
    status: MembershipStatus
    first_name: str = ""
    last_name: str = ""
    phone: Optional[str] = None
    gender: Optional[str] = None
    dob: Optional[str] = None
    category: Optional[str] = None
    business_name: Optional[str] = None
    business_address: Optional[str] = None
    business_state: Optional[str] = None
    business_city: Optional[str] = None
    business_commencement: Optional[str] = None
    business_category: Optional[str] = None
    states_of_operation: Optional[str] = None
    material_types: List[str] = []
    machinery_deployed: List[str] = []
    monthly_volume: Optional[Number] = None
    employees: Optional[Number] = None
    areas_of_interest: List[str] = []
    related_association: Optional[str] = None
    related_association_name: Optional[str] = None
    profile_image: Optional[str] = None
    documents: Dict[str, Optional[str]] = {}
    date_joined: Optional[str] = None
    expiry_date: Optional[str] = None


class UserStatsResponse(CamelModel):
    total: int
    active: int
    pending: int
    suspended: int
    expired: int
    expiring_soon: int


class ReminderResponse(CamelModel):
    queued: int
    recipients: List[str] = []
