"""Payment models"""

from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from membership_portal.config import settings
from membership_portal.models.common import CamelModel, RequestModel


class PaymentStatus(str, Enum):
    SUCCESSFUL = "Successful"
    PENDING = "Pending"
    FAILED = "Failed"


class PaymentCreateRequest(RequestModel):
    """Renewal claim or manual record"""
    user_id: str = Field(min_length=1)
    amount: float = Field(gt=0)
    description: str = Field(min_length=1)
    date: Optional[str] = None
    status: Optional[PaymentStatus] = None
    currency: str = "NGN"
    receipt: Optional[str] = None

    @field_validator("receipt")
    @classmethod
    def validate_receipt_size(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v.encode("utf-8")) > settings.max_receipt_bytes:
            limit_mb = settings.max_receipt_bytes // (1024 * 1024)
            raise ValueError(f"Receipt exceeds the {limit_mb}MB limit")
        return v


class PaymentStatusUpdate(RequestModel):
    status: PaymentStatus


class PaymentResponse(CamelModel):
    id: str
    user_id: str
    amount: float
    currency: str = "NGN"
    date: str
    description: str
    status: PaymentStatus
    reference: str
    receipt: Optional[str] = None
