"""Test data factories for Membership Portal tests"""

import uuid
from datetime import timedelta
from functools import lru_cache
from typing import Optional

from membership_portal.auth.passwords import hash_password
from membership_portal.services.lifecycle import today_utc

DEFAULT_PASSWORD = "Secret@123"

# Seeded accounts
ADMIN_EMAIL = "admin@ran.org.ng"
ADMIN_PASSWORD = "Admin@123"
MEMBER_PASSWORD = "Password@123"


@lru_cache()
def _default_hash() -> str:
    return hash_password(DEFAULT_PASSWORD)


def days_from_today(days: int) -> str:
    return (today_utc() + timedelta(days=days)).isoformat()


def create_user(
    user_id: Optional[str] = None,
    email: Optional[str] = None,
    role: str = "MEMBER",
    status: str = "Active",
    expiry_date: Optional[str] = None,
    **fields
) -> dict:
    """Create a stored user record for testing"""
    uid = user_id or f"user-{uuid.uuid4().hex[:8]}"
    record = {
        "id": uid,
        "email": email or f"{uid}@example.com",
        "password_hash": _default_hash(),
        "role": role,
        "status": status,
        "category": "Corporate Member",
        "first_name": "Test",
        "last_name": "Member",
        "phone": "08011112222",
        "business_name": f"Business {uid}",
        "business_address": "1 Market Road",
        "business_state": "Lagos",
        "business_category": "Aggregator",
        "material_types": ["PET Plastics"],
        "machinery_deployed": [],
        "monthly_volume": "10",
        "employees": 5,
        "areas_of_interest": [],
        "profile_image": None,
        "documents": {},
        "date_joined": days_from_today(-30),
        "expiry_date": expiry_date or days_from_today(200),
    }
    record.update(fields)
    return record


def registration_payload(**overrides) -> dict:
    """A valid registration body (camelCase, as sent by the SPA)"""
    suffix = uuid.uuid4().hex[:8]
    payload = {
        "firstName": "Ngozi",
        "lastName": "Adeyemi",
        "email": f"ngozi-{suffix}@cleanplanet.ng",
        "phone": "0803 123 4567",
        "password": "Strong@Pass1",
        "businessName": "Clean Planet Ventures",
        "businessAddress": "12 Allen Avenue, Ikeja",
        "businessState": "Lagos",
        "businessCategory": "Recycler",
        "category": "Corporate Member",
        "materialTypes": ["PET Plastics", "Paper"],
        "machineryDeployed": ["Baler"],
        "monthlyVolume": "20",
        "employees": 12,
    }
    payload.update(overrides)
    return payload


def create_payment(
    user_id: str,
    amount: float = 50000,
    status: Optional[str] = None,
    description: str = "Membership Renewal",
    **fields
) -> dict:
    """Payment request body (snake_case)"""
    payment = {
        "user_id": user_id,
        "amount": amount,
        "description": description,
    }
    if status is not None:
        payment["status"] = status
    payment.update(fields)
    return payment


def create_message(sender_id: str, receiver_id: str, content: str = "Hello") -> dict:
    return {"sender_id": sender_id, "receiver_id": receiver_id, "content": content}
