"""Membership lifecycle rules

Pure functions over stored user records. All calendar arithmetic uses UTC
dates so that a membership expires at the same moment for every caller.
"""

from datetime import date, datetime, timezone
from typing import Optional

from membership_portal.models.user import MembershipStatus, UserRole


def today_utc() -> date:
    return datetime.now(timezone.utc).date()


def utc_timestamp() -> str:
    """Current instant as ISO 8601 with millisecond precision"""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_date(value: Optional[str]) -> Optional[date]:
    """Parse a YYYY-MM-DD string (a trailing time component is ignored)"""
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def add_years(start: date, years: int) -> date:
    """Same calendar day ``years`` later; Feb 29 falls back to Feb 28"""
    try:
        return start.replace(year=start.year + years)
    except ValueError:
        return start.replace(year=start.year + years, day=28)


def evaluate_expiry(user: dict, today: Optional[date] = None) -> dict:
    """Return the user with its status moved to Expired when the membership has lapsed.

    Only Active non-admin members are transitioned; the input is never mutated.
    """
    if user.get("role") == UserRole.ADMIN.value:
        return user
    if user.get("status") != MembershipStatus.ACTIVE.value:
        return user

    expiry = parse_date(user.get("expiry_date"))
    if expiry is None or expiry >= (today or today_utc()):
        return user

    return {**user, "status": MembershipStatus.EXPIRED.value}


def days_until_expiry(user: dict, today: Optional[date] = None) -> Optional[int]:
    """Whole days until the expiry date, negative once it has passed"""
    expiry = parse_date(user.get("expiry_date"))
    if expiry is None:
        return None
    return (expiry - (today or today_utc())).days


def is_expiring_soon(user: dict, within_days: int = 30, today: Optional[date] = None) -> bool:
    days = days_until_expiry(user, today)
    return days is not None and 0 <= days <= within_days
