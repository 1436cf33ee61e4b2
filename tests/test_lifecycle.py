"""Membership lifecycle rule tests"""

from datetime import date

import pytest

from membership_portal.services import lifecycle
from tests.factories import create_user

TODAY = date(2025, 6, 15)


class TestEvaluateExpiry:
    """Automatic Active -> Expired transition"""

    @pytest.mark.unit
    def test_lapsed_active_member_expires(self):
        """LC-001: Active member past the expiry date becomes Expired"""
        user = create_user(status="Active", expiry_date="2025-06-14")

        result = lifecycle.evaluate_expiry(user, TODAY)

        assert result["status"] == "Expired"
        assert user["status"] == "Active"

    @pytest.mark.unit
    def test_expiry_day_itself_is_still_active(self):
        """LC-002: Membership is valid through its expiry date"""
        user = create_user(status="Active", expiry_date="2025-06-15")

        assert lifecycle.evaluate_expiry(user, TODAY)["status"] == "Active"

    @pytest.mark.unit
    def test_idempotent(self):
        """LC-003: Applying the rule twice equals applying it once"""
        user = create_user(status="Active", expiry_date="2024-01-01")

        once = lifecycle.evaluate_expiry(user, TODAY)
        twice = lifecycle.evaluate_expiry(once, TODAY)

        assert once == twice

    @pytest.mark.unit
    def test_admin_never_expires(self):
        """LC-004: ADMIN accounts are exempt whatever the date"""
        admin = create_user(role="ADMIN", status="Active", expiry_date="2000-01-01")

        assert lifecycle.evaluate_expiry(admin, TODAY) is admin

    @pytest.mark.unit
    @pytest.mark.parametrize("status", ["Pending", "Suspended", "Expired"])
    def test_other_statuses_untouched(self, status):
        """LC-005: Only Active members are transitioned"""
        user = create_user(status=status, expiry_date="2020-01-01")

        assert lifecycle.evaluate_expiry(user, TODAY)["status"] == status

    @pytest.mark.unit
    def test_missing_expiry_date(self):
        """LC-006: A record without an expiry date is left alone"""
        user = create_user(status="Active", expiry_date=None)
        user["expiry_date"] = None

        assert lifecycle.evaluate_expiry(user, TODAY)["status"] == "Active"


class TestExpiryWindow:
    """Days-until-expiry and the renewal warning window"""

    @pytest.mark.unit
    def test_days_until_expiry(self):
        assert lifecycle.days_until_expiry({"expiry_date": "2025-06-25"}, TODAY) == 10
        assert lifecycle.days_until_expiry({"expiry_date": "2025-06-10"}, TODAY) == -5
        assert lifecycle.days_until_expiry({"expiry_date": None}, TODAY) is None

    @pytest.mark.unit
    def test_is_expiring_soon_bounds(self):
        assert lifecycle.is_expiring_soon({"expiry_date": "2025-06-15"}, 30, TODAY)
        assert lifecycle.is_expiring_soon({"expiry_date": "2025-07-15"}, 30, TODAY)
        assert not lifecycle.is_expiring_soon({"expiry_date": "2025-07-16"}, 30, TODAY)
        assert not lifecycle.is_expiring_soon({"expiry_date": "2025-06-14"}, 30, TODAY)

    @pytest.mark.unit
    def test_timestamp_suffix_ignored(self):
        """LC-007: ISO timestamps compare by their calendar date"""
        assert lifecycle.parse_date("2025-06-15T23:59:59Z") == TODAY
        assert lifecycle.parse_date("not-a-date") is None


class TestAddYears:

    @pytest.mark.unit
    def test_regular_date(self):
        assert lifecycle.add_years(date(2024, 3, 1), 1) == date(2025, 3, 1)

    @pytest.mark.unit
    def test_leap_day_falls_back(self):
        assert lifecycle.add_years(date(2024, 2, 29), 1) == date(2025, 2, 28)
