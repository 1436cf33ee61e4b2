"""Password hashing tests"""

import pytest

from membership_portal.auth.passwords import hash_password, looks_hashed, verify_password


class TestPasswordHashing:

    @pytest.mark.unit
    def test_hash_round_trip(self):
        """PW-001: A hashed password verifies, a wrong one does not"""
        digest = hash_password("Admin@123")

        assert looks_hashed(digest)
        assert digest != "Admin@123"
        assert verify_password("Admin@123", digest)
        assert not verify_password("admin@123", digest)

    @pytest.mark.unit
    def test_salted(self):
        """PW-002: Two hashes of the same password differ"""
        assert hash_password("Secret@1") != hash_password("Secret@1")

    @pytest.mark.unit
    def test_legacy_plain_password(self):
        """PW-003: Records stored before hashing still match on equality"""
        assert verify_password("Password@123", "Password@123")
        assert not verify_password("Password@123", "Password@124")

    @pytest.mark.unit
    def test_empty_values_never_match(self):
        assert not verify_password("", "")
        assert not verify_password("x", None)
