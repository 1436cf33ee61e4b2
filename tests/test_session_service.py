"""Session store tests: the size ladder"""

from unittest.mock import patch

import pytest

from membership_portal.errors import StorageExhausted
from membership_portal.services.session_service import SessionService, record_size, session_candidates
from tests.factories import create_user


def _big_user() -> dict:
    return create_user(
        user_id="user-big",
        profile_image="i" * 4000,
        documents={"cac": "d" * 4000},
    )


class TestSessionLadder:

    @pytest.mark.unit
    def test_full_record_when_it_fits(self, store):
        """SS-001: With room to spare the whole sanitized record is stored"""
        sessions = SessionService(store, max_bytes=64 * 1024)

        saved = sessions.save(_big_user())

        assert saved["profile_image"]
        assert "password_hash" not in saved
        assert sessions.load() == saved

    @pytest.mark.unit
    def test_drops_profile_image_first(self, store):
        user = _big_user()
        full, without_image, _, _ = session_candidates(user)
        sessions = SessionService(store, max_bytes=record_size(without_image))

        saved = sessions.save(user)

        assert "profile_image" not in saved
        assert saved["documents"] == {"cac": "d" * 4000}

    @pytest.mark.unit
    def test_then_documents(self, store):
        user = _big_user()
        _, _, without_files, _ = session_candidates(user)
        sessions = SessionService(store, max_bytes=record_size(without_files))

        saved = sessions.save(user)

        assert "documents" not in saved
        assert saved["business_name"] == "Business user-big"

    @pytest.mark.unit
    def test_minimal_subset(self, store):
        """SS-002: The last rung keeps only the identifying fields"""
        user = _big_user()
        minimal = session_candidates(user)[-1]
        sessions = SessionService(store, max_bytes=record_size(minimal))

        saved = sessions.save(user)

        assert set(saved) == {"id", "first_name", "last_name", "email", "role", "status", "business_name"}

    @pytest.mark.unit
    def test_exhausted(self, store):
        """SS-003: StorageExhausted only when even the minimal record will not fit"""
        sessions = SessionService(store, max_bytes=10)

        with pytest.raises(StorageExhausted):
            sessions.save(_big_user())

        assert sessions.load() is None

    @pytest.mark.unit
    def test_write_failure_moves_down_the_ladder(self, store):
        sessions = SessionService(store, max_bytes=64 * 1024)
        real_set = store.set_session
        calls = []

        def flaky(record):
            calls.append(record)
            if len(calls) == 1:
                raise StorageExhausted()
            real_set(record)

        with patch.object(store, "set_session", side_effect=flaky):
            saved = sessions.save(_big_user())

        assert "profile_image" not in saved


class TestSessionLifecycle:

    @pytest.mark.unit
    def test_clear(self, sessions):
        sessions.save(create_user(user_id="user-x"))
        sessions.clear()

        assert sessions.load() is None

    @pytest.mark.unit
    def test_refresh_only_for_current_user(self, sessions):
        sessions.save(create_user(user_id="user-x", first_name="Old"))

        assert sessions.refresh_if_current(create_user(user_id="user-y")) is None
        sessions.refresh_if_current(create_user(user_id="user-x", first_name="New"))

        assert sessions.load()["first_name"] == "New"

    @pytest.mark.unit
    def test_rename(self, sessions):
        sessions.save(create_user(user_id="user-x"))

        sessions.rename("user-x", "RAN-9")

        assert sessions.load()["id"] == "RAN-9"
