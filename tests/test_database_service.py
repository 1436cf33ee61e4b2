"""Record store tests: seeding, ordering, transactions and the id cascade"""

import errno
import json
from unittest.mock import patch

import pytest

from membership_portal.errors import StorageExhausted
from membership_portal.services.database_service import DatabaseService, GuardedJSONStorage
from tests.factories import create_message, create_user


class TestSeeding:
    """Missing collections are filled with factory defaults"""

    @pytest.mark.unit
    def test_fresh_store_is_seeded(self, store):
        """DB-001: Admin plus three members, two payments, three announcements"""
        ids = {user["id"] for user in store.get_all_users()}

        assert ids == {"admin-1", "user-1", "user-2", "user-3"}
        assert len(store.get_payments()) == 2
        assert len(store.get_announcements()) == 3
        assert store.messages.all() == []
        assert "messages" in store.db.tables()

    @pytest.mark.unit
    def test_seeded_passwords_are_hashed(self, store):
        admin = store.get_user_by_id("admin-1")

        assert admin["password_hash"].startswith("$2")
        assert "password" not in admin

    @pytest.mark.unit
    def test_empty_users_collection_is_reseeded(self, store):
        """DB-002: An emptied users table is restored on the next seeding pass"""
        store.users.truncate()

        store.ensure_seeded()

        assert store.get_user_by_id("admin-1") is not None

    @pytest.mark.unit
    def test_present_collections_are_left_alone(self, store):
        """DB-003: Deleting every payment does not bring the defaults back"""
        store.payments.truncate()

        store.ensure_seeded()

        assert store.get_payments() == []

    @pytest.mark.unit
    def test_unseeded_store(self, empty_store):
        assert empty_store.get_all_users() == []

    @pytest.mark.integration
    def test_file_store_persists(self, tmp_path):
        """DB-004: A JSON file store keeps records across reopen"""
        path = tmp_path / "data" / "portal.json"
        db = DatabaseService(str(path))
        db.create_user(create_user(user_id="user-file"))
        db.close()

        reopened = DatabaseService(str(path))

        assert reopened.get_user_by_id("user-file") is not None
        assert len(reopened.get_payments()) == 2
        reopened.close()
        assert "users" in json.loads(path.read_text())


class TestStorageErrors:

    @pytest.mark.unit
    def test_disk_full_maps_to_storage_exhausted(self, tmp_path):
        """DB-005: ENOSPC on write surfaces as StorageExhausted"""
        storage = GuardedJSONStorage(str(tmp_path / "full.json"))

        with patch("tinydb.storages.JSONStorage.write", side_effect=OSError(errno.ENOSPC, "No space left")):
            with pytest.raises(StorageExhausted):
                storage.write({})
        storage.close()

    @pytest.mark.unit
    def test_other_os_errors_propagate(self, tmp_path):
        storage = GuardedJSONStorage(str(tmp_path / "ro.json"))

        with patch("tinydb.storages.JSONStorage.write", side_effect=OSError(errno.EACCES, "Denied")):
            with pytest.raises(OSError):
                storage.write({})
        storage.close()


class TestOrdering:

    @pytest.mark.unit
    def test_announcements_newest_first(self, store):
        store.create_announcement({"id": "4", "title": "t", "content": "c", "date": "2024-10-01", "is_important": False})

        assert [a["id"] for a in store.get_announcements()] == ["4", "3", "2", "1"]

    @pytest.mark.unit
    def test_payments_newest_first(self, store):
        assert [p["id"] for p in store.get_payments("user-1")] == ["pay-2", "pay-1"]


class TestTransactions:

    @pytest.mark.unit
    def test_rollback_restores_every_collection(self, store):
        """DB-006: An exception inside a transaction undoes all writes in it"""
        with pytest.raises(RuntimeError):
            with store.transaction():
                store.update_user("user-1", {"status": "Suspended"})
                store.delete_payment("pay-1")
                raise RuntimeError("boom")

        assert store.get_user_by_id("user-1")["status"] == "Active"
        assert store.get_payment_by_id("pay-1") is not None

    @pytest.mark.unit
    def test_commit_keeps_writes(self, store):
        with store.transaction():
            store.update_user("user-1", {"status": "Suspended"})

        assert store.get_user_by_id("user-1")["status"] == "Suspended"


class TestReassignUserId:
    """Renaming a user carries every reference along"""

    @pytest.mark.unit
    def test_cascade(self, store):
        """DB-007: Payments, messages and the session follow the new id"""
        store.create_message({**create_message("user-1", "user-2"), "id": "m1", "timestamp": "t1", "is_read": False})
        store.create_message({**create_message("user-3", "user-1"), "id": "m2", "timestamp": "t2", "is_read": False})
        store.set_session({"id": "user-1", "email": "chinedu@ecolife.com"})

        store.reassign_user_id("user-1", "RAN-0001")

        assert store.get_user_by_id("user-1") is None
        assert store.get_user_by_id("RAN-0001")["email"] == "chinedu@ecolife.com"
        assert {p["user_id"] for p in store.get_payments()} == {"RAN-0001"}
        assert store.get_messages_involving("user-1") == []
        assert len(store.get_messages_involving("RAN-0001")) == 2
        assert store.get_session()["id"] == "RAN-0001"

    @pytest.mark.unit
    def test_partial_failure_rolls_back(self, store):
        """DB-008: A failure midway leaves every record on the old id"""
        store.create_message({**create_message("user-1", "user-2"), "id": "m1", "timestamp": "t1", "is_read": False})

        with patch.object(store, "_rename_message_party", side_effect=StorageExhausted()):
            with pytest.raises(StorageExhausted):
                store.reassign_user_id("user-1", "RAN-0001")

        assert store.get_user_by_id("user-1") is not None
        assert store.get_user_by_id("RAN-0001") is None
        assert {p["user_id"] for p in store.get_payments()} == {"user-1"}
        assert store.get_messages_between("user-1", "user-2")[0]["sender_id"] == "user-1"

    @pytest.mark.unit
    def test_other_session_untouched(self, store):
        store.set_session({"id": "admin-1"})

        store.reassign_user_id("user-1", "RAN-0001")

        assert store.get_session()["id"] == "admin-1"
