"""TinyDB record store"""

import copy
import errno
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import List, Optional

from tinydb import TinyDB, Query
from tinydb.storages import JSONStorage, MemoryStorage

from membership_portal import seed
from membership_portal.config import settings
from membership_portal.errors import StorageExhausted
from membership_portal.services.lifecycle import today_utc

logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"

_STORAGE_FULL_ERRNOS = {errno.ENOSPC, getattr(errno, "EDQUOT", errno.ENOSPC)}


class GuardedJSONStorage(JSONStorage):
    """JSON file storage that reports a full disk as StorageExhausted"""

    def write(self, data):
        try:
            super().write(data)
        except OSError as e:
            if e.errno in _STORAGE_FULL_ERRNOS:
                logger.error(f"Record store write failed, storage full: {e}")
                raise StorageExhausted() from e
            raise


class DatabaseService:
    """TinyDB record store for portal data

    Holds the four collections (users, announcements, payments, messages) and
    the session record. A collection missing from storage is seeded with the
    factory defaults the first time the store is opened.
    """

    def __init__(self, db_path: Optional[str] = None, seed_defaults: Optional[bool] = None):
        self.db: Optional[TinyDB] = None
        self._db_path: Optional[str] = None
        self._seed_defaults = settings.seed_defaults if seed_defaults is None else seed_defaults
        self.open(db_path or settings.database_path)

    def open(self, db_path: str):
        """(Re)connect to the given path, seeding missing collections"""
        self.close()
        self._db_path = db_path
        if db_path == MEMORY_PATH:
            self.db = TinyDB(storage=MemoryStorage)
        else:
            path = Path(db_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            self.db = TinyDB(str(path), storage=GuardedJSONStorage)
        logger.info(f"Database connected: {db_path}")

        if self._seed_defaults:
            self.ensure_seeded()

    def close(self):
        if self.db is not None:
            self.db.close()
            self.db = None

    def _ensure_db(self):
        if self.db is None:
            self.open(self._db_path or settings.database_path)

    @property
    def users(self):
        """Users table"""
        self._ensure_db()
        return self.db.table("users")

    @property
    def announcements(self):
        """Announcements table"""
        self._ensure_db()
        return self.db.table("announcements")

    @property
    def payments(self):
        """Payments table"""
        self._ensure_db()
        return self.db.table("payments")

    @property
    def messages(self):
        """Messages table"""
        self._ensure_db()
        return self.db.table("messages")

    @property
    def session(self):
        """Session table (at most one record: the logged-in user)"""
        self._ensure_db()
        return self.db.table("session")

    # =========================================================================
    # Seeding
    # =========================================================================

    def ensure_seeded(self):
        """Seed every collection that is absent from storage.

        An empty users collection is re-seeded as well so that the portal
        always has an administrator to log in with.
        """
        present = self.db.tables()

        if "users" not in present or len(self.users) == 0:
            self.users.truncate()
            self.users.insert_multiple(seed.default_users(
                today_utc(),
                admin_email=settings.default_admin_email,
                admin_password=settings.default_admin_password,
                member_password=settings.default_member_password,
            ))
            logger.info("Seeded default users")

        if "payments" not in present:
            self.payments.insert_multiple(seed.default_payments())
            logger.info("Seeded default payments")

        if "announcements" not in present:
            self.announcements.insert_multiple(seed.default_announcements())
            logger.info("Seeded default announcements")

        if "messages" not in present:
            # Writes the empty table so it counts as present next time
            self.messages.truncate()

    def reset(self):
        """Drop everything and reseed (factory defaults)"""
        self._ensure_db()
        self.db.drop_tables()
        self.ensure_seeded()
        logger.info("Record store reset to defaults")

    # =========================================================================
    # Transactions
    # =========================================================================

    @contextmanager
    def transaction(self):
        """All-or-nothing block: storage is restored to its prior state on error"""
        self._ensure_db()
        snapshot = copy.deepcopy(self.db.storage.read()) or {}
        try:
            yield self
        except Exception:
            self.db.storage.write(snapshot)
            for name in snapshot:
                self.db.table(name).clear_cache()
            logger.warning("Transaction rolled back")
            raise

    # =========================================================================
    # User Operations
    # =========================================================================

    def get_user_by_id(self, user_id: str) -> Optional[dict]:
        """Get user by ID"""
        User = Query()
        result = self.users.search(User.id == user_id)
        return dict(result[0]) if result else None

    def get_user_by_email(self, email: str) -> Optional[dict]:
        """Get user by email (exact, case-sensitive match)"""
        User = Query()
        result = self.users.search(User.email == email)
        return dict(result[0]) if result else None

    def get_all_users(self) -> List[dict]:
        return [dict(user) for user in self.users.all()]

    def create_user(self, user_data: dict) -> dict:
        """Create a new user"""
        self.users.insert(user_data)
        logger.info(f"User created: {user_data['id']}")
        return user_data

    def update_user(self, user_id: str, updates: dict) -> Optional[dict]:
        """Update user"""
        User = Query()
        if not self.users.update(updates, User.id == user_id):
            return None
        return self.get_user_by_id(user_id)

    def reassign_user_id(self, current_id: str, new_id: str):
        """Rename a user and every reference to it in one transaction"""
        User = Query()
        with self.transaction():
            self.users.update({"id": new_id}, User.id == current_id)
            payments = self._rename_payment_owner(current_id, new_id)
            messages = self._rename_message_party(current_id, new_id)
            self.rename_session_user(current_id, new_id)
        logger.info(
            f"User id reassigned: {current_id} -> {new_id} "
            f"({payments} payments, {messages} messages)"
        )

    def _rename_payment_owner(self, current_id: str, new_id: str) -> int:
        Payment = Query()
        return len(self.payments.update({"user_id": new_id}, Payment.user_id == current_id))

    def _rename_message_party(self, current_id: str, new_id: str) -> int:
        Message = Query()
        sent = self.messages.update({"sender_id": new_id}, Message.sender_id == current_id)
        received = self.messages.update({"receiver_id": new_id}, Message.receiver_id == current_id)
        return len(set(sent) | set(received))

    def rename_session_user(self, current_id: str, new_id: str):
        Session = Query()
        self.session.update({"id": new_id}, Session.id == current_id)

    # =========================================================================
    # Announcement Operations
    # =========================================================================

    def get_announcements(self) -> List[dict]:
        """All announcements, newest first"""
        return _newest_first(self.announcements.all())

    def create_announcement(self, announcement: dict) -> dict:
        self.announcements.insert(announcement)
        logger.info(f"Announcement created: {announcement['id']}")
        return announcement

    def delete_announcement(self, announcement_id: str) -> bool:
        Announcement = Query()
        removed = self.announcements.remove(Announcement.id == announcement_id)
        if removed:
            logger.info(f"Announcement deleted: {announcement_id}")
        return bool(removed)

    # =========================================================================
    # Payment Operations
    # =========================================================================

    def get_payment_by_id(self, payment_id: str) -> Optional[dict]:
        Payment = Query()
        result = self.payments.search(Payment.id == payment_id)
        return dict(result[0]) if result else None

    def get_payments(self, user_id: Optional[str] = None) -> List[dict]:
        """Payments, newest first, optionally for a single user"""
        if user_id is None:
            return _newest_first(self.payments.all())
        Payment = Query()
        return _newest_first(self.payments.search(Payment.user_id == user_id))

    def create_payment(self, payment: dict) -> dict:
        self.payments.insert(payment)
        logger.info(f"Payment created: {payment['id']} for {payment['user_id']} ({payment['status']})")
        return payment

    def update_payment(self, payment_id: str, updates: dict) -> Optional[dict]:
        Payment = Query()
        if not self.payments.update(updates, Payment.id == payment_id):
            return None
        return self.get_payment_by_id(payment_id)

    def delete_payment(self, payment_id: str) -> bool:
        Payment = Query()
        removed = self.payments.remove(Payment.id == payment_id)
        if removed:
            logger.info(f"Payment deleted: {payment_id}")
        return bool(removed)

    # =========================================================================
    # Message Operations
    # =========================================================================

    def create_message(self, message: dict) -> dict:
        self.messages.insert(message)
        return message

    def get_messages_between(self, user_id: str, other_id: str) -> List[dict]:
        """Messages exchanged by the pair, in insertion order"""
        Message = Query()
        results = self.messages.search(
            ((Message.sender_id == user_id) & (Message.receiver_id == other_id))
            | ((Message.sender_id == other_id) & (Message.receiver_id == user_id))
        )
        return [dict(doc) for doc in sorted(results, key=lambda doc: doc.doc_id)]

    def get_messages_involving(self, user_id: str) -> List[dict]:
        Message = Query()
        results = self.messages.search((Message.sender_id == user_id) | (Message.receiver_id == user_id))
        return [dict(doc) for doc in sorted(results, key=lambda doc: doc.doc_id)]

    def mark_messages_read(self, user_id: str, other_id: str) -> int:
        """Flag as read every unread message sent by other_id to user_id"""
        Message = Query()
        updated = self.messages.update(
            {"is_read": True},
            (Message.receiver_id == user_id)
            & (Message.sender_id == other_id)
            & (Message.is_read == False)  # noqa: E712
        )
        return len(updated)

    def count_unread(self, user_id: str) -> int:
        Message = Query()
        return self.messages.count((Message.receiver_id == user_id) & (Message.is_read == False))  # noqa: E712

    # =========================================================================
    # Session Operations
    # =========================================================================

    def get_session(self) -> Optional[dict]:
        records = self.session.all()
        return dict(records[0]) if records else None

    def set_session(self, record: dict):
        self.session.truncate()
        self.session.insert(record)

    def clear_session(self):
        self.session.truncate()


def _newest_first(documents) -> List[dict]:
    return [dict(doc) for doc in sorted(documents, key=lambda doc: doc.doc_id, reverse=True)]


# Singleton instance
db_service = DatabaseService()
