"""Session store: the sanitized record of the logged-in user"""

import json
import logging
from typing import List, Optional

from membership_portal.config import settings
from membership_portal.errors import StorageExhausted
from membership_portal.models.user import sanitize_user
from membership_portal.services.database_service import DatabaseService, db_service

logger = logging.getLogger(__name__)

MINIMAL_SESSION_FIELDS = ("id", "first_name", "last_name", "email", "role", "status", "business_name")


def session_candidates(user: dict) -> List[dict]:
    """Progressively smaller versions of a user record, largest first"""
    full = sanitize_user(user)
    without_image = {k: v for k, v in full.items() if k != "profile_image"}
    without_files = {k: v for k, v in without_image.items() if k != "documents"}
    minimal = {k: full[k] for k in MINIMAL_SESSION_FIELDS if k in full}
    return [full, without_image, without_files, minimal]


def record_size(record: dict) -> int:
    return len(json.dumps(record, separators=(",", ":")).encode("utf-8"))


class SessionService:
    """Persists the current user, dropping large optional fields when space is short"""

    def __init__(self, store: DatabaseService, max_bytes: Optional[int] = None):
        self.store = store
        self.max_bytes = settings.session_max_bytes if max_bytes is None else max_bytes

    def save(self, user: dict) -> dict:
        """Store the largest form of the record that fits and return it"""
        for rung, candidate in enumerate(session_candidates(user)):
            if record_size(candidate) > self.max_bytes:
                continue
            try:
                self.store.set_session(candidate)
            except StorageExhausted:
                continue
            if rung:
                logger.warning(f"Session for {user.get('id')} stored without large fields")
            return candidate

        logger.error(f"Session for {user.get('id')} does not fit in storage")
        raise StorageExhausted("Storage is full. Unable to save your session.")

    def load(self) -> Optional[dict]:
        return self.store.get_session()

    def clear(self):
        self.store.clear_session()

    def rename(self, old_id: str, new_id: str):
        self.store.rename_session_user(old_id, new_id)

    def refresh_if_current(self, user: dict) -> Optional[dict]:
        """Re-save the session when it belongs to the given user"""
        current = self.load()
        if current is None or current.get("id") != user.get("id"):
            return None
        return self.save(user)


session_service = SessionService(db_service)
