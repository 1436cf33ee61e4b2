"""Announcements posted by administrators"""

import logging
import uuid
from typing import List, Union

from membership_portal.models.announcement import AnnouncementCreateRequest
from membership_portal.models.common import parse_request
from membership_portal.services import lifecycle
from membership_portal.services.database_service import DatabaseService, db_service

logger = logging.getLogger(__name__)


class AnnouncementService:
    def __init__(self, store: DatabaseService):
        self.store = store

    def list(self) -> List[dict]:
        return self.store.get_announcements()

    def create(self, data: Union[AnnouncementCreateRequest, dict]) -> dict:
        request = parse_request(AnnouncementCreateRequest, data)
        announcement = {
            "id": f"ann-{uuid.uuid4().hex[:12]}",
            "title": request.title,
            "content": request.content,
            "date": request.date or lifecycle.today_utc().isoformat(),
            "is_important": request.is_important,
        }
        return self.store.create_announcement(announcement)

    def delete(self, announcement_id: str) -> bool:
        return self.store.delete_announcement(announcement_id)


# Singleton instance
announcement_service = AnnouncementService(db_service)
