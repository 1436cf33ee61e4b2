"""Messaging log - direct messages between members

Conversations are derived from the flat message list; there is no thread
record.
"""

import logging
import uuid
from typing import List, Union

from membership_portal.models.common import parse_request
from membership_portal.models.message import MessageCreateRequest
from membership_portal.models.user import sanitize_user
from membership_portal.services import lifecycle
from membership_portal.services.database_service import DatabaseService, db_service

logger = logging.getLogger(__name__)


class MessageService:
    def __init__(self, store: DatabaseService):
        self.store = store

    def send(self, data: Union[MessageCreateRequest, dict]) -> dict:
        request = parse_request(MessageCreateRequest, data)
        message = {
            "id": f"msg-{uuid.uuid4().hex[:12]}",
            "sender_id": request.sender_id,
            "receiver_id": request.receiver_id,
            "content": request.content,
            "timestamp": lifecycle.utc_timestamp(),
            "is_read": False,
        }
        self.store.create_message(message)
        logger.debug(f"Message {message['id']} sent {request.sender_id} -> {request.receiver_id}")
        return message

    def list_conversation(self, user_id: str, other_id: str) -> List[dict]:
        """Messages between the pair, oldest first"""
        # sorted() is stable, so equal timestamps keep insertion order
        return sorted(self.store.get_messages_between(user_id, other_id), key=lambda m: m["timestamp"])

    def list_counterparts(self, user_id: str) -> List[dict]:
        """Users this user has exchanged messages with"""
        seen = []
        for message in self.store.get_messages_involving(user_id):
            other = message["receiver_id"] if message["sender_id"] == user_id else message["sender_id"]
            if other != user_id and other not in seen:
                seen.append(other)

        counterparts = []
        for other in seen:
            user = self.store.get_user_by_id(other)
            if user is not None:
                counterparts.append(sanitize_user(user))
        return counterparts

    def mark_read(self, user_id: str, other_id: str) -> int:
        return self.store.mark_messages_read(user_id, other_id)

    def unread_count(self, user_id: str) -> int:
        return self.store.count_unread(user_id)


# Singleton instance
message_service = MessageService(db_service)
