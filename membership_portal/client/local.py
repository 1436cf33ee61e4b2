"""Mock-mode facade: calls the services against the local record store"""

import asyncio
import logging
from typing import List, Optional

from membership_portal.client.facade import PortalApi
from membership_portal.models import (
    AnnouncementResponse,
    MessageResponse,
    PaymentResponse,
    PaymentStatus,
    StatusMessage,
    UserResponse,
    UserStatsResponse,
)
from membership_portal.services.announcement_service import AnnouncementService
from membership_portal.services.database_service import DatabaseService
from membership_portal.services.membership_service import MembershipService
from membership_portal.services.message_service import MessageService
from membership_portal.services.payment_service import PaymentService
from membership_portal.services.session_service import SessionService

logger = logging.getLogger(__name__)


def _users(records) -> List[UserResponse]:
    return [UserResponse.model_validate(record) for record in records]


class LocalPortalApi(PortalApi):
    """Facade over the in-process services.

    ``latency_ms`` adds an artificial delay before every call so that UIs
    behave as they would against a real server.
    """

    def __init__(
        self,
        store: DatabaseService,
        latency_ms: int = 0,
        session: Optional[SessionService] = None,
        membership: Optional[MembershipService] = None,
    ):
        super().__init__(session or SessionService(store))
        self.store = store
        self.latency_ms = latency_ms
        self.membership = membership or MembershipService(store)
        self.payments = PaymentService(store)
        self.messages = MessageService(store)
        self.announcements = AnnouncementService(store)

    async def _delay(self):
        if self.latency_ms > 0:
            await asyncio.sleep(self.latency_ms / 1000)

    # Authentication

    async def login(self, email, password):
        await self._delay()
        user = UserResponse.model_validate(self.membership.login(email, password))
        return self._remember(user)

    async def register(self, data):
        await self._delay()
        return UserResponse.model_validate(self.membership.register(data))

    async def request_password_reset(self, email):
        await self._delay()
        debug_token = self.membership.request_password_reset(email)
        if debug_token:
            return StatusMessage(
                message="Email credentials not configured. Use this code to reset:",
                debug_token=debug_token,
            )
        return StatusMessage(message="If this email exists, a reset code has been sent.")

    async def confirm_password_reset(self, email, token, new_password):
        await self._delay()
        self.membership.confirm_password_reset(email, token, new_password)
        return StatusMessage(message="Password updated successfully. You can now log in.")

    # Users

    async def get_user(self, user_id):
        await self._delay()
        return UserResponse.model_validate(self.membership.get_user(user_id))

    async def get_users(self):
        await self._delay()
        return _users(self.membership.get_users())

    async def get_directory(self, viewer_is_admin=False, search=None, category=None, state=None):
        await self._delay()
        return _users(self.membership.directory(viewer_is_admin, search, category, state))

    async def get_expiring_users(self, within_days=None):
        await self._delay()
        return _users(self.membership.list_expiring(within_days))

    async def get_stats(self):
        await self._delay()
        return UserStatsResponse.model_validate(self.membership.stats())

    async def update_user(self, user_id, updates):
        await self._delay()
        user = UserResponse.model_validate(self.membership.update_user(user_id, updates))
        return self._refresh_session(user)

    async def update_user_id(self, current_id, new_id):
        await self._delay()
        # The store renames the session record in the same transaction
        self.membership.reassign_id(current_id, new_id)

    async def update_user_status(self, user_id, status):
        await self._delay()
        user = UserResponse.model_validate(self.membership.update_status(user_id, status))
        return self._refresh_session(user)

    async def update_user_expiry(self, user_id, expiry_date):
        await self._delay()
        user = UserResponse.model_validate(self.membership.update_expiry(user_id, expiry_date))
        return self._refresh_session(user)

    # Announcements

    async def get_announcements(self):
        await self._delay()
        return [AnnouncementResponse.model_validate(a) for a in self.announcements.list()]

    async def create_announcement(self, data):
        await self._delay()
        return AnnouncementResponse.model_validate(self.announcements.create(data))

    async def delete_announcement(self, announcement_id):
        await self._delay()
        self.announcements.delete(announcement_id)

    # Payments

    async def get_all_payments(self):
        await self._delay()
        return [PaymentResponse.model_validate(p) for p in self.payments.list_all()]

    async def get_payments(self, user_id):
        await self._delay()
        return [PaymentResponse.model_validate(p) for p in self.payments.list_by_user(user_id)]

    async def create_payment(self, data):
        await self._delay()
        return PaymentResponse.model_validate(self.payments.create(data, default_status=PaymentStatus.PENDING))

    async def record_payment(self, data):
        await self._delay()
        return PaymentResponse.model_validate(self.payments.create(data, default_status=PaymentStatus.SUCCESSFUL))

    async def update_payment_status(self, payment_id, status):
        await self._delay()
        return PaymentResponse.model_validate(self.payments.update_status(payment_id, status))

    async def delete_payment(self, payment_id):
        await self._delay()
        self.payments.delete(payment_id)

    # Messages

    async def get_conversations(self, user_id):
        await self._delay()
        return _users(self.messages.list_counterparts(user_id))

    async def get_messages(self, user_id, other_user_id):
        await self._delay()
        return [MessageResponse.model_validate(m) for m in self.messages.list_conversation(user_id, other_user_id)]

    async def send_message(self, sender_id, receiver_id, content):
        await self._delay()
        message = self.messages.send({"sender_id": sender_id, "receiver_id": receiver_id, "content": content})
        return MessageResponse.model_validate(message)

    async def mark_messages_read(self, user_id, other_user_id):
        await self._delay()
        return self.messages.mark_read(user_id, other_user_id)

    async def get_unread_count(self, user_id):
        await self._delay()
        return self.messages.unread_count(user_id)
