"""Portal API facade

One async operation per capability. Callers get the same return types and the
same ``PortalError`` subclasses whether the calls are served by the local
record store or by a remote portal server.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Union

from membership_portal.models import (
    AnnouncementCreateRequest,
    AnnouncementResponse,
    MembershipStatus,
    MessageResponse,
    PaymentCreateRequest,
    PaymentResponse,
    PaymentStatus,
    RegisterRequest,
    StatusMessage,
    UserResponse,
    UserStatsResponse,
    UserUpdateRequest,
)
from membership_portal.services.session_service import SessionService


class PortalApi(ABC):
    """Uniform portal client.

    The logged-in user is kept in a :class:`SessionService`; ``login`` stores
    it and ``update_user`` refreshes it when the session user is edited.
    """

    def __init__(self, session: SessionService):
        self.session = session

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    async def aclose(self):
        """Release any held resources"""

    async def get_current_user(self) -> Optional[UserResponse]:
        record = self.session.load()
        return UserResponse.model_validate(record) if record else None

    async def logout(self):
        self.session.clear()

    def _remember(self, user: UserResponse) -> UserResponse:
        self.session.save(user.model_dump(mode="json"))
        return user

    def _refresh_session(self, user: UserResponse) -> UserResponse:
        self.session.refresh_if_current(user.model_dump(mode="json"))
        return user

    # Authentication

    @abstractmethod
    async def login(self, email: str, password: str) -> UserResponse:
        ...

    @abstractmethod
    async def register(self, data: Union[RegisterRequest, dict]) -> UserResponse:
        ...

    @abstractmethod
    async def request_password_reset(self, email: str) -> StatusMessage:
        ...

    @abstractmethod
    async def confirm_password_reset(self, email: str, token: str, new_password: str) -> StatusMessage:
        ...

    # Users

    @abstractmethod
    async def get_user(self, user_id: str) -> UserResponse:
        ...

    @abstractmethod
    async def get_users(self) -> List[UserResponse]:
        ...

    @abstractmethod
    async def get_directory(
        self,
        viewer_is_admin: bool = False,
        search: Optional[str] = None,
        category: Optional[str] = None,
        state: Optional[str] = None,
    ) -> List[UserResponse]:
        ...

    @abstractmethod
    async def get_expiring_users(self, within_days: Optional[int] = None) -> List[UserResponse]:
        ...

    @abstractmethod
    async def get_stats(self) -> UserStatsResponse:
        ...

    @abstractmethod
    async def update_user(self, user_id: str, updates: Union[UserUpdateRequest, dict]) -> UserResponse:
        ...

    @abstractmethod
    async def update_user_id(self, current_id: str, new_id: str):
        ...

    @abstractmethod
    async def update_user_status(self, user_id: str, status: Union[MembershipStatus, str]) -> UserResponse:
        ...

    @abstractmethod
    async def update_user_expiry(self, user_id: str, expiry_date: str) -> UserResponse:
        ...

    # Announcements

    @abstractmethod
    async def get_announcements(self) -> List[AnnouncementResponse]:
        ...

    @abstractmethod
    async def create_announcement(self, data: Union[AnnouncementCreateRequest, dict]) -> AnnouncementResponse:
        ...

    @abstractmethod
    async def delete_announcement(self, announcement_id: str):
        ...

    # Payments

    @abstractmethod
    async def get_all_payments(self) -> List[PaymentResponse]:
        ...

    @abstractmethod
    async def get_payments(self, user_id: str) -> List[PaymentResponse]:
        ...

    @abstractmethod
    async def create_payment(self, data: Union[PaymentCreateRequest, dict]) -> PaymentResponse:
        """Member renewal claim (Pending unless a status is given)"""

    @abstractmethod
    async def record_payment(self, data: Union[PaymentCreateRequest, dict]) -> PaymentResponse:
        """Admin-entered payment (Successful unless a status is given)"""

    @abstractmethod
    async def update_payment_status(self, payment_id: str, status: Union[PaymentStatus, str]) -> PaymentResponse:
        ...

    @abstractmethod
    async def delete_payment(self, payment_id: str):
        ...

    # Messages

    @abstractmethod
    async def get_conversations(self, user_id: str) -> List[UserResponse]:
        ...

    @abstractmethod
    async def get_messages(self, user_id: str, other_user_id: str) -> List[MessageResponse]:
        ...

    @abstractmethod
    async def send_message(self, sender_id: str, receiver_id: str, content: str) -> MessageResponse:
        ...

    @abstractmethod
    async def mark_messages_read(self, user_id: str, other_user_id: str) -> int:
        ...

    @abstractmethod
    async def get_unread_count(self, user_id: str) -> int:
        ...
