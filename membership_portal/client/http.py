"""Live-mode facade: forwards calls to a remote portal server"""

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from membership_portal.client.facade import PortalApi
from membership_portal.errors import NetworkOrServerError, error_from_code
from membership_portal.models import (
    AnnouncementCreateRequest,
    AnnouncementResponse,
    MessageCreateRequest,
    MessageResponse,
    PaymentCreateRequest,
    PaymentResponse,
    PaymentStatusUpdate,
    RegisterRequest,
    StatusMessage,
    StatusUpdateRequest,
    UserResponse,
    UserStatsResponse,
    UserUpdateRequest,
    parse_request,
)
from membership_portal.services.session_service import SessionService

logger = logging.getLogger(__name__)


def _wire(model) -> dict:
    return model.model_dump(by_alias=True, exclude_none=True, mode="json")


def _segment(value: str) -> str:
    """Percent-encode one path segment (ids may contain "/")"""
    return quote(str(value), safe="")


class HttpPortalApi(PortalApi):
    """Facade over the portal's REST API.

    Error responses carrying a ``code`` are raised as the matching
    ``PortalError`` subclass. Anything else that goes wrong (unreachable
    server, non-JSON body, unknown code) surfaces as NetworkOrServerError.
    Nothing is retried.
    """

    def __init__(
        self,
        base_url: str,
        session: SessionService,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(session)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def aclose(self):
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> Any:
        client = await self._get_client()
        logger.debug(f"{method} {self.base_url}{path}")

        try:
            response = await client.request(method, path, json=json, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Request to {path} failed: {e}")
            raise NetworkOrServerError() from e

        if response.is_success:
            if not response.content:
                return None
            try:
                return response.json()
            except ValueError as e:
                raise NetworkOrServerError("Invalid response from server") from e

        try:
            body = response.json()
        except ValueError:
            logger.error(f"{method} {path} returned {response.status_code} with a non-JSON body")
            raise NetworkOrServerError(f"Server error ({response.status_code})")

        if not isinstance(body, dict) or not body.get("code"):
            message = body.get("message") if isinstance(body, dict) else None
            raise NetworkOrServerError(message or f"Server error ({response.status_code})")

        raise error_from_code(body["code"], body.get("message"), body.get("errors"))

    # Authentication

    async def login(self, email, password):
        data = await self._request("POST", "/auth/login", json={"email": email, "password": password})
        return self._remember(UserResponse.model_validate(data))

    async def logout(self):
        self.session.clear()
        try:
            await self._request("POST", "/auth/logout")
        except NetworkOrServerError as e:
            logger.warning(f"Server logout failed: {e}")

    async def register(self, data):
        request = parse_request(RegisterRequest, data)
        body = request.model_dump(by_alias=True, exclude_unset=True, mode="json")
        return UserResponse.model_validate(await self._request("POST", "/auth/register", json=body))

    async def request_password_reset(self, email):
        data = await self._request("POST", "/auth/request-reset", json={"email": email})
        return StatusMessage.model_validate(data)

    async def confirm_password_reset(self, email, token, new_password):
        data = await self._request(
            "POST", "/auth/confirm-reset",
            json={"email": email, "token": token, "newPassword": new_password},
        )
        return StatusMessage.model_validate(data)

    # Users

    async def get_user(self, user_id):
        return UserResponse.model_validate(await self._request("GET", f"/users/{_segment(user_id)}"))

    async def get_users(self):
        return [UserResponse.model_validate(u) for u in await self._request("GET", "/users")]

    async def get_directory(self, viewer_is_admin=False, search=None, category=None, state=None):
        params = {"viewerIsAdmin": str(viewer_is_admin).lower()}
        for key, value in (("search", search), ("category", category), ("state", state)):
            if value:
                params[key] = value
        data = await self._request("GET", "/users/directory", params=params)
        return [UserResponse.model_validate(u) for u in data]

    async def get_expiring_users(self, within_days=None):
        params = {"withinDays": within_days} if within_days is not None else None
        data = await self._request("GET", "/users/expiring", params=params)
        return [UserResponse.model_validate(u) for u in data]

    async def get_stats(self):
        return UserStatsResponse.model_validate(await self._request("GET", "/users/stats"))

    async def update_user(self, user_id, updates):
        request = parse_request(UserUpdateRequest, updates)
        body = request.model_dump(by_alias=True, exclude_unset=True, mode="json")
        data = await self._request("PUT", f"/users/{_segment(user_id)}", json=body)
        user = UserResponse.model_validate(data)
        return self._refresh_session(user)

    async def update_user_id(self, current_id, new_id):
        await self._request("POST", "/users/update-id", json={"currentId": current_id, "newId": new_id})
        self.session.rename(current_id, new_id)

    async def update_user_status(self, user_id, status):
        body = _wire(parse_request(StatusUpdateRequest, {"status": status}))
        data = await self._request("PUT", f"/users/{_segment(user_id)}/status", json=body)
        user = UserResponse.model_validate(data)
        return self._refresh_session(user)

    async def update_user_expiry(self, user_id, expiry_date):
        body = {"expiryDate": expiry_date}
        data = await self._request("PUT", f"/users/{_segment(user_id)}/expiry", json=body)
        user = UserResponse.model_validate(data)
        return self._refresh_session(user)

    # Announcements

    async def get_announcements(self):
        return [AnnouncementResponse.model_validate(a) for a in await self._request("GET", "/announcements")]

    async def create_announcement(self, data):
        body = _wire(parse_request(AnnouncementCreateRequest, data))
        return AnnouncementResponse.model_validate(await self._request("POST", "/announcements", json=body))

    async def delete_announcement(self, announcement_id):
        await self._request("DELETE", f"/announcements/{_segment(announcement_id)}")

    # Payments

    async def get_all_payments(self):
        return [PaymentResponse.model_validate(p) for p in await self._request("GET", "/payments")]

    async def get_payments(self, user_id):
        data = await self._request("GET", f"/payments/{_segment(user_id)}")
        return [PaymentResponse.model_validate(p) for p in data]

    async def create_payment(self, data):
        body = _wire(parse_request(PaymentCreateRequest, data))
        return PaymentResponse.model_validate(await self._request("POST", "/payments", json=body))

    async def record_payment(self, data):
        body = _wire(parse_request(PaymentCreateRequest, data))
        return PaymentResponse.model_validate(await self._request("POST", "/payments/manual", json=body))

    async def update_payment_status(self, payment_id, status):
        body = _wire(parse_request(PaymentStatusUpdate, {"status": status}))
        data = await self._request("PUT", f"/payments/{_segment(payment_id)}", json=body)
        return PaymentResponse.model_validate(data)

    async def delete_payment(self, payment_id):
        await self._request("DELETE", f"/payments/{_segment(payment_id)}")

    # Messages

    async def get_conversations(self, user_id):
        data = await self._request("GET", "/messages/conversations", params={"userId": user_id})
        return [UserResponse.model_validate(u) for u in data]

    async def get_messages(self, user_id, other_user_id):
        data = await self._request(
            "GET", "/messages/chat", params={"userId": user_id, "otherUserId": other_user_id}
        )
        return [MessageResponse.model_validate(m) for m in data]

    async def send_message(self, sender_id, receiver_id, content):
        request = parse_request(
            MessageCreateRequest,
            {"sender_id": sender_id, "receiver_id": receiver_id, "content": content},
        )
        return MessageResponse.model_validate(await self._request("POST", "/messages", json=_wire(request)))

    async def mark_messages_read(self, user_id, other_user_id):
        data = await self._request(
            "PUT", "/messages/read", json={"userId": user_id, "otherUserId": other_user_id}
        )
        return data["updated"]

    async def get_unread_count(self, user_id):
        data = await self._request("GET", "/messages/unread", params={"userId": user_id})
        return data["count"]
