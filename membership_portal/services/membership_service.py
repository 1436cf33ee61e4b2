"""Membership service - accounts, approval workflow and expiry"""

import logging
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Union

from membership_portal.auth.passwords import hash_password, verify_password
from membership_portal.config import settings
from membership_portal.errors import (
    AccountExpired,
    AccountPending,
    AccountSuspended,
    DuplicateEmail,
    IdAlreadyAssigned,
    InvalidCredentials,
    InvalidResetCode,
    ResetCodeExpired,
    UserNotFound,
    ValidationFailed,
)
from membership_portal.models.common import parse_request
from membership_portal.models.user import (
    MembershipStatus,
    RegisterRequest,
    UserRole,
    UserUpdateRequest,
    sanitize_user,
)
from membership_portal.services import lifecycle
from membership_portal.services.database_service import DatabaseService, db_service
from membership_portal.services.email_service import EmailService, get_email_service
from membership_portal.services.validation import (
    PASSWORD_RULE,
    is_valid_password,
    normalize_number,
    validate_profile_update,
    validate_registration,
)

logger = logging.getLogger(__name__)

_STATUS_ERRORS = {
    MembershipStatus.PENDING.value: AccountPending,
    MembershipStatus.SUSPENDED.value: AccountSuspended,
    MembershipStatus.EXPIRED.value: AccountExpired,
}


class MembershipService:
    """Lifecycle rules applied to the users collection"""

    def __init__(self, store: DatabaseService, email: Optional[EmailService] = None):
        self.store = store
        self._email = email

    @property
    def email(self) -> EmailService:
        if self._email is None:
            self._email = get_email_service()
        return self._email

    def _require_user(self, user_id: str) -> dict:
        user = self.store.get_user_by_id(user_id)
        if user is None:
            raise UserNotFound()
        return user

    # =========================================================================
    # Reads
    # =========================================================================

    def get_users(self) -> List[dict]:
        """All users with expiry applied; lapsed memberships are persisted as Expired"""
        today = lifecycle.today_utc()
        users = []
        for user in self.store.get_all_users():
            evaluated = lifecycle.evaluate_expiry(user, today)
            if evaluated is not user:
                self.store.update_user(user["id"], {"status": evaluated["status"]})
                logger.info(f"Membership expired: {user['id']}")
            users.append(sanitize_user(evaluated))
        return users

    def get_user(self, user_id: str) -> dict:
        """Single user with expiry applied (not persisted)"""
        return sanitize_user(lifecycle.evaluate_expiry(self._require_user(user_id)))

    def directory(
        self,
        viewer_is_admin: bool = False,
        search: Optional[str] = None,
        category: Optional[str] = None,
        state: Optional[str] = None,
    ) -> List[dict]:
        """Member directory; admins are never listed and members only see Active peers"""
        needle = (search or "").lower()
        members = []
        for user in self.get_users():
            if user.get("role") == UserRole.ADMIN.value:
                continue
            if not viewer_is_admin and user.get("status") != MembershipStatus.ACTIVE.value:
                continue
            if needle:
                business = (user.get("business_name") or "").lower()
                materials = [(m or "").lower() for m in user.get("material_types") or []]
                if needle not in business and not any(needle in m for m in materials):
                    continue
            if category and category not in (user.get("category"), user.get("business_category")):
                continue
            if state and user.get("business_state") != state:
                continue
            members.append(user)
        return members

    def list_expiring(self, within_days: Optional[int] = None) -> List[dict]:
        """Members whose expiry date falls within the warning window"""
        window = settings.expiry_warning_days if within_days is None else within_days
        today = lifecycle.today_utc()
        return [
            user for user in self.get_users()
            if user.get("role") != UserRole.ADMIN.value
            and user.get("status") != MembershipStatus.SUSPENDED.value
            and lifecycle.is_expiring_soon(user, window, today)
        ]

    def stats(self) -> dict:
        users = [u for u in self.get_users() if u.get("role") != UserRole.ADMIN.value]
        counts = {status.value: 0 for status in MembershipStatus}
        for user in users:
            counts[user.get("status")] = counts.get(user.get("status"), 0) + 1
        return {
            "total": len(users),
            "active": counts[MembershipStatus.ACTIVE.value],
            "pending": counts[MembershipStatus.PENDING.value],
            "suspended": counts[MembershipStatus.SUSPENDED.value],
            "expired": counts[MembershipStatus.EXPIRED.value],
            "expiring_soon": len(self.list_expiring()),
        }

    # =========================================================================
    # Authentication
    # =========================================================================

    def login(self, email: str, password: str) -> dict:
        user = self.store.get_user_by_email(email)
        if user is None:
            logger.warning(f"Login failed, unknown email: {email}")
            raise InvalidCredentials()

        evaluated = lifecycle.evaluate_expiry(user)
        if evaluated is not user:
            self.store.update_user(user["id"], {"status": evaluated["status"]})
            logger.info(f"Membership expired at login: {user['id']}")

        status_error = _STATUS_ERRORS.get(evaluated.get("status"))
        if status_error is not None:
            logger.warning(f"Login refused for {user['id']}: {evaluated.get('status')}")
            raise status_error()

        if not verify_password(password, user.get("password_hash") or user.get("password")):
            logger.warning(f"Login failed, bad password: {user['id']}")
            raise InvalidCredentials()

        logger.info(f"User logged in: {user['id']}")
        return sanitize_user(evaluated)

    def register(self, data: Union[RegisterRequest, dict]) -> dict:
        request = parse_request(RegisterRequest, data)

        if request.email and self.store.get_user_by_email(request.email) is not None:
            raise DuplicateEmail()

        fields = request.model_dump(exclude_none=True)
        errors = validate_registration(fields)
        if errors:
            raise ValidationFailed(errors=errors)

        today = lifecycle.today_utc()
        password = fields.pop("password")
        fields.pop("confirm_password", None)

        user = {
            "gender": None,
            "dob": None,
            "business_state": None,
            "business_city": None,
            "business_commencement": None,
            "category": None,
            "states_of_operation": None,
            "material_types": [],
            "machinery_deployed": [],
            "areas_of_interest": [],
            "related_association": None,
            "related_association_name": None,
            "profile_image": None,
            "documents": {},
            **fields,
            "id": f"user-{uuid.uuid4().hex[:12]}",
            "role": UserRole.MEMBER.value,
            "status": MembershipStatus.PENDING.value,
            "password_hash": hash_password(password),
            "employees": normalize_number(fields["employees"]),
            "monthly_volume": str(normalize_number(fields["monthly_volume"])),
            "date_joined": today.isoformat(),
            "expiry_date": lifecycle.add_years(today, settings.membership_years).isoformat(),
        }
        self.store.create_user(user)

        self.email.send_welcome(user["email"], user["first_name"], user["last_name"])
        return sanitize_user(user)

    # =========================================================================
    # Administrative edits
    # =========================================================================

    def reassign_id(self, current_id: str, new_id: str):
        """Give a user a new id, carrying payments, messages and session along"""
        if current_id == new_id:
            self._require_user(current_id)
            return

        holder = self.store.get_user_by_id(new_id)
        if holder is not None:
            raise IdAlreadyAssigned()
        self._require_user(current_id)

        self.store.reassign_user_id(current_id, new_id)

    def update_status(self, user_id: str, status: Union[MembershipStatus, str]) -> dict:
        self._require_user(user_id)
        try:
            value = MembershipStatus(status).value
        except ValueError:
            raise ValidationFailed(errors=[f"status: Unknown status '{status}'"])
        updated = self.store.update_user(user_id, {"status": value})
        logger.info(f"User {user_id} status set to {value}")
        return sanitize_user(updated)

    def update_expiry(self, user_id: str, expiry_date: str) -> dict:
        self._require_user(user_id)
        parsed = lifecycle.parse_date((expiry_date or "").strip())
        if parsed is None:
            raise ValidationFailed(errors=["expiryDate: A valid date (YYYY-MM-DD) is required."])
        updated = self.store.update_user(user_id, {"expiry_date": parsed.isoformat()})
        logger.info(f"User {user_id} expiry set to {parsed.isoformat()}")
        return sanitize_user(updated)

    def update_user(self, user_id: str, data: Union[UserUpdateRequest, dict]) -> dict:
        """Partial profile update"""
        request = parse_request(UserUpdateRequest, data)
        self._require_user(user_id)

        updates = request.model_dump(exclude_unset=True, mode="json")
        errors = validate_profile_update(updates)
        if "expiry_date" in updates and lifecycle.parse_date(updates["expiry_date"]) is None:
            errors.append("expiryDate: A valid date (YYYY-MM-DD) is required.")
        if errors:
            raise ValidationFailed(errors=errors)

        if "employees" in updates:
            updates["employees"] = normalize_number(updates["employees"])
        if updates.get("monthly_volume") is not None:
            updates["monthly_volume"] = str(normalize_number(updates["monthly_volume"]))
        if "documents" in updates:
            current = self.store.get_user_by_id(user_id).get("documents") or {}
            updates["documents"] = {**current, **(updates["documents"] or {})}

        if not updates:
            return sanitize_user(self._require_user(user_id))

        updated = self.store.update_user(user_id, updates)
        logger.info(f"User {user_id} updated: {', '.join(sorted(updates))}")
        return sanitize_user(updated)

    def send_expiry_reminders(self) -> dict:
        """Email every member in the warning window"""
        today = lifecycle.today_utc()
        recipients = []
        expiring = self.list_expiring()
        for user in expiring:
            days_left = lifecycle.days_until_expiry(user, today)
            result = self.email.send_expiry_reminder(
                user["email"], user.get("first_name") or "Member", user["expiry_date"], days_left
            )
            if result.get("sent"):
                recipients.append(user["id"])
        logger.info(f"Expiry reminders sent: {len(recipients)}")
        return {"queued": len(expiring), "recipients": recipients}

    # =========================================================================
    # Password reset
    # =========================================================================

    def request_password_reset(self, email: str) -> Optional[str]:
        """Issue a 6-digit reset code.

        Returns the code itself only when email delivery is not configured, so
        development setups can still complete the flow.
        """
        user = self.store.get_user_by_email(email)
        if user is None:
            logger.info(f"Password reset requested for unknown email: {email}")
            return None

        token = f"{secrets.randbelow(900000) + 100000}"
        expiry = datetime.now(timezone.utc) + timedelta(minutes=settings.reset_token_ttl_minutes)
        self.store.update_user(user["id"], {"reset_token": token, "reset_token_expiry": expiry.isoformat()})
        logger.info(f"Password reset code issued for {user['id']}")

        if not self.email.configured:
            return token

        self.email.send_reset_code(email, token, settings.reset_token_ttl_minutes)
        return None

    def confirm_password_reset(self, email: str, token: str, new_password: str):
        user = self.store.get_user_by_email(email)
        stored = (user or {}).get("reset_token")
        if not stored or not secrets.compare_digest(stored.encode("utf-8"), (token or "").encode("utf-8")):
            raise InvalidResetCode()

        expiry = datetime.fromisoformat(user["reset_token_expiry"])
        if datetime.now(timezone.utc) > expiry:
            raise ResetCodeExpired()

        if not is_valid_password(new_password):
            raise ValidationFailed(errors=[f"newPassword: {PASSWORD_RULE}"])

        self.store.update_user(user["id"], {
            "password_hash": hash_password(new_password),
            "reset_token": None,
            "reset_token_expiry": None,
        })
        logger.info(f"Password reset completed for {user['id']}")


# Singleton instance
membership_service = MembershipService(db_service)
