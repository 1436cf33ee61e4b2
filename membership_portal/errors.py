"""Portal error taxonomy

Every failure surfaced by the services, the HTTP API and the API facade is one
of these classes. Each carries the HTTP status it maps to and a human-readable
message; the class name doubles as the wire ``code``.
"""

from typing import Dict, List, Optional, Type


class PortalError(Exception):
    """Base class for all portal failures"""

    status_code: int = 500
    default_message: str = "Request failed"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[str]] = None):
        self.message = message or self.default_message
        self.errors = list(errors or [])
        super().__init__(self.message)

    @property
    def code(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict:
        body = {"message": self.message, "code": self.code}
        if self.errors:
            body["errors"] = self.errors
        return body


class InvalidCredentials(PortalError):
    status_code = 401
    default_message = "Invalid credentials"


class AccountPending(PortalError):
    status_code = 403
    default_message = "Your account is currently pending approval."


class AccountSuspended(PortalError):
    status_code = 403
    default_message = "Your account has been suspended."


class AccountExpired(PortalError):
    status_code = 403
    default_message = "Your membership has expired. Please renew to regain access."


class DuplicateEmail(PortalError):
    status_code = 400
    default_message = "User already exists"


class ValidationFailed(PortalError):
    status_code = 400
    default_message = "Validation failed"


class IdAlreadyAssigned(PortalError):
    status_code = 409
    default_message = "ID already taken"


class UserNotFound(PortalError):
    status_code = 404
    default_message = "User not found"


class PaymentNotFound(PortalError):
    status_code = 404
    default_message = "Payment not found"


class InvalidResetCode(PortalError):
    status_code = 400
    default_message = "Invalid code."


class ResetCodeExpired(PortalError):
    status_code = 400
    default_message = "Code expired."


class StorageExhausted(PortalError):
    status_code = 507
    default_message = "Storage is full. Remove large files and try again."


class NetworkOrServerError(PortalError):
    status_code = 502
    default_message = "Server error. The backend might be starting up or unreachable."


ERROR_CLASSES: Dict[str, Type[PortalError]] = {
    cls.__name__: cls
    for cls in (
        InvalidCredentials,
        AccountPending,
        AccountSuspended,
        AccountExpired,
        DuplicateEmail,
        ValidationFailed,
        IdAlreadyAssigned,
        UserNotFound,
        PaymentNotFound,
        InvalidResetCode,
        ResetCodeExpired,
        StorageExhausted,
        NetworkOrServerError,
    )
}


def error_from_code(code: Optional[str], message: Optional[str], errors: Optional[List[str]] = None) -> PortalError:
    """Rebuild a typed error from its wire representation"""
    cls = ERROR_CLASSES.get(code or "", NetworkOrServerError)
    return cls(message, errors)
