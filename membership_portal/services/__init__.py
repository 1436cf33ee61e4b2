"""Services module"""

from membership_portal.services.database_service import db_service
from membership_portal.services.session_service import session_service
from membership_portal.services.membership_service import membership_service
from membership_portal.services.payment_service import payment_service
from membership_portal.services.message_service import message_service
from membership_portal.services.announcement_service import announcement_service

__all__ = [
    "db_service",
    "session_service",
    "membership_service",
    "payment_service",
    "message_service",
    "announcement_service",
]
