"""API Routes"""

from membership_portal.routes import auth, users, announcements, payments, messages

__all__ = ["auth", "users", "announcements", "payments", "messages"]
