"""Payment ledger

Approving a payment never changes the member's status; an administrator
reactivates the member separately.
"""

import logging
import random
import uuid
from typing import List, Optional, Union

from membership_portal.errors import PaymentNotFound, ValidationFailed
from membership_portal.models.common import parse_request
from membership_portal.models.payment import PaymentCreateRequest, PaymentStatus
from membership_portal.services import lifecycle
from membership_portal.services.database_service import DatabaseService, db_service

logger = logging.getLogger(__name__)


def generate_reference() -> str:
    return f"REF-{random.randint(0, 999999):06d}"


class PaymentService:
    def __init__(self, store: DatabaseService):
        self.store = store

    def create(
        self,
        data: Union[PaymentCreateRequest, dict],
        default_status: PaymentStatus = PaymentStatus.SUCCESSFUL,
    ) -> dict:
        """Record a payment.

        The status defaults to Successful (admin-entered); member renewal
        claims pass ``default_status=Pending``.
        """
        request = parse_request(PaymentCreateRequest, data)
        payment = {
            "id": f"pay-{uuid.uuid4().hex[:12]}",
            "user_id": request.user_id,
            "amount": request.amount,
            "currency": request.currency or "NGN",
            "date": request.date or lifecycle.today_utc().isoformat(),
            "description": request.description,
            "status": (request.status or default_status).value,
            "reference": generate_reference(),
            "receipt": request.receipt,
        }
        return self.store.create_payment(payment)

    def list_by_user(self, user_id: str) -> List[dict]:
        return self.store.get_payments(user_id)

    def list_all(self) -> List[dict]:
        return self.store.get_payments()

    def update_status(self, payment_id: str, status: Union[PaymentStatus, str]) -> dict:
        try:
            value = PaymentStatus(status).value
        except ValueError:
            raise ValidationFailed(errors=[f"status: Unknown status '{status}'"])

        updated = self.store.update_payment(payment_id, {"status": value})
        if updated is None:
            raise PaymentNotFound()
        logger.info(f"Payment {payment_id} status set to {value}")
        return updated

    def delete(self, payment_id: str) -> bool:
        """Remove a payment; unknown ids are ignored"""
        return self.store.delete_payment(payment_id)

    def get(self, payment_id: str) -> Optional[dict]:
        return self.store.get_payment_by_id(payment_id)


# Singleton instance
payment_service = PaymentService(db_service)
