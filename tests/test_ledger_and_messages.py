"""Payment ledger and messaging log tests"""

import re
from unittest.mock import patch

import pytest

from membership_portal.errors import PaymentNotFound, ValidationFailed
from membership_portal.models import PaymentStatus
from tests.factories import create_message, create_payment


class TestPaymentLedger:

    @pytest.mark.unit
    def test_admin_entry_defaults_to_successful(self, payments):
        """PY-001: Manual records are Successful, NGN, dated today"""
        payment = payments.create(create_payment("user-3"))

        assert payment["status"] == "Successful"
        assert payment["currency"] == "NGN"
        assert re.fullmatch(r"REF-\d{6}", payment["reference"])
        assert payment["id"].startswith("pay-")

    @pytest.mark.unit
    def test_member_claim_is_pending(self, payments):
        payment = payments.create(create_payment("user-1"), default_status=PaymentStatus.PENDING)

        assert payment["status"] == "Pending"

    @pytest.mark.unit
    def test_explicit_status_wins(self, payments):
        payment = payments.create(create_payment("user-1", status="Failed"), default_status=PaymentStatus.PENDING)

        assert payment["status"] == "Failed"

    @pytest.mark.unit
    def test_approval_leaves_member_status_alone(self, payments, store):
        """PY-002: Approving a renewal does not reactivate the member"""
        store.update_user("user-3", {"status": "Expired"})
        payment = payments.create(create_payment("user-3"), default_status=PaymentStatus.PENDING)

        payments.update_status(payment["id"], "Successful")

        assert payments.list_by_user("user-3")[0]["status"] == "Successful"
        assert store.get_user_by_id("user-3")["status"] == "Expired"

    @pytest.mark.unit
    def test_list_newest_first(self, payments):
        created = payments.create(create_payment("user-1", description="Newest"))

        listed = payments.list_by_user("user-1")

        assert listed[0]["id"] == created["id"]
        assert [p["id"] for p in listed[1:]] == ["pay-2", "pay-1"]
        assert len(payments.list_all()) == 3

    @pytest.mark.unit
    def test_update_unknown_payment(self, payments):
        with pytest.raises(PaymentNotFound):
            payments.update_status("pay-missing", "Successful")

    @pytest.mark.unit
    def test_delete_is_idempotent(self, payments):
        """PY-003: Deleting an unknown payment changes nothing"""
        before = len(payments.list_all())

        assert payments.delete("pay-missing") is False
        assert len(payments.list_all()) == before

        assert payments.delete("pay-1") is True
        assert payments.delete("pay-1") is False
        assert len(payments.list_all()) == before - 1

    @pytest.mark.unit
    def test_receipt_size_limit(self, payments):
        """PY-004: Receipts over 2MB are refused"""
        receipt = "x" * (2 * 1024 * 1024 + 1)

        with pytest.raises(ValidationFailed) as exc:
            payments.create(create_payment("user-1", receipt=receipt))

        assert "2MB" in exc.value.errors[0]

    @pytest.mark.unit
    def test_amount_must_be_positive(self, payments):
        with pytest.raises(ValidationFailed):
            payments.create(create_payment("user-1", amount=0))


class TestMessagingLog:

    @pytest.mark.unit
    def test_conversation_order(self, messages):
        """MS-001: Both directions are returned oldest first"""
        first = messages.send(create_message("u1", "u2", "hi"))
        second = messages.send(create_message("u2", "u1", "hello"))
        messages.send(create_message("u1", "u3", "elsewhere"))

        conversation = messages.list_conversation("u1", "u2")

        assert [m["id"] for m in conversation] == [first["id"], second["id"]]
        assert conversation == messages.list_conversation("u2", "u1")
        assert all(m["is_read"] is False for m in conversation)

    @pytest.mark.unit
    def test_equal_timestamps_keep_send_order(self, messages):
        with patch("membership_portal.services.message_service.lifecycle.utc_timestamp",
                   return_value="2025-01-01T00:00:00.000Z"):
            ids = [messages.send(create_message("u1", "u2", str(i)))["id"] for i in range(3)]

        assert [m["id"] for m in messages.list_conversation("u1", "u2")] == ids

    @pytest.mark.unit
    def test_counterparts(self, messages):
        """MS-002: Counterparts resolve to users; unknown ids are dropped"""
        messages.send(create_message("user-1", "user-2"))
        messages.send(create_message("user-3", "user-1"))
        messages.send(create_message("user-1", "deleted-user"))
        messages.send(create_message("user-1", "user-2"))

        counterparts = messages.list_counterparts("user-1")

        assert [u["id"] for u in counterparts] == ["user-2", "user-3"]
        assert all("password_hash" not in u for u in counterparts)

    @pytest.mark.unit
    def test_self_is_not_a_counterpart(self, messages):
        messages.send(create_message("user-1", "user-1", "note to self"))

        assert messages.list_counterparts("user-1") == []

    @pytest.mark.unit
    def test_mark_read_only_incoming(self, messages):
        """MS-003: Only messages from the other user to this user are flagged"""
        messages.send(create_message("user-2", "user-1", "a"))
        messages.send(create_message("user-2", "user-1", "b"))
        messages.send(create_message("user-1", "user-2", "c"))
        messages.send(create_message("user-3", "user-1", "d"))

        assert messages.unread_count("user-1") == 3
        assert messages.mark_read("user-1", "user-2") == 2
        assert messages.unread_count("user-1") == 1
        assert messages.unread_count("user-2") == 1
        assert messages.mark_read("user-1", "user-2") == 0

    @pytest.mark.unit
    def test_blank_message_rejected(self, messages):
        with pytest.raises(ValidationFailed):
            messages.send(create_message("user-1", "user-2", "   "))
