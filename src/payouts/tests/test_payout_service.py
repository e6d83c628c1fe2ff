import typing as t
from decimal import Decimal
from unittest.mock import patch
from uuid import uuid4

import pytest
from django.core import mail
from django.core.files.uploadedfile import SimpleUploadedFile

from accounts.models import BoxOfficeUser
from common.exceptions import (
    AuthorizationError,
    InsufficientBalanceError,
    InvalidInputError,
    MissingBankDetailsError,
    PayoutAlreadyProcessedError,
    PayoutNotFoundError,
)
from events.models import Event
from payouts import tasks
from payouts.models import BankDetails, Payout, PayoutDecision
from payouts.service import ledger, payout_service

pytestmark = pytest.mark.django_db

MakePayout = t.Callable[..., Payout]


class TestBankDetails:
    def test_save_creates_then_replaces(self, host: BoxOfficeUser) -> None:
        fields = {"bank_name": "GTBank", "bank_code": "058", "account_number": "1234567890", "account_name": "Host"}
        payout_service.save_bank_details(host, **fields)
        payout_service.save_bank_details(host, **{**fields, "bank_name": "Access Bank"})

        assert BankDetails.objects.filter(user=host).count() == 1
        details = payout_service.get_bank_details(host)
        assert details is not None
        assert details.bank_name == "Access Bank"

    def test_delete(self, host: BoxOfficeUser, bank_details: BankDetails) -> None:
        assert payout_service.delete_bank_details(host) is True
        assert payout_service.delete_bank_details(host) is False


class TestRequestWithdrawal:
    def test_creates_pending_payout(self, funded_host: BoxOfficeUser, bank_details: BankDetails) -> None:
        payout, warnings = payout_service.request_withdrawal(funded_host, Decimal("1000"))

        assert warnings == []
        assert payout.status == Payout.Status.PENDING
        assert payout.requested_amount == payout.amount == Decimal("1000")
        assert payout.fee == Decimal("150")
        assert payout.net_amount == Decimal("850")
        assert payout.account_number == bank_details.account_number
        assert ledger.balance_of(funded_host) == Decimal("1000.00")

    def test_snapshot_survives_bank_change(self, funded_host: BoxOfficeUser, bank_details: BankDetails) -> None:
        payout, _ = payout_service.request_withdrawal(funded_host, Decimal("500"))
        payout_service.save_bank_details(funded_host, account_number="9999999999")

        payout.refresh_from_db()
        assert payout.account_number == "0123456789"

    def test_below_fee(self, funded_host: BoxOfficeUser, bank_details: BankDetails) -> None:
        with pytest.raises(InvalidInputError, match="Minimum withdrawal amount is 150.00"):
            payout_service.request_withdrawal(funded_host, Decimal("149.99"))
        assert not Payout.objects.exists()

    def test_amount_equal_to_fee_is_accepted(self, funded_host: BoxOfficeUser, bank_details: BankDetails) -> None:
        payout, _ = payout_service.request_withdrawal(funded_host, Decimal("150"))
        assert payout.net_amount == Decimal("0")

    def test_missing_bank_details(self, funded_host: BoxOfficeUser) -> None:
        with pytest.raises(MissingBankDetailsError):
            payout_service.request_withdrawal(funded_host, Decimal("500"))

    def test_insufficient_balance_reports_balance(
        self, funded_host: BoxOfficeUser, bank_details: BankDetails
    ) -> None:
        with pytest.raises(InsufficientBalanceError) as exc_info:
            payout_service.request_withdrawal(funded_host, Decimal("1000.01"))
        assert exc_info.value.balance == Decimal("1000.00")
        assert exc_info.value.to_dict()["balance"] == "1000.00"

    def test_other_hosts_event(
        self, funded_host: BoxOfficeUser, bank_details: BankDetails, other_host: BoxOfficeUser, event: Event
    ) -> None:
        foreign = Event.objects.create(host=other_host, name="Elsewhere", start=event.start)
        with pytest.raises(AuthorizationError):
            payout_service.request_withdrawal(funded_host, Decimal("500"), event=foreign)

        assert not Payout.objects.exists()

    def test_sends_acknowledgement(self, funded_host: BoxOfficeUser, bank_details: BankDetails) -> None:
        payout_service.request_withdrawal(funded_host, Decimal("500"))

        assert len(mail.outbox) == 1
        assert mail.outbox[0].subject == "We received your withdrawal request"
        assert "NGN 350.00" in mail.outbox[0].body

    def test_notification_failure_becomes_warning(
        self, funded_host: BoxOfficeUser, bank_details: BankDetails
    ) -> None:
        with patch.object(tasks.notify_withdrawal_requested, "delay", side_effect=RuntimeError("broker down")):
            payout, warnings = payout_service.request_withdrawal(funded_host, Decimal("500"))

        assert Payout.objects.filter(pk=payout.pk).exists()
        assert warnings == ["Withdrawal notification failed: broker down"]


class TestApprove:
    def test_approve_completes_and_debits(
        self, funded_host: BoxOfficeUser, make_payout: MakePayout, staff_user: BoxOfficeUser
    ) -> None:
        pending = make_payout("600")

        payout, warnings = payout_service.approve(pending.id, staff_user, notes="Paid by transfer")

        assert warnings == []
        assert payout.status == Payout.Status.COMPLETED
        assert payout.processed_at is not None
        assert payout.decision.decided_by == staff_user
        assert payout.decision.approved_amount == Decimal("600")
        assert payout.decision.notes == "Paid by transfer"
        assert ledger.balance_of(funded_host) == Decimal("400.00")

    def test_lower_approved_amount(
        self, funded_host: BoxOfficeUser, make_payout: MakePayout, staff_user: BoxOfficeUser
    ) -> None:
        pending = make_payout("600")

        payout, _ = payout_service.approve(pending.id, staff_user, approved_amount=Decimal("450"))

        assert payout.requested_amount == Decimal("600")
        assert payout.amount == Decimal("450")
        assert payout.net_amount == Decimal("300")
        assert ledger.balance_of(funded_host) == Decimal("550.00")

    def test_approving_the_fee_alone_leaves_nothing_to_send(
        self, funded_host: BoxOfficeUser, make_payout: MakePayout, staff_user: BoxOfficeUser
    ) -> None:
        pending = make_payout("600")

        payout, _ = payout_service.approve(pending.id, staff_user, approved_amount=Decimal("150"))

        assert payout.status == Payout.Status.COMPLETED
        assert payout.net_amount == Decimal("0")
        assert ledger.balance_of(funded_host) == Decimal("850.00")

    @pytest.mark.parametrize("approved_amount", ["0", "-5", "50", "149.99", "600.01"])
    def test_approved_amount_bounds(
        self,
        funded_host: BoxOfficeUser,
        make_payout: MakePayout,
        staff_user: BoxOfficeUser,
        approved_amount: str,
    ) -> None:
        pending = make_payout("600")

        with pytest.raises(InvalidInputError):
            payout_service.approve(pending.id, staff_user, approved_amount=Decimal(approved_amount))

        pending.refresh_from_db()
        assert pending.status == Payout.Status.PENDING
        assert not PayoutDecision.objects.exists()

    def test_second_approval_cannot_overdraw(
        self, funded_host: BoxOfficeUser, make_payout: MakePayout, staff_user: BoxOfficeUser
    ) -> None:
        first = make_payout("600")
        second = make_payout("600")

        payout_service.approve(first.id, staff_user)
        with pytest.raises(InsufficientBalanceError) as exc_info:
            payout_service.approve(second.id, staff_user)

        assert exc_info.value.balance == Decimal("400.00")
        second.refresh_from_db()
        assert second.status == Payout.Status.PENDING
        assert ledger.balance_of(funded_host) == Decimal("400.00")

    def test_already_processed(
        self, funded_host: BoxOfficeUser, make_payout: MakePayout, staff_user: BoxOfficeUser
    ) -> None:
        pending = make_payout("600")
        payout_service.approve(pending.id, staff_user)

        with pytest.raises(PayoutAlreadyProcessedError):
            payout_service.approve(pending.id, staff_user)
        with pytest.raises(PayoutAlreadyProcessedError):
            payout_service.reject(pending.id, staff_user)

    def test_unknown_payout(self, staff_user: BoxOfficeUser) -> None:
        with pytest.raises(PayoutNotFoundError):
            payout_service.approve(uuid4(), staff_user)

    def test_proof_of_payment_is_stored(
        self, funded_host: BoxOfficeUser, make_payout: MakePayout, staff_user: BoxOfficeUser
    ) -> None:
        pending = make_payout("600")
        proof = SimpleUploadedFile("receipt.pdf", b"%PDF-1.4 receipt", content_type="application/pdf")

        payout, _ = payout_service.approve(pending.id, staff_user, proof=proof, proof_description="Zenith ref 42")

        decision = payout.decision
        assert decision.proof_of_payment.name.startswith("payouts/proofs/receipt")
        assert decision.proof_description == "Zenith ref 42"
        with decision.proof_of_payment.open("rb") as stored:
            assert stored.read() == b"%PDF-1.4 receipt"

    def test_notifies_host(
        self, funded_host: BoxOfficeUser, make_payout: MakePayout, staff_user: BoxOfficeUser
    ) -> None:
        pending = make_payout("600")

        payout_service.approve(pending.id, staff_user, proof_description="Zenith ref 42")

        assert [message.subject for message in mail.outbox] == ["Your payout has been sent"]
        assert "Zenith ref 42" in mail.outbox[0].body
        assert "NGN 450.00" in mail.outbox[0].body


class TestReject:
    def test_reject_keeps_balance(
        self, funded_host: BoxOfficeUser, make_payout: MakePayout, staff_user: BoxOfficeUser
    ) -> None:
        pending = make_payout("600")

        payout, warnings = payout_service.reject(pending.id, staff_user, reason="Account name mismatch")

        assert warnings == []
        assert payout.status == Payout.Status.REJECTED
        assert payout.rejection_reason == "Account name mismatch"
        assert payout.decision.decision == PayoutDecision.Decision.REJECTED
        assert ledger.balance_of(funded_host) == Decimal("1000.00")
        assert "Account name mismatch" in mail.outbox[0].body

    def test_blank_reason_uses_default(
        self, funded_host: BoxOfficeUser, make_payout: MakePayout, staff_user: BoxOfficeUser
    ) -> None:
        pending = make_payout("600")

        payout, _ = payout_service.reject(pending.id, staff_user, reason="  ")

        assert payout.rejection_reason == payout_service.DEFAULT_REJECTION_REASON

    def test_rejected_payout_cannot_be_approved(
        self, funded_host: BoxOfficeUser, make_payout: MakePayout, staff_user: BoxOfficeUser
    ) -> None:
        pending = make_payout("600")
        payout_service.reject(pending.id, staff_user)

        with pytest.raises(PayoutAlreadyProcessedError):
            payout_service.approve(pending.id, staff_user)

        pending.refresh_from_db()
        assert pending.status == Payout.Status.REJECTED
        assert ledger.balance_of(funded_host) == Decimal("1000.00")

    def test_notification_failure_becomes_warning(
        self, funded_host: BoxOfficeUser, make_payout: MakePayout, staff_user: BoxOfficeUser
    ) -> None:
        pending = make_payout("600")

        with patch.object(tasks.notify_payout_rejected, "delay", side_effect=RuntimeError("smtp down")):
            payout, warnings = payout_service.reject(pending.id, staff_user)

        assert payout.status == Payout.Status.REJECTED
        assert warnings == ["Rejection notification failed: smtp down"]
