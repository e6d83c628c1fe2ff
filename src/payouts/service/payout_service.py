"""Withdrawal requests and their approval workflow.

A pending payout does not reserve funds. Approval re-checks the host's balance while holding
a lock on the host's user row, so two approvals for the same host can never both spend the
same revenue.
"""

import typing as t
from decimal import Decimal
from uuid import UUID

import structlog
from django.conf import settings
from django.core.files.uploadedfile import UploadedFile
from django.db import transaction
from django.utils import timezone

from accounts.models import BoxOfficeUser
from common.exceptions import (
    AuthorizationError,
    InsufficientBalanceError,
    InvalidInputError,
    MissingBankDetailsError,
    PayoutAlreadyProcessedError,
    PayoutNotFoundError,
)
from common.side_effects import dispatch_all
from events.models import Event
from payouts import tasks
from payouts.models import BankDetails, Payout, PayoutDecision
from payouts.service.ledger import balance_of

logger = structlog.get_logger(__name__)

DEFAULT_REJECTION_REASON = "Payout request rejected"


def get_bank_details(host: BoxOfficeUser) -> BankDetails | None:
    return BankDetails.objects.filter(user=host).first()


def save_bank_details(host: BoxOfficeUser, **fields: t.Any) -> BankDetails:
    """Create or replace the host's payout destination."""
    details = get_bank_details(host) or BankDetails(user=host)
    for attr, value in fields.items():
        setattr(details, attr, value)
    details.save()
    logger.info("bank_details_saved", user_id=str(host.id))
    return details


def delete_bank_details(host: BoxOfficeUser) -> bool:
    deleted, _ = BankDetails.objects.filter(user=host).delete()
    if deleted:
        logger.info("bank_details_deleted", user_id=str(host.id))
    return bool(deleted)


def request_withdrawal(
    host: BoxOfficeUser, amount: Decimal, event: Event | None = None
) -> tuple[Payout, list[str]]:
    """Open a pending payout for ``amount``.

    Nothing is debited until an admin approves the payout.

    Raises:
        InvalidInputError: the amount does not cover the payout fee.
        AuthorizationError: the event belongs to another host.
        MissingBankDetailsError: the host has no bank details on file.
        InsufficientBalanceError: the amount exceeds the host's balance.
    """
    fee: Decimal = settings.PAYOUT_FEE
    if amount < fee:
        raise InvalidInputError(f"Minimum withdrawal amount is {fee:.2f}.")
    if event is not None and event.host_id != host.id:
        raise AuthorizationError("You can only withdraw revenue from your own events.")
    bank = get_bank_details(host)
    if bank is None:
        raise MissingBankDetailsError()
    balance = balance_of(host)
    if amount > balance:
        logger.info("withdrawal_rejected_insufficient_balance", host_id=str(host.id), requested=str(amount))
        raise InsufficientBalanceError(balance)

    payout = Payout.objects.create(
        host=host,
        event=event,
        requested_amount=amount,
        amount=amount,
        fee=fee,
        net_amount=amount - fee,
        bank_name=bank.bank_name,
        bank_code=bank.bank_code,
        account_number=bank.account_number,
        account_name=bank.account_name,
    )
    logger.info("withdrawal_requested", payout_id=str(payout.id), host_id=str(host.id), amount=str(amount))
    warnings = dispatch_all(
        [("Withdrawal notification", tasks.notify_withdrawal_requested.delay, {"payout_id": str(payout.id)})]
    )
    return payout, warnings


def _lock_for_transition(payout_id: UUID, target: str) -> Payout:
    """Lock the payout's host row, then the payout, and require that it may move to ``target``.

    Must run inside an atomic block.
    """
    host_id = Payout.objects.filter(pk=payout_id).values_list("host_id", flat=True).first()
    if host_id is None:
        raise PayoutNotFoundError()
    BoxOfficeUser.objects.select_for_update().get(pk=host_id)
    payout = Payout.objects.select_for_update().select_related("host").get(pk=payout_id)
    if not payout.can_transition_to(target):
        raise PayoutAlreadyProcessedError()
    return payout


def approve(
    payout_id: UUID,
    admin: BoxOfficeUser,
    approved_amount: Decimal | None = None,
    proof: UploadedFile | None = None,
    proof_description: str = "",
    notes: str = "",
) -> tuple[Payout, list[str]]:
    """Approve a pending payout and mark it completed.

    ``approved_amount`` defaults to the requested amount and may lower it down to the fee. The
    host's balance is verified again under the lock; a failed check leaves every row untouched.

    Raises:
        PayoutNotFoundError: no such payout.
        PayoutAlreadyProcessedError: the payout is no longer pending.
        InvalidInputError: the approved amount does not cover the fee or exceeds the request.
        InsufficientBalanceError: the host's balance no longer covers the amount.
    """
    with transaction.atomic():
        payout = _lock_for_transition(payout_id, Payout.Status.COMPLETED)
        amount = payout.requested_amount if approved_amount is None else approved_amount
        if amount < payout.fee or amount > payout.requested_amount:
            raise InvalidInputError(
                f"Approved amount must be between {payout.fee:.2f} and {payout.requested_amount:.2f}."
            )
        balance = balance_of(payout.host)
        if amount > balance:
            logger.info(
                "payout_approval_rejected_insufficient_balance", payout_id=str(payout.id), balance=str(balance)
            )
            raise InsufficientBalanceError(balance)

        decision = PayoutDecision(
            payout=payout,
            decided_by=admin,
            decision=PayoutDecision.Decision.APPROVED,
            approved_amount=amount,
            proof_description=proof_description,
            notes=notes,
            decided_at=timezone.now(),
        )
        if proof is not None:
            decision.proof_of_payment.save(proof.name or "proof", proof, save=False)
        decision.save()

        payout.set_amount(amount)
        payout.status = Payout.Status.COMPLETED
        payout.processed_at = decision.decided_at
        payout.save()

    logger.info("payout_approved", payout_id=str(payout.id), admin_id=str(admin.id), amount=str(amount))
    warnings = dispatch_all(
        [("Approval notification", tasks.notify_payout_approved.delay, {"payout_id": str(payout.id)})]
    )
    return payout, warnings


def reject(
    payout_id: UUID, admin: BoxOfficeUser, reason: str = DEFAULT_REJECTION_REASON, notes: str = ""
) -> tuple[Payout, list[str]]:
    """Reject a pending payout. The host's balance is unaffected.

    Raises:
        PayoutNotFoundError: no such payout.
        PayoutAlreadyProcessedError: the payout is no longer pending.
    """
    reason = reason.strip() or DEFAULT_REJECTION_REASON
    with transaction.atomic():
        payout = _lock_for_transition(payout_id, Payout.Status.REJECTED)
        decision = PayoutDecision.objects.create(
            payout=payout,
            decided_by=admin,
            decision=PayoutDecision.Decision.REJECTED,
            notes=notes,
            decided_at=timezone.now(),
        )
        payout.status = Payout.Status.REJECTED
        payout.rejection_reason = reason
        payout.processed_at = decision.decided_at
        payout.save()

    logger.info("payout_rejected", payout_id=str(payout.id), admin_id=str(admin.id))
    warnings = dispatch_all(
        [("Rejection notification", tasks.notify_payout_rejected.delay, {"payout_id": str(payout.id)})]
    )
    return payout, warnings
