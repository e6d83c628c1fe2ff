import typing as t
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import MinValueValidator, RegexValidator
from django.db import models

from common.models import TimeStampedModel

account_number_validator = RegexValidator(r"^\d{10}$", "Account number must be exactly 10 digits.")


class BankDetails(TimeStampedModel):
    """The account a host's payouts are sent to."""

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="bank_details")
    bank_name = models.CharField(max_length=255)
    bank_code = models.CharField(max_length=20)
    account_number = models.CharField(max_length=10, validators=[account_number_validator])
    account_name = models.CharField(max_length=255)

    class Meta:
        verbose_name_plural = "bank details"

    def __str__(self) -> str:
        return f"{self.bank_name} ****{self.account_number[-4:]}"


class PayoutQuerySet(models.QuerySet["Payout"]):
    def pending(self) -> t.Self:
        return self.filter(status=Payout.Status.PENDING)

    def completed(self) -> t.Self:
        return self.filter(status=Payout.Status.COMPLETED)

    def for_host(self, host: t.Any) -> t.Self:
        return self.filter(host=host)


class Payout(TimeStampedModel):
    """A host's request to withdraw ticket revenue.

    Only ``completed`` payouts reduce the host's balance. ``amount`` starts as the requested
    amount and becomes the approved amount once an admin decides.
    """

    class Status(models.TextChoices):
        PENDING = "pending"
        REJECTED = "rejected"
        COMPLETED = "completed"

    # approval disburses immediately; both outcomes are final
    ALLOWED_TRANSITIONS: t.ClassVar[dict[str, frozenset[str]]] = {
        Status.PENDING: frozenset({Status.COMPLETED, Status.REJECTED}),
        Status.REJECTED: frozenset(),
        Status.COMPLETED: frozenset(),
    }

    host = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="payouts")
    event = models.ForeignKey("events.Event", on_delete=models.SET_NULL, null=True, blank=True, related_name="payouts")
    requested_amount = models.DecimalField(max_digits=14, decimal_places=2, validators=[MinValueValidator(0)])
    amount = models.DecimalField(max_digits=14, decimal_places=2, validators=[MinValueValidator(0)])
    fee = models.DecimalField(max_digits=14, decimal_places=2, validators=[MinValueValidator(0)])
    net_amount = models.DecimalField(max_digits=14, decimal_places=2, validators=[MinValueValidator(0)])
    currency = models.CharField(max_length=3, default=settings.DEFAULT_CURRENCY)
    bank_name = models.CharField(max_length=255)
    bank_code = models.CharField(max_length=20)
    account_number = models.CharField(max_length=10, validators=[account_number_validator])
    account_name = models.CharField(max_length=255)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING, db_index=True)
    rejection_reason = models.TextField(blank=True, default="")
    processed_at = models.DateTimeField(null=True, blank=True)

    objects = PayoutQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]

    def clean(self) -> None:
        super().clean()
        if self.amount is not None and self.fee is not None and self.net_amount != self.amount - self.fee:
            raise DjangoValidationError({"net_amount": "Net amount must equal amount minus fee."})

    def can_transition_to(self, status: str) -> bool:
        return status in self.ALLOWED_TRANSITIONS.get(self.status, frozenset())

    def set_amount(self, amount: Decimal) -> None:
        self.amount = amount
        self.net_amount = amount - self.fee

    def __str__(self) -> str:
        return f"Payout {self.amount} to {self.account_name} ({self.status})"


class PayoutDecision(TimeStampedModel):
    """The admin decision recorded when a pending payout is approved or rejected."""

    class Decision(models.TextChoices):
        APPROVED = "approved"
        REJECTED = "rejected"

    payout = models.OneToOneField(Payout, on_delete=models.CASCADE, related_name="decision")
    decided_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="payout_decisions"
    )
    decision = models.CharField(max_length=10, choices=Decision.choices)
    approved_amount = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    proof_of_payment = models.FileField(upload_to="payouts/proofs/", null=True, blank=True)
    proof_description = models.TextField(blank=True, default="")
    notes = models.TextField(blank=True, default="")
    decided_at = models.DateTimeField(db_index=True)

    class Meta:
        ordering = ["-decided_at"]

    def __str__(self) -> str:
        return f"{self.decision} by {self.decided_by}"
