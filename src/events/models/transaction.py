from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import MinValueValidator
from django.db import models

from common.models import TimeStampedModel

from .event import Event


class Transaction(TimeStampedModel):
    """One completed checkout.

    ``fees`` is the figure supplied with the charge; ``processor_fee`` and ``platform_fee``
    are what the fee schedule computes for ``subtotal``. ``fees_reconciled`` records whether
    the two agree.
    """

    class Status(models.TextChoices):
        PENDING = "pending"
        COMPLETED = "completed"
        FAILED = "failed"

    event = models.ForeignKey(Event, on_delete=models.PROTECT, related_name="transactions")
    buyer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="purchases")
    reference = models.CharField(max_length=255, unique=True)
    subtotal = models.DecimalField(max_digits=14, decimal_places=2, validators=[MinValueValidator(0)])
    fees = models.DecimalField(max_digits=14, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    processor_fee = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    platform_fee = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    fees_reconciled = models.BooleanField(default=True)
    total = models.DecimalField(max_digits=14, decimal_places=2)
    currency = models.CharField(max_length=3, default=settings.DEFAULT_CURRENCY)
    payment_provider = models.CharField(max_length=50, default=settings.PAYMENT_PROVIDER)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.COMPLETED, db_index=True)

    class Meta:
        ordering = ["-created_at"]

    def clean(self) -> None:
        super().clean()
        if self.subtotal is not None and self.fees is not None and self.total != self.subtotal + self.fees:
            raise DjangoValidationError({"total": "Total must equal subtotal plus fees."})

    def __str__(self) -> str:
        return self.reference
