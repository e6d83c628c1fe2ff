import typing as t
import uuid
from uuid import UUID

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import F, Q

from common.models import TimeStampedModel

from .event import Event

if t.TYPE_CHECKING:
    from .transaction import Transaction  # noqa: F401


class TicketTierQuerySet(models.QuerySet["TicketTier"]):
    def for_event(self, event: Event) -> t.Self:
        return self.filter(event=event)

    def with_event(self) -> t.Self:
        """Select the event for serialization (not for transactional queries)."""
        return self.select_related("event")


class TicketTier(TimeStampedModel):
    """A priced category of tickets for one event with finite stock.

    ``remaining_quantity`` is only ever changed through the inventory service, which
    decrements it with a conditional UPDATE so that concurrent purchases cannot oversell.
    """

    class TicketType(models.TextChoices):
        INDIVIDUAL = "Individual", "Individual"
        GROUP = "Group", "Group"

    class Currency(models.TextChoices):
        USD = "USD", "US Dollar"
        NGN = "NGN", "Nigerian Naira"
        GBP = "GBP", "British Pound"
        EUR = "EUR", "Euro"

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="ticket_tiers")
    code = models.CharField(max_length=64, help_text="Identifier supplied by the host, unique within the event.")
    name = models.CharField(max_length=150)
    description = models.TextField(blank=True, default="")
    ticket_type = models.CharField(max_length=20, choices=TicketType.choices, default=TicketType.INDIVIDUAL)
    price = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    currency = models.CharField(max_length=3, choices=Currency.choices, default=settings.DEFAULT_CURRENCY)
    group_size = models.PositiveIntegerField(
        null=True, blank=True, help_text="Number of admissions per group ticket. Empty means unlimited."
    )
    total_quantity = models.PositiveIntegerField(default=0)
    remaining_quantity = models.PositiveIntegerField(default=0)
    purchase_limit = models.PositiveIntegerField(null=True, blank=True)
    perks = models.JSONField(default=list, blank=True)
    transfer_fees = models.BooleanField(default=False, help_text="Pass processing fees on to the buyer.")

    objects = TicketTierQuerySet.as_manager()

    class Meta:
        ordering = ["event", "created_at"]
        constraints = [
            models.UniqueConstraint(fields=["event", "code"], name="unique_event_tier_code"),
            models.CheckConstraint(condition=Q(remaining_quantity__gte=0), name="tier_remaining_non_negative"),
            models.CheckConstraint(
                condition=Q(remaining_quantity__lte=F("total_quantity")), name="tier_remaining_lte_total"
            ),
        ]

    def _validate_quantities(self) -> None:
        if self.remaining_quantity > self.total_quantity:
            raise DjangoValidationError({"remaining_quantity": "Remaining quantity cannot exceed the total."})

    def _validate_group_size(self) -> None:
        if self.ticket_type == self.TicketType.INDIVIDUAL and self.group_size is not None:
            raise DjangoValidationError({"group_size": "Only group tiers have a group size."})
        if self.group_size == 0:
            raise DjangoValidationError({"group_size": "Group size must be a positive number."})

    def clean(self) -> None:
        """Validate stock and group size constraints."""
        super().clean()
        self._validate_quantities()
        self._validate_group_size()

    @property
    def sold_quantity(self) -> int:
        """Units taken out of stock, including reservations that are still held."""
        return self.total_quantity - self.remaining_quantity

    @property
    def is_unlimited_group(self) -> bool:
        return self.ticket_type == self.TicketType.GROUP and self.group_size is None

    def __str__(self) -> str:
        return f"{self.event.name} - {self.name}"


class StockReservation(TimeStampedModel):
    """Units taken out of a tier's stock, pending conversion into tickets."""

    class Status(models.TextChoices):
        HELD = "held"
        RELEASED = "released"
        CONSUMED = "consumed"

    tier = models.ForeignKey(TicketTier, on_delete=models.CASCADE, related_name="reservations")
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.HELD, db_index=True)
    released_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.quantity} x {self.tier_id} ({self.status})"


def generate_ticket_code() -> str:
    return str(uuid.uuid4())


class TicketQuerySet(models.QuerySet["Ticket"]):
    def sold(self) -> t.Self:
        """Tickets backed by a completed transaction."""
        from .transaction import Transaction

        return self.filter(transaction__status=Transaction.Status.COMPLETED)

    def used(self) -> t.Self:
        return self.filter(status=Ticket.TicketStatus.USED)

    def by_identifier(self, identifier: str) -> t.Self:
        """Match the public ticket code, or the internal id when the identifier is a UUID."""
        condition = Q(code=identifier)
        try:
            condition |= Q(pk=UUID(identifier))
        except ValueError:
            pass
        return self.filter(condition)

    def search(self, query: str) -> t.Self:
        """Match by ticket code, internal id, or buyer email (case-insensitive substring)."""
        condition = Q(code=query) | Q(buyer__email__icontains=query)
        try:
            condition |= Q(pk=UUID(query))
        except ValueError:
            pass
        return self.filter(condition)

    def with_buyer(self) -> t.Self:
        return self.select_related("buyer", "tier")


class Ticket(TimeStampedModel):
    """One sold admission, redeemable exactly once."""

    class TicketStatus(models.TextChoices):
        VALID = "valid"
        USED = "used"

    event = models.ForeignKey(Event, on_delete=models.PROTECT, related_name="tickets")
    tier = models.ForeignKey(TicketTier, on_delete=models.SET_NULL, null=True, blank=True, related_name="tickets")
    tier_name = models.CharField(max_length=150)
    ticket_type = models.CharField(
        max_length=20, choices=TicketTier.TicketType.choices, default=TicketTier.TicketType.INDIVIDUAL
    )
    group_size = models.PositiveIntegerField(null=True, blank=True)
    buyer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="tickets")
    transaction = models.ForeignKey("events.Transaction", on_delete=models.PROTECT, related_name="tickets")
    code = models.CharField(max_length=64, unique=True, default=generate_ticket_code)
    price = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    status = models.CharField(max_length=10, choices=TicketStatus.choices, default=TicketStatus.VALID, db_index=True)
    checked_in_at = models.DateTimeField(null=True, blank=True)
    checked_in_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="+"
    )
    qr_payload = models.JSONField(default=dict, blank=True)
    qr_code = models.ImageField(upload_to="tickets/qr/", null=True, blank=True)

    objects = TicketQuerySet.as_manager()

    class Meta:
        ordering = ["created_at"]
        indexes = [models.Index(fields=["event", "status"], name="ix_ticket_event_status")]

    @property
    def is_used(self) -> bool:
        return self.status == self.TicketStatus.USED

    def __str__(self) -> str:
        return f"{self.tier_name} ({self.code})"
