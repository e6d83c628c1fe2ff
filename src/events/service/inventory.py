"""Ticket inventory: tier management and stock allocation.

Stock only ever moves through ``reserve``, ``release`` and ``update_tier``. ``reserve``
checks and decrements ``remaining_quantity`` in a single conditional UPDATE, so two
concurrent purchases can never both take the last unit.
"""

import typing as t
import uuid
from decimal import Decimal
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from common.exceptions import (
    InsufficientStockError,
    InvalidInputError,
    ReservationAlreadyReleasedError,
    TierNotFoundError,
)
from events.models import Event, StockReservation, TicketTier
from events.schema import TicketTierCreateSchema, TicketTierPayload

logger = structlog.get_logger(__name__)

ALLOWED_CURRENCIES = frozenset(TicketTier.Currency.values)
UNLIMITED_GROUP_SIZE = "unlimited"
REQUIRED = "This field is required."


def _parse_group_size(value: int | str | None) -> tuple[int | None, str | None]:
    """Return ``(group_size, error)``. ``None`` group size means unlimited."""
    if value is None:
        return None, None
    if isinstance(value, str):
        if value.strip().lower() == UNLIMITED_GROUP_SIZE:
            return None, None
        if not value.strip().isdigit():
            return None, "Group size must be 'unlimited' or a positive whole number."
        value = int(value)
    if value < 1:
        return None, "Group size must be 'unlimited' or a positive whole number."
    return value, None


def validate_tier_payload(payload: TicketTierPayload) -> dict[str, list[str]]:
    """Check a tier payload and collect every field error in one pass."""
    errors: dict[str, list[str]] = {}

    def add(field: str, message: str) -> None:
        errors.setdefault(field, []).append(message)

    if not payload.name:
        add("name", REQUIRED)
    if payload.quantity is None:
        add("quantity", REQUIRED)
    elif payload.quantity < 0:
        add("quantity", "Quantity cannot be negative.")

    if payload.currency is None:
        add("currency", REQUIRED)
    elif payload.currency.upper() not in ALLOWED_CURRENCIES:
        add("currency", f"Currency must be one of {', '.join(sorted(ALLOWED_CURRENCIES))}.")

    if payload.ticket_type is None:
        add("ticket_type", REQUIRED)
    elif payload.ticket_type == TicketTier.TicketType.INDIVIDUAL:
        if payload.per_ticket_price is None:
            add("per_ticket_price", REQUIRED)
        elif payload.per_ticket_price < 0:
            add("per_ticket_price", "Price cannot be negative.")
    elif payload.ticket_type == TicketTier.TicketType.GROUP:
        if payload.group_price is None:
            add("group_price", REQUIRED)
        elif payload.group_price < 0:
            add("group_price", "Price cannot be negative.")
        _, group_size_error = _parse_group_size(payload.group_size)
        if group_size_error:
            add("group_size", group_size_error)
    else:
        add("ticket_type", "Ticket type must be 'Individual' or 'Group'.")

    return errors


def _tier_attributes(payload: TicketTierPayload) -> dict[str, t.Any]:
    is_group = payload.ticket_type == TicketTier.TicketType.GROUP
    group_size, _ = _parse_group_size(payload.group_size) if is_group else (None, None)
    price = payload.group_price if is_group else payload.per_ticket_price
    return {
        "name": payload.name,
        "description": payload.description,
        "ticket_type": payload.ticket_type,
        "price": t.cast(Decimal, price),
        "currency": t.cast(str, payload.currency).upper(),
        "group_size": group_size,
        "purchase_limit": payload.purchase_limit,
        "perks": payload.perks,
        "transfer_fees": payload.transfer_fees,
    }


def _raise_if_invalid(payload: TicketTierPayload) -> None:
    errors = validate_tier_payload(payload)
    if errors:
        raise DjangoValidationError(errors)


def create_tier(event: Event, payload: TicketTierCreateSchema) -> TicketTier:
    """Create a tier with its full quantity in stock."""
    _raise_if_invalid(payload)
    quantity = t.cast(int, payload.quantity)
    tier = TicketTier.objects.create(
        event=event,
        code=payload.code or uuid.uuid4().hex,
        total_quantity=quantity,
        remaining_quantity=quantity,
        **_tier_attributes(payload),
    )
    logger.info("ticket_tier_created", event_id=str(event.id), tier_code=tier.code, quantity=quantity)
    return tier


@transaction.atomic
def update_tier(event: Event, code: str, payload: TicketTierPayload) -> TicketTier:
    """Replace a tier's attributes wholesale.

    ``quantity`` becomes the new total. Units already sold or held stay out of stock, so the
    new total may not be lower than that count.
    """
    tier = TicketTier.objects.select_for_update().filter(event=event, code=code).first()
    if tier is None:
        raise TierNotFoundError()
    errors = validate_tier_payload(payload)
    quantity = payload.quantity
    if quantity is not None and quantity < tier.sold_quantity and "quantity" not in errors:
        errors["quantity"] = [f"Quantity cannot be less than the {tier.sold_quantity} ticket(s) already sold."]
    if errors:
        raise DjangoValidationError(errors)

    sold = tier.sold_quantity
    for attr, value in _tier_attributes(payload).items():
        setattr(tier, attr, value)
    tier.total_quantity = t.cast(int, quantity)
    tier.remaining_quantity = tier.total_quantity - sold
    tier.save()
    logger.info("ticket_tier_updated", event_id=str(event.id), tier_code=code, total=tier.total_quantity)
    return tier


def delete_tier(event: Event, code: str) -> None:
    """Remove a tier. Tickets already issued keep their tier snapshot."""
    deleted, _ = TicketTier.objects.filter(event=event, code=code).delete()
    if not deleted:
        raise TierNotFoundError()
    logger.info("ticket_tier_deleted", event_id=str(event.id), tier_code=code)


@transaction.atomic
def reserve(event_id: UUID, tier_code: str, quantity: int) -> StockReservation:
    """Take ``quantity`` units out of a tier's stock.

    Raises:
        InvalidInputError: quantity is below one.
        TierNotFoundError: no tier with this code exists on the event.
        InsufficientStockError: fewer than ``quantity`` units remain.
    """
    if quantity < 1:
        raise InvalidInputError("Quantity must be at least 1.")
    tier = TicketTier.objects.filter(event_id=event_id, code=tier_code).first()
    if tier is None:
        raise TierNotFoundError()

    updated = TicketTier.objects.filter(pk=tier.pk, remaining_quantity__gte=quantity).update(
        remaining_quantity=F("remaining_quantity") - quantity, updated_at=timezone.now()
    )
    if not updated:
        logger.info("stock_reservation_rejected", tier_id=str(tier.pk), requested=quantity)
        raise InsufficientStockError(tier.name)

    reservation = StockReservation.objects.create(tier=tier, quantity=quantity)
    logger.info("stock_reserved", tier_id=str(tier.pk), quantity=quantity, reservation_id=str(reservation.pk))
    return reservation


def _lock_held(reservation: StockReservation) -> StockReservation:
    locked = StockReservation.objects.select_for_update().get(pk=reservation.pk)
    if locked.status != StockReservation.Status.HELD:
        raise ReservationAlreadyReleasedError()
    return locked


@transaction.atomic
def release(reservation: StockReservation) -> StockReservation:
    """Return a held reservation's units to stock.

    Raises:
        ReservationAlreadyReleasedError: the reservation was already released or consumed.
    """
    locked = _lock_held(reservation)
    TicketTier.objects.filter(pk=locked.tier_id).update(
        remaining_quantity=F("remaining_quantity") + locked.quantity, updated_at=timezone.now()
    )
    locked.status = StockReservation.Status.RELEASED
    locked.released_at = timezone.now()
    locked.save(update_fields=["status", "released_at", "updated_at"])
    logger.info("stock_released", tier_id=str(locked.tier_id), quantity=locked.quantity)
    return locked


@transaction.atomic
def consume(reservation: StockReservation) -> StockReservation:
    """Mark a held reservation as converted into issued tickets."""
    locked = _lock_held(reservation)
    locked.status = StockReservation.Status.CONSUMED
    locked.save(update_fields=["status", "updated_at"])
    return locked
