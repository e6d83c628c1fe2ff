"""Issued ticket lifecycle: issue, check in, search."""

import typing as t
from decimal import Decimal

import structlog
from django.conf import settings
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from accounts.models import BoxOfficeUser
from common.exceptions import TicketAlreadyUsedError, TicketNotFoundError
from events.models import Event, Ticket, TicketTier, Transaction

logger = structlog.get_logger(__name__)


def build_qr_payload(ticket: Ticket, tier: TicketTier, buyer: BoxOfficeUser) -> dict[str, t.Any]:
    """Everything a scanner needs to verify the ticket offline."""
    event = ticket.event
    return {
        "event_id": str(event.id),
        "event_name": event.name,
        "ticket_id": ticket.code,
        "ticket_name": tier.name,
        "ticket_type": tier.ticket_type,
        "price": f"{ticket.price:.2f}",
        "buyer_name": buyer.display_name,
        "buyer_email": buyer.email,
        "start": event.start.isoformat(),
        "venue": event.venue,
    }


def issue_ticket(
    tier: TicketTier, buyer: BoxOfficeUser, *, sale: Transaction, unit_price: Decimal | None = None
) -> Ticket:
    """Create one valid ticket for ``buyer``.

    The unit price is copied from the tier unless given explicitly and never changes
    afterwards.
    """
    ticket = Ticket(
        event=tier.event,
        tier=tier,
        tier_name=tier.name,
        ticket_type=tier.ticket_type,
        group_size=tier.group_size,
        buyer=buyer,
        transaction=sale,
        price=tier.price if unit_price is None else unit_price,
    )
    ticket.qr_payload = build_qr_payload(ticket, tier, buyer)
    ticket.save()
    return ticket


@transaction.atomic
def check_in_ticket(event: Event, identifier: str, checked_in_by: BoxOfficeUser) -> Ticket:
    """Redeem a ticket by its code or internal id.

    Raises:
        TicketNotFoundError: no ticket of this event matches the identifier.
        TicketAlreadyUsedError: the ticket was checked in before; it is left untouched.
    """
    ticket = Ticket.objects.select_for_update().filter(event=event).by_identifier(identifier).first()
    if ticket is None:
        raise TicketNotFoundError()
    if ticket.status == Ticket.TicketStatus.USED:
        logger.info("ticket_check_in_rejected", ticket_id=str(ticket.id), checked_in_at=str(ticket.checked_in_at))
        raise TicketAlreadyUsedError()

    ticket.status = Ticket.TicketStatus.USED
    ticket.checked_in_at = timezone.now()
    ticket.checked_in_by = checked_in_by
    ticket.save(update_fields=["status", "checked_in_at", "checked_in_by", "updated_at"])
    logger.info("ticket_checked_in", ticket_id=str(ticket.id), event_id=str(event.id))
    return ticket


def search_tickets(event: Event, query: str, limit: int | None = None) -> list[Ticket]:
    """Find tickets by code, internal id or buyer email. Ordering is not guaranteed."""
    query = query.strip()
    if not query:
        return []
    limit = limit or settings.TICKET_SEARCH_LIMIT
    return list(Ticket.objects.filter(event=event).search(query).with_buyer()[:limit])


def checked_in_tickets(event: Event) -> QuerySet[Ticket]:
    return Ticket.objects.filter(event=event).used().with_buyer().order_by("-checked_in_at")


def ticket_buyers(event: Event) -> QuerySet[Ticket]:
    return Ticket.objects.filter(event=event).sold().with_buyer().order_by("created_at")
