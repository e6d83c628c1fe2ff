"""Host balances and platform revenue, derived from source rows on every call.

No balance is ever stored: a host's balance is ticket revenue on completed transactions
minus the amounts of completed payouts. Pending and rejected payouts never count.
"""

import typing as t
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

import structlog
from django.db.models import Count, DecimalField, Q, QuerySet, Sum, Value
from django.db.models.functions import Coalesce

from accounts.models import BoxOfficeUser
from events.models import Event, Ticket, Transaction
from events.service.fee_schedule import ZERO, compute_fees
from payouts.models import Payout

logger = structlog.get_logger(__name__)

_MONEY = DecimalField(max_digits=14, decimal_places=2)


@dataclass(frozen=True)
class DailyAggregates:
    start: datetime
    end: datetime
    transaction_count: int
    gross: Decimal
    processor_cut: Decimal
    platform_cut: Decimal

    @property
    def net(self) -> Decimal:
        return self.gross - self.processor_cut - self.platform_cut


@dataclass
class Wallet:
    balance: Decimal
    gross_revenue: Decimal
    total_withdrawn: Decimal
    total_tickets_sold: int
    events: list[Event] = field(default_factory=list)
    payouts: list[Payout] = field(default_factory=list)


def sold_tickets(host: BoxOfficeUser) -> QuerySet[Ticket]:
    return Ticket.objects.filter(event__host=host).sold()


def gross_revenue(host: BoxOfficeUser) -> Decimal:
    """Sum of the unit prices of every ticket sold on the host's events."""
    qs = sold_tickets(host)
    return t.cast(Decimal, qs.aggregate(total=Coalesce(Sum("price"), Value(ZERO), output_field=_MONEY))["total"])


def total_withdrawn(host: BoxOfficeUser) -> Decimal:
    """Sum of completed payout amounts. The gross amount is debited, not the net."""
    qs = Payout.objects.for_host(host).completed()
    return t.cast(Decimal, qs.aggregate(total=Coalesce(Sum("amount"), Value(ZERO), output_field=_MONEY))["total"])


def balance_of(host: BoxOfficeUser) -> Decimal:
    """The amount the host may withdraw right now."""
    return gross_revenue(host) - total_withdrawn(host)


def events_with_revenue(host: BoxOfficeUser) -> QuerySet[Event]:
    """The host's events annotated with ``tickets_sold`` and ``revenue``."""
    completed = Q(tickets__transaction__status=Transaction.Status.COMPLETED)
    return (
        Event.objects.for_host(host)
        .annotate(
            tickets_sold=Count("tickets", filter=completed),
            revenue=Coalesce(Sum("tickets__price", filter=completed), Value(ZERO), output_field=_MONEY),
        )
        .order_by("-start")
    )


def wallet(host: BoxOfficeUser) -> Wallet:
    gross = gross_revenue(host)
    withdrawn = total_withdrawn(host)
    return Wallet(
        balance=gross - withdrawn,
        gross_revenue=gross,
        total_withdrawn=withdrawn,
        total_tickets_sold=sold_tickets(host).count(),
        events=list(events_with_revenue(host)),
        payouts=list(Payout.objects.for_host(host).select_related("event")),
    )


def daily_aggregates(start: datetime, end: datetime) -> DailyAggregates:
    """Platform revenue for completed transactions created in ``[start, end)``.

    Fees are recomputed from the fee schedule per transaction. A transaction whose amount is
    not a positive number is logged and left out of every total.
    """
    gross = processor = platform = ZERO
    count = 0
    rows = Transaction.objects.filter(
        status=Transaction.Status.COMPLETED, created_at__gte=start, created_at__lt=end
    ).values_list("id", "subtotal")
    for transaction_id, subtotal in rows:
        if subtotal is None or subtotal <= 0:
            logger.warning("ledger_malformed_amount", transaction_id=str(transaction_id), amount=str(subtotal))
            continue
        breakdown = compute_fees(subtotal)
        gross += subtotal
        processor += breakdown.processor_fee
        platform += breakdown.platform_fee
        count += 1
    return DailyAggregates(
        start=start, end=end, transaction_count=count, gross=gross, processor_cut=processor, platform_cut=platform
    )
