"""Checkout of one or more ticket tiers against an already-captured payment."""

import typing as t
from dataclasses import dataclass, field
from decimal import Decimal

import structlog
from django.db import IntegrityError, transaction

from accounts.models import BoxOfficeUser
from accounts.service.account import resolve_buyer
from common.exceptions import DuplicatePaymentReferenceError, InvalidInputError
from common.side_effects import dispatch_all
from events import tasks
from events.models import Event, StockReservation, Ticket, TicketTier, Transaction
from events.schema import PurchaseItemSchema, PurchaseSchema
from events.service import inventory, ticket_service
from events.service.fee_schedule import compute_fees

logger = structlog.get_logger(__name__)


@dataclass
class PurchaseResult:
    transaction: Transaction
    tickets: list[Ticket]
    warnings: list[str] = field(default_factory=list)


@dataclass
class _ReservedLine:
    item: PurchaseItemSchema
    buyer: BoxOfficeUser
    reservation: StockReservation

    @property
    def tier(self) -> TicketTier:
        return self.reservation.tier


class PurchaseService:
    """Record a completed checkout for an event.

    Stock reservation, ticket issuance and the transaction record share one atomic block:
    any failure rolls all of them back, which returns the reserved stock to its tiers.
    QR rendering and the confirmation email run only after the block commits.
    """

    def __init__(self, event: Event) -> None:
        self.event = event

    def purchase(self, payload: PurchaseSchema) -> PurchaseResult:
        logger.info(
            "ticket_purchase_started",
            event_id=str(self.event.id),
            reference=payload.reference,
            item_count=len(payload.items),
        )
        try:
            sale, tickets = self._record(payload)
        except IntegrityError as exc:
            # A concurrent checkout inserted the same reference first.
            if Transaction.objects.filter(reference=payload.reference).exists():
                raise DuplicatePaymentReferenceError() from exc
            raise

        warnings = dispatch_all(
            [
                ("QR code generation", tasks.generate_ticket_qr.delay, {"ticket_ids": [str(t.id) for t in tickets]}),
                ("Confirmation email", tasks.send_purchase_confirmation.delay, {"transaction_id": str(sale.id)}),
            ]
        )
        logger.info(
            "ticket_purchase_completed",
            event_id=str(self.event.id),
            transaction_id=str(sale.id),
            ticket_count=len(tickets),
            warnings=len(warnings),
        )
        return PurchaseResult(transaction=sale, tickets=tickets, warnings=warnings)

    @transaction.atomic
    def _record(self, payload: PurchaseSchema) -> tuple[Transaction, list[Ticket]]:
        if Transaction.objects.filter(reference=payload.reference).exists():
            raise DuplicatePaymentReferenceError()

        lines = [self._reserve_line(item) for item in payload.items]
        currency = self._single_currency(lines)
        subtotal = sum((line.tier.price * line.item.quantity for line in lines), Decimal("0"))
        total = subtotal + payload.fees
        if total <= 0:
            raise InvalidInputError("Transaction total must be greater than zero.")

        breakdown = compute_fees(subtotal)
        fees_reconciled = breakdown.total == payload.fees
        if not fees_reconciled:
            logger.warning(
                "purchase_fee_mismatch",
                reference=payload.reference,
                supplied_fees=str(payload.fees),
                computed_fees=str(breakdown.total),
            )

        sale = Transaction.objects.create(
            event=self.event,
            buyer=lines[0].buyer,
            reference=payload.reference,
            subtotal=subtotal,
            fees=payload.fees,
            processor_fee=breakdown.processor_fee,
            platform_fee=breakdown.platform_fee,
            fees_reconciled=fees_reconciled,
            total=total,
            currency=currency,
        )

        tickets: list[Ticket] = []
        for line in lines:
            for _ in range(line.item.quantity):
                tickets.append(ticket_service.issue_ticket(line.tier, line.buyer, sale=sale))
            inventory.consume(line.reservation)
        return sale, tickets

    def _reserve_line(self, item: PurchaseItemSchema) -> _ReservedLine:
        tier = TicketTier.objects.filter(event=self.event, code=item.tier_code).first()
        if tier is not None and tier.purchase_limit is not None and item.quantity > tier.purchase_limit:
            raise InvalidInputError(f"You can buy at most {tier.purchase_limit} {tier.name} tickets at once.")
        reservation = inventory.reserve(self.event.id, item.tier_code, item.quantity)
        return _ReservedLine(item=item, buyer=resolve_buyer(item.customer), reservation=reservation)

    @staticmethod
    def _single_currency(lines: t.Sequence[_ReservedLine]) -> str:
        currencies = {line.tier.currency for line in lines}
        if len(currencies) > 1:
            raise InvalidInputError("All tickets in one purchase must be priced in the same currency.")
        return currencies.pop()
