"""Event and ticket background tasks."""

from collections import defaultdict

import structlog
from celery import shared_task
from django.core.files.base import ContentFile
from django.db.models import Q
from django.template.loader import render_to_string

from accounts.models import BoxOfficeUser
from common.models import SiteSettings

from .models import Ticket, Transaction
from .utils import render_qr_png

logger = structlog.get_logger(__name__)


@shared_task
def generate_ticket_qr(ticket_ids: list[str]) -> int:
    """Render and store the QR image of each ticket.

    Tickets that already carry an image are skipped, so the task is safe to retry.

    Returns:
        The number of images written.
    """
    generated = 0
    for ticket in Ticket.objects.filter(Q(qr_code="") | Q(qr_code__isnull=True), id__in=ticket_ids):
        png = render_qr_png(ticket.qr_payload)
        ticket.qr_code.save(f"{ticket.code}.png", ContentFile(png), save=False)
        ticket.save(update_fields=["qr_code", "updated_at"])
        generated += 1
    logger.info("ticket_qr_codes_generated", requested=len(ticket_ids), generated=generated)
    return generated


@shared_task
def send_purchase_confirmation(transaction_id: str) -> None:
    """Email every buyer in a transaction the tickets issued to them."""
    from common.tasks import send_email

    sale = Transaction.objects.select_related("event").get(pk=transaction_id)
    tickets_by_buyer: dict[BoxOfficeUser, list[Ticket]] = defaultdict(list)
    for ticket in sale.tickets.select_related("buyer").order_by("created_at"):
        tickets_by_buyer[ticket.buyer].append(ticket)

    frontend_base_url = SiteSettings.get_solo().frontend_base_url
    subject = f"Your tickets for {sale.event.name}"
    for buyer, tickets in tickets_by_buyer.items():
        if not buyer.email:
            logger.warning("purchase_confirmation_skipped_no_email", buyer_id=str(buyer.id))
            continue
        context = {
            "buyer": buyer,
            "event": sale.event,
            "tickets": tickets,
            "transaction": sale,
            "frontend_base_url": frontend_base_url,
        }
        send_email(
            to=buyer.email,
            subject=subject,
            body=render_to_string("events/emails/purchase_confirmation.txt", context),
            html_body=render_to_string("events/emails/purchase_confirmation.html", context),
        )
    logger.info("purchase_confirmation_sent", transaction_id=transaction_id, buyer_count=len(tickets_by_buyer))
