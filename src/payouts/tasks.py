"""Payout notifications."""

import structlog
from celery import shared_task
from django.template.loader import render_to_string

from common.models import SiteSettings

from .models import Payout

logger = structlog.get_logger(__name__)


def _send(payout: Payout, template: str, subject: str) -> None:
    from common.tasks import send_email

    context = {
        "payout": payout,
        "host": payout.host,
        "frontend_base_url": SiteSettings.get_solo().frontend_base_url,
    }
    send_email(
        to=payout.host.email,
        subject=subject,
        body=render_to_string(f"payouts/emails/{template}.txt", context),
        html_body=render_to_string(f"payouts/emails/{template}.html", context),
    )


@shared_task
def notify_withdrawal_requested(payout_id: str) -> None:
    """Acknowledge a new withdrawal request to the host."""
    payout = Payout.objects.select_related("host").get(pk=payout_id)
    _send(payout, "withdrawal_requested", "We received your withdrawal request")
    logger.info("withdrawal_request_notified", payout_id=payout_id)


@shared_task
def notify_payout_approved(payout_id: str) -> None:
    payout = Payout.objects.select_related("host", "decision").get(pk=payout_id)
    _send(payout, "payout_approved", "Your payout has been sent")
    logger.info("payout_approval_notified", payout_id=payout_id)


@shared_task
def notify_payout_rejected(payout_id: str) -> None:
    payout = Payout.objects.select_related("host").get(pk=payout_id)
    _send(payout, "payout_rejected", "Your payout request was declined")
    logger.info("payout_rejection_notified", payout_id=payout_id)
