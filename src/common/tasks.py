"""Outgoing email and email log housekeeping."""

from datetime import timedelta

import structlog
from celery import shared_task
from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.utils import timezone

from common.models import EmailLog, SiteSettings

logger = structlog.get_logger(__name__)

EMAIL_LOG_RETENTION = timedelta(days=7)
EMAIL_BODY_RETENTION = timedelta(days=1)


def _log_emails(recipients: list[str], subject: str, body: str, html_body: str | None) -> None:
    logs = []
    for recipient in recipients:
        log = EmailLog(to=recipient, subject=subject)
        log.set_body(body=body)
        if html_body:
            log.set_html(html_body=html_body)
        logs.append(log)
    EmailLog.objects.bulk_create(logs)


@shared_task
def send_email(*, to: str | list[str], subject: str, body: str, html_body: str | None = None) -> None:
    """Send one message to every recipient (as bcc) and keep a compressed copy per recipient.

    Args:
        to (str | list[str]): One or more recipient addresses.
        subject (str): The email subject.
        body (str): The plain text body.
        html_body (str | None): An optional HTML alternative.
    """
    site_settings = SiteSettings.get_solo()
    addresses = [to] if isinstance(to, str) else list(to)
    recipients = [to_safe_email_address(address, site_settings=site_settings) for address in addresses]

    message = EmailMultiAlternatives(subject=subject, body=body, from_email=settings.DEFAULT_FROM_EMAIL, bcc=recipients)
    if html_body:
        message.attach_alternative(html_body, "text/html")
    message.send(fail_silently=False)

    _log_emails(recipients, subject, body, html_body)
    logger.info("email_sent", subject=subject, recipient_count=len(recipients), live=site_settings.live_emails)


@shared_task
def cleanup_email_logs() -> None:
    """Drop logs older than a week and strip the bodies of logs older than a day."""
    now = timezone.now()
    deleted, _ = EmailLog.objects.filter(sent_at__lte=now - EMAIL_LOG_RETENTION).delete()
    stripped = EmailLog.objects.filter(sent_at__lte=now - EMAIL_BODY_RETENTION).update(
        compressed_body=None, compressed_html=None
    )
    logger.info("email_logs_cleaned", deleted=deleted, stripped=stripped)


def to_safe_email_address(email: str, site_settings: SiteSettings | None = None) -> str:
    """Return the address a message for ``email`` is actually delivered to.

    While live emails are off, every address becomes a plus-address of the internal catch-all
    mailbox, e.g. ``ada@example.com`` -> ``internal+ada_at_example_dot_com@example.com``.
    """
    site_settings = site_settings or SiteSettings.get_solo()
    if site_settings.live_emails:
        return email
    local_part, domain = site_settings.internal_catchall_email.split("@", 1)
    tag = email.replace("@", "_at_").replace(".", "_dot_")
    return f"{local_part}+{tag}@{domain}"
