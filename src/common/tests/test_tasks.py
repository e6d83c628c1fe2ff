from datetime import timedelta

import pytest
from django.core import mail
from django.utils import timezone
from freezegun import freeze_time

from common.models import EmailLog, SiteSettings
from common.tasks import cleanup_email_logs, send_email, to_safe_email_address

pytestmark = pytest.mark.django_db


def test_send_email_redirects_to_catchall() -> None:
    send_email(to="ada@example.com", subject="Hello", body="Plain", html_body="<p>Html</p>")

    [message] = mail.outbox
    assert message.bcc == ["internal+ada_at_example_dot_com@example.com"]
    log = EmailLog.objects.get()
    assert log.to == "internal+ada_at_example_dot_com@example.com"
    assert log.body == "Plain"
    assert log.html == "<p>Html</p>"


def test_send_email_live() -> None:
    site_settings = SiteSettings.get_solo()
    site_settings.live_emails = True
    site_settings.save()

    send_email(to=["ada@example.com", "chidi@example.com"], subject="Hello", body="Plain")

    assert mail.outbox[0].bcc == ["ada@example.com", "chidi@example.com"]
    assert EmailLog.objects.count() == 2


def test_to_safe_email_address_uses_given_settings() -> None:
    site_settings = SiteSettings(live_emails=False, internal_catchall_email="qa@boxoffice.test")
    assert to_safe_email_address("a.b@c.io", site_settings=site_settings) == "qa+a_dot_b_at_c_dot_io@boxoffice.test"


def test_cleanup_email_logs() -> None:
    now = timezone.now()
    for age in (timedelta(days=8), timedelta(days=2), timedelta(hours=1)):
        with freeze_time(now - age):
            send_email(to="ada@example.com", subject=f"{age}", body="Body")

    cleanup_email_logs()

    logs = list(EmailLog.objects.order_by("sent_at"))
    assert len(logs) == 2
    assert logs[0].body is None
    assert logs[1].body == "Body"
