import gzip
import typing as t
import uuid

from django.conf import settings
from django.db import models
from solo.models import SingletonModel


class TimeStampedModel(models.Model):
    """UUID primary key, creation and update stamps, and validation on every save."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True, db_index=True)

    class Meta:
        abstract = True

    def save(self, *args: t.Any, **kwargs: t.Any) -> None:
        """Run ``full_clean`` so model invariants hold for every write through the ORM."""
        self.full_clean()
        super().save(*args, **kwargs)


class SiteSettings(SingletonModel):
    """Runtime switches editable from the admin."""

    live_emails = models.BooleanField(
        default=False, help_text="Deliver emails to real recipients. When off, everything goes to the catch-all."
    )
    internal_catchall_email = models.EmailField(
        verbose_name="Internal Catchall Email",
        help_text="Receives every outgoing email while live emails are disabled.",
        default=settings.INTERNAL_CATCHALL_EMAIL,
    )
    frontend_base_url = models.URLField(default=settings.FRONTEND_BASE_URL, help_text="Used for links in emails.")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Site Settings"
        verbose_name_plural = "Site Settings"

    def __str__(self) -> str:  # pragma: no cover
        return "Site Settings"


def _compress(text: str) -> bytes:
    return gzip.compress(text.encode())


def _decompress(data: bytes | memoryview | None) -> str | None:
    if not data:
        return None
    return gzip.decompress(bytes(data)).decode()


class EmailLog(TimeStampedModel):
    """A copy of one delivered email, per recipient. Bodies are stored gzipped."""

    to = models.EmailField(db_index=True)
    subject = models.TextField(db_index=True)
    sent_at = models.DateTimeField(auto_now_add=True, db_index=True)
    compressed_body = models.BinaryField(null=True, blank=True)
    compressed_html = models.BinaryField(null=True, blank=True)

    class Meta:
        indexes = [models.Index(fields=["to", "sent_at"], name="ix_emaillog_to_sentat")]

    def set_body(self, body: str) -> None:
        self.compressed_body = _compress(body)

    def set_html(self, html_body: str) -> None:
        self.compressed_html = _compress(html_body)

    @property
    def body(self) -> str | None:
        return _decompress(self.compressed_body)

    @property
    def html(self) -> str | None:
        return _decompress(self.compressed_html)

    def __str__(self) -> str:
        return f"Email to {self.to}: {self.subject}"
