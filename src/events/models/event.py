import typing as t
from datetime import datetime

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone

from common.models import TimeStampedModel

if t.TYPE_CHECKING:
    from accounts.models import BoxOfficeUser


class EventQuerySet(models.QuerySet["Event"]):
    def for_host(self, host: "BoxOfficeUser") -> t.Self:
        return self.filter(host=host)

    def live(self, now: datetime | None = None) -> t.Self:
        """Events that have not finished yet.

        An event without an end time is live until it starts.
        """
        now = now or timezone.now()
        return self.filter(Q(end__gte=now) | Q(end__isnull=True, start__gte=now))

    def past(self, now: datetime | None = None) -> t.Self:
        now = now or timezone.now()
        return self.filter(Q(end__lt=now) | Q(end__isnull=True, start__lt=now))


class EventManager(models.Manager["Event"]):
    def get_queryset(self) -> EventQuerySet:
        return EventQuerySet(self.model, using=self._db)

    def for_host(self, host: "BoxOfficeUser") -> EventQuerySet:
        return self.get_queryset().for_host(host)

    def live(self, now: datetime | None = None) -> EventQuerySet:
        return self.get_queryset().live(now)

    def past(self, now: datetime | None = None) -> EventQuerySet:
        return self.get_queryset().past(now)


class Event(TimeStampedModel):
    host = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="hosted_events")
    name = models.CharField(max_length=255, db_index=True)
    description = models.TextField(blank=True, default="")
    venue = models.CharField(max_length=255, blank=True, default="")
    start = models.DateTimeField(db_index=True)
    end = models.DateTimeField(null=True, blank=True, db_index=True)

    objects = EventManager()

    class Meta:
        ordering = ["-start"]

    def clean(self) -> None:
        super().clean()
        if self.end and self.start and self.end <= self.start:
            raise DjangoValidationError({"end": "The event must end after it starts."})

    @property
    def is_live(self) -> bool:
        now = timezone.now()
        if self.end is not None:
            return self.end >= now
        return self.start >= now

    def __str__(self) -> str:
        return self.name
