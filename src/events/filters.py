import typing as t

from django.db.models import Q
from django.utils import timezone
from ninja import FilterSchema


class EventFilterSchema(FilterSchema):
    status: t.Literal["live", "past"] | None = None
    search: str | None = None

    def filter_status(self, status: str | None) -> Q:
        """Live events have not ended yet; an event without an end is live until it starts."""
        if not status:
            return Q()
        now = timezone.now()
        live = Q(end__gte=now) | Q(end__isnull=True, start__gte=now)
        return live if status == "live" else ~live

    def filter_search(self, search: str | None) -> Q:
        if not search:
            return Q()
        return Q(name__icontains=search) | Q(venue__icontains=search)
