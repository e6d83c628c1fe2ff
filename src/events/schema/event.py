"""Event schemas."""

from datetime import datetime
from uuid import UUID

from django.db.models import QuerySet
from ninja import Schema
from pydantic import AwareDatetime, Field

from common.schema import StrippedString
from events.models import Event, TicketTier

from .ticket import TicketTierSchema


class EventCreateSchema(Schema):
    name: StrippedString = Field(..., min_length=1, max_length=255)
    description: str = ""
    venue: StrippedString = Field("", max_length=255)
    start: AwareDatetime
    end: AwareDatetime | None = None


class EventUpdateSchema(EventCreateSchema):
    pass


class EventSchema(Schema):
    id: UUID
    host_id: UUID
    name: str
    description: str
    venue: str
    start: datetime
    end: datetime | None = None
    is_live: bool


class EventDetailSchema(EventSchema):
    ticket_tiers: list[TicketTierSchema]

    @staticmethod
    def resolve_ticket_tiers(obj: Event) -> QuerySet[TicketTier]:
        return obj.ticket_tiers.all()
