"""Events schema package."""

from .event import EventCreateSchema, EventDetailSchema, EventSchema, EventUpdateSchema
from .purchase import PurchaseItemSchema, PurchaseResponseSchema, PurchaseSchema, TransactionSchema
from .ticket import (
    CheckInListItemSchema,
    CheckInSchema,
    TicketBuyerSchema,
    TicketSchema,
    TicketTierCreateSchema,
    TicketTierPayload,
    TicketTierSchema,
)

__all__ = [
    "CheckInListItemSchema",
    "CheckInSchema",
    "EventCreateSchema",
    "EventDetailSchema",
    "EventSchema",
    "EventUpdateSchema",
    "PurchaseItemSchema",
    "PurchaseResponseSchema",
    "PurchaseSchema",
    "TicketBuyerSchema",
    "TicketSchema",
    "TicketTierCreateSchema",
    "TicketTierPayload",
    "TicketTierSchema",
    "TransactionSchema",
]
