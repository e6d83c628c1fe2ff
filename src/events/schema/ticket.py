"""Ticket tier and ticket schemas."""

import typing as t
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from ninja import Schema
from pydantic import Field

from accounts.schema import MinimalUserSchema
from common.schema import Money, StrippedString
from events.models import Ticket, TicketTier

UNLIMITED = "unlimited"


class TicketTierPayload(Schema):
    """Tier attributes accepted on create and edit.

    Fields are deliberately loose; ``inventory.validate_tier_payload`` checks them in one pass
    and reports every problem at once.
    """

    name: StrippedString | None = None
    description: str = ""
    ticket_type: str | None = None
    per_ticket_price: Decimal | None = None
    group_price: Decimal | None = None
    currency: str | None = None
    group_size: int | str | None = None
    quantity: int | None = None
    purchase_limit: int | None = Field(None, ge=1)
    perks: list[str] = Field(default_factory=list)
    transfer_fees: bool = False


class TicketTierCreateSchema(TicketTierPayload):
    code: StrippedString | None = Field(None, min_length=1, max_length=64)


class TicketTierSchema(Schema):
    id: UUID
    code: str
    name: str
    description: str
    ticket_type: str
    price: Money
    currency: str
    group_size: int | t.Literal["unlimited"] | None = None
    total_quantity: int
    remaining_quantity: int
    purchase_limit: int | None = None
    perks: list[str]
    transfer_fees: bool

    @staticmethod
    def resolve_group_size(obj: TicketTier) -> int | str | None:
        if obj.ticket_type == TicketTier.TicketType.GROUP:
            return obj.group_size or UNLIMITED
        return None


class TicketSchema(Schema):
    id: UUID
    code: str
    event_id: UUID
    tier_name: str
    ticket_type: str
    group_size: int | t.Literal["unlimited"] | None = None
    price: Money
    status: str
    checked_in_at: datetime | None = None
    buyer: MinimalUserSchema
    qr_code_url: str | None = None

    @staticmethod
    def resolve_group_size(obj: Ticket) -> int | str | None:
        if obj.ticket_type == TicketTier.TicketType.GROUP:
            return obj.group_size or UNLIMITED
        return None

    @staticmethod
    def resolve_qr_code_url(obj: Ticket) -> str | None:
        return obj.qr_code.url if obj.qr_code else None


class CheckInSchema(Schema):
    identifier: StrippedString = Field(..., min_length=1, description="Ticket code or internal ticket id.")


class CheckInListItemSchema(Schema):
    ticket_code: str
    guest_email: str
    checked_in_at: datetime
    amount: Money

    @staticmethod
    def resolve_ticket_code(obj: Ticket) -> str:
        return obj.code

    @staticmethod
    def resolve_guest_email(obj: Ticket) -> str:
        return obj.buyer.email

    @staticmethod
    def resolve_amount(obj: Ticket) -> Decimal:
        return obj.price


class TicketBuyerSchema(Schema):
    ticket_code: str
    tier_name: str
    name: str
    email: str
    phone: str | None = None
    location: str
    checked_in: bool

    @staticmethod
    def resolve_ticket_code(obj: Ticket) -> str:
        return obj.code

    @staticmethod
    def resolve_name(obj: Ticket) -> str:
        return obj.buyer.display_name

    @staticmethod
    def resolve_email(obj: Ticket) -> str:
        return obj.buyer.email

    @staticmethod
    def resolve_phone(obj: Ticket) -> str | None:
        return obj.buyer.phone_number

    @staticmethod
    def resolve_location(obj: Ticket) -> str:
        return obj.buyer.location

    @staticmethod
    def resolve_checked_in(obj: Ticket) -> bool:
        return obj.is_used
