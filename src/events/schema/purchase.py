"""Checkout schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from ninja import Schema
from pydantic import Field

from accounts.schema import CustomerSchema
from common.schema import Money, StrippedString

from .ticket import TicketSchema


class PurchaseItemSchema(Schema):
    tier_code: StrippedString = Field(..., min_length=1, max_length=64)
    customer: CustomerSchema
    quantity: int = Field(1, ge=1)


class PurchaseSchema(Schema):
    items: list[PurchaseItemSchema] = Field(..., min_length=1)
    reference: StrippedString = Field(..., min_length=1, max_length=255, description="Payment gateway reference.")
    fees: Decimal = Field(Decimal("0"), ge=0, description="Fees charged on top of the ticket subtotal.")


class TransactionSchema(Schema):
    id: UUID
    event_id: UUID
    reference: str
    subtotal: Money
    fees: Money
    processor_fee: Money
    platform_fee: Money
    fees_reconciled: bool
    total: Money
    currency: str
    payment_provider: str
    status: str
    created_at: datetime


class PurchaseResponseSchema(Schema):
    transaction: TransactionSchema
    tickets: list[TicketSchema]
    warnings: list[str] = Field(default_factory=list)
