from datetime import datetime
from decimal import Decimal
from uuid import UUID

from ninja import ModelSchema, Schema
from pydantic import Field

from accounts.models import BoxOfficeUser
from accounts.schema import MinimalUserSchema
from common.schema import Money, StrippedString

from .models import BankDetails, Payout, PayoutDecision
from .service.ledger import balance_of


class BankDetailsSchema(ModelSchema):
    class Meta:
        model = BankDetails
        fields = ["bank_name", "bank_code", "account_number", "account_name"]


class BankDetailsUpdateSchema(Schema):
    bank_name: StrippedString = Field(..., min_length=1, max_length=255)
    bank_code: StrippedString = Field(..., min_length=1, max_length=20)
    account_number: str = Field(..., pattern=r"^\d{10}$", description="Exactly 10 digits.")
    account_name: StrippedString = Field(..., min_length=1, max_length=255)


class WithdrawalRequestSchema(Schema):
    amount: Decimal = Field(..., gt=0, max_digits=14, decimal_places=2)
    event_id: UUID | None = None


class PayoutSchema(Schema):
    id: UUID
    event_id: UUID | None = None
    requested_amount: Money
    amount: Money
    fee: Money
    net_amount: Money
    currency: str
    bank_name: str
    bank_code: str
    account_number: str
    account_name: str
    status: Payout.Status
    rejection_reason: str
    processed_at: datetime | None = None
    created_at: datetime


class AdminPayoutSchema(PayoutSchema):
    host: MinimalUserSchema


class PayoutActionResponseSchema(Schema):
    payout: PayoutSchema
    warnings: list[str] = Field(default_factory=list)


class ApprovePayoutSchema(Schema):
    approved_amount: Decimal | None = Field(None, gt=0, max_digits=14, decimal_places=2)
    proof_description: str = ""
    notes: str = ""


class RejectPayoutSchema(Schema):
    reason: str = ""
    notes: str = ""


class PayoutDecisionSchema(Schema):
    id: UUID
    payout: AdminPayoutSchema
    decided_by: MinimalUserSchema
    decision: str
    approved_amount: Money | None = None
    proof_of_payment_url: str | None = None
    proof_description: str
    notes: str
    decided_at: datetime

    @staticmethod
    def resolve_proof_of_payment_url(obj: PayoutDecision) -> str | None:
        return obj.proof_of_payment.url if obj.proof_of_payment else None


class WalletEventSchema(Schema):
    id: UUID
    name: str
    start: datetime
    is_live: bool
    tickets_sold: int
    revenue: Money


class WalletSchema(Schema):
    balance: Money
    gross_revenue: Money
    total_withdrawn: Money
    total_tickets_sold: int
    payout_fee: Money
    events: list[WalletEventSchema]
    payouts: list[PayoutSchema]


class DashboardStatsSchema(Schema):
    completed_payouts_today: int
    pending_payouts: int
    transactions_today: int
    gross_today: Money
    processor_cut_today: Money
    platform_cut_today: Money
    net_holding_today: Money
    active_hosts: int
    live_events: int
    past_events: int


class HostBalanceSchema(MinimalUserSchema):
    phone_number: str | None = None
    location: str
    date_joined: datetime
    balance: Money

    @staticmethod
    def resolve_balance(obj: BoxOfficeUser) -> Decimal:
        return balance_of(obj)


class HostSummarySchema(Schema):
    total_events: int
    total_revenue: Money
    total_payouts: Money
    balance: Money
    pending_payouts: int
    completed_payouts: int


class HostDetailSchema(Schema):
    host: HostBalanceSchema
    bank_details: BankDetailsSchema | None = None
    stats: HostSummarySchema
    events: list[WalletEventSchema]
    payouts: list[PayoutSchema]
