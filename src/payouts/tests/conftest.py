import typing as t
from decimal import Decimal

import pytest

from accounts.models import BoxOfficeUser
from events.models import Ticket, TicketTier
from payouts.models import BankDetails, Payout


@pytest.fixture
def bank_details(host: BoxOfficeUser) -> BankDetails:
    return BankDetails.objects.create(
        user=host,
        bank_name="Zenith Bank",
        bank_code="057",
        account_number="0123456789",
        account_name="Host Example",
    )


@pytest.fixture
def funded_host(
    host: BoxOfficeUser, regular_tier: TicketTier, sell_tickets: t.Callable[..., list[Ticket]]
) -> BoxOfficeUser:
    """A host with 1000.00 of completed ticket revenue."""
    sell_tickets(regular_tier)
    return host


@pytest.fixture
def make_payout(bank_details: BankDetails) -> t.Callable[..., Payout]:
    def _make(
        amount: str | Decimal, *, host: BoxOfficeUser | None = None, status: str = Payout.Status.PENDING
    ) -> Payout:
        amount = Decimal(amount)
        fee = Decimal("150")
        return Payout.objects.create(
            host=host or bank_details.user,
            requested_amount=amount,
            amount=amount,
            fee=fee,
            net_amount=amount - fee,
            bank_name=bank_details.bank_name,
            bank_code=bank_details.bank_code,
            account_number=bank_details.account_number,
            account_name=bank_details.account_name,
            status=status,
        )

    return _make
