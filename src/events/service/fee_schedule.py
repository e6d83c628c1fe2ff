"""Processor and platform fee schedule.

The schedule is data: a tuple of bands keyed by their inclusive lower bound. Each band
charges either a percentage (optionally plus a fixed surcharge) or a flat amount, separately
for the payment processor and for the platform.
"""

import typing as t
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

import structlog

logger = structlog.get_logger(__name__)

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


@dataclass(frozen=True)
class Charge:
    """A fee rule: ``amount * rate + fixed``, rounded to the cent."""

    rate: Decimal = ZERO
    fixed: Decimal = ZERO

    def apply(self, amount: Decimal) -> Decimal:
        percentage = (amount * self.rate).quantize(CENT, rounding=ROUND_HALF_UP)
        return percentage + self.fixed


@dataclass(frozen=True)
class FeeBand:
    lower_bound: Decimal
    processor: Charge
    platform: Charge


@dataclass(frozen=True)
class FeeBreakdown:
    processor_fee: Decimal
    platform_fee: Decimal

    @property
    def total(self) -> Decimal:
        return self.processor_fee + self.platform_fee


NO_FEES = FeeBreakdown(processor_fee=ZERO, platform_fee=ZERO)

_PROCESSOR_RATE = Decimal("0.015")
_PLATFORM_RATE = Decimal("0.02")
_PROCESSOR_CAP = Charge(fixed=Decimal("2000"))


def _flat(amount: str) -> Charge:
    return Charge(fixed=Decimal(amount))


FEE_SCHEDULE: tuple[FeeBand, ...] = (
    FeeBand(Decimal("0"), Charge(rate=_PROCESSOR_RATE), Charge(rate=_PLATFORM_RATE)),
    FeeBand(Decimal("2500"), Charge(rate=_PROCESSOR_RATE, fixed=Decimal("100")), Charge(rate=_PLATFORM_RATE)),
    FeeBand(Decimal("126667"), _PROCESSOR_CAP, _flat("2000")),
    FeeBand(Decimal("400000"), _PROCESSOR_CAP, _flat("3000")),
    FeeBand(Decimal("600000"), _PROCESSOR_CAP, _flat("4000")),
    FeeBand(Decimal("2000000"), _PROCESSOR_CAP, _flat("5500")),
    FeeBand(Decimal("5000000"), _PROCESSOR_CAP, _flat("8000")),
    FeeBand(Decimal("8000000"), _PROCESSOR_CAP, _flat("10000")),
)


def _to_decimal(amount: t.Any) -> Decimal | None:
    """Coerce an amount to a finite, positive Decimal, or return None."""
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError, TypeError):
        return None
    if not value.is_finite() or value <= 0:
        return None
    return value


def find_band(amount: Decimal, schedule: t.Sequence[FeeBand] = FEE_SCHEDULE) -> FeeBand:
    """Return the band whose lower bound is the greatest one not above ``amount``."""
    selected = schedule[0]
    for band in schedule:
        if amount >= band.lower_bound:
            selected = band
        else:
            break
    return selected


def compute_fees(gross_amount: t.Any, schedule: t.Sequence[FeeBand] = FEE_SCHEDULE) -> FeeBreakdown:
    """Compute the processor and platform cut of a gross charge.

    Non-numeric, non-finite and non-positive amounts produce zero fees instead of raising,
    so aggregations over many transactions can skip a malformed record.
    """
    amount = _to_decimal(gross_amount)
    if amount is None:
        logger.warning("fee_schedule_invalid_amount", amount=str(gross_amount))
        return NO_FEES
    band = find_band(amount, schedule)
    return FeeBreakdown(
        processor_fee=band.processor.apply(amount),
        platform_fee=band.platform.apply(amount),
    )
