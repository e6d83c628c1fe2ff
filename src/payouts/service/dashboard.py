"""Back-office figures for the admin dashboard."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

from django.utils import timezone

from accounts.models import BoxOfficeUser
from events.models import Event
from payouts.models import Payout
from payouts.service import ledger


@dataclass(frozen=True)
class DashboardStats:
    completed_payouts_today: int
    pending_payouts: int
    today: ledger.DailyAggregates
    active_hosts: int
    live_events: int
    past_events: int


@dataclass(frozen=True)
class HostSummary:
    total_events: int
    total_revenue: Decimal
    total_payouts: Decimal
    balance: Decimal
    pending_payouts: int
    completed_payouts: int


def today_window(now: datetime | None = None) -> tuple[datetime, datetime]:
    """Midnight to midnight of the current day in the site's time zone."""
    local_now = timezone.localtime(now or timezone.now())
    start = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)


def dashboard_stats(now: datetime | None = None) -> DashboardStats:
    now = now or timezone.now()
    start, end = today_window(now)
    return DashboardStats(
        completed_payouts_today=Payout.objects.completed().filter(processed_at__gte=start, processed_at__lt=end).count(),
        pending_payouts=Payout.objects.pending().count(),
        today=ledger.daily_aggregates(start, end),
        active_hosts=BoxOfficeUser.objects.hosts().count(),
        live_events=Event.objects.live(now).count(),
        past_events=Event.objects.past(now).count(),
    )


def host_summary(host: BoxOfficeUser) -> HostSummary:
    gross = ledger.gross_revenue(host)
    withdrawn = ledger.total_withdrawn(host)
    payouts = Payout.objects.for_host(host)
    return HostSummary(
        total_events=Event.objects.for_host(host).count(),
        total_revenue=gross,
        total_payouts=withdrawn,
        balance=gross - withdrawn,
        pending_payouts=payouts.pending().count(),
        completed_payouts=payouts.completed().count(),
    )
