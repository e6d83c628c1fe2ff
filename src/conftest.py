"""
Fixtures shared by every app's tests.
"""

import secrets
import string
import typing as t
from datetime import datetime, time, timedelta
from decimal import Decimal
from pathlib import Path

import faker
import pytest
from django.core.cache import cache
from django.test.client import Client
from django.utils import timezone
from ninja_jwt.tokens import RefreshToken
from pytest import MonkeyPatch

from accounts.models import BoxOfficeUser
from events.models import Event, Ticket, TicketTier, Transaction
from events.service.ticket_service import issue_ticket


@pytest.fixture(autouse=True)
def increase_rate_limit(monkeypatch: MonkeyPatch) -> None:
    """Raise the throttle rates so bursts of test requests are never throttled."""
    for throttle in ("AuthThrottle", "WriteThrottle", "PurchaseThrottle", "AnonDefaultThrottle", "UserDefaultThrottle"):
        monkeypatch.setattr(f"common.throttling.{throttle}.rate", "1000/min")


@pytest.fixture(autouse=True)
def enable_celery_eager_mode(settings: t.Any) -> None:
    """Enable Celery eager mode for tests so tasks execute synchronously.

    This ensures that Celery tasks run immediately in the same process,
    allowing tests to verify their side effects without async complications.
    """
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CELERY_TASK_EAGER_PROPAGATES = True


@pytest.fixture(autouse=True)
def clear_cache() -> t.Iterator[None]:
    """Throttle counters live in the cache; start every test from a clean slate."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def media_root(settings: t.Any, tmp_path: Path) -> Path:
    """Store QR codes and payout proofs in a throwaway directory."""
    settings.MEDIA_ROOT = str(tmp_path / "media")
    return tmp_path / "media"


class BoxOfficeUserFactory:
    """Factory for creating BoxOfficeUser instances for testing."""

    fake = faker.Faker()

    def create_user(self, **kwargs: t.Any) -> BoxOfficeUser:
        username = kwargs.pop(
            "username", "".join(secrets.choice(string.ascii_lowercase) for _ in range(8)) + "@user.test"
        )
        email = kwargs.pop("email", username if "@" in username else f"{username}@test.com")
        password = kwargs.pop("password", "password")
        first_name = kwargs.pop("first_name", self.fake.first_name())
        last_name = kwargs.pop("last_name", self.fake.last_name())
        return BoxOfficeUser.objects.create_user(
            username=username,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            **kwargs,
        )

    def __call__(self, **kwargs: t.Any) -> BoxOfficeUser:
        return self.create_user(**kwargs)


@pytest.fixture
def box_office_user_factory() -> BoxOfficeUserFactory:
    return BoxOfficeUserFactory()


@pytest.fixture
def superuser(box_office_user_factory: BoxOfficeUserFactory) -> BoxOfficeUser:
    """A superuser."""
    return box_office_user_factory(is_superuser=True, is_staff=True)


@pytest.fixture
def staff_user(box_office_user_factory: BoxOfficeUserFactory) -> BoxOfficeUser:
    """A back-office admin."""
    return box_office_user_factory(is_staff=True)


@pytest.fixture
def host(box_office_user_factory: BoxOfficeUserFactory) -> BoxOfficeUser:
    """A user who hosts events."""
    return box_office_user_factory(username="host@example.com")


@pytest.fixture
def other_host(box_office_user_factory: BoxOfficeUserFactory) -> BoxOfficeUser:
    return box_office_user_factory(username="other.host@example.com")


def auth_client(user: BoxOfficeUser) -> Client:
    refresh = RefreshToken.for_user(user)
    return Client(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")  # type: ignore[attr-defined]


@pytest.fixture
def host_client(host: BoxOfficeUser) -> Client:
    return auth_client(host)


@pytest.fixture
def other_host_client(other_host: BoxOfficeUser) -> Client:
    return auth_client(other_host)


@pytest.fixture
def staff_client(staff_user: BoxOfficeUser) -> Client:
    return auth_client(staff_user)


@pytest.fixture
def next_week() -> datetime:
    today = timezone.now()
    same_time_next_week = today + timedelta(days=7)
    noon = time(hour=12, minute=0)
    return timezone.make_aware(
        datetime.combine(same_time_next_week.date(), noon),
        timezone.get_current_timezone(),
    )


@pytest.fixture
def event(host: BoxOfficeUser, next_week: datetime) -> Event:
    return Event.objects.create(
        host=host,
        name="Lagos Jazz Night",
        venue="Eko Hotel",
        start=next_week,
        end=next_week + timedelta(hours=4),
    )


@pytest.fixture
def vip_tier(event: Event) -> TicketTier:
    return TicketTier.objects.create(
        event=event,
        code="vip",
        name="VIP",
        price=Decimal("5000.00"),
        currency="NGN",
        total_quantity=3,
        remaining_quantity=3,
    )


@pytest.fixture
def regular_tier(event: Event) -> TicketTier:
    return TicketTier.objects.create(
        event=event,
        code="regular",
        name="Regular",
        price=Decimal("1000.00"),
        currency="NGN",
        total_quantity=100,
        remaining_quantity=100,
    )


@pytest.fixture
def sell_tickets(box_office_user_factory: BoxOfficeUserFactory) -> t.Callable[..., list[Ticket]]:
    """Record a completed sale directly, without touching stock."""

    def _sell(
        tier: TicketTier,
        quantity: int = 1,
        *,
        buyer: BoxOfficeUser | None = None,
        status: str = Transaction.Status.COMPLETED,
    ) -> list[Ticket]:
        buyer = buyer or box_office_user_factory()
        subtotal = tier.price * quantity
        sale = Transaction.objects.create(
            event=tier.event,
            buyer=buyer,
            reference=f"ref-{secrets.token_hex(8)}",
            subtotal=subtotal,
            fees=Decimal("0"),
            total=subtotal,
            currency=tier.currency,
            status=status,
        )
        return [issue_ticket(tier, buyer, sale=sale) for _ in range(quantity)]

    return _sell
