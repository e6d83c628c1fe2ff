from datetime import datetime, timedelta

import orjson
import pytest
from django.test.client import Client
from django.urls import reverse
from django.utils import timezone

from accounts.models import BoxOfficeUser
from events.models import Event

pytestmark = pytest.mark.django_db


def test_create_event(host_client: Client, host: BoxOfficeUser, next_week: datetime) -> None:
    payload = {"name": "Afrobeats Live", "venue": "Landmark Centre", "start": next_week.isoformat()}

    response = host_client.post(reverse("api:host_create_event"), data=orjson.dumps(payload), content_type="application/json")

    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Afrobeats Live"
    assert data["host_id"] == str(host.id)
    assert data["is_live"] is True


def test_create_event_requires_auth(client: Client, next_week: datetime) -> None:
    payload = {"name": "Nope", "start": next_week.isoformat()}
    response = client.post(reverse("api:host_create_event"), data=orjson.dumps(payload), content_type="application/json")
    assert response.status_code == 401


def test_create_event_with_end_before_start(host_client: Client, next_week: datetime) -> None:
    payload = {"name": "Backwards", "start": next_week.isoformat(), "end": (next_week - timedelta(hours=2)).isoformat()}

    response = host_client.post(reverse("api:host_create_event"), data=orjson.dumps(payload), content_type="application/json")

    assert response.status_code == 400
    assert "end" in response.json()["errors"]


def test_list_only_own_events(host_client: Client, event: Event, other_host: BoxOfficeUser) -> None:
    Event.objects.create(host=other_host, name="Not mine", start=event.start)

    response = host_client.get(reverse("api:host_list_events"))

    assert response.status_code == 200
    assert [item["id"] for item in response.json()["results"]] == [str(event.id)]


def test_list_filter_by_status(host_client: Client, event: Event, host: BoxOfficeUser) -> None:
    now = timezone.now()
    past = Event.objects.create(host=host, name="Last year", start=now - timedelta(days=365))

    live = host_client.get(reverse("api:host_list_events"), {"status": "live"}).json()["results"]
    finished = host_client.get(reverse("api:host_list_events"), {"status": "past"}).json()["results"]

    assert [item["id"] for item in live] == [str(event.id)]
    assert [item["id"] for item in finished] == [str(past.id)]


def test_get_event_includes_tiers(host_client: Client, event: Event, vip_tier: object) -> None:
    response = host_client.get(reverse("api:host_get_event", kwargs={"event_id": event.id}))

    assert response.status_code == 200
    [tier] = response.json()["ticket_tiers"]
    assert tier["code"] == "vip"
    assert tier["price"] == "5000.00"


def test_other_host_cannot_read_or_edit(other_host_client: Client, event: Event, next_week: datetime) -> None:
    url = reverse("api:host_get_event", kwargs={"event_id": event.id})

    assert other_host_client.get(url).status_code == 403
    response = other_host_client.put(
        reverse("api:host_update_event", kwargs={"event_id": event.id}),
        data=orjson.dumps({"name": "Hijacked", "start": next_week.isoformat()}),
        content_type="application/json",
    )
    assert response.status_code == 403
    event.refresh_from_db()
    assert event.name == "Lagos Jazz Night"


def test_unknown_event(host_client: Client) -> None:
    response = host_client.get(reverse("api:host_get_event", kwargs={"event_id": "00000000-0000-0000-0000-000000000000"}))
    assert response.status_code == 404
    assert response.json() == {"detail": "Event not found."}


def test_update_event(host_client: Client, event: Event, next_week: datetime) -> None:
    payload = {"name": "Lagos Jazz Night II", "venue": "Terra Kulture", "start": next_week.isoformat()}

    response = host_client.put(
        reverse("api:host_update_event", kwargs={"event_id": event.id}),
        data=orjson.dumps(payload),
        content_type="application/json",
    )

    assert response.status_code == 200
    event.refresh_from_db()
    assert event.name == "Lagos Jazz Night II"
    assert event.venue == "Terra Kulture"
    assert event.end is None
