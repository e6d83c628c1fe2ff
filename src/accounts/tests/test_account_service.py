"""Tests for host registration and buyer resolution."""

import pytest
from ninja.errors import HttpError

from accounts import schema
from accounts.models import BoxOfficeUser
from accounts.service import account as account_service

pytestmark = pytest.mark.django_db


def test_register_host_creates_user(valid_register_payload: schema.RegisterHostSchema) -> None:
    user = account_service.register_host(valid_register_payload)

    assert user.email == "newhost@example.com"
    assert user.guest is False
    assert user.check_password("a-Strong-password-123!")


def test_register_host_rejects_existing_account(
    user: BoxOfficeUser, valid_register_payload: schema.RegisterHostSchema
) -> None:
    payload = valid_register_payload.model_copy(update={"email": user.email.upper()})

    with pytest.raises(HttpError) as exc_info:
        account_service.register_host(payload)

    assert exc_info.value.status_code == 400


def test_register_host_upgrades_guest_buyer(valid_register_payload: schema.RegisterHostSchema) -> None:
    guest = account_service.resolve_buyer(schema.CustomerSchema(email="newhost@example.com", first_name="Guest"))
    assert guest.guest is True
    assert not guest.has_usable_password()

    user = account_service.register_host(valid_register_payload)

    assert user.pk == guest.pk
    assert user.guest is False
    assert user.first_name == "New"
    assert user.check_password("a-Strong-password-123!")


def test_resolve_buyer_creates_guest() -> None:
    customer = schema.CustomerSchema(
        email="buyer@example.com", first_name="Chidi", last_name="Eze", phone="+2348031234567", location="Lagos"
    )

    buyer = account_service.resolve_buyer(customer)

    assert buyer.guest is True
    assert buyer.email == "buyer@example.com"
    assert buyer.location == "Lagos"
    assert buyer.phone_number == "+2348031234567"


def test_resolve_buyer_matches_email_case_insensitively(user: BoxOfficeUser) -> None:
    buyer = account_service.resolve_buyer(schema.CustomerSchema(email="TestUser@Example.com"))

    assert buyer.pk == user.pk
    assert BoxOfficeUser.objects.count() == 1
