import typing as t
from decimal import Decimal

import orjson
import pytest
from django.test.client import Client
from django.urls import reverse

from accounts.models import BoxOfficeUser
from events.models import Event
from payouts.models import BankDetails, Payout

pytestmark = pytest.mark.django_db

BANK = {"bank_name": "GTBank", "bank_code": "058", "account_number": "1234567890", "account_name": "Host Example"}


def _withdraw(client: Client, payload: dict[str, t.Any]) -> t.Any:
    return client.post(reverse("api:request_withdrawal"), data=orjson.dumps(payload), content_type="application/json")


def test_wallet(host_client: Client, funded_host: BoxOfficeUser, event: Event, make_payout: t.Callable[..., Payout]) -> None:
    make_payout("300", status=Payout.Status.COMPLETED)
    make_payout("200")

    response = host_client.get(reverse("api:wallet"))

    assert response.status_code == 200
    data = response.json()
    assert data["balance"] == "700.00"
    assert data["gross_revenue"] == "1000.00"
    assert data["total_withdrawn"] == "300.00"
    assert data["total_tickets_sold"] == 1
    assert data["payout_fee"] == "150.00"
    assert data["events"][0]["revenue"] == "1000.00"
    assert len(data["payouts"]) == 2


def test_wallet_requires_auth(client: Client) -> None:
    assert client.get(reverse("api:wallet")).status_code == 401


class TestWithdrawals:
    def test_request(self, host_client: Client, funded_host: BoxOfficeUser, bank_details: BankDetails) -> None:
        response = _withdraw(host_client, {"amount": "800"})

        assert response.status_code == 201
        data = response.json()
        assert data["payout"]["status"] == "pending"
        assert data["payout"]["net_amount"] == "650.00"
        assert data["warnings"] == []

    def test_insufficient_balance(self, host_client: Client, funded_host: BoxOfficeUser, bank_details: BankDetails) -> None:
        response = _withdraw(host_client, {"amount": "5000"})

        assert response.status_code == 409
        assert response.json()["balance"] == "1000.00"
        assert not Payout.objects.exists()

    def test_missing_bank_details(self, host_client: Client, funded_host: BoxOfficeUser) -> None:
        response = _withdraw(host_client, {"amount": "500"})

        assert response.status_code == 400
        assert response.json() == {"detail": "Please add your bank details before requesting a withdrawal."}

    def test_below_minimum(self, host_client: Client, funded_host: BoxOfficeUser, bank_details: BankDetails) -> None:
        response = _withdraw(host_client, {"amount": "100"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Minimum withdrawal amount is 150.00."

    def test_unknown_event(self, host_client: Client, funded_host: BoxOfficeUser, bank_details: BankDetails) -> None:
        response = _withdraw(host_client, {"amount": "500", "event_id": "00000000-0000-0000-0000-000000000000"})
        assert response.status_code == 404

    def test_for_event(
        self, host_client: Client, funded_host: BoxOfficeUser, bank_details: BankDetails, event: Event
    ) -> None:
        response = _withdraw(host_client, {"amount": "500", "event_id": str(event.id)})

        assert response.status_code == 201
        assert response.json()["payout"]["event_id"] == str(event.id)

    def test_other_hosts_event(
        self,
        host_client: Client,
        funded_host: BoxOfficeUser,
        bank_details: BankDetails,
        other_host: BoxOfficeUser,
        event: Event,
    ) -> None:
        foreign = Event.objects.create(host=other_host, name="Elsewhere", start=event.start)

        response = _withdraw(host_client, {"amount": "500", "event_id": str(foreign.id)})

        assert response.status_code == 403
        assert response.json() == {"detail": "You can only withdraw revenue from your own events."}
        assert not Payout.objects.exists()

    def test_list_own_payouts(
        self,
        host_client: Client,
        other_host: BoxOfficeUser,
        make_payout: t.Callable[..., Payout],
    ) -> None:
        mine = make_payout("500")
        make_payout("500", host=other_host)

        response = host_client.get(reverse("api:list_own_payouts"))

        assert response.status_code == 200
        assert [item["id"] for item in response.json()["results"]] == [str(mine.id)]


class TestBankDetails:
    def test_crud(self, host_client: Client, host: BoxOfficeUser) -> None:
        assert host_client.get(reverse("api:get_bank_details")).status_code == 404

        saved = host_client.put(reverse("api:save_bank_details"), data=orjson.dumps(BANK), content_type="application/json")
        assert saved.status_code == 200
        assert saved.json() == BANK

        replaced = host_client.put(
            reverse("api:save_bank_details"),
            data=orjson.dumps({**BANK, "bank_name": "Access Bank"}),
            content_type="application/json",
        )
        assert replaced.json()["bank_name"] == "Access Bank"
        assert BankDetails.objects.filter(user=host).count() == 1

        assert host_client.delete(reverse("api:delete_bank_details")).status_code == 204
        assert host_client.delete(reverse("api:delete_bank_details")).status_code == 404

    def test_invalid_account_number(self, host_client: Client) -> None:
        response = host_client.put(
            reverse("api:save_bank_details"),
            data=orjson.dumps({**BANK, "account_number": "12345"}),
            content_type="application/json",
        )
        assert response.status_code == 422
        assert not BankDetails.objects.exists()
