"""Tests for ticket check-in and search."""

import typing as t

import pytest
from django.test import override_settings

from accounts.models import BoxOfficeUser
from common.exceptions import TicketAlreadyUsedError, TicketNotFoundError
from events.models import Event, Ticket, TicketTier
from events.service import ticket_service

pytestmark = pytest.mark.django_db

SellTickets = t.Callable[..., list[Ticket]]


class TestIssueTicket:
    def test_snapshots_tier_and_builds_qr_payload(self, vip_tier: TicketTier, sell_tickets: SellTickets) -> None:
        [ticket] = sell_tickets(vip_tier)

        assert ticket.status == Ticket.TicketStatus.VALID
        assert ticket.tier_name == "VIP"
        assert ticket.price == vip_tier.price
        assert ticket.qr_payload["ticket_id"] == ticket.code
        assert ticket.qr_payload["event_name"] == "Lagos Jazz Night"
        assert ticket.qr_payload["price"] == "5000.00"

    def test_price_does_not_follow_tier_changes(self, vip_tier: TicketTier, sell_tickets: SellTickets) -> None:
        [ticket] = sell_tickets(vip_tier)
        vip_tier.price = 9999
        vip_tier.save()

        ticket.refresh_from_db()
        assert ticket.price == 5000

    def test_codes_are_unique(self, regular_tier: TicketTier, sell_tickets: SellTickets) -> None:
        tickets = sell_tickets(regular_tier, 5)
        assert len({ticket.code for ticket in tickets}) == 5


class TestCheckIn:
    def test_check_in_by_code(
        self, event: Event, vip_tier: TicketTier, sell_tickets: SellTickets, host: BoxOfficeUser
    ) -> None:
        [ticket] = sell_tickets(vip_tier)

        checked_in = ticket_service.check_in_ticket(event, ticket.code, host)

        assert checked_in.status == Ticket.TicketStatus.USED
        assert checked_in.checked_in_at is not None
        assert checked_in.checked_in_by == host

    def test_check_in_by_internal_id(
        self, event: Event, vip_tier: TicketTier, sell_tickets: SellTickets, host: BoxOfficeUser
    ) -> None:
        [ticket] = sell_tickets(vip_tier)

        checked_in = ticket_service.check_in_ticket(event, str(ticket.id), host)

        assert checked_in.pk == ticket.pk

    def test_second_check_in_is_rejected_and_state_unchanged(
        self, event: Event, vip_tier: TicketTier, sell_tickets: SellTickets, host: BoxOfficeUser
    ) -> None:
        [ticket] = sell_tickets(vip_tier)
        first = ticket_service.check_in_ticket(event, ticket.code, host)

        with pytest.raises(TicketAlreadyUsedError, match="Ticket already used"):
            ticket_service.check_in_ticket(event, ticket.code, host)

        ticket.refresh_from_db()
        assert ticket.status == Ticket.TicketStatus.USED
        assert ticket.checked_in_at == first.checked_in_at

    def test_unknown_ticket(self, event: Event, host: BoxOfficeUser) -> None:
        with pytest.raises(TicketNotFoundError, match="Ticket not found"):
            ticket_service.check_in_ticket(event, "does-not-exist", host)

    def test_ticket_of_another_event_is_not_found(
        self, event: Event, vip_tier: TicketTier, sell_tickets: SellTickets, host: BoxOfficeUser
    ) -> None:
        [ticket] = sell_tickets(vip_tier)
        other = Event.objects.create(host=host, name="Other", start=event.start)

        with pytest.raises(TicketNotFoundError):
            ticket_service.check_in_ticket(other, ticket.code, host)


class TestSearch:
    def test_search_by_buyer_email_substring(
        self, event: Event, regular_tier: TicketTier, sell_tickets: SellTickets, box_office_user_factory: object
    ) -> None:
        buyer = box_office_user_factory(username="ada.obi@example.com")  # type: ignore[operator]
        mine = sell_tickets(regular_tier, 2, buyer=buyer)
        sell_tickets(regular_tier, 1)

        results = ticket_service.search_tickets(event, "ADA.OBI")

        assert {ticket.pk for ticket in results} == {ticket.pk for ticket in mine}

    def test_search_by_code_and_id(self, event: Event, regular_tier: TicketTier, sell_tickets: SellTickets) -> None:
        [ticket, _] = sell_tickets(regular_tier, 2)

        assert [t.pk for t in ticket_service.search_tickets(event, ticket.code)] == [ticket.pk]
        assert [t.pk for t in ticket_service.search_tickets(event, str(ticket.id))] == [ticket.pk]

    def test_search_is_capped(self, event: Event, regular_tier: TicketTier, sell_tickets: SellTickets) -> None:
        buyer_tickets = sell_tickets(regular_tier, 12)
        email = buyer_tickets[0].buyer.email

        assert len(ticket_service.search_tickets(event, email)) == 10

    @override_settings(TICKET_SEARCH_LIMIT=3)
    def test_search_limit_is_configurable(
        self, event: Event, regular_tier: TicketTier, sell_tickets: SellTickets
    ) -> None:
        tickets = sell_tickets(regular_tier, 5)

        assert len(ticket_service.search_tickets(event, tickets[0].buyer.email)) == 3

    def test_blank_query_returns_nothing(self, event: Event, regular_tier: TicketTier, sell_tickets: SellTickets) -> None:
        sell_tickets(regular_tier, 2)
        assert ticket_service.search_tickets(event, "   ") == []


class TestAttendance:
    def test_checked_in_and_buyers(
        self, event: Event, regular_tier: TicketTier, sell_tickets: SellTickets, host: BoxOfficeUser
    ) -> None:
        tickets = sell_tickets(regular_tier, 3)
        ticket_service.check_in_ticket(event, tickets[0].code, host)

        assert [t.pk for t in ticket_service.checked_in_tickets(event)] == [tickets[0].pk]
        assert ticket_service.ticket_buyers(event).count() == 3
