import typing as t

from django.contrib import admin
from django.urls import reverse
from django.utils.html import format_html
from unfold.admin import ModelAdmin, TabularInline

from . import models


class BuyerLinkMixin:
    """Mixin to add a link to the buyer."""

    @admin.display(description="Buyer")
    def buyer_link(self, obj: t.Any) -> str:
        url = reverse("admin:accounts_boxofficeuser_change", args=[obj.buyer_id])
        return format_html('<a href="{}">{}</a>', url, obj.buyer)


class EventLinkMixin:
    """Mixin to add a link to the event."""

    @admin.display(description="Event")
    def event_link(self, obj: t.Any) -> str:
        url = reverse("admin:events_event_change", args=[obj.event_id])
        return format_html('<a href="{}">{}</a>', url, obj.event.name)


class TicketTierInline(TabularInline):  # type: ignore[misc]
    model = models.TicketTier
    extra = 0
    fields = ["code", "name", "ticket_type", "price", "currency", "total_quantity", "remaining_quantity"]
    readonly_fields = ["total_quantity", "remaining_quantity"]


@admin.register(models.Event)
class EventAdmin(ModelAdmin):  # type: ignore[misc]
    list_display = ["name", "host", "venue", "start", "end"]
    search_fields = ["name", "venue", "host__email"]
    date_hierarchy = "start"
    autocomplete_fields = ["host"]
    inlines = [TicketTierInline]


@admin.register(models.TicketTier)
class TicketTierAdmin(ModelAdmin, EventLinkMixin):  # type: ignore[misc]
    list_display = ["name", "code", "event_link", "ticket_type", "price", "currency", "remaining_quantity"]
    list_filter = ["ticket_type", "currency"]
    search_fields = ["name", "code", "event__name"]
    # stock moves only through the inventory service
    readonly_fields = ["total_quantity", "remaining_quantity"]


@admin.register(models.Ticket)
class TicketAdmin(ModelAdmin, BuyerLinkMixin, EventLinkMixin):  # type: ignore[misc]
    list_display = ["code", "event_link", "buyer_link", "tier_name", "price", "status", "checked_in_at"]
    list_filter = ["status", "ticket_type"]
    search_fields = ["code", "buyer__email", "event__name"]
    readonly_fields = ["code", "price", "tier_name", "qr_payload", "checked_in_at", "checked_in_by"]
    date_hierarchy = "created_at"


@admin.register(models.Transaction)
class TransactionAdmin(ModelAdmin, BuyerLinkMixin, EventLinkMixin):  # type: ignore[misc]
    list_display = ["reference", "event_link", "buyer_link", "total", "currency", "fees_reconciled", "status"]
    list_filter = ["status", "fees_reconciled", "payment_provider"]
    search_fields = ["reference", "buyer__email"]
    readonly_fields = ["subtotal", "fees", "processor_fee", "platform_fee", "total"]


@admin.register(models.StockReservation)
class StockReservationAdmin(ModelAdmin):  # type: ignore[misc]
    list_display = ["tier", "quantity", "status", "created_at", "released_at"]
    list_filter = ["status"]
