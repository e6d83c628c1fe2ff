from django.contrib import admin
from unfold.admin import ModelAdmin, StackedInline

from . import models


class PayoutDecisionInline(StackedInline):  # type: ignore[misc]
    model = models.PayoutDecision
    extra = 0
    can_delete = False
    readonly_fields = ["decided_by", "decision", "approved_amount", "decided_at"]


@admin.register(models.Payout)
class PayoutAdmin(ModelAdmin):  # type: ignore[misc]
    list_display = ["host", "requested_amount", "amount", "net_amount", "status", "created_at", "processed_at"]
    list_filter = ["status"]
    search_fields = ["host__email", "account_name", "account_number"]
    date_hierarchy = "created_at"
    # decisions go through the API so the balance is re-verified
    readonly_fields = [
        "host",
        "event",
        "requested_amount",
        "amount",
        "fee",
        "net_amount",
        "status",
        "processed_at",
        "rejection_reason",
    ]
    inlines = [PayoutDecisionInline]


@admin.register(models.BankDetails)
class BankDetailsAdmin(ModelAdmin):  # type: ignore[misc]
    list_display = ["user", "bank_name", "account_name", "account_number"]
    search_fields = ["user__email", "account_name", "account_number"]


@admin.register(models.PayoutDecision)
class PayoutDecisionAdmin(ModelAdmin):  # type: ignore[misc]
    list_display = ["payout", "decision", "approved_amount", "decided_by", "decided_at"]
    list_filter = ["decision"]
    readonly_fields = ["payout", "decided_by", "decision", "approved_amount", "decided_at"]
