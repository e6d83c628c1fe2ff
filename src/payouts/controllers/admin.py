from uuid import UUID

from django.db.models import QuerySet
from ninja import Form, Query
from ninja_extra import api_controller, route
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate

from accounts.models import BoxOfficeUser
from common.auth_base import AdminJWTAuth
from common.controllers import UserAwareController
from common.exceptions import NotFoundError, PayoutNotFoundError
from common.schema import ErrorResponse, InsufficientBalanceResponse
from common.throttling import UserDefaultThrottle, WriteThrottle
from payouts import filters, models, schema
from payouts.service import dashboard, ledger, payout_service


@api_controller("/admin", auth=AdminJWTAuth(), tags=["Admin"], throttle=UserDefaultThrottle())
class AdminPayoutController(UserAwareController):
    """Back-office review of payout requests. Staff only."""

    @route.get(
        "/payouts/pending",
        url_name="admin_pending_payouts",
        response=PaginatedResponseSchema[schema.AdminPayoutSchema],
    )
    @paginate(PageNumberPaginationExtra, page_size=10)
    def pending_payouts(self) -> QuerySet[models.Payout]:
        """Payouts awaiting a decision, oldest first."""
        return models.Payout.objects.pending().select_related("host").order_by("created_at")

    @route.get("/payouts", url_name="admin_list_payouts", response=PaginatedResponseSchema[schema.AdminPayoutSchema])
    @paginate(PageNumberPaginationExtra, page_size=10)
    def list_payouts(self, params: filters.PayoutFilterSchema = Query(...)) -> QuerySet[models.Payout]:  # type: ignore[type-arg]
        """All payouts, most recent first. Filter by `status` and `host_id`."""
        return params.filter(models.Payout.objects.select_related("host")).order_by("-created_at")

    @route.get(
        "/payouts/{uuid:payout_id}",
        url_name="admin_get_payout",
        response={200: schema.AdminPayoutSchema, 404: ErrorResponse},
    )
    def get_payout(self, payout_id: UUID) -> models.Payout:
        payout = models.Payout.objects.select_related("host").filter(pk=payout_id).first()
        if payout is None:
            raise PayoutNotFoundError()
        return payout

    @route.post(
        "/payouts/{uuid:payout_id}/approve",
        url_name="admin_approve_payout",
        response={
            200: schema.PayoutActionResponseSchema,
            400: ErrorResponse,
            404: ErrorResponse,
            409: ErrorResponse | InsufficientBalanceResponse,
        },
        throttle=WriteThrottle(),
    )
    def approve(self, payout_id: UUID, payload: Form[schema.ApprovePayoutSchema]) -> dict[str, object]:
        """Approve a pending payout and mark it completed.

        Accepts multipart/form-data. `approved_amount` defaults to the requested amount and may
        lower it, but never below the payout fee. Attach the transfer receipt as the `proof` file.
        """
        proof = self.context.request.FILES.get("proof") if self.context.request else None  # type: ignore[union-attr]
        payout, warnings = payout_service.approve(
            payout_id,
            self.user(),
            approved_amount=payload.approved_amount,
            proof=proof,
            proof_description=payload.proof_description,
            notes=payload.notes,
        )
        return {"payout": payout, "warnings": warnings}

    @route.post(
        "/payouts/{uuid:payout_id}/reject",
        url_name="admin_reject_payout",
        response={200: schema.PayoutActionResponseSchema, 404: ErrorResponse, 409: ErrorResponse},
        throttle=WriteThrottle(),
    )
    def reject(self, payout_id: UUID, payload: schema.RejectPayoutSchema) -> dict[str, object]:
        """Reject a pending payout. The host's balance is not affected."""
        reason = payload.reason or payout_service.DEFAULT_REJECTION_REASON
        payout, warnings = payout_service.reject(payout_id, self.user(), reason=reason, notes=payload.notes)
        return {"payout": payout, "warnings": warnings}

    @route.get(
        "/payout-decisions",
        url_name="admin_payout_decisions",
        response=PaginatedResponseSchema[schema.PayoutDecisionSchema],
    )
    @paginate(PageNumberPaginationExtra, page_size=10)
    def decisions(self) -> QuerySet[models.PayoutDecision]:
        """Every approval and rejection, most recent first."""
        return models.PayoutDecision.objects.select_related("payout__host", "decided_by").order_by("-decided_at")


@api_controller("/admin", auth=AdminJWTAuth(), tags=["Admin"], throttle=UserDefaultThrottle())
class AdminDashboardController(UserAwareController):
    """Platform totals and host balances. Staff only."""

    @route.get("/dashboard", url_name="admin_dashboard", response=schema.DashboardStatsSchema)
    def stats(self) -> dict[str, object]:
        """Today's figures, in the site's time zone.

        Processor and platform cuts are recomputed from the fee schedule for each completed
        transaction.
        """
        stats = dashboard.dashboard_stats()
        return {
            "completed_payouts_today": stats.completed_payouts_today,
            "pending_payouts": stats.pending_payouts,
            "transactions_today": stats.today.transaction_count,
            "gross_today": stats.today.gross,
            "processor_cut_today": stats.today.processor_cut,
            "platform_cut_today": stats.today.platform_cut,
            "net_holding_today": stats.today.net,
            "active_hosts": stats.active_hosts,
            "live_events": stats.live_events,
            "past_events": stats.past_events,
        }

    @route.get("/hosts", url_name="admin_list_hosts", response=PaginatedResponseSchema[schema.HostBalanceSchema])
    @paginate(PageNumberPaginationExtra, page_size=10)
    def list_hosts(self, params: filters.HostFilterSchema = Query(...)) -> QuerySet[BoxOfficeUser]:  # type: ignore[type-arg]
        """Hosts with at least one event and their current balance, newest first."""
        return params.filter(BoxOfficeUser.objects.hosts()).order_by("-date_joined")

    @route.get(
        "/hosts/{uuid:host_id}",
        url_name="admin_get_host",
        response={200: schema.HostDetailSchema, 404: ErrorResponse},
    )
    def get_host(self, host_id: UUID) -> dict[str, object]:
        """A host's balance breakdown, events and payouts."""
        host = BoxOfficeUser.objects.filter(pk=host_id).first()
        if host is None:
            raise NotFoundError("Host not found.")
        return {
            "host": host,
            "bank_details": payout_service.get_bank_details(host),
            "stats": dashboard.host_summary(host),
            "events": list(ledger.events_with_revenue(host)),
            "payouts": list(models.Payout.objects.for_host(host)),
        }
