from django.conf import settings
from django.db.models import QuerySet
from ninja_extra import api_controller, route
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate
from ninja_jwt.authentication import JWTAuth

from common.controllers import UserAwareController
from common.exceptions import NotFoundError
from common.schema import ErrorResponse, InsufficientBalanceResponse, ValidationErrorResponse
from common.throttling import UserDefaultThrottle, WriteThrottle
from events.models import Event
from payouts import models, schema
from payouts.service import ledger, payout_service


@api_controller("/wallet", auth=JWTAuth(), tags=["Wallet"], throttle=UserDefaultThrottle())
class WalletController(UserAwareController):
    """The authenticated host's revenue, withdrawals and payout destination."""

    @route.get("/", url_name="wallet", response=schema.WalletSchema)
    def get_wallet(self) -> dict[str, object]:
        """Current balance, revenue per event and payout history.

        The balance is ticket revenue on completed sales minus completed payouts. Pending
        requests do not reduce it.
        """
        wallet = ledger.wallet(self.user())
        return {**vars(wallet), "payout_fee": settings.PAYOUT_FEE}

    @route.post(
        "/withdrawals",
        url_name="request_withdrawal",
        response={
            201: schema.PayoutActionResponseSchema,
            400: ErrorResponse | ValidationErrorResponse,
            403: ErrorResponse,
            404: ErrorResponse,
            409: InsufficientBalanceResponse,
        },
        throttle=WriteThrottle(),
    )
    def request_withdrawal(self, payload: schema.WithdrawalRequestSchema) -> tuple[int, dict[str, object]]:
        """Ask for a payout of `amount` to your saved bank account.

        A fixed fee is deducted from the amount. Requires bank details on file and enough balance.
        """
        user = self.user()
        event = None
        if payload.event_id is not None:
            event = Event.objects.filter(pk=payload.event_id).first()
            if event is None:
                raise NotFoundError("Event not found.")
        payout, warnings = payout_service.request_withdrawal(user, payload.amount, event=event)
        return 201, {"payout": payout, "warnings": warnings}

    @route.get("/payouts", url_name="list_own_payouts", response=PaginatedResponseSchema[schema.PayoutSchema])
    @paginate(PageNumberPaginationExtra, page_size=20)
    def list_payouts(self) -> QuerySet[models.Payout]:
        """Your payouts, most recent first."""
        return models.Payout.objects.for_host(self.user()).order_by("-created_at")

    @route.get(
        "/bank-details", url_name="get_bank_details", response={200: schema.BankDetailsSchema, 404: ErrorResponse}
    )
    def get_bank_details(self) -> models.BankDetails:
        details = payout_service.get_bank_details(self.user())
        if details is None:
            raise NotFoundError("No bank details on file.")
        return details

    @route.put(
        "/bank-details",
        url_name="save_bank_details",
        response={200: schema.BankDetailsSchema, 400: ValidationErrorResponse},
        throttle=WriteThrottle(),
    )
    def save_bank_details(self, payload: schema.BankDetailsUpdateSchema) -> models.BankDetails:
        """Create or replace the account payouts are sent to."""
        return payout_service.save_bank_details(self.user(), **payload.model_dump())

    @route.delete(
        "/bank-details",
        url_name="delete_bank_details",
        response={204: None, 404: ErrorResponse},
        throttle=WriteThrottle(),
    )
    def delete_bank_details(self) -> tuple[int, None]:
        if not payout_service.delete_bank_details(self.user()):
            raise NotFoundError("No bank details on file.")
        return 204, None
