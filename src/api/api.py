from django.conf import settings
from django.core.exceptions import ValidationError
from django.http import HttpRequest
from ninja_extra import NinjaExtraAPI

from accounts.controllers.account import AccountController
from accounts.controllers.auth import AuthController
from common.exceptions import BoxOfficeError
from common.schema import ResponseOk, VersionResponse
from common.throttling import AnonDefaultThrottle, UserDefaultThrottle
from events.controllers.event_admin import EVENT_ADMIN_CONTROLLERS
from events.controllers.events import EventController
from events.controllers.host_events import HostEventsController
from payouts.controllers.admin import AdminDashboardController, AdminPayoutController
from payouts.controllers.wallet import WalletController

from .exception_handlers import (
    handle_boxoffice_error,
    handle_django_validation_error,
    handle_general_exception,
)

api = NinjaExtraAPI(
    title="BoxOffice API",
    docs_url="/docs",
    version=settings.VERSION,
    description=f"BoxOffice API {settings.VERSION}",
    app_name=f"boxoffice-api-{settings.VERSION}",
    urls_namespace="api",
    servers=[
        {"url": settings.SERVICE_URL, "description": settings.SERVICE_DESCRIPTION},
    ],
    throttle=[AnonDefaultThrottle(), UserDefaultThrottle()],
)


@api.get("/version", tags=["Version"], response={200: VersionResponse})
def version(request: HttpRequest) -> tuple[int, VersionResponse]:
    """Get the API version."""
    return 200, VersionResponse(version=settings.VERSION)


@api.get("/healthcheck", tags=["Healthcheck"], response={200: ResponseOk})
def healthcheck(request: HttpRequest) -> tuple[int, ResponseOk]:
    """Check the health of the API."""
    return 200, ResponseOk()


api.register_controllers(
    # Auth/Account controllers
    AuthController,
    AccountController,
    # Event controllers
    EventController,
    HostEventsController,
    *EVENT_ADMIN_CONTROLLERS,
    # Payout controllers
    WalletController,
    AdminPayoutController,
    AdminDashboardController,
)

EXCEPTION_HANDLERS = {
    Exception: handle_general_exception,
    ValidationError: handle_django_validation_error,
    BoxOfficeError: handle_boxoffice_error,
}

for exc, handler in EXCEPTION_HANDLERS.items():
    api.add_exception_handler(exc, handler)
