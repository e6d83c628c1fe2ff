"""Account controllers."""

from ninja_extra import api_controller, route, status
from ninja_jwt.authentication import JWTAuth

from accounts.models import BoxOfficeUser
from accounts.schema import BoxOfficeUserSchema, RegisterHostSchema
from accounts.service import account as account_service
from common.controllers import UserAwareController
from common.throttling import AuthThrottle


@api_controller("/account", tags=["Account"], throttle=AuthThrottle())
class AccountController(UserAwareController):
    @route.post(
        "/register",
        response={status.HTTP_201_CREATED: BoxOfficeUserSchema},
        url_name="register-host",
    )
    def register(self, payload: RegisterHostSchema) -> tuple[int, BoxOfficeUser]:
        """Create a host account.

        Buyers who previously checked out with the same email keep their ticket history; their
        guest account becomes a full host account.
        """
        return status.HTTP_201_CREATED, account_service.register_host(payload)

    @route.get("/me", response=BoxOfficeUserSchema, url_name="me", auth=JWTAuth())
    def me(self) -> BoxOfficeUser:
        """Retrieve the authenticated user's profile."""
        return self.user()
