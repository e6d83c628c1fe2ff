"""Token issuance controllers."""

import typing as t

import structlog
from ninja_extra import api_controller, route
from ninja_jwt.controller import TokenObtainPairController, TokenVerificationController
from ninja_jwt.schema import TokenObtainPairInputSchema, TokenObtainPairOutputSchema

from accounts.models import BoxOfficeUser
from common.throttling import AuthThrottle

logger = structlog.get_logger(__name__)


@api_controller("/auth", tags=["Auth"], throttle=AuthThrottle())
class AuthController(TokenObtainPairController, TokenVerificationController):
    @route.post("/token/pair", response=TokenObtainPairOutputSchema, url_name="token_obtain_pair")
    def obtain_token(self, user_token: TokenObtainPairInputSchema) -> TokenObtainPairOutputSchema:
        """Authenticate with username/email and password to obtain JWT access/refresh tokens."""
        user = t.cast(BoxOfficeUser, user_token._user)
        logger.info("token_obtained", user_id=str(user.id))
        return t.cast(TokenObtainPairOutputSchema, user_token.to_response_schema())  # type: ignore[no-untyped-call]
