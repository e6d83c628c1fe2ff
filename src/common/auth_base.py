"""JWT authentication for back-office endpoints."""

import typing as t

from django.contrib.auth.models import AnonymousUser
from django.http import HttpRequest
from ninja_extra import status
from ninja_extra.exceptions import APIException
from ninja_jwt.authentication import JWTAuth


class PermissionDenied(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Permission denied"


class AdminJWTAuth(JWTAuth):
    """A valid bearer token whose user is staff.

    Missing or invalid tokens still yield 401; a valid token of a non-staff user yields 403.
    """

    def authenticate(self, request: HttpRequest, token: str) -> t.Any:
        user = super().authenticate(request, token)
        if user and not isinstance(user, AnonymousUser) and not user.is_staff:
            raise PermissionDenied("Staff access required.")
        return user
