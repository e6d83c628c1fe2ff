import typing as t

import pytest

from accounts import schema
from accounts.models import BoxOfficeUser


@pytest.fixture
def valid_register_payload() -> schema.RegisterHostSchema:
    """Provides a valid payload for the host registration endpoint."""
    return schema.RegisterHostSchema(
        email="newhost@example.com",
        password1="a-Strong-password-123!",
        password2="a-Strong-password-123!",
        first_name="New",
        last_name="Host",
    )


@pytest.fixture
def user(django_user_model: t.Type[BoxOfficeUser]) -> BoxOfficeUser:
    """A standard, non-privileged user."""
    return django_user_model.objects.create_user(
        username="testuser@example.com",
        email="testuser@example.com",
        password="strong-password-123!",
        first_name="Test",
        last_name="User",
    )
