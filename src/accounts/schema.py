"""Schema for accounts module."""

import typing as t

from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from ninja import ModelSchema, Schema
from pydantic import UUID4, EmailStr, Field, model_validator

from common.schema import StrippedString

from .models import BoxOfficeUser


class BoxOfficeUserSchema(ModelSchema):
    id: UUID4
    display_name: str

    class Meta:
        model = BoxOfficeUser
        fields = ["email", "first_name", "last_name", "phone_number", "location", "is_staff"]


class MinimalUserSchema(ModelSchema):
    id: UUID4
    display_name: str

    class Meta:
        model = BoxOfficeUser
        fields = ["email", "first_name", "last_name"]


class PasswordMixin(Schema):
    password1: str = Field(..., description="Password", min_length=8, max_length=150)
    password2: str = Field(..., description="Password confirmation", min_length=8, max_length=150)

    @model_validator(mode="after")
    def password_match(self) -> t.Self:
        """Validate that the passwords match."""
        if self.password1 != self.password2:
            raise ValueError("Passwords do not match")
        return self


class RegisterHostSchema(PasswordMixin):
    email: EmailStr
    first_name: StrippedString = ""
    last_name: StrippedString = ""
    phone_number: StrippedString | None = None

    @model_validator(mode="after")
    def check_password_strength(self) -> t.Self:
        """Run the configured password validators against the would-be host."""
        candidate = BoxOfficeUser(
            email=self.email, username=self.email, first_name=self.first_name, last_name=self.last_name
        )
        try:
            validate_password(self.password1, user=candidate)
        except DjangoValidationError as e:
            raise ValueError(" ".join(e.messages)) from e
        return self


class CustomerSchema(Schema):
    """Buyer identity supplied at checkout."""

    email: EmailStr
    first_name: StrippedString = ""
    last_name: StrippedString = ""
    phone: StrippedString = ""
    location: StrippedString = ""
