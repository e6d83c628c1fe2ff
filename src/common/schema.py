"""Common schemas for the API."""

import typing as t
from decimal import Decimal

from ninja import Schema
from pydantic import PlainSerializer, StringConstraints

StrippedString = t.Annotated[str, StringConstraints(strip_whitespace=True)]
OneToOneFiftyString = t.Annotated[str, StringConstraints(min_length=1, max_length=150, strip_whitespace=True)]

# Amounts travel as strings so clients never see float rounding.
Money = t.Annotated[Decimal, PlainSerializer(lambda v: f"{v:.2f}", return_type=str)]


class VersionResponse(Schema):
    version: str


class ResponseOk(Schema):
    status: t.Literal["ok"] = "ok"


class ResponseMessage(Schema):
    message: str


class ValidationErrorResponse(Schema):
    errors: dict[str, str | list[str]]


class ErrorResponse(Schema):
    detail: str


class InsufficientBalanceResponse(ErrorResponse):
    balance: str
