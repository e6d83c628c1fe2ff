import re

from django.core.exceptions import ValidationError

_SEPARATORS = re.compile(r"[ \-()]")
# optional +, then 7 to 15 digits
_PHONE_NUMBER = re.compile(r"\+?\d{7,15}")


def normalize_phone_number(value: str) -> str:
    """``"+234 803 (123)45-67"`` becomes ``"+2348031234567"``."""
    return _SEPARATORS.sub("", value)


def validate_phone_number(value: str | None) -> None:
    if value is None:
        return
    if not isinstance(value, str):
        raise ValidationError("Phone number must be a string.", code="invalid_type")
    if not _PHONE_NUMBER.fullmatch(normalize_phone_number(value)):
        raise ValidationError("Number format is incorrect.", code="invalid_phone_number")
