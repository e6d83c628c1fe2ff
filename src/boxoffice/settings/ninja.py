from datetime import timedelta

from decouple import config

from .base import SECRET_KEY

NINJA_JWT = {
    "ACCESS_TOKEN_LIFETIME": timedelta(hours=config("ACCESS_TOKEN_LIFETIME_HOURS", default=1, cast=int)),
    "REFRESH_TOKEN_LIFETIME": timedelta(days=config("REFRESH_TOKEN_LIFETIME_DAYS", default=30, cast=int)),
    "ROTATE_REFRESH_TOKENS": True,
    "BLACKLIST_AFTER_ROTATION": True,
    "ALGORITHM": "HS256",
    "SIGNING_KEY": config("JWT_SIGNING_KEY", default=SECRET_KEY),
    "AUDIENCE": config("JWT_AUDIENCE", default="boxoffice"),
}

# scope -> rate, shared by common.throttling and ninja-extra's scope lookup
THROTTLE_RATES = {
    "anon": config("THROTTLE_ANON", default="60/min"),
    "user": config("THROTTLE_USER", default="100/min"),
    "auth": config("THROTTLE_AUTH", default="20/min"),
    "write": config("THROTTLE_WRITE", default="100/min"),
    "purchase": config("THROTTLE_PURCHASE", default="30/min"),
}

NINJA_EXTRA = {"THROTTLE_RATES": THROTTLE_RATES}
