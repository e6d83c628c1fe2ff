"""Request throttles.

Login, checkout and writes each count against their own ``scope``, so a burst of checkouts from
one address does not use up its login budget. Rates come from ``settings.THROTTLE_RATES``.
"""

from django.conf import settings
from ninja_extra.throttling import AnonRateThrottle, UserRateThrottle


class AnonDefaultThrottle(AnonRateThrottle):
    rate = settings.THROTTLE_RATES["anon"]


class UserDefaultThrottle(UserRateThrottle):
    rate = settings.THROTTLE_RATES["user"]


class AuthThrottle(AnonRateThrottle):
    """Token obtain/refresh and host sign-up."""

    scope = "auth"
    rate = settings.THROTTLE_RATES["auth"]


class WriteThrottle(UserRateThrottle):
    scope = "write"
    rate = settings.THROTTLE_RATES["write"]


class PurchaseThrottle(AnonRateThrottle):
    """Checkout is open to guests, so it is keyed by client address."""

    scope = "purchase"
    rate = settings.THROTTLE_RATES["purchase"]
