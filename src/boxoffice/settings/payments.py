from decimal import Decimal

from decouple import config

DEFAULT_CURRENCY = config("DEFAULT_CURRENCY", default="NGN")
PAYMENT_PROVIDER = config("PAYMENT_PROVIDER", default="paystack")

# Flat fee deducted from every withdrawal, in DEFAULT_CURRENCY.
PAYOUT_FEE = config("PAYOUT_FEE", default="150", cast=Decimal)

TICKET_SEARCH_LIMIT = config("TICKET_SEARCH_LIMIT", default=10, cast=int)
