"""Account service: host registration and buyer resolution."""

import structlog
from django.db import IntegrityError, transaction
from django.utils.translation import gettext_lazy as _
from ninja.errors import HttpError

from accounts import schema
from accounts.models import BoxOfficeUser

logger = structlog.get_logger(__name__)


def register_host(payload: schema.RegisterHostSchema) -> BoxOfficeUser:
    """Register a new host account.

    A buyer previously created at checkout with the same email is upgraded in place instead
    of producing a duplicate account.
    """
    logger.info("host_registration_started", email=payload.email)
    existing = BoxOfficeUser.objects.filter(email__iexact=payload.email).first()
    if existing and not existing.guest:
        logger.warning("host_registration_duplicate", email=payload.email)
        raise HttpError(400, str(_("A user with this email already exists.")))
    if existing:
        existing.guest = False
        existing.first_name = payload.first_name or existing.first_name
        existing.last_name = payload.last_name or existing.last_name
        existing.phone_number = payload.phone_number or existing.phone_number
        existing.set_password(payload.password1)
        existing.save()
        logger.info("host_registration_upgraded_guest", user_id=str(existing.id))
        return existing
    user = BoxOfficeUser.objects.create_user(
        username=payload.email,
        email=payload.email,
        password=payload.password1,
        first_name=payload.first_name,
        last_name=payload.last_name,
        phone_number=payload.phone_number,
    )
    logger.info("host_registration_completed", user_id=str(user.id))
    return user


def resolve_buyer(customer: schema.CustomerSchema) -> BoxOfficeUser:
    """Find a buyer by email (case-insensitive) or create a guest account for them."""
    email = customer.email.strip()
    user = BoxOfficeUser.objects.filter(email__iexact=email).first()
    if user is not None:
        return user
    try:
        with transaction.atomic():
            user = BoxOfficeUser(
                username=email.lower(),
                email=email,
                first_name=customer.first_name,
                last_name=customer.last_name,
                phone_number=customer.phone or None,
                location=customer.location,
                guest=True,
            )
            user.set_unusable_password()
            user.save()
    except IntegrityError:
        # a concurrent checkout created the same buyer
        return BoxOfficeUser.objects.get(email__iexact=email)
    logger.info("buyer_created", user_id=str(user.id))
    return user
