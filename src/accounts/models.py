import typing as t
import uuid

from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models
from django.db.models.functions import Lower

from accounts.validators import normalize_phone_number, validate_phone_number


class BoxOfficeUserQueryset(models.QuerySet["BoxOfficeUser"]):
    """Queryset for BoxOfficeUser."""

    def hosts(self) -> t.Self:
        """Users that own at least one event."""
        return self.filter(hosted_events__isnull=False).distinct()


class BoxOfficeUserManager(UserManager["BoxOfficeUser"]):
    def get_queryset(self) -> BoxOfficeUserQueryset:
        """Get queryset for BoxOfficeUser."""
        return BoxOfficeUserQueryset(self.model, using=self._db)

    def hosts(self) -> BoxOfficeUserQueryset:
        return self.get_queryset().hosts()


class BoxOfficeUser(AbstractUser):
    """A platform user.

    Hosts sign up with a password. Buyers are created on the fly at checkout with the
    ``guest`` flag set and an unusable password.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    phone_number = models.CharField(
        max_length=20, null=True, blank=True, validators=[validate_phone_number], help_text="Phone number"
    )
    location = models.CharField(max_length=255, blank=True, default="", help_text="Free-form location")
    guest = models.BooleanField(default=False, help_text="True if this user was created at checkout")

    objects = BoxOfficeUserManager()  # type: ignore[misc]

    class Meta:
        ordering = ["username"]
        constraints = [
            models.UniqueConstraint(Lower("email"), name="unique_user_email_ci", condition=~models.Q(email="")),
        ]

    def save(self, *args: t.Any, **kwargs: t.Any) -> None:
        """Normalize the phone number before saving."""
        if self.phone_number:
            self.phone_number = normalize_phone_number(self.phone_number)
        super().save(*args, **kwargs)

    @property
    def display_name(self) -> str:
        full_name = self.get_full_name()
        return full_name or self.email or self.username

    def __str__(self) -> str:
        return self.email or self.username
