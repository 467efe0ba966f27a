from django.contrib.auth.models import AbstractUser
from django.db import models
from django.db.models import CharField
from django.db.models import EmailField
from django.utils.translation import gettext_lazy as _

from txoko.users.access import Function
from txoko.users.access import Role


class User(AbstractUser):
    """
    Default custom user model for txoko.

    ``role`` is the membership class; ``function`` drives every capability
    check (see ``txoko.users.access``).
    """

    # First and last name do not cover name patterns around the globe
    name = CharField(_("Full Name"), blank=True, max_length=255)
    email = EmailField(_("email address"), unique=True)
    role = CharField(
        _("Role"),
        max_length=20,
        choices=Role.choices,
        default=Role.MEMBER,
    )
    function = CharField(
        _("Function"),
        max_length=30,
        choices=Function.choices,
        default=Function.ORDINARY,
    )
    society = models.ForeignKey(
        "societies.Society",
        on_delete=models.CASCADE,
        related_name="members",
        null=True,
        blank=True,
    )
    # Associate members (laguna) are sponsored by a regular member.
    linked_member = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        related_name="associates",
        null=True,
        blank=True,
    )
    phone = CharField(_("Phone"), max_length=50, blank=True)
    iban = CharField(_("IBAN"), max_length=34, blank=True)
    avatar_url = models.URLField(_("Avatar URL"), max_length=500, blank=True)
    # Audit timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def save(self, *args, **kwargs):
        if not self.name:
            self.name = f"{self.first_name} {self.last_name}".strip()
        super().save(*args, **kwargs)

    @property
    def linked_member_name(self) -> str:
        member = self.linked_member
        return member.name if member else ""
