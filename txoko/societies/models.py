from django.db import models
from django.utils.translation import gettext_lazy as _


class Society(models.Model):
    """A club owning members, notifications, announcements and chat rooms."""

    name = models.CharField(_("Name"), max_length=255)
    address = models.CharField(_("Address"), max_length=500, blank=True)
    phone = models.CharField(_("Phone"), max_length=50, blank=True)
    email = models.EmailField(_("Email"), blank=True)
    iban = models.CharField(_("IBAN"), max_length=34, blank=True)
    creditor_id = models.CharField(_("SEPA creditor id"), max_length=35, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = _("societies")

    def __str__(self) -> str:
        return self.name
