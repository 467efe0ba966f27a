from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class SocietiesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "txoko.societies"
    verbose_name = _("Societies")
