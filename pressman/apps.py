from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class PressmanConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "pressman"
    verbose_name = _("Print Pricing")

    def ready(self):
        from django.test.signals import setting_changed

        from pressman.conf import reset_catalog_backend
        from pressman.registry import registry

        def reset_on_change(sender, setting, **kwargs):
            if setting == "PRESSMAN":
                reset_catalog_backend()
                registry.clear()

        setting_changed.connect(reset_on_change, weak=False, dispatch_uid="pressman.reset_on_change")
