from django.apps import AppConfig


class CampaignsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'campaigns'
    verbose_name = 'Campaign Management'

    def ready(self):
        """Register receivers for purchasing events."""
        from . import signals  # noqa: F401
