from django.apps import AppConfig


class SalesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'sales'
    verbose_name = 'Sales'

    def ready(self):
        """Register receivers for campaign events."""
        from . import signals  # noqa: F401
