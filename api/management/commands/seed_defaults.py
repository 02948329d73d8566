"""
Create the default system settings and shared work types.

Usage:
    python manage.py seed_defaults

Existing rows are left untouched, so the command is safe to re-run.
"""

from django.core.management.base import BaseCommand

from catalog.models import WorkType
from platform_settings.models import SystemSetting


class Command(BaseCommand):
    help = 'Seed default system settings and work types'

    def handle(self, *args, **options):
        settings_created = SystemSetting.seed_defaults()
        work_types_created = WorkType.seed_defaults()
        self.stdout.write(self.style.SUCCESS(
            f'Seeded {settings_created} system settings and {work_types_created} work types'
        ))
