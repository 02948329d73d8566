"""
Celery configuration for async task processing.
"""
import os
from celery import Celery
from celery.schedules import crontab

# Set the default Django settings module
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

app = Celery('agency_ops')

# Load config from Django settings with CELERY_ prefix
app.config_from_object('django.conf:settings', namespace='CELERY')

app.autodiscover_tasks()


# Periodic task schedule
app.conf.beat_schedule = {
    # Previous month's incentives, 1st of the month at 06:00
    'calculate-monthly-incentives': {
        'task': 'incentives.calculate_previous_month',
        'schedule': crontab(day_of_month=1, hour=6, minute=0),
    },
}
