"""
Celery tasks for incentives.

The previous month is calculated for every company on the first day of
each month (see the beat schedule in config.celery).
"""

import logging

from celery import shared_task
from django.utils import timezone

from .services import calculate_monthly_incentives

logger = logging.getLogger(__name__)


def previous_month(today=None):
    today = today or timezone.localdate()
    if today.month == 1:
        return today.year - 1, 12
    return today.year, today.month - 1


@shared_task(name='incentives.calculate_previous_month')
def calculate_previous_month():
    """
    Calculate last month's incentives for all eligible employees.
    Runs on the 1st of each month.
    """
    year, month = previous_month()
    results = calculate_monthly_incentives(year, month)
    created = sum(1 for result in results if result['status'] == 'created')
    logger.info(f"Scheduled incentive calculation for {year}-{month:02d} created {created} rows")
    return {'year': year, 'month': month, 'created': created, 'total': len(results)}
