"""
Campaign reactions to purchasing events.

A purchase request linked to a campaign drives the campaign's execution
status: approval moves it to 'approved', purchase or settlement to
'completed'.
"""

import logging
from django.db import transaction
from django.dispatch import receiver
from django.utils import timezone

from purchasing.events import purchase_request_reviewed
from .models import Campaign

logger = logging.getLogger(__name__)

EXECUTION_TRANSITIONS = {
    'approved': ('approved', 'execution_approved_at'),
    'purchased': ('completed', 'execution_completed_at'),
    'settled': ('completed', 'execution_completed_at'),
}


@receiver(purchase_request_reviewed, dispatch_uid='campaigns.update_execution_status')
def update_execution_status(sender, request, old_status, new_status, actor=None, **kwargs):
    """Move the linked campaign's execution status after a purchase request review."""
    if old_status == new_status or not request.campaign_id:
        return

    transition = EXECUTION_TRANSITIONS.get(new_status)
    if transition is None:
        return

    execution_status, timestamp_field = transition
    with transaction.atomic():
        updated = Campaign.objects.filter(pk=request.campaign_id).update(**{
            'execution_status': execution_status,
            timestamp_field: timezone.now(),
            'updated_at': timezone.now(),
        })

    if updated:
        logger.info(
            f"Campaign {request.campaign_id}: execution status -> '{execution_status}' "
            f"(purchase request {request.pk} {old_status} -> {new_status})"
        )
