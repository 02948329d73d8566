"""
Notification receivers for campaign events.

Each receiver hands off to NotificationService, which logs and drops
failures, so a notification problem never undoes the campaign change.
"""

import logging
from django.dispatch import receiver

from campaigns import events
from .services import NotificationService

logger = logging.getLogger(__name__)


@receiver(events.campaign_created, dispatch_uid='notifications.campaign_created')
def on_campaign_created(sender, campaign, actor=None, **kwargs):
    return NotificationService.notify_campaign_created(campaign, actor=actor)


@receiver(events.post_created, dispatch_uid='notifications.post_created')
def on_post_created(sender, post, actor=None, **kwargs):
    return NotificationService.notify_task_created(post, actor=actor)


@receiver(events.post_status_changed, dispatch_uid='notifications.post_status_changed')
def on_post_status_changed(sender, post, field, old, new, actor=None, **kwargs):
    logger.debug(f"Post {post.pk}: {field} '{old}' -> '{new}'")
    return NotificationService.notify_status_changed(post, field, new, actor=actor)


@receiver(events.outline_submitted, dispatch_uid='notifications.outline_submitted')
def on_outline_submitted(sender, post, actor=None, **kwargs):
    return NotificationService.notify_outline_submitted(post, actor=actor)


@receiver(events.result_submitted, dispatch_uid='notifications.result_submitted')
def on_result_submitted(sender, post, actor=None, **kwargs):
    return NotificationService.notify_result_submitted(post, actor=actor)
