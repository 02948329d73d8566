import logging

from django.db import DatabaseError, transaction

from .models import Notification

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Service for creating notifications for campaign and task events.

    Notifications are fire-and-forget: a failure is logged and never
    propagates to the operation that triggered it.
    """

    @staticmethod
    def create_notification(
        user_id,
        title,
        message,
        notification_type,
        related_data=None,
        created_by=None,
        priority='medium'
    ):
        """
        Create a notification for one recipient.

        Args:
            user_id: ID of the recipient
            title: Short title
            message: Notification message text
            notification_type: One of Notification.NOTIFICATION_TYPES
            related_data: Optional dict of related ids
            created_by: Optional User whose action triggered it
            priority: 'high', 'medium' or 'low'

        Returns:
            Notification instance, or None if it could not be stored
        """
        try:
            with transaction.atomic():
                return Notification.objects.create(
                    user_id=user_id,
                    title=title,
                    message=message,
                    notification_type=notification_type,
                    related_data=related_data or {},
                    created_by=created_by,
                    priority=priority,
                )
        except DatabaseError as e:
            logger.error(f"Failed to create {notification_type} notification for user {user_id}: {e}")
            return None

    @staticmethod
    def notify_users(user_ids, actor=None, **kwargs):
        """Notify each distinct recipient once, skipping the actor."""
        actor_id = getattr(actor, 'pk', None)
        sent = []
        for user_id in dict.fromkeys(user_ids):
            if user_id is None or user_id == actor_id:
                continue
            notification = NotificationService.create_notification(user_id, created_by=actor, **kwargs)
            if notification is not None:
                sent.append(notification)
        return sent

    @staticmethod
    def notify_campaign_created(campaign, actor=None):
        related = {'campaign_id': campaign.id, 'campaign_name': campaign.name}
        sent = NotificationService.notify_users(
            [campaign.client_id],
            actor=actor,
            title='새로운 캠페인이 생성되었습니다',
            message=f'"{campaign.name}" 캠페인이 생성되었습니다. 담당 매니저가 배정되었습니다.',
            notification_type='campaign_created',
            related_data=related,
        )
        sent += NotificationService.notify_users(
            [campaign.manager_id],
            actor=actor,
            title='새로운 캠페인이 배정되었습니다',
            message=f'"{campaign.name}" 캠페인의 담당 매니저로 배정되었습니다.',
            notification_type='campaign_assigned',
            related_data=related,
        )
        return sent

    @staticmethod
    def notify_task_created(post, actor=None):
        campaign = post.campaign
        return NotificationService.notify_users(
            [campaign.client_id],
            actor=actor,
            title='새로운 업무가 등록되었습니다',
            message=f'"{campaign.name}" 캠페인에 새로운 {post.work_type} 업무가 등록되었습니다: {post.title}',
            notification_type='task_created',
            related_data={
                'campaign_id': campaign.id,
                'post_id': post.id,
                'campaign_name': campaign.name,
                'work_type': post.work_type,
            },
        )

    @staticmethod
    def notify_status_changed(post, field, new_status, actor=None):
        """
        Approval or rejection of a topic or outline, sent to the manager.

        Statuses that are neither an approval nor a rejection send nothing.
        """
        approved = '승인' in new_status and '대기' not in new_status
        rejected = '반려' in new_status
        if not (approved or rejected):
            return []

        campaign = post.campaign
        subject, prefix = ('업무가', 'task') if field == 'topic_status' else ('세부사항이', 'outline')
        verdict = '승인' if approved else '반려'
        return NotificationService.notify_users(
            [campaign.manager_id],
            actor=actor,
            title=f'{subject} {verdict}되었습니다',
            message=f'"{campaign.name}" 캠페인의 "{post.title}" {subject} {verdict}되었습니다.',
            notification_type=f'{prefix}_approved' if approved else f'{prefix}_rejected',
            related_data={
                'campaign_id': campaign.id,
                'post_id': post.id,
                'campaign_name': campaign.name,
                'status': new_status,
            },
            priority='high' if rejected else 'medium',
        )

    @staticmethod
    def notify_outline_submitted(post, actor=None):
        campaign = post.campaign
        return NotificationService.notify_users(
            [campaign.client_id],
            actor=actor,
            title='세부사항이 제출되었습니다',
            message=f'"{campaign.name}" 캠페인의 "{post.title}" 업무에 세부사항이 제출되었습니다.',
            notification_type='outline_submitted',
            related_data={'campaign_id': campaign.id, 'post_id': post.id, 'campaign_name': campaign.name},
        )

    @staticmethod
    def notify_result_submitted(post, actor=None):
        campaign = post.campaign
        return NotificationService.notify_users(
            [campaign.manager_id, campaign.client_id],
            actor=actor,
            title='결과물이 제출되었습니다',
            message=f'"{campaign.name}" 캠페인의 "{post.title}" 업무 결과물이 제출되었습니다.',
            notification_type='result_submitted',
            related_data={
                'campaign_id': campaign.id,
                'post_id': post.id,
                'campaign_name': campaign.name,
                'published_url': post.published_url,
            },
            priority='high',
        )
