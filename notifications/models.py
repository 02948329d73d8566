from django.db import models
from django.contrib.auth import get_user_model
from django.utils import timezone

User = get_user_model()


class Notification(models.Model):
    """
    In-app notification for one recipient.

    related_data carries the ids the frontend needs to navigate
    (campaign_id, post_id, ...).
    """

    NOTIFICATION_TYPES = [
        ('task_created', 'Task Created'),
        ('task_approved', 'Task Approved'),
        ('task_rejected', 'Task Rejected'),
        ('outline_submitted', 'Outline Submitted'),
        ('outline_approved', 'Outline Approved'),
        ('outline_rejected', 'Outline Rejected'),
        ('result_submitted', 'Result Submitted'),
        ('campaign_created', 'Campaign Created'),
        ('campaign_assigned', 'Campaign Assigned'),
    ]

    PRIORITY_CHOICES = [
        ('high', 'High'),
        ('medium', 'Medium'),
        ('low', 'Low'),
    ]

    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='notifications',
        help_text="User who receives this notification",
        db_index=True
    )
    title = models.CharField(max_length=255)
    message = models.TextField(
        help_text="Notification message text"
    )
    notification_type = models.CharField(
        max_length=50,
        choices=NOTIFICATION_TYPES,
        help_text="Type of notification",
        db_index=True
    )
    related_data = models.JSONField(
        default=dict,
        blank=True,
        help_text="Ids of related campaign/task and display data"
    )
    is_read = models.BooleanField(
        default=False,
        help_text="Whether the user has read this notification",
        db_index=True
    )
    read_at = models.DateTimeField(null=True, blank=True)
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='medium')
    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='sent_notifications',
        help_text="User whose action triggered the notification"
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', '-created_at'], name='notification_user_created_idx'),
            models.Index(fields=['user', 'is_read', '-created_at'], name='notification_user_read_idx'),
        ]
        verbose_name = 'Notification'
        verbose_name_plural = 'Notifications'

    def __str__(self):
        return f"{self.notification_type} for {self.user_id}: {self.title[:50]}"

    def mark_as_read(self):
        """Mark notification as read"""
        if not self.is_read:
            self.is_read = True
            self.read_at = timezone.now()
            self.save(update_fields=['is_read', 'read_at', 'updated_at'])

    def mark_as_unread(self):
        """Mark notification as unread"""
        if self.is_read:
            self.is_read = False
            self.read_at = None
            self.save(update_fields=['is_read', 'read_at', 'updated_at'])
