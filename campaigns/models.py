from decimal import Decimal

from django.db import models
from django.contrib.auth import get_user_model
from django.core.validators import MinValueValidator
from django.utils import timezone

User = get_user_model()


class Campaign(models.Model):
    """
    Marketing campaign run by an agency manager for a client.

    The manager is the owner reference and the client user the subject
    reference; the campaign's company is whatever their profiles say.
    """

    EXECUTION_STATUS_CHOICES = [
        ('pending', '대기'),
        ('approved', '승인'),
        ('completed', '완료'),
    ]

    # Fields the manager side may edit after creation
    EDITABLE_FIELDS = [
        'name', 'memo', 'budget', 'notes', 'reminders',
        'invoice_issued', 'payment_completed', 'invoice_due_date', 'payment_due_date',
    ]

    name = models.CharField(max_length=200, help_text="Campaign name")
    client_name = models.CharField(
        max_length=200,
        blank=True,
        help_text="Client company or brand name as shown to the team"
    )
    manager = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name='managed_campaigns',
        help_text="Agency user responsible for the campaign"
    )
    client = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name='client_campaigns',
        help_text="Client user the campaign is run for"
    )

    # Chat log summary
    chat_content = models.TextField(blank=True, help_text="Messenger conversation log")
    chat_summary = models.TextField(blank=True, help_text="Key points from the conversation")
    chat_attachments = models.TextField(blank=True, help_text="Attachment and link notes")

    memo = models.TextField(blank=True)
    budget = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0'))],
        help_text="Contract budget"
    )
    notes = models.TextField(blank=True, help_text="Cautions and special notes")
    reminders = models.TextField(blank=True)

    # Billing
    invoice_issued = models.BooleanField(default=False)
    payment_completed = models.BooleanField(default=False)
    invoice_date = models.DateTimeField(null=True, blank=True)
    payment_date = models.DateTimeField(null=True, blank=True)
    invoice_due_date = models.DateField(null=True, blank=True)
    payment_due_date = models.DateField(null=True, blank=True)

    # Execution, driven by purchase request reviews
    execution_status = models.CharField(
        max_length=20,
        choices=EXECUTION_STATUS_CHOICES,
        default='pending',
        db_index=True
    )
    execution_approved_at = models.DateTimeField(null=True, blank=True)
    execution_completed_at = models.DateTimeField(null=True, blank=True)

    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_campaigns'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['manager', 'created_at'], name='campaign_manager_created_idx'),
            models.Index(fields=['client', 'created_at'], name='campaign_client_created_idx'),
        ]

    def __str__(self):
        return self.name

    def billing_dates_for(self, changes):
        """
        Invoice/payment dates implied by billing flags present in changes.

        A flag switched on records the current time (an already set flag
        keeps its date); switched off clears the date.
        """
        dates = {}
        now = timezone.now()
        for flag, date_field in (('invoice_issued', 'invoice_date'), ('payment_completed', 'payment_date')):
            if flag not in changes:
                continue
            if not changes[flag]:
                dates[date_field] = None
            elif not getattr(self, flag):
                dates[date_field] = now
        return dates


class Post(models.Model):
    """
    Task (post) within a campaign: topic, outline and published result.
    """

    TOPIC_PENDING = '주제 승인 대기'
    TOPIC_APPROVED = '승인됨'
    TOPIC_REJECTED = '반려됨'

    OUTLINE_PENDING = '목차 승인 대기'
    OUTLINE_APPROVED = '승인됨'
    OUTLINE_REJECTED = '반려됨'

    campaign = models.ForeignKey(
        Campaign,
        on_delete=models.CASCADE,
        related_name='posts'
    )
    title = models.CharField(max_length=255)
    work_type = models.CharField(
        max_length=50,
        default='블로그',
        help_text="Work type name (see catalog.WorkType)"
    )
    topic_status = models.CharField(max_length=30, default=TOPIC_PENDING, db_index=True)
    outline = models.TextField(blank=True)
    outline_status = models.CharField(max_length=30, blank=True)
    published_url = models.CharField(max_length=500, blank=True)
    reject_reason = models.TextField(blank=True)
    images = models.JSONField(default=list, blank=True)
    product = models.ForeignKey(
        'catalog.Product',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='posts'
    )
    quantity = models.PositiveIntegerField(null=True, blank=True, default=1)
    start_date = models.DateField(null=True, blank=True)
    due_date = models.DateField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['campaign', 'created_at'], name='post_campaign_created_idx'),
        ]

    def __str__(self):
        return self.title

    @property
    def is_completed(self):
        return bool(self.published_url)
