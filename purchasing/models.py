from decimal import Decimal

from django.db import models
from django.contrib.auth import get_user_model
from django.core.validators import MinValueValidator
from django.utils import timezone

User = get_user_model()


class PurchaseRequest(models.Model):
    """
    Spending request raised by agency staff (ad spend, production, tools, ...).

    Reviewed by an agency admin of the requester's company; approval and
    purchase move the linked campaign's execution status.
    """

    STATUS_PENDING = 'pending'
    STATUS_REVIEWING = 'reviewing'
    STATUS_APPROVED = 'approved'
    STATUS_REJECTED = 'rejected'
    STATUS_ON_HOLD = 'on_hold'
    STATUS_PURCHASED = 'purchased'
    STATUS_SETTLED = 'settled'

    STATUS_CHOICES = [
        (STATUS_PENDING, '승인 대기'),
        (STATUS_REVIEWING, '검토 중'),
        (STATUS_APPROVED, '승인됨'),
        (STATUS_REJECTED, '거절됨'),
        (STATUS_ON_HOLD, '보류'),
        (STATUS_PURCHASED, '구매 완료'),
        (STATUS_SETTLED, '정산 완료'),
    ]

    RESOURCE_TYPE_CHOICES = [
        ('광고비', '광고비'),
        ('콘텐츠 제작비', '콘텐츠 제작비'),
        ('도구 구독료', '도구 구독료'),
        ('외부 용역비', '외부 용역비'),
        ('소재 구매비', '소재 구매비'),
        ('기타', '기타'),
    ]

    PRIORITY_CHOICES = [
        ('낮음', '낮음'),
        ('보통', '보통'),
        ('높음', '높음'),
        ('긴급', '긴급'),
    ]

    # Requester-editable fields (while pending)
    CONTENT_FIELDS = (
        'title', 'description', 'amount', 'resource_type', 'priority',
        'due_date', 'campaign', 'post', 'attachments',
    )
    # Fields only a reviewing admin may set
    REVIEW_FIELDS = (
        'status', 'approver_comment', 'reject_reason', 'actual_amount',
        'receipt_url', 'billed_to_client', 'client_bill_amount',
    )

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
        help_text="Requested amount"
    )
    currency = models.CharField(max_length=3, default='KRW')
    resource_type = models.CharField(max_length=20, choices=RESOURCE_TYPE_CHOICES)
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='보통')
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING,
        db_index=True
    )

    requested_date = models.DateTimeField(default=timezone.now)
    due_date = models.DateTimeField(null=True, blank=True, help_text="Wanted completion date")
    approved_date = models.DateTimeField(null=True, blank=True)
    completed_date = models.DateTimeField(null=True, blank=True, help_text="Purchase completion date")

    approver_comment = models.TextField(blank=True)
    reject_reason = models.TextField(blank=True)
    attachments = models.JSONField(default=list, blank=True, help_text="Quotes and references")

    actual_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    receipt_url = models.CharField(max_length=500, blank=True)
    billed_to_client = models.BooleanField(default=False)
    client_bill_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    requester = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name='purchase_requests'
    )
    approver = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='approved_purchase_requests'
    )
    campaign = models.ForeignKey(
        'campaigns.Campaign',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='purchase_requests'
    )
    post = models.ForeignKey(
        'campaigns.Post',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='purchase_requests'
    )
    sale = models.ForeignKey(
        'sales.Sale',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='purchase_requests'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['requester', 'status'], name='purchase_requester_status_idx'),
            models.Index(fields=['status', 'approved_date'], name='purchase_status_approved_idx'),
        ]

    def __str__(self):
        return f"{self.title} ({self.get_status_display()})"

    def review_stamps(self, new_status, reviewer):
        """Approver/date fields implied by moving to new_status."""
        stamps = {}
        if new_status in (self.STATUS_APPROVED, self.STATUS_REJECTED):
            stamps['approver'] = reviewer
            stamps['approved_date'] = timezone.now()
        elif new_status == self.STATUS_PURCHASED:
            stamps['completed_date'] = timezone.now()
        return stamps
