from decimal import Decimal

from django.db import models
from django.contrib.auth import get_user_model
from django.core.validators import MinValueValidator, MaxValueValidator

User = get_user_model()


class MonthlyIncentive(models.Model):
    """
    Incentive owed to one employee for one month.

    Computed from the employee's approved sales; an admin of the employee's
    company reviews, adjusts and pays it out.
    """

    STATUS_CALCULATING = 'calculating'
    STATUS_PENDING_REVIEW = 'pending_review'
    STATUS_APPROVED = 'approved'
    STATUS_PAID = 'paid'
    STATUS_ON_HOLD = 'on_hold'
    STATUS_CANCELLED = 'cancelled'

    STATUS_CHOICES = [
        (STATUS_CALCULATING, '계산중'),
        (STATUS_PENDING_REVIEW, '검토대기'),
        (STATUS_APPROVED, '승인완료'),
        (STATUS_PAID, '지급완료'),
        (STATUS_ON_HOLD, '보류'),
        (STATUS_CANCELLED, '취소'),
    ]

    # Statuses that record who decided and when
    DECISION_STATUSES = (STATUS_APPROVED, STATUS_PAID, STATUS_ON_HOLD, STATUS_CANCELLED)

    PAYMENT_METHOD_CHOICES = [
        ('급여합산', '급여합산'),
        ('별도지급', '별도지급'),
        ('상품권', '상품권'),
        ('기타', '기타'),
    ]

    year = models.PositiveIntegerField()
    month = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(12)]
    )
    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='monthly_incentives',
        help_text="Employee the incentive is for"
    )

    total_sales = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('0'))
    total_cost = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('0'))
    total_margin = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('0'))
    incentive_rate = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0'))
    incentive_amount = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('0'))
    sales_count = models.PositiveIntegerField(default=0)

    adjustment_amount = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        default=Decimal('0'),
        help_text="Manual adjustment added to the computed amount (may be negative)"
    )
    adjustment_reason = models.TextField(blank=True)

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_CALCULATING,
        db_index=True
    )
    payment_date = models.DateField(null=True, blank=True)
    payment_method = models.CharField(max_length=10, choices=PAYMENT_METHOD_CHOICES, blank=True)
    payment_memo = models.TextField(blank=True)

    approved_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='approved_incentives'
    )
    approved_at = models.DateTimeField(null=True, blank=True)
    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_incentives'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-year', '-month', 'user__first_name']
        constraints = [
            models.UniqueConstraint(fields=['user', 'year', 'month'], name='unique_incentive_per_user_month'),
        ]
        indexes = [
            models.Index(fields=['year', 'month', 'status'], name='incentive_period_status_idx'),
        ]

    def __str__(self):
        return f"{self.user} {self.year}-{self.month:02d}"

    @property
    def final_amount(self):
        return self.incentive_amount + self.adjustment_amount
