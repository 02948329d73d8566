from decimal import Decimal, ROUND_HALF_UP

from django.db import models
from django.contrib.auth import get_user_model
from django.core.validators import MinValueValidator
from django.utils import timezone
from sequences import get_next_value

User = get_user_model()


class Sale(models.Model):
    """
    Sale of a catalog product recorded by a salesperson.

    Approved sales feed the monthly incentive calculation.
    """

    STATUS_REGISTERED = 'registered'
    STATUS_REVIEWING = 'reviewing'
    STATUS_APPROVED = 'approved'
    STATUS_REJECTED = 'rejected'
    STATUS_SETTLED = 'settled'

    STATUS_CHOICES = [
        (STATUS_REGISTERED, '등록'),
        (STATUS_REVIEWING, '검토중'),
        (STATUS_APPROVED, '승인'),
        (STATUS_REJECTED, '거절'),
        (STATUS_SETTLED, '정산완료'),
    ]

    # Salesperson-editable fields
    CONTENT_FIELDS = (
        'quantity', 'actual_cost_price', 'actual_selling_price', 'client_name',
        'client_contact', 'client_email', 'sale_date', 'contract_start_date',
        'contract_end_date', 'campaign', 'memo',
    )
    REVIEW_FIELDS = ('status', 'review_comment')

    sale_number = models.CharField(
        max_length=20,
        unique=True,
        editable=False,
        help_text="Auto-generated: S{yymmdd}-{sequence}"
    )
    product = models.ForeignKey(
        'catalog.Product',
        on_delete=models.PROTECT,
        related_name='sales'
    )
    sales_person = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name='sales'
    )
    campaign = models.ForeignKey(
        'campaigns.Campaign',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='sales'
    )
    quantity = models.PositiveIntegerField(default=1)
    actual_cost_price = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0'))],
        help_text="Unit cost for this sale"
    )
    actual_selling_price = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0'))],
        help_text="Unit selling price for this sale"
    )
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_REGISTERED,
        db_index=True
    )
    sale_date = models.DateTimeField(default=timezone.now, db_index=True)
    contract_start_date = models.DateField(null=True, blank=True)
    contract_end_date = models.DateField(null=True, blank=True)

    client_name = models.CharField(max_length=200)
    client_contact = models.CharField(max_length=100, blank=True)
    client_email = models.EmailField(blank=True)
    memo = models.TextField(blank=True)

    reviewed_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='reviewed_sales'
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)
    review_comment = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-sale_date', '-created_at']
        indexes = [
            models.Index(fields=['sales_person', 'status', 'sale_date'], name='sale_person_status_date_idx'),
        ]

    def __str__(self):
        return f"{self.sale_number} - {self.client_name}"

    def save(self, *args, **kwargs):
        """Auto-generate sale number if not set"""
        if not self.sale_number:
            now = timezone.localtime()
            next_num = get_next_value(f'sale_{now.year}')
            self.sale_number = f"S{now:%y%m%d}-{next_num:05d}"
        super().save(*args, **kwargs)

    @property
    def total_sales(self):
        return self.actual_selling_price * self.quantity

    @property
    def total_cost(self):
        return self.actual_cost_price * self.quantity

    @property
    def total_margin(self):
        return (self.actual_selling_price - self.actual_cost_price) * self.quantity

    @property
    def margin_rate(self):
        """Margin over unit cost in percent; 0 for zero-cost sales."""
        if not self.actual_cost_price:
            return Decimal('0')
        rate = (self.actual_selling_price - self.actual_cost_price) / self.actual_cost_price * 100
        return rate.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)

    @property
    def incentive_amount(self):
        """Margin times the salesperson's incentive rate, in whole units."""
        profile = getattr(self.sales_person, 'profile', None)
        rate = profile.incentive_rate if profile else Decimal('0')
        return (self.total_margin * rate / 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP)

    def review_stamps(self, new_status, reviewer):
        if new_status in (self.STATUS_APPROVED, self.STATUS_REJECTED):
            return {'reviewed_by': reviewer, 'reviewed_at': timezone.now()}
        return {}
