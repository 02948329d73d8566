from decimal import Decimal, ROUND_HALF_UP

from django.db import models
from django.contrib.auth import get_user_model
from django.core.validators import MinValueValidator, MaxValueValidator

User = get_user_model()


class Product(models.Model):
    """
    Sellable product or service.

    Products with no company form the shared catalog every agency can sell
    from; products with a company are private to that agency.
    """

    CATEGORY_CHOICES = [
        ('SNS 광고', 'SNS 광고'),
        ('검색 광고', '검색 광고'),
        ('크리에이티브', '크리에이티브'),
        ('웹사이트', '웹사이트'),
        ('브랜딩', '브랜딩'),
        ('컨설팅', '컨설팅'),
        ('캠페인', '캠페인'),
        ('기타', '기타'),
    ]

    UNIT_CHOICES = [
        ('건', '건'),
        ('월', '월'),
        ('년', '년'),
        ('일', '일'),
        ('시간', '시간'),
        ('개', '개'),
    ]

    name = models.CharField(max_length=200, help_text="Product name")
    description = models.TextField(blank=True)
    sku = models.CharField(
        max_length=100,
        unique=True,
        help_text="Stock keeping unit, unique across all companies"
    )
    category = models.CharField(
        max_length=20,
        choices=CATEGORY_CHOICES,
        default='기타',
        db_index=True
    )
    cost_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0'))],
        help_text="Unit cost"
    )
    selling_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0'))],
        help_text="Unit selling price"
    )
    unit = models.CharField(max_length=10, choices=UNIT_CHOICES, default='건')
    is_active = models.BooleanField(default=True, db_index=True)
    incentive_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))],
        help_text="Product-specific incentive rate (%)"
    )
    min_quantity = models.PositiveIntegerField(default=1)
    max_quantity = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text="Upper bound per sale (empty = unlimited)"
    )
    tags = models.JSONField(default=list, blank=True)
    company = models.CharField(
        max_length=100,
        null=True,
        blank=True,
        db_index=True,
        help_text="Owning company; empty for shared catalog products"
    )
    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_products'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['category', 'name']
        indexes = [
            models.Index(fields=['company', 'is_active'], name='product_company_active_idx'),
            models.Index(fields=['category', 'is_active'], name='product_category_active_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.sku})"

    def save(self, *args, **kwargs):
        if self.company is not None:
            self.company = self.company.strip() or None
        super().save(*args, **kwargs)

    @property
    def margin_amount(self):
        return self.selling_price - self.cost_price

    @property
    def margin_rate(self):
        """Margin over cost in percent, rounded to 2 decimals."""
        if not self.cost_price:
            return Decimal('0')
        rate = (self.selling_price - self.cost_price) / self.cost_price * 100
        return rate.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


class WorkType(models.Model):
    """
    Kind of work a task (post) represents: blog, design, video, ...

    Shared work types have no company; agencies may add their own.
    """

    DEFAULT_NAMES = ['블로그', '디자인', '마케팅', '개발', '영상', '기획', '기타']

    name = models.CharField(max_length=50, unique=True)
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    sort_order = models.PositiveIntegerField(default=0)
    company = models.CharField(
        max_length=100,
        null=True,
        blank=True,
        db_index=True,
        help_text="Owning company; empty for shared work types"
    )
    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_work_types'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['sort_order', 'name']

    def __str__(self):
        return self.name

    @classmethod
    def seed_defaults(cls):
        """Create the default shared work types that are missing. Returns the number created."""
        created_count = 0
        for index, name in enumerate(cls.DEFAULT_NAMES, start=1):
            _, created = cls.objects.get_or_create(
                name=name,
                defaults={'sort_order': index, 'description': f'{name} 업무'}
            )
            created_count += int(created)
        return created_count
