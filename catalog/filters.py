import django_filters
from django.db import models
from .models import Product


class ProductFilter(django_filters.FilterSet):
    """
    Filter for products with support for:
    - Category and active flag
    - Shared (company-less) vs company products
    - Search by name, SKU or description
    """

    category = django_filters.ChoiceFilter(
        choices=Product.CATEGORY_CHOICES,
        help_text="Filter by category"
    )

    is_active = django_filters.BooleanFilter(
        help_text="Filter by active flag"
    )

    shared = django_filters.BooleanFilter(
        field_name='company',
        lookup_expr='isnull',
        help_text="true = shared catalog only, false = company products only"
    )

    search = django_filters.CharFilter(
        method='filter_search',
        help_text="Search by product name, SKU or description"
    )

    class Meta:
        model = Product
        fields = ['category', 'is_active', 'shared', 'search']

    def filter_search(self, queryset, name, value):
        return queryset.filter(
            models.Q(name__icontains=value) |
            models.Q(sku__icontains=value) |
            models.Q(description__icontains=value)
        )
