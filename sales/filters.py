import django_filters
from .models import Sale


class SaleFilter(django_filters.FilterSet):
    """
    Filter for sales:
    - status (multiple), sales person, product, campaign
    - sale date range
    """
    status = django_filters.MultipleChoiceFilter(choices=Sale.STATUS_CHOICES)
    start_date = django_filters.DateFilter(field_name='sale_date', lookup_expr='date__gte')
    end_date = django_filters.DateFilter(field_name='sale_date', lookup_expr='date__lte')

    class Meta:
        model = Sale
        fields = ['status', 'sales_person', 'product', 'campaign']
