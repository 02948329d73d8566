import django_filters
from .models import PurchaseRequest


class PurchaseRequestFilter(django_filters.FilterSet):
    status = django_filters.MultipleChoiceFilter(choices=PurchaseRequest.STATUS_CHOICES)
    requested_after = django_filters.DateTimeFilter(field_name='requested_date', lookup_expr='gte')
    requested_before = django_filters.DateTimeFilter(field_name='requested_date', lookup_expr='lte')

    class Meta:
        model = PurchaseRequest
        fields = ['status', 'resource_type', 'priority', 'campaign', 'requester']
