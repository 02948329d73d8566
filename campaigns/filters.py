import django_filters
from .models import Campaign, Post


class CampaignFilter(django_filters.FilterSet):
    """
    Filter for campaigns with support for:
    - Execution status
    - Manager / client user
    - Creation date range
    """

    execution_status = django_filters.MultipleChoiceFilter(
        choices=Campaign.EXECUTION_STATUS_CHOICES,
        help_text="Filter by execution status (can specify multiple)"
    )

    manager = django_filters.NumberFilter(field_name='manager_id')
    client = django_filters.NumberFilter(field_name='client_id')

    created_after = django_filters.DateTimeFilter(
        field_name='created_at',
        lookup_expr='gte',
        help_text="Filter campaigns created after this date"
    )

    created_before = django_filters.DateTimeFilter(
        field_name='created_at',
        lookup_expr='lte',
        help_text="Filter campaigns created before this date"
    )

    class Meta:
        model = Campaign
        fields = ['execution_status', 'manager', 'client', 'invoice_issued', 'payment_completed']


class PostFilter(django_filters.FilterSet):
    completed = django_filters.BooleanFilter(method='filter_completed')

    class Meta:
        model = Post
        fields = ['campaign', 'work_type', 'topic_status', 'outline_status', 'product']

    def filter_completed(self, queryset, name, value):
        if value:
            return queryset.exclude(published_url='')
        return queryset.filter(published_url='')
