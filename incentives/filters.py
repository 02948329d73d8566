import django_filters
from .models import MonthlyIncentive


class MonthlyIncentiveFilter(django_filters.FilterSet):
    status = django_filters.MultipleChoiceFilter(choices=MonthlyIncentive.STATUS_CHOICES)

    class Meta:
        model = MonthlyIncentive
        fields = ['year', 'month', 'status', 'user']
