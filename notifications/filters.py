import django_filters
from .models import Notification


class NotificationFilter(django_filters.FilterSet):
    """
    Inbox filters:
    - unread_only: true to hide read notifications
    - notification_type / priority: exact match
    """

    unread_only = django_filters.BooleanFilter(method='filter_unread_only')

    class Meta:
        model = Notification
        fields = ['unread_only', 'notification_type', 'priority']

    def filter_unread_only(self, queryset, name, value):
        if value:
            return queryset.filter(is_read=False)
        return queryset
