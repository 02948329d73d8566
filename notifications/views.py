import logging

from django.utils import timezone
from django.utils.decorators import method_decorator
from django_ratelimit.decorators import ratelimit
from rest_framework import viewsets, mixins, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .filters import NotificationFilter
from .models import Notification
from .serializers import NotificationSerializer, MarkReadSerializer

logger = logging.getLogger(__name__)


class NotificationViewSet(mixins.ListModelMixin,
                          mixins.RetrieveModelMixin,
                          mixins.DestroyModelMixin,
                          viewsets.GenericViewSet):
    """
    Inbox of the requesting user. Other users' notifications are never
    visible, whatever the caller's role.

    - list: paginated, newest first, with the unread total alongside
    - mark_read: one notification read (or back to unread)
    - mark_all_read / unread_count
    """
    permission_classes = [IsAuthenticated]
    serializer_class = NotificationSerializer
    filterset_class = NotificationFilter
    ordering_fields = ['created_at', 'priority']
    ordering = ['-created_at']

    def get_queryset(self):
        return Notification.objects.filter(user=self.request.user).select_related('created_by')

    def unread(self):
        return Notification.objects.filter(user=self.request.user, is_read=False)

    def list(self, request, *args, **kwargs):
        response = super().list(request, *args, **kwargs)
        if isinstance(response.data, dict):
            response.data['unread_count'] = self.unread().count()
        return response

    @action(detail=True, methods=['post', 'patch'])
    def mark_read(self, request, pk=None):
        notification = self.get_object()
        serializer = MarkReadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        if serializer.validated_data['is_read']:
            notification.mark_as_read()
        else:
            notification.mark_as_unread()
        return Response(NotificationSerializer(notification).data)

    @action(detail=False, methods=['post', 'patch'])
    def mark_all_read(self, request):
        count = self.unread().update(is_read=True, read_at=timezone.now())
        logger.debug(f"User {request.user.pk} marked {count} notifications read")
        return Response({'count': count}, status=status.HTTP_200_OK)

    @method_decorator(ratelimit(key='user', rate='100/m', method='GET'))
    @action(detail=False, methods=['get'])
    def unread_count(self, request):
        return Response({'count': self.unread().count()})
