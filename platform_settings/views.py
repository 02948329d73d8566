import logging

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from api.permissions import IsSuperAdmin
from api.viewsets import ScopedViewSet
from .models import SystemSetting
from .serializers import SystemSettingSerializer, SystemSettingUpdateSerializer

logger = logging.getLogger(__name__)


class SystemSettingViewSet(ScopedViewSet):
    """
    Platform settings, addressed by setting_key.

    Super admins manage every setting; agency admins see and edit the
    'agency_admin' and 'staff' level ones. Nobody else sees settings,
    except the incentive visibility flags which every user may read.
    """
    queryset = SystemSetting.objects.all()
    resource_kind = 'system_setting'
    lookup_field = 'setting_key'
    lookup_value_regex = '[^/]+'
    filterset_fields = ['category', 'access_level', 'is_active', 'setting_type']
    search_fields = ['setting_key', 'description']
    ordering_fields = ['category', 'setting_key', 'updated_at']
    ordering = ['category', 'setting_key']
    pagination_class = None
    select_related_fields = ['last_modified_by']

    def get_serializer_class(self):
        if self.action in ('update', 'partial_update'):
            return SystemSettingUpdateSerializer
        return SystemSettingSerializer

    def get_create_kwargs(self, serializer):
        return {'last_modified_by': self.request.user}

    def perform_create(self, serializer):
        super().perform_create(serializer)
        logger.info(f"Setting '{serializer.instance.setting_key}' created by user {self.request.user.pk}")

    def perform_update(self, serializer):
        setting = serializer.save(last_modified_by=self.request.user)
        logger.info(f"Setting '{setting.setting_key}' set to '{setting.setting_value}' by user {self.request.user.pk}")

    @action(detail=False, methods=['post'], permission_classes=[IsAuthenticated, IsSuperAdmin])
    def initialize(self, request):
        """Create any missing default settings."""
        created = SystemSetting.seed_defaults()
        logger.info(f"Default settings initialized by user {request.user.pk}: {created} created")
        return Response(
            {'created': created, 'total': len(SystemSetting.DEFAULTS)},
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
        )

    @action(
        detail=False,
        methods=['get'],
        url_path='incentive-visibility',
        permission_classes=[IsAuthenticated]
    )
    def incentive_visibility(self, request):
        """Whether incentive amounts are shown to staff and to agency admins."""
        return Response({
            'show_incentive_to_staff': SystemSetting.get_bool('incentive_visibility_staff'),
            'show_incentive_to_agency_admin': SystemSetting.get_bool('incentive_visibility_agency_admin'),
        })
