import logging
from decimal import Decimal, ROUND_HALF_UP

from django.db.models import Count, Sum, Q, DecimalField
from django.db.models.functions import Coalesce
from django.utils import timezone
from django.utils.decorators import method_decorator
from django_ratelimit.decorators import ratelimit
from rest_framework import status, serializers
from rest_framework.decorators import action
from rest_framework.exceptions import MethodNotAllowed
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from api.permissions import IsAdministrator
from api.scoping import Operation
from api.viewsets import ScopedViewSet
from .filters import MonthlyIncentiveFilter
from .models import MonthlyIncentive
from .serializers import (
    MonthlyIncentiveSerializer,
    MonthlyIncentiveUpdateSerializer,
    CalculateIncentivesSerializer,
)
from .services import calculate_monthly_incentives

logger = logging.getLogger(__name__)


class MonthlyIncentiveViewSet(ScopedViewSet):
    """
    Monthly incentives.

    - calculate: admins create pending-review rows for a month
    - list/retrieve: admins see their company, staff only their own
    - update: approve_as_manager on the employee's company
    - destroy: admins in scope, never once paid
    - stats: totals over the visible rows
    """
    queryset = MonthlyIncentive.objects.all()
    resource_kind = 'monthly_incentive'
    filterset_class = MonthlyIncentiveFilter
    ordering_fields = ['year', 'month', 'incentive_amount', 'status', 'created_at']
    ordering = ['-year', '-month']
    select_related_fields = ['user__profile', 'approved_by__profile']
    object_operations = {
        **ScopedViewSet.object_operations,
        'update': Operation.APPROVE_AS_MANAGER,
        'partial_update': Operation.APPROVE_AS_MANAGER,
    }

    def get_serializer_class(self):
        if self.action in ('update', 'partial_update'):
            return MonthlyIncentiveUpdateSerializer
        if self.action == 'calculate':
            return CalculateIncentivesSerializer
        return MonthlyIncentiveSerializer

    def create(self, request, *args, **kwargs):
        # Rows come from the calculate action only
        raise MethodNotAllowed(request.method)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        extra = {}
        new_status = serializer.validated_data.get('status')
        if new_status in MonthlyIncentive.DECISION_STATUSES:
            extra = {'approved_by': request.user, 'approved_at': timezone.now()}
        serializer.save(**extra)

        if new_status:
            logger.info(f"Incentive {instance.pk} set to '{new_status}' by user {request.user.pk}")
        return Response(MonthlyIncentiveSerializer(instance).data)

    def perform_destroy(self, instance):
        if instance.status == MonthlyIncentive.STATUS_PAID:
            raise serializers.ValidationError({'detail': 'Paid incentives cannot be deleted.'})
        instance.delete()

    @action(detail=False, methods=['post'], permission_classes=[IsAuthenticated, IsAdministrator])
    def calculate(self, request):
        """Calculate incentives for a month; existing rows are skipped."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        results = calculate_monthly_incentives(
            data['year'],
            data['month'],
            caller=self.caller,
            user_ids=data.get('user_ids'),
            created_by=request.user,
        )
        return Response({'results': results}, status=status.HTTP_200_OK)

    @method_decorator(ratelimit(key='user', rate='60/m', method='GET'))
    @action(detail=False, methods=['get'])
    def stats(self, request):
        """
        Totals over the visible incentives, optionally for ?year=&month=.

        Amounts count approved and paid rows, rounded to whole units.
        """
        queryset = self.filter_queryset(self.get_queryset())
        decided = Q(status__in=[MonthlyIncentive.STATUS_APPROVED, MonthlyIncentive.STATUS_PAID])
        zero = Decimal('0')

        totals = queryset.aggregate(
            total_employees=Count('user', distinct=True),
            pending_incentives=Count('id', filter=Q(status=MonthlyIncentive.STATUS_PENDING_REVIEW)),
            approved_incentives=Count('id', filter=decided),
            total_incentive_amount=Coalesce(
                Sum('incentive_amount', filter=decided), zero, output_field=DecimalField()
            ),
            total_adjustment_amount=Coalesce(
                Sum('adjustment_amount', filter=decided), zero, output_field=DecimalField()
            ),
        )
        incentive = totals['total_incentive_amount']
        adjustment = totals['total_adjustment_amount']
        totals['total_incentive_amount'] = int(incentive.quantize(Decimal('1'), rounding=ROUND_HALF_UP))
        totals['total_adjustment_amount'] = int(adjustment.quantize(Decimal('1'), rounding=ROUND_HALF_UP))
        totals['total_final_amount'] = int((incentive + adjustment).quantize(Decimal('1'), rounding=ROUND_HALF_UP))
        return Response(totals)
