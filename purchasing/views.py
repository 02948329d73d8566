import logging
from decimal import Decimal

from django.db.models import Count, Sum, Q, DecimalField
from django.db.models.functions import Coalesce
from django.utils import timezone
from django.utils.decorators import method_decorator
from django_ratelimit.decorators import ratelimit
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response

from api.events import publish
from api.scoping import Operation, Role
from api.viewsets import ScopedViewSet
from .events import purchase_request_reviewed
from .filters import PurchaseRequestFilter
from .models import PurchaseRequest
from .serializers import PurchaseRequestSerializer, PurchaseRequestWriteSerializer

logger = logging.getLogger(__name__)


class PurchaseRequestViewSet(ScopedViewSet):
    """
    Purchase requests.

    - list/retrieve: requester's company for admins and staff
    - create: agency admins and staff; the requester is always the caller
    - update: content fields by the requester while pending (staff) or any
      admin in scope; review fields require approve_as_manager
    - destroy: admins in scope
    - stats: counts and approved amounts over the visible requests
    """
    queryset = PurchaseRequest.objects.all()
    resource_kind = 'purchase_request'
    filterset_class = PurchaseRequestFilter
    search_fields = ['title', 'description']
    ordering_fields = ['created_at', 'amount', 'requested_date', 'due_date', 'priority']
    ordering = ['-created_at']
    select_related_fields = ['requester__profile', 'approver__profile', 'campaign', 'post']

    def get_serializer_class(self):
        if self.action in ('create', 'update', 'partial_update'):
            return PurchaseRequestWriteSerializer
        return PurchaseRequestSerializer

    def get_create_kwargs(self, serializer):
        return {'requester': self.request.user}

    def check_links(self, data):
        """Linked campaign and task must be visible to the caller."""
        for field, kind in (('campaign', 'campaign'), ('post', 'post')):
            if data.get(field) is not None:
                self.ensure_allowed(Operation.VIEW, data[field], kind)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.check_links(serializer.validated_data)
        # Review fields are not settable on creation
        for field in PurchaseRequest.REVIEW_FIELDS:
            serializer.validated_data.pop(field, None)
        self.perform_create(serializer)
        logger.info(f"Purchase request {serializer.instance.pk} created by user {request.user.pk}")
        return Response(
            PurchaseRequestSerializer(serializer.instance).data,
            status=status.HTTP_201_CREATED
        )

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        self.check_links(data)

        if Role.parse(self.caller.role) is Role.STAFF and instance.status != PurchaseRequest.STATUS_PENDING:
            raise PermissionDenied("Only pending requests can be edited.")

        extra = {}
        if any(field in data for field in PurchaseRequest.REVIEW_FIELDS):
            self.ensure_allowed(Operation.APPROVE_AS_MANAGER, instance)
            if 'status' in data and data['status'] != instance.status:
                extra = instance.review_stamps(data['status'], request.user)

        old_status = instance.status
        serializer.save(**extra)

        if instance.status != old_status:
            logger.info(
                f"Purchase request {instance.pk}: '{old_status}' -> '{instance.status}' "
                f"by user {request.user.pk}"
            )
            publish(
                purchase_request_reviewed, PurchaseRequest,
                request=instance, old_status=old_status, new_status=instance.status, actor=request.user,
            )
        return Response(PurchaseRequestSerializer(instance).data)

    @method_decorator(ratelimit(key='user', rate='60/m', method='GET'))
    @action(detail=False, methods=['get'])
    def stats(self, request):
        """
        Summary of the visible purchase requests.

        Returns:
        - total_requests, pending_requests, approved_requests
        - total_amount: approved amount overall
        - this_month_amount: approved amount since the first of the month
        """
        queryset = self.get_queryset()
        month_start = timezone.now().replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        approved = Q(status=PurchaseRequest.STATUS_APPROVED)
        zero = Decimal('0')

        totals = queryset.aggregate(
            total_requests=Count('id'),
            pending_requests=Count('id', filter=Q(status=PurchaseRequest.STATUS_PENDING)),
            approved_requests=Count('id', filter=approved),
            total_amount=Coalesce(
                Sum('amount', filter=approved), zero, output_field=DecimalField()
            ),
            this_month_amount=Coalesce(
                Sum('amount', filter=approved & Q(approved_date__gte=month_start)),
                zero,
                output_field=DecimalField()
            ),
        )
        totals['total_amount'] = str(totals['total_amount'])
        totals['this_month_amount'] = str(totals['this_month_amount'])
        return Response(totals)
