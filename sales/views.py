import logging
from decimal import Decimal, ROUND_HALF_UP

from django.utils import timezone
from django.utils.decorators import method_decorator
from django_ratelimit.decorators import ratelimit
from rest_framework import status, serializers
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response

from api.scoping import Operation, Role
from api.viewsets import ScopedViewSet
from purchasing.models import PurchaseRequest
from purchasing.serializers import PurchaseRequestSerializer
from .filters import SaleFilter
from .models import Sale
from .serializers import SaleSerializer, SaleWriteSerializer

logger = logging.getLogger(__name__)


def _whole(value):
    return int(value.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


class SaleViewSet(ScopedViewSet):
    """
    Sales records.

    - list/retrieve: the salesperson's company for admins and staff
    - create: agency admins and staff record their own sales
    - update: staff only their own sales while 'registered'; admins in scope
      may also set status and review_comment
    - destroy: admins in scope
    """
    queryset = Sale.objects.all()
    resource_kind = 'sale'
    filterset_class = SaleFilter
    search_fields = ['sale_number', 'client_name', 'product__name']
    ordering_fields = ['sale_date', 'created_at', 'quantity', 'actual_selling_price']
    ordering = ['-sale_date', '-created_at']
    select_related_fields = ['product', 'sales_person__profile', 'reviewed_by__profile', 'campaign']

    def get_serializer_class(self):
        if self.action in ('create', 'update', 'partial_update'):
            return SaleWriteSerializer
        return SaleSerializer

    def get_create_kwargs(self, serializer):
        return {'sales_person': self.request.user}

    def check_links(self, data):
        """Sold product and linked campaign must be visible to the caller."""
        for field, kind in (('product', 'product'), ('campaign', 'campaign')):
            if data.get(field) is not None:
                self.ensure_allowed(Operation.VIEW, data[field], kind)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.check_links(serializer.validated_data)
        for field in Sale.REVIEW_FIELDS:
            serializer.validated_data.pop(field, None)
        self.perform_create(serializer)
        sale = serializer.instance
        logger.info(f"Sale {sale.sale_number} recorded by user {request.user.pk}")
        return Response(SaleSerializer(sale).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        self.check_links(data)

        role = Role.parse(self.caller.role)
        reviewing = any(field in data for field in Sale.REVIEW_FIELDS)
        if role is Role.STAFF:
            if instance.status != Sale.STATUS_REGISTERED:
                raise PermissionDenied("Only registered sales can be edited.")
            if reviewing:
                raise PermissionDenied("Only administrators can review sales.")

        extra = {}
        if 'status' in data and data['status'] != instance.status:
            extra = instance.review_stamps(data['status'], request.user)
            logger.info(f"Sale {instance.sale_number}: '{instance.status}' -> '{data['status']}' by user {request.user.pk}")

        serializer.save(**extra)
        return Response(SaleSerializer(instance).data)

    @method_decorator(ratelimit(key='user', rate='60/m', method='GET'))
    @action(detail=False, methods=['get'])
    def stats(self, request):
        """
        Summary of the visible sales.

        Revenue, margin and incentives count approved sales only and are
        rounded to whole units.
        """
        queryset = self.get_queryset()
        approved = list(
            queryset.filter(status=Sale.STATUS_APPROVED).select_related('sales_person__profile')
        )

        total_revenue = sum((sale.total_sales for sale in approved), Decimal('0'))
        total_margin = sum((sale.total_margin for sale in approved), Decimal('0'))
        total_incentives = sum((sale.incentive_amount for sale in approved), Decimal('0'))

        return Response({
            'total_sales': queryset.count(),
            'pending_sales': queryset.filter(status=Sale.STATUS_REGISTERED).count(),
            'approved_sales': len(approved),
            'total_revenue': _whole(total_revenue),
            'total_margin': _whole(total_margin),
            'total_incentives': _whole(total_incentives),
        })

    @action(detail=True, methods=['post'], url_path='create-purchase-request')
    def create_purchase_request(self, request, pk=None):
        """Raise a purchase request for the amount of this sale (once per sale)."""
        sale = self.get_object()

        if sale.purchase_requests.exists():
            raise serializers.ValidationError({'detail': 'A purchase request was already created for this sale.'})

        purchase_request = PurchaseRequest(
            title=f"{sale.product.name} - {sale.client_name}",
            description=request.data.get('description') or (
                f"{sale.product.name} - {sale.client_name} (sale {sale.sale_number})"
            ),
            amount=sale.total_sales,
            resource_type='광고비',
            requester=request.user,
            campaign=sale.campaign,
            sale=sale,
            requested_date=timezone.now(),
        )
        self.ensure_allowed(Operation.CREATE, purchase_request, 'purchase_request')
        purchase_request.save()

        logger.info(f"Purchase request {purchase_request.pk} created from sale {sale.sale_number}")
        return Response(
            PurchaseRequestSerializer(purchase_request).data,
            status=status.HTTP_201_CREATED
        )
