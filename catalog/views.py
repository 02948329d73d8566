import logging

from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from api.permissions import IsAdministrator
from api.scoping import Role
from api.viewsets import ScopedViewSet
from .filters import ProductFilter
from .models import Product, WorkType
from .serializers import ProductSerializer, WorkTypeSerializer

logger = logging.getLogger(__name__)


def _ownership_kwargs(caller, user):
    """Super admin rows join the shared catalog; everyone else's stay in their company."""
    company = None if Role.parse(caller.role) is Role.SUPER_ADMIN else caller.company
    return {'company': company, 'created_by': user}


class ProductViewSet(ScopedViewSet):
    """
    Product catalog.

    Agency admins and staff see the shared catalog plus their company's
    products; only admins create or change products. Deleting a product
    deactivates it so existing sales keep their reference.
    """
    queryset = Product.objects.all()
    serializer_class = ProductSerializer
    resource_kind = 'product'
    filterset_class = ProductFilter
    ordering_fields = ['name', 'category', 'selling_price', 'created_at']
    ordering = ['category', 'name']
    select_related_fields = ['created_by']

    def get_create_kwargs(self, serializer):
        return _ownership_kwargs(self.caller, self.request.user)

    def perform_create(self, serializer):
        super().perform_create(serializer)
        logger.info(f"Product {serializer.instance.sku} created by user {self.request.user.pk}")

    def perform_destroy(self, instance):
        # Sales keep their product; deleting retires it from the catalog
        instance.is_active = False
        instance.save(update_fields=['is_active', 'updated_at'])
        logger.info(f"Product {instance.sku} deactivated by user {self.request.user.pk}")

    @action(detail=False, methods=['get'])
    def categories(self, request):
        """Available product categories and units."""
        return Response({
            'categories': [value for value, _ in Product.CATEGORY_CHOICES],
            'units': [value for value, _ in Product.UNIT_CHOICES],
        })


class WorkTypeViewSet(ScopedViewSet):
    """
    Work types for tasks.

    - list: active work types in scope
    - manage: every work type in scope, for administrators
    """
    queryset = WorkType.objects.all()
    serializer_class = WorkTypeSerializer
    resource_kind = 'work_type'
    pagination_class = None

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.action == 'list':
            return queryset.filter(is_active=True)
        return queryset

    def get_create_kwargs(self, serializer):
        return _ownership_kwargs(self.caller, self.request.user)

    @action(detail=False, methods=['get'], permission_classes=[IsAuthenticated, IsAdministrator])
    def manage(self, request):
        serializer = self.get_serializer(self.get_queryset(), many=True)
        return Response(serializer.data)
