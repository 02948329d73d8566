"""
Base ViewSet classes with automatic scope filtering.

Provides clean separation of concerns:
- Queryset filtering: "what rows exist" (resolve_scope)
- Permission classes: "who may act" (can_perform)

Defense in depth:
- get_queryset() filters visible data for list endpoints
- get_object() looks rows up unscoped and lets can_perform() decide, so a row
  that exists but is out of scope answers 403, not 404
- perform_create() checks the row about to be written before saving it
"""
from django.shortcuts import get_object_or_404
from rest_framework import viewsets
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated

from .identity import get_caller
from .permissions import ScopedResourcePermission
from .scoping import Operation, can_perform, resolve_scope
from .utils import apply_scope, resource_ref_for


class ScopedViewSet(viewsets.ModelViewSet):
    """
    Base ViewSet whose visibility and authorization come from the scope resolver.

    Configuration attributes (override in subclass):
    - resource_kind: registered policy name ('campaign', 'sale', ...)
    - object_operations: action name -> Operation for detail actions
    - select_related_fields: List of fields for select_related optimization
    - prefetch_related_fields: List of fields for prefetch_related optimization

    Example usage:
        class CampaignViewSet(ScopedViewSet):
            queryset = Campaign.objects.all()
            resource_kind = 'campaign'
            select_related_fields = ['manager__profile', 'client__profile']
    """

    permission_classes = [IsAuthenticated, ScopedResourcePermission]
    resource_kind = None
    object_operations = {
        'retrieve': Operation.VIEW,
        'update': Operation.UPDATE,
        'partial_update': Operation.UPDATE,
        'destroy': Operation.DELETE,
    }
    select_related_fields = []
    prefetch_related_fields = []

    @property
    def caller(self):
        return get_caller(self.request)

    def get_operation(self):
        return self.object_operations.get(self.action, Operation.VIEW)

    def get_base_queryset(self):
        """Unscoped queryset with query optimizations applied."""
        queryset = super().get_queryset()
        if self.select_related_fields:
            queryset = queryset.select_related(*self.select_related_fields)
        if self.prefetch_related_fields:
            queryset = queryset.prefetch_related(*self.prefetch_related_fields)
        return queryset

    def get_scope(self):
        return resolve_scope(self.caller, self.resource_kind)

    def get_queryset(self):
        """
        Rows visible to the caller.

        Unknown roles and unresolved callers get an empty queryset, so list
        endpoints answer 200 with no results.
        """
        return apply_scope(self.get_base_queryset(), self.get_scope(), self.resource_kind)

    def get_object(self):
        lookup_url_kwarg = self.lookup_url_kwarg or self.lookup_field
        obj = get_object_or_404(
            self.get_base_queryset(),
            **{self.lookup_field: self.kwargs[lookup_url_kwarg]}
        )
        self.check_object_permissions(self.request, obj)
        return obj

    def ensure_allowed(self, operation, instance, kind=None):
        """Raise 403 unless the caller may perform operation on instance."""
        ref = resource_ref_for(instance, kind or self.resource_kind)
        if not can_perform(self.caller, operation, ref):
            raise PermissionDenied()

    def get_create_kwargs(self, serializer):
        """Server-side values merged into the new row (owner, company, ...)."""
        return {}

    def build_unsaved(self, serializer, **extra):
        """Unsaved model instance carrying validated data plus extra values."""
        model = self.get_base_queryset().model
        names = {f.name for f in model._meta.concrete_fields} | {f.attname for f in model._meta.concrete_fields}
        data = {**serializer.validated_data, **extra}
        return model(**{key: value for key, value in data.items() if key in names})

    def perform_create(self, serializer):
        extra = self.get_create_kwargs(serializer)
        self.ensure_allowed(Operation.CREATE, self.build_unsaved(serializer, **extra))
        serializer.save(**extra)
