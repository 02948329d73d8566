"""
Permission classes for API endpoints.

Role gates:
- IsAdministrator, IsSuperAdmin

Object-level checks backed by the scope resolver:
- BaseResourcePermission, ScopedResourcePermission
"""
from rest_framework import permissions

from .identity import get_caller
from .scoping import Role, Operation, can_perform
from .utils import resource_ref_for


class IsAdministrator(permissions.BasePermission):
    """
    Super admins and agency admins.
    Role comes from the persisted profile, never from the request.
    """

    def has_permission(self, request, view):
        caller = get_caller(request)
        return caller is not None and Role.parse(caller.role) in (Role.SUPER_ADMIN, Role.AGENCY_ADMIN)


class IsSuperAdmin(permissions.BasePermission):

    def has_permission(self, request, view):
        caller = get_caller(request)
        return caller is not None and Role.parse(caller.role) is Role.SUPER_ADMIN


class BaseResourcePermission(permissions.BasePermission):
    """
    Base permission class that enforces object-level permission checks.

    Defense in depth:
    - has_permission(): View-level check (is the caller resolved?)
    - has_object_permission(): Object-level check (can the caller act on THIS object?)

    DRF only calls has_object_permission() if the object is fetched via
    get_object(). Always use self.get_object() in detail actions.

    Subclasses MUST implement has_object_permission().
    """

    def has_permission(self, request, view):
        """
        View-level permission check.

        The user must be authenticated and resolve to a Caller. An unknown
        role still passes here; the resolver gives it an empty scope.
        """
        if not request.user or not request.user.is_authenticated:
            return False
        return get_caller(request) is not None

    def has_object_permission(self, request, view, obj):
        raise NotImplementedError(
            f"{self.__class__.__name__} must implement has_object_permission(). "
            f"This is required for defense-in-depth security."
        )


class ScopedResourcePermission(BaseResourcePermission):
    """
    Object-level check through can_perform().

    The view supplies `resource_kind` and maps its action to an operation via
    get_operation(); detail actions not listed there count as 'view'.

    Usage:
        class SaleViewSet(ScopedViewSet):
            resource_kind = 'sale'
            permission_classes = [IsAuthenticated, ScopedResourcePermission]
    """

    def has_object_permission(self, request, view, obj):
        operation = view.get_operation() if hasattr(view, 'get_operation') else Operation.VIEW
        return can_perform(
            get_caller(request),
            operation,
            resource_ref_for(obj, view.resource_kind),
        )
