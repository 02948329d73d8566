import logging

from django.http import JsonResponse
from django.views.decorators.http import require_http_methods
from django.views.decorators.csrf import ensure_csrf_cookie
from django.middleware.csrf import get_token
from django.contrib.auth import get_user_model
from django.db import connection, DatabaseError
from django.db.models import Q, ProtectedError
from django.utils import timezone
from django_ratelimit.decorators import ratelimit
from rest_framework import status, serializers
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied, NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from campaigns.models import Campaign
from campaigns.serializers import CampaignListSerializer
from .identity import get_caller, resolve_caller
from .models import CompanyLogo, UserProfile
from .permissions import BaseResourcePermission
from .scoping import Role, Operation, ResourceRef, USER, can_perform, resolve_scope
from .serializers import (
    UserSerializer,
    UserWriteSerializer,
    CurrentUserUpdateSerializer,
    CompanyLogoSerializer,
)
from .utils import apply_scope, resource_ref_for
from .viewsets import ScopedViewSet

User = get_user_model()
logger = logging.getLogger(__name__)

# Roles an agency admin may hand out
AGENCY_ASSIGNABLE_ROLES = (UserProfile.ROLE_STAFF, UserProfile.ROLE_CLIENT)

# Profile fields only administrators may change
PRIVILEGED_FIELDS = ('role', 'company', 'incentive_rate', 'is_active')


@ratelimit(key='ip', rate='10/m', method='GET')
@require_http_methods(["GET"])
@ensure_csrf_cookie
def auth_status(request):
    """
    Returns the current authentication status with the persisted role and
    company. Also sets CSRF cookie for the frontend.
    Rate limited to 10 requests per minute per IP.
    """
    caller = resolve_caller(request.user)
    if caller is None:
        return JsonResponse({
            'authenticated': bool(request.user.is_authenticated),
            'user': None,
            'csrf_token': get_token(request)
        })

    return JsonResponse({
        'authenticated': True,
        'user': {
            'id': request.user.id,
            'email': request.user.email,
            'first_name': request.user.first_name,
            'last_name': request.user.last_name,
            'role': caller.role,
            'company': caller.company,
        },
        'csrf_token': get_token(request)
    })


@require_http_methods(["GET"])
def health_check(request):
    """
    Liveness and database check for load balancers; no authentication.
    Returns 503 when the database cannot be queried.
    """
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
    except DatabaseError as e:
        logger.error(f"Health check failed: {e}")
        return JsonResponse({
            'status': 'unhealthy',
            'database': 'unavailable',
            'timestamp': timezone.now().isoformat(),
        }, status=503)

    return JsonResponse({
        'status': 'healthy',
        'database': 'ok',
        'timestamp': timezone.now().isoformat(),
    })


class UserViewSet(ScopedViewSet):
    """
    User management.

    - list/retrieve: scoped by the 'user' policy (company colleagues and self;
      clients see only themselves)
    - create: admins; agency admins only create staff/clients in their company
    - update/destroy: can_perform(), never on super admins for agency admins
    - me: the current user's own record
    """
    queryset = User.objects.all().order_by('first_name', 'last_name', 'email')
    resource_kind = 'user'
    select_related_fields = ['profile']
    search_fields = ['email', 'first_name', 'last_name', 'profile__company']
    filterset_fields = ['is_active', 'profile__role']

    def get_serializer_class(self):
        if self.action in ('create', 'update', 'partial_update'):
            return UserWriteSerializer
        if self.action == 'me' and self.request.method == 'PATCH':
            return CurrentUserUpdateSerializer
        return UserSerializer

    def _caller_role(self):
        return Role.parse(self.caller.role) if self.caller else None

    def _check_role_assignment(self, data):
        role = data.get('role')
        if role and self._caller_role() is Role.AGENCY_ADMIN and role not in AGENCY_ASSIGNABLE_ROLES:
            raise PermissionDenied("Agency admins can only assign the staff or client role.")

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        self._check_role_assignment(data)
        caller = self.caller
        if self._caller_role() is Role.AGENCY_ADMIN:
            # Company forced to the creating admin's own
            data['company'] = caller.company

        ref = ResourceRef(
            kind=USER.kind,
            companies=(data.get('company') or None,),
            owner_role=data.get('role', UserProfile.ROLE_CLIENT),
        )
        if not can_perform(caller, Operation.CREATE, ref):
            raise PermissionDenied()

        user = serializer.save()
        logger.info(f"User {user.pk} created by {caller.id} with role {user.profile.role}")
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        role = self._caller_role()
        if role not in (Role.SUPER_ADMIN, Role.AGENCY_ADMIN):
            if any(field in data for field in PRIVILEGED_FIELDS):
                raise PermissionDenied("Only administrators can change role, company or incentive rate.")
        self._check_role_assignment(data)
        if role is Role.AGENCY_ADMIN and 'company' in data and (data['company'] or None) != self.caller.company:
            raise PermissionDenied("Agency admins cannot move users to another company.")

        user = serializer.save()
        return Response(UserSerializer(user).data)

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        if instance.pk == request.user.pk:
            raise serializers.ValidationError({'detail': 'You cannot delete your own account.'})
        user_id = instance.pk
        try:
            instance.delete()
        except ProtectedError as e:
            referenced = sorted({str(obj._meta.verbose_name_plural) for obj in e.protected_objects})
            raise serializers.ValidationError({
                'detail': f"User is still referenced by {', '.join(referenced)}. Deactivate the account instead."
            })
        logger.info(f"User {user_id} deleted by {request.user.pk}")
        return Response(status=status.HTTP_204_NO_CONTENT)

    def get_object(self):
        # Self-deletion is a validation error, not a permission error
        if self.action == 'destroy' and str(self.kwargs.get('pk')) == str(self.request.user.pk):
            return self.request.user
        return super().get_object()

    @action(detail=False, methods=['get', 'patch'], permission_classes=[IsAuthenticated, BaseResourcePermission])
    def me(self, request):
        """Get or update the current user's own name and contact."""
        if request.method == 'PATCH':
            serializer = self.get_serializer(request.user, data=request.data, partial=True)
            serializer.is_valid(raise_exception=True)
            serializer.save()
        return Response(UserSerializer(User.objects.select_related('profile').get(pk=request.user.pk)).data)

    @action(detail=False, methods=['get'])
    def clients(self, request):
        """Clients visible to the caller."""
        queryset = self.get_queryset().filter(profile__role=UserProfile.ROLE_CLIENT, is_active=True)
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(UserSerializer(page, many=True).data)
        return Response(UserSerializer(queryset, many=True).data)

    @action(detail=True, methods=['get'])
    def campaigns(self, request, pk=None):
        """Campaigns the user manages or is client of, within the caller's campaign scope."""
        user = self.get_object()
        queryset = apply_scope(
            Campaign.objects.select_related('manager', 'client'),
            resolve_scope(self.caller, 'campaign'),
            'campaign',
        ).filter(Q(manager=user) | Q(client=user)).order_by('-created_at')
        return Response(CampaignListSerializer(queryset, many=True).data)


class CompanyLogoView(APIView):
    """
    Logo of the caller's company (a caller without a company gets the default logo).
    GET: any authenticated user
    POST: upload or replace (admins)
    DELETE: remove (admins)
    """
    permission_classes = [IsAuthenticated, BaseResourcePermission]

    def _current(self, caller):
        return CompanyLogo.objects.filter(company=caller.company).first()

    def get(self, request):
        caller = get_caller(request)
        logo = self._current(caller)
        if logo is None:
            raise NotFound("Logo not found.")
        return Response(CompanyLogoSerializer(logo).data)

    def post(self, request):
        caller = get_caller(request)
        serializer = CompanyLogoSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        logo = self._current(caller)
        if logo is not None:
            allowed = can_perform(caller, Operation.UPDATE, resource_ref_for(logo, 'company_logo'))
        else:
            candidate = CompanyLogo(company=caller.company, uploaded_by=request.user)
            allowed = can_perform(caller, Operation.CREATE, resource_ref_for(candidate, 'company_logo'))
        if not allowed:
            raise PermissionDenied("You do not have permission to upload a logo.")

        logo, created = CompanyLogo.objects.update_or_create(
            company=caller.company,
            defaults={
                'logo_url': serializer.validated_data['logo_url'],
                'uploaded_by': request.user,
            }
        )
        logger.info(f"Logo for company {caller.company or 'default'} uploaded by {caller.id}")
        return Response(
            CompanyLogoSerializer(logo).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
        )

    def delete(self, request):
        caller = get_caller(request)
        logo = self._current(caller)
        if logo is None:
            raise NotFound("Logo not found.")
        if not can_perform(caller, Operation.DELETE, resource_ref_for(logo, 'company_logo')):
            raise PermissionDenied("You do not have permission to delete the logo.")
        logo.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
