"""
Access scope resolution.

Every listing and every single-object operation in the API is decided here.
Two questions are answered from the same rule table:

    resolve_scope(caller, policy) -> ScopeFilter
        "what rows exist" for a caller, as a tagged filter that the data
        layer turns into a queryset predicate (see api.utils.scope_to_q).

    can_perform(caller, operation, instance) -> bool
        "may this caller act on this row", evaluated against a ResourceRef
        snapshot of the row's owner, subject and company attributes.

A row is viewable through can_perform exactly when it is selected by the
filter returned from resolve_scope. Both functions are pure: they never touch
the database and they are re-evaluated on every request.

Scope kinds:

    ALL: No restriction (super admins)

    COMPANY: Rows whose resolved company equals the caller's company
        - Company is resolved through the owning users' profiles
        - Shared catalog rows (company null) are included for policies that
          declare a shared field
        - Clients get it on client catalog policies (work types); a client
          without a company sees the shared rows only

    OWN: Rows whose owner (or, for clients, subject) is the caller
        - Agency admins and staff without a company
        - Clients, on their own campaigns and tasks

    OWN_OR_COMPANY: COMPANY or OWN
        - Agency admins and staff with a company; the owner fallback covers
          rows managed by the caller whose client predates company assignment

    LEVEL: Rows whose access level is in a fixed set (system settings)

    NONE: Nothing (unknown role, missing caller, resource kind closed to role)
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, FrozenSet

from django.core.exceptions import ImproperlyConfigured


class ScopeConfigurationError(ImproperlyConfigured):
    """Raised when scope resolution is attempted without a resolved caller id."""


class Role(str, Enum):
    SUPER_ADMIN = 'super_admin'
    AGENCY_ADMIN = 'agency_admin'
    STAFF = 'staff'
    CLIENT = 'client'

    @classmethod
    def parse(cls, value) -> Optional['Role']:
        """Return the matching role, or None for anything outside the closed set."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


class Operation(str, Enum):
    VIEW = 'view'
    CREATE = 'create'
    UPDATE = 'update'
    DELETE = 'delete'
    APPROVE_AS_MANAGER = 'approve_as_manager'
    APPROVE_AS_CLIENT = 'approve_as_client'


class ScopeKind(Enum):
    ALL = 'all'
    COMPANY = 'company'
    OWN = 'own'
    OWN_OR_COMPANY = 'own_or_company'
    LEVEL = 'level'
    NONE = 'none'


class StaffScope(Enum):
    """How far a staff member reaches on a resource kind."""
    COMPANY = 'company'
    OWN = 'own'
    NONE = 'none'


@dataclass(frozen=True)
class Caller:
    """
    Authenticated identity for one request.

    Built by api.identity.resolve_caller from the persisted profile; never
    from request input.
    """
    id: Optional[int]
    role: Optional[str]
    company: Optional[str] = None


@dataclass(frozen=True)
class ScopeFilter:
    kind: ScopeKind
    company: Optional[str] = None
    owner_field: Optional[str] = None
    owner_value: Optional[int] = None
    levels: Tuple[str, ...] = ()

    @classmethod
    def all(cls):
        return cls(ScopeKind.ALL)

    @classmethod
    def none(cls):
        return cls(ScopeKind.NONE)

    @classmethod
    def company_only(cls, company):
        return cls(ScopeKind.COMPANY, company=company)

    @classmethod
    def own(cls, owner_field, owner_value):
        return cls(ScopeKind.OWN, owner_field=owner_field, owner_value=owner_value)

    @classmethod
    def own_or_company(cls, company, owner_field, owner_value):
        return cls(
            ScopeKind.OWN_OR_COMPANY,
            company=company,
            owner_field=owner_field,
            owner_value=owner_value,
        )

    @classmethod
    def level(cls, levels):
        return cls(ScopeKind.LEVEL, levels=tuple(levels))

    @property
    def is_empty(self):
        return self.kind is ScopeKind.NONE


@dataclass(frozen=True)
class ResourcePolicy:
    """
    Describes how one resource kind relates to users and companies.

    Field values are ORM lookup paths ('campaign__manager_id'); the same
    paths build the queryset predicate and the ResourceRef snapshot.
    """
    kind: str
    owner_field: Optional[str] = None
    subject_field: Optional[str] = None
    company_fields: Tuple[str, ...] = ()
    owner_role_field: Optional[str] = None
    # Rows whose value at this path is null are a shared catalog
    shared_field: Optional[str] = None
    level_field: Optional[str] = None
    agency_admin_levels: Tuple[str, ...] = ()
    staff_view: StaffScope = StaffScope.COMPANY
    staff_mutation: StaffScope = StaffScope.COMPANY
    creator_roles: FrozenSet[Role] = frozenset({Role.AGENCY_ADMIN, Role.STAFF})
    # Clients read the shared rows and their own company's rows
    client_catalog: bool = False


@dataclass(frozen=True)
class ResourceRef:
    """
    Authorization-relevant snapshot of one row (saved or about to be created).

    companies holds one entry per policy company path, None where the path
    does not resolve.
    """
    kind: str
    owner_id: Optional[int] = None
    subject_id: Optional[int] = None
    companies: Tuple[Optional[str], ...] = ()
    owner_role: Optional[str] = None
    shared: bool = False
    access_level: Optional[str] = None


CAMPAIGN = ResourcePolicy(
    kind='campaign',
    owner_field='manager_id',
    subject_field='client_id',
    company_fields=('manager__profile__company', 'client__profile__company'),
    owner_role_field='manager__profile__role',
)

POST = ResourcePolicy(
    kind='post',
    owner_field='campaign__manager_id',
    subject_field='campaign__client_id',
    company_fields=('campaign__manager__profile__company', 'campaign__client__profile__company'),
    owner_role_field='campaign__manager__profile__role',
)

PURCHASE_REQUEST = ResourcePolicy(
    kind='purchase_request',
    owner_field='requester_id',
    company_fields=('requester__profile__company',),
    owner_role_field='requester__profile__role',
    staff_mutation=StaffScope.OWN,
)

SALE = ResourcePolicy(
    kind='sale',
    owner_field='sales_person_id',
    company_fields=('sales_person__profile__company',),
    owner_role_field='sales_person__profile__role',
    staff_mutation=StaffScope.OWN,
)

PRODUCT = ResourcePolicy(
    kind='product',
    owner_field='created_by_id',
    company_fields=('company',),
    owner_role_field='created_by__profile__role',
    shared_field='company',
    staff_mutation=StaffScope.NONE,
    creator_roles=frozenset({Role.AGENCY_ADMIN}),
)

WORK_TYPE = ResourcePolicy(
    kind='work_type',
    owner_field='created_by_id',
    company_fields=('company',),
    owner_role_field='created_by__profile__role',
    shared_field='company',
    staff_mutation=StaffScope.NONE,
    creator_roles=frozenset({Role.AGENCY_ADMIN}),
    client_catalog=True,
)

COMPANY_LOGO = ResourcePolicy(
    kind='company_logo',
    owner_field='uploaded_by_id',
    company_fields=('company',),
    owner_role_field='uploaded_by__profile__role',
    shared_field='company',
    staff_mutation=StaffScope.NONE,
    creator_roles=frozenset({Role.AGENCY_ADMIN}),
)

MONTHLY_INCENTIVE = ResourcePolicy(
    kind='monthly_incentive',
    owner_field='user_id',
    company_fields=('user__profile__company',),
    owner_role_field='user__profile__role',
    staff_view=StaffScope.OWN,
    staff_mutation=StaffScope.NONE,
    creator_roles=frozenset({Role.AGENCY_ADMIN}),
)

USER = ResourcePolicy(
    kind='user',
    owner_field='id',
    subject_field='id',
    company_fields=('profile__company',),
    owner_role_field='profile__role',
    staff_mutation=StaffScope.OWN,
    creator_roles=frozenset({Role.AGENCY_ADMIN}),
)

SYSTEM_SETTING = ResourcePolicy(
    kind='system_setting',
    level_field='access_level',
    agency_admin_levels=('agency_admin', 'staff'),
    staff_view=StaffScope.NONE,
    staff_mutation=StaffScope.NONE,
    creator_roles=frozenset(),
)

POLICIES = {
    policy.kind: policy
    for policy in (
        CAMPAIGN, POST, PURCHASE_REQUEST, SALE, PRODUCT, WORK_TYPE,
        COMPANY_LOGO, MONTHLY_INCENTIVE, USER, SYSTEM_SETTING,
    )
}


def get_policy(kind) -> ResourcePolicy:
    if isinstance(kind, ResourcePolicy):
        return kind
    try:
        return POLICIES[kind]
    except KeyError:
        raise ScopeConfigurationError(f"No access policy registered for resource kind '{kind}'")


def _role_of(caller) -> Optional[Role]:
    if caller is None:
        return None
    if caller.id is None:
        raise ScopeConfigurationError(
            "Scope resolution requires a resolved caller id. "
            "Resolve the caller with api.identity.resolve_caller() first."
        )
    return Role.parse(caller.role)


def _company_of(caller) -> Optional[str]:
    # Empty string is not a company
    return caller.company or None


def _owner_scope(policy, caller) -> ScopeFilter:
    if policy.owner_field:
        return ScopeFilter.own(policy.owner_field, caller.id)
    return ScopeFilter.none()


def resolve_scope(caller, kind) -> ScopeFilter:
    """
    Compute the list filter for a caller on a resource kind.

    Args:
        caller: Caller or None (unresolved callers get NONE)
        kind: resource kind name or ResourcePolicy

    Returns:
        ScopeFilter

    Example:
        >>> resolve_scope(Caller(5, 'agency_admin', 'Acme'), 'campaign')
        ScopeFilter(kind=<ScopeKind.OWN_OR_COMPANY: 'own_or_company'>, company='Acme',
                    owner_field='manager_id', owner_value=5, levels=())
    """
    policy = get_policy(kind)
    role = _role_of(caller)

    if role is None:
        return ScopeFilter.none()

    if role is Role.SUPER_ADMIN:
        return ScopeFilter.all()

    if role is Role.CLIENT:
        if policy.subject_field:
            return ScopeFilter.own(policy.subject_field, caller.id)
        if policy.client_catalog and policy.shared_field:
            return ScopeFilter.company_only(_company_of(caller))
        return ScopeFilter.none()

    # Agency admins and staff
    if policy.level_field:
        if role is Role.AGENCY_ADMIN and policy.agency_admin_levels:
            return ScopeFilter.level(policy.agency_admin_levels)
        return ScopeFilter.none()

    if role is Role.STAFF and policy.staff_view is StaffScope.NONE:
        return ScopeFilter.none()

    company = _company_of(caller)
    own_only = role is Role.STAFF and policy.staff_view is StaffScope.OWN
    if company is None or own_only or not policy.company_fields:
        return _owner_scope(policy, caller)

    if policy.owner_field:
        return ScopeFilter.own_or_company(company, policy.owner_field, caller.id)
    return ScopeFilter.company_only(company)


def _mutation_scope(caller, role, policy) -> ScopeFilter:
    """Rows an agency admin or staff member may update or delete."""
    if role is Role.STAFF:
        if policy.staff_mutation is StaffScope.NONE:
            return ScopeFilter.none()
        if policy.staff_mutation is StaffScope.OWN:
            return _owner_scope(policy, caller)
    return resolve_scope(caller, policy)


def _owner_matches(scope, policy, instance) -> bool:
    if scope.owner_field is None:
        return False
    if scope.owner_field == policy.owner_field:
        value = instance.owner_id
    elif scope.owner_field == policy.subject_field:
        value = instance.subject_id
    else:
        return False
    return value is not None and value == scope.owner_value


def _company_matches(scope, policy, instance) -> bool:
    if policy.shared_field and instance.shared:
        return True
    if scope.company is None:
        return False
    return any(company == scope.company for company in instance.companies if company is not None)


def in_scope(scope, instance, kind=None) -> bool:
    """Evaluate a ScopeFilter against one ResourceRef."""
    policy = get_policy(kind or instance.kind)

    if scope.kind is ScopeKind.ALL:
        return True
    if scope.kind is ScopeKind.NONE:
        return False
    if scope.kind is ScopeKind.OWN:
        return _owner_matches(scope, policy, instance)
    if scope.kind is ScopeKind.COMPANY:
        return _company_matches(scope, policy, instance)
    if scope.kind is ScopeKind.OWN_OR_COMPANY:
        return _owner_matches(scope, policy, instance) or _company_matches(scope, policy, instance)
    if scope.kind is ScopeKind.LEVEL:
        return instance.access_level in scope.levels
    return False


def _may_create(caller, role, policy, instance) -> bool:
    if role not in policy.creator_roles:
        return False

    company = _company_of(caller)
    companies = [c for c in instance.companies if c is not None]

    if company is None:
        # Shared catalogs belong to super admins; otherwise own rows with no tenant
        if policy.shared_field:
            return False
        return instance.owner_id in (None, caller.id) and not companies

    if not in_scope(resolve_scope(caller, policy), instance, policy):
        return False
    return all(c == company for c in companies)


def can_perform(caller, operation, instance) -> bool:
    """
    Decide whether a caller may perform an operation on one row.

    Args:
        caller: Caller or None
        operation: Operation or its string value
        instance: ResourceRef snapshot of the row

    Returns:
        bool: never raises for a recognised or unknown role
    """
    role = _role_of(caller)
    if role is None:
        return False

    policy = get_policy(instance.kind)

    if role is Role.SUPER_ADMIN:
        return True

    operation = Operation(operation)

    if operation is Operation.VIEW:
        return in_scope(resolve_scope(caller, policy), instance, policy)

    if role is Role.CLIENT:
        if operation is Operation.APPROVE_AS_CLIENT:
            return policy.subject_field is not None and instance.subject_id == caller.id
        return False

    if operation is Operation.APPROVE_AS_CLIENT:
        return False

    if operation is Operation.APPROVE_AS_MANAGER:
        # Checked against the requester's company, not the caller's own rows
        company = _company_of(caller)
        if role is not Role.AGENCY_ADMIN or company is None:
            return False
        return any(c == company for c in instance.companies if c is not None)

    if operation is Operation.CREATE:
        return _may_create(caller, role, policy, instance)

    # Update / delete
    if operation is Operation.DELETE and role is Role.STAFF:
        return False
    if instance.shared and policy.shared_field:
        return False
    if instance.owner_role == Role.SUPER_ADMIN.value:
        return False
    return in_scope(_mutation_scope(caller, role, policy), instance, policy)
