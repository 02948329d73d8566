"""
Translation between scope decisions and the ORM.

scope_to_q() turns a ScopeFilter into a queryset predicate and
resource_ref_for() snapshots a model instance for can_perform(). Both walk
the same lookup paths declared on the ResourcePolicy, so a row passes one
exactly when it passes the other.
"""
from django.core.exceptions import ObjectDoesNotExist
from django.db.models import Q

from .scoping import ScopeKind, ResourceRef, get_policy


def resolve_path(instance, path):
    """
    Follow a Django lookup path ('campaign__manager__profile__company') on an
    instance.

    Any missing hop (null FK, missing reverse one-to-one such as a user
    without a profile) yields None instead of raising, so malformed rows are
    treated as having no company rather than matching everything.

    Args:
        instance: Model instance, saved or not
        path: Lookup path using '__' separators

    Returns:
        The value at the end of the path, or None

    Example:
        >>> resolve_path(post, 'campaign__manager_id')
        5
    """
    value = instance
    for part in path.split('__'):
        if value is None:
            return None
        try:
            value = getattr(value, part)
        except ObjectDoesNotExist:
            return None
    return value


def resource_ref_for(instance, kind):
    """Build the ResourceRef snapshot of a model instance for can_perform()."""
    policy = get_policy(kind)
    return ResourceRef(
        kind=policy.kind,
        owner_id=resolve_path(instance, policy.owner_field) if policy.owner_field else None,
        subject_id=resolve_path(instance, policy.subject_field) if policy.subject_field else None,
        companies=tuple(resolve_path(instance, path) or None for path in policy.company_fields),
        owner_role=resolve_path(instance, policy.owner_role_field) if policy.owner_role_field else None,
        shared=bool(policy.shared_field) and resolve_path(instance, policy.shared_field) is None,
        access_level=resolve_path(instance, policy.level_field) if policy.level_field else None,
    )


def _company_q(scope, policy):
    q = Q(pk__in=[])
    if scope.company is not None:
        for path in policy.company_fields:
            q |= Q(**{path: scope.company})
    if policy.shared_field:
        q |= Q(**{f'{policy.shared_field}__isnull': True})
    return q


def scope_to_q(scope, kind):
    """
    Translate a ScopeFilter into a Q object for the given resource kind.

    NONE maps to a predicate that matches nothing; callers usually short
    circuit with queryset.none() before getting here.

    Args:
        scope: ScopeFilter from resolve_scope()
        kind: resource kind name or ResourcePolicy

    Returns:
        Q
    """
    policy = get_policy(kind)

    if scope.kind is ScopeKind.ALL:
        return Q()

    if scope.kind is ScopeKind.OWN:
        return Q(**{scope.owner_field: scope.owner_value})

    if scope.kind is ScopeKind.COMPANY:
        return _company_q(scope, policy)

    if scope.kind is ScopeKind.OWN_OR_COMPANY:
        return Q(**{scope.owner_field: scope.owner_value}) | _company_q(scope, policy)

    if scope.kind is ScopeKind.LEVEL:
        return Q(**{f'{policy.level_field}__in': list(scope.levels)})

    return Q(pk__in=[])


def apply_scope(queryset, scope, kind):
    """Filter a queryset by a ScopeFilter; NONE gives an empty queryset."""
    if scope.is_empty:
        return queryset.none()
    if scope.kind is ScopeKind.ALL:
        return queryset
    return queryset.filter(scope_to_q(scope, kind))
