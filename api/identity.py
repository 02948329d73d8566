"""
Identity resolution.

Maps an authenticated request user to the Caller used by the scope
resolver. Role and company always come from the persisted profile row.
"""
import logging

from .models import UserProfile
from .scoping import Caller

logger = logging.getLogger(__name__)


def resolve_caller(user):
    """
    Build a Caller from the persisted profile of an authenticated user.

    The profile is read from the database on every call so that a role or
    company change applies from the next request on.

    Returns:
        Caller, or None for anonymous users and users without a profile
    """
    if user is None or not getattr(user, 'is_authenticated', False):
        return None

    profile = (
        UserProfile.objects
        .filter(user_id=user.pk)
        .values('role', 'company')
        .first()
    )
    if profile is None:
        logger.warning(f"User {user.pk} has no profile; treating as unresolved caller")
        return None

    return Caller(id=user.pk, role=profile['role'], company=profile['company'] or None)


def get_caller(request):
    """Resolve the caller once per request and keep it on the request."""
    if not hasattr(request, '_scoped_caller'):
        request._scoped_caller = resolve_caller(getattr(request, 'user', None))
    return request._scoped_caller
