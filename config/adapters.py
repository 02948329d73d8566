from allauth.account.adapter import DefaultAccountAdapter
from django.conf import settings
import logging

logger = logging.getLogger(__name__)


class ProvisionedAccountAdapter(DefaultAccountAdapter):
    """
    Account adapter for admin-provisioned users.

    Users are created by super admins and agency admins through the users API,
    which is where role and company get assigned. Self sign-up would create
    profiles outside of any company, so it stays closed unless
    ACCOUNT_ALLOW_SIGNUP is switched on explicitly.
    """

    def is_open_for_signup(self, request):
        allowed = getattr(settings, 'ACCOUNT_ALLOW_SIGNUP', False)
        if not allowed:
            logger.info(f"Rejected self sign-up attempt from {request.META.get('REMOTE_ADDR')}")
        return allowed

    def save_user(self, request, user, form, commit=True):
        # Profile is created by the post_save receiver with the client role
        user = super().save_user(request, user, form, commit=commit)
        logger.info(f"Self sign-up created user {user.email}")
        return user
