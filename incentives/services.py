"""
Monthly incentive calculation.

An employee's incentive for a month is the margin of their approved sales
dated in that month times their profile incentive rate. Existing rows are
never recalculated; adjust them through the API instead.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP

from django.contrib.auth import get_user_model
from django.db import transaction, IntegrityError

from api.models import UserProfile
from api.scoping import Role, Operation, can_perform
from api.utils import resource_ref_for
from sales.models import Sale
from .models import MonthlyIncentive

User = get_user_model()
logger = logging.getLogger(__name__)

ELIGIBLE_ROLES = (UserProfile.ROLE_STAFF, UserProfile.ROLE_AGENCY_ADMIN)


def eligible_users(caller=None, user_ids=None):
    """
    Employees an incentive run covers.

    Super admins (and the scheduled run, caller=None) cover every company;
    agency admins only their own, and nobody without a company.
    """
    queryset = User.objects.filter(profile__role__in=ELIGIBLE_ROLES, is_active=True).select_related('profile')
    if caller is not None and Role.parse(caller.role) is not Role.SUPER_ADMIN:
        if not caller.company:
            return queryset.none()
        queryset = queryset.filter(profile__company=caller.company)
    if user_ids:
        queryset = queryset.filter(pk__in=user_ids)
    return queryset.order_by('pk')


def monthly_sales_totals(user, year, month):
    """Totals of the user's approved sales dated in the given month."""
    sales = Sale.objects.filter(
        sales_person=user,
        status=Sale.STATUS_APPROVED,
        sale_date__year=year,
        sale_date__month=month,
    )
    totals = {
        'total_sales': Decimal('0'),
        'total_cost': Decimal('0'),
        'total_margin': Decimal('0'),
        'sales_count': 0,
    }
    for sale in sales:
        totals['total_sales'] += sale.total_sales
        totals['total_cost'] += sale.total_cost
        totals['total_margin'] += sale.total_margin
        totals['sales_count'] += 1
    return totals


def calculate_for_user(user, year, month, created_by=None):
    totals = monthly_sales_totals(user, year, month)
    rate = user.profile.incentive_rate
    amount = (totals['total_margin'] * rate / 100).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
    return MonthlyIncentive.objects.create(
        year=year,
        month=month,
        user=user,
        incentive_rate=rate,
        incentive_amount=amount,
        status=MonthlyIncentive.STATUS_PENDING_REVIEW,
        created_by=created_by,
        **totals,
    )


def calculate_monthly_incentives(year, month, caller=None, user_ids=None, created_by=None):
    """
    Create pending-review incentive rows for every eligible employee.

    Args:
        year, month: period to calculate
        caller: Caller running the calculation, or None for the scheduled run
        user_ids: optional subset of employees
        created_by: User recorded as creator

    Returns:
        list of per-user result dicts with status 'created', 'skipped' or 'error'
    """
    results = []
    for user in eligible_users(caller, user_ids):
        name = user.get_full_name() or user.email
        if MonthlyIncentive.objects.filter(user=user, year=year, month=month).exists():
            results.append({
                'user_id': user.pk,
                'user_name': name,
                'status': 'skipped',
                'message': 'Incentive already calculated for this month.',
            })
            continue

        if caller is not None:
            candidate = MonthlyIncentive(user=user, year=year, month=month)
            if not can_perform(caller, Operation.CREATE, resource_ref_for(candidate, 'monthly_incentive')):
                results.append({
                    'user_id': user.pk,
                    'user_name': name,
                    'status': 'error',
                    'message': 'No permission for this employee.',
                })
                continue

        try:
            with transaction.atomic():
                incentive = calculate_for_user(user, year, month, created_by=created_by)
        except IntegrityError as e:
            logger.warning(f"Incentive for user {user.pk} {year}-{month:02d} not created: {e}")
            results.append({
                'user_id': user.pk,
                'user_name': name,
                'status': 'error',
                'message': str(e),
            })
            continue

        results.append({
            'user_id': user.pk,
            'user_name': name,
            'status': 'created',
            'incentive_id': incentive.pk,
            'amount': str(incentive.incentive_amount),
        })

    created = sum(1 for result in results if result['status'] == 'created')
    logger.info(f"Incentive calculation {year}-{month:02d}: {created} created, {len(results) - created} not created")
    return results
