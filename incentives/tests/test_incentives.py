"""
Tests for monthly incentives.

Tests cover:
- Calculation from approved sales and profile incentive rates
- Company-limited runs for agency admins and the scheduled run
- Review, payment and deletion rules on the API
"""
from datetime import date, datetime
from decimal import Decimal
from unittest.mock import patch

from django.test import TestCase
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework import status

from api.scoping import Caller
from catalog.models import Product
from incentives.models import MonthlyIncentive
from incentives.services import calculate_monthly_incentives, monthly_sales_totals
from incentives.tasks import calculate_previous_month, previous_month
from sales.models import Sale

User = get_user_model()


def make_user(username, role, company=None, incentive_rate='0'):
    user = User.objects.create_user(username=username, email=f'{username}@example.com', password='pass')
    profile = user.profile
    profile.role = role
    profile.company = company
    profile.incentive_rate = Decimal(incentive_rate)
    profile.save()
    return user


class IncentiveTestMixin:

    def setUp(self):
        self.client = APIClient()

        self.super_admin = make_user('root', 'super_admin')
        self.acme_admin = make_user('acme_admin', 'agency_admin', 'Acme', incentive_rate='5')
        self.acme_staff = make_user('acme_staff', 'staff', 'Acme', incentive_rate='10')
        self.acme_staff2 = make_user('acme_staff2', 'staff', 'Acme')
        self.acme_client = make_user('acme_client', 'client', 'Acme')
        self.beta_staff = make_user('beta_staff', 'staff', 'Beta', incentive_rate='20')

        self.product = Product.objects.create(
            name='Blog package', sku='BLOG-1', cost_price=Decimal('10000'), selling_price=Decimal('30000'))
        self.september = timezone.make_aware(datetime(2026, 9, 15, 12, 0))

    def make_sale(self, sales_person, sale_date=None, sale_status=Sale.STATUS_APPROVED, **kwargs):
        values = {
            'product': self.product,
            'sales_person': sales_person,
            'quantity': 1,
            'actual_cost_price': Decimal('10000'),
            'actual_selling_price': Decimal('30000'),
            'client_name': 'Customer',
            'status': sale_status,
            'sale_date': sale_date or self.september,
        }
        values.update(kwargs)
        return Sale.objects.create(**values)


class CalculationTestCase(IncentiveTestMixin, TestCase):

    def test_totals_count_only_approved_sales_in_month(self):
        self.make_sale(self.acme_staff, quantity=2)
        self.make_sale(self.acme_staff, sale_status=Sale.STATUS_REGISTERED)
        self.make_sale(self.acme_staff, sale_date=timezone.make_aware(datetime(2026, 8, 31, 12, 0)))

        totals = monthly_sales_totals(self.acme_staff, 2026, 9)

        self.assertEqual(totals['sales_count'], 1)
        self.assertEqual(totals['total_sales'], Decimal('60000'))
        self.assertEqual(totals['total_cost'], Decimal('20000'))
        self.assertEqual(totals['total_margin'], Decimal('40000'))

    def test_scheduled_run_covers_every_company(self):
        self.make_sale(self.acme_staff, quantity=2)
        self.make_sale(self.beta_staff)

        results = calculate_monthly_incentives(2026, 9)

        created = {result['user_id'] for result in results if result['status'] == 'created'}
        self.assertEqual(created, {self.acme_admin.id, self.acme_staff.id, self.acme_staff2.id, self.beta_staff.id})

        acme = MonthlyIncentive.objects.get(user=self.acme_staff, year=2026, month=9)
        self.assertEqual(acme.incentive_amount, Decimal('4000.00'))
        self.assertEqual(acme.incentive_rate, Decimal('10'))
        self.assertEqual(acme.status, MonthlyIncentive.STATUS_PENDING_REVIEW)

        beta = MonthlyIncentive.objects.get(user=self.beta_staff, year=2026, month=9)
        self.assertEqual(beta.incentive_amount, Decimal('4000.00'))

        idle = MonthlyIncentive.objects.get(user=self.acme_staff2, year=2026, month=9)
        self.assertEqual(idle.incentive_amount, Decimal('0'))

    def test_clients_and_super_admins_are_not_eligible(self):
        calculate_monthly_incentives(2026, 9)

        self.assertFalse(MonthlyIncentive.objects.filter(user=self.acme_client).exists())
        self.assertFalse(MonthlyIncentive.objects.filter(user=self.super_admin).exists())

    def test_existing_rows_are_skipped(self):
        calculate_monthly_incentives(2026, 9, user_ids=[self.acme_staff.id])
        self.make_sale(self.acme_staff)

        results = calculate_monthly_incentives(2026, 9, user_ids=[self.acme_staff.id])

        self.assertEqual([result['status'] for result in results], ['skipped'])
        self.assertEqual(MonthlyIncentive.objects.get(user=self.acme_staff).incentive_amount, Decimal('0'))

    def test_agency_admin_run_is_limited_to_company(self):
        caller = Caller(id=self.acme_admin.id, role='agency_admin', company='Acme')
        results = calculate_monthly_incentives(2026, 9, caller=caller, created_by=self.acme_admin)

        self.assertEqual(
            {result['user_id'] for result in results},
            {self.acme_admin.id, self.acme_staff.id, self.acme_staff2.id}
        )
        self.assertEqual(MonthlyIncentive.objects.filter(created_by=self.acme_admin).count(), 3)

    def test_null_company_admin_covers_nobody(self):
        loose = make_user('loose', 'agency_admin')
        caller = Caller(id=loose.id, role='agency_admin', company=None)

        self.assertEqual(calculate_monthly_incentives(2026, 9, caller=caller), [])


class ScheduledTaskTestCase(IncentiveTestMixin, TestCase):

    def test_previous_month(self):
        self.assertEqual(previous_month(date(2026, 1, 1)), (2025, 12))
        self.assertEqual(previous_month(date(2026, 10, 1)), (2026, 9))

    @patch('incentives.tasks.previous_month', return_value=(2026, 9))
    def test_calculate_previous_month(self, mock_previous_month):
        self.make_sale(self.acme_staff)

        result = calculate_previous_month()

        self.assertEqual(result['year'], 2026)
        self.assertEqual(result['month'], 9)
        self.assertEqual(result['created'], 4)
        self.assertTrue(MonthlyIncentive.objects.filter(user=self.acme_staff, year=2026, month=9).exists())


class IncentiveViewSetTestCase(IncentiveTestMixin, TestCase):

    def make_incentive(self, user, **kwargs):
        values = {
            'year': 2026,
            'month': 9,
            'user': user,
            'incentive_amount': Decimal('4000'),
            'status': MonthlyIncentive.STATUS_PENDING_REVIEW,
        }
        values.update(kwargs)
        return MonthlyIncentive.objects.create(**values)

    def test_admin_calculates_for_company(self):
        self.make_sale(self.acme_staff)
        self.client.force_authenticate(user=self.acme_admin)
        response = self.client.post('/api/v1/monthly-incentives/calculate/', {'year': 2026, 'month': 9}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['results']), 3)
        self.assertFalse(MonthlyIncentive.objects.filter(user=self.beta_staff).exists())

    def test_staff_cannot_calculate(self):
        self.client.force_authenticate(user=self.acme_staff)
        response = self.client.post('/api/v1/monthly-incentives/calculate/', {'year': 2026, 'month': 9}, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_invalid_month_is_rejected(self):
        self.client.force_authenticate(user=self.acme_admin)
        response = self.client.post('/api/v1/monthly-incentives/calculate/', {'year': 2026, 'month': 13}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_direct_create_is_not_allowed(self):
        self.client.force_authenticate(user=self.acme_admin)
        response = self.client.post('/api/v1/monthly-incentives/', {'year': 2026, 'month': 9}, format='json')

        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)

    def test_staff_sees_only_own_incentives(self):
        own = self.make_incentive(self.acme_staff)
        self.make_incentive(self.acme_staff2)
        self.client.force_authenticate(user=self.acme_staff)

        response = self.client.get('/api/v1/monthly-incentives/')
        self.assertEqual([row['id'] for row in response.data['results']], [own.id])

    def test_admin_sees_company_incentives(self):
        self.make_incentive(self.acme_staff)
        self.make_incentive(self.acme_staff2)
        self.make_incentive(self.beta_staff)
        self.client.force_authenticate(user=self.acme_admin)

        self.assertEqual(self.client.get('/api/v1/monthly-incentives/').data['count'], 2)

    def test_admin_approves_with_adjustment(self):
        incentive = self.make_incentive(self.acme_staff)
        self.client.force_authenticate(user=self.acme_admin)
        response = self.client.patch(f'/api/v1/monthly-incentives/{incentive.id}/', {
            'status': 'approved',
            'adjustment_amount': '-500',
            'adjustment_reason': 'Refund',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['final_amount'], '3500.00')
        self.assertEqual(response.data['approved_by']['id'], self.acme_admin.id)
        self.assertIsNotNone(response.data['approved_at'])

    def test_staff_cannot_approve_own_incentive(self):
        incentive = self.make_incentive(self.acme_staff)
        self.client.force_authenticate(user=self.acme_staff)
        response = self.client.patch(
            f'/api/v1/monthly-incentives/{incentive.id}/', {'status': 'approved'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_paid_incentive_cannot_be_deleted(self):
        incentive = self.make_incentive(self.acme_staff, status=MonthlyIncentive.STATUS_PAID)
        self.client.force_authenticate(user=self.acme_admin)
        response = self.client.delete(f'/api/v1/monthly-incentives/{incentive.id}/')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(MonthlyIncentive.objects.filter(pk=incentive.id).exists())

    def test_pending_incentive_deleted(self):
        incentive = self.make_incentive(self.acme_staff)
        self.client.force_authenticate(user=self.acme_admin)

        self.assertEqual(
            self.client.delete(f'/api/v1/monthly-incentives/{incentive.id}/').status_code,
            status.HTTP_204_NO_CONTENT
        )

    def test_stats(self):
        self.make_incentive(self.acme_staff, status=MonthlyIncentive.STATUS_APPROVED,
                            incentive_amount=Decimal('4000.40'), adjustment_amount=Decimal('100'))
        self.make_incentive(self.acme_staff2)
        self.make_incentive(self.acme_admin, status=MonthlyIncentive.STATUS_PAID, incentive_amount=Decimal('1000'))
        self.client.force_authenticate(user=self.acme_admin)

        response = self.client.get('/api/v1/monthly-incentives/stats/', {'year': 2026, 'month': 9})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_employees'], 3)
        self.assertEqual(response.data['pending_incentives'], 1)
        self.assertEqual(response.data['approved_incentives'], 2)
        self.assertEqual(response.data['total_incentive_amount'], 5000)
        self.assertEqual(response.data['total_adjustment_amount'], 100)
        self.assertEqual(response.data['total_final_amount'], 5100)
