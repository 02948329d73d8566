"""
Tests for user management, company logos and the auth status endpoint.

Tests cover:
- User visibility by role and company
- Agency admin limits on role assignment and company
- Self-service profile updates and self-deletion
- Logo upload and removal rights
- Health check
- Management commands for test users and defaults
"""
from io import StringIO
from unittest.mock import patch

from django.core.management import call_command
from django.db import DatabaseError
from django.test import TestCase, Client
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework import status

from api.models import CompanyLogo, UserProfile
from campaigns.models import Campaign
from catalog.models import WorkType
from platform_settings.models import SystemSetting

User = get_user_model()


def make_user(username, role, company=None):
    user = User.objects.create_user(
        username=username, email=f'{username}@example.com', password='pass', first_name=username)
    profile = user.profile
    profile.role = role
    profile.company = company
    profile.save()
    return user


class UserTestMixin:

    def setUp(self):
        self.client = APIClient()

        self.super_admin = make_user('root', 'super_admin')
        self.acme_admin = make_user('acme_admin', 'agency_admin', 'Acme')
        self.acme_staff = make_user('acme_staff', 'staff', 'Acme')
        self.acme_client = make_user('acme_client', 'client', 'Acme')
        self.beta_admin = make_user('beta_admin', 'agency_admin', 'Beta')


class UserListTestCase(UserTestMixin, TestCase):

    def listed_ids(self, user):
        self.client.force_authenticate(user=user)
        response = self.client.get('/api/v1/users/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        return {row['id'] for row in response.data['results']}

    def test_agency_admin_sees_company(self):
        self.assertEqual(
            self.listed_ids(self.acme_admin),
            {self.acme_admin.id, self.acme_staff.id, self.acme_client.id}
        )

    def test_client_sees_only_self(self):
        self.assertEqual(self.listed_ids(self.acme_client), {self.acme_client.id})

    def test_super_admin_sees_everyone(self):
        self.assertEqual(self.listed_ids(self.super_admin), set(User.objects.values_list('id', flat=True)))

    def test_user_without_profile_is_forbidden(self):
        bare = make_user('bare', 'staff', 'Acme')
        UserProfile.objects.filter(user=bare).delete()
        bare = User.objects.get(pk=bare.pk)
        self.client.force_authenticate(user=bare)

        self.assertEqual(self.client.get('/api/v1/users/').status_code, status.HTTP_403_FORBIDDEN)

    def test_other_company_user_is_forbidden(self):
        self.client.force_authenticate(user=self.acme_admin)
        response = self.client.get(f'/api/v1/users/{self.beta_admin.id}/')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_clients_action(self):
        self.client.force_authenticate(user=self.acme_staff)
        response = self.client.get('/api/v1/users/clients/')

        self.assertEqual([row['id'] for row in response.data['results']], [self.acme_client.id])

    def test_user_campaigns(self):
        campaign = Campaign.objects.create(name='Acme Spring', manager=self.acme_staff, client=self.acme_client)
        Campaign.objects.create(name='Other', manager=self.acme_admin, client=self.acme_client)
        self.client.force_authenticate(user=self.acme_admin)

        response = self.client.get(f'/api/v1/users/{self.acme_staff.id}/campaigns/')

        self.assertEqual([row['id'] for row in response.data], [campaign.id])


class UserCreateTestCase(UserTestMixin, TestCase):

    def payload(self, **overrides):
        data = {
            'email': 'new.person@example.com',
            'password': 'long-enough-password',
            'first_name': 'New',
            'role': 'staff',
        }
        data.update(overrides)
        return data

    def test_agency_admin_creates_staff_in_own_company(self):
        self.client.force_authenticate(user=self.acme_admin)
        response = self.client.post('/api/v1/users/', self.payload(company='Beta'), format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        user = User.objects.get(email='new.person@example.com')
        self.assertEqual(user.profile.company, 'Acme')
        self.assertEqual(user.profile.role, 'staff')
        self.assertTrue(user.check_password('long-enough-password'))

    def test_agency_admin_cannot_create_super_admin(self):
        self.client.force_authenticate(user=self.acme_admin)
        response = self.client.post('/api/v1/users/', self.payload(role='super_admin'), format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(User.objects.filter(email='new.person@example.com').exists())

    def test_staff_cannot_create_users(self):
        self.client.force_authenticate(user=self.acme_staff)
        response = self.client.post('/api/v1/users/', self.payload(), format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_super_admin_creates_agency_admin(self):
        self.client.force_authenticate(user=self.super_admin)
        response = self.client.post(
            '/api/v1/users/', self.payload(role='agency_admin', company='Gamma'), format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['role'], 'agency_admin')

    def test_duplicate_email_rejected(self):
        self.client.force_authenticate(user=self.super_admin)
        response = self.client.post(
            '/api/v1/users/', self.payload(email='ACME_STAFF@example.com'), format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_password_required(self):
        self.client.force_authenticate(user=self.super_admin)
        payload = self.payload()
        del payload['password']

        self.assertEqual(
            self.client.post('/api/v1/users/', payload, format='json').status_code,
            status.HTTP_400_BAD_REQUEST
        )


class UserUpdateTestCase(UserTestMixin, TestCase):

    def test_staff_updates_own_name(self):
        self.client.force_authenticate(user=self.acme_staff)
        response = self.client.patch(
            f'/api/v1/users/{self.acme_staff.id}/', {'first_name': 'Renamed'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.acme_staff.refresh_from_db()
        self.assertEqual(self.acme_staff.first_name, 'Renamed')

    def test_staff_cannot_change_own_role(self):
        self.client.force_authenticate(user=self.acme_staff)
        response = self.client.patch(
            f'/api/v1/users/{self.acme_staff.id}/', {'role': 'agency_admin'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(UserProfile.objects.get(user=self.acme_staff).role, 'staff')

    def test_staff_cannot_update_colleague(self):
        self.client.force_authenticate(user=self.acme_staff)
        response = self.client.patch(
            f'/api/v1/users/{self.acme_client.id}/', {'first_name': 'X'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_agency_admin_cannot_move_user_to_other_company(self):
        self.client.force_authenticate(user=self.acme_admin)
        response = self.client.patch(
            f'/api/v1/users/{self.acme_staff.id}/', {'company': 'Beta'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_agency_admin_sets_incentive_rate(self):
        self.client.force_authenticate(user=self.acme_admin)
        response = self.client.patch(
            f'/api/v1/users/{self.acme_staff.id}/', {'incentive_rate': '12.5'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(str(UserProfile.objects.get(user=self.acme_staff).incentive_rate), '12.50')

    def test_cannot_delete_self(self):
        self.client.force_authenticate(user=self.acme_admin)
        response = self.client.delete(f'/api/v1/users/{self.acme_admin.id}/')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(User.objects.filter(pk=self.acme_admin.id).exists())

    def test_agency_admin_deletes_company_user(self):
        self.client.force_authenticate(user=self.acme_admin)
        response = self.client.delete(f'/api/v1/users/{self.acme_client.id}/')

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

    def test_delete_user_managing_campaign_is_rejected(self):
        Campaign.objects.create(name='Acme Spring', manager=self.acme_staff, client=self.acme_client)
        self.client.force_authenticate(user=self.acme_admin)
        response = self.client.delete(f'/api/v1/users/{self.acme_staff.id}/')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('campaigns', str(response.data['detail']))
        self.assertTrue(User.objects.filter(pk=self.acme_staff.id).exists())

    def test_staff_cannot_delete(self):
        self.client.force_authenticate(user=self.acme_staff)

        self.assertEqual(
            self.client.delete(f'/api/v1/users/{self.acme_client.id}/').status_code,
            status.HTTP_403_FORBIDDEN
        )

    def test_me(self):
        self.client.force_authenticate(user=self.acme_client)
        response = self.client.get('/api/v1/users/me/')

        self.assertEqual(response.data['id'], self.acme_client.id)

        response = self.client.patch('/api/v1/users/me/', {'contact': '010-0000-0000'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(UserProfile.objects.get(user=self.acme_client).contact, '010-0000-0000')


class CompanyLogoTestCase(UserTestMixin, TestCase):

    url = '/api/v1/company/logo/'

    def test_missing_logo_is_404(self):
        self.client.force_authenticate(user=self.acme_staff)

        self.assertEqual(self.client.get(self.url).status_code, status.HTTP_404_NOT_FOUND)

    def test_agency_admin_uploads_then_replaces(self):
        self.client.force_authenticate(user=self.acme_admin)
        response = self.client.post(self.url, {'logo_url': 'https://cdn.example.com/a.png'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['company'], 'Acme')

        response = self.client.post(self.url, {'logo_data': 'data:image/png;base64,AAAA'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(CompanyLogo.objects.get(company='Acme').logo_url, 'data:image/png;base64,AAAA')

    def test_staff_reads_company_logo(self):
        CompanyLogo.objects.create(company='Acme', logo_url='https://cdn.example.com/a.png', uploaded_by=self.acme_admin)
        CompanyLogo.objects.create(company='Beta', logo_url='https://cdn.example.com/b.png', uploaded_by=self.beta_admin)
        self.client.force_authenticate(user=self.acme_staff)

        self.assertEqual(self.client.get(self.url).data['logo_url'], 'https://cdn.example.com/a.png')

    def test_staff_cannot_upload(self):
        self.client.force_authenticate(user=self.acme_staff)
        response = self.client.post(self.url, {'logo_url': 'https://cdn.example.com/a.png'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_upload_needs_logo(self):
        self.client.force_authenticate(user=self.acme_admin)

        self.assertEqual(self.client.post(self.url, {}, format='json').status_code, status.HTTP_400_BAD_REQUEST)

    def test_super_admin_sets_default_logo(self):
        self.client.force_authenticate(user=self.super_admin)
        response = self.client.post(self.url, {'logo_url': 'https://cdn.example.com/default.png'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIsNone(response.data['company'])

    def test_agency_admin_deletes_logo(self):
        CompanyLogo.objects.create(company='Acme', logo_url='https://cdn.example.com/a.png', uploaded_by=self.acme_admin)
        self.client.force_authenticate(user=self.acme_admin)

        self.assertEqual(self.client.delete(self.url).status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(CompanyLogo.objects.filter(company='Acme').exists())


class AuthStatusTestCase(UserTestMixin, TestCase):

    def test_anonymous(self):
        response = Client().get('/api/auth/status/')

        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.json()['authenticated'])

    def test_authenticated_reports_persisted_role(self):
        client = Client()
        client.force_login(self.acme_staff)
        data = client.get('/api/auth/status/').json()

        self.assertTrue(data['authenticated'])
        self.assertEqual(data['user']['role'], 'staff')
        self.assertEqual(data['user']['company'], 'Acme')


class HealthCheckTestCase(TestCase):

    def test_healthy(self):
        response = Client().get('/api/health/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['database'], 'ok')

    @patch('api.views.connection')
    def test_database_down(self, mock_connection):
        mock_connection.cursor.side_effect = DatabaseError('down')
        response = Client().get('/api/health/')

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()['status'], 'unhealthy')


class ManagementCommandTestCase(TestCase):

    def test_create_test_users(self):
        out = StringIO()
        call_command('create_test_users', '--company', 'qa-agency', stdout=out)

        self.assertIn('Created: 4', out.getvalue())
        admin = User.objects.get(email='test-agency-admin@example.com')
        self.assertEqual(admin.profile.role, 'agency_admin')
        self.assertEqual(admin.profile.company, 'qa-agency')
        self.assertIsNone(User.objects.get(email='test-super-admin@example.com').profile.company)

        out = StringIO()
        call_command('create_test_users', '--company', 'qa-agency', stdout=out)
        self.assertIn('Updated: 4', out.getvalue())

    def test_seed_defaults(self):
        call_command('seed_defaults', stdout=StringIO())

        self.assertEqual(SystemSetting.objects.count(), len(SystemSetting.DEFAULTS))
        self.assertEqual(WorkType.objects.count(), len(WorkType.DEFAULT_NAMES))
