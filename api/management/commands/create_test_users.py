"""
Django management command to create test users, one per role.

Usage:
    python manage.py create_test_users
    python manage.py create_test_users --company acme --password secret123

Creates:
- Super Admin (no company)
- Agency Admin, Staff and Client in the given company
"""

from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model
from django.db import transaction, DatabaseError

from api.models import UserProfile

User = get_user_model()


class Command(BaseCommand):
    help = 'Create one test user per role'

    def add_arguments(self, parser):
        parser.add_argument('--company', default='test-agency', help='Company for the non super admin users')
        parser.add_argument('--password', default='test-password-123', help='Password set on every test user')
        parser.add_argument('--domain', default='example.com', help='Email domain')

    def handle(self, *args, **options):
        company = options['company']
        domain = options['domain']
        test_users = [
            ('super-admin', 'Test Super', 'Admin', UserProfile.ROLE_SUPER_ADMIN, None),
            ('agency-admin', 'Test Agency', 'Admin', UserProfile.ROLE_AGENCY_ADMIN, company),
            ('staff', 'Test', 'Staff', UserProfile.ROLE_STAFF, company),
            ('client', 'Test', 'Client', UserProfile.ROLE_CLIENT, company),
        ]

        created_count = 0
        updated_count = 0
        failed_count = 0

        for slug, first_name, last_name, role, user_company in test_users:
            email = f'test-{slug}@{domain}'
            try:
                with transaction.atomic():
                    user, created = User.objects.get_or_create(
                        email=email,
                        defaults={
                            'username': email,
                            'first_name': first_name,
                            'last_name': last_name,
                        }
                    )
                    user.set_password(options['password'])
                    user.save()

                    profile, _ = UserProfile.objects.get_or_create(user=user)
                    profile.role = role
                    profile.company = user_company
                    profile.save()
            except DatabaseError as e:
                failed_count += 1
                self.stdout.write(self.style.ERROR(f'Failed to create/update {email}: {e}'))
                continue

            if created:
                created_count += 1
                self.stdout.write(self.style.SUCCESS(f'Created test user: {email} ({role})'))
            else:
                updated_count += 1
                self.stdout.write(self.style.WARNING(f'Updated test user: {email} ({role})'))

        self.stdout.write('')
        self.stdout.write(self.style.SUCCESS(f'Created: {created_count}'))
        self.stdout.write(self.style.WARNING(f'Updated: {updated_count}'))
        if failed_count:
            self.stdout.write(self.style.ERROR(f'Failed: {failed_count}'))
