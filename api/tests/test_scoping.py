"""
Tests for the access scope resolver.

Tests cover:
- Rule table per role (view, create, update/delete, approvals)
- Fail-closed handling of unknown roles and unresolved callers
- Company isolation and null-company containment
- List/single consistency between scope_to_q() and can_perform()
"""
from itertools import product as cartesian

from django.contrib.auth import get_user_model
from django.test import SimpleTestCase, TestCase

from api.scoping import (
    Caller,
    Operation,
    ResourceRef,
    Role,
    ScopeConfigurationError,
    ScopeFilter,
    ScopeKind,
    can_perform,
    resolve_scope,
    POLICIES,
)
from api.utils import apply_scope, resource_ref_for, resolve_path
from api.models import CompanyLogo
from campaigns.models import Campaign, Post
from catalog.models import Product, WorkType
from incentives.models import MonthlyIncentive
from platform_settings.models import SystemSetting
from purchasing.models import PurchaseRequest
from sales.models import Sale

User = get_user_model()

ALL_OPERATIONS = list(Operation)


def campaign_ref(manager_id, client_id, manager_company=None, client_company=None, manager_role='agency_admin'):
    return ResourceRef(
        kind='campaign',
        owner_id=manager_id,
        subject_id=client_id,
        companies=(manager_company, client_company),
        owner_role=manager_role,
    )


def make_user(username, role, company=None):
    user = User.objects.create_user(username=username, email=f'{username}@example.com', password='pass')
    profile = user.profile
    profile.role = role
    profile.company = company
    profile.save()
    return user


class ExampleScenarioTestCase(SimpleTestCase):
    """Worked examples of the rule table."""

    def test_agency_admin_owner_fallback_despite_company_mismatch(self):
        caller = Caller(id=5, role='agency_admin', company='Acme')
        campaign = campaign_ref(5, 9, manager_company=None, client_company='Beta')

        self.assertTrue(can_perform(caller, Operation.VIEW, campaign))

    def test_null_company_agency_admin_cannot_see_others_campaign(self):
        caller = Caller(id=5, role='agency_admin', company=None)
        campaign = campaign_ref(7, 9)

        self.assertFalse(can_perform(caller, Operation.VIEW, campaign))

    def test_client_sees_only_own_campaigns(self):
        caller = Caller(id=9, role='client', company='Beta')

        self.assertTrue(can_perform(caller, Operation.VIEW, campaign_ref(1, 9)))
        self.assertFalse(can_perform(caller, Operation.VIEW, campaign_ref(1, 10, 'Beta', 'Beta')))

    def test_unrecognized_role_gets_no_scope(self):
        caller = Caller(id=3, role='직원-typo', company='Acme')

        self.assertEqual(resolve_scope(caller, 'campaign'), ScopeFilter.none())
        self.assertFalse(can_perform(caller, Operation.VIEW, campaign_ref(3, 3, 'Acme', 'Acme')))

    def test_purchase_approval_checks_requester_company(self):
        request = ResourceRef(
            kind='purchase_request',
            owner_id=21,
            companies=('Acme',),
            owner_role='staff',
        )

        same_company = Caller(id=30, role='agency_admin', company='Acme')
        other_company = Caller(id=30, role='agency_admin', company='Acme2')

        self.assertTrue(can_perform(same_company, Operation.APPROVE_AS_MANAGER, request))
        self.assertFalse(can_perform(other_company, Operation.APPROVE_AS_MANAGER, request))


class FailClosedTestCase(SimpleTestCase):

    def test_unknown_roles_resolve_to_none_for_every_kind(self):
        for role in ['', 'admin', 'SuperAdmin', None, 'guest']:
            caller = Caller(id=1, role=role, company='Acme')
            for kind in POLICIES:
                self.assertTrue(resolve_scope(caller, kind).is_empty, f"{role!r} on {kind}")

    def test_unknown_roles_are_denied_every_operation(self):
        caller = Caller(id=1, role='manager', company='Acme')
        ref = campaign_ref(1, 1, 'Acme', 'Acme')
        for operation in ALL_OPERATIONS:
            self.assertFalse(can_perform(caller, operation, ref))

    def test_unresolved_caller_is_denied(self):
        self.assertTrue(resolve_scope(None, 'sale').is_empty)
        self.assertFalse(can_perform(None, Operation.VIEW, campaign_ref(1, 2)))

    def test_missing_caller_id_is_a_configuration_error(self):
        with self.assertRaises(ScopeConfigurationError):
            resolve_scope(Caller(id=None, role='staff', company='Acme'), 'campaign')

    def test_unregistered_kind_is_a_configuration_error(self):
        with self.assertRaises(ScopeConfigurationError):
            resolve_scope(Caller(id=1, role='staff'), 'invoice')

    def test_role_parse(self):
        self.assertIs(Role.parse('client'), Role.CLIENT)
        self.assertIs(Role.parse(Role.STAFF), Role.STAFF)
        self.assertIsNone(Role.parse('Client'))


class SuperAdminTestCase(SimpleTestCase):

    def test_super_admin_may_do_everything(self):
        caller = Caller(id=1, role='super_admin', company=None)
        refs = [
            campaign_ref(2, 3, 'Acme', 'Beta', manager_role='super_admin'),
            ResourceRef(kind='product', owner_id=None, companies=(None,), shared=True),
            ResourceRef(kind='system_setting', access_level='super_admin'),
            ResourceRef(kind='monthly_incentive', owner_id=7, companies=('Other',)),
        ]
        for ref, operation in cartesian(refs, ALL_OPERATIONS):
            self.assertTrue(can_perform(caller, operation, ref), f"{operation} on {ref.kind}")

    def test_super_admin_scope_is_all(self):
        caller = Caller(id=1, role='super_admin')
        for kind in POLICIES:
            self.assertEqual(resolve_scope(caller, kind).kind, ScopeKind.ALL)


class CompanyScopeTestCase(SimpleTestCase):

    def test_company_isolation(self):
        for role in ('agency_admin', 'staff'):
            caller = Caller(id=5, role=role, company='Acme')
            foreign = campaign_ref(6, 7, 'Beta', 'Beta')
            self.assertFalse(can_perform(caller, Operation.VIEW, foreign))
            self.assertFalse(can_perform(caller, Operation.UPDATE, foreign))

    def test_company_member_sees_company_rows(self):
        caller = Caller(id=5, role='staff', company='Acme')
        # Client company alone is enough
        self.assertTrue(can_perform(caller, Operation.VIEW, campaign_ref(6, 7, None, 'Acme')))

    def test_null_company_containment(self):
        for role in ('agency_admin', 'staff'):
            caller = Caller(id=5, role=role, company=None)
            scope = resolve_scope(caller, 'campaign')
            self.assertEqual(scope, ScopeFilter.own('manager_id', 5))

    def test_empty_string_company_is_no_company(self):
        caller = Caller(id=5, role='agency_admin', company='')
        self.assertEqual(resolve_scope(caller, 'campaign').kind, ScopeKind.OWN)

    def test_missing_row_company_never_matches(self):
        caller = Caller(id=5, role='agency_admin', company='Acme')
        self.assertFalse(can_perform(caller, Operation.VIEW, campaign_ref(6, 7, None, None)))

    def test_agency_admin_cannot_touch_super_admin_rows(self):
        caller = Caller(id=5, role='agency_admin', company='Acme')
        ref = campaign_ref(1, 7, 'Acme', 'Acme', manager_role='super_admin')

        self.assertTrue(can_perform(caller, Operation.VIEW, ref))
        self.assertFalse(can_perform(caller, Operation.UPDATE, ref))
        self.assertFalse(can_perform(caller, Operation.DELETE, ref))

    def test_staff_never_delete(self):
        caller = Caller(id=5, role='staff', company='Acme')
        own = campaign_ref(5, 7, 'Acme', 'Acme', manager_role='staff')

        self.assertTrue(can_perform(caller, Operation.UPDATE, own))
        self.assertFalse(can_perform(caller, Operation.DELETE, own))

    def test_staff_mutates_only_own_sales(self):
        caller = Caller(id=5, role='staff', company='Acme')
        own = ResourceRef(kind='sale', owner_id=5, companies=('Acme',), owner_role='staff')
        colleague = ResourceRef(kind='sale', owner_id=6, companies=('Acme',), owner_role='staff')

        self.assertTrue(can_perform(caller, Operation.VIEW, colleague))
        self.assertFalse(can_perform(caller, Operation.UPDATE, colleague))
        self.assertTrue(can_perform(caller, Operation.UPDATE, own))

    def test_staff_sees_only_own_incentives(self):
        caller = Caller(id=5, role='staff', company='Acme')
        colleague = ResourceRef(kind='monthly_incentive', owner_id=6, companies=('Acme',))

        self.assertEqual(resolve_scope(caller, 'monthly_incentive'), ScopeFilter.own('user_id', 5))
        self.assertFalse(can_perform(caller, Operation.VIEW, colleague))

    def test_client_reads_work_type_catalog(self):
        caller = Caller(id=7, role='client', company='Acme')
        shared = ResourceRef(kind='work_type', owner_id=1, companies=(None,), shared=True)
        own_company = ResourceRef(kind='work_type', owner_id=5, companies=('Acme',))
        foreign = ResourceRef(kind='work_type', owner_id=6, companies=('Beta',))

        self.assertEqual(resolve_scope(caller, 'work_type'), ScopeFilter.company_only('Acme'))
        self.assertTrue(can_perform(caller, Operation.VIEW, shared))
        self.assertTrue(can_perform(caller, Operation.VIEW, own_company))
        self.assertFalse(can_perform(caller, Operation.VIEW, foreign))
        self.assertFalse(can_perform(caller, Operation.UPDATE, own_company))
        self.assertFalse(can_perform(caller, Operation.CREATE, own_company))

    def test_client_without_company_reads_shared_work_types_only(self):
        caller = Caller(id=7, role='client', company=None)
        shared = ResourceRef(kind='work_type', owner_id=1, companies=(None,), shared=True)
        company_row = ResourceRef(kind='work_type', owner_id=5, companies=('Acme',))

        self.assertTrue(can_perform(caller, Operation.VIEW, shared))
        self.assertFalse(can_perform(caller, Operation.VIEW, company_row))

    def test_client_catalog_does_not_extend_to_products(self):
        caller = Caller(id=7, role='client', company='Acme')
        self.assertTrue(resolve_scope(caller, 'product').is_empty)

    def test_client_scope_outside_catalogs_is_own_or_nothing(self):
        caller = Caller(id=7, role='client', company='Acme')
        for kind, policy in POLICIES.items():
            scope = resolve_scope(caller, kind)
            if policy.client_catalog:
                self.assertEqual(scope.kind, ScopeKind.COMPANY, kind)
            elif policy.subject_field:
                self.assertEqual(scope, ScopeFilter.own(policy.subject_field, 7), kind)
            else:
                self.assertTrue(scope.is_empty, kind)


class CreateTestCase(SimpleTestCase):

    def test_agency_admin_creates_within_own_company(self):
        caller = Caller(id=5, role='agency_admin', company='Acme')

        self.assertTrue(can_perform(caller, Operation.CREATE, campaign_ref(5, 9, 'Acme', 'Acme')))
        self.assertFalse(can_perform(caller, Operation.CREATE, campaign_ref(5, 9, 'Acme', 'Beta')))

    def test_null_company_admin_creates_only_untenanted_own_rows(self):
        caller = Caller(id=5, role='agency_admin', company=None)

        self.assertTrue(can_perform(caller, Operation.CREATE, campaign_ref(5, 9)))
        self.assertFalse(can_perform(caller, Operation.CREATE, campaign_ref(6, 9)))
        self.assertFalse(can_perform(caller, Operation.CREATE, campaign_ref(5, 9, None, 'Acme')))

    def test_null_company_admin_cannot_add_to_shared_catalog(self):
        caller = Caller(id=5, role='agency_admin', company=None)
        product = ResourceRef(kind='product', owner_id=5, companies=(None,), shared=True)

        self.assertFalse(can_perform(caller, Operation.CREATE, product))

    def test_clients_never_create(self):
        caller = Caller(id=9, role='client', company='Acme')
        self.assertFalse(can_perform(caller, Operation.CREATE, campaign_ref(5, 9, 'Acme', 'Acme')))

    def test_staff_cannot_create_catalog_rows(self):
        caller = Caller(id=5, role='staff', company='Acme')
        product = ResourceRef(kind='product', owner_id=5, companies=('Acme',))
        self.assertFalse(can_perform(caller, Operation.CREATE, product))

    def test_only_super_admin_creates_settings(self):
        setting = ResourceRef(kind='system_setting', access_level='staff')

        self.assertFalse(can_perform(Caller(id=5, role='agency_admin', company='Acme'), Operation.CREATE, setting))
        self.assertTrue(can_perform(Caller(id=1, role='super_admin'), Operation.CREATE, setting))


class ApprovalTestCase(SimpleTestCase):

    def test_client_approves_only_own_resources(self):
        caller = Caller(id=9, role='client', company='Acme')
        post = ResourceRef(kind='post', owner_id=5, subject_id=9, companies=('Acme', 'Acme'))
        other = ResourceRef(kind='post', owner_id=5, subject_id=10, companies=('Acme', 'Acme'))

        self.assertTrue(can_perform(caller, Operation.APPROVE_AS_CLIENT, post))
        self.assertFalse(can_perform(caller, Operation.APPROVE_AS_CLIENT, other))
        self.assertFalse(can_perform(caller, Operation.UPDATE, post))

    def test_agency_side_cannot_approve_as_client(self):
        post = ResourceRef(kind='post', owner_id=5, subject_id=9, companies=('Acme', 'Acme'))
        self.assertFalse(can_perform(Caller(id=5, role='agency_admin', company='Acme'), Operation.APPROVE_AS_CLIENT, post))

    def test_staff_and_null_company_admin_cannot_approve(self):
        request = ResourceRef(kind='purchase_request', owner_id=21, companies=('Acme',))

        self.assertFalse(can_perform(Caller(id=5, role='staff', company='Acme'), Operation.APPROVE_AS_MANAGER, request))
        self.assertFalse(can_perform(Caller(id=5, role='agency_admin'), Operation.APPROVE_AS_MANAGER, request))

    def test_system_settings_level_scope(self):
        caller = Caller(id=5, role='agency_admin', company='Acme')

        self.assertTrue(can_perform(caller, Operation.UPDATE, ResourceRef(kind='system_setting', access_level='staff')))
        self.assertFalse(can_perform(caller, Operation.VIEW, ResourceRef(kind='system_setting', access_level='super_admin')))
        self.assertTrue(resolve_scope(Caller(id=6, role='staff', company='Acme'), 'system_setting').is_empty)


class ScopeFilterEquivalenceTestCase(TestCase):
    """
    For every caller and resource kind, the rows a list query returns are
    exactly the rows can_perform() lets the caller view.
    """

    def setUp(self):
        self.super_admin = make_user('root', 'super_admin')
        self.acme_admin = make_user('acme_admin', 'agency_admin', 'Acme')
        self.acme_staff = make_user('acme_staff', 'staff', 'Acme')
        self.beta_admin = make_user('beta_admin', 'agency_admin', 'Beta')
        self.loose_admin = make_user('loose_admin', 'agency_admin', None)
        self.loose_staff = make_user('loose_staff', 'staff', None)
        self.acme_client = make_user('acme_client', 'client', 'Acme')
        self.beta_client = make_user('beta_client', 'client', 'Beta')
        self.loose_client = make_user('loose_client', 'client', None)
        self.odd_user = make_user('odd', 'manager', 'Acme')
        self.no_profile = User.objects.create_user(username='noprofile', password='pass')
        self.no_profile.profile.delete()

        managers = [self.acme_admin, self.acme_staff, self.beta_admin, self.loose_admin, self.super_admin]
        clients = [self.acme_client, self.beta_client, self.loose_client]
        for index, (manager, client) in enumerate(cartesian(managers, clients)):
            campaign = Campaign.objects.create(name=f'Campaign {index}', manager=manager, client=client)
            Post.objects.create(campaign=campaign, title=f'Post {index}')

        # Manager without a profile: no company, never wildcard
        Campaign.objects.create(name='Orphan', manager=self.no_profile, client=self.loose_client)

        for index, requester in enumerate(managers + [self.loose_staff, self.no_profile]):
            PurchaseRequest.objects.create(
                title=f'Request {index}',
                amount='100.00',
                resource_type='광고비',
                requester=requester,
            )

        # Catalog rows: shared, per company, and a blank company written around save()
        creators = [self.super_admin, self.acme_admin, self.beta_admin, self.loose_admin]
        for index, (company, creator) in enumerate(cartesian([None, 'Acme', 'Beta', 'blank'], creators)):
            product = Product.objects.create(
                name=f'Product {index}',
                sku=f'SKU-{index:03d}',
                cost_price='100.00',
                selling_price='150.00',
                company=company,
                created_by=creator,
            )
            work_type = WorkType.objects.create(name=f'Work type {index}', company=company, created_by=creator)
            if company == 'blank':
                Product.objects.filter(pk=product.pk).update(company='')
                WorkType.objects.filter(pk=work_type.pk).update(company='')

        shared_product = Product.objects.filter(company__isnull=True).first()
        sellers = managers + [self.loose_staff, self.no_profile]
        for index, seller in enumerate(sellers):
            Sale.objects.create(
                product=shared_product,
                sales_person=seller,
                quantity=1,
                actual_cost_price='100.00',
                actual_selling_price='150.00',
                client_name=f'Client {index}',
            )
            MonthlyIncentive.objects.create(year=2024, month=1, user=seller, incentive_amount='10.00')

        for company, uploader in ((None, self.super_admin), ('Acme', self.acme_admin),
                                  ('Beta', self.beta_admin), ('', self.loose_admin)):
            CompanyLogo.objects.create(company=company, logo_url='https://example.com/logo.png', uploaded_by=uploader)

        for level in ('super_admin', 'agency_admin', 'staff'):
            SystemSetting.objects.create(
                setting_key=f'{level}_only',
                setting_value='1',
                setting_type='number',
                access_level=level,
            )

        self.callers = [
            Caller(id=user.pk, role=getattr(getattr(user, 'profile', None), 'role', None),
                   company=getattr(getattr(user, 'profile', None), 'company', None))
            for user in User.objects.select_related('profile').filter(pk__in=[
                self.super_admin.pk, self.acme_admin.pk, self.acme_staff.pk, self.beta_admin.pk,
                self.loose_admin.pk, self.loose_staff.pk, self.acme_client.pk, self.beta_client.pk,
                self.loose_client.pk, self.odd_user.pk,
            ])
        ]

    def assert_equivalent(self, model, kind):
        rows = list(model.objects.all())
        for caller in self.callers:
            listed = set(apply_scope(model.objects.all(), resolve_scope(caller, kind), kind).values_list('pk', flat=True))
            viewable = {
                row.pk for row in rows
                if can_perform(caller, Operation.VIEW, resource_ref_for(row, kind))
            }
            self.assertEqual(listed, viewable, f"{caller.role}/{caller.company} on {kind}")

    def test_campaigns(self):
        self.assert_equivalent(Campaign, 'campaign')

    def test_posts(self):
        self.assert_equivalent(Post, 'post')

    def test_purchase_requests(self):
        self.assert_equivalent(PurchaseRequest, 'purchase_request')

    def test_users(self):
        self.assert_equivalent(User, 'user')

    def test_products(self):
        self.assert_equivalent(Product, 'product')

    def test_work_types(self):
        self.assert_equivalent(WorkType, 'work_type')

    def test_sales(self):
        self.assert_equivalent(Sale, 'sale')

    def test_monthly_incentives(self):
        self.assert_equivalent(MonthlyIncentive, 'monthly_incentive')

    def test_company_logos(self):
        self.assert_equivalent(CompanyLogo, 'company_logo')

    def test_system_settings(self):
        self.assert_equivalent(SystemSetting, 'system_setting')

    def test_every_registered_kind(self):
        models = {
            'campaign': Campaign,
            'post': Post,
            'purchase_request': PurchaseRequest,
            'sale': Sale,
            'product': Product,
            'work_type': WorkType,
            'company_logo': CompanyLogo,
            'monthly_incentive': MonthlyIncentive,
            'user': User,
            'system_setting': SystemSetting,
        }
        self.assertEqual(set(models), set(POLICIES))
        for kind, model in models.items():
            with self.subTest(kind=kind):
                self.assert_equivalent(model, kind)

    def test_blank_company_catalog_row_is_not_shared(self):
        caller = Caller(id=self.acme_client.pk, role='client', company='Acme')
        blank = WorkType.objects.filter(company='').first()
        visible = apply_scope(WorkType.objects.all(), resolve_scope(caller, 'work_type'), 'work_type')

        self.assertFalse(visible.filter(pk=blank.pk).exists())
        self.assertFalse(can_perform(caller, Operation.VIEW, resource_ref_for(blank, 'work_type')))
        self.assertTrue(visible.filter(company__isnull=True).exists())

    def test_staff_lists_only_own_incentive(self):
        caller = Caller(id=self.acme_staff.pk, role='staff', company='Acme')
        visible = apply_scope(
            MonthlyIncentive.objects.all(), resolve_scope(caller, 'monthly_incentive'), 'monthly_incentive'
        )
        self.assertEqual(list(visible.values_list('user_id', flat=True)), [self.acme_staff.pk])

    def test_acme_admin_visible_campaigns(self):
        caller = Caller(id=self.acme_admin.pk, role='agency_admin', company='Acme')
        names = set(
            apply_scope(Campaign.objects.all(), resolve_scope(caller, 'campaign'), 'campaign')
            .values_list('manager__username', 'client__username')
        )
        # Own campaigns, Acme-managed ones and any with an Acme client
        self.assertIn(('acme_admin', 'beta_client'), names)
        self.assertIn(('beta_admin', 'acme_client'), names)
        self.assertNotIn(('beta_admin', 'beta_client'), names)
        self.assertNotIn(('noprofile', 'loose_client'), names)


class ResolvePathTestCase(TestCase):

    def test_missing_profile_resolves_to_none(self):
        user = User.objects.create_user(username='bare', password='pass')
        user.profile.delete()
        user = User.objects.get(pk=user.pk)

        self.assertIsNone(resolve_path(user, 'profile__company'))

    def test_null_foreign_key_resolves_to_none(self):
        request = PurchaseRequest(title='x', amount='1', resource_type='기타')
        self.assertIsNone(resolve_path(request, 'campaign__manager_id'))
