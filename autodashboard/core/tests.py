"""
Test suite for the core module
Tests: Authentication, Password Reset, Dealer Profile, System Settings, Audit Logs, Health
"""
from datetime import timedelta
from io import StringIO

from django.core import mail
from django.core.cache import cache, caches
from django.core.management import call_command
from django.test import TestCase
from django.utils import timezone
from rest_framework import status

from autodashboard.catalog.models import Status, Make, VehicleModel
from autodashboard.core.models import User, SystemSetting, PasswordResetToken, AuditLog
from autodashboard.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from autodashboard.core.throttling import LoginRateThrottle, CalculatorRateThrottle
from autodashboard.core.utils import create_audit_log
from autodashboard.locations.models import Country, Port


class AuthenticationTests(TestCase):
    """Test login, refresh and the current-user endpoint"""

    def setUp(self):
        cache.clear()
        caches['throttle'].clear()
        self.client = AuthenticatedAPIClient()
        self.dealer = TestDataFactory.create_dealer(email='dealer@test.com', password='secret123')

    def test_login_success(self):
        response = self.client.post('/api/v1/auth/login/', {
            'email': 'dealer@test.com', 'password': 'secret123'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)
        self.assertEqual(response.data['user']['role'], User.ROLE_DEALER)

    def test_login_normalizes_email(self):
        response = self.client.post('/api/v1/auth/login/', {
            'email': '  Dealer@Test.com ', 'password': 'secret123'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_login_wrong_password(self):
        response = self.client.post('/api/v1/auth/login/', {
            'email': 'dealer@test.com', 'password': 'wrong-password'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_blocked_dealer(self):
        self.dealer.status = User.STATUS_BLOCKED
        self.dealer.save()
        response = self.client.post('/api/v1/auth/login/', {
            'email': 'dealer@test.com', 'password': 'secret123'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me(self):
        self.client.authenticate_user(self.dealer)
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['email'], 'dealer@test.com')

    def test_me_unauthenticated(self):
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_blocked_user_rejected_with_valid_token(self):
        self.client.authenticate_user(self.dealer)
        self.dealer.status = User.STATUS_BLOCKED
        self.dealer.save()
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class PasswordResetTests(TestCase):
    """Test the password reset flow"""

    def setUp(self):
        cache.clear()
        caches['throttle'].clear()
        self.client = AuthenticatedAPIClient()
        self.dealer = TestDataFactory.create_dealer(email='reset@test.com', password='oldpass123')

    def test_request_sends_email(self):
        response = self.client.post('/api/v1/auth/password-reset/', {'email': 'reset@test.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertEqual(PasswordResetToken.objects.filter(email='reset@test.com').count(), 1)
        self.assertEqual(len(mail.outbox), 1)
        self.assertIn('reset-password?token=', mail.outbox[0].body)

    def test_request_unknown_email_gives_same_answer(self):
        response = self.client.post('/api/v1/auth/password-reset/', {'email': 'nobody@test.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertFalse(PasswordResetToken.objects.exists())
        self.assertEqual(len(mail.outbox), 0)

    def test_new_request_replaces_old_token(self):
        self.client.post('/api/v1/auth/password-reset/', {'email': 'reset@test.com'}, format='json')
        self.client.post('/api/v1/auth/password-reset/', {'email': 'reset@test.com'}, format='json')
        self.assertEqual(PasswordResetToken.objects.filter(email='reset@test.com').count(), 1)

    def _token(self, **extra):
        defaults = {
            'token': 'a' * 64,
            'email': 'reset@test.com',
            'expires_at': timezone.now() + timedelta(hours=1),
        }
        defaults.update(extra)
        return PasswordResetToken.objects.create(**defaults)

    def test_validate_token(self):
        self._token()
        response = self.client.get(f'/api/v1/auth/password-reset/{"a" * 64}/')
        self.assertTrue(response.data['valid'])
        self.assertEqual(response.data['email'], 'reset@test.com')

    def test_validate_expired_token(self):
        self._token(expires_at=timezone.now() - timedelta(minutes=1))
        response = self.client.get(f'/api/v1/auth/password-reset/{"a" * 64}/')
        self.assertFalse(response.data['valid'])
        self.assertEqual(response.data['message'], 'This reset link has expired')

    def test_confirm_sets_password_and_marks_token_used(self):
        token = self._token()
        response = self.client.post('/api/v1/auth/password-reset/confirm/', {
            'token': token.token, 'password': 'newpass123', 'confirm_password': 'newpass123'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.dealer.refresh_from_db()
        self.assertTrue(self.dealer.check_password('newpass123'))
        token.refresh_from_db()
        self.assertIsNotNone(token.used_at)

    def test_confirm_used_token(self):
        token = self._token(used_at=timezone.now())
        response = self.client.post('/api/v1/auth/password-reset/confirm/', {
            'token': token.token, 'password': 'newpass123', 'confirm_password': 'newpass123'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'This reset link has already been used')


class DealerProfileTests(TestCase):
    """Test dealer self-service profile endpoints"""

    def setUp(self):
        cache.clear()
        caches['throttle'].clear()
        self.dealer = TestDataFactory.create_dealer(password='oldpass123', name='Original Name')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.dealer)

    def test_get_profile(self):
        response = self.client.get('/api/v1/dealer/profile/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['email'], self.dealer.email)

    def test_update_only_phone_and_address(self):
        response = self.client.patch('/api/v1/dealer/profile/', {
            'phone': '599000111', 'address': 'Batumi, Gorgiladze 10', 'name': 'Hacked'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.dealer.refresh_from_db()
        self.assertEqual(self.dealer.phone, '599000111')
        self.assertEqual(self.dealer.name, 'Original Name')

    def test_update_short_phone(self):
        response = self.client.patch('/api/v1/dealer/profile/', {'phone': '12'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Phone must be at least 5 characters')

    def test_change_password(self):
        response = self.client.post('/api/v1/dealer/profile/change-password/', {
            'current_password': 'oldpass123', 'new_password': 'newpass123', 'confirm_password': 'newpass123'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.dealer.refresh_from_db()
        self.assertTrue(self.dealer.check_password('newpass123'))

    def test_change_password_wrong_current(self):
        response = self.client.post('/api/v1/dealer/profile/change-password/', {
            'current_password': 'wrong', 'new_password': 'newpass123', 'confirm_password': 'newpass123'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Current password is incorrect')

    def test_admin_cannot_use_dealer_profile(self):
        self.client.authenticate_user(TestDataFactory.create_admin())
        response = self.client.get('/api/v1/dealer/profile/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class SystemSettingTests(TestCase):

    def setUp(self):
        cache.clear()
        caches['throttle'].clear()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_admin())

    def test_upsert_and_get(self):
        response = self.client.post('/api/v1/settings/system/', {'key': 'company_name', 'value': 'Auto'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.client.post('/api/v1/settings/system/', {'key': 'company_name', 'value': 'Auto GE'}, format='json')
        self.assertEqual(SystemSetting.objects.get(key='company_name').value, 'Auto GE')

        response = self.client.get('/api/v1/settings/system/company_name/')
        self.assertEqual(response.data['value'], 'Auto GE')

    def test_missing_setting(self):
        response = self.client.get('/api/v1/settings/system/missing/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_dealer_forbidden(self):
        self.client.authenticate_user(TestDataFactory.create_dealer())
        response = self.client.get('/api/v1/settings/system/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class AuditLogTests(TestCase):

    def setUp(self):
        cache.clear()
        caches['throttle'].clear()
        self.admin = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_create_audit_log_skips_missing_fields(self):
        self.assertIsNone(create_audit_log(user=self.admin, action='create', model_name='Make'))
        self.assertFalse(AuditLog.objects.exists())

    def test_list_filters_by_action(self):
        create_audit_log(user=self.admin, action='create', model_name='Make', object_id=1)
        create_audit_log(user=self.admin, action='delete', model_name='Make', object_id=1)
        response = self.client.get('/api/v1/audit-logs/?action=delete')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['totalCount'], 1)
        self.assertEqual(response.data['items'][0]['action'], 'delete')


class HealthCheckTests(TestCase):

    def test_health(self):
        response = AuthenticatedAPIClient().get('/api/v1/health/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'ok')


class SeedReferenceDataTests(TestCase):

    def test_seed_is_idempotent(self):
        call_command('seed_reference_data', stdout=StringIO())
        call_command('seed_reference_data', stdout=StringIO())

        self.assertEqual(Country.objects.count(), 3)
        self.assertEqual(Status.objects.count(), 9)
        self.assertTrue(Port.objects.filter(name='Poti', is_destination=True).exists())
        self.assertTrue(VehicleModel.objects.filter(make__name='Toyota', name='Camry').exists())
        self.assertEqual(Make.objects.filter(name='Toyota').count(), 1)
        admin = User.objects.get(email='admin@autodashboard.ge')
        self.assertEqual(admin.role, User.ROLE_ADMIN)
        self.assertTrue(admin.check_password('admin123'))

    def test_skip_admin(self):
        call_command('seed_reference_data', '--skip-admin', stdout=StringIO())
        self.assertFalse(User.objects.filter(email='admin@autodashboard.ge').exists())


class CacheInvalidationTests(TestCase):
    """Data cache invalidation leaves request throttle history alone"""

    def setUp(self):
        cache.clear()
        caches['throttle'].clear()

    def test_model_save_keeps_throttle_history(self):
        caches['throttle'].set('throttle_login_127.0.0.1', [1.0, 2.0])
        cache.set('dashboard_stats:abc', {'totalDealers': 1})

        with self.captureOnCommitCallbacks(execute=True):
            TestDataFactory.create_vehicle()

        self.assertIsNone(cache.get('dashboard_stats:abc'))
        self.assertEqual(caches['throttle'].get('throttle_login_127.0.0.1'), [1.0, 2.0])

    def test_throttles_use_throttle_cache(self):
        self.assertIs(LoginRateThrottle.cache, caches['throttle'])
        self.assertIs(CalculatorRateThrottle.cache, caches['throttle'])
