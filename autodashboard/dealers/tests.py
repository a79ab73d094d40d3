"""
Test suite for the dealers module
Tests: dealer account CRUD, status toggle, delete guards
"""
from decimal import Decimal
from io import StringIO

from django.core.cache import cache
from django.core.management import call_command
from django.test import TestCase
from rest_framework import status

from autodashboard.balances.utils import apply_balance_change
from autodashboard.balances.models import Transaction
from autodashboard.core.models import User, AuditLog
from autodashboard.core.test_utils import TestDataFactory, AuthenticatedAPIClient


class DealerManagementTests(TestCase):

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_admin())

    def _payload(self, **overrides):
        payload = {
            'email': 'New.Dealer@Example.com',
            'password': 'dealerpass1',
            'name': 'Giorgi Motors',
            'phone': '+995555000111',
            'address': 'Tbilisi, Kazbegi Ave 10',
            'company_name': '  ',
        }
        payload.update(overrides)
        return payload

    def test_create_dealer(self):
        response = self.client.post('/api/v1/dealers/', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        dealer = User.objects.get(pk=response.data['id'])
        self.assertEqual(dealer.email, 'new.dealer@example.com')
        self.assertEqual(dealer.role, User.ROLE_DEALER)
        self.assertIsNone(dealer.company_name)
        self.assertTrue(dealer.check_password('dealerpass1'))

    def test_create_requires_password(self):
        payload = self._payload()
        del payload['password']
        response = self.client.post('/api/v1/dealers/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Password is required')

    def test_duplicate_email_case_insensitive(self):
        TestDataFactory.create_dealer(email='new.dealer@example.com')
        response = self.client.post('/api/v1/dealers/', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'A user with this email already exists')

    def test_discount_bounds(self):
        response = self.client.post('/api/v1/dealers/', self._payload(discount='150'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Discount must be between 0 and 100')

    def test_list_search_and_vehicle_count(self):
        dealer = TestDataFactory.create_dealer(name='Batumi Cars', company_name='Batumi Cars LLC')
        TestDataFactory.create_vehicle(dealer=dealer)
        TestDataFactory.create_vehicle(dealer=dealer, is_archived=True)
        TestDataFactory.create_dealer(name='Someone Else')
        response = self.client.get('/api/v1/dealers/?search=batumi')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['totalCount'], 1)
        self.assertEqual(response.data['items'][0]['vehicleCount'], 1)

    def test_detail_includes_transactions_and_pending_invoices(self):
        dealer = TestDataFactory.create_dealer()
        apply_balance_change(dealer.pk, Decimal('250.00'), Transaction.TYPE_DEPOSIT, 'Opening deposit')
        TestDataFactory.create_invoice(dealer)
        response = self.client.get(f'/api/v1/dealers/{dealer.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['recent_transactions']), 1)
        self.assertEqual(response.data['pending_invoices_count'], 1)
        self.assertEqual(response.data['pending_invoices_total'], 1500.0)

    def test_update_password_optional(self):
        dealer = TestDataFactory.create_dealer()
        response = self.client.patch(f'/api/v1/dealers/{dealer.pk}/', {'name': 'Renamed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        dealer.refresh_from_db()
        self.assertEqual(dealer.name, 'Renamed')
        self.assertTrue(dealer.check_password('testpass123'))

    def test_create_with_balance_survives_ledger_recalculation(self):
        response = self.client.post('/api/v1/dealers/', self._payload(balance='500.00'), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        dealer = User.objects.get(pk=response.data['id'])
        self.assertEqual(dealer.balance, Decimal('500.00'))
        adjustment = Transaction.objects.get(dealer=dealer)
        self.assertEqual(adjustment.type, Transaction.TYPE_ADJUSTMENT)
        self.assertEqual(adjustment.balance_after, Decimal('500.00'))

        call_command('recalculate_dealer_balances', stdout=StringIO())
        dealer.refresh_from_db()
        self.assertEqual(dealer.balance, Decimal('500.00'))

    def test_update_balance_posts_difference_to_ledger(self):
        dealer = TestDataFactory.create_dealer()
        apply_balance_change(dealer.pk, Decimal('200.00'), Transaction.TYPE_DEPOSIT, 'Opening deposit')
        response = self.client.patch(f'/api/v1/dealers/{dealer.pk}/', {'balance': '150.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        dealer.refresh_from_db()
        self.assertEqual(dealer.balance, Decimal('150.00'))
        adjustment = Transaction.objects.get(dealer=dealer, type=Transaction.TYPE_ADJUSTMENT)
        self.assertEqual(adjustment.amount, Decimal('-50.00'))

        call_command('recalculate_dealer_balances', stdout=StringIO())
        dealer.refresh_from_db()
        self.assertEqual(dealer.balance, Decimal('150.00'))

    def test_update_without_balance_keeps_ledger_untouched(self):
        dealer = TestDataFactory.create_dealer()
        apply_balance_change(dealer.pk, Decimal('80.00'), Transaction.TYPE_DEPOSIT, 'Opening deposit')
        response = self.client.patch(f'/api/v1/dealers/{dealer.pk}/', {'name': 'Renamed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        dealer.refresh_from_db()
        self.assertEqual(dealer.balance, Decimal('80.00'))
        self.assertFalse(Transaction.objects.filter(type=Transaction.TYPE_ADJUSTMENT).exists())

    def test_toggle_status(self):
        dealer = TestDataFactory.create_dealer()
        response = self.client.post(f'/api/v1/dealers/{dealer.pk}/toggle-status/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Dealer blocked successfully')
        dealer.refresh_from_db()
        self.assertEqual(dealer.status, User.STATUS_BLOCKED)
        self.assertTrue(AuditLog.objects.filter(action='dealer_status_toggle').exists())

        response = self.client.post(f'/api/v1/dealers/{dealer.pk}/toggle-status/')
        self.assertEqual(response.data['message'], 'Dealer activated successfully')

    def test_blocked_dealer_is_rejected(self):
        dealer = TestDataFactory.create_dealer()
        dealer.status = User.STATUS_BLOCKED
        dealer.save()
        self.client.authenticate_user(dealer)
        response = self.client.get('/api/v1/dealer/vehicles/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_delete_refused_with_vehicles(self):
        dealer = TestDataFactory.create_dealer()
        TestDataFactory.create_vehicle(dealer=dealer)
        response = self.client.delete(f'/api/v1/dealers/{dealer.pk}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Cannot delete: dealer has 1 vehicle(s)')

    def test_delete_dealer(self):
        dealer = TestDataFactory.create_dealer()
        response = self.client.delete(f'/api/v1/dealers/{dealer.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(User.objects.filter(pk=dealer.pk).exists())

    def test_admin_is_not_a_dealer(self):
        admin = TestDataFactory.create_admin()
        response = self.client.get(f'/api/v1/dealers/{admin.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
