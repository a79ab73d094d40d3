"""
Test suite for the balances module
Tests: Balance requests (submit, approve, reject), ledger, dealer overview, recalculation command
"""
from decimal import Decimal
from io import StringIO

from django.core.cache import cache
from django.core.management import call_command
from django.test import TestCase
from rest_framework import status

from autodashboard.balances.models import BalanceRequest, Transaction
from autodashboard.balances.utils import (
    BalanceRequestProcessed, apply_balance_change, approve_balance_request,
)
from autodashboard.core.models import AuditLog
from autodashboard.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from autodashboard.notifications.models import Notification


class DealerBalanceRequestTests(TestCase):
    """Test dealer-side balance endpoints"""

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.admin = TestDataFactory.create_admin()
        self.dealer = TestDataFactory.create_dealer()
        self.client.authenticate_user(self.dealer)

    def test_submit_request_notifies_admin(self):
        response = self.client.post('/api/v1/dealer/balance/requests/', {
            'amount': '750.00',
            'receipt_url': 'https://cdn.example.com/receipts/1/r-lg.webp',
            'comment': ' bank transfer ',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['message'], 'Balance request submitted successfully')

        balance_request = BalanceRequest.objects.get(pk=response.data['id'])
        self.assertEqual(balance_request.status, BalanceRequest.STATUS_PENDING)
        self.assertEqual(balance_request.comment, 'bank transfer')

        notification = Notification.objects.get(user=self.admin)
        self.assertEqual(notification.title_en, 'New Balance Top-up Request')
        self.assertEqual(notification.message_en, 'A dealer has requested a balance top-up of $750.')

    def test_amount_validation(self):
        response = self.client.post('/api/v1/dealer/balance/requests/', {
            'amount': '0', 'receipt_url': 'https://cdn.example.com/r.webp'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Amount must be greater than 0')

        response = self.client.post('/api/v1/dealer/balance/requests/', {
            'amount': '2000000', 'receipt_url': 'https://cdn.example.com/r.webp'
        }, format='json')
        self.assertEqual(response.data['message'], 'Amount cannot exceed $1,000,000')

    def test_receipt_required(self):
        response = self.client.post('/api/v1/dealer/balance/requests/', {'amount': '100'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Receipt is required')

    def test_list_only_own_requests(self):
        TestDataFactory.create_balance_request(self.dealer)
        TestDataFactory.create_balance_request(TestDataFactory.create_dealer())
        response = self.client.get('/api/v1/dealer/balance/requests/')
        self.assertEqual(response.data['totalCount'], 1)

    def test_overview(self):
        apply_balance_change(self.dealer.pk, Decimal('1000.00'), Transaction.TYPE_DEPOSIT, 'Deposit')
        apply_balance_change(self.dealer.pk, Decimal('-300.00'), Transaction.TYPE_INVOICE_PAYMENT, 'Invoice')
        TestDataFactory.create_balance_request(self.dealer, amount=Decimal('200.00'))

        response = self.client.get('/api/v1/dealer/balance/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['currentBalance'], 700.0)
        self.assertEqual(response.data['totalDeposits'], 1000.0)
        self.assertEqual(response.data['totalWithdrawals'], 300.0)
        self.assertEqual(response.data['pendingRequestsCount'], 1)
        self.assertEqual(response.data['pendingRequestsAmount'], 200.0)

    def test_transactions_filter_by_type(self):
        apply_balance_change(self.dealer.pk, Decimal('1000.00'), Transaction.TYPE_DEPOSIT, 'Deposit')
        apply_balance_change(self.dealer.pk, Decimal('-50.00'), Transaction.TYPE_WITHDRAWAL, 'Fee')
        response = self.client.get('/api/v1/dealer/balance/transactions/?type=WITHDRAWAL')
        self.assertEqual(response.data['totalCount'], 1)
        self.assertEqual(response.data['items'][0]['description'], 'Fee')

    def test_admin_cannot_use_dealer_endpoints(self):
        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/v1/dealer/balance/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class AdminBalanceRequestTests(TestCase):
    """Test approve / reject processing"""

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.admin = TestDataFactory.create_admin()
        self.client.authenticate_user(self.admin)
        self.dealer = TestDataFactory.create_dealer(balance=Decimal('100.00'))
        self.balance_request = TestDataFactory.create_balance_request(self.dealer, amount=Decimal('500.00'))

    def test_approve_credits_dealer(self):
        response = self.client.post(
            f'/api/v1/balance-requests/{self.balance_request.pk}/approve/', {'comment': 'Received'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        self.dealer.refresh_from_db()
        self.assertEqual(self.dealer.balance, Decimal('600.00'))

        ledger_row = Transaction.objects.get(dealer=self.dealer)
        self.assertEqual(ledger_row.type, Transaction.TYPE_DEPOSIT)
        self.assertEqual(ledger_row.amount, Decimal('500.00'))
        self.assertEqual(ledger_row.balance_after, Decimal('600.00'))
        self.assertEqual(ledger_row.description, 'Balance top-up approved: Received')
        self.assertEqual(ledger_row.reference_id, str(self.balance_request.pk))

        self.balance_request.refresh_from_db()
        self.assertEqual(self.balance_request.status, BalanceRequest.STATUS_APPROVED)
        self.assertEqual(self.balance_request.processed_by, self.admin)
        self.assertIsNotNone(self.balance_request.processed_at)

        self.assertTrue(Notification.objects.filter(user=self.dealer, title_en='Balance Top-up Approved').exists())
        self.assertTrue(AuditLog.objects.filter(action='balance_approve').exists())

    def test_request_processed_only_once(self):
        self.client.post(f'/api/v1/balance-requests/{self.balance_request.pk}/approve/')
        response = self.client.post(f'/api/v1/balance-requests/{self.balance_request.pk}/approve/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Balance request has already been processed')
        response = self.client.post(f'/api/v1/balance-requests/{self.balance_request.pk}/reject/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        self.dealer.refresh_from_db()
        self.assertEqual(self.dealer.balance, Decimal('600.00'))
        self.assertEqual(Transaction.objects.count(), 1)

    def test_service_raises_when_processed(self):
        approve_balance_request(self.balance_request.pk, self.admin)
        with self.assertRaises(BalanceRequestProcessed):
            approve_balance_request(self.balance_request.pk, self.admin)

    def test_reject_with_reason(self):
        response = self.client.post(
            f'/api/v1/balance-requests/{self.balance_request.pk}/reject/', {'comment': 'Blurry receipt'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.dealer.refresh_from_db()
        self.assertEqual(self.dealer.balance, Decimal('100.00'))
        self.assertFalse(Transaction.objects.exists())

        notification = Notification.objects.get(user=self.dealer)
        self.assertEqual(notification.message_en, 'Your request to top up $500 has been rejected. Reason: Blurry receipt')

    def test_missing_request(self):
        response = self.client.post('/api/v1/balance-requests/99999/approve/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Balance request not found')

    def test_stats(self):
        TestDataFactory.create_balance_request(self.dealer, amount=Decimal('250.00'), status=BalanceRequest.STATUS_APPROVED)
        TestDataFactory.create_balance_request(self.dealer, status=BalanceRequest.STATUS_REJECTED)
        response = self.client.get('/api/v1/balance-requests/stats/')
        self.assertEqual(response.data['pendingCount'], 1)
        self.assertEqual(response.data['pendingTotal'], 500.0)
        self.assertEqual(response.data['approvedTotal'], 250.0)
        self.assertEqual(response.data['rejectedCount'], 1)

    def test_list_filters_by_status(self):
        TestDataFactory.create_balance_request(self.dealer, status=BalanceRequest.STATUS_APPROVED)
        response = self.client.get('/api/v1/balance-requests/?status=PENDING')
        self.assertEqual(response.data['totalCount'], 1)
        self.assertEqual(response.data['items'][0]['id'], self.balance_request.pk)


class RecalculateDealerBalancesTests(TestCase):

    def setUp(self):
        self.dealer = TestDataFactory.create_dealer()
        apply_balance_change(self.dealer.pk, Decimal('400.00'), Transaction.TYPE_DEPOSIT, 'Deposit')
        type(self.dealer).objects.filter(pk=self.dealer.pk).update(balance=Decimal('999.00'))

    def test_dry_run_keeps_balance(self):
        out = StringIO()
        call_command('recalculate_dealer_balances', '--dry-run', stdout=out)
        self.dealer.refresh_from_db()
        self.assertEqual(self.dealer.balance, Decimal('999.00'))
        self.assertIn('1 balance(s) differ', out.getvalue())

    def test_recalculate(self):
        out = StringIO()
        call_command('recalculate_dealer_balances', stdout=out)
        self.dealer.refresh_from_db()
        self.assertEqual(self.dealer.balance, Decimal('400.00'))
        self.assertIn('1 balance(s) updated', out.getvalue())
