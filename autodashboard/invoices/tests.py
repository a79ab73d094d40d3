"""
Test suite for the invoices module
Tests: numbering, creation guards, admin mark-paid/cancel, dealer payment, PDF download
"""
from decimal import Decimal

from django.core.cache import cache
from django.test import TestCase
from django.utils import timezone
from rest_framework import status

from autodashboard.balances.models import Transaction
from autodashboard.core.models import AuditLog
from autodashboard.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from autodashboard.invoices.models import Invoice
from autodashboard.invoices.pdf import pdf_text
from autodashboard.invoices.utils import generate_invoice_number, uninvoiced_vehicles
from autodashboard.notifications.models import Notification


class InvoiceNumberTests(TestCase):

    def test_first_number_of_year(self):
        self.assertEqual(generate_invoice_number(), f'INV-{timezone.now().year}-00001')

    def test_skips_taken_numbers(self):
        dealer = TestDataFactory.create_dealer()
        year = timezone.now().year
        TestDataFactory.create_invoice(dealer, invoice_number=f'INV-{year}-00002')
        self.assertEqual(generate_invoice_number(), f'INV-{year}-00003')


class AdminInvoiceTests(TestCase):
    """Test invoice creation and admin actions"""

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.admin = TestDataFactory.create_admin()
        self.client.authenticate_user(self.admin)
        self.dealer = TestDataFactory.create_dealer(balance=Decimal('1000.00'))
        self.vehicle_a = TestDataFactory.create_vehicle(dealer=self.dealer, transportation_price=Decimal('1500.00'))
        self.vehicle_b = TestDataFactory.create_vehicle(dealer=self.dealer, transportation_price=Decimal('1250.50'))

    def _create(self, vehicle_ids, dealer=None):
        return self.client.post('/api/v1/invoices/', {
            'dealer_id': (dealer or self.dealer).pk,
            'vehicle_ids': vehicle_ids,
        }, format='json')

    def test_create_invoice(self):
        response = self._create([self.vehicle_a.pk, self.vehicle_b.pk])
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        invoice = Invoice.objects.get(pk=response.data['id'])
        self.assertEqual(invoice.invoice_number, response.data['invoice_number'])
        self.assertEqual(invoice.total_amount, Decimal('2750.50'))
        self.assertEqual(invoice.status, Invoice.STATUS_PENDING)
        self.assertEqual(invoice.items.count(), 2)
        item = invoice.items.get(vehicle=self.vehicle_a)
        self.assertTrue(item.description.endswith(f'- VIN: {self.vehicle_a.vin}'))

        self.assertTrue(Notification.objects.filter(user=self.dealer, type=Notification.TYPE_INVOICE).exists())
        self.assertTrue(AuditLog.objects.filter(action='invoice_create').exists())

    def test_vehicle_ids_required(self):
        response = self._create([])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Select at least one vehicle')

    def test_vehicle_of_other_dealer_refused(self):
        foreign = TestDataFactory.create_vehicle()
        response = self._create([self.vehicle_a.pk, foreign.pk])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Some vehicles were not found or do not belong to this dealer')
        self.assertFalse(Invoice.objects.exists())

    def test_vehicle_already_invoiced(self):
        TestDataFactory.create_invoice(self.dealer, vehicles=[self.vehicle_a])
        response = self._create([self.vehicle_a.pk])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], f'Some vehicles already have invoices: {self.vehicle_a.vin}')

    def test_cancelled_invoice_frees_vehicles(self):
        TestDataFactory.create_invoice(self.dealer, vehicles=[self.vehicle_a], status=Invoice.STATUS_CANCELLED)
        self.assertIn(self.vehicle_a, list(uninvoiced_vehicles(self.dealer)))
        response = self._create([self.vehicle_a.pk])
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_uninvoiced_vehicles_endpoint(self):
        TestDataFactory.create_invoice(self.dealer, vehicles=[self.vehicle_a])
        response = self.client.get(f'/api/v1/invoices/dealers/{self.dealer.pk}/vehicles/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([v['id'] for v in response.data['vehicles']], [self.vehicle_b.pk])

    def test_mark_paid_from_balance_may_go_negative(self):
        invoice = TestDataFactory.create_invoice(self.dealer, vehicles=[self.vehicle_a])
        response = self.client.post(f'/api/v1/invoices/{invoice.pk}/mark-paid/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        invoice.refresh_from_db()
        self.assertEqual(invoice.status, Invoice.STATUS_PAID)
        self.assertTrue(invoice.paid_from_balance)
        self.assertIsNotNone(invoice.paid_at)

        self.dealer.refresh_from_db()
        self.assertEqual(self.dealer.balance, Decimal('-500.00'))
        ledger_row = Transaction.objects.get(dealer=self.dealer)
        self.assertEqual(ledger_row.type, Transaction.TYPE_INVOICE_PAYMENT)
        self.assertEqual(ledger_row.amount, Decimal('-1500.00'))

    def test_mark_paid_externally(self):
        invoice = TestDataFactory.create_invoice(self.dealer, vehicles=[self.vehicle_a])
        response = self.client.post(
            f'/api/v1/invoices/{invoice.pk}/mark-paid/', {'from_balance': False}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.dealer.refresh_from_db()
        self.assertEqual(self.dealer.balance, Decimal('1000.00'))
        self.assertFalse(Transaction.objects.exists())

    def test_only_pending_can_be_cancelled(self):
        invoice = TestDataFactory.create_invoice(self.dealer, vehicles=[self.vehicle_a], status=Invoice.STATUS_PAID)
        response = self.client.post(f'/api/v1/invoices/{invoice.pk}/cancel/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Only pending invoices can be cancelled')

    def test_cancel(self):
        invoice = TestDataFactory.create_invoice(self.dealer, vehicles=[self.vehicle_a])
        response = self.client.post(f'/api/v1/invoices/{invoice.pk}/cancel/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        invoice.refresh_from_db()
        self.assertEqual(invoice.status, Invoice.STATUS_CANCELLED)

    def test_missing_invoice(self):
        response = self.client.post('/api/v1/invoices/99999/cancel/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_stats(self):
        TestDataFactory.create_invoice(self.dealer, vehicles=[self.vehicle_a])
        TestDataFactory.create_invoice(self.dealer, vehicles=[self.vehicle_b], status=Invoice.STATUS_PAID)
        response = self.client.get('/api/v1/invoices/stats/')
        self.assertEqual(response.data['totalInvoices'], 2)
        self.assertEqual(response.data['pendingAmount'], 1500.0)
        self.assertEqual(response.data['paidAmount'], 1250.5)

    def test_pdf_download(self):
        invoice = TestDataFactory.create_invoice(self.dealer, vehicles=[self.vehicle_a])
        response = self.client.get(f'/api/v1/invoices/{invoice.pk}/pdf/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertIn(invoice.invoice_number, response['Content-Disposition'])
        self.assertTrue(response.content.startswith(b'%PDF'))


class DealerInvoiceTests(TestCase):
    """Test dealer invoice views and paying from balance"""

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.dealer = TestDataFactory.create_dealer(balance=Decimal('2000.00'))
        self.client.authenticate_user(self.dealer)
        self.invoice = TestDataFactory.create_invoice(self.dealer)

    def test_pay_from_balance(self):
        response = self.client.post(f'/api/v1/dealer/invoices/{self.invoice.pk}/pay/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['newBalance'], 500.0)
        self.invoice.refresh_from_db()
        self.assertEqual(self.invoice.status, Invoice.STATUS_PAID)

    def test_insufficient_balance(self):
        self.dealer.balance = Decimal('1000.00')
        self.dealer.save()
        response = self.client.post(f'/api/v1/dealer/invoices/{self.invoice.pk}/pay/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Insufficient balance. You need $500 more.')
        self.invoice.refresh_from_db()
        self.assertEqual(self.invoice.status, Invoice.STATUS_PENDING)

    def test_pay_twice(self):
        self.client.post(f'/api/v1/dealer/invoices/{self.invoice.pk}/pay/')
        response = self.client.post(f'/api/v1/dealer/invoices/{self.invoice.pk}/pay/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Only pending invoices can be paid')

    def test_other_dealers_invoice_is_not_found(self):
        foreign = TestDataFactory.create_invoice(TestDataFactory.create_dealer(balance=Decimal('5000.00')))
        response = self.client.post(f'/api/v1/dealer/invoices/{foreign.pk}/pay/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        response = self.client.get(f'/api/v1/invoices/{foreign.pk}/pdf/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_detail_includes_current_balance(self):
        response = self.client.get(f'/api/v1/dealer/invoices/{self.invoice.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['currentBalance'], 2000.0)
        self.assertEqual(len(response.data['items']), 1)

    def test_list_and_stats(self):
        TestDataFactory.create_invoice(TestDataFactory.create_dealer())
        response = self.client.get('/api/v1/dealer/invoices/')
        self.assertEqual(response.data['totalCount'], 1)
        response = self.client.get('/api/v1/dealer/invoices/stats/')
        self.assertEqual(response.data['pendingCount'], 1)


class PdfTextTests(TestCase):

    def test_non_latin_text_is_replaced(self):
        self.assertEqual(pdf_text('თბილისი'), '???????')
        self.assertEqual(pdf_text(None), '')
        self.assertEqual(pdf_text(12), '12')
