"""
Test suite for the reports module
Tests: admin/dealer/ports dashboards, recent activity, reports, exports
"""
from datetime import date, timedelta
from decimal import Decimal
from io import BytesIO

from django.core.cache import cache
from django.test import TestCase
from django.utils import timezone
from openpyxl import load_workbook
from rest_framework import status

from autodashboard.balances.utils import approve_balance_request
from autodashboard.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from autodashboard.invoices.models import Invoice
from autodashboard.reports.queries import get_monthly_trends, get_status_distribution


class AdminDashboardTests(TestCase):

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.admin = TestDataFactory.create_admin()
        self.client.authenticate_user(self.admin)

    def test_dashboard_counts(self):
        dealer = TestDataFactory.create_dealer()
        purchased = TestDataFactory.create_status(order=1, name_en='Purchased')
        TestDataFactory.create_vehicle(dealer=dealer, status=purchased)
        TestDataFactory.create_vehicle(dealer=dealer, status=purchased, is_archived=True)
        TestDataFactory.create_balance_request(dealer, amount=Decimal('300.00'))

        response = self.client.get('/api/v1/dashboard/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['activeVehicles'], 1)
        self.assertEqual(response.data['archivedVehicles'], 1)
        self.assertEqual(response.data['pendingBalanceRequests'], 1)
        self.assertEqual(response.data['totalPendingAmount'], 300.0)
        purchased_row = next(row for row in response.data['vehiclesByStatus'] if row['statusId'] == purchased.pk)
        self.assertEqual(purchased_row['count'], 1)

    def test_dashboard_is_cached_until_invalidated(self):
        self.client.get('/api/v1/dashboard/')
        TestDataFactory.create_dealer()
        response = self.client.get('/api/v1/dashboard/')
        self.assertEqual(response.data['totalDealers'], 0)

        with self.captureOnCommitCallbacks(execute=True):
            TestDataFactory.create_dealer()
        response = self.client.get('/api/v1/dashboard/')
        self.assertEqual(response.data['totalDealers'], 2)

    def test_recent_activity_newest_first(self):
        dealer = TestDataFactory.create_dealer(name='Kutaisi Auto')
        TestDataFactory.create_vehicle(dealer=dealer)
        TestDataFactory.create_balance_request(dealer)
        response = self.client.get('/api/v1/dashboard/activity/?limit=3')
        activities = response.data['activities']
        self.assertEqual(len(activities), 3)
        timestamps = [activity['createdAt'] for activity in activities]
        self.assertEqual(timestamps, sorted(timestamps, reverse=True))
        self.assertEqual(activities[0]['type'], 'balance_request')

    def test_ports_dashboard(self):
        en_route = TestDataFactory.create_status(order=2, name_en='En route', color='')
        shipped = TestDataFactory.create_status(order=5, name_en='Shipped', color='#111111')
        port = TestDataFactory.create_port(name='Savannah')
        TestDataFactory.create_vehicle(status=en_route, port=port)
        TestDataFactory.create_vehicle(status=shipped, port=port)
        TestDataFactory.create_vehicle(status=shipped, port=port, is_archived=True)

        response = self.client.get('/api/v1/dashboard/ports/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['grandTotals']['enRoute'], 1)
        self.assertEqual(response.data['grandTotals']['shipped'], 1)
        self.assertEqual(response.data['grandTotals']['total'], 2)
        self.assertEqual(response.data['statusColors']['enRoute'], '#8B5CF6')
        self.assertEqual(response.data['statusColors']['shipped'], '#111111')
        port_row = response.data['countries'][0]['states'][0]['ports'][0]
        self.assertEqual(port_row['portName'], 'Savannah')
        self.assertEqual(port_row['total'], 2)

    def test_dealer_forbidden(self):
        self.client.authenticate_user(TestDataFactory.create_dealer())
        response = self.client.get('/api/v1/dashboard/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class DealerDashboardTests(TestCase):

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.dealer = TestDataFactory.create_dealer(balance=Decimal('420.00'))
        self.client.authenticate_user(self.dealer)

    def test_dealer_dashboard(self):
        TestDataFactory.create_vehicle(dealer=self.dealer)
        TestDataFactory.create_vehicle()
        TestDataFactory.create_invoice(self.dealer)
        response = self.client.get('/api/v1/dealer/dashboard/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['currentBalance'], 420.0)
        # create_invoice adds one more vehicle for the dealer
        self.assertEqual(response.data['totalVehicles'], 2)
        self.assertEqual(response.data['pendingInvoices'], 1)
        self.assertEqual(response.data['pendingInvoiceAmount'], 1500.0)


class ReportsTests(TestCase):

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.admin = TestDataFactory.create_admin()
        self.client.authenticate_user(self.admin)
        self.dealer = TestDataFactory.create_dealer(balance=Decimal('100.00'))

    def test_summary_defaults_to_last_30_days(self):
        TestDataFactory.create_invoice(self.dealer, status=Invoice.STATUS_PAID)
        balance_request = TestDataFactory.create_balance_request(self.dealer, amount=Decimal('250.00'))
        approve_balance_request(balance_request.pk, self.admin)

        response = self.client.get('/api/v1/reports/summary/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['totalRevenueInPeriod'], 1500.0)
        self.assertEqual(response.data['totalInvoicesInPeriod'], 1)
        self.assertEqual(response.data['totalDepositsInPeriod'], 250.0)
        self.assertEqual(response.data['totalDealerBalance'], 350.0)

    def test_summary_outside_range(self):
        TestDataFactory.create_invoice(self.dealer, status=Invoice.STATUS_PAID)
        response = self.client.get('/api/v1/reports/summary/?date_from=2020-01-01&date_to=2020-01-31')
        self.assertEqual(response.data['totalInvoicesInPeriod'], 0)

    def test_invalid_date(self):
        response = self.client.get('/api/v1/reports/summary/?date_from=01/02/2024')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Invalid date format. Use YYYY-MM-DD')

    def test_overview(self):
        response = self.client.get('/api/v1/reports/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        for key in ('period', 'summary', 'dealerBalances', 'statusDistribution', 'monthlyTrends'):
            self.assertIn(key, response.data)

    def test_dealer_balances_ordered_by_balance(self):
        TestDataFactory.create_dealer(name='Richer', balance=Decimal('900.00'))
        TestDataFactory.create_invoice(self.dealer)
        response = self.client.get('/api/v1/reports/dealer-balances/')
        dealers = response.data['dealers']
        self.assertEqual(dealers[0]['name'], 'Richer')
        row = next(d for d in dealers if d['id'] == self.dealer.pk)
        self.assertEqual(row['pendingInvoicesCount'], 1)
        self.assertEqual(row['totalPendingAmount'], 1500.0)

    def test_status_distribution_percentages(self):
        first = TestDataFactory.create_status(order=1)
        second = TestDataFactory.create_status(order=2)
        TestDataFactory.create_vehicle(status=first)
        TestDataFactory.create_vehicle(status=first)
        TestDataFactory.create_vehicle(status=second)
        rows = {row['statusId']: row for row in get_status_distribution()}
        self.assertEqual(rows[first.pk]['percentage'], 67)
        self.assertEqual(rows[second.pk]['percentage'], 33)

    def test_monthly_trends_cover_each_month(self):
        trends = get_monthly_trends(date(2024, 1, 15), date(2024, 3, 2))
        self.assertEqual([t['month'] for t in trends], ['2024-01', '2024-02', '2024-03'])
        self.assertEqual(trends[0]['monthLabel'], 'Jan 2024')

    def test_monthly_trends_reject_reversed_range(self):
        today = timezone.localdate()
        response = self.client.get(
            f'/api/v1/reports/monthly-trends/?date_from={today.isoformat()}'
            f'&date_to={(today - timedelta(days=5)).isoformat()}'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class ExportTests(TestCase):

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_admin())
        self.dealer = TestDataFactory.create_dealer(name='Rustavi Motors')
        TestDataFactory.create_vehicle(dealer=self.dealer)

    def test_export_dealers_excel(self):
        response = self.client.get('/api/v1/export/dealers/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('.xlsx', response['Content-Disposition'])
        workbook = load_workbook(BytesIO(response.content))
        sheet = workbook.active
        self.assertEqual(sheet.cell(row=1, column=1).value, 'Name')
        self.assertEqual(sheet.cell(row=2, column=1).value, 'Rustavi Motors')
        self.assertEqual(sheet.cell(row=2, column=8).value, 1)

    def test_export_vehicles_pdf(self):
        response = self.client.get('/api/v1/export/vehicles/?format=pdf')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertTrue(response.content.startswith(b'%PDF'))

    def test_export_invoices_filters_status(self):
        TestDataFactory.create_invoice(self.dealer, status=Invoice.STATUS_PAID)
        TestDataFactory.create_invoice(self.dealer)
        response = self.client.get('/api/v1/export/invoices/?status=PAID')
        sheet = load_workbook(BytesIO(response.content)).active
        self.assertEqual(sheet.max_row, 2)

    def test_invalid_format(self):
        response = self.client.get('/api/v1/export/transactions/?format=csv')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Invalid format. Use excel or pdf')
