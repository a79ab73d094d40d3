from django.urls import path
from .views import (
    admin_dashboard, recent_activity, dealer_dashboard, ports_dashboard,
    reports_overview, reports_summary, reports_dealer_balances, reports_status_distribution,
    reports_monthly_trends, export_dealers, export_vehicles, export_transactions, export_invoices,
)

urlpatterns = [
    path('dashboard/', admin_dashboard, name='admin-dashboard'),
    path('dashboard/activity/', recent_activity, name='recent-activity'),
    path('dashboard/ports/', ports_dashboard, name='ports-dashboard'),
    path('dealer/dashboard/', dealer_dashboard, name='dealer-dashboard'),

    path('reports/', reports_overview, name='reports-overview'),
    path('reports/summary/', reports_summary, name='reports-summary'),
    path('reports/dealer-balances/', reports_dealer_balances, name='reports-dealer-balances'),
    path('reports/status-distribution/', reports_status_distribution, name='reports-status-distribution'),
    path('reports/monthly-trends/', reports_monthly_trends, name='reports-monthly-trends'),

    path('export/dealers/', export_dealers, name='export-dealers'),
    path('export/vehicles/', export_vehicles, name='export-vehicles'),
    path('export/transactions/', export_transactions, name='export-transactions'),
    path('export/invoices/', export_invoices, name='export-invoices'),
]
