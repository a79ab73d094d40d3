from django.urls import path
from .views import (
    invoice_list_create, invoice_detail, invoice_mark_paid, invoice_cancel, invoice_stats,
    dealers_for_invoice, dealer_uninvoiced_vehicles, invoice_pdf,
    dealer_invoice_list, dealer_invoice_detail, dealer_invoice_stats, dealer_invoice_pay,
)

urlpatterns = [
    path('invoices/', invoice_list_create, name='invoice-list-create'),
    path('invoices/stats/', invoice_stats, name='invoice-stats'),
    path('invoices/dealers/', dealers_for_invoice, name='invoice-dealers'),
    path('invoices/dealers/<int:dealer_id>/vehicles/', dealer_uninvoiced_vehicles, name='invoice-dealer-vehicles'),
    path('invoices/<int:pk>/', invoice_detail, name='invoice-detail'),
    path('invoices/<int:pk>/mark-paid/', invoice_mark_paid, name='invoice-mark-paid'),
    path('invoices/<int:pk>/cancel/', invoice_cancel, name='invoice-cancel'),
    path('invoices/<int:pk>/pdf/', invoice_pdf, name='invoice-pdf'),

    path('dealer/invoices/', dealer_invoice_list, name='dealer-invoice-list'),
    path('dealer/invoices/stats/', dealer_invoice_stats, name='dealer-invoice-stats'),
    path('dealer/invoices/<int:pk>/', dealer_invoice_detail, name='dealer-invoice-detail'),
    path('dealer/invoices/<int:pk>/pay/', dealer_invoice_pay, name='dealer-invoice-pay'),
]
