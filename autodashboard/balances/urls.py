from django.urls import path
from .views import (
    balance_request_list, balance_request_stats, balance_request_detail,
    balance_request_approve, balance_request_reject,
    dealer_balance_overview, dealer_balance_requests, dealer_transactions,
)

urlpatterns = [
    path('balance-requests/', balance_request_list, name='balance-request-list'),
    path('balance-requests/stats/', balance_request_stats, name='balance-request-stats'),
    path('balance-requests/<int:pk>/', balance_request_detail, name='balance-request-detail'),
    path('balance-requests/<int:pk>/approve/', balance_request_approve, name='balance-request-approve'),
    path('balance-requests/<int:pk>/reject/', balance_request_reject, name='balance-request-reject'),

    path('dealer/balance/', dealer_balance_overview, name='dealer-balance-overview'),
    path('dealer/balance/requests/', dealer_balance_requests, name='dealer-balance-requests'),
    path('dealer/balance/transactions/', dealer_transactions, name='dealer-transactions'),
]
