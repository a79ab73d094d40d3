import logging

from django.db.models import Q, Count, Sum
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from autodashboard.core.permissions import IsAdminRole, IsDealerRole
from autodashboard.core.utils import action_result, apply_sorting, paginate, validation_failed
from .models import BalanceRequest, Transaction
from .serializers import (
    BalanceRequestSerializer, DealerBalanceRequestSerializer, BalanceRequestCreateSerializer,
    ProcessBalanceRequestSerializer, TransactionSerializer,
)
from .utils import (
    BalanceRequestProcessed, approve_balance_request, reject_balance_request, create_balance_request,
)

logger = logging.getLogger('autodashboard.balances')

SORT_FIELDS = {'created_at': 'created_at', 'amount': 'amount', 'dealer_name': 'dealer__name'}


def _not_found():
    return action_result(False, 'Balance request not found', status.HTTP_404_NOT_FOUND)


@api_view(['GET'])
@permission_classes([IsAdminRole])
def balance_request_list(request):
    """List balance requests (search dealer name/email/company, status filter)"""
    params = request.query_params
    queryset = BalanceRequest.objects.select_related('dealer', 'processed_by')
    if params.get('status'):
        queryset = queryset.filter(status=params['status'])
    search = (params.get('search') or '').strip()
    if search:
        queryset = queryset.filter(
            Q(dealer__name__icontains=search) |
            Q(dealer__email__icontains=search) |
            Q(dealer__company_name__icontains=search)
        )
    queryset = apply_sorting(queryset, params, SORT_FIELDS)
    return Response(paginate(queryset, params, lambda rows: BalanceRequestSerializer(rows, many=True).data))


@api_view(['GET'])
@permission_classes([IsAdminRole])
def balance_request_detail(request, pk):
    balance_request = BalanceRequest.objects.select_related('dealer', 'processed_by').filter(pk=pk).first()
    if not balance_request:
        return _not_found()
    return Response(BalanceRequestSerializer(balance_request).data)


def _process(request, pk, handler, verb):
    serializer = ProcessBalanceRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_failed(serializer)
    if not BalanceRequest.objects.filter(pk=pk).exists():
        return _not_found()
    try:
        handler(pk, request.user, serializer.validated_data['comment'], request=request)
    except BalanceRequestProcessed as e:
        return action_result(False, str(e))
    except Exception as e:
        logger.error(f"Error processing balance request {pk}: {str(e)}", exc_info=True)
        return action_result(False, 'Failed to process balance request', status.HTTP_500_INTERNAL_SERVER_ERROR)
    return action_result(True, f'Balance request {verb} successfully')


@api_view(['POST'])
@permission_classes([IsAdminRole])
def balance_request_approve(request, pk):
    """Approve a pending request and credit the dealer's balance"""
    return _process(request, pk, approve_balance_request, 'approved')


@api_view(['POST'])
@permission_classes([IsAdminRole])
def balance_request_reject(request, pk):
    return _process(request, pk, reject_balance_request, 'rejected')


@api_view(['GET'])
@permission_classes([IsAdminRole])
def balance_request_stats(request):
    totals = BalanceRequest.objects.aggregate(
        pending_count=Count('id', filter=Q(status=BalanceRequest.STATUS_PENDING)),
        pending_total=Sum('amount', filter=Q(status=BalanceRequest.STATUS_PENDING)),
        approved_count=Count('id', filter=Q(status=BalanceRequest.STATUS_APPROVED)),
        approved_total=Sum('amount', filter=Q(status=BalanceRequest.STATUS_APPROVED)),
        rejected_count=Count('id', filter=Q(status=BalanceRequest.STATUS_REJECTED)),
    )
    return Response({
        'pendingCount': totals['pending_count'],
        'pendingTotal': float(totals['pending_total'] or 0),
        'approvedCount': totals['approved_count'],
        'approvedTotal': float(totals['approved_total'] or 0),
        'rejectedCount': totals['rejected_count'],
    })


@api_view(['GET', 'POST'])
@permission_classes([IsDealerRole])
def dealer_balance_requests(request):
    """
    GET: the dealer's own requests (status filter)
    POST: submit a new top-up request with a receipt
    """
    if request.method == 'POST':
        serializer = BalanceRequestCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_failed(serializer)
        try:
            balance_request = create_balance_request(request.user, **serializer.validated_data)
        except Exception as e:
            logger.error(f"Error creating balance request for {request.user.email}: {str(e)}", exc_info=True)
            return action_result(False, 'Failed to create balance request', status.HTTP_500_INTERNAL_SERVER_ERROR)
        return action_result(True, 'Balance request submitted successfully', status.HTTP_201_CREATED, id=balance_request.pk)

    params = request.query_params
    queryset = BalanceRequest.objects.filter(dealer=request.user)
    if params.get('status'):
        queryset = queryset.filter(status=params['status'])
    queryset = apply_sorting(queryset, params, {'created_at': 'created_at', 'amount': 'amount'})
    return Response(paginate(queryset, params, lambda rows: DealerBalanceRequestSerializer(rows, many=True).data))


@api_view(['GET'])
@permission_classes([IsDealerRole])
def dealer_transactions(request):
    params = request.query_params
    queryset = Transaction.objects.filter(dealer=request.user)
    if params.get('type'):
        queryset = queryset.filter(type=params['type'])
    queryset = apply_sorting(queryset, params, {'created_at': 'created_at', 'amount': 'amount'})
    return Response(paginate(queryset, params, lambda rows: TransactionSerializer(rows, many=True).data))


@api_view(['GET'])
@permission_classes([IsDealerRole])
def dealer_balance_overview(request):
    """Current balance, lifetime deposits and withdrawals, pending requests"""
    dealer = request.user
    ledger = Transaction.objects.filter(dealer=dealer).aggregate(
        deposits=Sum('amount', filter=Q(type=Transaction.TYPE_DEPOSIT)),
        withdrawals=Sum('amount', filter=Q(type__in=[Transaction.TYPE_WITHDRAWAL, Transaction.TYPE_INVOICE_PAYMENT])),
    )
    pending = BalanceRequest.objects.filter(dealer=dealer, status=BalanceRequest.STATUS_PENDING).aggregate(
        count=Count('id'), amount=Sum('amount')
    )
    return Response({
        'currentBalance': float(dealer.balance),
        'totalDeposits': float(ledger['deposits'] or 0),
        'totalWithdrawals': abs(float(ledger['withdrawals'] or 0)),
        'pendingRequestsCount': pending['count'],
        'pendingRequestsAmount': float(pending['amount'] or 0),
    })
