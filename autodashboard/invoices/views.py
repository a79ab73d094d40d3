import logging

from django.db.models import Q, Count, Sum
from django.http import HttpResponse
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from autodashboard.balances.serializers import DealerBriefSerializer
from autodashboard.core.models import User
from autodashboard.core.permissions import IsAdminRole, IsDealerRole, IsActiveUser
from autodashboard.core.utils import action_result, apply_sorting, paginate, validation_failed
from .models import Invoice
from .pdf import render_invoice_pdf
from .serializers import (
    InvoiceListSerializer, InvoiceDetailSerializer, InvoiceCreateSerializer,
    MarkPaidSerializer, UninvoicedVehicleSerializer,
)
from .utils import (
    InvoiceError, create_invoice, mark_invoice_paid, pay_from_balance, cancel_invoice, uninvoiced_vehicles,
)

logger = logging.getLogger('autodashboard.invoices')

SORT_FIELDS = {
    'created_at': 'created_at',
    'total_amount': 'total_amount',
    'invoice_number': 'invoice_number',
    'dealer_name': 'dealer__name',
}


def _invoices():
    return Invoice.objects.select_related('dealer').annotate(item_count=Count('items'))


def _invoice_detail_queryset():
    return Invoice.objects.select_related('dealer').prefetch_related('items__vehicle__make', 'items__vehicle__model')


def _not_found():
    return action_result(False, 'Invoice not found', status.HTTP_404_NOT_FOUND)


def _invoice_stats(queryset):
    totals = queryset.aggregate(
        total=Count('id'),
        pending_count=Count('id', filter=Q(status=Invoice.STATUS_PENDING)),
        pending_amount=Sum('total_amount', filter=Q(status=Invoice.STATUS_PENDING)),
        paid_count=Count('id', filter=Q(status=Invoice.STATUS_PAID)),
        paid_amount=Sum('total_amount', filter=Q(status=Invoice.STATUS_PAID)),
        cancelled_count=Count('id', filter=Q(status=Invoice.STATUS_CANCELLED)),
    )
    return {
        'totalInvoices': totals['total'],
        'pendingCount': totals['pending_count'],
        'pendingAmount': float(totals['pending_amount'] or 0),
        'paidCount': totals['paid_count'],
        'paidAmount': float(totals['paid_amount'] or 0),
        'cancelledCount': totals['cancelled_count'],
    }


@api_view(['GET', 'POST'])
@permission_classes([IsAdminRole])
def invoice_list_create(request):
    """
    GET: list invoices (search number/dealer, status and dealer filters)
    POST: invoice a dealer's vehicles
    """
    if request.method == 'POST':
        serializer = InvoiceCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_failed(serializer)
        try:
            invoice = create_invoice(
                serializer.validated_data['dealer_id'],
                serializer.validated_data['vehicle_ids'],
                request.user,
                request=request,
            )
        except InvoiceError as e:
            return action_result(False, str(e))
        except Exception as e:
            logger.error(f"Error creating invoice: {str(e)}", exc_info=True)
            return action_result(False, 'Failed to create invoice', status.HTTP_500_INTERNAL_SERVER_ERROR)
        return action_result(
            True, 'Invoice created successfully', status.HTTP_201_CREATED,
            id=invoice.pk, invoice_number=invoice.invoice_number,
        )

    params = request.query_params
    queryset = _invoices()
    if params.get('status'):
        queryset = queryset.filter(status=params['status'])
    if params.get('dealer'):
        queryset = queryset.filter(dealer_id=params['dealer'])
    search = (params.get('search') or '').strip()
    if search:
        queryset = queryset.filter(
            Q(invoice_number__icontains=search) |
            Q(dealer__name__icontains=search) |
            Q(dealer__email__icontains=search) |
            Q(dealer__company_name__icontains=search)
        )
    queryset = apply_sorting(queryset, params, SORT_FIELDS)
    return Response(paginate(queryset, params, lambda rows: InvoiceListSerializer(rows, many=True).data))


@api_view(['GET'])
@permission_classes([IsAdminRole])
def invoice_detail(request, pk):
    invoice = _invoice_detail_queryset().filter(pk=pk).first()
    if not invoice:
        return _not_found()
    return Response(InvoiceDetailSerializer(invoice).data)


@api_view(['POST'])
@permission_classes([IsAdminRole])
def invoice_mark_paid(request, pk):
    """Mark a pending invoice paid, from the dealer's balance unless from_balance is false"""
    serializer = MarkPaidSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_failed(serializer)
    from_balance = serializer.validated_data['from_balance']
    try:
        mark_invoice_paid(pk, request.user, from_balance=from_balance, request=request)
    except Invoice.DoesNotExist:
        return _not_found()
    except InvoiceError as e:
        return action_result(False, str(e))
    except Exception as e:
        logger.error(f"Error marking invoice {pk} paid: {str(e)}", exc_info=True)
        return action_result(False, 'Failed to mark invoice as paid', status.HTTP_500_INTERNAL_SERVER_ERROR)
    return action_result(True, 'Invoice marked as paid')


@api_view(['POST'])
@permission_classes([IsAdminRole])
def invoice_cancel(request, pk):
    try:
        cancel_invoice(pk, request.user, request=request)
    except Invoice.DoesNotExist:
        return _not_found()
    except InvoiceError as e:
        return action_result(False, str(e))
    except Exception as e:
        logger.error(f"Error cancelling invoice {pk}: {str(e)}", exc_info=True)
        return action_result(False, 'Failed to cancel invoice', status.HTTP_500_INTERNAL_SERVER_ERROR)
    return action_result(True, 'Invoice cancelled successfully')


@api_view(['GET'])
@permission_classes([IsAdminRole])
def invoice_stats(request):
    return Response(_invoice_stats(Invoice.objects.all()))


@api_view(['GET'])
@permission_classes([IsAdminRole])
def dealers_for_invoice(request):
    """Active dealers that can be invoiced"""
    dealers = User.objects.filter(role=User.ROLE_DEALER, status=User.STATUS_ACTIVE).order_by('name')
    return Response({'dealers': DealerBriefSerializer(dealers, many=True).data})


@api_view(['GET'])
@permission_classes([IsAdminRole])
def dealer_uninvoiced_vehicles(request, dealer_id):
    dealer = User.objects.filter(pk=dealer_id, role=User.ROLE_DEALER).first()
    if not dealer:
        return action_result(False, 'Dealer not found', status.HTTP_404_NOT_FOUND)
    vehicles = uninvoiced_vehicles(dealer)
    return Response({'vehicles': UninvoicedVehicleSerializer(vehicles, many=True).data})


@api_view(['GET'])
@permission_classes([IsDealerRole])
def dealer_invoice_list(request):
    params = request.query_params
    queryset = _invoices().filter(dealer=request.user)
    if params.get('status'):
        queryset = queryset.filter(status=params['status'])
    queryset = apply_sorting(
        queryset, params,
        {'created_at': 'created_at', 'total_amount': 'total_amount', 'invoice_number': 'invoice_number'},
    )
    return Response(paginate(queryset, params, lambda rows: InvoiceListSerializer(rows, many=True).data))


@api_view(['GET'])
@permission_classes([IsDealerRole])
def dealer_invoice_detail(request, pk):
    invoice = _invoice_detail_queryset().filter(pk=pk, dealer=request.user).first()
    if not invoice:
        return _not_found()
    data = InvoiceDetailSerializer(invoice).data
    data['currentBalance'] = float(request.user.balance)
    return Response(data)


@api_view(['GET'])
@permission_classes([IsDealerRole])
def dealer_invoice_stats(request):
    return Response(_invoice_stats(Invoice.objects.filter(dealer=request.user)))


@api_view(['POST'])
@permission_classes([IsDealerRole])
def dealer_invoice_pay(request, pk):
    """Pay one of the dealer's own pending invoices from their balance"""
    if not Invoice.objects.filter(pk=pk, dealer=request.user).exists():
        return _not_found()
    try:
        _, new_balance = pay_from_balance(pk, request.user, request=request)
    except InvoiceError as e:
        return action_result(False, str(e))
    except Exception as e:
        logger.error(f"Error paying invoice {pk}: {str(e)}", exc_info=True)
        return action_result(False, 'Failed to pay invoice', status.HTTP_500_INTERNAL_SERVER_ERROR)
    return action_result(True, 'Invoice paid successfully', newBalance=float(new_balance))


@api_view(['GET'])
@permission_classes([IsActiveUser])
def invoice_pdf(request, pk):
    """Download the invoice as PDF; dealers only see their own invoices"""
    queryset = _invoice_detail_queryset()
    if not request.user.is_admin_role:
        queryset = queryset.filter(dealer=request.user)
    invoice = queryset.filter(pk=pk).first()
    if not invoice:
        return _not_found()
    try:
        content = render_invoice_pdf(invoice)
    except Exception as e:
        logger.error(f"Error rendering PDF for invoice {pk}: {str(e)}", exc_info=True)
        return action_result(False, 'Failed to generate PDF', status.HTTP_500_INTERNAL_SERVER_ERROR)
    response = HttpResponse(content, content_type='application/pdf')
    response['Content-Disposition'] = f'attachment; filename="{invoice.invoice_number}.pdf"'
    return response
