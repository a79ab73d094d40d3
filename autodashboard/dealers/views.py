import logging

from django.db.models import Q, Count, Sum, ProtectedError
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from autodashboard.balances.models import Transaction
from autodashboard.balances.serializers import TransactionSerializer
from autodashboard.core.models import User
from autodashboard.core.permissions import IsAdminRole
from autodashboard.core.utils import (
    action_result, apply_sorting, paginate, create_audit_log, validation_failed,
)
from autodashboard.invoices.models import Invoice
from .serializers import DealerSerializer, DealerListSerializer

logger = logging.getLogger('autodashboard.dealers')

RECENT_TRANSACTIONS_LIMIT = 10


def _dealers():
    return User.objects.filter(role=User.ROLE_DEALER).annotate(
        vehicle_count=Count('vehicles', filter=Q(vehicles__is_archived=False))
    )


def _not_found():
    return action_result(False, 'Dealer not found', status.HTTP_404_NOT_FOUND)


@api_view(['GET', 'POST'])
@permission_classes([IsAdminRole])
def dealer_list_create(request):
    """
    GET: list dealers (search name/email/phone/company, status filter)
    POST: create a dealer account
    """
    if request.method == 'POST':
        serializer = DealerSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_failed(serializer)
        try:
            dealer = serializer.save()
        except Exception as e:
            logger.error(f"Error creating dealer: {str(e)}", exc_info=True)
            return action_result(False, 'Failed to create dealer', status.HTTP_500_INTERNAL_SERVER_ERROR)
        create_audit_log(
            request=request, action='create', model_name='User',
            object_id=dealer.pk, object_name=dealer.name, object_reference=dealer.email,
        )
        logger.info(f"User {request.user.email} created dealer {dealer.email}")
        return action_result(True, 'Dealer created successfully', status.HTTP_201_CREATED, id=dealer.pk)

    params = request.query_params
    queryset = _dealers()
    if params.get('status'):
        queryset = queryset.filter(status=params['status'])
    search = (params.get('search') or '').strip()
    if search:
        queryset = queryset.filter(
            Q(name__icontains=search) |
            Q(email__icontains=search) |
            Q(phone__icontains=search) |
            Q(company_name__icontains=search)
        )
    queryset = apply_sorting(
        queryset, params,
        {'name': 'name', 'email': 'email', 'created_at': 'created_at', 'balance': 'balance'},
    )
    return Response(paginate(queryset, params, lambda rows: DealerListSerializer(rows, many=True).data))


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminRole])
def dealer_detail(request, pk):
    """Get (with recent transactions and pending invoices total), update or delete a dealer"""
    dealer = _dealers().filter(pk=pk).first()
    if not dealer:
        return _not_found()

    if request.method == 'GET':
        data = DealerListSerializer(dealer).data
        transactions = Transaction.objects.filter(dealer=dealer).order_by('-created_at', '-id')[:RECENT_TRANSACTIONS_LIMIT]
        pending = Invoice.objects.filter(dealer=dealer, status=Invoice.STATUS_PENDING).aggregate(
            total=Sum('total_amount'), count=Count('id')
        )
        data['recent_transactions'] = TransactionSerializer(transactions, many=True).data
        data['pending_invoices_count'] = pending['count']
        data['pending_invoices_total'] = float(pending['total'] or 0)
        return Response(data)

    if request.method == 'DELETE':
        vehicle_count = dealer.vehicles.count()
        if vehicle_count:
            return action_result(False, f'Cannot delete: dealer has {vehicle_count} vehicle(s)')
        email = dealer.email
        try:
            dealer.delete()
        except ProtectedError:
            return action_result(False, 'Cannot delete: dealer has invoices')
        except Exception as e:
            logger.error(f"Error deleting dealer {pk}: {str(e)}", exc_info=True)
            return action_result(False, 'Failed to delete dealer', status.HTTP_500_INTERNAL_SERVER_ERROR)
        create_audit_log(request=request, action='delete', model_name='User', object_id=pk, object_reference=email)
        logger.info(f"User {request.user.email} deleted dealer {email}")
        return action_result(True, 'Dealer deleted successfully')

    serializer = DealerSerializer(dealer, data=request.data, partial=request.method == 'PATCH')
    if not serializer.is_valid():
        return validation_failed(serializer)
    try:
        dealer = serializer.save()
    except Exception as e:
        logger.error(f"Error updating dealer {pk}: {str(e)}", exc_info=True)
        return action_result(False, 'Failed to update dealer', status.HTTP_500_INTERNAL_SERVER_ERROR)
    create_audit_log(
        request=request, action='update', model_name='User',
        object_id=dealer.pk, object_name=dealer.name, object_reference=dealer.email,
    )
    logger.info(f"User {request.user.email} updated dealer {dealer.email}")
    return action_result(True, 'Dealer updated successfully', id=dealer.pk)


@api_view(['POST'])
@permission_classes([IsAdminRole])
def dealer_toggle_status(request, pk):
    """Flip a dealer between ACTIVE and BLOCKED"""
    dealer = User.objects.filter(pk=pk, role=User.ROLE_DEALER).first()
    if not dealer:
        return _not_found()

    old_status = dealer.status
    dealer.status = User.STATUS_ACTIVE if dealer.is_blocked else User.STATUS_BLOCKED
    dealer.save(update_fields=['status', 'updated_at'])
    create_audit_log(
        request=request,
        action='dealer_status_toggle',
        model_name='User',
        object_id=dealer.pk,
        object_name=dealer.name,
        object_reference=dealer.email,
        changes={'old_data': {'status': old_status}, 'new_data': {'status': dealer.status}},
    )
    logger.info(f"User {request.user.email} changed dealer {dealer.email} status to {dealer.status}")
    verb = 'blocked' if dealer.is_blocked else 'activated'
    return action_result(True, f'Dealer {verb} successfully', status=dealer.status)
