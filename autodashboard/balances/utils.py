"""Dealer balance ledger and balance request processing"""
import logging

from django.db import transaction
from django.utils import timezone

from autodashboard.core.models import User
from autodashboard.core.utils import create_audit_log
from autodashboard.notifications.models import Notification
from autodashboard.notifications.utils import notify, format_amount
from .models import BalanceRequest, Transaction

logger = logging.getLogger(__name__)


class BalanceRequestProcessed(Exception):
    pass


def apply_balance_change(dealer_id, amount, type, description, reference_type=None, reference_id=None):
    """
    Add a signed amount to a dealer's balance and write the ledger row.

    Must run inside transaction.atomic(): the dealer row is locked with
    select_for_update until the caller's transaction ends.
    Returns (dealer, transaction).
    """
    dealer = User.objects.select_for_update().get(pk=dealer_id)
    dealer.balance += amount
    dealer.save(update_fields=['balance', 'updated_at'])
    ledger_row = Transaction.objects.create(
        dealer=dealer,
        type=type,
        amount=amount,
        balance_after=dealer.balance,
        description=description,
        reference_type=reference_type,
        reference_id=str(reference_id) if reference_id is not None else None,
    )
    return dealer, ledger_row


def _lock_pending(request_id):
    balance_request = BalanceRequest.objects.select_for_update().select_related('dealer').get(pk=request_id)
    if balance_request.status != BalanceRequest.STATUS_PENDING:
        raise BalanceRequestProcessed('Balance request has already been processed')
    return balance_request


def approve_balance_request(request_id, admin, comment='', request=None):
    """
    Approve a PENDING request: credit the dealer, write the DEPOSIT row,
    mark the request APPROVED and notify the dealer, all in one transaction.
    """
    comment = (comment or '').strip()
    with transaction.atomic():
        balance_request = _lock_pending(request_id)
        amount = balance_request.amount

        description = 'Balance top-up approved'
        if comment:
            description = f'{description}: {comment}'
        dealer, _ = apply_balance_change(
            balance_request.dealer_id, amount, Transaction.TYPE_DEPOSIT, description,
            reference_type='BalanceRequest', reference_id=balance_request.pk,
        )

        balance_request.status = BalanceRequest.STATUS_APPROVED
        balance_request.admin_comment = comment
        balance_request.processed_at = timezone.now()
        balance_request.processed_by = admin
        balance_request.save()

        notify(
            dealer,
            Notification.TYPE_BALANCE,
            'Balance Top-up Approved',
            'ბალანსის შევსება დამტკიცებულია',
            f'Your request to top up ${format_amount(amount)} has been approved.',
            f'თქვენი მოთხოვნა ${format_amount(amount)} თანხის შევსებაზე დამტკიცებულია.',
            reference_type='BalanceRequest',
            reference_id=balance_request.pk,
        )
        create_audit_log(
            request=request,
            user=admin,
            action='balance_approve',
            model_name='BalanceRequest',
            object_id=balance_request.pk,
            object_name=f'${amount}',
            object_reference=dealer.email,
            changes={'new_data': {'status': balance_request.status, 'balance_after': str(dealer.balance)}},
        )

    logger.info(f"Balance request {request_id} approved by {admin.email}: +{amount} for {dealer.email}")
    return balance_request


def reject_balance_request(request_id, admin, comment='', request=None):
    """Reject a PENDING request and notify the dealer"""
    comment = (comment or '').strip()
    with transaction.atomic():
        balance_request = _lock_pending(request_id)
        balance_request.status = BalanceRequest.STATUS_REJECTED
        balance_request.admin_comment = comment
        balance_request.processed_at = timezone.now()
        balance_request.processed_by = admin
        balance_request.save()

        amount = format_amount(balance_request.amount)
        notify(
            balance_request.dealer,
            Notification.TYPE_BALANCE,
            'Balance Top-up Rejected',
            'ბალანსის შევსება უარყოფილია',
            f'Your request to top up ${amount} has been rejected.' + (f' Reason: {comment}' if comment else ''),
            f'თქვენი მოთხოვნა ${amount} თანხის შევსებაზე უარყოფილია.' + (f' მიზეზი: {comment}' if comment else ''),
            reference_type='BalanceRequest',
            reference_id=balance_request.pk,
        )
        create_audit_log(
            request=request,
            user=admin,
            action='balance_reject',
            model_name='BalanceRequest',
            object_id=balance_request.pk,
            object_name=f'${balance_request.amount}',
            object_reference=balance_request.dealer.email,
            changes={'new_data': {'status': balance_request.status, 'admin_comment': comment}},
        )

    logger.info(f"Balance request {request_id} rejected by {admin.email}")
    return balance_request


def create_balance_request(dealer, amount, receipt_url, comment=''):
    """Create a PENDING request and let the first admin know"""
    with transaction.atomic():
        balance_request = BalanceRequest.objects.create(
            dealer=dealer,
            amount=amount,
            receipt_url=receipt_url,
            comment=(comment or '').strip(),
        )
        admin = User.objects.filter(role=User.ROLE_ADMIN).order_by('id').first()
        if admin:
            notify(
                admin,
                Notification.TYPE_BALANCE,
                'New Balance Top-up Request',
                'ახალი ბალანსის შევსების მოთხოვნა',
                f'A dealer has requested a balance top-up of ${format_amount(amount)}.',
                f'დილერმა მოითხოვა ${format_amount(amount)} თანხის შევსება.',
                reference_type='BalanceRequest',
                reference_id=balance_request.pk,
            )
    logger.info(f"Dealer {dealer.email} requested a balance top-up of {amount}")
    return balance_request
