"""Invoice numbering, creation and payment"""
import logging
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from autodashboard.balances.models import Transaction
from autodashboard.balances.utils import apply_balance_change
from autodashboard.core.models import User
from autodashboard.core.utils import create_audit_log
from autodashboard.notifications.models import Notification
from autodashboard.notifications.utils import notify, format_amount
from autodashboard.vehicles.models import Vehicle
from .models import Invoice, InvoiceItem

logger = logging.getLogger(__name__)


class InvoiceError(Exception):
    """Business rule refusal; the message is returned to the client"""


def generate_invoice_number():
    """INV-{YYYY}-{NNNNN}: this year's invoice count + 1, skipping numbers already taken"""
    year = timezone.now().year
    sequence = Invoice.objects.filter(created_at__year=year).count() + 1
    invoice_number = f"INV-{year}-{sequence:05d}"
    while Invoice.objects.filter(invoice_number=invoice_number).exists():
        sequence += 1
        invoice_number = f"INV-{year}-{sequence:05d}"
    return invoice_number


def uninvoiced_vehicles(dealer):
    """Non-archived vehicles of the dealer that are not on a pending or paid invoice"""
    return Vehicle.objects.filter(dealer=dealer, is_archived=False).exclude(
        invoice_items__invoice__status__in=Invoice.OPEN_STATUSES
    ).select_related('make', 'model').order_by('-created_at')


def _item_description(vehicle):
    return f"{vehicle.year} {vehicle.make.name} {vehicle.model.name} - VIN: {vehicle.vin}"


def create_invoice(dealer, vehicle_ids, admin, request=None):
    """
    Invoice the given vehicles of a dealer.

    Every vehicle must belong to the dealer, be active and not already be on
    a pending or paid invoice. The total is the sum of transportation prices.
    """
    vehicle_ids = list(dict.fromkeys(vehicle_ids))
    with transaction.atomic():
        vehicles = list(
            Vehicle.objects.select_for_update().filter(pk__in=vehicle_ids, dealer=dealer, is_archived=False)
            .select_related('make', 'model').order_by('id')
        )
        if len(vehicles) != len(vehicle_ids):
            raise InvoiceError('Some vehicles were not found or do not belong to this dealer')

        invoiced_vins = list(
            InvoiceItem.objects.filter(vehicle__in=vehicles, invoice__status__in=Invoice.OPEN_STATUSES)
            .values_list('vehicle__vin', flat=True).distinct()
        )
        if invoiced_vins:
            raise InvoiceError(f"Some vehicles already have invoices: {', '.join(sorted(invoiced_vins))}")

        total = sum((vehicle.transportation_price for vehicle in vehicles), start=Decimal('0.00'))
        invoice = Invoice.objects.create(
            invoice_number=generate_invoice_number(),
            dealer=dealer,
            total_amount=total,
        )
        InvoiceItem.objects.bulk_create([
            InvoiceItem(
                invoice=invoice,
                vehicle=vehicle,
                amount=vehicle.transportation_price,
                description=_item_description(vehicle),
            )
            for vehicle in vehicles
        ])

        notify(
            dealer,
            Notification.TYPE_INVOICE,
            'New Invoice',
            'ახალი ინვოისი',
            f'You have a new invoice {invoice.invoice_number} for ${format_amount(total)}.',
            f'თქვენ გაქვთ ახალი ინვოისი {invoice.invoice_number} თანხით ${format_amount(total)}.',
            reference_type='Invoice',
            reference_id=invoice.pk,
        )
        create_audit_log(
            request=request,
            user=admin,
            action='invoice_create',
            model_name='Invoice',
            object_id=invoice.pk,
            object_name=invoice.invoice_number,
            object_reference=dealer.email,
            changes={'new_data': {'total_amount': str(total), 'vehicle_ids': [v.pk for v in vehicles]}},
        )

    logger.info(f"Invoice {invoice.invoice_number} created for {dealer.email}: {len(vehicles)} vehicle(s), {total}")
    return invoice


def _lock_pending(invoice_id, action):
    invoice = Invoice.objects.select_for_update().select_related('dealer').get(pk=invoice_id)
    if invoice.status != Invoice.STATUS_PENDING:
        raise InvoiceError(f'Only pending invoices can be {action}')
    return invoice


def _deduct_total(invoice):
    dealer, _ = apply_balance_change(
        invoice.dealer_id,
        -invoice.total_amount,
        Transaction.TYPE_INVOICE_PAYMENT,
        f'Payment for invoice {invoice.invoice_number}',
        reference_type='Invoice',
        reference_id=invoice.pk,
    )
    return dealer


def _set_paid(invoice, from_balance):
    invoice.status = Invoice.STATUS_PAID
    invoice.paid_at = timezone.now()
    invoice.paid_from_balance = from_balance
    invoice.save(update_fields=['status', 'paid_at', 'paid_from_balance', 'updated_at'])


def _audit_paid(invoice, user, request):
    create_audit_log(
        request=request,
        user=user,
        action='invoice_paid',
        model_name='Invoice',
        object_id=invoice.pk,
        object_name=invoice.invoice_number,
        object_reference=invoice.dealer.email,
        changes={
            'old_data': {'status': Invoice.STATUS_PENDING},
            'new_data': {'status': invoice.status, 'paid_from_balance': invoice.paid_from_balance},
        },
    )


def mark_invoice_paid(invoice_id, admin, from_balance=True, request=None):
    """
    Admin marks a pending invoice paid. From balance the dealer is debited
    even when that takes the balance below zero.
    """
    with transaction.atomic():
        invoice = _lock_pending(invoice_id, 'marked as paid')
        number = invoice.invoice_number
        if from_balance:
            dealer = _deduct_total(invoice)
            message_en = f'Invoice {number} has been paid from your balance. New balance: ${format_amount(dealer.balance)}.'
            message_ka = f'ინვოისი {number} გადახდილია ბალანსიდან. ახალი ბალანსი: ${format_amount(dealer.balance)}.'
        else:
            dealer = invoice.dealer
            message_en = f'Invoice {number} has been marked as paid.'
            message_ka = f'ინვოისი {number} მონიშნულია როგორც გადახდილი.'
        _set_paid(invoice, from_balance)

        notify(
            dealer, Notification.TYPE_INVOICE, 'Invoice Paid', 'ინვოისი გადახდილია',
            message_en, message_ka, reference_type='Invoice', reference_id=invoice.pk,
        )
        _audit_paid(invoice, admin, request)

    logger.info(f"Invoice {number} marked paid by {admin.email} (from_balance={from_balance})")
    return invoice


def pay_from_balance(invoice_id, dealer, request=None):
    """Dealer pays their own pending invoice; refused when the balance is short"""
    with transaction.atomic():
        invoice = _lock_pending(invoice_id, 'paid')
        current = User.objects.select_for_update().get(pk=dealer.pk).balance
        if current < invoice.total_amount:
            shortfall = invoice.total_amount - current
            raise InvoiceError(f'Insufficient balance. You need ${format_amount(shortfall)} more.')

        dealer = _deduct_total(invoice)
        _set_paid(invoice, True)
        number = invoice.invoice_number
        notify(
            dealer, Notification.TYPE_INVOICE, 'Invoice Paid', 'ინვოისი გადახდილია',
            f'You paid invoice {number} from your balance. New balance: ${format_amount(dealer.balance)}.',
            f'თქვენ გადაიხადეთ ინვოისი {number} ბალანსიდან. ახალი ბალანსი: ${format_amount(dealer.balance)}.',
            reference_type='Invoice', reference_id=invoice.pk,
        )
        _audit_paid(invoice, dealer, request)

    logger.info(f"Dealer {dealer.email} paid invoice {number} from balance")
    return invoice, dealer.balance


def cancel_invoice(invoice_id, admin, request=None):
    with transaction.atomic():
        invoice = _lock_pending(invoice_id, 'cancelled')
        invoice.status = Invoice.STATUS_CANCELLED
        invoice.save(update_fields=['status', 'updated_at'])
        number = invoice.invoice_number
        notify(
            invoice.dealer, Notification.TYPE_INVOICE, 'Invoice Cancelled', 'ინვოისი გაუქმებულია',
            f'Invoice {number} has been cancelled.',
            f'ინვოისი {number} გაუქმებულია.',
            reference_type='Invoice', reference_id=invoice.pk,
        )
        create_audit_log(
            request=request,
            user=admin,
            action='invoice_cancel',
            model_name='Invoice',
            object_id=invoice.pk,
            object_name=number,
            object_reference=invoice.dealer.email,
            changes={'old_data': {'status': Invoice.STATUS_PENDING}, 'new_data': {'status': invoice.status}},
        )

    logger.info(f"Invoice {number} cancelled by {admin.email}")
    return invoice
