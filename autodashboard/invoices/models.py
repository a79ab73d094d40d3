from decimal import Decimal

from django.conf import settings
from django.db import models

from autodashboard.vehicles.models import Vehicle


class Invoice(models.Model):
    """Transportation invoice issued to a dealer for one or more vehicles"""
    STATUS_PENDING = 'PENDING'
    STATUS_PAID = 'PAID'
    STATUS_CANCELLED = 'CANCELLED'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_PAID, 'Paid'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]
    # Vehicles on an invoice in one of these states cannot be invoiced again
    OPEN_STATUSES = [STATUS_PENDING, STATUS_PAID]

    invoice_number = models.CharField(max_length=20, unique=True)
    dealer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='invoices')
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING)
    paid_at = models.DateTimeField(null=True, blank=True)
    paid_from_balance = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.invoice_number

    class Meta:
        db_table = 'invoices'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['dealer', 'status'], name='invoices_dealer_status_idx'),
            models.Index(fields=['status', '-created_at'], name='invoices_status_created_idx'),
        ]


class InvoiceItem(models.Model):
    invoice = models.ForeignKey(Invoice, on_delete=models.CASCADE, related_name='items')
    vehicle = models.ForeignKey(Vehicle, on_delete=models.PROTECT, related_name='invoice_items')
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    description = models.CharField(max_length=255)

    def __str__(self):
        return f"{self.invoice.invoice_number}: {self.description}"

    class Meta:
        db_table = 'invoice_items'
        ordering = ['id']
