from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class BalanceRequest(models.Model):
    """Dealer request to top up the account balance, approved or rejected by an admin"""
    STATUS_PENDING = 'PENDING'
    STATUS_APPROVED = 'APPROVED'
    STATUS_REJECTED = 'REJECTED'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_APPROVED, 'Approved'),
        (STATUS_REJECTED, 'Rejected'),
    ]

    dealer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='balance_requests')
    amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    receipt_url = models.URLField(max_length=500)
    comment = models.TextField(blank=True, default='')
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING)
    admin_comment = models.TextField(blank=True, default='')
    processed_at = models.DateTimeField(null=True, blank=True)
    processed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='processed_balance_requests'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Balance request #{self.pk} ${self.amount} ({self.status})"

    class Meta:
        db_table = 'balance_requests'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', '-created_at'], name='balreq_status_created_idx'),
            models.Index(fields=['dealer', 'status'], name='balreq_dealer_status_idx'),
        ]


class Transaction(models.Model):
    """
    Dealer balance ledger. amount is signed: deposits are positive,
    withdrawals and invoice payments negative.
    """
    TYPE_DEPOSIT = 'DEPOSIT'
    TYPE_WITHDRAWAL = 'WITHDRAWAL'
    TYPE_INVOICE_PAYMENT = 'INVOICE_PAYMENT'
    TYPE_ADJUSTMENT = 'ADJUSTMENT'
    TYPE_CHOICES = [
        (TYPE_DEPOSIT, 'Deposit'),
        (TYPE_WITHDRAWAL, 'Withdrawal'),
        (TYPE_INVOICE_PAYMENT, 'Invoice Payment'),
        (TYPE_ADJUSTMENT, 'Adjustment'),
    ]

    dealer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='transactions')
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    balance_after = models.DecimalField(max_digits=12, decimal_places=2)
    description = models.CharField(max_length=500, blank=True, default='')
    reference_type = models.CharField(max_length=50, blank=True, null=True)
    reference_id = models.CharField(max_length=50, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.type} {self.amount} for dealer {self.dealer_id}"

    class Meta:
        db_table = 'transactions'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['dealer', '-created_at'], name='txn_dealer_created_idx'),
            models.Index(fields=['type'], name='txn_type_idx'),
        ]
