from decimal import Decimal

from rest_framework import serializers

from autodashboard.core.models import User
from .models import BalanceRequest, Transaction

MAX_TOP_UP_AMOUNT = Decimal('1000000')


class DealerBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'name', 'email', 'company_name', 'balance']


class TransactionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Transaction
        fields = ['id', 'type', 'amount', 'balance_after', 'description',
                  'reference_type', 'reference_id', 'created_at']


class BalanceRequestSerializer(serializers.ModelSerializer):
    dealer = DealerBriefSerializer(read_only=True)
    processed_by_name = serializers.CharField(source='processed_by.name', read_only=True, default=None)

    class Meta:
        model = BalanceRequest
        fields = ['id', 'dealer', 'amount', 'receipt_url', 'comment', 'status', 'admin_comment',
                  'processed_at', 'processed_by_name', 'created_at', 'updated_at']


class DealerBalanceRequestSerializer(serializers.ModelSerializer):
    """A dealer's own requests; no dealer block"""

    class Meta:
        model = BalanceRequest
        fields = ['id', 'amount', 'receipt_url', 'comment', 'status', 'admin_comment',
                  'processed_at', 'created_at']


class BalanceRequestCreateSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, error_messages={
        'invalid': 'Amount must be a number',
        'required': 'Amount is required',
    })
    receipt_url = serializers.URLField(max_length=500, error_messages={
        'required': 'Receipt is required',
        'blank': 'Receipt is required',
        'invalid': 'Invalid receipt URL',
    })
    comment = serializers.CharField(max_length=1000, required=False, allow_blank=True, default='')

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError('Amount must be greater than 0')
        if value > MAX_TOP_UP_AMOUNT:
            raise serializers.ValidationError('Amount cannot exceed $1,000,000')
        return value


class ProcessBalanceRequestSerializer(serializers.Serializer):
    comment = serializers.CharField(max_length=1000, required=False, allow_blank=True, default='')
