from decimal import Decimal

from django.db import transaction
from rest_framework import serializers

from autodashboard.balances.models import Transaction
from autodashboard.balances.utils import apply_balance_change
from autodashboard.core.models import User

BALANCE_ADJUSTMENT_DESCRIPTION = 'Balance adjusted by admin'


class DealerSerializer(serializers.ModelSerializer):
    """Admin create / update of dealer accounts; the role is always DEALER"""
    email = serializers.EmailField(error_messages={'invalid': 'Invalid email address'})
    password = serializers.CharField(write_only=True, required=False, allow_blank=True)
    name = serializers.CharField(max_length=200, min_length=2, error_messages={
        'min_length': 'Name must be at least 2 characters',
    })
    phone = serializers.CharField(max_length=30, min_length=5, error_messages={
        'min_length': 'Phone must be at least 5 characters',
    })
    address = serializers.CharField(max_length=500, min_length=5, error_messages={
        'min_length': 'Address must be at least 5 characters',
    })
    company_name = serializers.CharField(max_length=200, required=False, allow_blank=True, allow_null=True)
    identification_number = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)
    balance = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal('0'), required=False,
        error_messages={'min_value': 'Balance cannot be negative'},
    )
    discount = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=Decimal('0'), max_value=Decimal('100'), required=False,
        error_messages={
            'min_value': 'Discount must be between 0 and 100',
            'max_value': 'Discount must be between 0 and 100',
        },
    )
    status = serializers.ChoiceField(choices=User.STATUS_CHOICES, required=False)

    class Meta:
        model = User
        fields = ['id', 'email', 'password', 'name', 'phone', 'address', 'company_name',
                  'identification_number', 'balance', 'discount', 'status', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_email(self, value):
        value = value.strip().lower()
        duplicates = User.objects.filter(email__iexact=value)
        if self.instance:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise serializers.ValidationError('A user with this email already exists')
        return value

    def validate_password(self, value):
        if not value:
            if self.instance is None:
                raise serializers.ValidationError('Password is required')
            return value
        if len(value) < 8:
            raise serializers.ValidationError('Password must be at least 8 characters')
        return value

    def validate(self, attrs):
        if self.instance is None and not attrs.get('password'):
            raise serializers.ValidationError({'password': 'Password is required'})
        for field in ('company_name', 'identification_number'):
            if field in attrs and attrs[field] is not None:
                attrs[field] = attrs[field].strip() or None
        return attrs

    def create(self, validated_data):
        password = validated_data.pop('password')
        balance = validated_data.pop('balance', None)
        validated_data['role'] = User.ROLE_DEALER
        with transaction.atomic():
            dealer = User.objects.create_user(password=password, **validated_data)
            if balance:
                dealer, _ = apply_balance_change(
                    dealer.pk, balance, Transaction.TYPE_ADJUSTMENT, BALANCE_ADJUSTMENT_DESCRIPTION,
                )
        return dealer

    def update(self, instance, validated_data):
        password = validated_data.pop('password', None)
        balance = validated_data.pop('balance', None)
        validated_data.pop('role', None)
        with transaction.atomic():
            # Balance changes go through the ledger as an adjustment
            current = User.objects.select_for_update().get(pk=instance.pk).balance
            if balance is not None and balance != current:
                dealer, _ = apply_balance_change(
                    instance.pk, balance - current, Transaction.TYPE_ADJUSTMENT, BALANCE_ADJUSTMENT_DESCRIPTION,
                )
                current = dealer.balance
            instance.balance = current
            for attr, value in validated_data.items():
                setattr(instance, attr, value)
            if password:
                instance.set_password(password)
            instance.save()
        return instance


class DealerListSerializer(serializers.ModelSerializer):
    vehicleCount = serializers.IntegerField(source='vehicle_count', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'email', 'name', 'phone', 'address', 'company_name', 'identification_number',
                  'balance', 'discount', 'status', 'vehicleCount', 'created_at']
