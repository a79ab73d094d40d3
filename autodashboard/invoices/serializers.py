from rest_framework import serializers

from autodashboard.balances.serializers import DealerBriefSerializer
from autodashboard.core.models import User
from autodashboard.vehicles.models import Vehicle
from .models import Invoice, InvoiceItem


class InvoiceVehicleSerializer(serializers.ModelSerializer):
    make = serializers.CharField(source='make.name', read_only=True)
    model = serializers.CharField(source='model.name', read_only=True)

    class Meta:
        model = Vehicle
        fields = ['id', 'vin', 'year', 'make', 'model', 'lot_number']


class InvoiceItemSerializer(serializers.ModelSerializer):
    vehicle = InvoiceVehicleSerializer(read_only=True)

    class Meta:
        model = InvoiceItem
        fields = ['id', 'vehicle', 'amount', 'description']


class InvoiceListSerializer(serializers.ModelSerializer):
    dealer = DealerBriefSerializer(read_only=True)
    itemCount = serializers.IntegerField(source='item_count', read_only=True)

    class Meta:
        model = Invoice
        fields = ['id', 'invoice_number', 'dealer', 'total_amount', 'status', 'paid_at',
                  'paid_from_balance', 'itemCount', 'created_at']


class InvoiceDetailSerializer(serializers.ModelSerializer):
    dealer = DealerBriefSerializer(read_only=True)
    items = InvoiceItemSerializer(many=True, read_only=True)

    class Meta:
        model = Invoice
        fields = ['id', 'invoice_number', 'dealer', 'total_amount', 'status', 'paid_at',
                  'paid_from_balance', 'items', 'created_at', 'updated_at']


class InvoiceCreateSerializer(serializers.Serializer):
    dealer_id = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.filter(role=User.ROLE_DEALER),
        error_messages={'required': 'Dealer is required', 'does_not_exist': 'Dealer not found'},
    )
    vehicle_ids = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        allow_empty=False,
        error_messages={
            'required': 'Select at least one vehicle',
            'empty': 'Select at least one vehicle',
        },
    )


class MarkPaidSerializer(serializers.Serializer):
    from_balance = serializers.BooleanField(default=True)


class UninvoicedVehicleSerializer(InvoiceVehicleSerializer):
    class Meta(InvoiceVehicleSerializer.Meta):
        fields = InvoiceVehicleSerializer.Meta.fields + ['transportation_price']
