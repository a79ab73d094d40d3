from decimal import Decimal

from rest_framework import serializers

from autodashboard.locations.models import City, Port
from .models import TowingPrice, ShippingPrice, InsurancePrice

POSITIVE_PRICE = {
    'max_digits': 12,
    'decimal_places': 2,
    'min_value': Decimal('0.01'),
    'error_messages': {'min_value': 'Price must be greater than 0'},
}


class TowingPriceSerializer(serializers.ModelSerializer):
    city = serializers.PrimaryKeyRelatedField(
        queryset=City.objects.all(), error_messages={'does_not_exist': 'City not found'},
    )
    port = serializers.PrimaryKeyRelatedField(
        queryset=Port.objects.all(), error_messages={'does_not_exist': 'Port not found'},
    )
    price = serializers.DecimalField(**POSITIVE_PRICE)
    city_name = serializers.CharField(source='city.name', read_only=True)
    state_name = serializers.CharField(source='city.state.name_en', read_only=True)
    port_name = serializers.CharField(source='port.name', read_only=True)

    class Meta:
        model = TowingPrice
        fields = ['id', 'city', 'city_name', 'state_name', 'port', 'port_name', 'price', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']
        validators = []

    def validate(self, attrs):
        city = attrs.get('city', getattr(self.instance, 'city', None))
        port = attrs.get('port', getattr(self.instance, 'port', None))
        duplicates = TowingPrice.objects.filter(city=city, port=port)
        if self.instance:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise serializers.ValidationError('A towing price for this city-port combination already exists')
        return attrs


class ShippingPriceSerializer(serializers.ModelSerializer):
    origin_port = serializers.PrimaryKeyRelatedField(
        queryset=Port.objects.all(), error_messages={'does_not_exist': 'Origin port not found'},
    )
    destination_port = serializers.PrimaryKeyRelatedField(
        queryset=Port.objects.all(), error_messages={'does_not_exist': 'Destination port not found'},
    )
    price = serializers.DecimalField(**POSITIVE_PRICE)
    origin_port_name = serializers.CharField(source='origin_port.name', read_only=True)
    destination_port_name = serializers.CharField(source='destination_port.name', read_only=True)

    class Meta:
        model = ShippingPrice
        fields = ['id', 'origin_port', 'origin_port_name', 'destination_port', 'destination_port_name',
                  'price', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']
        validators = []

    def validate(self, attrs):
        origin = attrs.get('origin_port', getattr(self.instance, 'origin_port', None))
        destination = attrs.get('destination_port', getattr(self.instance, 'destination_port', None))
        duplicates = ShippingPrice.objects.filter(origin_port=origin, destination_port=destination)
        if self.instance:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise serializers.ValidationError('A shipping price for this port combination already exists')
        return attrs


class InsurancePriceSerializer(serializers.ModelSerializer):
    min_value = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'), error_messages={
        'min_value': 'Minimum value must be 0 or greater',
    })
    max_value = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'), error_messages={
        'min_value': 'Maximum value must be greater than 0',
    })
    price = serializers.DecimalField(**POSITIVE_PRICE)

    class Meta:
        model = InsurancePrice
        fields = ['id', 'min_value', 'max_value', 'price', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate(self, attrs):
        min_value = attrs.get('min_value', getattr(self.instance, 'min_value', None))
        max_value = attrs.get('max_value', getattr(self.instance, 'max_value', None))
        if min_value >= max_value:
            raise serializers.ValidationError({'min_value': 'Minimum value must be less than maximum value'})

        overlapping = InsurancePrice.objects.filter(min_value__lte=max_value, max_value__gte=min_value)
        if self.instance:
            overlapping = overlapping.exclude(pk=self.instance.pk)
        if overlapping.exists():
            raise serializers.ValidationError('This value range overlaps with an existing insurance price')
        return attrs


class CalculatePriceSerializer(serializers.Serializer):
    city_id = serializers.IntegerField(error_messages={'required': 'City is required'})
    origin_port_id = serializers.IntegerField(error_messages={'required': 'Origin port is required'})
    destination_port_id = serializers.IntegerField(error_messages={'required': 'Destination port is required'})
    vehicle_value = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal('0.01'),
        error_messages={
            'required': 'Vehicle value is required',
            'min_value': 'Vehicle value must be greater than 0',
        },
    )
