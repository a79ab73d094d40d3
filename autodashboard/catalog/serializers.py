import re

from rest_framework import serializers
from .models import Make, VehicleModel, Auction, Status

HEX_COLOR_RE = re.compile(r'^#([0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$')


def _unique_name(model, value, instance, message):
    value = value.strip()
    duplicates = model.objects.filter(name__iexact=value)
    if instance:
        duplicates = duplicates.exclude(pk=instance.pk)
    if duplicates.exists():
        raise serializers.ValidationError(message)
    return value


class MakeSerializer(serializers.ModelSerializer):
    name = serializers.CharField(max_length=100, error_messages={'blank': 'Name is required'})

    class Meta:
        model = Make
        fields = ['id', 'name', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_name(self, value):
        return _unique_name(Make, value, self.instance, 'A make with this name already exists')


class VehicleModelSerializer(serializers.ModelSerializer):
    make = serializers.PrimaryKeyRelatedField(
        queryset=Make.objects.all(),
        error_messages={'does_not_exist': 'Make not found'},
    )
    make_name = serializers.CharField(source='make.name', read_only=True)

    class Meta:
        model = VehicleModel
        fields = ['id', 'name', 'make', 'make_name', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']
        validators = []

    def validate(self, attrs):
        make = attrs.get('make', getattr(self.instance, 'make', None))
        name = attrs.get('name', getattr(self.instance, 'name', '')).strip()
        duplicates = VehicleModel.objects.filter(make=make, name__iexact=name)
        if self.instance:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise serializers.ValidationError({'name': 'A model with this name already exists for this make'})
        if 'name' in attrs:
            attrs['name'] = name
        return attrs


class AuctionSerializer(serializers.ModelSerializer):
    name = serializers.CharField(max_length=100, error_messages={'blank': 'Name is required'})

    class Meta:
        model = Auction
        fields = ['id', 'name', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_name(self, value):
        return _unique_name(Auction, value, self.instance, 'An auction with this name already exists')


class StatusSerializer(serializers.ModelSerializer):
    order = serializers.IntegerField(min_value=0, error_messages={
        'min_value': 'Order must be 0 or greater',
    })
    color = serializers.CharField(max_length=7, required=False, allow_blank=True, default='')

    class Meta:
        model = Status
        fields = ['id', 'name_en', 'name_ka', 'order', 'color', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_color(self, value):
        value = (value or '').strip()
        if value and not HEX_COLOR_RE.match(value):
            raise serializers.ValidationError('Color must be a hex value like #RGB or #RRGGBB')
        return value


class StatusOrderSerializer(serializers.Serializer):
    ordered_ids = serializers.ListField(
        child=serializers.IntegerField(),
        allow_empty=False,
        error_messages={'empty': 'Status order is required'},
    )

    def validate_ordered_ids(self, value):
        if len(set(value)) != len(value):
            raise serializers.ValidationError('Status ids must be unique')
        found = Status.objects.filter(pk__in=value).count()
        if found != len(value):
            raise serializers.ValidationError('Some statuses were not found')
        return value
