import re

from django.utils import timezone
from rest_framework import serializers

from autodashboard.catalog.models import Make, VehicleModel, Auction, Status
from autodashboard.core.models import User
from autodashboard.core.serializers import UserBriefSerializer
from autodashboard.locations.models import Country, State, City, Port
from .models import Vehicle, VehiclePhoto, VehicleStatusHistory, VehicleComment

VIN_RE = re.compile(r'^[A-HJ-NPR-Z0-9]{17}$')


def _pk_field(queryset, label, **kwargs):
    return serializers.PrimaryKeyRelatedField(
        queryset=queryset,
        error_messages={
            'does_not_exist': f'{label} not found',
            'required': f'{label} is required',
            'null': f'{label} is required',
        },
        **kwargs,
    )


class MakeBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Make
        fields = ['id', 'name']


class ModelBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = VehicleModel
        fields = ['id', 'name']


class StatusBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Status
        fields = ['id', 'name_en', 'name_ka', 'color', 'order']


class VehiclePhotoSerializer(serializers.ModelSerializer):
    class Meta:
        model = VehiclePhoto
        fields = ['id', 'url', 'stage', 'order', 'created_at']


class VehicleStatusHistorySerializer(serializers.ModelSerializer):
    status = StatusBriefSerializer(read_only=True)
    changed_by = UserBriefSerializer(read_only=True)

    class Meta:
        model = VehicleStatusHistory
        fields = ['id', 'status', 'changed_by', 'changed_at']


class VehicleCommentSerializer(serializers.ModelSerializer):
    user = UserBriefSerializer(read_only=True)
    content = serializers.CharField(max_length=2000, trim_whitespace=True, error_messages={
        'blank': 'Comment cannot be empty',
        'required': 'Comment cannot be empty',
        'max_length': 'Comment must be 2000 characters or less',
    })

    class Meta:
        model = VehicleComment
        fields = ['id', 'user', 'content', 'created_at']
        read_only_fields = ['id', 'user', 'created_at']


class VehicleListSerializer(serializers.ModelSerializer):
    """List row with nested labels and the first photo"""
    make = MakeBriefSerializer(read_only=True)
    model = ModelBriefSerializer(read_only=True)
    status = StatusBriefSerializer(read_only=True)
    dealer = UserBriefSerializer(read_only=True)
    photo_url = serializers.SerializerMethodField()

    class Meta:
        model = Vehicle
        fields = ['id', 'vin', 'year', 'make', 'model', 'color', 'lot_number', 'status', 'dealer',
                  'transportation_price', 'is_archived', 'archived_at', 'photo_url', 'created_at']

    def get_photo_url(self, obj):
        # photos are prefetched in display order
        photos = list(obj.photos.all())
        return photos[0].url if photos else None


class VehicleDetailSerializer(VehicleListSerializer):
    auction = serializers.SerializerMethodField()
    location = serializers.SerializerMethodField()
    photos = VehiclePhotoSerializer(many=True, read_only=True)
    status_history = VehicleStatusHistorySerializer(many=True, read_only=True)
    comments = VehicleCommentSerializer(many=True, read_only=True)

    class Meta(VehicleListSerializer.Meta):
        fields = VehicleListSerializer.Meta.fields + [
            'damage_type', 'has_keys', 'auction', 'auction_link', 'location',
            'ship_name', 'container_number', 'eta', 'updated_at',
            'photos', 'status_history', 'comments',
        ]

    def get_auction(self, obj):
        return {'id': obj.auction_id, 'name': obj.auction.name}

    def get_location(self, obj):
        return {
            'country': {'id': obj.country_id, 'code': obj.country.code, 'name_en': obj.country.name_en},
            'state': {'id': obj.state_id, 'code': obj.state.code, 'name_en': obj.state.name_en},
            'city': {'id': obj.city_id, 'name': obj.city.name} if obj.city_id else None,
            'port': {'id': obj.port_id, 'name': obj.port.name} if obj.port_id else None,
        }


class VehicleWriteSerializer(serializers.ModelSerializer):
    """Create / update payload; foreign keys are passed as ids"""
    dealer = _pk_field(User.objects.filter(role=User.ROLE_DEALER), 'Dealer')
    make = _pk_field(Make.objects.all(), 'Make')
    model = _pk_field(VehicleModel.objects.all(), 'Model')
    auction = _pk_field(Auction.objects.all(), 'Auction')
    status = _pk_field(Status.objects.all(), 'Status')
    country = _pk_field(Country.objects.all(), 'Country')
    state = _pk_field(State.objects.all(), 'State')
    city = _pk_field(City.objects.all(), 'City', required=False, allow_null=True)
    port = _pk_field(Port.objects.all(), 'Port', required=False, allow_null=True)

    vin = serializers.CharField(error_messages={'blank': 'VIN is required', 'required': 'VIN is required'})
    year = serializers.IntegerField()
    lot_number = serializers.CharField(max_length=50, error_messages={
        'blank': 'Lot number is required',
        'required': 'Lot number is required',
    })
    auction_link = serializers.URLField(max_length=500, required=False, allow_blank=True, error_messages={
        'invalid': 'Must be a valid URL',
    })
    damage_type = serializers.ChoiceField(choices=Vehicle.DAMAGE_TYPE_CHOICES, error_messages={
        'invalid_choice': 'Invalid damage type',
    })
    transportation_price = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0,
        error_messages={'min_value': 'Price must be positive'},
    )
    color = serializers.CharField(max_length=50, required=False, allow_blank=True)
    ship_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    container_number = serializers.CharField(max_length=50, required=False, allow_blank=True)
    eta = serializers.DateField(required=False, allow_null=True)

    class Meta:
        model = Vehicle
        fields = ['id', 'dealer', 'vin', 'year', 'make', 'model', 'color', 'damage_type', 'has_keys',
                  'auction', 'lot_number', 'auction_link', 'status', 'country', 'state', 'city', 'port',
                  'ship_name', 'container_number', 'eta', 'transportation_price']
        read_only_fields = ['id']

    def validate_vin(self, value):
        vin = value.strip().upper()
        if len(vin) != 17:
            raise serializers.ValidationError('VIN must be exactly 17 characters')
        if not VIN_RE.match(vin):
            raise serializers.ValidationError('VIN must be alphanumeric (I, O, Q not allowed)')
        duplicates = Vehicle.objects.filter(vin=vin)
        if self.instance:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise serializers.ValidationError('A vehicle with this VIN already exists')
        return vin

    def validate_year(self, value):
        if value < 1900:
            raise serializers.ValidationError('Year must be 1900 or later')
        if value > timezone.now().year + 1:
            raise serializers.ValidationError('Year cannot be more than 1 year in the future')
        return value

    def validate_lot_number(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Lot number is required')
        return value

    def validate(self, attrs):
        make = attrs.get('make', getattr(self.instance, 'make', None))
        model = attrs.get('model', getattr(self.instance, 'model', None))
        if make and model and model.make_id != make.pk:
            raise serializers.ValidationError({'model': 'Model does not belong to the selected make'})
        return attrs
