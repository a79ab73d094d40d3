from rest_framework import serializers
from .models import Country, State, City, Port


class CountrySerializer(serializers.ModelSerializer):
    code = serializers.CharField(max_length=3, min_length=2, error_messages={
        'min_length': 'Country code must be 2-3 characters',
        'max_length': 'Country code must be 2-3 characters',
    })

    class Meta:
        model = Country
        fields = ['id', 'code', 'name_en', 'name_ka', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_code(self, value):
        value = value.strip().upper()
        duplicates = Country.objects.filter(code=value)
        if self.instance:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise serializers.ValidationError('A country with this code already exists')
        return value


class StateSerializer(serializers.ModelSerializer):
    country = serializers.PrimaryKeyRelatedField(
        queryset=Country.objects.all(),
        error_messages={'does_not_exist': 'Country not found'},
    )
    country_name = serializers.CharField(source='country.name_en', read_only=True)

    class Meta:
        model = State
        fields = ['id', 'code', 'name_en', 'name_ka', 'country', 'country_name', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']
        validators = []

    def validate_code(self, value):
        return value.strip().upper()

    def validate(self, attrs):
        country = attrs.get('country', getattr(self.instance, 'country', None))
        code = attrs.get('code', getattr(self.instance, 'code', None))
        duplicates = State.objects.filter(country=country, code=code)
        if self.instance:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise serializers.ValidationError({'code': 'A state with this code already exists in this country'})
        return attrs


class CitySerializer(serializers.ModelSerializer):
    state = serializers.PrimaryKeyRelatedField(
        queryset=State.objects.all(),
        error_messages={'does_not_exist': 'State not found'},
    )
    state_name = serializers.CharField(source='state.name_en', read_only=True)
    country_name = serializers.CharField(source='state.country.name_en', read_only=True)

    class Meta:
        model = City
        fields = ['id', 'name', 'state', 'state_name', 'country_name', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']


class PortSerializer(serializers.ModelSerializer):
    state = serializers.PrimaryKeyRelatedField(
        queryset=State.objects.all(),
        error_messages={'does_not_exist': 'State not found'},
    )
    state_name = serializers.CharField(source='state.name_en', read_only=True)
    country_name = serializers.CharField(source='state.country.name_en', read_only=True)

    class Meta:
        model = Port
        fields = ['id', 'name', 'is_destination', 'state', 'state_name', 'country_name', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']


class LocationOptionSerializer(serializers.Serializer):
    """City or port with its state and country labels, for dropdowns"""
    id = serializers.IntegerField()
    name = serializers.CharField()
    state_id = serializers.IntegerField()
    state_name = serializers.CharField(source='state.name_en')
    state_code = serializers.CharField(source='state.code')
    country_name = serializers.CharField(source='state.country.name_en')
    country_code = serializers.CharField(source='state.country.code')
