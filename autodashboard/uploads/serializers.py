from rest_framework import serializers

from autodashboard.vehicles.models import VehiclePhoto
from .images import KIND_VEHICLE_PHOTO, KIND_RECEIPT

MAX_UPLOAD_BYTES = 10 * 1024 * 1024

CONTENT_TYPE_EXTENSIONS = {
    'image/jpeg': 'jpg',
    'image/png': 'png',
    'image/webp': 'webp',
    'image/gif': 'gif',
    'image/heic': 'heic',
    'image/heif': 'heif',
}

KIND_CHOICES = [(KIND_VEHICLE_PHOTO, 'Vehicle photo'), (KIND_RECEIPT, 'Receipt')]


class VehiclePhotoTargetMixin:
    """vehicle_id and stage are required for vehicle photos"""

    def validate(self, attrs):
        if attrs.get('kind', KIND_VEHICLE_PHOTO) == KIND_VEHICLE_PHOTO:
            if not attrs.get('vehicle_id'):
                raise serializers.ValidationError({'vehicle_id': 'Vehicle is required'})
            if not attrs.get('stage'):
                raise serializers.ValidationError({'stage': 'Photo stage is required'})
        return attrs


class PresignedUploadSerializer(VehiclePhotoTargetMixin, serializers.Serializer):
    kind = serializers.ChoiceField(choices=KIND_CHOICES)
    content_type = serializers.CharField()
    file_size = serializers.IntegerField(min_value=1, error_messages={'required': 'File size is required'})
    vehicle_id = serializers.IntegerField(required=False)
    stage = serializers.ChoiceField(choices=VehiclePhoto.STAGE_CHOICES, required=False)

    def validate_content_type(self, value):
        value = value.strip().lower()
        if value not in CONTENT_TYPE_EXTENSIONS:
            raise serializers.ValidationError('Invalid file type. Allowed: JPEG, PNG, WebP, GIF, HEIC')
        return value

    def validate_file_size(self, value):
        if value > MAX_UPLOAD_BYTES:
            raise serializers.ValidationError('File is too large. Maximum size is 10MB')
        return value


class ConfirmUploadSerializer(VehiclePhotoTargetMixin, serializers.Serializer):
    kind = serializers.ChoiceField(choices=KIND_CHOICES)
    key = serializers.CharField(max_length=500)
    vehicle_id = serializers.IntegerField(required=False)
    stage = serializers.ChoiceField(choices=VehiclePhoto.STAGE_CHOICES, required=False)


class ImportPhotoSerializer(serializers.Serializer):
    url = serializers.URLField(max_length=1000)
    vehicle_id = serializers.IntegerField()
    stage = serializers.ChoiceField(choices=VehiclePhoto.STAGE_CHOICES)
