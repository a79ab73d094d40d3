import logging
import time
import uuid

from django.db import transaction
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.response import Response

from autodashboard.core.permissions import IsActiveUser
from autodashboard.core.throttling import UploadRateThrottle
from autodashboard.core.utils import action_result, validation_failed
from autodashboard.vehicles.models import Vehicle, VehiclePhoto
from autodashboard.vehicles.utils import next_photo_order
from . import storage
from .images import KIND_VEHICLE_PHOTO, KIND_RECEIPT, process_image, fetch_remote_image
from .serializers import (
    CONTENT_TYPE_EXTENSIONS, PresignedUploadSerializer, ConfirmUploadSerializer, ImportPhotoSerializer,
)

logger = logging.getLogger('autodashboard.uploads')


def _vehicle_for(user, vehicle_id):
    """Return (vehicle, error_response); dealers only reach their own vehicles"""
    vehicle = Vehicle.objects.filter(pk=vehicle_id).first()
    if not vehicle:
        return None, action_result(False, 'Vehicle not found', status.HTTP_404_NOT_FOUND)
    if not user.is_admin_role and vehicle.dealer_id != user.pk:
        logger.warning(f"User {user.email} tried to upload to vehicle {vehicle_id} they do not own")
        return None, action_result(False, 'You can only upload photos for your own vehicles', status.HTTP_403_FORBIDDEN)
    return vehicle, None


def _object_name(extension):
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}.{extension}"


def _key_prefix(user, kind, vehicle_id=None, stage=None):
    if kind == KIND_VEHICLE_PHOTO:
        return f"vehicles/{vehicle_id}/{stage.lower()}/"
    owner = user.pk if user.is_dealer else 'pending'
    return f"receipts/{owner}/"


def _save_vehicle_photo(vehicle, stage, key):
    """Run the image pipeline on key and attach the md variant to the vehicle"""
    result = process_image(key, KIND_VEHICLE_PHOTO)
    if not result['success']:
        return action_result(False, result['error'] or 'Failed to process image', status.HTTP_500_INTERNAL_SERVER_ERROR)

    with transaction.atomic():
        # Lock the vehicle so concurrent uploads get distinct order values
        Vehicle.objects.select_for_update().get(pk=vehicle.pk)
        photo = VehiclePhoto.objects.create(
            vehicle=vehicle,
            url=result['variants']['md'],
            stage=stage,
            order=next_photo_order(vehicle),
        )
    logger.info(f"Photo {photo.pk} added to vehicle {vehicle.pk} ({stage})")
    return action_result(
        True, 'Photo uploaded successfully', status.HTTP_201_CREATED,
        id=photo.pk, url=photo.url, variants=result['variants'],
    )


@api_view(['POST'])
@permission_classes([IsActiveUser])
@throttle_classes([UploadRateThrottle])
def presigned_upload(request):
    """
    Issue a presigned PUT URL for a vehicle photo or a balance receipt.

    The client uploads the file directly to storage and then calls confirm.
    """
    serializer = PresignedUploadSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_failed(serializer)
    data = serializer.validated_data

    if data['kind'] == KIND_VEHICLE_PHOTO:
        _, error = _vehicle_for(request.user, data['vehicle_id'])
        if error:
            return error

    prefix = _key_prefix(request.user, data['kind'], data.get('vehicle_id'), data.get('stage'))
    key = prefix + _object_name(CONTENT_TYPE_EXTENSIONS[data['content_type']])
    try:
        upload_url = storage.generate_presigned_upload_url(key, data['content_type'])
    except Exception as e:
        logger.error(f"Failed to create presigned URL for {key}: {str(e)}", exc_info=True)
        return action_result(False, 'Failed to prepare upload', status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response({
        'uploadUrl': upload_url,
        'key': key,
        'publicUrl': storage.get_public_url(key),
    })


@api_view(['POST'])
@permission_classes([IsActiveUser])
@throttle_classes([UploadRateThrottle])
def confirm_upload(request):
    """Process an uploaded original into WebP variants and record it"""
    serializer = ConfirmUploadSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_failed(serializer)
    data = serializer.validated_data
    key = data['key']

    if data['kind'] == KIND_VEHICLE_PHOTO:
        vehicle, error = _vehicle_for(request.user, data['vehicle_id'])
        if error:
            return error
    expected_prefix = _key_prefix(request.user, data['kind'], data.get('vehicle_id'), data.get('stage'))
    if not key.startswith(expected_prefix):
        return action_result(False, 'Invalid upload key')

    if not storage.object_exists(key):
        return action_result(False, 'Uploaded file not found', status.HTTP_404_NOT_FOUND)

    if data['kind'] == KIND_VEHICLE_PHOTO:
        return _save_vehicle_photo(vehicle, data['stage'], key)

    result = process_image(key, KIND_RECEIPT)
    if not result['success']:
        return action_result(False, result['error'] or 'Failed to process image', status.HTTP_500_INTERNAL_SERVER_ERROR)
    logger.info(f"Receipt {key} processed for {request.user.email}")
    return action_result(True, 'Receipt uploaded successfully', id=key, url=result['variants']['lg'], variants=result['variants'])


@api_view(['POST'])
@permission_classes([IsActiveUser])
@throttle_classes([UploadRateThrottle])
def import_vehicle_photo(request):
    """Copy a photo from a public URL (e.g. an auction listing) onto a vehicle"""
    serializer = ImportPhotoSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_failed(serializer)
    data = serializer.validated_data

    vehicle, error = _vehicle_for(request.user, data['vehicle_id'])
    if error:
        return error

    try:
        body, content_type = fetch_remote_image(data['url'])
    except Exception as e:
        logger.warning(f"Could not fetch remote image {data['url']}: {str(e)}")
        return action_result(False, f'Could not download image: {str(e)}')

    extension = CONTENT_TYPE_EXTENSIONS.get(content_type, 'jpg')
    key = _key_prefix(request.user, KIND_VEHICLE_PHOTO, vehicle.pk, data['stage']) + _object_name(extension)
    try:
        storage.upload_object(key, body, content_type)
    except Exception as e:
        logger.error(f"Failed to store imported image {key}: {str(e)}", exc_info=True)
        return action_result(False, 'Failed to store image', status.HTTP_500_INTERNAL_SERVER_ERROR)
    return _save_vehicle_photo(vehicle, data['stage'], key)
