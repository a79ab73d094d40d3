"""Vehicle status transitions and photo cleanup"""
import logging

from django.db import transaction
from django.db.models import Max

from autodashboard.core.utils import create_audit_log
from autodashboard.notifications.models import Notification
from autodashboard.notifications.utils import notify
from autodashboard.uploads.images import delete_image_variants
from .models import Vehicle, VehiclePhoto, VehicleStatusHistory

logger = logging.getLogger(__name__)


class StatusUnchanged(Exception):
    pass


def record_status(vehicle, status, user):
    return VehicleStatusHistory.objects.create(vehicle=vehicle, status=status, changed_by=user)


def change_vehicle_status(vehicle, new_status, user, request=None):
    """
    Move a vehicle to new_status.

    In one transaction: update the vehicle, append a history row, write the
    status_change audit row and notify the dealer. Raises StatusUnchanged
    when the vehicle already has new_status.
    """
    with transaction.atomic():
        vehicle = Vehicle.objects.select_for_update().select_related('status', 'dealer').get(pk=vehicle.pk)
        if vehicle.status_id == new_status.pk:
            raise StatusUnchanged('Status is already set to this value')
        old_status = vehicle.status
        vehicle.status = new_status
        vehicle.save(update_fields=['status', 'updated_at'])
        record_status(vehicle, new_status, user)

        create_audit_log(
            request=request,
            user=user,
            action='status_change',
            model_name='Vehicle',
            object_id=vehicle.pk,
            object_name=vehicle.vin,
            object_reference=vehicle.dealer.email,
            changes={
                'old_data': {'status_id': old_status.pk, 'status': old_status.name_en},
                'new_data': {'status_id': new_status.pk, 'status': new_status.name_en},
            },
        )

        notify(
            vehicle.dealer,
            Notification.TYPE_STATUS_CHANGE,
            'Vehicle Status Updated',
            'მანქანის სტატუსი განახლდა',
            f'Your vehicle {vehicle.vin} status changed from "{old_status.name_en}" to "{new_status.name_en}"',
            f'თქვენი მანქანის {vehicle.vin} სტატუსი შეიცვალა "{old_status.name_ka}"-დან "{new_status.name_ka}"-მდე',
            reference_type='Vehicle',
            reference_id=vehicle.pk,
        )

    logger.info(f"Vehicle {vehicle.vin} status changed from {old_status.name_en} to {new_status.name_en}")
    return vehicle, old_status


def next_photo_order(vehicle):
    current = VehiclePhoto.objects.filter(vehicle=vehicle).aggregate(max_order=Max('order'))['max_order']
    return 0 if current is None else current + 1


def delete_vehicle_photos_from_storage(vehicle):
    """Best-effort removal of every photo variant of a vehicle"""
    for url in vehicle.photos.values_list('url', flat=True):
        try:
            delete_image_variants(url)
        except Exception as e:
            logger.warning(f"Could not delete photo {url} of vehicle {vehicle.pk}: {str(e)}")
