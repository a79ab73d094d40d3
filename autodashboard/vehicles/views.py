import logging

from django.db import transaction
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from autodashboard.catalog.models import Make, Auction, Status
from autodashboard.core.cache_utils import cached_query, REFERENCE_OPTIONS_CACHE_TTL, REFERENCE_OPTIONS_PREFIX
from autodashboard.core.models import User
from autodashboard.core.permissions import IsAdminRole, IsDealerRole
from autodashboard.core.utils import (
    action_result, apply_sorting, paginate, parse_int, create_audit_log, validation_failed,
)
from autodashboard.locations.models import Country, Port
from autodashboard.uploads.images import delete_image_variants
from .filters import VehicleFilter, DealerVehicleFilter
from .models import Vehicle, VehiclePhoto
from .serializers import (
    VehicleListSerializer, VehicleDetailSerializer, VehicleWriteSerializer, VehicleCommentSerializer,
)
from .utils import (
    StatusUnchanged, change_vehicle_status, record_status, delete_vehicle_photos_from_storage,
)

logger = logging.getLogger('autodashboard.vehicles')

VEHICLE_SORT_FIELDS = {
    'created_at': 'created_at',
    'year': 'year',
    'vin': 'vin',
    'lot_number': 'lot_number',
}


def _list_queryset():
    return Vehicle.objects.select_related('make', 'model', 'status', 'dealer').prefetch_related('photos')


def _detail_queryset():
    return Vehicle.objects.select_related(
        'make', 'model', 'status', 'dealer', 'auction', 'country', 'state', 'city', 'port',
    ).prefetch_related(
        'photos',
        'status_history__status',
        'status_history__changed_by',
        'comments__user',
    )


def _not_found():
    return action_result(False, 'Vehicle not found', status.HTTP_404_NOT_FOUND)


def _vehicle_list_response(request, queryset, filter_class):
    params = request.query_params
    queryset = filter_class(params, queryset=queryset).qs
    queryset = apply_sorting(queryset, params, VEHICLE_SORT_FIELDS)
    return Response(paginate(queryset, params, lambda rows: VehicleListSerializer(rows, many=True).data))


def _filter_options(queryset):
    """Statuses, makes, distinct years (desc) and ports present in queryset"""
    return {
        'statuses': list(Status.objects.order_by('order').values('id', 'name_en', 'name_ka', 'color')),
        'makes': list(Make.objects.filter(vehicles__in=queryset).distinct().order_by('name').values('id', 'name')),
        'years': list(queryset.order_by('-year').values_list('year', flat=True).distinct()),
        'ports': list(Port.objects.filter(vehicles__in=queryset).distinct().order_by('name').values('id', 'name')),
    }


def _add_comment(request, vehicle):
    serializer = VehicleCommentSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_failed(serializer)
    try:
        comment = serializer.save(vehicle=vehicle, user=request.user)
        logger.info(f"User {request.user.email} commented on vehicle {vehicle.vin}")
        return action_result(
            True, 'Comment added successfully', status.HTTP_201_CREATED,
            comment=VehicleCommentSerializer(comment).data,
        )
    except Exception as e:
        logger.error(f"Error adding comment to vehicle {vehicle.pk}: {str(e)}", exc_info=True)
        return action_result(False, 'Failed to add comment', status.HTTP_500_INTERNAL_SERVER_ERROR)


# Admin vehicle views
@api_view(['GET', 'POST'])
@permission_classes([IsAdminRole])
def vehicle_list_create(request):
    """
    GET: list vehicles (search, status, dealer, make, year, port, show_archived)
    POST: create a vehicle and its initial status history row
    """
    if request.method == 'GET':
        return _vehicle_list_response(request, _list_queryset(), VehicleFilter)

    serializer = VehicleWriteSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_failed(serializer)
    try:
        with transaction.atomic():
            vehicle = serializer.save()
            record_status(vehicle, vehicle.status, request.user)
            create_audit_log(
                request=request,
                action='create',
                model_name='Vehicle',
                object_id=vehicle.pk,
                object_name=vehicle.vin,
                object_reference=vehicle.dealer.email,
            )
        logger.info(f"User {request.user.email} created vehicle {vehicle.vin}")
        return action_result(True, 'Vehicle created successfully', status.HTTP_201_CREATED, id=vehicle.pk)
    except Exception as e:
        logger.error(f"Error creating vehicle: {str(e)}", exc_info=True)
        return action_result(False, 'Failed to create vehicle', status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminRole])
def vehicle_detail(request, pk):
    """Get, update or delete a vehicle"""
    if request.method == 'GET':
        vehicle = _detail_queryset().filter(pk=pk).first()
        if not vehicle:
            return _not_found()
        return Response(VehicleDetailSerializer(vehicle).data)

    vehicle = Vehicle.objects.select_related('dealer').filter(pk=pk).first()
    if not vehicle:
        return _not_found()

    if request.method == 'DELETE':
        invoice_count = vehicle.invoice_items.values('invoice').distinct().count()
        if invoice_count:
            return action_result(False, f'Cannot delete: vehicle is on {invoice_count} invoice(s)')
        vin = vehicle.vin
        delete_vehicle_photos_from_storage(vehicle)
        try:
            vehicle.delete()
        except Exception as e:
            logger.error(f"Error deleting vehicle {pk}: {str(e)}", exc_info=True)
            return action_result(False, 'Failed to delete vehicle', status.HTTP_500_INTERNAL_SERVER_ERROR)
        create_audit_log(request=request, action='delete', model_name='Vehicle', object_id=pk, object_name=vin)
        logger.info(f"User {request.user.email} deleted vehicle {vin}")
        return action_result(True, 'Vehicle deleted successfully')

    old_status_id = vehicle.status_id
    serializer = VehicleWriteSerializer(vehicle, data=request.data, partial=request.method == 'PATCH')
    if not serializer.is_valid():
        return validation_failed(serializer)
    try:
        with transaction.atomic():
            vehicle = serializer.save()
            if vehicle.status_id != old_status_id:
                record_status(vehicle, vehicle.status, request.user)
            create_audit_log(
                request=request,
                action='update',
                model_name='Vehicle',
                object_id=vehicle.pk,
                object_name=vehicle.vin,
                object_reference=vehicle.dealer.email,
                changes={'new_data': serializer.data},
            )
        logger.info(f"User {request.user.email} updated vehicle {vehicle.vin}")
        return action_result(True, 'Vehicle updated successfully', id=vehicle.pk)
    except Exception as e:
        logger.error(f"Error updating vehicle {pk}: {str(e)}", exc_info=True)
        return action_result(False, 'Failed to update vehicle', status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET'])
@permission_classes([IsAdminRole])
def vehicle_filter_options(request):
    options = _filter_options(Vehicle.objects.all())
    options['dealers'] = list(
        User.objects.filter(role=User.ROLE_DEALER).order_by('name').values('id', 'name', 'email')
    )
    return Response(options)


@cached_query(cache_ttl=REFERENCE_OPTIONS_CACHE_TTL, key_prefix=f'{REFERENCE_OPTIONS_PREFIX}:vehicle_form')
def get_vehicle_form_options():
    return {
        'dealers': list(
            User.objects.filter(role=User.ROLE_DEALER, status=User.STATUS_ACTIVE)
            .order_by('name').values('id', 'name')
        ),
        'makes': list(Make.objects.order_by('name').values('id', 'name')),
        'auctions': list(Auction.objects.order_by('name').values('id', 'name')),
        'statuses': list(Status.objects.order_by('order').values('id', 'name_en', 'name_ka')),
        'countries': list(Country.objects.order_by('name_en').values('id', 'code', 'name_en', 'name_ka')),
        'destination_ports': list(
            Port.objects.filter(is_destination=True).order_by('name').values('id', 'name')
        ),
        'damage_types': [{'value': v, 'label': label} for v, label in Vehicle.DAMAGE_TYPE_CHOICES],
    }


@api_view(['GET'])
@permission_classes([IsAdminRole])
def vehicle_form_options(request):
    return Response(get_vehicle_form_options())


@api_view(['POST'])
@permission_classes([IsAdminRole])
def vehicle_change_status(request, pk):
    """Move a vehicle to another status and notify its dealer"""
    vehicle = Vehicle.objects.filter(pk=pk).first()
    if not vehicle:
        return _not_found()
    new_status = Status.objects.filter(pk=parse_int(request.data.get('status_id'))).first()
    if not new_status:
        return action_result(False, 'Status not found', status.HTTP_404_NOT_FOUND)

    try:
        change_vehicle_status(vehicle, new_status, request.user, request=request)
        return action_result(True, 'Status updated successfully')
    except StatusUnchanged as e:
        return action_result(False, str(e))
    except Exception as e:
        logger.error(f"Error changing status of vehicle {pk}: {str(e)}", exc_info=True)
        return action_result(False, 'Failed to update status', status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['POST'])
@permission_classes([IsAdminRole])
def vehicle_archive(request, pk):
    vehicle = Vehicle.objects.filter(pk=pk).first()
    if not vehicle:
        return _not_found()
    if vehicle.is_archived:
        return action_result(False, 'Vehicle is already archived')

    vehicle.is_archived = True
    vehicle.archived_at = timezone.now()
    vehicle.save(update_fields=['is_archived', 'archived_at', 'updated_at'])
    create_audit_log(request=request, action='archive', model_name='Vehicle', object_id=vehicle.pk, object_name=vehicle.vin)
    logger.info(f"User {request.user.email} archived vehicle {vehicle.vin}")
    return action_result(True, 'Vehicle archived successfully')


@api_view(['POST'])
@permission_classes([IsAdminRole])
def vehicle_restore(request, pk):
    vehicle = Vehicle.objects.filter(pk=pk).first()
    if not vehicle:
        return _not_found()
    if not vehicle.is_archived:
        return action_result(False, 'Vehicle is not archived')

    vehicle.is_archived = False
    vehicle.archived_at = None
    vehicle.save(update_fields=['is_archived', 'archived_at', 'updated_at'])
    create_audit_log(request=request, action='restore', model_name='Vehicle', object_id=vehicle.pk, object_name=vehicle.vin)
    logger.info(f"User {request.user.email} restored vehicle {vehicle.vin}")
    return action_result(True, 'Vehicle restored successfully')


@api_view(['POST'])
@permission_classes([IsAdminRole])
def vehicle_add_comment(request, pk):
    vehicle = Vehicle.objects.filter(pk=pk).first()
    if not vehicle:
        return _not_found()
    return _add_comment(request, vehicle)


@api_view(['DELETE'])
@permission_classes([IsAdminRole])
def vehicle_photo_delete(request, pk, photo_id):
    """Delete a photo row and (best effort) all of its stored variants"""
    photo = VehiclePhoto.objects.filter(pk=photo_id, vehicle_id=pk).first()
    if not photo:
        return action_result(False, 'Photo not found', status.HTTP_404_NOT_FOUND)

    try:
        delete_image_variants(photo.url)
    except Exception as e:
        logger.warning(f"Could not delete stored variants of photo {photo_id}: {str(e)}")
    photo.delete()
    logger.info(f"User {request.user.email} deleted photo {photo_id} of vehicle {pk}")
    return action_result(True, 'Photo deleted successfully')


# Dealer vehicle views
@api_view(['GET'])
@permission_classes([IsDealerRole])
def dealer_vehicle_list(request):
    """The signed-in dealer's vehicles (search, status, make, year, show_archived)"""
    return _vehicle_list_response(request, _list_queryset().filter(dealer=request.user), DealerVehicleFilter)


@api_view(['GET'])
@permission_classes([IsDealerRole])
def dealer_vehicle_filter_options(request):
    return Response(_filter_options(Vehicle.objects.filter(dealer=request.user)))


@api_view(['GET'])
@permission_classes([IsDealerRole])
def dealer_vehicle_detail(request, pk):
    vehicle = _detail_queryset().filter(pk=pk, dealer=request.user).first()
    if not vehicle:
        return _not_found()
    return Response(VehicleDetailSerializer(vehicle).data)


@api_view(['POST'])
@permission_classes([IsDealerRole])
def dealer_vehicle_add_comment(request, pk):
    vehicle = Vehicle.objects.filter(pk=pk, dealer=request.user).first()
    if not vehicle:
        return _not_found()
    return _add_comment(request, vehicle)
