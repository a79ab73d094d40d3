import logging

from django.db import transaction
from django.db.models import Q, Count
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from autodashboard.core.cache_utils import cached_query, REFERENCE_OPTIONS_CACHE_TTL, REFERENCE_OPTIONS_PREFIX
from autodashboard.core.permissions import IsAdminRole, IsActiveUser
from autodashboard.core.utils import (
    action_result, apply_sorting, paginate, save_serializer, delete_guarded, validation_failed,
)
from .models import Make, VehicleModel, Auction, Status
from .serializers import (
    MakeSerializer, VehicleModelSerializer, AuctionSerializer, StatusSerializer, StatusOrderSerializer,
)

logger = logging.getLogger('autodashboard.catalog')


def _not_found(label):
    return action_result(False, f'{label} not found', status.HTTP_404_NOT_FOUND)


@cached_query(cache_ttl=REFERENCE_OPTIONS_CACHE_TTL, key_prefix=f'{REFERENCE_OPTIONS_PREFIX}:statuses')
def get_status_list():
    return list(StatusSerializer(Status.objects.order_by('order', 'id'), many=True).data)


# Make views
@api_view(['GET', 'POST'])
@permission_classes([IsAdminRole])
def make_list_create(request):
    """List makes with their model count or create one"""
    if request.method == 'POST':
        return save_serializer(request, MakeSerializer(data=request.data), 'Make', created=True)

    params = request.query_params
    queryset = Make.objects.annotate(model_count=Count('models', distinct=True))
    search = (params.get('search') or '').strip()
    if search:
        queryset = queryset.filter(name__icontains=search)
    queryset = apply_sorting(queryset, params, {'name': 'name', 'created_at': 'created_at'}, default='name')

    def serialize(rows):
        data = MakeSerializer(rows, many=True).data
        for item, row in zip(data, rows):
            item['model_count'] = row.model_count
        return data

    return Response(paginate(queryset, params, serialize))


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminRole])
def make_detail(request, pk):
    make = Make.objects.filter(pk=pk).first()
    if not make:
        return _not_found('Make')

    if request.method == 'GET':
        return Response(MakeSerializer(make).data)
    if request.method in ('PUT', 'PATCH'):
        serializer = MakeSerializer(make, data=request.data, partial=request.method == 'PATCH')
        return save_serializer(request, serializer, 'Make')

    refusal = None
    model_count = make.models.count()
    vehicle_count = make.vehicles.count()
    if model_count:
        refusal = f'Cannot delete: {model_count} model(s) belong to this make'
    elif vehicle_count:
        refusal = f'Cannot delete: {vehicle_count} vehicle(s) reference this make'
    return delete_guarded(request, make, 'Make', refusal)


# VehicleModel views
@api_view(['GET', 'POST'])
@permission_classes([IsAdminRole])
def model_list_create(request):
    """List vehicle models (filter by make) or create one"""
    if request.method == 'POST':
        return save_serializer(request, VehicleModelSerializer(data=request.data), 'Model', created=True)

    params = request.query_params
    queryset = VehicleModel.objects.select_related('make')
    if params.get('make'):
        queryset = queryset.filter(make_id=params['make'])
    search = (params.get('search') or '').strip()
    if search:
        queryset = queryset.filter(Q(name__icontains=search) | Q(make__name__icontains=search))
    queryset = apply_sorting(
        queryset, params,
        {'name': 'name', 'make': 'make__name', 'created_at': 'created_at'},
        default='name',
    )
    return Response(paginate(queryset, params, lambda rows: VehicleModelSerializer(rows, many=True).data))


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminRole])
def model_detail(request, pk):
    vehicle_model = VehicleModel.objects.select_related('make').filter(pk=pk).first()
    if not vehicle_model:
        return _not_found('Model')

    if request.method == 'GET':
        return Response(VehicleModelSerializer(vehicle_model).data)
    if request.method in ('PUT', 'PATCH'):
        serializer = VehicleModelSerializer(vehicle_model, data=request.data, partial=request.method == 'PATCH')
        return save_serializer(request, serializer, 'Model')

    vehicle_count = vehicle_model.vehicles.count()
    refusal = f'Cannot delete: {vehicle_count} vehicle(s) reference this model' if vehicle_count else None
    return delete_guarded(request, vehicle_model, 'Model', refusal)


@api_view(['GET'])
@permission_classes([IsAdminRole])
def models_by_make(request, make_id):
    models = VehicleModel.objects.filter(make_id=make_id).order_by('name')
    return Response([{'id': m.id, 'name': m.name} for m in models])


# Auction views
@api_view(['GET', 'POST'])
@permission_classes([IsAdminRole])
def auction_list_create(request):
    if request.method == 'POST':
        return save_serializer(request, AuctionSerializer(data=request.data), 'Auction', created=True)

    params = request.query_params
    queryset = Auction.objects.all()
    search = (params.get('search') or '').strip()
    if search:
        queryset = queryset.filter(name__icontains=search)
    queryset = apply_sorting(queryset, params, {'name': 'name', 'created_at': 'created_at'}, default='name')
    return Response(paginate(queryset, params, lambda rows: AuctionSerializer(rows, many=True).data))


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminRole])
def auction_detail(request, pk):
    auction = Auction.objects.filter(pk=pk).first()
    if not auction:
        return _not_found('Auction')

    if request.method == 'GET':
        return Response(AuctionSerializer(auction).data)
    if request.method in ('PUT', 'PATCH'):
        serializer = AuctionSerializer(auction, data=request.data, partial=request.method == 'PATCH')
        return save_serializer(request, serializer, 'Auction')

    vehicle_count = auction.vehicles.count()
    refusal = f'Cannot delete: {vehicle_count} vehicle(s) reference this auction' if vehicle_count else None
    return delete_guarded(request, auction, 'Auction', refusal)


# Status views
@api_view(['GET', 'POST'])
@permission_classes([IsActiveUser])
def status_list_create(request):
    """
    GET: every status in display order (cached, any signed-in user)
    POST: create a status (admin)
    """
    if request.method == 'GET':
        return Response(get_status_list())

    if not IsAdminRole().has_permission(request, None):
        logger.warning(f"User {request.user.email} attempted to create a status without admin role")
        return Response({'detail': IsAdminRole.message}, status=status.HTTP_403_FORBIDDEN)
    return save_serializer(request, StatusSerializer(data=request.data), 'Status', created=True)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminRole])
def status_detail(request, pk):
    vehicle_status = Status.objects.filter(pk=pk).first()
    if not vehicle_status:
        return _not_found('Status')

    if request.method == 'GET':
        return Response(StatusSerializer(vehicle_status).data)
    if request.method in ('PUT', 'PATCH'):
        serializer = StatusSerializer(vehicle_status, data=request.data, partial=request.method == 'PATCH')
        return save_serializer(request, serializer, 'Status')

    vehicle_count = vehicle_status.vehicles.count()
    refusal = f'Cannot delete: {vehicle_count} vehicle(s) have this status' if vehicle_count else None
    return delete_guarded(request, vehicle_status, 'Status', refusal)


@api_view(['POST'])
@permission_classes([IsAdminRole])
def status_reorder(request):
    """Set order = position + 1 for each id in ordered_ids"""
    serializer = StatusOrderSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_failed(serializer)

    ordered_ids = serializer.validated_data['ordered_ids']
    try:
        with transaction.atomic():
            statuses = {s.pk: s for s in Status.objects.select_for_update().filter(pk__in=ordered_ids)}
            for index, status_id in enumerate(ordered_ids):
                row = statuses[status_id]
                row.order = index + 1
                row.save(update_fields=['order', 'updated_at'])
        logger.info(f"User {request.user.email} reordered {len(ordered_ids)} statuses")
        return action_result(True, 'Status order updated successfully')
    except Exception as e:
        logger.error(f"Error reordering statuses: {str(e)}", exc_info=True)
        return action_result(False, 'Failed to update status order', status.HTTP_500_INTERNAL_SERVER_ERROR)
