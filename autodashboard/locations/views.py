import logging

from django.db.models import Q, Count
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from autodashboard.core.permissions import IsAdminRole
from autodashboard.core.utils import (
    action_result, apply_sorting, paginate, parse_bool, save_serializer, delete_guarded,
)
from .models import Country, State, City, Port
from .serializers import (
    CountrySerializer, StateSerializer, CitySerializer, PortSerializer, LocationOptionSerializer,
)

logger = logging.getLogger('autodashboard.locations')


def _not_found(label):
    return action_result(False, f'{label} not found', status.HTTP_404_NOT_FOUND)


# Country views
@api_view(['GET', 'POST'])
@permission_classes([IsAdminRole])
def country_list_create(request):
    """List countries (search by code or name) or create one"""
    if request.method == 'POST':
        return save_serializer(request, CountrySerializer(data=request.data), 'Country', created=True)

    params = request.query_params
    queryset = Country.objects.annotate(state_count=Count('states'))
    search = (params.get('search') or '').strip()
    if search:
        queryset = queryset.filter(
            Q(code__icontains=search) | Q(name_en__icontains=search) | Q(name_ka__icontains=search)
        )
    queryset = apply_sorting(
        queryset, params,
        {'name_en': 'name_en', 'code': 'code', 'created_at': 'created_at'},
        default='name_en',
    )

    def serialize(rows):
        data = CountrySerializer(rows, many=True).data
        for item, row in zip(data, rows):
            item['state_count'] = row.state_count
        return data

    return Response(paginate(queryset, params, serialize))


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminRole])
def country_detail(request, pk):
    """Get, update or delete a country"""
    country = Country.objects.filter(pk=pk).first()
    if not country:
        return _not_found('Country')

    if request.method == 'GET':
        return Response(CountrySerializer(country).data)
    if request.method in ('PUT', 'PATCH'):
        serializer = CountrySerializer(country, data=request.data, partial=request.method == 'PATCH')
        return save_serializer(request, serializer, 'Country')

    refusal = None
    state_count = country.states.count()
    vehicle_count = country.vehicles.count()
    if state_count:
        refusal = f'Cannot delete: {state_count} state(s) belong to this country'
    elif vehicle_count:
        refusal = f'Cannot delete: {vehicle_count} vehicle(s) reference this country'
    return delete_guarded(request, country, 'Country', refusal)


# State views
@api_view(['GET', 'POST'])
@permission_classes([IsAdminRole])
def state_list_create(request):
    """List states (filter by country, search by code or name) or create one"""
    if request.method == 'POST':
        return save_serializer(request, StateSerializer(data=request.data), 'State', created=True)

    params = request.query_params
    queryset = State.objects.select_related('country')
    if params.get('country'):
        queryset = queryset.filter(country_id=params['country'])
    search = (params.get('search') or '').strip()
    if search:
        queryset = queryset.filter(
            Q(code__icontains=search) | Q(name_en__icontains=search) | Q(name_ka__icontains=search)
        )
    queryset = apply_sorting(
        queryset, params,
        {'name_en': 'name_en', 'code': 'code', 'country': 'country__name_en', 'created_at': 'created_at'},
        default='name_en',
    )
    return Response(paginate(queryset, params, lambda rows: StateSerializer(rows, many=True).data))


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminRole])
def state_detail(request, pk):
    """Get, update or delete a state"""
    state = State.objects.select_related('country').filter(pk=pk).first()
    if not state:
        return _not_found('State')

    if request.method == 'GET':
        return Response(StateSerializer(state).data)
    if request.method in ('PUT', 'PATCH'):
        serializer = StateSerializer(state, data=request.data, partial=request.method == 'PATCH')
        return save_serializer(request, serializer, 'State')

    refusal = None
    city_count = state.cities.count()
    port_count = state.ports.count()
    vehicle_count = state.vehicles.count()
    if city_count or port_count:
        refusal = f'Cannot delete: {city_count} city/cities and {port_count} port(s) belong to this state'
    elif vehicle_count:
        refusal = f'Cannot delete: {vehicle_count} vehicle(s) reference this state'
    return delete_guarded(request, state, 'State', refusal)


# City views
@api_view(['GET', 'POST'])
@permission_classes([IsAdminRole])
def city_list_create(request):
    """List cities (filter by state or country) or create one"""
    if request.method == 'POST':
        return save_serializer(request, CitySerializer(data=request.data), 'City', created=True)

    params = request.query_params
    queryset = City.objects.select_related('state__country')
    if params.get('state'):
        queryset = queryset.filter(state_id=params['state'])
    if params.get('country'):
        queryset = queryset.filter(state__country_id=params['country'])
    search = (params.get('search') or '').strip()
    if search:
        queryset = queryset.filter(name__icontains=search)
    queryset = apply_sorting(
        queryset, params,
        {'name': 'name', 'state': 'state__name_en', 'created_at': 'created_at'},
        default='name',
    )
    return Response(paginate(queryset, params, lambda rows: CitySerializer(rows, many=True).data))


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminRole])
def city_detail(request, pk):
    """Get, update or delete a city"""
    city = City.objects.select_related('state__country').filter(pk=pk).first()
    if not city:
        return _not_found('City')

    if request.method == 'GET':
        return Response(CitySerializer(city).data)
    if request.method in ('PUT', 'PATCH'):
        serializer = CitySerializer(city, data=request.data, partial=request.method == 'PATCH')
        return save_serializer(request, serializer, 'City')

    vehicle_count = city.vehicles.count()
    refusal = f'Cannot delete: {vehicle_count} vehicle(s) reference this city' if vehicle_count else None
    return delete_guarded(request, city, 'City', refusal)


# Port views
@api_view(['GET', 'POST'])
@permission_classes([IsAdminRole])
def port_list_create(request):
    """List ports (filter by state, country, is_destination) or create one"""
    if request.method == 'POST':
        return save_serializer(request, PortSerializer(data=request.data), 'Port', created=True)

    params = request.query_params
    queryset = Port.objects.select_related('state__country')
    if params.get('state'):
        queryset = queryset.filter(state_id=params['state'])
    if params.get('country'):
        queryset = queryset.filter(state__country_id=params['country'])
    if params.get('is_destination') not in (None, ''):
        queryset = queryset.filter(is_destination=parse_bool(params['is_destination']))
    search = (params.get('search') or '').strip()
    if search:
        queryset = queryset.filter(name__icontains=search)
    queryset = apply_sorting(
        queryset, params,
        {'name': 'name', 'state': 'state__name_en', 'created_at': 'created_at'},
        default='name',
    )
    return Response(paginate(queryset, params, lambda rows: PortSerializer(rows, many=True).data))


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminRole])
def port_detail(request, pk):
    """Get, update or delete a port"""
    port = Port.objects.select_related('state__country').filter(pk=pk).first()
    if not port:
        return _not_found('Port')

    if request.method == 'GET':
        return Response(PortSerializer(port).data)
    if request.method in ('PUT', 'PATCH'):
        serializer = PortSerializer(port, data=request.data, partial=request.method == 'PATCH')
        return save_serializer(request, serializer, 'Port')

    vehicle_count = port.vehicles.count()
    refusal = f'Cannot delete: {vehicle_count} vehicle(s) reference this port' if vehicle_count else None
    return delete_guarded(request, port, 'Port', refusal)


# Lookups for dependent dropdowns
@api_view(['GET'])
@permission_classes([IsAdminRole])
def states_by_country(request, country_id):
    states = State.objects.filter(country_id=country_id).order_by('name_en')
    return Response([
        {'id': s.id, 'code': s.code, 'name_en': s.name_en, 'name_ka': s.name_ka}
        for s in states
    ])


@api_view(['GET'])
@permission_classes([IsAdminRole])
def cities_by_state(request, state_id):
    cities = City.objects.filter(state_id=state_id).order_by('name')
    return Response([{'id': c.id, 'name': c.name} for c in cities])


@api_view(['GET'])
@permission_classes([IsAdminRole])
def ports_by_state(request, state_id):
    ports = Port.objects.filter(state_id=state_id).order_by('name')
    return Response([{'id': p.id, 'name': p.name, 'is_destination': p.is_destination} for p in ports])


@api_view(['GET'])
@permission_classes([IsAdminRole])
def all_cities(request):
    """Every city with its state and country labels"""
    cities = City.objects.select_related('state__country').order_by('name')
    return Response(LocationOptionSerializer(cities, many=True).data)


@api_view(['GET'])
@permission_classes([IsAdminRole])
def all_ports(request):
    """Every port with its state and country labels (filter with is_destination)"""
    ports = Port.objects.select_related('state__country').order_by('name')
    is_destination = request.query_params.get('is_destination')
    if is_destination not in (None, ''):
        ports = ports.filter(is_destination=parse_bool(is_destination))
    data = LocationOptionSerializer(ports, many=True).data
    for item, port in zip(data, ports):
        item['is_destination'] = port.is_destination
    return Response(data)
