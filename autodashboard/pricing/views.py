import logging

from django.db.models import Q
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from autodashboard.core.permissions import IsAdminRole
from autodashboard.core.throttling import CalculatorRateThrottle, CalculatorLookupRateThrottle
from autodashboard.core.utils import (
    action_result, apply_sorting, paginate, parse_int, save_serializer, delete_guarded,
)
from autodashboard.locations.models import Country, State, City, Port
from .models import TowingPrice, ShippingPrice, InsurancePrice
from .serializers import (
    TowingPriceSerializer, ShippingPriceSerializer, InsurancePriceSerializer, CalculatePriceSerializer,
)
from .utils import calculate_transport_price

logger = logging.getLogger('autodashboard.pricing')


def _not_found(label):
    return action_result(False, f'{label} not found', status.HTTP_404_NOT_FOUND)


# TowingPrice views
@api_view(['GET', 'POST'])
@permission_classes([IsAdminRole])
def towing_price_list_create(request):
    """List towing prices (filter by city, port, state) or create one"""
    if request.method == 'POST':
        return save_serializer(request, TowingPriceSerializer(data=request.data), 'Towing price', created=True)

    params = request.query_params
    queryset = TowingPrice.objects.select_related('city__state', 'port')
    if params.get('city'):
        queryset = queryset.filter(city_id=params['city'])
    if params.get('port'):
        queryset = queryset.filter(port_id=params['port'])
    if params.get('state'):
        queryset = queryset.filter(city__state_id=params['state'])
    search = (params.get('search') or '').strip()
    if search:
        queryset = queryset.filter(Q(city__name__icontains=search) | Q(port__name__icontains=search))
    queryset = apply_sorting(
        queryset, params,
        {'created_at': 'created_at', 'price': 'price', 'city': 'city__name', 'port': 'port__name'},
    )
    return Response(paginate(queryset, params, lambda rows: TowingPriceSerializer(rows, many=True).data))


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminRole])
def towing_price_detail(request, pk):
    towing_price = TowingPrice.objects.select_related('city__state', 'port').filter(pk=pk).first()
    if not towing_price:
        return _not_found('Towing price')

    if request.method == 'GET':
        return Response(TowingPriceSerializer(towing_price).data)
    if request.method in ('PUT', 'PATCH'):
        serializer = TowingPriceSerializer(towing_price, data=request.data, partial=request.method == 'PATCH')
        return save_serializer(request, serializer, 'Towing price')
    return delete_guarded(request, towing_price, 'Towing price')


# ShippingPrice views
@api_view(['GET', 'POST'])
@permission_classes([IsAdminRole])
def shipping_price_list_create(request):
    """List shipping prices (filter by origin or destination port) or create one"""
    if request.method == 'POST':
        return save_serializer(request, ShippingPriceSerializer(data=request.data), 'Shipping price', created=True)

    params = request.query_params
    queryset = ShippingPrice.objects.select_related('origin_port', 'destination_port')
    if params.get('origin_port'):
        queryset = queryset.filter(origin_port_id=params['origin_port'])
    if params.get('destination_port'):
        queryset = queryset.filter(destination_port_id=params['destination_port'])
    search = (params.get('search') or '').strip()
    if search:
        queryset = queryset.filter(
            Q(origin_port__name__icontains=search) | Q(destination_port__name__icontains=search)
        )
    queryset = apply_sorting(
        queryset, params,
        {'created_at': 'created_at', 'price': 'price', 'origin_port': 'origin_port__name'},
    )
    return Response(paginate(queryset, params, lambda rows: ShippingPriceSerializer(rows, many=True).data))


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminRole])
def shipping_price_detail(request, pk):
    shipping_price = ShippingPrice.objects.select_related('origin_port', 'destination_port').filter(pk=pk).first()
    if not shipping_price:
        return _not_found('Shipping price')

    if request.method == 'GET':
        return Response(ShippingPriceSerializer(shipping_price).data)
    if request.method in ('PUT', 'PATCH'):
        serializer = ShippingPriceSerializer(shipping_price, data=request.data, partial=request.method == 'PATCH')
        return save_serializer(request, serializer, 'Shipping price')
    return delete_guarded(request, shipping_price, 'Shipping price')


# InsurancePrice views
@api_view(['GET', 'POST'])
@permission_classes([IsAdminRole])
def insurance_price_list_create(request):
    """List insurance brackets (ordered by min_value) or create one"""
    if request.method == 'POST':
        return save_serializer(request, InsurancePriceSerializer(data=request.data), 'Insurance price', created=True)

    params = request.query_params
    queryset = apply_sorting(
        InsurancePrice.objects.all(), params,
        {'min_value': 'min_value', 'price': 'price', 'created_at': 'created_at'},
        default='min_value',
    )
    if not params.get('sort_order'):
        queryset = queryset.order_by('min_value', 'id')
    return Response(paginate(queryset, params, lambda rows: InsurancePriceSerializer(rows, many=True).data))


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminRole])
def insurance_price_detail(request, pk):
    insurance_price = InsurancePrice.objects.filter(pk=pk).first()
    if not insurance_price:
        return _not_found('Insurance price')

    if request.method == 'GET':
        return Response(InsurancePriceSerializer(insurance_price).data)
    if request.method in ('PUT', 'PATCH'):
        serializer = InsurancePriceSerializer(insurance_price, data=request.data, partial=request.method == 'PATCH')
        return save_serializer(request, serializer, 'Insurance price')
    return delete_guarded(request, insurance_price, 'Insurance price')


# Public price calculator
@api_view(['GET'])
@permission_classes([AllowAny])
@throttle_classes([CalculatorLookupRateThrottle])
def calculator_countries(request):
    countries = Country.objects.order_by('name_en')
    return Response({'countries': [
        {'id': c.id, 'code': c.code, 'name_en': c.name_en, 'name_ka': c.name_ka}
        for c in countries
    ]})


@api_view(['GET'])
@permission_classes([AllowAny])
@throttle_classes([CalculatorLookupRateThrottle])
def calculator_states(request):
    """States of a country that have at least one port or city"""
    country_id = parse_int(request.query_params.get('countryId'))
    if country_id is None:
        return Response({'error': 'Missing required parameter: countryId'}, status=status.HTTP_400_BAD_REQUEST)

    states = (
        State.objects
        .filter(country_id=country_id)
        .filter(Q(ports__isnull=False) | Q(cities__isnull=False))
        .distinct()
        .order_by('name_en')
    )
    return Response({'states': [
        {'id': s.id, 'code': s.code, 'name_en': s.name_en, 'name_ka': s.name_ka}
        for s in states
    ]})


@api_view(['GET'])
@permission_classes([AllowAny])
@throttle_classes([CalculatorLookupRateThrottle])
def calculator_cities(request):
    """Cities of a state that have a towing price"""
    state_id = parse_int(request.query_params.get('stateId'))
    if state_id is None:
        return Response({'error': 'Missing required parameter: stateId'}, status=status.HTTP_400_BAD_REQUEST)
    if not State.objects.filter(pk=state_id).exists():
        return Response({'error': 'State not found'}, status=status.HTTP_404_NOT_FOUND)

    cities = (
        City.objects
        .filter(state_id=state_id, towing_prices__isnull=False)
        .distinct()
        .order_by('name')
    )
    return Response({'cities': [{'id': c.id, 'name': c.name} for c in cities]})


@api_view(['GET'])
@permission_classes([AllowAny])
@throttle_classes([CalculatorLookupRateThrottle])
def calculator_ports(request):
    """
    type=destination: every destination port with its state and country
    type=origin (default): origin ports that have a towing price, optionally by stateId
    """
    port_type = request.query_params.get('type', 'origin')
    if port_type == 'destination':
        ports = Port.objects.filter(is_destination=True).select_related('state__country').order_by('name')
        return Response({'ports': [
            {
                'id': p.id,
                'name': p.name,
                'state': p.state.name_en,
                'country': p.state.country.name_en,
            }
            for p in ports
        ]})

    ports = Port.objects.filter(is_destination=False, towing_prices__isnull=False)
    state_id = parse_int(request.query_params.get('stateId'))
    if state_id is not None:
        ports = ports.filter(state_id=state_id)
    ports = ports.distinct().order_by('name')
    return Response({'ports': [{'id': p.id, 'name': p.name} for p in ports]})


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([CalculatorRateThrottle])
def calculator_calculate(request):
    """Total transport price with its breakdown"""
    serializer = CalculatePriceSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(
            {'error': 'Invalid input', 'details': serializer.errors},
            status=status.HTTP_400_BAD_REQUEST,
        )

    data = serializer.validated_data
    try:
        result, errors = calculate_transport_price(
            data['city_id'], data['origin_port_id'], data['destination_port_id'], data['vehicle_value'],
        )
    except Exception as e:
        logger.error(f"Error calculating transport price: {str(e)}", exc_info=True)
        return Response({'error': 'Failed to calculate price'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if errors:
        logger.info(f"Price calculation unavailable: {errors}")
        return Response(
            {'error': 'Price calculation not available', 'details': errors},
            status=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )
    return Response(result)
