"""Transport price calculation shared by the public calculator"""
import logging
from decimal import Decimal, InvalidOperation

from autodashboard.core.models import SystemSetting
from .models import TowingPrice, ShippingPrice, InsurancePrice

logger = logging.getLogger(__name__)

BASE_PRICE_SETTING = 'BASE_TRANSPORTATION_PRICE'


def get_base_transportation_price():
    """BASE_TRANSPORTATION_PRICE system setting, 0 when missing or not a number"""
    setting = SystemSetting.objects.filter(key=BASE_PRICE_SETTING).first()
    if not setting:
        return Decimal('0')
    try:
        return Decimal(setting.value.strip())
    except (InvalidOperation, AttributeError):
        logger.warning(f"System setting {BASE_PRICE_SETTING} is not a number: {setting.value!r}")
        return Decimal('0')


def find_insurance_price(vehicle_value):
    return (
        InsurancePrice.objects
        .filter(min_value__lte=vehicle_value, max_value__gte=vehicle_value)
        .order_by('min_value')
        .first()
    )


def calculate_transport_price(city_id, origin_port_id, destination_port_id, vehicle_value):
    """
    Price a shipment from an auction city to a destination port.

    Returns (result, errors). errors lists every missing price; result is
    None when any price is missing.
    """
    towing = TowingPrice.objects.filter(city_id=city_id, port_id=origin_port_id).first()
    shipping = ShippingPrice.objects.filter(
        origin_port_id=origin_port_id, destination_port_id=destination_port_id
    ).first()
    insurance = find_insurance_price(vehicle_value)

    errors = []
    if not towing:
        errors.append('No towing price configured for the selected city and port combination')
    if not shipping:
        errors.append('No shipping price configured for the selected port route')
    if not insurance:
        errors.append(f'No insurance price configured for vehicle value ${vehicle_value}')
    if errors:
        return None, errors

    base_price = get_base_transportation_price()
    total = towing.price + shipping.price + insurance.price + base_price
    return {
        'breakdown': {
            'towingPrice': float(towing.price),
            'shippingPrice': float(shipping.price),
            'insurancePrice': float(insurance.price),
            'basePrice': float(base_price),
        },
        'total': float(total),
        'currency': 'USD',
    }, []
