"""
Test suite for the pricing module
Tests: Towing/Shipping/Insurance price tables and the public calculator
"""
from decimal import Decimal

from django.core.cache import cache, caches
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from autodashboard.core.models import SystemSetting
from autodashboard.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from autodashboard.pricing.models import TowingPrice, ShippingPrice, InsurancePrice
from autodashboard.pricing.utils import calculate_transport_price, get_base_transportation_price


class PriceTableTests(TestCase):
    """Test admin price tables"""

    def setUp(self):
        cache.clear()
        caches['throttle'].clear()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_admin())
        self.state = TestDataFactory.create_state()
        self.city = TestDataFactory.create_city(state=self.state)
        self.port = TestDataFactory.create_port(state=self.state)
        self.poti = TestDataFactory.create_port(name='Poti', is_destination=True)

    def test_create_towing_price(self):
        response = self.client.post('/api/v1/settings/towing-prices/', {
            'city': self.city.pk, 'port': self.port.pk, 'price': '350.00'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(TowingPrice.objects.get().price, Decimal('350.00'))

    def test_duplicate_towing_pair(self):
        TowingPrice.objects.create(city=self.city, port=self.port, price=Decimal('300.00'))
        response = self.client.post('/api/v1/settings/towing-prices/', {
            'city': self.city.pk, 'port': self.port.pk, 'price': '400.00'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'A towing price for this city-port combination already exists')

    def test_price_must_be_positive(self):
        response = self.client.post('/api/v1/settings/shipping-prices/', {
            'origin_port': self.port.pk, 'destination_port': self.poti.pk, 'price': '0'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Price must be greater than 0')

    def test_insurance_range_validation(self):
        response = self.client.post('/api/v1/settings/insurance-prices/', {
            'min_value': '5000', 'max_value': '1000', 'price': '50'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Minimum value must be less than maximum value')

    def test_insurance_overlap_refused(self):
        InsurancePrice.objects.create(min_value=Decimal('0'), max_value=Decimal('10000'), price=Decimal('100'))
        response = self.client.post('/api/v1/settings/insurance-prices/', {
            'min_value': '9000', 'max_value': '20000', 'price': '150'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'This value range overlaps with an existing insurance price')

    def test_insurance_list_ordered_by_min_value(self):
        InsurancePrice.objects.create(min_value=Decimal('10000.01'), max_value=Decimal('20000'), price=Decimal('150'))
        InsurancePrice.objects.create(min_value=Decimal('0'), max_value=Decimal('10000'), price=Decimal('100'))
        response = self.client.get('/api/v1/settings/insurance-prices/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item['min_value'] for item in response.data['items']], ['0.00', '10000.01'])

    def test_delete_shipping_price(self):
        shipping = ShippingPrice.objects.create(origin_port=self.port, destination_port=self.poti, price=Decimal('900'))
        response = self.client.delete(f'/api/v1/settings/shipping-prices/{shipping.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(ShippingPrice.objects.exists())


class CalculatorTests(TestCase):
    """Test the public transport price calculator"""

    def setUp(self):
        cache.clear()
        caches['throttle'].clear()
        self.client = APIClient()
        self.state = TestDataFactory.create_state()
        self.city = TestDataFactory.create_city(state=self.state, name='Dallas')
        self.port = TestDataFactory.create_port(state=self.state, name='Houston')
        self.poti = TestDataFactory.create_port(name='Poti', is_destination=True)
        TowingPrice.objects.create(city=self.city, port=self.port, price=Decimal('300.00'))
        ShippingPrice.objects.create(origin_port=self.port, destination_port=self.poti, price=Decimal('1200.00'))
        InsurancePrice.objects.create(min_value=Decimal('0'), max_value=Decimal('10000'), price=Decimal('80.00'))

    def _payload(self, **overrides):
        payload = {
            'city_id': self.city.pk,
            'origin_port_id': self.port.pk,
            'destination_port_id': self.poti.pk,
            'vehicle_value': '8000',
        }
        payload.update(overrides)
        return payload

    def test_calculate_total(self):
        SystemSetting.objects.create(key='BASE_TRANSPORTATION_PRICE', value='150')
        response = self.client.post('/api/v1/calculator/calculate/', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total'], 1730.0)
        self.assertEqual(response.data['breakdown']['basePrice'], 150.0)
        self.assertEqual(response.data['currency'], 'USD')

    def test_base_price_defaults_to_zero(self):
        self.assertEqual(get_base_transportation_price(), Decimal('0'))
        SystemSetting.objects.create(key='BASE_TRANSPORTATION_PRICE', value='not a number')
        self.assertEqual(get_base_transportation_price(), Decimal('0'))

    def test_missing_prices_reported_together(self):
        result, errors = calculate_transport_price(self.city.pk, self.poti.pk, self.port.pk, Decimal('50000'))
        self.assertIsNone(result)
        self.assertEqual(len(errors), 3)

    def test_missing_price_is_422(self):
        response = self.client.post('/api/v1/calculator/calculate/', self._payload(vehicle_value='50000'), format='json')
        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data['error'], 'Price calculation not available')
        self.assertIn('No insurance price configured for vehicle value $50000.00', response.data['details'])

    def test_invalid_input(self):
        response = self.client.post('/api/v1/calculator/calculate/', {'city_id': self.city.pk}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid input')

    def test_lookups(self):
        response = self.client.get(f'/api/v1/calculator/states/?countryId={self.state.country_id}')
        self.assertEqual([s['id'] for s in response.data['states']], [self.state.pk])

        response = self.client.get(f'/api/v1/calculator/cities/?stateId={self.state.pk}')
        self.assertEqual([c['name'] for c in response.data['cities']], ['Dallas'])

        response = self.client.get('/api/v1/calculator/ports/')
        self.assertEqual([p['name'] for p in response.data['ports']], ['Houston'])

        response = self.client.get('/api/v1/calculator/ports/?type=destination')
        self.assertEqual([p['name'] for p in response.data['ports']], ['Poti'])

    def test_lookup_missing_parameter(self):
        response = self.client.get('/api/v1/calculator/states/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Missing required parameter: countryId')
