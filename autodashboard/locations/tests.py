"""
Test suite for the locations module
Tests: Countries, States, Cities, Ports, dependent lookups, delete guards
"""
from django.core.cache import cache
from django.test import TestCase
from rest_framework import status

from autodashboard.core.models import AuditLog
from autodashboard.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from autodashboard.locations.models import Country, State, City, Port


class CountryTests(TestCase):
    """Test country CRUD"""

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_admin())

    def test_create_country_uppercases_code(self):
        response = self.client.post('/api/v1/settings/countries/', {
            'code': 'us', 'name_en': 'United States', 'name_ka': 'აშშ'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['message'], 'Country created successfully')
        self.assertEqual(Country.objects.get(pk=response.data['id']).code, 'US')
        self.assertTrue(AuditLog.objects.filter(action='create', model_name='Country').exists())

    def test_duplicate_code(self):
        TestDataFactory.create_country(code='US')
        response = self.client.post('/api/v1/settings/countries/', {
            'code': 'US', 'name_en': 'Again', 'name_ka': 'Again'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'A country with this code already exists')

    def test_code_length(self):
        response = self.client.post('/api/v1/settings/countries/', {
            'code': 'U', 'name_en': 'X', 'name_ka': 'X'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Country code must be 2-3 characters')

    def test_list_with_search(self):
        TestDataFactory.create_country(code='US', name_en='United States')
        TestDataFactory.create_country(code='GE', name_en='Georgia')
        response = self.client.get('/api/v1/settings/countries/?search=geo')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['totalCount'], 1)
        self.assertEqual(response.data['items'][0]['code'], 'GE')

    def test_delete_refused_when_states_exist(self):
        state = TestDataFactory.create_state()
        response = self.client.delete(f'/api/v1/settings/countries/{state.country_id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Cannot delete: 1 state(s) belong to this country')
        self.assertTrue(Country.objects.filter(pk=state.country_id).exists())

    def test_delete_country(self):
        country = TestDataFactory.create_country()
        response = self.client.delete(f'/api/v1/settings/countries/{country.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Country.objects.filter(pk=country.pk).exists())

    def test_missing_country(self):
        response = self.client.get('/api/v1/settings/countries/99999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_dealer_forbidden(self):
        self.client.authenticate_user(TestDataFactory.create_dealer())
        response = self.client.get('/api/v1/settings/countries/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class StateCityPortTests(TestCase):
    """Test states, cities, ports and the dependent lookups"""

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_admin())
        self.country = TestDataFactory.create_country(code='US')

    def test_create_state(self):
        response = self.client.post('/api/v1/settings/states/', {
            'code': 'ca', 'name_en': 'California', 'name_ka': 'კალიფორნია', 'country': self.country.pk
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(State.objects.get(pk=response.data['id']).code, 'CA')

    def test_state_code_unique_per_country(self):
        TestDataFactory.create_state(country=self.country, code='CA')
        response = self.client.post('/api/v1/settings/states/', {
            'code': 'CA', 'name_en': 'Dup', 'name_ka': 'Dup', 'country': self.country.pk
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'A state with this code already exists in this country')

        other = TestDataFactory.create_country(code='CAN')
        response = self.client.post('/api/v1/settings/states/', {
            'code': 'CA', 'name_en': 'Other', 'name_ka': 'Other', 'country': other.pk
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_state_unknown_country(self):
        response = self.client.post('/api/v1/settings/states/', {
            'code': 'TX', 'name_en': 'Texas', 'name_ka': 'ტეხასი', 'country': 99999
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Country not found')

    def test_state_delete_guard(self):
        state = TestDataFactory.create_state(country=self.country)
        TestDataFactory.create_city(state=state)
        TestDataFactory.create_port(state=state)
        response = self.client.delete(f'/api/v1/settings/states/{state.pk}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(
            response.data['message'],
            'Cannot delete: 1 city/cities and 1 port(s) belong to this state'
        )

    def test_port_delete_guard_with_vehicle(self):
        port = TestDataFactory.create_port()
        TestDataFactory.create_vehicle(port=port)
        response = self.client.delete(f'/api/v1/settings/ports/{port.pk}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Cannot delete: 1 vehicle(s) reference this port')

    def test_create_city_and_port(self):
        state = TestDataFactory.create_state(country=self.country)
        response = self.client.post('/api/v1/settings/cities/', {'name': 'Los Angeles', 'state': state.pk}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        response = self.client.post('/api/v1/settings/ports/', {
            'name': 'Long Beach', 'state': state.pk, 'is_destination': False
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(City.objects.count(), 1)
        self.assertEqual(Port.objects.count(), 1)

    def test_lookups(self):
        state = TestDataFactory.create_state(country=self.country, code='TX', name_en='Texas')
        TestDataFactory.create_city(state=state, name='Houston')
        TestDataFactory.create_port(state=state, name='Galveston')
        TestDataFactory.create_port(name='Poti', is_destination=True)

        response = self.client.get(f'/api/v1/settings/countries/{self.country.pk}/states/')
        self.assertEqual([s['code'] for s in response.data], ['TX'])

        response = self.client.get(f'/api/v1/settings/states/{state.pk}/cities/')
        self.assertEqual([c['name'] for c in response.data], ['Houston'])

        response = self.client.get(f'/api/v1/settings/states/{state.pk}/ports/')
        self.assertEqual([p['name'] for p in response.data], ['Galveston'])

        response = self.client.get('/api/v1/settings/ports/all/?is_destination=true')
        self.assertEqual(len(response.data), 1)
        self.assertTrue(response.data[0]['is_destination'])
