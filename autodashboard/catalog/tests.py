"""
Test suite for the catalog module
Tests: Makes, Models, Auctions, Statuses and status reordering
"""
from django.core.cache import cache
from django.test import TestCase
from rest_framework import status

from autodashboard.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from autodashboard.catalog.models import Make, VehicleModel, Status


class MakeModelTests(TestCase):
    """Test makes and their models"""

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_admin())

    def test_create_make(self):
        response = self.client.post('/api/v1/settings/makes/', {'name': 'Toyota'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['message'], 'Make created successfully')
        self.assertTrue(Make.objects.filter(name='Toyota').exists())

    def test_make_list_counts_models(self):
        make = TestDataFactory.create_make(name='Honda')
        TestDataFactory.create_model(make=make, name='Civic')
        TestDataFactory.create_model(make=make, name='Accord')
        response = self.client.get('/api/v1/settings/makes/?search=hon')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['totalCount'], 1)
        self.assertEqual(response.data['items'][0]['model_count'], 2)

    def test_make_delete_refused_with_models(self):
        make = TestDataFactory.create_make()
        TestDataFactory.create_model(make=make)
        response = self.client.delete(f'/api/v1/settings/makes/{make.pk}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Cannot delete: 1 model(s) belong to this make')

    def test_model_name_unique_per_make(self):
        make = TestDataFactory.create_make()
        TestDataFactory.create_model(make=make, name='Camry')
        response = self.client.post('/api/v1/settings/models/', {'name': 'Camry', 'make': make.pk}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'A model with this name already exists for this make')

        other = TestDataFactory.create_make()
        response = self.client.post('/api/v1/settings/models/', {'name': 'Camry', 'make': other.pk}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(VehicleModel.objects.filter(name='Camry').count(), 2)

    def test_models_by_make(self):
        make = TestDataFactory.create_make()
        TestDataFactory.create_model(make=make, name='Corolla')
        TestDataFactory.create_model(name='Elsewhere')
        response = self.client.get(f'/api/v1/settings/makes/{make.pk}/models/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([m['name'] for m in response.data], ['Corolla'])

    def test_model_delete_refused_with_vehicles(self):
        vehicle = TestDataFactory.create_vehicle()
        response = self.client.delete(f'/api/v1/settings/models/{vehicle.model_id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Cannot delete: 1 vehicle(s) reference this model')


class StatusTests(TestCase):
    """Test vehicle statuses"""

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.admin = TestDataFactory.create_admin()
        self.client.authenticate_user(self.admin)

    def test_create_status(self):
        response = self.client.post('/api/v1/settings/statuses/', {
            'name_en': 'Shipped', 'name_ka': 'გაგზავნილი', 'order': 5, 'color': '#10B981'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_invalid_color(self):
        response = self.client.post('/api/v1/settings/statuses/', {
            'name_en': 'Bad', 'name_ka': 'Bad', 'order': 1, 'color': 'blue'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Color must be a hex value like #RGB or #RRGGBB')

    def test_dealer_can_list_but_not_create(self):
        TestDataFactory.create_status(order=2, name_en='Second')
        TestDataFactory.create_status(order=1, name_en='First')
        self.client.authenticate_user(TestDataFactory.create_dealer())

        response = self.client.get('/api/v1/settings/statuses/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([s['name_en'] for s in response.data], ['First', 'Second'])

        response = self.client.post('/api/v1/settings/statuses/', {
            'name_en': 'X', 'name_ka': 'X', 'order': 3
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_status_list_cache_invalidated_on_create(self):
        TestDataFactory.create_status(order=1, name_en='First')
        response = self.client.get('/api/v1/settings/statuses/')
        self.assertEqual(len(response.data), 1)
        with self.captureOnCommitCallbacks(execute=True):
            self.client.post('/api/v1/settings/statuses/', {
                'name_en': 'Second', 'name_ka': 'მეორე', 'order': 2
            }, format='json')
        response = self.client.get('/api/v1/settings/statuses/')
        self.assertEqual(len(response.data), 2)

    def test_reorder(self):
        first = TestDataFactory.create_status(order=1, name_en='First')
        second = TestDataFactory.create_status(order=2, name_en='Second')
        third = TestDataFactory.create_status(order=3, name_en='Third')
        response = self.client.post('/api/v1/settings/statuses/reorder/', {
            'ordered_ids': [third.pk, first.pk, second.pk]
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            list(Status.objects.order_by('order').values_list('name_en', flat=True)),
            ['Third', 'First', 'Second']
        )

    def test_reorder_unknown_id(self):
        first = TestDataFactory.create_status(order=1)
        response = self.client.post('/api/v1/settings/statuses/reorder/', {
            'ordered_ids': [first.pk, 99999]
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Some statuses were not found')

    def test_status_delete_refused_with_vehicles(self):
        vehicle = TestDataFactory.create_vehicle()
        response = self.client.delete(f'/api/v1/settings/statuses/{vehicle.status_id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Cannot delete: 1 vehicle(s) have this status')
