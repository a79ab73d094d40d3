"""
Test suite for the vehicles module
Tests: CRUD, validation, status changes, archiving, comments, photos, dealer scoping
"""
from unittest.mock import patch

from django.core.cache import cache
from django.test import TestCase
from rest_framework import status

from autodashboard.core.models import AuditLog
from autodashboard.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from autodashboard.notifications.models import Notification
from autodashboard.vehicles.models import Vehicle, VehiclePhoto, VehicleStatusHistory
from autodashboard.vehicles.utils import StatusUnchanged, change_vehicle_status, next_photo_order


class VehicleCRUDTests(TestCase):
    """Test admin vehicle create, update, delete"""

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.admin = TestDataFactory.create_admin()
        self.client.authenticate_user(self.admin)
        self.dealer = TestDataFactory.create_dealer()
        self.make = TestDataFactory.create_make(name='Toyota')
        self.model = TestDataFactory.create_model(make=self.make, name='Camry')
        self.auction = TestDataFactory.create_auction(name='Copart')
        self.status = TestDataFactory.create_status(order=1, name_en='Purchased')
        self.state = TestDataFactory.create_state()

    def _payload(self, **overrides):
        payload = {
            'dealer': self.dealer.pk,
            'vin': '4t1bf1fk5cu123456',
            'year': 2019,
            'make': self.make.pk,
            'model': self.model.pk,
            'damage_type': 'CLEAN',
            'auction': self.auction.pk,
            'lot_number': ' 12345678 ',
            'status': self.status.pk,
            'country': self.state.country_id,
            'state': self.state.pk,
            'transportation_price': '1850.00',
        }
        payload.update(overrides)
        return payload

    def test_create_vehicle(self):
        response = self.client.post('/api/v1/vehicles/', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        vehicle = Vehicle.objects.get(pk=response.data['id'])
        self.assertEqual(vehicle.vin, '4T1BF1FK5CU123456')
        self.assertEqual(vehicle.lot_number, '12345678')
        history = VehicleStatusHistory.objects.get(vehicle=vehicle)
        self.assertEqual(history.status, self.status)
        self.assertEqual(history.changed_by, self.admin)
        self.assertTrue(AuditLog.objects.filter(action='create', model_name='Vehicle', object_id=str(vehicle.pk)).exists())

    def test_invalid_vin(self):
        response = self.client.post('/api/v1/vehicles/', self._payload(vin='4T1BF1FK5CU12345O'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'VIN must be alphanumeric (I, O, Q not allowed)')

        response = self.client.post('/api/v1/vehicles/', self._payload(vin='SHORT'), format='json')
        self.assertEqual(response.data['message'], 'VIN must be exactly 17 characters')

    def test_duplicate_vin(self):
        TestDataFactory.create_vehicle(vin='4T1BF1FK5CU123456')
        response = self.client.post('/api/v1/vehicles/', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'A vehicle with this VIN already exists')

    def test_model_must_belong_to_make(self):
        other_model = TestDataFactory.create_model()
        response = self.client.post('/api/v1/vehicles/', self._payload(model=other_model.pk), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Model does not belong to the selected make')

    def test_year_bounds(self):
        response = self.client.post('/api/v1/vehicles/', self._payload(year=1899), format='json')
        self.assertEqual(response.data['message'], 'Year must be 1900 or later')

    def test_update_with_status_records_history(self):
        vehicle = TestDataFactory.create_vehicle(dealer=self.dealer, status=self.status)
        shipped = TestDataFactory.create_status(order=2, name_en='Shipped')
        response = self.client.patch(f'/api/v1/vehicles/{vehicle.pk}/', {'status': shipped.pk}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(VehicleStatusHistory.objects.filter(vehicle=vehicle, status=shipped).count(), 1)

    def test_list_filters_and_search(self):
        active = TestDataFactory.create_vehicle(dealer=self.dealer, vin='1HGCM82633A004352')
        TestDataFactory.create_vehicle(is_archived=True)
        response = self.client.get('/api/v1/vehicles/')
        self.assertEqual(response.data['totalCount'], 1)
        self.assertEqual(response.data['items'][0]['id'], active.pk)

        response = self.client.get('/api/v1/vehicles/?show_archived=true')
        self.assertEqual(response.data['totalCount'], 1)
        self.assertNotEqual(response.data['items'][0]['id'], active.pk)

        response = self.client.get('/api/v1/vehicles/?search=a004352')
        self.assertEqual(response.data['totalCount'], 1)

        response = self.client.get(f'/api/v1/vehicles/?dealer={self.dealer.pk}')
        self.assertEqual(response.data['totalCount'], 1)

    @patch('autodashboard.vehicles.utils.delete_image_variants')
    def test_delete_vehicle_removes_photos(self, mock_delete):
        vehicle = TestDataFactory.create_vehicle()
        VehiclePhoto.objects.create(vehicle=vehicle, url='https://cdn.example.com/a-md.webp', stage='AUCTION')
        response = self.client.delete(f'/api/v1/vehicles/{vehicle.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Vehicle.objects.filter(pk=vehicle.pk).exists())
        mock_delete.assert_called_once_with('https://cdn.example.com/a-md.webp')

    def test_delete_refused_when_invoiced(self):
        vehicle = TestDataFactory.create_vehicle(dealer=self.dealer)
        TestDataFactory.create_invoice(self.dealer, vehicles=[vehicle])
        response = self.client.delete(f'/api/v1/vehicles/{vehicle.pk}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Cannot delete: vehicle is on 1 invoice(s)')

    def test_dealer_cannot_use_admin_endpoints(self):
        self.client.authenticate_user(self.dealer)
        response = self.client.get('/api/v1/vehicles/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class VehicleStatusTests(TestCase):
    """Test status changes, archive and restore"""

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.admin = TestDataFactory.create_admin()
        self.client.authenticate_user(self.admin)
        self.dealer = TestDataFactory.create_dealer()
        self.purchased = TestDataFactory.create_status(order=1, name_en='Purchased')
        self.shipped = TestDataFactory.create_status(order=5, name_en='Shipped')
        self.vehicle = TestDataFactory.create_vehicle(dealer=self.dealer, status=self.purchased)

    def test_change_status_notifies_dealer(self):
        response = self.client.post(
            f'/api/v1/vehicles/{self.vehicle.pk}/status/', {'status_id': self.shipped.pk}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.vehicle.refresh_from_db()
        self.assertEqual(self.vehicle.status, self.shipped)

        notification = Notification.objects.get(user=self.dealer)
        self.assertEqual(notification.type, Notification.TYPE_STATUS_CHANGE)
        self.assertIn('"Purchased" to "Shipped"', notification.message_en)
        self.assertEqual(notification.reference_id, str(self.vehicle.pk))
        self.assertTrue(AuditLog.objects.filter(action='status_change').exists())

    def test_same_status_refused(self):
        response = self.client.post(
            f'/api/v1/vehicles/{self.vehicle.pk}/status/', {'status_id': self.purchased.pk}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Status is already set to this value')
        self.assertFalse(Notification.objects.exists())

    def test_same_status_checked_against_locked_row(self):
        stale = Vehicle.objects.get(pk=self.vehicle.pk)
        change_vehicle_status(self.vehicle, self.shipped, self.admin)
        history_count = VehicleStatusHistory.objects.filter(vehicle=self.vehicle).count()

        with self.assertRaisesMessage(StatusUnchanged, 'Status is already set to this value'):
            change_vehicle_status(stale, self.shipped, self.admin)
        self.assertEqual(VehicleStatusHistory.objects.filter(vehicle=self.vehicle).count(), history_count)
        self.assertEqual(Notification.objects.filter(user=self.dealer).count(), 1)

    def test_unknown_status(self):
        response = self.client.post(
            f'/api/v1/vehicles/{self.vehicle.pk}/status/', {'status_id': 99999}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_archive_and_restore(self):
        response = self.client.post(f'/api/v1/vehicles/{self.vehicle.pk}/archive/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.vehicle.refresh_from_db()
        self.assertTrue(self.vehicle.is_archived)
        self.assertIsNotNone(self.vehicle.archived_at)

        response = self.client.post(f'/api/v1/vehicles/{self.vehicle.pk}/archive/')
        self.assertEqual(response.data['message'], 'Vehicle is already archived')

        response = self.client.post(f'/api/v1/vehicles/{self.vehicle.pk}/restore/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.vehicle.refresh_from_db()
        self.assertFalse(self.vehicle.is_archived)
        self.assertIsNone(self.vehicle.archived_at)


class VehicleCommentPhotoTests(TestCase):
    """Test comments and photo removal"""

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.admin = TestDataFactory.create_admin()
        self.client.authenticate_user(self.admin)
        self.vehicle = TestDataFactory.create_vehicle()

    def test_add_comment(self):
        response = self.client.post(
            f'/api/v1/vehicles/{self.vehicle.pk}/comments/', {'content': '  Keys received  '}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['comment']['content'], 'Keys received')

    def test_empty_comment(self):
        response = self.client.post(f'/api/v1/vehicles/{self.vehicle.pk}/comments/', {'content': '   '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Comment cannot be empty')

    @patch('autodashboard.vehicles.views.delete_image_variants')
    def test_delete_photo(self, mock_delete):
        photo = VehiclePhoto.objects.create(vehicle=self.vehicle, url='https://cdn.example.com/p-md.webp', stage='PORT')
        response = self.client.delete(f'/api/v1/vehicles/{self.vehicle.pk}/photos/{photo.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(VehiclePhoto.objects.filter(pk=photo.pk).exists())
        mock_delete.assert_called_once()

    @patch('autodashboard.vehicles.views.delete_image_variants', side_effect=Exception('storage down'))
    def test_delete_photo_storage_failure_still_deletes_row(self, mock_delete):
        photo = VehiclePhoto.objects.create(vehicle=self.vehicle, url='https://cdn.example.com/p-md.webp', stage='PORT')
        response = self.client.delete(f'/api/v1/vehicles/{self.vehicle.pk}/photos/{photo.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(VehiclePhoto.objects.filter(pk=photo.pk).exists())

    def test_next_photo_order(self):
        self.assertEqual(next_photo_order(self.vehicle), 0)
        VehiclePhoto.objects.create(vehicle=self.vehicle, url='https://cdn.example.com/a.webp', stage='AUCTION', order=4)
        self.assertEqual(next_photo_order(self.vehicle), 5)


class DealerVehicleTests(TestCase):
    """Test dealer-scoped vehicle endpoints"""

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.dealer = TestDataFactory.create_dealer()
        self.client.authenticate_user(self.dealer)
        self.own = TestDataFactory.create_vehicle(dealer=self.dealer, year=2021)
        self.other = TestDataFactory.create_vehicle(year=2018)

    def test_list_only_own(self):
        response = self.client.get('/api/v1/dealer/vehicles/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([v['id'] for v in response.data['items']], [self.own.pk])

    def test_detail_of_other_dealer_is_not_found(self):
        response = self.client.get(f'/api/v1/dealer/vehicles/{self.other.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        response = self.client.get(f'/api/v1/dealer/vehicles/{self.own.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['vin'], self.own.vin)

    def test_filter_options_scoped(self):
        response = self.client.get('/api/v1/dealer/vehicles/filter-options/')
        self.assertEqual(response.data['years'], [2021])

    def test_dealer_comment(self):
        response = self.client.post(
            f'/api/v1/dealer/vehicles/{self.own.pk}/comments/', {'content': 'When does it ship?'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        response = self.client.post(
            f'/api/v1/dealer/vehicles/{self.other.pk}/comments/', {'content': 'Hi'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
