"""
Test suite for the uploads module
Tests: presigned uploads, confirm/processing, URL import, image variants
Storage and image processing are mocked; no R2 bucket is needed.
"""
import io
from unittest.mock import patch, MagicMock

from botocore.exceptions import ClientError
from django.core.cache import cache, caches
from django.test import TestCase
from PIL import Image
from rest_framework import status

from autodashboard.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from autodashboard.uploads import storage
from autodashboard.uploads.images import (
    IMAGE_VARIANTS, get_variant_key, generate_variants, process_image, delete_image_variants,
)
from autodashboard.vehicles.models import VehiclePhoto

VARIANTS = {name: f'https://cdn.example.com/vehicles/x-{name}.webp' for name in IMAGE_VARIANTS}


def _png_bytes(width=1600, height=900):
    buffer = io.BytesIO()
    Image.new('RGB', (width, height), color=(200, 30, 30)).save(buffer, format='PNG')
    return buffer.getvalue()


class PresignedUploadTests(TestCase):

    def setUp(self):
        cache.clear()
        caches['throttle'].clear()
        self.client = AuthenticatedAPIClient()
        self.dealer = TestDataFactory.create_dealer()
        self.client.authenticate_user(self.dealer)
        self.vehicle = TestDataFactory.create_vehicle(dealer=self.dealer)

    @patch('autodashboard.uploads.storage.generate_presigned_upload_url', return_value='https://r2.example.com/put')
    def test_vehicle_photo_key(self, mock_presign):
        response = self.client.post('/api/v1/upload/presigned/', {
            'kind': 'vehicle_photo',
            'content_type': 'image/jpeg',
            'file_size': 2048,
            'vehicle_id': self.vehicle.pk,
            'stage': 'AUCTION',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['uploadUrl'], 'https://r2.example.com/put')
        self.assertTrue(response.data['key'].startswith(f'vehicles/{self.vehicle.pk}/auction/'))
        self.assertTrue(response.data['key'].endswith('.jpg'))
        mock_presign.assert_called_once_with(response.data['key'], 'image/jpeg')

    @patch('autodashboard.uploads.storage.generate_presigned_upload_url', return_value='https://r2.example.com/put')
    def test_receipt_key(self, mock_presign):
        response = self.client.post('/api/v1/upload/presigned/', {
            'kind': 'receipt', 'content_type': 'image/png', 'file_size': 2048,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['key'].startswith(f'receipts/{self.dealer.pk}/'))

    def test_file_too_large(self):
        response = self.client.post('/api/v1/upload/presigned/', {
            'kind': 'receipt', 'content_type': 'image/png', 'file_size': 11 * 1024 * 1024,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'File is too large. Maximum size is 10MB')

    def test_invalid_content_type(self):
        response = self.client.post('/api/v1/upload/presigned/', {
            'kind': 'receipt', 'content_type': 'application/pdf', 'file_size': 100,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Invalid file type. Allowed: JPEG, PNG, WebP, GIF, HEIC')

    def test_vehicle_photo_requires_stage(self):
        response = self.client.post('/api/v1/upload/presigned/', {
            'kind': 'vehicle_photo', 'content_type': 'image/png', 'file_size': 100, 'vehicle_id': self.vehicle.pk,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Photo stage is required')

    def test_foreign_vehicle_forbidden(self):
        foreign = TestDataFactory.create_vehicle()
        response = self.client.post('/api/v1/upload/presigned/', {
            'kind': 'vehicle_photo', 'content_type': 'image/png', 'file_size': 100,
            'vehicle_id': foreign.pk, 'stage': 'PORT',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'You can only upload photos for your own vehicles')


class ConfirmUploadTests(TestCase):

    def setUp(self):
        cache.clear()
        caches['throttle'].clear()
        self.client = AuthenticatedAPIClient()
        self.admin = TestDataFactory.create_admin()
        self.client.authenticate_user(self.admin)
        self.vehicle = TestDataFactory.create_vehicle()
        self.key = f'vehicles/{self.vehicle.pk}/port/1700000000000-abcd1234.jpg'

    @patch('autodashboard.uploads.views.process_image', return_value={'success': True, 'variants': VARIANTS, 'error': None})
    @patch('autodashboard.uploads.storage.object_exists', return_value=True)
    def test_confirm_vehicle_photo(self, mock_exists, mock_process):
        VehiclePhoto.objects.create(vehicle=self.vehicle, url='https://cdn.example.com/old.webp', stage='PORT', order=2)
        response = self.client.post('/api/v1/upload/confirm/', {
            'kind': 'vehicle_photo', 'key': self.key, 'vehicle_id': self.vehicle.pk, 'stage': 'PORT',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        photo = VehiclePhoto.objects.get(pk=response.data['id'])
        self.assertEqual(photo.url, VARIANTS['md'])
        self.assertEqual(photo.order, 3)
        mock_process.assert_called_once_with(self.key, 'vehicle_photo')

    def test_key_outside_prefix(self):
        response = self.client.post('/api/v1/upload/confirm/', {
            'kind': 'vehicle_photo', 'key': 'vehicles/999/port/x.jpg', 'vehicle_id': self.vehicle.pk, 'stage': 'PORT',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Invalid upload key')

    @patch('autodashboard.uploads.storage.object_exists', return_value=False)
    def test_missing_object(self, mock_exists):
        response = self.client.post('/api/v1/upload/confirm/', {
            'kind': 'vehicle_photo', 'key': self.key, 'vehicle_id': self.vehicle.pk, 'stage': 'PORT',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Uploaded file not found')

    @patch('autodashboard.uploads.views.process_image', return_value={'success': False, 'variants': {}, 'error': 'cannot identify image file'})
    @patch('autodashboard.uploads.storage.object_exists', return_value=True)
    def test_processing_failure(self, mock_exists, mock_process):
        response = self.client.post('/api/v1/upload/confirm/', {
            'kind': 'vehicle_photo', 'key': self.key, 'vehicle_id': self.vehicle.pk, 'stage': 'PORT',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertFalse(VehiclePhoto.objects.exists())

    @patch('autodashboard.uploads.views.process_image', return_value={'success': True, 'variants': VARIANTS, 'error': None})
    @patch('autodashboard.uploads.storage.object_exists', return_value=True)
    def test_confirm_receipt(self, mock_exists, mock_process):
        dealer = TestDataFactory.create_dealer()
        self.client.authenticate_user(dealer)
        key = f'receipts/{dealer.pk}/1700000000000-abcd1234.png'
        response = self.client.post('/api/v1/upload/confirm/', {'kind': 'receipt', 'key': key}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['id'], key)
        self.assertEqual(response.data['url'], VARIANTS['lg'])


class ImportPhotoTests(TestCase):

    def setUp(self):
        cache.clear()
        caches['throttle'].clear()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_admin())
        self.vehicle = TestDataFactory.create_vehicle()

    @patch('autodashboard.uploads.views.process_image', return_value={'success': True, 'variants': VARIANTS, 'error': None})
    @patch('autodashboard.uploads.storage.upload_object')
    @patch('autodashboard.uploads.views.fetch_remote_image', return_value=(b'jpeg-bytes', 'image/jpeg'))
    def test_import(self, mock_fetch, mock_upload, mock_process):
        response = self.client.post('/api/v1/upload/import-url/', {
            'url': 'https://auction.example.com/photo.jpg', 'vehicle_id': self.vehicle.pk, 'stage': 'AUCTION',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        key = mock_upload.call_args[0][0]
        self.assertTrue(key.startswith(f'vehicles/{self.vehicle.pk}/auction/'))
        self.assertTrue(key.endswith('.jpg'))
        self.assertEqual(VehiclePhoto.objects.filter(vehicle=self.vehicle).count(), 1)

    @patch('autodashboard.uploads.views.fetch_remote_image', side_effect=ValueError('URL does not point to an image (text/html)'))
    def test_import_not_an_image(self, mock_fetch):
        response = self.client.post('/api/v1/upload/import-url/', {
            'url': 'https://auction.example.com/page', 'vehicle_id': self.vehicle.pk, 'stage': 'AUCTION',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('URL does not point to an image', response.data['message'])


class ImagePipelineTests(TestCase):

    def test_variant_key(self):
        self.assertEqual(get_variant_key('vehicles/1/auction/abc.jpg', 'md'), 'vehicles/1/auction/abc-md.webp')

    def test_generate_variants_scale_to_width(self):
        variants = generate_variants(_png_bytes(), 85)
        self.assertEqual(set(variants), set(IMAGE_VARIANTS))
        with Image.open(io.BytesIO(variants['md'])) as image:
            self.assertEqual(image.format, 'WEBP')
            self.assertEqual(image.size, (800, 450))

    def test_portrait_variants_keep_full_width(self):
        variants = generate_variants(_png_bytes(1000, 3000), 85)
        with Image.open(io.BytesIO(variants['sm'])) as image:
            self.assertEqual(image.size, (400, 1200))
        with Image.open(io.BytesIO(variants['thumb'])) as image:
            self.assertEqual(image.width, 150)

    def test_small_images_are_not_enlarged(self):
        variants = generate_variants(_png_bytes(100, 50), 85)
        with Image.open(io.BytesIO(variants['lg'])) as image:
            self.assertEqual(image.size, (100, 50))

    @patch('autodashboard.uploads.images.storage')
    def test_process_image_uploads_variants_and_deletes_original(self, mock_storage):
        mock_storage.get_object_bytes.return_value = _png_bytes()
        mock_storage.get_public_url.side_effect = lambda key: f'https://cdn.example.com/{key}'
        result = process_image('receipts/1/r.png', 'receipt')
        self.assertTrue(result['success'])
        self.assertEqual(result['variants']['thumb'], 'https://cdn.example.com/receipts/1/r-thumb.webp')
        self.assertEqual(mock_storage.upload_object.call_count, len(IMAGE_VARIANTS))
        mock_storage.delete_object.assert_called_once_with('receipts/1/r.png')

    @patch('autodashboard.uploads.images.storage')
    def test_process_image_failure_keeps_original(self, mock_storage):
        mock_storage.get_object_bytes.return_value = b'not an image'
        result = process_image('receipts/1/r.png')
        self.assertFalse(result['success'])
        mock_storage.delete_object.assert_not_called()

    @patch('autodashboard.uploads.images.storage')
    def test_delete_variants(self, mock_storage):
        mock_storage.get_key_from_url.return_value = 'vehicles/1/port/abc-md.webp'
        mock_storage.delete_object = MagicMock()
        deleted = delete_image_variants('https://cdn.example.com/vehicles/1/port/abc-md.webp')
        self.assertEqual(deleted, len(IMAGE_VARIANTS))
        mock_storage.delete_object.assert_any_call('vehicles/1/port/abc-thumb.webp')
        mock_storage.delete_object.assert_any_call('vehicles/1/port/abc-lg.webp')


class StorageTests(TestCase):
    """Storage helpers with the boto3 client factory mocked"""

    @patch('autodashboard.uploads.storage.get_s3_client')
    def test_object_exists(self, mock_client_factory):
        client = mock_client_factory.return_value
        self.assertTrue(storage.object_exists('receipts/1/a.png'))
        client.head_object.side_effect = ClientError({'Error': {'Code': '404'}}, 'HeadObject')
        self.assertFalse(storage.object_exists('receipts/1/a.png'))

    @patch('autodashboard.uploads.storage.get_s3_client')
    def test_upload_object_sets_cache_headers(self, mock_client_factory):
        storage.upload_object('vehicles/1/port/a-md.webp', b'data', 'image/webp')
        kwargs = mock_client_factory.return_value.put_object.call_args.kwargs
        self.assertEqual(kwargs['Key'], 'vehicles/1/port/a-md.webp')
        self.assertEqual(kwargs['ContentType'], 'image/webp')
        self.assertIn('immutable', kwargs['CacheControl'])

    @patch('autodashboard.uploads.storage.R2_PUBLIC_DOMAIN', 'cdn.example.com')
    def test_public_url_and_key_round_trip(self):
        url = storage.get_public_url('vehicles/1/port/a-md.webp')
        self.assertEqual(url, 'https://cdn.example.com/vehicles/1/port/a-md.webp')
        self.assertEqual(storage.get_key_from_url(url), 'vehicles/1/port/a-md.webp')
        self.assertIsNone(storage.get_key_from_url('https://elsewhere.example.com/a.webp'))
        self.assertIsNone(storage.get_key_from_url(''))
