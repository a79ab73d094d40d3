"""
Test suite for the notifications module
Tests: listing, counters, read/unread toggles, bulk actions, ownership
"""
from django.core.cache import cache
from django.test import TestCase
from rest_framework import status

from autodashboard.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from autodashboard.notifications.models import Notification
from autodashboard.notifications.utils import notify, format_amount


class NotificationTests(TestCase):

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.dealer = TestDataFactory.create_dealer()
        self.client.authenticate_user(self.dealer)

    def _notify(self, user=None, type=Notification.TYPE_SYSTEM, title='Hello'):
        return notify(user or self.dealer, type, title, title, f'{title} message', f'{title} message')

    def test_list_only_own_notifications(self):
        self._notify(title='Mine')
        self._notify(user=TestDataFactory.create_dealer(), title='Theirs')
        response = self.client.get('/api/v1/notifications/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['totalCount'], 1)
        self.assertEqual(response.data['items'][0]['title_en'], 'Mine')

    def test_filter_by_read_state(self):
        read = self._notify(title='Read')
        read.is_read = True
        read.save()
        self._notify(title='Unread')
        response = self.client.get('/api/v1/notifications/?read=unread')
        self.assertEqual([n['title_en'] for n in response.data['items']], ['Unread'])

    def test_unread_count_and_stats(self):
        self._notify(type=Notification.TYPE_BALANCE)
        self._notify(type=Notification.TYPE_INVOICE)
        response = self.client.get('/api/v1/notifications/unread-count/')
        self.assertEqual(response.data['count'], 2)

        response = self.client.get('/api/v1/notifications/stats/')
        self.assertEqual(response.data['total'], 2)
        self.assertEqual(response.data['byType']['BALANCE'], 1)
        self.assertEqual(response.data['byType']['STATUS_CHANGE'], 0)

    def test_recent_limit(self):
        for i in range(3):
            self._notify(title=f'N{i}')
        response = self.client.get('/api/v1/notifications/recent/?limit=2')
        self.assertEqual(len(response.data), 2)

    def test_mark_read_and_unread(self):
        notification = self._notify()
        response = self.client.post(f'/api/v1/notifications/{notification.pk}/read/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        notification.refresh_from_db()
        self.assertTrue(notification.is_read)

        self.client.post(f'/api/v1/notifications/{notification.pk}/unread/')
        notification.refresh_from_db()
        self.assertFalse(notification.is_read)

    def test_other_users_notification_is_not_found(self):
        notification = self._notify(user=TestDataFactory.create_dealer())
        response = self.client.post(f'/api/v1/notifications/{notification.pk}/read/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        response = self.client.delete(f'/api/v1/notifications/{notification.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertTrue(Notification.objects.filter(pk=notification.pk).exists())

    def test_mark_all_read_then_delete_read(self):
        self._notify()
        self._notify()
        other = self._notify(user=TestDataFactory.create_dealer())

        response = self.client.post('/api/v1/notifications/mark-all-read/')
        self.assertEqual(response.data['count'], 2)
        response = self.client.post('/api/v1/notifications/delete-read/')
        self.assertEqual(response.data['count'], 2)
        self.assertEqual(list(Notification.objects.values_list('pk', flat=True)), [other.pk])

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/notifications/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_format_amount(self):
        self.assertEqual(format_amount(1500), '1,500')
        self.assertEqual(format_amount('1234.5'), '1,234.50')
