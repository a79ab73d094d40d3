from django.urls import path
from .views import (
    notification_list, notification_stats, notification_unread_count, notification_recent,
    notification_mark_read, notification_mark_unread, notification_delete,
    notification_mark_all_read, notification_delete_all_read,
)

urlpatterns = [
    path('notifications/', notification_list, name='notification-list'),
    path('notifications/stats/', notification_stats, name='notification-stats'),
    path('notifications/unread-count/', notification_unread_count, name='notification-unread-count'),
    path('notifications/recent/', notification_recent, name='notification-recent'),
    path('notifications/mark-all-read/', notification_mark_all_read, name='notification-mark-all-read'),
    path('notifications/delete-read/', notification_delete_all_read, name='notification-delete-all-read'),
    path('notifications/<int:pk>/read/', notification_mark_read, name='notification-mark-read'),
    path('notifications/<int:pk>/unread/', notification_mark_unread, name='notification-mark-unread'),
    path('notifications/<int:pk>/', notification_delete, name='notification-delete'),
]
