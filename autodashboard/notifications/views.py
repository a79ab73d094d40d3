import logging

from django.db.models import Count
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from autodashboard.core.permissions import IsActiveUser
from autodashboard.core.utils import action_result, paginate, parse_int
from .models import Notification
from .serializers import NotificationSerializer

logger = logging.getLogger('autodashboard.notifications')

DEFAULT_RECENT_LIMIT = 5
MAX_RECENT_LIMIT = 20


def _own_notification(request, pk):
    return Notification.objects.filter(pk=pk, user=request.user).first()


def _not_found():
    return action_result(False, 'Notification not found', status.HTTP_404_NOT_FOUND)


@api_view(['GET'])
@permission_classes([IsActiveUser])
def notification_list(request):
    """List the current user's notifications (filter by type and read=read|unread)"""
    params = request.query_params
    queryset = Notification.objects.filter(user=request.user)
    if params.get('type'):
        queryset = queryset.filter(type=params['type'])
    read = params.get('read')
    if read == 'read':
        queryset = queryset.filter(is_read=True)
    elif read == 'unread':
        queryset = queryset.filter(is_read=False)
    queryset = queryset.order_by('-created_at', '-id')
    return Response(paginate(queryset, params, lambda rows: NotificationSerializer(rows, many=True).data))


@api_view(['GET'])
@permission_classes([IsActiveUser])
def notification_stats(request):
    queryset = Notification.objects.filter(user=request.user)
    by_type = {t: 0 for t, _ in Notification.TYPE_CHOICES}
    for row in queryset.values('type').annotate(count=Count('id')):
        by_type[row['type']] = row['count']
    return Response({
        'total': queryset.count(),
        'unread': queryset.filter(is_read=False).count(),
        'byType': by_type,
    })


@api_view(['GET'])
@permission_classes([IsActiveUser])
def notification_unread_count(request):
    count = Notification.objects.filter(user=request.user, is_read=False).count()
    return Response({'count': count})


@api_view(['GET'])
@permission_classes([IsActiveUser])
def notification_recent(request):
    """Newest notifications for the header dropdown"""
    limit = parse_int(request.query_params.get('limit'), DEFAULT_RECENT_LIMIT)
    limit = min(max(limit, 1), MAX_RECENT_LIMIT)
    notifications = Notification.objects.filter(user=request.user).order_by('-created_at', '-id')[:limit]
    return Response(NotificationSerializer(notifications, many=True).data)


@api_view(['POST'])
@permission_classes([IsActiveUser])
def notification_mark_read(request, pk):
    notification = _own_notification(request, pk)
    if not notification:
        return _not_found()
    notification.is_read = True
    notification.save(update_fields=['is_read'])
    return action_result(True, 'Notification marked as read')


@api_view(['POST'])
@permission_classes([IsActiveUser])
def notification_mark_unread(request, pk):
    notification = _own_notification(request, pk)
    if not notification:
        return _not_found()
    notification.is_read = False
    notification.save(update_fields=['is_read'])
    return action_result(True, 'Notification marked as unread')


@api_view(['DELETE'])
@permission_classes([IsActiveUser])
def notification_delete(request, pk):
    notification = _own_notification(request, pk)
    if not notification:
        return _not_found()
    notification.delete()
    return action_result(True, 'Notification deleted')


@api_view(['POST'])
@permission_classes([IsActiveUser])
def notification_mark_all_read(request):
    count = Notification.objects.filter(user=request.user, is_read=False).update(is_read=True)
    logger.info(f"User {request.user.email} marked {count} notifications as read")
    return action_result(True, f'{count} notification(s) marked as read', count=count)


@api_view(['POST'])
@permission_classes([IsActiveUser])
def notification_delete_all_read(request):
    count, _ = Notification.objects.filter(user=request.user, is_read=True).delete()
    logger.info(f"User {request.user.email} deleted {count} read notifications")
    return action_result(True, f'{count} notification(s) deleted', count=count)
