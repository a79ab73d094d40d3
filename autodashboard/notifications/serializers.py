from rest_framework import serializers
from .models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Notification
        fields = ['id', 'type', 'title_en', 'title_ka', 'message_en', 'message_ka',
                  'is_read', 'reference_type', 'reference_id', 'created_at']
        read_only_fields = fields
