from django.conf import settings
from django.db import models


class Notification(models.Model):
    """In-app notification with English and Georgian texts"""
    TYPE_STATUS_CHANGE = 'STATUS_CHANGE'
    TYPE_BALANCE = 'BALANCE'
    TYPE_INVOICE = 'INVOICE'
    TYPE_SYSTEM = 'SYSTEM'
    TYPE_CHOICES = [
        (TYPE_STATUS_CHANGE, 'Status Change'),
        (TYPE_BALANCE, 'Balance'),
        (TYPE_INVOICE, 'Invoice'),
        (TYPE_SYSTEM, 'System'),
    ]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='notifications')
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    title_en = models.CharField(max_length=200)
    title_ka = models.CharField(max_length=200)
    message_en = models.TextField()
    message_ka = models.TextField()
    is_read = models.BooleanField(default=False)
    reference_type = models.CharField(max_length=50, blank=True, null=True)
    reference_id = models.CharField(max_length=50, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.type}: {self.title_en}"

    class Meta:
        db_table = 'notifications'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'is_read'], name='notif_user_read_idx'),
            models.Index(fields=['user', '-created_at'], name='notif_user_created_idx'),
        ]
