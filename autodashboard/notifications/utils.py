"""Notification helpers used inside other modules' transactions"""
import logging

from .models import Notification

logger = logging.getLogger(__name__)


def notify(user, type, title_en, title_ka, message_en, message_ka,
           reference_type=None, reference_id=None):
    """
    Create a notification for user.

    Runs on the caller's connection, so inside transaction.atomic() it is
    rolled back together with the caller's writes.
    """
    notification = Notification.objects.create(
        user=user,
        type=type,
        title_en=title_en,
        title_ka=title_ka,
        message_en=message_en,
        message_ka=message_ka,
        reference_type=reference_type,
        reference_id=str(reference_id) if reference_id is not None else None,
    )
    logger.debug(f"Notification {notification.pk} ({type}) created for user {user.pk}")
    return notification


def format_amount(amount):
    """$1,234.5 style amount used in notification texts"""
    value = float(amount)
    if value == int(value):
        return f"{int(value):,}"
    return f"{value:,.2f}"
