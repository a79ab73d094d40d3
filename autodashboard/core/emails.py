"""Outgoing email (password reset)"""
import logging

from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)

RESET_SUBJECTS = {
    'en': 'Reset your password',
    'ka': 'პაროლის აღდგენა',
}


def build_reset_link(token, locale='en'):
    return f"{settings.APP_URL.rstrip('/')}/{locale}/reset-password?token={token}"


def send_password_reset_email(email, token, locale='en'):
    """Send the reset link; returns (success, error_message)"""
    link = build_reset_link(token, locale)
    body = (
        "We received a request to reset your password.\n\n"
        f"Open this link to choose a new password: {link}\n\n"
        "The link is valid for 1 hour. If you did not request a reset, ignore this email."
    )
    try:
        send_mail(
            RESET_SUBJECTS.get(locale, RESET_SUBJECTS['en']),
            body,
            settings.DEFAULT_FROM_EMAIL,
            [email],
            fail_silently=False,
        )
        logger.info(f"Password reset email sent to {email}")
        return True, None
    except Exception as e:
        logger.error(f"Failed to send password reset email to {email}: {str(e)}", exc_info=True)
        return False, str(e)
