import logging
import secrets

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ObjectDoesNotExist
from django.db import connection, transaction
from django.db.models import Q
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken, TokenError
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from .emails import send_password_reset_email
from .models import SystemSetting, AuditLog, PasswordResetToken
from .permissions import IsAdminRole, IsDealerRole, IsActiveUser
from .throttling import LoginRateThrottle, PasswordResetRateThrottle
from .serializers import (
    UserSerializer, DealerProfileSerializer, ChangePasswordSerializer,
    PasswordResetRequestSerializer, PasswordResetConfirmSerializer,
    SystemSettingSerializer, AuditLogSerializer,
)
from .utils import action_result, validation_failed, paginate, apply_sorting

logger = logging.getLogger('autodashboard.core')

User = get_user_model()

RESET_REQUESTED_MESSAGE = 'If an account exists with this email, you will receive a password reset link.'


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    def validate(self, attrs):
        attrs[self.username_field] = (attrs.get(self.username_field) or '').strip().lower()
        data = super().validate(attrs)
        if self.user.is_blocked:
            raise AuthenticationFailed('Your account has been blocked. Please contact administrator.')
        data['user'] = UserSerializer(self.user).data
        return data

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['email'] = user.email
        token['name'] = user.name
        token['role'] = user.role
        return token


class CustomTokenObtainPairView(TokenObtainPairView):
    serializer_class = CustomTokenObtainPairSerializer
    throttle_classes = [LoginRateThrottle]


class CustomTokenRefreshSerializer(TokenRefreshSerializer):
    """Custom token refresh serializer that handles deleted users gracefully"""
    def validate(self, attrs):
        try:
            return super().validate(attrs)
        except (InvalidToken, TokenError):
            raise InvalidToken('Token is invalid or expired.')
        except (ObjectDoesNotExist, User.DoesNotExist):
            raise InvalidToken('Token is invalid. User no longer exists.')


class CustomTokenRefreshView(TokenRefreshView):
    serializer_class = CustomTokenRefreshSerializer


@api_view(['GET'])
@permission_classes([IsActiveUser])
def user_me(request):
    """Get the current user"""
    return Response(UserSerializer(request.user).data)


# Password reset
@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([PasswordResetRateThrottle])
def password_reset_request(request):
    """Send a password reset link; the answer never reveals whether the email exists"""
    serializer = PasswordResetRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return action_result(False, 'Invalid email address')

    email = serializer.validated_data['email'].lower()
    locale = serializer.validated_data.get('locale', 'en')
    try:
        user = User.objects.filter(email=email).first()
        if not user or user.is_blocked:
            logger.info(f"Password reset requested for unknown or blocked email {email}")
            return action_result(True, RESET_REQUESTED_MESSAGE)

        with transaction.atomic():
            PasswordResetToken.objects.filter(email=user.email).delete()
            token = secrets.token_hex(32)
            PasswordResetToken.objects.create(
                token=token,
                email=user.email,
                expires_at=timezone.now() + settings.PASSWORD_RESET_TOKEN_TTL,
            )

        sent, error = send_password_reset_email(user.email, token, locale)
        if not sent:
            logger.error(f"Failed to send password reset email: {error}")
        return action_result(True, RESET_REQUESTED_MESSAGE)
    except Exception as e:
        logger.error(f"Error requesting password reset: {str(e)}", exc_info=True)
        return action_result(False, 'An error occurred. Please try again.', status.HTTP_500_INTERNAL_SERVER_ERROR)


def _check_reset_token(reset_token):
    """Return an error message for an unusable token, None when valid"""
    if not reset_token:
        return 'Invalid or expired reset link'
    if reset_token.used_at:
        return 'This reset link has already been used'
    if timezone.now() > reset_token.expires_at:
        return 'This reset link has expired'
    return None


@api_view(['GET'])
@permission_classes([AllowAny])
def password_reset_validate(request, token):
    """Check whether a reset token can still be used"""
    reset_token = PasswordResetToken.objects.filter(token=token).first()
    error = _check_reset_token(reset_token)
    if error:
        return Response({'valid': False, 'message': error})
    return Response({'valid': True, 'email': reset_token.email})


@api_view(['POST'])
@permission_classes([AllowAny])
def password_reset_confirm(request):
    """Set a new password using a reset token"""
    serializer = PasswordResetConfirmSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_failed(serializer)

    token = serializer.validated_data['token']
    try:
        reset_token = PasswordResetToken.objects.filter(token=token).first()
        error = _check_reset_token(reset_token)
        if error:
            return action_result(False, error)

        user = User.objects.filter(email=reset_token.email).first()
        if not user:
            return action_result(False, 'User not found', status.HTTP_404_NOT_FOUND)
        if user.is_blocked:
            return action_result(False, 'This account has been blocked')

        with transaction.atomic():
            user.set_password(serializer.validated_data['password'])
            user.save(update_fields=['password', 'updated_at'])
            reset_token.used_at = timezone.now()
            reset_token.save(update_fields=['used_at'])

        logger.info(f"Password reset completed for {user.email}")
        return action_result(
            True,
            'Your password has been reset successfully. You can now login with your new password.'
        )
    except Exception as e:
        logger.error(f"Error resetting password: {str(e)}", exc_info=True)
        return action_result(False, 'An error occurred. Please try again.', status.HTTP_500_INTERNAL_SERVER_ERROR)


# Dealer profile
@api_view(['GET', 'PATCH'])
@permission_classes([IsDealerRole])
def dealer_profile(request):
    """Get or update the signed-in dealer's contact details"""
    dealer = request.user
    if request.method == 'GET':
        return Response(DealerProfileSerializer(dealer).data)

    serializer = DealerProfileSerializer(dealer, data=request.data, partial=True)
    if not serializer.is_valid():
        return validation_failed(serializer)
    try:
        serializer.save()
        logger.info(f"Dealer {dealer.email} updated profile")
        return action_result(True, 'Profile updated successfully', profile=serializer.data)
    except Exception as e:
        logger.error(f"Error updating dealer profile: {str(e)}", exc_info=True)
        return action_result(False, 'Failed to update profile', status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['POST'])
@permission_classes([IsDealerRole])
def dealer_change_password(request):
    """Change the signed-in dealer's password"""
    serializer = ChangePasswordSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_failed(serializer)

    dealer = request.user
    if not dealer.check_password(serializer.validated_data['current_password']):
        logger.warning(f"Dealer {dealer.email} entered a wrong current password")
        return action_result(False, 'Current password is incorrect')
    try:
        dealer.set_password(serializer.validated_data['new_password'])
        dealer.save(update_fields=['password', 'updated_at'])
        logger.info(f"Dealer {dealer.email} changed password")
        return action_result(True, 'Password changed successfully')
    except Exception as e:
        logger.error(f"Error changing password: {str(e)}", exc_info=True)
        return action_result(False, 'Failed to change password', status.HTTP_500_INTERNAL_SERVER_ERROR)


# System settings
@api_view(['GET', 'POST'])
@permission_classes([IsAdminRole])
def system_setting_list_upsert(request):
    """List all settings or create/update one by key"""
    if request.method == 'GET':
        settings_qs = SystemSetting.objects.all().order_by('key')
        return Response(SystemSettingSerializer(settings_qs, many=True).data)

    serializer = SystemSettingSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_failed(serializer)
    try:
        setting, created = SystemSetting.objects.update_or_create(
            key=serializer.validated_data['key'],
            defaults={'value': serializer.validated_data['value']},
        )
        logger.info(f"User {request.user.email} saved setting {setting.key} (created={created})")
        return action_result(True, 'Setting saved successfully', setting=SystemSettingSerializer(setting).data)
    except Exception as e:
        logger.error(f"Error saving setting: {str(e)}", exc_info=True)
        return action_result(False, 'Failed to save setting', status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET', 'DELETE'])
@permission_classes([IsAdminRole])
def system_setting_detail(request, key):
    """Get or delete a setting by key"""
    setting = SystemSetting.objects.filter(key=key).first()
    if not setting:
        return action_result(False, 'Setting not found', status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        return Response(SystemSettingSerializer(setting).data)

    setting.delete()
    logger.info(f"User {request.user.email} deleted setting {key}")
    return action_result(True, 'Setting deleted successfully')


# Audit log
@api_view(['GET'])
@permission_classes([IsAdminRole])
def audit_log_list(request):
    """List audit log entries (filterable by action, model_name, user, search)"""
    params = request.query_params
    queryset = AuditLog.objects.select_related('user')

    if params.get('action'):
        queryset = queryset.filter(action=params['action'])
    if params.get('model_name'):
        queryset = queryset.filter(model_name=params['model_name'])
    if params.get('user'):
        queryset = queryset.filter(user_id=params['user'])
    search = (params.get('search') or '').strip()
    if search:
        queryset = queryset.filter(
            Q(object_name__icontains=search) |
            Q(object_reference__icontains=search) |
            Q(object_id=search)
        )

    queryset = apply_sorting(queryset, params, {'created_at': 'created_at', 'action': 'action'})
    return Response(paginate(queryset, params, lambda rows: AuditLogSerializer(rows, many=True).data))


@api_view(['GET'])
@permission_classes([AllowAny])
def health_check(request):
    """Liveness probe including a database round trip"""
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
        return Response({'status': 'ok', 'database': 'ok'})
    except Exception as e:
        logger.error(f"Health check failed: {str(e)}", exc_info=True)
        return Response({'status': 'error', 'database': 'unavailable'}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
