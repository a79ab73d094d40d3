from rest_framework import serializers
from .models import User, SystemSetting, AuditLog


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'email', 'name', 'role', 'status', 'phone', 'address',
                  'company_name', 'identification_number', 'balance', 'discount',
                  'created_at', 'updated_at']
        read_only_fields = fields


class UserBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'name', 'email']


class DealerProfileSerializer(serializers.ModelSerializer):
    """Dealers may only change their phone and address"""

    class Meta:
        model = User
        fields = ['id', 'email', 'name', 'phone', 'address', 'company_name',
                  'identification_number', 'created_at']
        read_only_fields = ['id', 'email', 'name', 'company_name', 'identification_number', 'created_at']

    def validate_phone(self, value):
        value = value.strip()
        if len(value) < 5:
            raise serializers.ValidationError('Phone must be at least 5 characters')
        return value

    def validate_address(self, value):
        value = value.strip()
        if len(value) < 5:
            raise serializers.ValidationError('Address must be at least 5 characters')
        return value


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(write_only=True, min_length=8, error_messages={
        'min_length': 'Password must be at least 8 characters',
    })
    confirm_password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        if attrs['new_password'] != attrs['confirm_password']:
            raise serializers.ValidationError({'confirm_password': 'Passwords do not match'})
        return attrs


class PasswordResetRequestSerializer(serializers.Serializer):
    email = serializers.EmailField(error_messages={'invalid': 'Invalid email address'})
    locale = serializers.ChoiceField(choices=['en', 'ka'], default='en', required=False)


class PasswordResetConfirmSerializer(serializers.Serializer):
    token = serializers.CharField(error_messages={'blank': 'Token is required', 'required': 'Token is required'})
    password = serializers.CharField(min_length=8, error_messages={
        'min_length': 'Password must be at least 8 characters',
    })
    confirm_password = serializers.CharField(error_messages={
        'blank': 'Please confirm your password',
        'required': 'Please confirm your password',
    })

    def validate(self, attrs):
        if attrs['password'] != attrs['confirm_password']:
            raise serializers.ValidationError({'confirm_password': 'Passwords do not match'})
        return attrs


class SystemSettingSerializer(serializers.ModelSerializer):
    key = serializers.CharField(max_length=100, error_messages={'blank': 'Key is required'})
    value = serializers.CharField(error_messages={'blank': 'Value is required'})

    class Meta:
        model = SystemSetting
        fields = ['id', 'key', 'value', 'updated_at']
        read_only_fields = ['id', 'updated_at']


class AuditLogSerializer(serializers.ModelSerializer):
    user = UserBriefSerializer(read_only=True)

    class Meta:
        model = AuditLog
        fields = ['id', 'user', 'action', 'model_name', 'object_id', 'object_name',
                  'object_reference', 'changes', 'ip_address', 'created_at']
