from django.urls import path
from .views import (
    CustomTokenObtainPairView, CustomTokenRefreshView, user_me,
    password_reset_request, password_reset_validate, password_reset_confirm,
    dealer_profile, dealer_change_password,
    system_setting_list_upsert, system_setting_detail,
    audit_log_list, health_check,
)

urlpatterns = [
    # Auth endpoints
    path('auth/login/', CustomTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/refresh/', CustomTokenRefreshView.as_view(), name='token_refresh'),
    path('auth/me/', user_me, name='user-me'),
    path('auth/password-reset/', password_reset_request, name='password-reset-request'),
    path('auth/password-reset/confirm/', password_reset_confirm, name='password-reset-confirm'),
    path('auth/password-reset/<str:token>/', password_reset_validate, name='password-reset-validate'),

    # Dealer profile
    path('dealer/profile/', dealer_profile, name='dealer-profile'),
    path('dealer/profile/change-password/', dealer_change_password, name='dealer-change-password'),

    # System settings
    path('settings/system/', system_setting_list_upsert, name='system-setting-list-upsert'),
    path('settings/system/<str:key>/', system_setting_detail, name='system-setting-detail'),

    # AuditLog endpoints
    path('audit-logs/', audit_log_list, name='audit-log-list'),

    path('health/', health_check, name='health-check'),
]
