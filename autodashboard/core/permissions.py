from rest_framework.permissions import BasePermission


class IsAdminRole(BasePermission):
    """Active users with the ADMIN role"""
    message = 'Only administrators can perform this action'

    def has_permission(self, request, view):
        user = request.user
        return bool(
            user and user.is_authenticated
            and user.is_admin_role and not user.is_blocked
        )


class IsDealerRole(BasePermission):
    """Active users with the DEALER role"""
    message = 'Only dealers can perform this action'

    def has_permission(self, request, view):
        user = request.user
        return bool(
            user and user.is_authenticated
            and user.is_dealer and not user.is_blocked
        )


class IsActiveUser(BasePermission):
    """Any authenticated user whose account is not blocked"""
    message = 'Your account has been blocked. Please contact administrator.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and not user.is_blocked)
