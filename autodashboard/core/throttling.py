"""Scoped request throttles; rates live in REST_FRAMEWORK['DEFAULT_THROTTLE_RATES']"""
from django.core.cache import caches
from rest_framework.throttling import UserRateThrottle


class ScopedRateThrottle(UserRateThrottle):
    """
    Per-user (or per-IP for anonymous callers) throttle whose history lives
    in the 'throttle' cache alias, apart from cached query data.
    """
    cache = caches['throttle']


class LoginRateThrottle(ScopedRateThrottle):
    scope = 'login'


class PasswordResetRateThrottle(ScopedRateThrottle):
    scope = 'password_reset'


class UploadRateThrottle(ScopedRateThrottle):
    scope = 'upload'


class CalculatorRateThrottle(ScopedRateThrottle):
    scope = 'calculator'


class CalculatorLookupRateThrottle(ScopedRateThrottle):
    scope = 'calculator_lookup'
