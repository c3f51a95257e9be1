"""
Named rate limits for sensitive endpoints.

Rates come from ``REST_FRAMEWORK['DEFAULT_THROTTLE_RATES']`` under the
scope names below and are tracked per client IP in the default cache.
"""
from rest_framework.throttling import AnonRateThrottle


class AuthRateThrottle(AnonRateThrottle):
    scope = 'auth'

    def get_cache_key(self, request, view):
        return self.cache_format % {'scope': self.scope, 'ident': self.get_ident(request)}


class EmergencyRateThrottle(AuthRateThrottle):
    scope = 'emergency'


class EmergencyPinRateThrottle(AuthRateThrottle):
    scope = 'emergency_pin'
