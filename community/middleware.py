"""
================================================================================
SAFE SPACE - CUSTOM MIDDLEWARE
================================================================================

@file        middleware.py
@description Request middleware for timezone activation and presence tracking

MODULE PURPOSE
================================================================================
1. TimezoneMiddleware
   - Activates the signed-in member's timezone for local-time rendering:
     the admin and the date fallback of time_ago(). JSON timestamps are
     always ISO 8601 in UTC
   - Falls back to UTC for visitors and unknown zone names

2. UpdateLastSeenMiddleware
   - Keeps User.last_seen fresh for the "online" indicator
   - Throttled through the cache: at most one write per user every
     LAST_SEEN_THROTTLE seconds

CACHE KEYS
================================================================================
"last_seen_update_{user_id}"  write throttle, TTL = LAST_SEEN_THROTTLE

Chat room presence is tracked separately by heartbeats (see chat.py); this
middleware only covers site-wide activity.

================================================================================
"""

import logging
from datetime import timedelta

import pytz
from django.core.cache import cache
from django.utils import timezone

logger = logging.getLogger(__name__)

LAST_SEEN_THROTTLE = 30  # seconds


# ============================================================================
# TIMEZONE MIDDLEWARE
# ============================================================================

class TimezoneMiddleware:
    """
    Activate the member's timezone for the duration of the request.

    Visitors and members with an unknown zone get UTC.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        tz = pytz.UTC
        user = getattr(request, 'user', None)
        if user is not None and user.is_authenticated:
            try:
                tz = pytz.timezone(user.timezone)
            except (pytz.UnknownTimeZoneError, AttributeError):
                tz = pytz.UTC
        timezone.activate(tz)
        try:
            return self.get_response(request)
        finally:
            timezone.deactivate()


# ============================================================================
# LAST SEEN / PRESENCE TRACKING MIDDLEWARE
# ============================================================================

class UpdateLastSeenMiddleware:
    """
    Refresh ``request.user.last_seen`` at most once per throttle window.

    Example Timeline (30 s throttle):
        00:00 - Request 1: DB write + cache set
        00:15 - Request 2: cache hit, no write
        00:31 - Request 3: cache expired, DB write + cache set
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        user = getattr(request, 'user', None)
        if user is not None and user.is_authenticated:
            self.touch(user)
        return self.get_response(request)

    @staticmethod
    def touch(user):
        now = timezone.now()
        cache_key = f"last_seen_update_{user.id}"
        last_update = cache.get(cache_key)
        if last_update and (now - last_update) < timedelta(seconds=LAST_SEEN_THROTTLE):
            return False

        user.last_seen = now
        try:
            user.save(update_fields=['last_seen'])
        except Exception:
            # Presence is best effort; never fail the request over it
            logger.exception(f"Failed to update last_seen for user {user.id}")
            return False
        cache.set(cache_key, now, LAST_SEEN_THROTTLE)
        return True
