"""Display helpers shared by serializers and the admin."""

from django.utils import timezone


def _plural(n, unit):
    return f"{n} {unit}{'s' if n > 1 else ''} ago"


def time_ago(dt, now=None):
    """
    Relative timestamp like "3 hours ago".

    Anything a week or older falls back to the date itself.
    """
    now = now or timezone.now()
    minutes = int((now - dt).total_seconds() // 60)
    hours = minutes // 60
    days = hours // 24

    if minutes < 1:
        return "just now"
    if minutes < 60:
        return _plural(minutes, "minute")
    if hours < 24:
        return _plural(hours, "hour")
    if days < 7:
        return _plural(days, "day")
    return timezone.localtime(dt).strftime("%b %d, %Y")


def display_name(obj):
    """Name to show for a post or comment: the handle when anonymous."""
    if obj.is_anonymous:
        return obj.anonymous_username or "Anonymous"
    return obj.author.username
