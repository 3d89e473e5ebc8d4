import random
import re
from datetime import datetime, timedelta

import pytest
import pytz
from django.contrib.auth.models import AnonymousUser
from django.core.cache import cache
from django.http import HttpResponse
from django.test import RequestFactory
from django.utils import timezone

from community.formatting import display_name, time_ago
from community.middleware import TimezoneMiddleware, UpdateLastSeenMiddleware
from community.models import User
from community.usernames import ADJECTIVES, NOUNS, generate_username

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=pytz.UTC)


@pytest.mark.parametrize("delta, expected", [
    (timedelta(seconds=20), "just now"),
    (timedelta(minutes=1), "1 minute ago"),
    (timedelta(minutes=45), "45 minutes ago"),
    (timedelta(hours=1, minutes=5), "1 hour ago"),
    (timedelta(hours=23), "23 hours ago"),
    (timedelta(days=1), "1 day ago"),
    (timedelta(days=6, hours=23), "6 days ago"),
])
def test_time_ago(delta, expected):
    assert time_ago(NOW - delta, now=NOW) == expected


def test_time_ago_falls_back_to_date_after_a_week():
    with timezone.override(pytz.UTC):
        assert time_ago(NOW - timedelta(days=8), now=NOW) == "Jun 07, 2024"


def test_generate_username_shape():
    name = generate_username(random.Random(7))
    match = re.fullmatch(r"([A-Z][a-z]+)([A-Z][a-z]+)(\d{1,3})", name)
    assert match
    assert match.group(1) in ADJECTIVES
    assert match.group(2) in NOUNS
    assert 1 <= int(match.group(3)) <= 999


@pytest.mark.django_db
def test_display_name(user, post):
    assert display_name(post) == "QuietOwl12"
    post.anonymous_username = ""
    assert display_name(post) == "Anonymous"
    post.is_anonymous = False
    assert display_name(post) == user.username


@pytest.mark.django_db
def test_last_seen_is_throttled(user):
    User.objects.filter(pk=user.pk).update(last_seen=NOW)
    user.refresh_from_db()

    assert UpdateLastSeenMiddleware.touch(user) is True
    first = User.objects.get(pk=user.pk).last_seen
    assert first > NOW

    assert UpdateLastSeenMiddleware.touch(user) is False
    assert User.objects.get(pk=user.pk).last_seen == first

    cache.delete(f"last_seen_update_{user.id}")
    assert UpdateLastSeenMiddleware.touch(user) is True


@pytest.mark.django_db
def test_last_seen_middleware_skips_visitors(rf, django_assert_num_queries):
    request = rf.get("/api/posts")
    request.user = AnonymousUser()
    with django_assert_num_queries(0):
        response = UpdateLastSeenMiddleware(lambda r: HttpResponse("ok"))(request)
    assert response.status_code == 200


@pytest.mark.django_db
def test_timezone_middleware_activates_member_zone(user):
    user.timezone = "Asia/Tokyo"
    seen = {}

    def view(request):
        seen["tz"] = timezone.get_current_timezone_name()
        return HttpResponse("ok")

    request = RequestFactory().get("/")
    request.user = user
    TimezoneMiddleware(view)(request)
    assert seen["tz"] == "Asia/Tokyo"


@pytest.mark.django_db
def test_timezone_middleware_falls_back_to_utc(user):
    user.timezone = "Mars/Olympus"
    seen = {}

    def view(request):
        seen["tz"] = timezone.get_current_timezone_name()
        return HttpResponse("ok")

    request = RequestFactory().get("/")
    request.user = user
    TimezoneMiddleware(view)(request)
    assert seen["tz"] == "UTC"


@pytest.mark.django_db
def test_json_timestamps_stay_utc_for_member_zone(user, user_client, post):
    user.timezone = "Asia/Tokyo"
    user.save(update_fields=["timezone"])
    body = user_client.get(f"/api/posts/{post.id}").json()
    assert body["created_at"].endswith("+00:00")
