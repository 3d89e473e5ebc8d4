"""
Anonymous feedback: submission validation and admin analytics.

Nothing identifying is stored with a submission. There is no user, no IP
and no time of day, only the calendar date.
"""

import calendar
import csv
from datetime import date, timedelta

from django.utils import timezone

from .errors import ApiError
from .models import (
    AnonymousFeedback,
    FEATURE_RATING_CHOICES,
    SATISFACTION_CHOICES,
    USAGE_FREQUENCY_CHOICES,
)

FEATURES = {
    'chat': 'Chat Rooms',
    'aiSupport': 'AI Support',
    'community': 'Community',
}

TIMEFRAME_MONTHS = {'month': 1, 'quarter': 3}
TREND_DAYS = 30
MAX_IMPROVEMENT_AREAS = 20

CSV_HEADERS = [
    'Submission Date',
    'Satisfaction Rating',
    'Usage Frequency',
    'Chat Rating',
    'AI Support Rating',
    'Community Rating',
    'Feature Request',
    'General Feedback',
]

_SATISFACTION = dict(SATISFACTION_CHOICES)
_USAGE = dict(USAGE_FREQUENCY_CHOICES)
_RATINGS = dict(FEATURE_RATING_CHOICES)


# ============================================================================
# SUBMISSION
# ============================================================================

def _free_text(data, field):
    value = data.get(field) or ''
    if not isinstance(value, str):
        raise ApiError(f"{field} must be a string")
    return value.strip()


def clean_submission(data):
    """
    Validate a feedback payload.

    Returns the model field values; raises ApiError(400) on the first
    problem found.
    """
    satisfaction = data.get('satisfaction_rating')
    if not isinstance(satisfaction, str) or satisfaction not in _SATISFACTION:
        raise ApiError("Please select a satisfaction rating")

    usage = data.get('usage_frequency')
    if not isinstance(usage, str) or usage not in _USAGE:
        raise ApiError("Please select how often you use our platform")

    ratings = data.get('feature_rating') or {}
    if not isinstance(ratings, dict):
        raise ApiError("feature_rating must be an object")
    cleaned_ratings = {}
    for feature, rating in ratings.items():
        if feature not in FEATURES:
            raise ApiError(f"Unknown feature '{feature}'")
        if rating in (None, ''):
            continue
        if not isinstance(rating, str) or rating not in _RATINGS:
            raise ApiError(f"Invalid rating '{rating}' for {feature}")
        cleaned_ratings[feature] = rating

    areas = data.get('improvement_areas') or []
    if not isinstance(areas, list) or not all(isinstance(a, str) for a in areas):
        raise ApiError("improvement_areas must be a list of strings")
    if len(areas) > MAX_IMPROVEMENT_AREAS:
        raise ApiError(f"At most {MAX_IMPROVEMENT_AREAS} improvement areas")

    feature_request = _free_text(data, 'feature_request')
    if len(feature_request) > 500:
        raise ApiError("Feature request must be less than 500 characters")

    general_feedback = _free_text(data, 'general_feedback')
    if len(general_feedback) > 1000:
        raise ApiError("Feedback must be less than 1000 characters")

    return {
        'satisfaction_rating': satisfaction,
        'usage_frequency': usage,
        'feature_rating': cleaned_ratings,
        'improvement_areas': [a.strip()[:100] for a in areas if a.strip()],
        'feature_request': feature_request,
        'general_feedback': general_feedback,
    }


def submit(data):
    return AnonymousFeedback.objects.create(**clean_submission(data))


# ============================================================================
# ANALYTICS
# ============================================================================

def _months_ago(day, months):
    month_index = day.month - 1 - months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def timeframe_start(timeframe, today=None):
    """First submission_date included by a timeframe, or None for 'all'."""
    today = today or timezone.localdate()
    if timeframe in (None, '', 'all'):
        return None
    if timeframe == 'week':
        return today - timedelta(days=7)
    if timeframe in TIMEFRAME_MONTHS:
        return _months_ago(today, TIMEFRAME_MONTHS[timeframe])
    raise ApiError("timeframe must be one of: all, week, month, quarter")


def feedback_for(timeframe, today=None):
    qs = AnonymousFeedback.objects.all()
    start = timeframe_start(timeframe, today)
    if start is not None:
        qs = qs.filter(submission_date__gte=start)
    return qs.order_by('-submission_date', '-id')


def summarize(rows, today=None):
    """
    Dashboard numbers for a set of submissions.

    satisfaction    every bucket, zero counts included
    feature_ratings feature x rating pairs that occur at least once
    trend           one entry per day for the last TREND_DAYS days
    """
    rows = list(rows)
    today = today or timezone.localdate()

    satisfaction = {value: 0 for value in _SATISFACTION}
    pairs = {}
    first_day = today - timedelta(days=TREND_DAYS - 1)
    per_day = {first_day + timedelta(days=i): 0 for i in range(TREND_DAYS)}

    for row in rows:
        if row.satisfaction_rating in satisfaction:
            satisfaction[row.satisfaction_rating] += 1
        for feature, rating in (row.feature_rating or {}).items():
            if feature in FEATURES and rating in _RATINGS:
                pairs[(feature, rating)] = pairs.get((feature, rating), 0) + 1
        if row.submission_date in per_day:
            per_day[row.submission_date] += 1

    return {
        "total": len(rows),
        "satisfaction": [
            {"rating": value, "label": _SATISFACTION[value], "count": count}
            for value, count in satisfaction.items()
        ],
        "feature_ratings": [
            {
                "feature": feature,
                "feature_label": FEATURES[feature],
                "rating": rating,
                "rating_label": _RATINGS[rating],
                "count": pairs[(feature, rating)],
            }
            for feature in FEATURES
            for rating in _RATINGS
            if (feature, rating) in pairs
        ],
        "trend": [
            {"date": day.isoformat(), "submissions": count}
            for day, count in per_day.items()
        ],
    }


def write_csv(rows, stream):
    writer = csv.writer(stream)
    writer.writerow(CSV_HEADERS)
    for row in rows:
        ratings = row.feature_rating or {}
        writer.writerow([
            row.submission_date.isoformat(),
            row.satisfaction_rating,
            row.usage_frequency,
            ratings.get('chat') or 'N/A',
            ratings.get('aiSupport') or 'N/A',
            ratings.get('community') or 'N/A',
            row.feature_request,
            row.general_feedback,
        ])
