from datetime import datetime

from django.utils import timezone


def review_date(now=None):
    """Calendar day a review at ``now`` counts for, in the active time zone."""
    now = now or timezone.now()
    if not isinstance(now, datetime):
        return now
    if timezone.is_naive(now):
        return now.date()
    return timezone.localdate(now)
