# tests/services/test_deadlines.py
from datetime import date, timedelta

import pytest

from task_tracker.services.deadlines import classify, due_soon_window, today_in_zone

TODAY = date(2024, 3, 28)


@pytest.mark.parametrize("offset, overdue, due_soon", [
    (-30, True, False),
    (-1, True, False),
    (0, False, True),
    (1, False, True),
    (3, False, True),
    (4, False, False),
    (45, False, False),
])
def test_classify_boundaries(offset, overdue, due_soon):
    status = classify(TODAY, TODAY + timedelta(days=offset))

    assert status.days_remaining == offset
    assert status.is_overdue is overdue
    assert status.is_due_soon is due_soon


def test_deadline_today_is_not_overdue():
    status = classify(TODAY, TODAY)
    assert status.days_remaining == 0
    assert not status.is_overdue


def test_classify_across_month_and_leap_day():
    status = classify(date(2024, 2, 27), date(2024, 3, 1))
    assert status.days_remaining == 3
    assert status.is_due_soon


def test_due_soon_window_is_inclusive_three_days():
    assert due_soon_window(TODAY) == (TODAY, date(2024, 3, 31))


def test_today_in_zone_respects_zone_name():
    # Kiritimati and Niue sit 25 hours apart, so their dates always differ
    ahead = today_in_zone("Pacific/Kiritimati")
    behind = today_in_zone("Pacific/Niue")
    assert ahead - behind in (timedelta(days=1), timedelta(days=2))
