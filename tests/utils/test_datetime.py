from datetime import datetime, timedelta, timezone

import pytest

from board_realtime.utils import datetime as datetime_utils
from board_realtime.utils import ensure_app_naive_datetime, ensure_app_timezone


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("UTC", timezone.utc),
        ("gmt", timezone.utc),
        ("UTC+02:00", timezone(timedelta(hours=2))),
        ("GMT-0530", timezone(-timedelta(hours=5, minutes=30))),
        ("Not/AZone", timezone.utc),
    ],
)
def test_resolve_timezone(name, expected):
    assert datetime_utils._resolve_timezone(name) == expected


def test_naive_values_are_read_as_app_time(monkeypatch):
    monkeypatch.setattr(datetime_utils, "get_app_timezone", lambda: timezone.utc)
    naive = datetime(2024, 3, 1, 12, 0)

    aware = ensure_app_timezone(naive)

    assert aware.tzinfo is timezone.utc
    assert aware.hour == 12
    assert ensure_app_timezone(None) is None


def test_naive_storage_value_converts_offsets(monkeypatch):
    monkeypatch.setattr(datetime_utils, "get_app_timezone", lambda: timezone.utc)
    value = datetime(2024, 3, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))

    assert ensure_app_naive_datetime(value) == datetime(2024, 3, 1, 12, 0)
