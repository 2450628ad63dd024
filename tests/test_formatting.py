"""Urbit date / number formatting and subscription paths."""

from datetime import datetime, timedelta, timezone

import pytest

from hall_client.formatting import (
    format_grouped_number,
    format_path_date,
    grams_path,
    inbox_station,
    station,
)


class TestPathDate:
    def test_whole_second(self):
        when = datetime(2017, 12, 27, 18, 48, 0, tzinfo=timezone.utc)
        assert format_path_date(when) == "~2017.12.27..18.48.00..0000"

    def test_month_and_day_unpadded_time_padded(self):
        when = datetime(2018, 3, 4, 5, 6, 7, tzinfo=timezone.utc)
        assert format_path_date(when) == "~2018.3.4..05.06.07..0000"

    @pytest.mark.parametrize("millis,fraction", [
        (500, "8000"),
        (1, "0041"),
        (999, "ffbe"),
        (250, "4000"),
    ])
    def test_fraction_is_16_bit_hex(self, millis, fraction):
        when = datetime(2017, 12, 27, 18, 48, 0, millis * 1000, tzinfo=timezone.utc)
        assert format_path_date(when) == f"~2017.12.27..18.48.00..{fraction}"

    def test_epoch_millis(self):
        # 2017-12-27T18:48:00.500Z
        assert format_path_date(1514400480500) == "~2017.12.27..18.48.00..8000"

    def test_naive_is_utc(self):
        assert format_path_date(datetime(2017, 12, 27, 18, 48)) == "~2017.12.27..18.48.00..0000"

    def test_converts_to_utc(self):
        est = timezone(timedelta(hours=-5))
        when = datetime(2017, 12, 27, 13, 48, tzinfo=est)
        assert format_path_date(when) == "~2017.12.27..18.48.00..0000"


class TestGroupedNumber:
    @pytest.mark.parametrize("num,expected", [
        (0, "0"),
        (999, "999"),
        (1000, "1.000"),
        (1024, "1.024"),
        (65536, "65.536"),
        (1000000, "1.000.000"),
        (-1024, "-1.024"),
    ])
    def test_grouping(self, num, expected):
        assert format_grouped_number(num) == expected


class TestStations:
    def test_inbox_station(self):
        assert inbox_station("zod") == "~zod/inbox"
        assert inbox_station("~zod") == "~zod/inbox"

    def test_station(self):
        assert station("marzod", "urbit-meta") == "~marzod/urbit-meta"


class TestGramsPath:
    def test_default_opens_six_hours_back(self):
        now = datetime(2017, 12, 28, 0, 48, tzinfo=timezone.utc)
        assert grams_path(now=now) == "/circle/inbox/grams/~2017.12.27..18.48.00..0000"

    def test_open_range_from_date(self):
        start = datetime(2017, 12, 27, 18, 48, tzinfo=timezone.utc)
        assert grams_path(start) == "/circle/inbox/grams/~2017.12.27..18.48.00..0000"

    def test_closed_range(self):
        start = datetime(2017, 12, 27, 18, 48, tzinfo=timezone.utc)
        end = datetime(2017, 12, 28, 0, 0, tzinfo=timezone.utc)
        assert grams_path(start, end) == (
            "/circle/inbox/grams/~2017.12.27..18.48.00..0000/~2017.12.28..00.00.00..0000"
        )

    def test_explicit_range_strings_verbatim(self):
        assert grams_path("0", "10") == "/circle/inbox/grams/0/10"
        assert grams_path("~2018.1.1") == "/circle/inbox/grams/~2018.1.1"
