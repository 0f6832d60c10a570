from datetime import date

import pytest

from gtrends.errors import InvalidTimeFormat
from gtrends.time_range import RollingRange, parse_time


class TestRelativeForms:
    @pytest.mark.parametrize("time,unit", [
        ("now 1-H", "H"),
        ("now 4-H", "H"),
        ("now 1-d", "d"),
        ("now 7-d", "d"),
    ])
    def test_now_forms_are_hourly(self, time, unit):
        spec = parse_time(time)
        assert spec.kind == "now"
        assert spec.unit == unit
        assert spec.is_hourly

    @pytest.mark.parametrize("time,amount,unit", [
        ("today 1-m", 1, "m"),
        ("today 3-m", 3, "m"),
        ("today 12-m", 12, "m"),
        ("today+5-y", 5, "y"),
    ])
    def test_today_forms(self, time, amount, unit):
        spec = parse_time(time)
        assert spec.kind == "today"
        assert (spec.amount, spec.unit) == (amount, unit)
        assert not spec.is_hourly

    def test_all(self):
        spec = parse_time("all")
        assert spec.kind == "all"
        assert spec.raw == "all"


class TestExplicitRange:
    def test_parses_dates(self):
        spec = parse_time("2010-01-01 2010-04-03")
        assert spec.kind == "range"
        assert spec.start == date(2010, 1, 1)
        assert spec.end == date(2010, 4, 3)

    def test_start_after_end_rejected(self):
        with pytest.raises(InvalidTimeFormat, match="before end"):
            parse_time("2010-04-03 2010-01-01")

    def test_before_2004_rejected(self):
        with pytest.raises(InvalidTimeFormat, match="2004-01-01"):
            parse_time("2003-12-31 2010-01-01")

    def test_future_end_rejected(self):
        with pytest.raises(InvalidTimeFormat, match="future"):
            parse_time("2010-01-01 2020-01-01", today=date(2015, 1, 1))

    def test_impossible_date_rejected(self):
        with pytest.raises(InvalidTimeFormat, match="Invalid date"):
            parse_time("2010-02-30 2010-04-03")


class TestRejected:
    @pytest.mark.parametrize("time", [
        "bogus",
        "",
        "now 0-H",
        "now 7-m",
        "today 5-y",
        "today+5-m",
        "2010-01-01",
        "2010-01-01  2010-04-03",
        "2010/01/01 2010/04/03",
        " all",
    ])
    def test_bad_shapes(self, time):
        with pytest.raises(InvalidTimeFormat):
            parse_time(time)

    def test_non_string(self):
        with pytest.raises(InvalidTimeFormat, match="single string"):
            parse_time(5)


class TestRollingRange:
    def test_end_date_is_today(self):
        assert RollingRange(months=6).end_date == date.today().strftime("%Y-%m-%d")

    def test_output_is_accepted_by_parser(self):
        spec = parse_time(RollingRange(months=6).as_time_string())
        assert spec.kind == "range"
        assert spec.end == date.today()

    def test_start_clamped_to_trends_epoch(self):
        assert RollingRange(years=100).start_date == "2004-01-01"

    def test_parse_time_accepts_rolling_range(self):
        spec = parse_time(RollingRange(days=30))
        assert spec.kind == "range"
        assert spec.raw == RollingRange(days=30).as_time_string()
        assert (spec.end - spec.start).days == 30

    def test_empty_rolling_range_rejected(self):
        with pytest.raises(InvalidTimeFormat, match="before end"):
            parse_time(RollingRange(days=0))
