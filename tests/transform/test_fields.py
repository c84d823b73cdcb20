from __future__ import annotations

from datetime import datetime, timezone

from tzaugment.domain.error_codes import ErrorCode
from tzaugment.domain.models import DiagnosticStage, GeoPoint
from tzaugment.domain.transform.fields import (
    format_local_timestamp,
    parse_geo_point,
    parse_timestamp,
    parse_utc_instant,
    split_line,
    to_local_time,
)


def test_split_line_keeps_trailing_empty_fields():
    assert split_line("a,b,c,,") == ("a", "b", "c", "", "")


def test_split_line_is_literal_about_quotes():
    assert split_line('x,"a,b",y') == ("x", '"a', 'b"', "y")


def test_parse_utc_instant_attaches_utc():
    result = parse_utc_instant(("2013-07-10 02:52:49", "1", "2"))
    assert result.ok
    assert result.value == datetime(2013, 7, 10, 2, 52, 49, tzinfo=timezone.utc)


def test_parse_timestamp_rejects_other_formats():
    for raw in ("2013/07/10 02:52:49", "2013-07-10", "2013-7-10 2:52:49", "2013-07-10 02:52:49Z", " 2013-07-10 02:52:49"):
        result = parse_timestamp(raw)
        assert not result.ok, raw
        assert result.issue.code == ErrorCode.MALFORMED_TIMESTAMP
        assert result.issue.stage == DiagnosticStage.PARSE_TIMESTAMP


def test_parse_timestamp_rejects_impossible_dates():
    result = parse_timestamp("2013-02-30 00:00:00")
    assert not result.ok
    assert result.issue.code == ErrorCode.MALFORMED_TIMESTAMP


def test_parse_utc_instant_reports_empty_field():
    result = parse_utc_instant(("",))
    assert not result.ok
    assert result.issue.field == "timestamp"


def test_parse_geo_point_parses_decimal_degrees():
    result = parse_geo_point(("ts", "-44.490947", "171.220966", "extra"))
    assert result.ok
    assert result.value == GeoPoint(latitude=-44.490947, longitude=171.220966)


def test_parse_geo_point_requires_three_fields():
    result = parse_geo_point(("ts", "-44.49"))
    assert not result.ok
    assert result.issue.code == ErrorCode.MALFORMED_ROW
    assert result.issue.field is None


def test_parse_geo_point_rejects_text_and_non_finite_values():
    bad_lat = parse_geo_point(("ts", "south", "171.2"))
    assert bad_lat.issue.code == ErrorCode.MALFORMED_ROW
    assert bad_lat.issue.field == "latitude"

    bad_lon = parse_geo_point(("ts", "-44.4", "nan"))
    assert bad_lon.issue.code == ErrorCode.MALFORMED_ROW
    assert bad_lon.issue.field == "longitude"


def test_to_local_time_applies_standard_and_daylight_offsets():
    winter = to_local_time(datetime(2013, 7, 10, 2, 52, 49, tzinfo=timezone.utc), "Pacific/Auckland")
    summer = to_local_time(datetime(2013, 1, 10, 2, 52, 49, tzinfo=timezone.utc), "Pacific/Auckland")
    assert format_local_timestamp(winter.value) == "2013-07-10T14:52:49"
    assert format_local_timestamp(summer.value) == "2013-01-10T15:52:49"


def test_to_local_time_reports_unknown_zone():
    result = to_local_time(datetime(2013, 7, 10, tzinfo=timezone.utc), "Mars/Olympus_Mons")
    assert not result.ok
    assert result.issue.code == ErrorCode.ZONE_UNKNOWN
    assert result.issue.stage == DiagnosticStage.CONVERT


def test_to_local_time_reports_calendar_overflow():
    result = to_local_time(datetime(9999, 12, 31, 23, 0, tzinfo=timezone.utc), "Pacific/Auckland")
    assert not result.ok
    assert result.issue.code == ErrorCode.CONVERSION_FAILED


def test_formatted_local_timestamp_parses_back():
    local = to_local_time(datetime(2013, 7, 10, 2, 52, 49, tzinfo=timezone.utc), "Australia/Sydney").value
    text = format_local_timestamp(local)
    reparsed = parse_timestamp(text)
    assert reparsed.ok
    assert reparsed.value == local.replace(tzinfo=None)
    assert format_local_timestamp(reparsed.value) == text


def test_parse_timestamp_accepts_ascii_digits_only():
    result = parse_timestamp("２０１３-07-10 02:52:49")
    assert not result.ok
    assert result.issue.code == ErrorCode.MALFORMED_TIMESTAMP


def test_parse_geo_point_rejects_non_ascii_digits_and_underscores():
    full_width = parse_geo_point(("ts", "-４４.49", "171.22"))
    assert full_width.issue.code == ErrorCode.MALFORMED_ROW
    assert full_width.issue.field == "latitude"

    underscored = parse_geo_point(("ts", "-44.49", "1_71.22"))
    assert underscored.issue.code == ErrorCode.MALFORMED_ROW
    assert underscored.issue.field == "longitude"
