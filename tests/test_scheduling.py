from datetime import datetime, timedelta, timezone

import pytest

from scheduling import (
    EmptyScheduleValue,
    MalformedDateTime,
    MalformedRelativePhrase,
    NormalizedSchedule,
    ScheduleMode,
    ScheduleNotInFuture,
    ScheduleRequest,
    ScheduleTooFarAhead,
    ScheduleValidationError,
    UnsupportedMode,
    format_datetime,
    mode_for_value,
    normalize,
    parse_datetime,
)

REFERENCE = datetime(2024, 1, 1, tzinfo=timezone.utc)


def iso(raw_value):
    return normalize(ScheduleRequest(ScheduleMode.ISO_DATE, raw_value), REFERENCE)


def relative(raw_value):
    return normalize(ScheduleRequest(ScheduleMode.RELATIVE_TIME, raw_value), REFERENCE)


def natural(raw_value, tz=None):
    return normalize(ScheduleRequest(ScheduleMode.NATURAL_LANGUAGE, raw_value, tz), REFERENCE)


# ── iso_date ──────────────────────────────────────────────────────────────────

class TestIsoDate:

    def test_within_window_is_canonicalized(self):
        result = iso("2024-01-15T10:00:00Z")
        assert result == NormalizedSchedule(
            value="2024-01-15T10:00:00.000Z", mode=ScheduleMode.ISO_DATE, warnings=[]
        )

    def test_offset_is_converted_to_utc(self):
        assert iso("2024-01-15T10:00:00+02:00").value == "2024-01-15T08:00:00.000Z"

    def test_value_without_offset_is_utc(self):
        assert iso("2024-01-15T10:00:00").value == "2024-01-15T10:00:00.000Z"

    def test_date_only(self):
        assert iso("2024-01-15").value == "2024-01-15T00:00:00.000Z"

    def test_milliseconds_preserved(self):
        assert iso("2024-01-15T10:00:00.250Z").value == "2024-01-15T10:00:00.250Z"

    @pytest.mark.parametrize("raw_value", [
        "2024-01-01T00:00:01Z",
        "2024-01-10T12:34:56.789Z",
        "2024-01-20T23:59:59.123456+00:00",
        "2024-01-31T00:00:00Z",
    ])
    def test_round_trip(self, raw_value):
        result = iso(raw_value)
        assert parse_datetime(result.value) == parse_datetime(raw_value)

    @pytest.mark.parametrize("raw_value", [
        "2024-01-01T00:00:00Z",
        "2023-12-31T23:59:59Z",
        "2020-06-01",
        "0001-01-01T00:00:00+01:00",
    ])
    def test_not_in_future(self, raw_value):
        with pytest.raises(ScheduleNotInFuture, match="must be in the future"):
            iso(raw_value)

    def test_exactly_thirty_days_is_allowed(self):
        assert iso("2024-01-31T00:00:00Z").value == "2024-01-31T00:00:00.000Z"

    def test_just_past_thirty_days(self):
        with pytest.raises(ScheduleTooFarAhead, match="within 30 days"):
            iso("2024-01-31T00:00:00.001Z")

    def test_out_of_range_far_future(self):
        with pytest.raises(ScheduleTooFarAhead):
            iso("9999-12-31T23:59:59-01:00")

    def test_fifty_eight_days_out(self):
        with pytest.raises(ScheduleTooFarAhead):
            iso("2024-03-01T00:00:00Z")

    @pytest.mark.parametrize("raw_value", [
        "tomorrow",
        "2024-13-01T00:00:00Z",
        "2024-01-15T25:00:00Z",
        "not a date",
    ])
    def test_malformed(self, raw_value):
        with pytest.raises(MalformedDateTime, match="Invalid ISO date"):
            iso(raw_value)

    def test_naive_reference_is_utc(self):
        result = normalize(
            ScheduleRequest(ScheduleMode.ISO_DATE, "2024-01-02T00:00:00Z"),
            datetime(2024, 1, 1),
        )
        assert result.value == "2024-01-02T00:00:00.000Z"


# ── relative_time ─────────────────────────────────────────────────────────────

class TestRelativeTime:

    @pytest.mark.parametrize("raw_value", [
        "in 2 hours",
        "in 1 minute",
        "in 30 minutes",
        "in 1 day",
        "IN 3 DAYS",
        "In 5 Hours",
        "in   10   minutes",
        "in 999999 hours",
    ])
    def test_valid_phrase_passes_through(self, raw_value):
        result = relative(raw_value)
        assert result.value == raw_value
        assert result.mode is ScheduleMode.RELATIVE_TIME

    @pytest.mark.parametrize("raw_value", [
        "soon",
        "in two hours",
        "in -2 hours",
        "in +2 hours",
        "in 0 minutes",
        "in 2 weeks",
        "2 hours",
        "in 2 hours from now",
        "in 2.5 hours",
        "in 2 hours\n",
        "in \u0662 hours",
        "in \uff12 hours",
    ])
    def test_malformed(self, raw_value):
        with pytest.raises(MalformedRelativePhrase, match="in X minutes/hours/days"):
            relative(raw_value)


# ── natural_language ──────────────────────────────────────────────────────────

class TestNaturalLanguage:

    def test_timezone_appended(self):
        result = natural("tomorrow at 9am", "America/New_York")
        assert result.value == "tomorrow at 9am America/New_York"
        assert result.mode is ScheduleMode.NATURAL_LANGUAGE

    def test_without_timezone_unchanged(self):
        assert natural("Friday at 3pm ET").value == "Friday at 3pm ET"

    def test_recognized_phrase_has_no_warning(self):
        assert natural("next week on monday, right after the standup meeting is done").warnings == []

    def test_long_unrecognized_phrase_warns(self, caplog):
        raw_value = "whenever the quarterly numbers are finally ready for review"
        result = natural(raw_value)
        assert result.value == raw_value
        assert len(result.warnings) == 1
        assert "may not be in a recognized format" in caplog.text

    def test_short_unrecognized_phrase_does_not_warn(self):
        assert natural("eventually").warnings == []


# ── common ────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("mode", ["weekly", "", None, "ISO_DATE"])
def test_unsupported_mode(mode):
    with pytest.raises(UnsupportedMode, match="Invalid scheduling option"):
        normalize(ScheduleRequest(mode, "in 2 hours"), REFERENCE)


def test_mode_accepts_wire_string():
    assert normalize(ScheduleRequest("relative_time", "in 2 hours"), REFERENCE).mode is ScheduleMode.RELATIVE_TIME


@pytest.mark.parametrize("mode", list(ScheduleMode))
@pytest.mark.parametrize("raw_value", ["", "   "])
def test_empty_value(mode, raw_value):
    with pytest.raises(EmptyScheduleValue):
        normalize(ScheduleRequest(mode, raw_value), REFERENCE)


def test_errors_are_value_errors():
    assert issubclass(ScheduleValidationError, ValueError)
    for error in (UnsupportedMode, EmptyScheduleValue, MalformedDateTime,
                  ScheduleNotInFuture, ScheduleTooFarAhead, MalformedRelativePhrase):
        assert issubclass(error, ScheduleValidationError)


@pytest.mark.parametrize("value, expected", [
    ("2024-12-25T10:00:00Z", ScheduleMode.ISO_DATE),
    ("2024-12-25", ScheduleMode.ISO_DATE),
    ("  2024-12-25T10:00", ScheduleMode.ISO_DATE),
    ("in 2 hours", ScheduleMode.NATURAL_LANGUAGE),
    ("tomorrow at 10am EST", ScheduleMode.NATURAL_LANGUAGE),
    ("\uff12\uff10\uff12\uff14-12-25", ScheduleMode.NATURAL_LANGUAGE),
])
def test_mode_for_value(value, expected):
    assert mode_for_value(value) is expected


def test_format_datetime_keeps_microseconds():
    instant = datetime(2024, 1, 2, 3, 4, 5, 123456, tzinfo=timezone.utc)
    assert format_datetime(instant) == "2024-01-02T03:04:05.123456Z"


def test_reference_is_not_read_from_clock():
    later = REFERENCE + timedelta(days=60)
    with pytest.raises(ScheduleNotInFuture):
        normalize(ScheduleRequest(ScheduleMode.ISO_DATE, "2024-01-15T10:00:00Z"), later)
