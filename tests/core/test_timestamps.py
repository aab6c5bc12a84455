"""Tests for timestamp parsing and formatting."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from jsonexpand.core.timestamps import format_timestamp, parse_timestamp


class TestParseTimestamp:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("2020-01-01T00:00:00Z", datetime(2020, 1, 1, tzinfo=UTC)),
            ("2020-01-01T00:00:00z", datetime(2020, 1, 1, tzinfo=UTC)),
            ("2020-01-01T00:00:00+00:00", datetime(2020, 1, 1, tzinfo=UTC)),
            ("2020-01-01T01:00:00+01:00", datetime(2020, 1, 1, tzinfo=UTC)),
            ("2019-12-31T19:00:00-05:00", datetime(2020, 1, 1, tzinfo=UTC)),
            ("2020-01-01 00:00:00Z", datetime(2020, 1, 1, tzinfo=UTC)),
            ("2020-01-01T00:00:00.123Z", datetime(2020, 1, 1, 0, 0, 0, 123000, tzinfo=UTC)),
            ("2020-01-01T00:00:00.123456789Z", datetime(2020, 1, 1, 0, 0, 0, 123456, tzinfo=UTC)),
            ("  2020-01-01T00:00:00Z  ", datetime(2020, 1, 1, tzinfo=UTC)),
        ],
    )
    def test_accepted_forms(self, text: str, expected: datetime) -> None:
        parsed = parse_timestamp(text)

        assert parsed == expected
        assert parsed.tzinfo == UTC

    def test_naive_taken_as_utc(self) -> None:
        assert parse_timestamp("2020-01-01T00:00:00") == datetime(2020, 1, 1, tzinfo=UTC)

    @pytest.mark.parametrize("text", ["", "   ", "yesterday", "2020-13-01T00:00:00Z", "01/02/2020"])
    def test_rejected_forms(self, text: str) -> None:
        with pytest.raises(ValueError):
            parse_timestamp(text)


class TestFormatTimestamp:
    def test_utc(self) -> None:
        assert format_timestamp(datetime(2020, 1, 1, 12, 30, tzinfo=UTC)) == "2020-01-01T12:30:00.000Z"

    def test_offset_converted(self) -> None:
        plus_two = timezone(timedelta(hours=2))

        assert format_timestamp(datetime(2020, 1, 1, 2, 0, tzinfo=plus_two)) == "2020-01-01T00:00:00.000Z"

    def test_naive_assumed_utc(self) -> None:
        assert format_timestamp(datetime(2020, 1, 1)) == "2020-01-01T00:00:00.000Z"
