"""Tests for edgebin.parsing and edgebin.dates."""

from datetime import UTC, datetime

import pytest

from edgebin.dates import format_date, resolve_locale, resolve_timezone
from edgebin.errors import CustomError
from edgebin.parsing import data_url, is_textual, string_to_int, string_to_number

MOMENT = datetime(2024, 3, 1, 12, 30, 45, 123456, tzinfo=UTC)


class TestStringToNumber:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("3", 3), (" 42 ", 42), ("-1", -1), ("1.5", 1.5), ("1e2", 100.0)],
    )
    def test_valid(self, raw: str, expected: float) -> None:
        assert string_to_number(raw) == expected

    def test_integers_stay_int(self) -> None:
        assert isinstance(string_to_number("7"), int)

    @pytest.mark.parametrize("raw", [None, "", "  ", "abc", "nan", "inf", "1,5"])
    def test_invalid(self, raw: str | None) -> None:
        with pytest.raises(CustomError) as exc_info:
            string_to_number(raw, what="delay")
        assert exc_info.value.code == 400
        assert "delay" in exc_info.value.message

    def test_int_rejects_fraction(self) -> None:
        with pytest.raises(CustomError):
            string_to_int("2.5")


class TestHelpers:
    def test_data_url(self) -> None:
        assert data_url(b"hi", "application/x-thing") == "data:application/x-thing;base64,aGk="

    def test_is_textual(self) -> None:
        assert is_textual("text/plain")
        assert is_textual("application/vnd.text+json")
        assert not is_textual("image/png")


class TestFormatDate:
    def test_iso_in_zone(self) -> None:
        value = format_date(timezone="Asia/Shanghai", now=MOMENT)
        assert value == "2024-03-01T20:30:45.123+08:00"

    def test_utc_http_date(self) -> None:
        assert format_date(fmt="utc", timezone="Asia/Tokyo", now=MOMENT) == (
            "Fri, 01 Mar 2024 12:30:45 GMT"
        )

    def test_epoch_milliseconds(self) -> None:
        assert format_date(fmt="ts", now=MOMENT) == int(MOMENT.timestamp() * 1000)

    def test_locale(self) -> None:
        value = format_date(fmt="locale", locale="en-US", now=MOMENT)
        assert isinstance(value, str)
        assert "2024" in value

    def test_unknown_format_is_iso(self) -> None:
        assert format_date(fmt="weird", now=MOMENT) == format_date(now=MOMENT)

    def test_unknown_zone(self) -> None:
        with pytest.raises(CustomError) as exc_info:
            format_date(timezone="Mars/Olympus")
        assert exc_info.value.code == 400

    def test_unknown_locale(self) -> None:
        with pytest.raises(CustomError):
            resolve_locale("xx-NOPE")

    def test_resolvers(self) -> None:
        assert str(resolve_timezone("UTC")) == "UTC"
        assert str(resolve_locale("zh_CN")) == "zh_CN"
