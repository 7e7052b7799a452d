"""
Unit tests for shared text formatting helpers.
"""
import pytest

from hostsense.sensors.formatting import format_bytes, format_duration, usage_percent


class TestFormatBytes:

    @pytest.mark.parametrize(
        "value, expected",
        [
            (0, "0 B"),
            (1023, "1023 B"),
            (1024, "1.0 KB"),
            (1536, "1.5 KB"),
            (5 * 1024 * 1024, "5.0 MB"),
            (3 * 1024 ** 3 // 2, "1.5 GB"),
        ],
    )
    def test_units(self, value, expected):
        assert format_bytes(value) == expected


class TestFormatDuration:

    @pytest.mark.parametrize(
        "seconds, expected",
        [
            (0, "0s"),
            (45, "45s"),
            (300, "5m"),
            (330, "5m 30s"),
            (7200, "2h"),
            (8100, "2h 15m"),
        ],
    )
    def test_format(self, seconds, expected):
        assert format_duration(seconds) == expected


class TestUsagePercent:

    def test_zero_total(self):
        assert usage_percent(0, 0) == 0
        assert usage_percent(10, 0) == 0

    def test_rounded(self):
        assert usage_percent(1, 3) == 33
        assert usage_percent(2, 3) == 67

    def test_clamped(self):
        assert usage_percent(150, 100) == 100
        assert usage_percent(-5, 100) == 0
