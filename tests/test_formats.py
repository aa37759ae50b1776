"""Tests for the linear-time string format scanners."""

import pytest

from vetted.validation import formats


class TestNetwork:
    @pytest.mark.parametrize("value,expected", [
        ("user.name+tag@example.co.uk", True),
        ("@example.com", False),
        ("user@", False),
        ("user@exa mple.com", False),
        ("user@-example.com", False),
    ])
    def test_email(self, value, expected):
        assert formats.is_email(value) is expected

    def test_hostname_label_limits(self):
        assert formats.is_hostname("a" * 63 + ".com")
        assert not formats.is_hostname("a" * 64 + ".com")
        assert not formats.is_hostname("example..com")

    def test_ipv4_leading_zero(self):
        assert not formats.is_ipv4("01.2.3.4")
        assert formats.is_ipv4("0.0.0.0")

    @pytest.mark.parametrize("value,expected", [
        ("::", True),
        ("::1", True),
        ("fe80::", True),
        ("1:2:3:4:5:6:7:8", True),
        ("1:2:3:4:5:6:7", False),
        ("1:2:3:4:5:6:7:8:9", False),
        ("12345::", False),
        ("g::1", False),
    ])
    def test_ipv6(self, value, expected):
        assert formats.is_ipv6(value) is expected


class TestIso:
    @pytest.mark.parametrize("value,expected", [
        ("2024-01-01T00:00", True),
        ("2024-01-01T00:00:00.123456+05:30", True),
        ("2024-01-01T00:00:00-08:00", True),
        ("2024-01-01T25:00", False),
        ("2024-01-01T00:00+5:30", False),
        ("2024-01-01", False),
    ])
    def test_datetime(self, value, expected):
        assert formats.is_iso_datetime(value) is expected

    def test_date_shape(self):
        assert not formats.is_iso_date("2024-1-01")
        assert not formats.is_iso_date("2024-00-10")
        assert not formats.is_iso_date("2024-01-32")


class TestHostileInput:
    def test_long_inputs_scan_quickly(self):
        blob = "a" * 100_000
        assert not formats.is_email(blob + "@")
        assert not formats.is_uuid(blob)
        assert formats.is_nanoid(blob)
