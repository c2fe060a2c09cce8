"""Tests for fixed-point ledger conversions."""

import math

import pytest

from alphacore.models import (
    from_basis_points,
    from_micro_units,
    to_basis_points,
    to_micro_units,
)


class TestMicroUnits:
    """Tests for USD <-> micro-USD conversion."""

    def test_whole_and_fractional(self):
        assert to_micro_units(3500.25) == "3500250000"
        assert to_micro_units(0) == "0"

    def test_truncates_not_rounds(self):
        # 1.9999999 would round to 2000000
        assert to_micro_units(1.9999999) == "1999999"

    def test_returns_string(self):
        assert isinstance(to_micro_units(1.0), str)

    def test_from_string_and_int(self):
        assert from_micro_units("3500250000") == pytest.approx(3500.25)
        assert from_micro_units(2_000_000) == 2.0

    @pytest.mark.parametrize("usd", [0.0, 0.5, 1.2345678, 3425.123456789, 99999.9999999])
    def test_round_trip_truncates_to_six_decimals(self, usd):
        expected = math.floor(usd * 1_000_000) / 1_000_000
        assert from_micro_units(to_micro_units(usd)) == pytest.approx(expected, abs=1e-9)


class TestBasisPoints:
    """Tests for fraction <-> basis points conversion."""

    def test_basic(self):
        assert to_basis_points(0.85) == 8500
        assert to_basis_points(1.0) == 10_000
        assert to_basis_points(0.0) == 0
        assert from_basis_points(6500) == 0.65

    def test_truncates_not_rounds(self):
        assert to_basis_points(0.12345) == 1234
        assert to_basis_points(0.99999) == 9999

    @pytest.mark.parametrize("fraction", [0.0, 0.1, 0.33333, 0.5, 0.87654321, 1.0])
    def test_round_trip_truncates_to_four_decimals(self, fraction):
        expected = math.floor(fraction * 10_000) / 10_000
        assert from_basis_points(to_basis_points(fraction)) == pytest.approx(expected)
