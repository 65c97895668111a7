import math

import pytest

from pumpsim.core.types import DischargeId, Governor, WaterSource, parse_enum
from pumpsim.core.units import gpm_to_gallons, psi_to_inhg
from pumpsim.core.validation import clamp, ensure_in_range, ensure_ordered, ensure_positive


def test_ensure_positive_ok():
    ensure_positive(1.0, "x")


def test_ensure_positive_raises():
    with pytest.raises(ValueError):
        ensure_positive(0.0, "x")


def test_ensure_in_range_raises():
    with pytest.raises(ValueError, match="setpoint"):
        ensure_in_range(400.0, 75.0, 300.0, "setpoint")


def test_ensure_ordered_raises():
    with pytest.raises(ValueError):
        ensure_ordered(3000.0, 700.0, "rpm range")


@pytest.mark.parametrize(
    "value,expected",
    [(-5.0, 0.0), (0.5, 0.5), (7.0, 1.0), (math.nan, 0.0)],
)
def test_clamp(value, expected):
    assert clamp(value, 0.0, 1.0) == expected


def test_units():
    assert psi_to_inhg(-10.0) == pytest.approx(20.36)
    assert gpm_to_gallons(150.0, 60.0) == pytest.approx(150.0)
    assert gpm_to_gallons(150.0, 1.0) == pytest.approx(2.5)


def test_enums_compare_with_wire_strings():
    assert DischargeId.XLAY1 == "xlay1"
    assert WaterSource("draft") is WaterSource.DRAFT
    assert WaterSource.HYDRANT.pressurized
    assert not WaterSource.DRAFT.pressurized


def test_parse_enum():
    assert parse_enum(Governor, "RPM") is Governor.RPM
    assert parse_enum(Governor, Governor.PRESSURE) is Governor.PRESSURE
    assert parse_enum(DischargeId, "nope") is None
    assert parse_enum(DischargeId, None) is None
    assert parse_enum(DischargeId, {"id": 1}) is None
