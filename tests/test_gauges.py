from dataclasses import replace

import pytest

from pumpsim.core.types import Governor, WaterSource
from pumpsim.gauges import (
    DischargeReading,
    IntakeReading,
    discharge_gauge,
    format_discharge_reading,
    format_intake_reading,
    intake_gauge,
    is_discharge_pressure_safe,
    is_intake_vacuum_safe,
    master_intake,
    master_intake_warnings,
    pump_status,
)
from pumpsim.solver import solve


class TestMasterIntake:
    def test_pressure_reading(self, engaged):
        s = engaged.with_pump(intake_psi=60.0)
        assert master_intake(s) == 60.0
        assert master_intake_warnings(s) == []

    def test_vacuum_reading(self, engaged):
        s = engaged.with_all_intakes(source=WaterSource.DRAFT).with_pump(intake_psi=-20.0)
        assert master_intake(s) == pytest.approx(-40.72)
        assert master_intake_warnings(s) == ["HIGH VACUUM: Risk of cavitation"]

    def test_low_residual_only_when_engaged(self, state, engaged):
        assert master_intake_warnings(state.with_pump(intake_psi=10.0)) == []
        assert master_intake_warnings(engaged.with_pump(intake_psi=10.0)) == ["LOW INTAKE PRESSURE: < 20 PSI"]


class TestIntakeGauge:
    def test_tank_closed(self):
        r = intake_gauge(WaterSource.TANK, 45.0, False, False)
        assert r == IntakeReading(psi=0.0, warning="Open Tank-to-Pump valve")

    def test_tank_open(self):
        assert intake_gauge(WaterSource.TANK, 45.0, True, False) == IntakeReading(psi=45.0)
        low = intake_gauge(WaterSource.TANK, 30.0, True, False)
        assert low.psi == 45.0
        assert low.warning == "Low tank pressure"

    def test_hydrant(self):
        assert intake_gauge(WaterSource.HYDRANT, 60.0, False, False).warning is None
        assert intake_gauge(WaterSource.HYDRANT, 15.0, False, False).warning == "LOW RESIDUAL: Check water supply"

    @pytest.mark.parametrize(
        "psi,primed,warning",
        [
            (-20.0, False, "PRIMING: Vacuum building"),
            (-5.0, False, "Prime pump to flow"),
            (-5.0, True, None),
            (-20.0, True, "MAX LIFT EXCEEDED: Reduce height or increase water level"),
        ],
    )
    def test_draft(self, psi, primed, warning):
        r = intake_gauge(WaterSource.DRAFT, psi, False, primed)
        assert r.psi is None
        assert r.vacuum_inhg == pytest.approx(abs(psi) * 2.036)
        assert r.warning == warning

    def test_relay(self):
        assert intake_gauge(WaterSource.RELAY, 5.0, False, False).warning == "Low relay pressure"
        assert intake_gauge(WaterSource.RELAY, 30.0, False, False).warning is None


class TestDischargeGauge:
    @pytest.mark.parametrize(
        "pdp,psi,warning",
        [
            (150.0, 150.0, None),
            (260.0, 260.0, "HIGH PRESSURE: Use RPM mode"),
            (360.0, 360.0, "CAUTION: Approaching 400 PSI limit"),
            (450.0, 400.0, "DANGER: OVERPRESSURE (400 PSI MAX)"),
        ],
    )
    def test_bands(self, pdp, psi, warning):
        assert discharge_gauge(pdp) == DischargeReading(psi=psi, warning=warning)

    def test_safety(self):
        assert is_discharge_pressure_safe(DischargeReading(250.0))
        assert not is_discharge_pressure_safe(DischargeReading(251.0))
        assert is_intake_vacuum_safe(IntakeReading(psi=10.0))
        assert not is_intake_vacuum_safe(IntakeReading(vacuum_inhg=22.0))


class TestFormatting:
    def test_intake(self):
        assert format_intake_reading(IntakeReading(psi=44.6)) == "45 PSI"
        assert format_intake_reading(IntakeReading(vacuum_inhg=10.18)) == '10.2" Hg'
        assert format_intake_reading(IntakeReading()) == "0 PSI"

    def test_discharge(self):
        assert format_discharge_reading(DischargeReading(149.6)) == "150 PSI"


def test_pump_status(tank_attack):
    s = tank_attack.with_pump(pdp=150.0, rpm=1350.0, intake_psi=45.0)
    status = pump_status(s, solve(s))
    assert status.mode == "PSI"
    assert status.setpoint_unit == "PSI"
    assert status.actual_pdp == 150.0
    assert status.intake_psi == 45.0
    assert status.intake_vacuum_inhg is None
    assert status.total_flow_gpm == pytest.approx(150.0)
    assert status.warnings == []


def test_pump_status_rpm_mode(engaged):
    s = replace(engaged.with_all_intakes(source=WaterSource.DRAFT), primed=True)
    s = s.with_pump(governor=Governor.RPM, intake_psi=-5.0)
    status = pump_status(s, solve(s))
    assert status.mode == "RPM"
    assert status.intake_psi == 0.0
    assert status.intake_vacuum_inhg == pytest.approx(10.18)
    assert status.warnings == ["Drafting - ensure primer active"]
