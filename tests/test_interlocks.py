from dataclasses import replace

from pumpsim.core.types import Governor, WaterSource
from pumpsim.interlocks import (
    DISCHARGE_WARNING,
    FOAM_WARNING,
    GOVERNOR_WARNING,
    THROTTLE_WARNING,
    can_adjust_throttle,
    can_change_foam,
    can_open_discharge,
    can_switch_governor,
    get_interlock_warning,
    validate_changeover_sequence,
    validate_state,
)


class TestPredicates:
    def test_engagement_gates(self, state, engaged):
        assert not can_adjust_throttle(state)
        assert not can_open_discharge(state)
        assert can_adjust_throttle(engaged)
        assert can_open_discharge(engaged)

    def test_foam_needs_open_line(self, engaged):
        assert not can_change_foam(engaged, "xlay1")
        opened = engaged.with_discharge("xlay1", open=0.5)
        assert can_change_foam(opened, "xlay1")
        assert not can_change_foam(opened, "xlay2")

    def test_foam_unknown_line(self, engaged):
        assert not can_change_foam(engaged.with_discharge("xlay1", open=1.0), "bumper")

    def test_governor_from_pressure(self, engaged):
        assert not can_switch_governor(engaged.with_pump(pdp=150.0))
        assert can_switch_governor(engaged.with_pump(pdp=260.0))
        assert can_switch_governor(engaged.with_all_intakes(source=WaterSource.DRAFT))

    def test_governor_back_to_pressure(self, engaged):
        assert can_switch_governor(engaged.with_pump(governor=Governor.RPM, pdp=100.0))


class TestInterlockWarning:
    def test_messages(self, state):
        assert get_interlock_warning("throttle", state) == THROTTLE_WARNING
        assert get_interlock_warning("discharge", state) == DISCHARGE_WARNING
        assert get_interlock_warning("governor", state) == GOVERNOR_WARNING
        assert get_interlock_warning("foam", state, "xlay1") == FOAM_WARNING

    def test_allowed_is_none(self, engaged):
        assert get_interlock_warning("throttle", engaged) is None
        assert get_interlock_warning("discharge", engaged) is None
        assert get_interlock_warning("bogus", engaged) is None


class TestValidateState:
    def test_clean_initial_state(self, state):
        assert validate_state(state) == []

    def test_order_and_content(self, state):
        s = state.with_discharge("xlay1", open=1.0, foam_pct=3.0).with_pump(foam_tank_gallons=0.0)
        assert validate_state(s) == [
            "Discharge valves open but pump not engaged",
            "Foam concentrate depleted",
        ]

    def test_drafting_without_primer(self, engaged):
        s = engaged.with_all_intakes(source=WaterSource.DRAFT)
        assert validate_state(s) == ["Drafting without primer - pump may not flow"]
        assert validate_state(replace(s, primer_active=True)) == []
        assert validate_state(replace(s, primed=True)) == []

    def test_no_water_source(self, engaged):
        s = engaged.with_all_intakes(source=WaterSource.TANK)
        assert validate_state(s) == ["No water source available"]
        assert validate_state(replace(s, tank_to_pump_open=True)) == []

    def test_no_duplicates(self, state):
        s = state.with_discharge("xlay1", open=1.0).with_discharge("xlay2", open=1.0)
        out = validate_state(s)
        assert len(out) == len(set(out))


class TestChangeover:
    def test_both_open(self, engaged):
        res = validate_changeover_sequence(replace(engaged, tank_to_pump_open=True).with_pump(intake_psi=45.0))
        assert not res.valid
        assert res.faults == ["CHANGEOVER FAULT: Both tank and intake valves open simultaneously"]

    def test_no_source(self, engaged):
        res = validate_changeover_sequence(engaged.with_all_intakes(source=WaterSource.TANK))
        assert "NO WATER SOURCE: All intake valves closed" in res.faults

    def test_pressure_drop(self, engaged):
        res = validate_changeover_sequence(engaged.with_pump(pdp=120.0, intake_psi=5.0))
        assert res.faults == ["PRESSURE DROP: Inadequate intake during changeover"]

    def test_good_hydrant_supply(self, engaged):
        res = validate_changeover_sequence(engaged.with_pump(pdp=150.0, intake_psi=60.0))
        assert res.valid
        assert res.faults == []
