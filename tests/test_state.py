from dataclasses import FrozenInstanceError

import pytest

from pumpsim.core.types import DischargeId, Governor, IntakeId, NozzleType, WaterSource
from pumpsim.state import create_initial_state


class TestInitialState:
    def test_pump_idle(self, state):
        pump = state.pump
        assert not pump.engaged
        assert pump.governor is Governor.PRESSURE
        assert pump.setpoint == 150.0
        assert pump.rpm == 0.0
        assert pump.pdp == 0.0
        assert pump.foam_tank_gallons == pump.foam_tank_capacity_gallons == 20.0
        assert not pump.foam_system_enabled
        assert not pump.drv.enabled
        assert pump.drv.setpoint_psi == 200.0

    def test_discharges_closed_in_panel_order(self, state):
        assert [d.id for d in state.discharges] == list(DischargeId)
        assert all(d.open == 0.0 and d.foam_pct == 0.0 for d in state.discharges)

    def test_discharge_layout(self, state):
        xlay2 = state.discharge(DischargeId.XLAY2)
        assert xlay2.nozzle_type is NozzleType.SMOOTH
        assert (xlay2.diameter_in, xlay2.length_ft, xlay2.nozzle_psi) == (1.75, 200.0, 50.0)
        deck = state.discharge("deck")
        assert (deck.diameter_in, deck.length_ft, deck.nozzle_psi) == (3.0, 25.0, 80.0)

    def test_dual_hydrant_ldh(self, state):
        assert [i.id for i in state.intakes] == [IntakeId.LDH_DRIVER, IntakeId.LDH_OFFICER]
        assert all(i.source is WaterSource.HYDRANT and i.ldh for i in state.intakes)
        assert state.primary_source is WaterSource.HYDRANT

    def test_defaults(self, state):
        assert state.elevation_ft == 0.0
        assert not state.tank_to_pump_open
        assert not (state.primer_active or state.primed)
        assert state.tank_gallons == 500.0
        assert not state.tank_leak_active
        assert state.burst_lines == ()


class TestCopyOnWrite:
    def test_frozen(self, state):
        with pytest.raises(FrozenInstanceError):
            state.elevation_ft = 10.0

    def test_with_discharge(self, state):
        new = state.with_discharge(DischargeId.XLAY1, open=0.5)
        assert new is not state
        assert new.discharge("xlay1").open == 0.5
        assert state.discharge("xlay1").open == 0.0
        # untouched entries are shared
        assert new.discharge("deck") is state.discharge("deck")

    def test_unknown_ids_are_noops(self, state):
        assert state.discharge("xlay9") is None
        assert state.with_discharge("xlay9", open=1.0) is state
        assert state.with_intake("steamer", psi=10.0) is state

    def test_with_all_intakes(self, state):
        new = state.with_all_intakes(source=WaterSource.DRAFT)
        assert all(i.source is WaterSource.DRAFT for i in new.intakes)
        assert new.is_drafting()

    def test_with_drv(self, state):
        new = state.with_drv(enabled=True)
        assert new.pump.drv.enabled
        assert new.pump.drv.setpoint_psi == 200.0


def test_open_discharges(state):
    new = state.with_discharge("xlay1", open=1.0).with_discharge("deck", open=0.3)
    assert [d.id for d in new.open_discharges()] == [DischargeId.XLAY1, DischargeId.DECK]


def test_factory_follows_config():
    from pumpsim.config import SystemConfig, TankConfig

    s = create_initial_state(SystemConfig(tank=TankConfig(capacity_gallons=750.0)))
    assert s.tank_gallons == s.tank_capacity_gallons == 750.0
