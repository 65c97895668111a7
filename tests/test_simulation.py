import pytest

from pumpsim.actions import DischargeOpen, PrimerActivate, PumpEngage, SetWaterSource, Tick
from pumpsim.alerts import AlertKind
from pumpsim.core.types import DischargeId, WaterSource
from pumpsim.simulation import Simulation, TickScheduler


class TestTickScheduler:
    def test_releases_whole_periods(self):
        sched = TickScheduler(0.1)
        assert list(sched.feed(0.25)) == [0.1, 0.1]
        assert sched.pending_s == pytest.approx(0.05)
        assert list(sched.feed(0.05)) == [0.1]

    def test_stall_released_as_one_tick(self):
        sched = TickScheduler(0.1, max_catch_up=3)
        ticks = list(sched.feed(1.05))
        assert ticks == [pytest.approx(1.0)]
        assert sched.pending_s == pytest.approx(0.05)

    def test_backlog_within_limit_ticks_per_period(self):
        sched = TickScheduler(0.1, max_catch_up=3)
        assert list(sched.feed(0.3)) == [0.1, 0.1, 0.1]

    def test_ignores_negative(self):
        sched = TickScheduler(0.1)
        assert list(sched.feed(-1.0)) == []
        assert sched.pending_s == 0.0

    def test_reset(self):
        sched = TickScheduler(0.1)
        list(sched.feed(0.05))
        sched.reset()
        assert sched.pending_s == 0.0

    @pytest.mark.parametrize("period", [0.0, -0.1])
    def test_bad_period(self, period):
        with pytest.raises(ValueError):
            TickScheduler(period)


class TestSimulation:
    def test_observers_see_changes_only(self):
        sim = Simulation()
        seen = []
        sim.subscribe(lambda state, result: seen.append((state, result)))

        sim.dispatch(DischargeOpen(DischargeId.XLAY1, 1.0))  # denied, pump off
        assert seen == []

        sim.dispatch(PumpEngage(True))
        assert len(seen) == 1
        state, result = seen[0]
        assert state is sim.state
        assert state.pump.engaged
        assert result.warnings == []

    def test_unsubscribe(self):
        sim = Simulation()
        seen = []
        unsubscribe = sim.subscribe(lambda state, result: seen.append(state))
        unsubscribe()
        sim.dispatch(PumpEngage(True))
        assert seen == []

    def test_advance(self):
        sim = Simulation()
        sim.dispatch(PumpEngage(True))
        assert sim.advance(0.35) == 3
        assert sim.time_s == pytest.approx(0.3)
        assert sim.state.pump.rpm > 0.0

    def test_stall_keeps_simulated_time(self):
        sim = Simulation()
        sim.dispatch(PumpEngage(True))
        sim.dispatch(SetWaterSource(WaterSource.DRAFT))
        sim.dispatch(PrimerActivate())
        assert sim.advance(20.0) == 1
        assert sim.time_s == pytest.approx(20.0)
        assert sim.state.primed
        assert sim.scheduler.pending_s == pytest.approx(0.0, abs=1e-9)

    def test_dispatch_tick_counts_time(self):
        sim = Simulation()
        sim.dispatch(Tick(0.5))
        sim.dispatch(Tick(-1.0))
        assert sim.time_s == pytest.approx(0.5)

    def test_instructor_messages(self):
        sim = Simulation()
        state = sim.dispatch_instructor('{"type": "SCENARIO_EVENT", "event": "TANK_LEAK"}')
        assert state.tank_leak_active
        assert sim.dispatch_instructor("garbage") is None
        assert any(a.kind is AlertKind.SUPPLY for a in sim.alerts)

    def test_result_follows_state(self):
        sim = Simulation()
        assert sim.result.total_gpm == 0.0
        sim.dispatch(PumpEngage(True))
        sim.dispatch(DischargeOpen(DischargeId.XLAY1, 1.0))
        assert sim.result.total_gpm == pytest.approx(150.0)
