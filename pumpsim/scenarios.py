"""Учебные эволюции (drills) для прогона ядра без UI.

`DrillProfile` задаёт действия по времени, `DrillRunner` прогоняет их через
редьюсер фиксированными TICK и пишет numpy-таймлайны и виды алертов.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np

from pumpsim.actions import (
    Action,
    DischargeOpen,
    DrvSetpointSet,
    DrvToggle,
    FoamPct,
    FoamSystemEnable,
    GovernorMode,
    PrimerActivate,
    PumpEngage,
    Reducer,
    SetIntakePressure,
    SetPoint,
    SetWaterSource,
    TankToPump,
    Tick,
)
from pumpsim.alerts import Alert, collect_alerts
from pumpsim.config import DEFAULT_CONFIG, SystemConfig
from pumpsim.core.types import DischargeId, Governor, IntakeId, WaterSource
from pumpsim.solver import solve
from pumpsim.state import SimState, create_initial_state

TIMELINE_KEYS = (
    "time",
    "rpm",
    "pdp",
    "intake_psi",
    "total_gpm",
    "bypass_gpm",
    "foam_gallons",
    "tank_gallons",
    "pump_temp_f",
)


@dataclass(frozen=True)
class DrillStep:
    at_s: float
    action: Action


@dataclass(frozen=True)
class DrillProfile:
    name: str
    duration_s: float
    description: str
    steps: Tuple[DrillStep, ...] = ()


@dataclass
class DrillResult:
    profile: DrillProfile
    timeline: Dict[str, np.ndarray]
    final_state: SimState
    alerts: List[Alert] = field(default_factory=list)
    # порядок первого появления
    alert_kinds_seen: List[str] = field(default_factory=list)


def _steps(*pairs: Tuple[float, Action]) -> Tuple[DrillStep, ...]:
    return tuple(DrillStep(float(t), a) for t, a in pairs)


DRILLS = ("tank_attack", "hydrant_supply", "drafting", "relief_valve", "foam_attack")


def build_drill(name: str, rng: np.random.Generator | None = None) -> DrillProfile:
    """Built-in training evolutions. `rng` only varies the hydrant residual."""
    if name == "tank_attack":
        return DrillProfile(
            name,
            60.0,
            "Booster tank, one 1.75in crosslay",
            _steps(
                (0.0, PumpEngage(True)),
                (0.0, TankToPump(True)),
                (2.0, DischargeOpen(DischargeId.XLAY1, 1.0)),
                (2.0, SetPoint(150.0)),
            ),
        )
    if name == "hydrant_supply":
        residual = float(rng.uniform(45.0, 75.0)) if rng is not None else 60.0
        return DrillProfile(
            name,
            60.0,
            "Dual LDH hydrant supply, two crosslays and the deck gun",
            _steps(
                (0.0, SetWaterSource(WaterSource.HYDRANT)),
                (0.0, PumpEngage(True)),
                (1.0, SetIntakePressure(IntakeId.LDH_DRIVER, residual)),
                (3.0, DischargeOpen(DischargeId.XLAY1, 1.0)),
                (3.0, DischargeOpen(DischargeId.XLAY2, 1.0)),
                (6.0, DischargeOpen(DischargeId.DECK, 1.0)),
                (6.0, SetPoint(150.0)),
            ),
        )
    if name == "drafting":
        return DrillProfile(
            name,
            60.0,
            "Draft from static source: prime, switch to RPM, flow one line",
            _steps(
                (0.0, SetWaterSource(WaterSource.DRAFT)),
                (0.0, PumpEngage(True)),
                (0.5, PrimerActivate()),
                (16.0, GovernorMode(Governor.RPM)),
                (16.0, SetPoint(1500.0)),
                (18.0, DischargeOpen(DischargeId.XLAY1, 1.0)),
            ),
        )
    if name == "relief_valve":
        return DrillProfile(
            name,
            40.0,
            "Relief valve set below the governor target",
            _steps(
                (0.0, SetWaterSource(WaterSource.HYDRANT)),
                (0.0, PumpEngage(True)),
                (0.0, DrvToggle(True)),
                (0.0, DrvSetpointSet(150.0)),
                (2.0, DischargeOpen(DischargeId.XLAY1, 1.0)),
                (2.0, SetPoint(220.0)),
            ),
        )
    if name == "foam_attack":
        return DrillProfile(
            name,
            90.0,
            "Class A foam at 3% through crosslay 1",
            _steps(
                (0.0, PumpEngage(True)),
                (0.0, TankToPump(True)),
                (0.0, FoamSystemEnable(True)),
                (2.0, DischargeOpen(DischargeId.XLAY1, 1.0)),
                (2.5, FoamPct(DischargeId.XLAY1, 3.0)),
            ),
        )
    raise ValueError(f"Unknown drill: {name!r} (expected one of {', '.join(DRILLS)})")


class DrillRunner:
    def __init__(self, cfg: SystemConfig | None = None, rng: np.random.Generator | None = None):
        self.cfg = cfg or DEFAULT_CONFIG
        self.rng = rng if rng is not None else np.random.default_rng(0)
        self.reducer = Reducer(self.cfg, self.rng)

    def run(self, profile: DrillProfile, dt: Optional[float] = None, state: SimState | None = None) -> DrillResult:
        dt = float(dt) if dt is not None else self.cfg.sim.tick_s
        if dt <= 0:
            raise ValueError(f"dt must be > 0, got {dt}")
        n = int(round(profile.duration_s / dt))

        s = state if state is not None else create_initial_state(self.cfg)
        timeline = {k: np.zeros((n,), dtype=np.float64) for k in TIMELINE_KEYS}
        pending = sorted(profile.steps, key=lambda st: st.at_s)
        kinds_seen: List[str] = []
        cursor = 0

        for i in range(n):
            t = i * dt
            while cursor < len(pending) and pending[cursor].at_s <= t + 1e-9:
                s = self.reducer(s, pending[cursor].action)
                cursor += 1

            s = self.reducer(s, Tick(dt))
            result = solve(s, self.cfg)

            timeline["time"][i] = t + dt
            timeline["rpm"][i] = s.pump.rpm
            timeline["pdp"][i] = s.pump.pdp
            timeline["intake_psi"][i] = s.pump.intake_psi
            timeline["total_gpm"][i] = result.total_gpm
            timeline["bypass_gpm"][i] = s.pump.drv.bypass_gpm
            timeline["foam_gallons"][i] = s.pump.foam_tank_gallons
            timeline["tank_gallons"][i] = s.tank_gallons
            timeline["pump_temp_f"][i] = s.pump_temp_f

            for a in collect_alerts(s, result, self.cfg):
                if a.kind.value not in kinds_seen:
                    kinds_seen.append(a.kind.value)

        final = solve(s, self.cfg)
        return DrillResult(
            profile=profile,
            timeline=timeline,
            final_state=s,
            alerts=collect_alerts(s, final, self.cfg),
            alert_kinds_seen=kinds_seen,
        )
