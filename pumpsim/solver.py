"""Hydraulics solver: one algebraic snapshot per state.

Каждая открытая линия считается независимо: расход ствола при проектном
давлении (с учётом открытия задвижки), потери в рукаве по Hazen-Williams,
требуемое PDP линии. Насос должен обеспечить максимум по линиям.

Решатель чистый: никакого состояния между вызовами, никаких исключений.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from pumpsim.config import DEFAULT_CONFIG, SystemConfig
from pumpsim.core.types import DischargeId, WaterSource
from pumpsim.physics.formulas import calculate_pdp, estimate_flow, hazen_williams_fl
from pumpsim.state import SimState

NOT_ENGAGED_WARNING = "Pump not engaged"
DRAFTING_WARNING = "Drafting - ensure primer active"


@dataclass(frozen=True)
class SolverResult:
    total_gpm: float
    required_pdp: float
    intake_psi: float
    # insertion order follows SimState.discharges
    discharge_flows: Dict[DischargeId, float] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)


def intake_pressure(state: SimState, cfg: SystemConfig | None = None) -> float:
    """Nominal compound-gauge reading for the active supply."""
    scfg = (cfg or DEFAULT_CONFIG).solver
    if state.tank_to_pump_open:
        return scfg.tank_intake_psi
    source = state.primary_source
    if source == WaterSource.HYDRANT:
        return scfg.hydrant_intake_psi
    if source == WaterSource.DRAFT:
        return scfg.priming_intake_psi if state.primer_active else scfg.draft_intake_psi
    if source == WaterSource.RELAY:
        return scfg.relay_intake_psi
    return 0.0


def solve(state: SimState, cfg: SystemConfig | None = None) -> SolverResult:
    cfg = cfg or DEFAULT_CONFIG
    scfg = cfg.solver

    if not state.pump.engaged:
        return SolverResult(
            total_gpm=0.0,
            required_pdp=0.0,
            intake_psi=scfg.tank_intake_psi if state.tank_to_pump_open else 0.0,
            discharge_flows={},
            warnings=[NOT_ENGAGED_WARNING],
        )

    warnings: List[str] = []
    flows: Dict[DischargeId, float] = {}
    total_gpm = 0.0
    required_pdp = 0.0

    for d in state.discharges:
        if d.open <= 0:
            flows[d.id] = 0.0
            continue

        tip_in = scfg.tip_for_hose(d.diameter_in)
        flow = estimate_flow(d.nozzle_type, tip_in, d.nozzle_psi) * d.open
        flows[d.id] = flow
        total_gpm += flow

        friction = hazen_williams_fl(flow, d.diameter_in, d.length_ft, scfg.hazen_williams_c)
        line_pdp = calculate_pdp(d.nozzle_psi, friction, scfg.appliance_loss_psi, state.elevation_ft)
        required_pdp = max(required_pdp, line_pdp)

        if d.foam_pct > 0 and flow > 0 and state.pump.foam_tank_gallons < cfg.foam.low_level_gallons:
            warnings.append(f"Low foam: {state.pump.foam_tank_gallons:.1f} gal")

    intake_psi = intake_pressure(state, cfg)
    # Raised whenever the draft branch is taken, even once primed.
    if not state.tank_to_pump_open and state.primary_source == WaterSource.DRAFT:
        warnings.append(DRAFTING_WARNING)

    return SolverResult(
        total_gpm=total_gpm,
        required_pdp=required_pdp,
        intake_psi=intake_psi,
        discharge_flows=flows,
        warnings=warnings,
    )
