"""Interlock policy (NFPA-style operator constraints).

Чистые предикаты над SimState. Редьюсер спрашивает их перед изменением
состояния; UI показывает `get_interlock_warning`, а `validate_state` /
`validate_changeover_sequence` дают advisory-диагностику без блокировки.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from pumpsim.config import DEFAULT_CONFIG, SystemConfig
from pumpsim.core.types import Governor, WaterSource
from pumpsim.state import SimState

THROTTLE_WARNING = "Pump must be engaged to adjust throttle"
DISCHARGE_WARNING = "Pump must be engaged to open discharges"
GOVERNOR_WARNING = "Can only switch to RPM mode when drafting or at high pressure (>250 PSI)"
FOAM_WARNING = "Pump must be engaged and discharge open to adjust foam"


def can_adjust_throttle(state: SimState) -> bool:
    return state.pump.engaged


def can_open_discharge(state: SimState) -> bool:
    return state.pump.engaged


def can_change_foam(state: SimState, discharge_id) -> bool:
    discharge = state.discharge(discharge_id)
    if discharge is None:
        return False
    return state.pump.engaged and discharge.open > 0


def can_switch_governor(state: SimState, cfg: SystemConfig | None = None) -> bool:
    # From PRESSURE only toward RPM, and only where RPM mode is appropriate.
    if state.pump.governor == Governor.PRESSURE:
        limit = (cfg or DEFAULT_CONFIG).governor.rpm_mode_threshold_psi
        return state.is_drafting() or state.pump.pdp > limit
    return True


def get_interlock_warning(kind: str, state: SimState, discharge_id=None) -> Optional[str]:
    """Operator-facing reason an action is blocked, or None.

    kind: "throttle" | "discharge" | "governor" | "foam". Unknown kinds -> None.
    """
    if kind == "throttle" and not can_adjust_throttle(state):
        return THROTTLE_WARNING
    if kind == "discharge" and not can_open_discharge(state):
        return DISCHARGE_WARNING
    if kind == "governor" and not can_switch_governor(state):
        return GOVERNOR_WARNING
    if kind == "foam" and not can_change_foam(state, discharge_id):
        return FOAM_WARNING
    return None


def _has_source(state: SimState, source: WaterSource) -> bool:
    return any(i.source == source for i in state.intakes)


def validate_state(state: SimState) -> List[str]:
    warnings: List[str] = []
    pump = state.pump

    if any(d.open > 0 for d in state.discharges) and not pump.engaged:
        warnings.append("Discharge valves open but pump not engaged")

    foam_in_use = any(d.foam_pct > 0 and d.open > 0 for d in state.discharges)
    if foam_in_use and pump.foam_tank_gallons <= 0:
        warnings.append("Foam concentrate depleted")

    drafting = state.is_drafting()
    if drafting and not state.primer_active and not state.primed and pump.engaged:
        warnings.append("Drafting without primer - pump may not flow")

    pressurized = _has_source(state, WaterSource.HYDRANT) or _has_source(state, WaterSource.RELAY)
    if not state.tank_to_pump_open and not pressurized and not drafting and pump.engaged:
        warnings.append("No water source available")

    return list(dict.fromkeys(warnings))


@dataclass(frozen=True)
class ChangeoverResult:
    valid: bool
    faults: List[str] = field(default_factory=list)


def validate_changeover_sequence(state: SimState, cfg: SystemConfig | None = None) -> ChangeoverResult:
    """Tank-to-hydrant changeover checks."""
    cfg = cfg or DEFAULT_CONFIG
    pump = state.pump
    faults: List[str] = []

    gated = _has_source(state, WaterSource.HYDRANT) or _has_source(state, WaterSource.RELAY)
    if state.tank_to_pump_open and gated and pump.engaged:
        faults.append("CHANGEOVER FAULT: Both tank and intake valves open simultaneously")

    if not state.tank_to_pump_open and not gated and pump.engaged and not state.is_drafting():
        faults.append("NO WATER SOURCE: All intake valves closed")

    if pump.engaged and pump.pdp > 0 and pump.intake_psi < cfg.gauges.changeover_min_intake_psi:
        faults.append("PRESSURE DROP: Inadequate intake during changeover")

    return ChangeoverResult(valid=not faults, faults=faults)
