"""Actions and the reducer: the only way SimState changes.

Каждое действие: frozen dataclass с «проводным» именем `type`
(`PUMP_ENGAGE`, `DISCHARGE_OPEN`, ...). `reduce(state, action)` возвращает
новое состояние; если интерлок запрещает действие или действие неизвестно,
возвращается тот же объект состояния (`new is old` значит «ничего не
изменилось»).

`action_from_dict` разбирает проводную форму `{"type": ..., <camelCase>}`.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Any, Callable, ClassVar, Dict, Mapping, Optional, Type, Union

import numpy as np

from pumpsim.config import DEFAULT_CONFIG, SystemConfig
from pumpsim.core.types import DischargeId, Governor, IntakeId, WaterSource, parse_enum
from pumpsim.core.validation import clamp
from pumpsim.engine import update_time_based_state
from pumpsim.interlocks import (
    can_adjust_throttle,
    can_change_foam,
    can_open_discharge,
    can_switch_governor,
    get_interlock_warning,
)
from pumpsim.state import SimState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PumpEngage:
    type: ClassVar[str] = "PUMP_ENGAGE"
    engaged: bool


@dataclass(frozen=True)
class GovernorMode:
    type: ClassVar[str] = "GOVERNOR_MODE"
    mode: Governor


@dataclass(frozen=True)
class SetPoint:
    type: ClassVar[str] = "SETPOINT"
    value: float


@dataclass(frozen=True)
class DischargeOpen:
    type: ClassVar[str] = "DISCHARGE_OPEN"
    id: DischargeId
    open: float


@dataclass(frozen=True)
class FoamPct:
    type: ClassVar[str] = "FOAM_PCT"
    id: DischargeId
    pct: float


@dataclass(frozen=True)
class FoamSystemEnable:
    type: ClassVar[str] = "FOAM_SYSTEM_ENABLE"
    enabled: bool


@dataclass(frozen=True)
class SetWaterSource:
    type: ClassVar[str] = "WATER_SOURCE"
    source: WaterSource


@dataclass(frozen=True)
class TankToPump:
    type: ClassVar[str] = "TANK_TO_PUMP"
    open: bool


@dataclass(frozen=True)
class PrimerActivate:
    type: ClassVar[str] = "PRIMER_ACTIVATE"


@dataclass(frozen=True)
class PrimerComplete:
    type: ClassVar[str] = "PRIMER_COMPLETE"


@dataclass(frozen=True)
class PrimerProgress:
    type: ClassVar[str] = "PRIMER_PROGRESS"
    progress: float


@dataclass(frozen=True)
class Elevation:
    type: ClassVar[str] = "ELEVATION"
    ft: float


@dataclass(frozen=True)
class DrvToggle:
    type: ClassVar[str] = "DRV_TOGGLE"
    enabled: bool


@dataclass(frozen=True)
class DrvSetpointSet:
    type: ClassVar[str] = "DRV_SETPOINT_SET"
    psi: float


@dataclass(frozen=True)
class TankFillRecircSet:
    type: ClassVar[str] = "TANK_FILL_RECIRC_SET"
    pct: float


@dataclass(frozen=True)
class Tick:
    type: ClassVar[str] = "TICK"
    delta_time: float


@dataclass(frozen=True)
class SetIntakePressure:
    type: ClassVar[str] = "SET_INTAKE_PRESSURE"
    intake_id: IntakeId
    psi: float


@dataclass(frozen=True)
class ScenarioHoseBurst:
    type: ClassVar[str] = "SCENARIO_HOSE_BURST"
    line_id: DischargeId


@dataclass(frozen=True)
class ScenarioIntakeFailure:
    type: ClassVar[str] = "SCENARIO_INTAKE_FAILURE"
    intake_id: IntakeId
    # None -> residual drawn uniformly from [0, 10) PSI
    residual_psi: Optional[float] = None


@dataclass(frozen=True)
class ScenarioTankLeak:
    type: ClassVar[str] = "SCENARIO_TANK_LEAK"


@dataclass(frozen=True)
class ScenarioGovernorFailure:
    type: ClassVar[str] = "SCENARIO_GOVERNOR_FAILURE"


Action = Union[
    PumpEngage,
    GovernorMode,
    SetPoint,
    DischargeOpen,
    FoamPct,
    FoamSystemEnable,
    SetWaterSource,
    TankToPump,
    PrimerActivate,
    PrimerComplete,
    PrimerProgress,
    Elevation,
    DrvToggle,
    DrvSetpointSet,
    TankFillRecircSet,
    Tick,
    SetIntakePressure,
    ScenarioHoseBurst,
    ScenarioIntakeFailure,
    ScenarioTankLeak,
    ScenarioGovernorFailure,
]

INTAKE_FAILURE_MAX_PSI = 10.0


class Reducer:
    """State transition table.

    `rng` feeds the intake-failure scenario; `cfg` carries clamp ranges and
    engine parameters.
    """

    def __init__(self, cfg: SystemConfig | None = None, rng: np.random.Generator | None = None):
        self.cfg = cfg or DEFAULT_CONFIG
        self.rng = rng if rng is not None else np.random.default_rng()
        self._handlers: Dict[Type[Any], Callable[[SimState, Any], SimState]] = {
            PumpEngage: self._pump_engage,
            GovernorMode: self._governor_mode,
            SetPoint: self._setpoint,
            DischargeOpen: self._discharge_open,
            FoamPct: self._foam_pct,
            FoamSystemEnable: self._foam_system_enable,
            SetWaterSource: self._water_source,
            TankToPump: self._tank_to_pump,
            PrimerActivate: self._primer_activate,
            PrimerComplete: self._primer_complete,
            PrimerProgress: self._primer_progress,
            Elevation: self._elevation,
            DrvToggle: self._drv_toggle,
            DrvSetpointSet: self._drv_setpoint,
            TankFillRecircSet: self._tank_fill_recirc,
            Tick: self._tick,
            SetIntakePressure: self._set_intake_pressure,
            ScenarioHoseBurst: self._hose_burst,
            ScenarioIntakeFailure: self._intake_failure,
            ScenarioTankLeak: self._tank_leak,
            ScenarioGovernorFailure: self._governor_failure,
        }

    def __call__(self, state: SimState, action: Action) -> SimState:
        handler = self._handlers.get(type(action))
        if handler is None:
            logger.warning("Unknown action ignored: %r", action)
            return state
        return handler(state, action)

    # ---- operator controls ----

    def _pump_engage(self, state: SimState, a: PumpEngage) -> SimState:
        return state.with_pump(engaged=bool(a.engaged))

    def _governor_mode(self, state: SimState, a: GovernorMode) -> SimState:
        if not can_switch_governor(state, self.cfg):
            logger.warning("Denied GOVERNOR_MODE %s: %s", a.mode, get_interlock_warning("governor", state))
            return state
        return state.with_pump(governor=Governor(a.mode))

    def _setpoint(self, state: SimState, a: SetPoint) -> SimState:
        if not can_adjust_throttle(state):
            logger.warning("Denied SETPOINT %s: %s", a.value, get_interlock_warning("throttle", state))
            return state
        return state.with_pump(setpoint=float(a.value))

    def _discharge_open(self, state: SimState, a: DischargeOpen) -> SimState:
        if not can_open_discharge(state):
            logger.warning("Denied DISCHARGE_OPEN %s: %s", a.id, get_interlock_warning("discharge", state))
            return state
        if state.discharge(a.id) is None:
            return state
        opening = clamp(a.open, 0.0, 1.0)
        new_state = state.with_discharge(a.id, open=opening)
        if opening > 0 and a.id in state.burst_lines:
            # replacement line laid
            new_state = replace(new_state, burst_lines=tuple(i for i in state.burst_lines if i != a.id))
        return new_state

    def _foam_pct(self, state: SimState, a: FoamPct) -> SimState:
        if not can_change_foam(state, a.id):
            logger.warning("Denied FOAM_PCT %s: %s", a.id, get_interlock_warning("foam", state, a.id))
            return state
        return state.with_discharge(a.id, foam_pct=clamp(a.pct, 0.0, self.cfg.foam.max_pct))

    def _foam_system_enable(self, state: SimState, a: FoamSystemEnable) -> SimState:
        return state.with_pump(foam_system_enabled=bool(a.enabled))

    def _water_source(self, state: SimState, a: SetWaterSource) -> SimState:
        return state.with_all_intakes(source=WaterSource(a.source))

    def _tank_to_pump(self, state: SimState, a: TankToPump) -> SimState:
        return replace(state, tank_to_pump_open=bool(a.open))

    def _primer_activate(self, state: SimState, a: PrimerActivate) -> SimState:
        if state.primary_source != WaterSource.DRAFT:
            logger.warning("Denied PRIMER_ACTIVATE: primary intake is not on draft")
            return state
        return replace(state, primer_active=True, is_active_priming=True, priming_progress=0.0, primed=False)

    def _primer_complete(self, state: SimState, a: PrimerComplete) -> SimState:
        return replace(
            state,
            primer_active=False,
            is_active_priming=False,
            primed=True,
            priming_progress=self.cfg.primer.duration_s,
        )

    def _primer_progress(self, state: SimState, a: PrimerProgress) -> SimState:
        return replace(state, priming_progress=clamp(a.progress, 0.0, self.cfg.primer.duration_s))

    def _elevation(self, state: SimState, a: Elevation) -> SimState:
        return replace(state, elevation_ft=float(a.ft))

    def _drv_toggle(self, state: SimState, a: DrvToggle) -> SimState:
        return state.with_drv(enabled=bool(a.enabled))

    def _drv_setpoint(self, state: SimState, a: DrvSetpointSet) -> SimState:
        psi = clamp(a.psi, self.cfg.drv.min_setpoint_psi, self.cfg.drv.max_setpoint_psi)
        return state.with_drv(setpoint_psi=psi)

    def _tank_fill_recirc(self, state: SimState, a: TankFillRecircSet) -> SimState:
        return replace(state, tank_fill_recirc_pct=clamp(a.pct, 0.0, 100.0))

    def _tick(self, state: SimState, a: Tick) -> SimState:
        return update_time_based_state(state, a.delta_time, self.cfg)

    # ---- instructor / scenario ----

    def _set_intake_pressure(self, state: SimState, a: SetIntakePressure) -> SimState:
        return state.with_intake(a.intake_id, psi=float(a.psi), psi_override=True)

    def _hose_burst(self, state: SimState, a: ScenarioHoseBurst) -> SimState:
        if state.discharge(a.line_id) is None:
            return state
        logger.info("Scenario: hose burst on %s", a.line_id)
        new_state = state.with_discharge(a.line_id, open=0.0)
        if a.line_id not in new_state.burst_lines:
            new_state = replace(new_state, burst_lines=new_state.burst_lines + (DischargeId(a.line_id),))
        return new_state

    def _intake_failure(self, state: SimState, a: ScenarioIntakeFailure) -> SimState:
        if state.intake(a.intake_id) is None:
            return state
        if a.residual_psi is None:
            psi = float(self.rng.uniform(0.0, INTAKE_FAILURE_MAX_PSI))
        else:
            psi = float(a.residual_psi)
        logger.info("Scenario: intake failure on %s (%.1f PSI)", a.intake_id, psi)
        return state.with_intake(a.intake_id, psi=psi, psi_override=True)

    def _tank_leak(self, state: SimState, a: ScenarioTankLeak) -> SimState:
        logger.info("Scenario: tank leak")
        return replace(state, tank_leak_active=True)

    def _governor_failure(self, state: SimState, a: ScenarioGovernorFailure) -> SimState:
        logger.info("Scenario: governor failure, forced to RPM mode")
        return state.with_pump(governor=Governor.RPM)


def reduce(state: SimState, action: Action, cfg: SystemConfig | None = None) -> SimState:
    """Functional entry point: a fresh Reducer per call, no shared state.

    Callers that need a reproducible intake-failure draw keep their own
    `Reducer(cfg, rng)`.
    """
    return Reducer(cfg)(state, action)


# ---- wire form ----

ACTION_TYPES: Dict[str, Type[Any]] = {
    cls.type: cls
    for cls in (
        PumpEngage,
        GovernorMode,
        SetPoint,
        DischargeOpen,
        FoamPct,
        FoamSystemEnable,
        SetWaterSource,
        TankToPump,
        PrimerActivate,
        PrimerComplete,
        PrimerProgress,
        Elevation,
        DrvToggle,
        DrvSetpointSet,
        TankFillRecircSet,
        Tick,
        SetIntakePressure,
        ScenarioHoseBurst,
        ScenarioIntakeFailure,
        ScenarioTankLeak,
        ScenarioGovernorFailure,
    )
}


def _number(raw: Mapping[str, Any], key: str) -> Optional[float]:
    value = raw.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    value = float(value)
    return value if math.isfinite(value) else None


def _flag(raw: Mapping[str, Any], key: str) -> Optional[bool]:
    value = raw.get(key)
    return value if isinstance(value, bool) else None


def action_from_dict(raw: Mapping[str, Any]) -> Optional[Action]:
    """Parse `{"type": ..., camelCase fields}`; None for anything malformed."""
    kind = raw.get("type") if isinstance(raw, Mapping) else None
    cls = ACTION_TYPES.get(kind) if isinstance(kind, str) else None
    if cls is None:
        return None

    if cls in (PrimerActivate, PrimerComplete, ScenarioTankLeak, ScenarioGovernorFailure):
        return cls()

    if cls in (PumpEngage, FoamSystemEnable, DrvToggle):
        enabled = _flag(raw, "engaged" if cls is PumpEngage else "enabled")
        return None if enabled is None else cls(enabled)
    if cls is TankToPump:
        opened = _flag(raw, "open")
        return None if opened is None else TankToPump(opened)

    if cls is GovernorMode:
        mode = parse_enum(Governor, raw.get("mode"))
        return None if mode is None else GovernorMode(mode)
    if cls is SetWaterSource:
        source = parse_enum(WaterSource, raw.get("source"))
        return None if source is None else SetWaterSource(source)

    if cls in (DischargeOpen, FoamPct):
        line = parse_enum(DischargeId, raw.get("id"))
        value = _number(raw, "open" if cls is DischargeOpen else "pct")
        return None if line is None or value is None else cls(line, value)
    if cls is ScenarioHoseBurst:
        line = parse_enum(DischargeId, raw.get("lineId"))
        return None if line is None else ScenarioHoseBurst(line)

    if cls is SetIntakePressure:
        intake = parse_enum(IntakeId, raw.get("intakeId"))
        psi = _number(raw, "psi")
        return None if intake is None or psi is None else SetIntakePressure(intake, psi)
    if cls is ScenarioIntakeFailure:
        intake = parse_enum(IntakeId, raw.get("intakeId"))
        return None if intake is None else ScenarioIntakeFailure(intake, _number(raw, "residualPsi"))

    field_by_cls = {
        SetPoint: "value",
        PrimerProgress: "progress",
        Elevation: "ft",
        DrvSetpointSet: "psi",
        TankFillRecircSet: "pct",
        Tick: "deltaTime",
    }
    value = _number(raw, field_by_cls[cls])
    return None if value is None else cls(value)
