"""Structured alerts.

Раньше потребители (звук, HUD) искали подстроки вроде "cavitat"/"burst" в
списке строк-предупреждений. Теперь каждое предупреждение это `Alert` с
явным видом и уровнем; текст сохранён как есть, `str(alert)` возвращает его,
а `legacy_messages` отдаёт старый список строк.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List

from pumpsim.config import DEFAULT_CONFIG, SystemConfig
from pumpsim.core.types import WaterSource
from pumpsim.gauges import discharge_gauge, master_intake_warnings
from pumpsim.governor import governor_warnings
from pumpsim.interlocks import validate_changeover_sequence, validate_state
from pumpsim.physics.pump_curves import check_runout, is_cavitating
from pumpsim.physics.thermal import Temperatures, temperature_warnings
from pumpsim.solver import DRAFTING_WARNING, NOT_ENGAGED_WARNING, SolverResult
from pumpsim.state import SimState


class AlertKind(str, Enum):
    CAVITATION = "cavitation"
    OVERHEATING = "overheating"
    BURST = "burst"
    OVERPRESSURE = "overpressure"
    INTERLOCK = "interlock"
    SUPPLY = "supply"
    FOAM = "foam"
    PRIMING = "priming"
    GOVERNOR = "governor"
    FLOW = "flow"
    STATUS = "status"


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    DANGER = "danger"


@dataclass(frozen=True)
class Alert:
    kind: AlertKind
    severity: Severity
    message: str

    def __str__(self) -> str:
        return self.message


CAVITATION_MESSAGE = "⚠️ CAVITATION DETECTED: Pump starved"

_STATE_ALERTS = {
    "Discharge valves open but pump not engaged": (AlertKind.INTERLOCK, Severity.WARNING),
    "Foam concentrate depleted": (AlertKind.FOAM, Severity.WARNING),
    "Drafting without primer - pump may not flow": (AlertKind.PRIMING, Severity.WARNING),
    "No water source available": (AlertKind.SUPPLY, Severity.DANGER),
}


def burst_message(line_id) -> str:
    return f"⚠️ HOSE {str(getattr(line_id, 'value', line_id)).upper()} BURST - Replace before continuing"


def _solver_alerts(result: SolverResult) -> Iterable[Alert]:
    for w in result.warnings:
        if w == NOT_ENGAGED_WARNING:
            yield Alert(AlertKind.STATUS, Severity.INFO, w)
        elif w == DRAFTING_WARNING:
            yield Alert(AlertKind.PRIMING, Severity.INFO, w)
        else:
            yield Alert(AlertKind.FOAM, Severity.WARNING, w)


def _pressure_alerts(state: SimState, cfg: SystemConfig) -> Iterable[Alert]:
    pump = state.pump
    reading = discharge_gauge(pump.pdp, cfg)
    if reading.warning:
        if pump.pdp > cfg.gauges.caution_psi:
            severity = Severity.DANGER if pump.pdp > cfg.gauges.max_psi else Severity.WARNING
            yield Alert(AlertKind.OVERPRESSURE, severity, reading.warning)
        else:
            yield Alert(AlertKind.GOVERNOR, Severity.INFO, reading.warning)

    if pump.engaged:
        source = state.primary_source
        for w in governor_warnings(pump.governor, pump.setpoint, pump.pdp, source, cfg):
            yield Alert(AlertKind.GOVERNOR, Severity.INFO, w)

    for line_id in state.burst_lines:
        yield Alert(AlertKind.BURST, Severity.DANGER, burst_message(line_id))


def _supply_alerts(state: SimState, cfg: SystemConfig) -> Iterable[Alert]:
    pump = state.pump
    for w in master_intake_warnings(state, cfg):
        kind = AlertKind.CAVITATION if w.startswith("HIGH VACUUM") else AlertKind.SUPPLY
        yield Alert(kind, Severity.WARNING, w)

    if pump.engaged and is_cavitating(pump.intake_psi, pump.rpm, cfg.pump):
        yield Alert(AlertKind.CAVITATION, Severity.DANGER, CAVITATION_MESSAGE)

    for fault in validate_changeover_sequence(state, cfg).faults:
        yield Alert(AlertKind.SUPPLY, Severity.WARNING, fault)

    if state.tank_to_pump_open:
        gallons = state.tank_gallons
        if gallons <= 0:
            yield Alert(AlertKind.SUPPLY, Severity.DANGER, "🚨 WATER TANK EMPTY - Switch water source")
        elif gallons < cfg.tank.critical_gallons:
            yield Alert(AlertKind.SUPPLY, Severity.WARNING, f"⚠️ Tank critically low: {round(gallons)} gal remaining")
        elif gallons < cfg.tank.low_gallons:
            yield Alert(AlertKind.SUPPLY, Severity.INFO, f"Tank water low: {round(gallons)} gal remaining")

    if state.tank_leak_active:
        yield Alert(AlertKind.SUPPLY, Severity.WARNING, f"⚠️ TANK LEAK: losing {cfg.tank.leak_gpm:g} GPM")

    recirc = state.tank_fill_recirc_pct
    if pump.engaged and recirc > 0:
        if state.primary_source == WaterSource.HYDRANT:
            yield Alert(AlertKind.STATUS, Severity.INFO, f"TANK FILL: {round(recirc / 100.0 * cfg.tank.fill_gpm)} GPM")
        else:
            yield Alert(AlertKind.STATUS, Severity.INFO, f"RECIRC: {round(recirc / 100.0 * cfg.tank.recirc_cooling_gpm)} GPM")


def _thermal_alerts(state: SimState, cfg: SystemConfig) -> Iterable[Alert]:
    temps = Temperatures(pump_f=state.pump_temp_f, engine_f=state.engine_temp_f)
    severity = Severity.DANGER if state.pump_temp_f > cfg.thermal.pump_overheat_f else Severity.WARNING
    for w in temperature_warnings(temps, cfg):
        if w.startswith("Increase flow"):
            yield Alert(AlertKind.OVERHEATING, Severity.INFO, w)
        else:
            yield Alert(AlertKind.OVERHEATING, severity, w)


def collect_alerts(state: SimState, result: SolverResult, cfg: SystemConfig | None = None) -> List[Alert]:
    """All operator-facing diagnostics for one (state, result) pair, in order, deduplicated."""
    cfg = cfg or DEFAULT_CONFIG

    alerts: List[Alert] = list(_solver_alerts(result))
    for message in validate_state(state):
        kind, severity = _STATE_ALERTS[message]
        alerts.append(Alert(kind, severity, message))
    alerts.extend(_pressure_alerts(state, cfg))
    alerts.extend(_supply_alerts(state, cfg))
    alerts.extend(_thermal_alerts(state, cfg))

    runout = check_runout(result.total_gpm, cfg.pump)
    if runout:
        severity = Severity.DANGER if result.total_gpm >= cfg.pump.runout_gpm else Severity.WARNING
        alerts.append(Alert(AlertKind.FLOW, severity, runout))

    seen = set()
    unique: List[Alert] = []
    for a in alerts:
        if a.message in seen:
            continue
        seen.add(a.message)
        unique.append(a)
    return unique


def legacy_messages(alerts: Iterable[Alert]) -> List[str]:
    return [a.message for a in alerts]


def has_kind(alerts: Iterable[Alert], kind: AlertKind) -> bool:
    return any(a.kind == kind for a in alerts)
