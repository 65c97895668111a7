"""Gauge readings for the panel: master intake (compound) and discharge.

Мастер-всас это compound gauge. На гидранте/цистерне/перекачке показывает
PSI, на заборе из открытого водоёма вакуум в дюймах рт. ст.
Пороговые значения берутся из GaugeConfig.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from pumpsim.config import DEFAULT_CONFIG, SystemConfig
from pumpsim.core.types import Governor, WaterSource
from pumpsim.core.units import psi_to_inhg
from pumpsim.solver import SolverResult
from pumpsim.state import SimState


@dataclass(frozen=True)
class IntakeReading:
    psi: Optional[float] = None
    vacuum_inhg: Optional[float] = None
    warning: Optional[str] = None


@dataclass(frozen=True)
class DischargeReading:
    psi: float
    warning: Optional[str] = None


@dataclass(frozen=True)
class PumpStatus:
    mode: str                   # "PSI" | "RPM"
    setpoint: float
    setpoint_unit: str
    actual_pdp: float
    actual_rpm: float
    intake_psi: float
    intake_vacuum_inhg: Optional[float]
    total_flow_gpm: float
    warnings: List[str]


def master_intake(state: SimState) -> float:
    """Signed compound reading: PSI, or negative inHg when drafting."""
    if state.primary_source == WaterSource.DRAFT:
        return -psi_to_inhg(state.pump.intake_psi)
    return state.pump.intake_psi


def master_intake_warnings(state: SimState, cfg: SystemConfig | None = None) -> List[str]:
    g = (cfg or DEFAULT_CONFIG).gauges
    if state.primary_source == WaterSource.DRAFT:
        if psi_to_inhg(state.pump.intake_psi) > g.max_lift_inhg:
            return ["HIGH VACUUM: Risk of cavitation"]
        return []
    if state.pump.engaged and state.pump.intake_psi < g.low_residual_psi:
        return ["LOW INTAKE PRESSURE: < 20 PSI"]
    return []


def intake_gauge(
    source: WaterSource,
    intake_psi: float,
    tank_to_pump_open: bool,
    primed: bool,
    cfg: SystemConfig | None = None,
) -> IntakeReading:
    g = (cfg or DEFAULT_CONFIG).gauges
    tank_baseline = (cfg or DEFAULT_CONFIG).solver.tank_intake_psi

    if source == WaterSource.TANK:
        if not tank_to_pump_open:
            return IntakeReading(psi=0.0, warning="Open Tank-to-Pump valve")
        warning = "Low tank pressure" if intake_psi < g.low_tank_psi else None
        return IntakeReading(psi=max(tank_baseline, intake_psi), warning=warning)

    if source == WaterSource.HYDRANT:
        if intake_psi < g.low_residual_psi:
            return IntakeReading(psi=intake_psi, warning="LOW RESIDUAL: Check water supply")
        return IntakeReading(psi=intake_psi)

    if source == WaterSource.DRAFT:
        vacuum = psi_to_inhg(intake_psi)
        if not primed:
            warning = "PRIMING: Vacuum building" if vacuum > g.max_lift_inhg else "Prime pump to flow"
            return IntakeReading(vacuum_inhg=vacuum, warning=warning)
        if vacuum > g.max_lift_inhg:
            return IntakeReading(
                vacuum_inhg=vacuum,
                warning="MAX LIFT EXCEEDED: Reduce height or increase water level",
            )
        return IntakeReading(vacuum_inhg=vacuum)

    if source == WaterSource.RELAY:
        warning = "Low relay pressure" if intake_psi < g.low_relay_psi else None
        return IntakeReading(psi=intake_psi, warning=warning)

    return IntakeReading(psi=0.0)


def discharge_gauge(pdp: float, cfg: SystemConfig | None = None) -> DischargeReading:
    g = (cfg or DEFAULT_CONFIG).gauges
    if pdp > g.max_psi:
        return DischargeReading(psi=g.max_psi, warning="DANGER: OVERPRESSURE (400 PSI MAX)")
    if pdp > g.caution_psi:
        return DischargeReading(psi=pdp, warning="CAUTION: Approaching 400 PSI limit")
    if pdp > g.high_pressure_psi:
        return DischargeReading(psi=pdp, warning="HIGH PRESSURE: Use RPM mode")
    return DischargeReading(psi=pdp)


def is_intake_vacuum_safe(reading: IntakeReading, cfg: SystemConfig | None = None) -> bool:
    if reading.vacuum_inhg is None:
        return True
    return reading.vacuum_inhg <= (cfg or DEFAULT_CONFIG).gauges.max_lift_inhg


def is_discharge_pressure_safe(reading: DischargeReading, cfg: SystemConfig | None = None) -> bool:
    return reading.psi <= (cfg or DEFAULT_CONFIG).gauges.high_pressure_psi


def format_intake_reading(reading: IntakeReading) -> str:
    if reading.psi is not None:
        return f"{round(reading.psi)} PSI"
    if reading.vacuum_inhg is not None:
        return f'{reading.vacuum_inhg:.1f}" Hg'
    return "0 PSI"


def format_discharge_reading(reading: DischargeReading) -> str:
    return f"{round(reading.psi)} PSI"


def pump_status(state: SimState, result: SolverResult, cfg: SystemConfig | None = None) -> PumpStatus:
    """Snapshot for the status HUD."""
    pump = state.pump
    source = state.primary_source or WaterSource.HYDRANT
    intake = intake_gauge(source, pump.intake_psi, state.tank_to_pump_open, state.primed, cfg)
    discharge = discharge_gauge(pump.pdp, cfg)

    warnings = [w for w in (intake.warning, discharge.warning) if w]
    warnings.extend(result.warnings)

    pressure_mode = pump.governor == Governor.PRESSURE
    return PumpStatus(
        mode="PSI" if pressure_mode else "RPM",
        setpoint=pump.setpoint,
        setpoint_unit="PSI" if pressure_mode else "RPM",
        actual_pdp=pump.pdp,
        actual_rpm=pump.rpm,
        intake_psi=intake.psi or 0.0,
        intake_vacuum_inhg=intake.vacuum_inhg,
        total_flow_gpm=result.total_gpm,
        warnings=list(dict.fromkeys(warnings)),
    )
