"""Pressure/RPM governor.

PRESSURE-режим: оборотами управляет регулятор, удерживая PDP на уставке
(окно 50..250 PSI). RPM-режим: обороты задаются напрямую, защиты от
гидроударов нет. Выше 250 PSI PRESSURE-режим начинает «охотиться», поэтому
там положен RPM-режим.

Здесь же advisory-функции для UI/инструктора: они только подсказывают,
состояние не меняют.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pumpsim.config import DEFAULT_CONFIG, SystemConfig
from pumpsim.core.types import Governor, WaterSource
from pumpsim.core.validation import clamp
from pumpsim.physics.pump_curves import required_rpm


@dataclass(frozen=True)
class ModeValidation:
    valid: bool
    warning: Optional[str] = None
    auto_switch: Optional[Governor] = None


@dataclass(frozen=True)
class AutoSwitch:
    should_switch: bool
    new_mode: Optional[Governor] = None
    reason: Optional[str] = None


def target_pdp(setpoint: float, cfg: SystemConfig | None = None) -> float:
    cfg = cfg or DEFAULT_CONFIG
    return clamp(setpoint, cfg.governor.min_pdp_psi, cfg.governor.max_pdp_psi)


def target_rpm(
    governor: Governor,
    setpoint: float,
    flow_gpm: float,
    intake_psi: float,
    cfg: SystemConfig | None = None,
) -> float:
    """RPM the governor is steering toward."""
    cfg = cfg or DEFAULT_CONFIG
    if governor == Governor.RPM:
        return cfg.pump.rpm_clip(setpoint)
    return required_rpm(target_pdp(setpoint, cfg), flow_gpm, intake_psi, cfg.pump)


def validate_governor_mode(
    requested: Governor,
    source: WaterSource,
    current_pdp: float,
    cfg: SystemConfig | None = None,
) -> ModeValidation:
    limit = (cfg or DEFAULT_CONFIG).governor.rpm_mode_threshold_psi
    if requested == Governor.RPM:
        if source == WaterSource.DRAFT:
            return ModeValidation(True, "RPM MODE: No surge protection. Monitor pressure closely.")
        if current_pdp > limit:
            return ModeValidation(True, "RPM MODE: High pressure operation. No surge protection.")
        return ModeValidation(
            False,
            f"RPM mode only for drafting or PDP > {limit:g} PSI. Use PSI mode for surge protection.",
            Governor.PRESSURE,
        )

    if current_pdp > limit:
        return ModeValidation(
            False,
            f"PDP > {limit:g} PSI: Switch to RPM mode to prevent governor hunting.",
            Governor.RPM,
        )
    return ModeValidation(True)


def governor_warnings(
    mode: Governor,
    setpoint: float,
    current_pdp: float,
    source: WaterSource,
    cfg: SystemConfig | None = None,
) -> list[str]:
    cfg = cfg or DEFAULT_CONFIG
    limit = cfg.governor.rpm_mode_threshold_psi
    warnings: list[str] = []

    if mode == Governor.RPM:
        warnings.append("NO SURGE PROTECTION")
        if source != WaterSource.DRAFT and current_pdp <= limit:
            warnings.append("Consider switching to PSI mode")

    if mode == Governor.PRESSURE and current_pdp > limit:
        warnings.append("HIGH PRESSURE: Switch to RPM mode")

    if current_pdp > cfg.gauges.max_psi:
        warnings.append("DANGER: OVERPRESSURE (400 PSI MAX)")
    elif current_pdp > cfg.gauges.caution_psi:
        warnings.append("CAUTION: Approaching 400 PSI limit")

    if mode == Governor.PRESSURE and setpoint > limit:
        warnings.append("High setpoint: Monitor closely")

    return warnings


def should_auto_switch(
    mode: Governor,
    current_pdp: float,
    source: WaterSource,
    cfg: SystemConfig | None = None,
) -> AutoSwitch:
    gcfg = (cfg or DEFAULT_CONFIG).governor
    if mode == Governor.PRESSURE and current_pdp > gcfg.rpm_mode_threshold_psi:
        return AutoSwitch(
            True,
            Governor.RPM,
            f"PDP > {gcfg.rpm_mode_threshold_psi:g} PSI: Automatic switch to RPM mode to prevent governor hunting",
        )
    if mode == Governor.RPM and current_pdp < gcfg.return_to_pressure_psi and source != WaterSource.DRAFT:
        return AutoSwitch(
            True,
            Governor.PRESSURE,
            f"PDP < {gcfg.return_to_pressure_psi:g} PSI: Automatic switch to PSI mode for surge protection",
        )
    return AutoSwitch(False)


def is_on_target(
    engaged: bool,
    mode: Governor,
    setpoint: float,
    rpm: float,
    pdp: float,
    cfg: SystemConfig | None = None,
) -> bool:
    if not engaged:
        return False
    cfg = cfg or DEFAULT_CONFIG
    if mode == Governor.RPM:
        goal = cfg.pump.rpm_clip(setpoint)
        return abs(rpm - goal) <= goal * cfg.governor.on_target_rpm_frac
    return abs(pdp - target_pdp(setpoint, cfg)) <= cfg.governor.on_target_psi


def governor_status(engaged: bool, mode: Governor, setpoint: float, rpm: float, pdp: float) -> str:
    if not engaged:
        return "Governor Standby"
    if mode == Governor.RPM:
        return f"RPM Mode: {round(rpm)} / {setpoint:g} RPM"
    return f"Pressure Mode: {round(pdp)} / {setpoint:g} PSI"
