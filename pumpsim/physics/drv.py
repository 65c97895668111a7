"""Discharge relief valve (DRV).

Упрощённая модель: при превышении уставки клапан перепускает расход
пропорционально превышению (с насыщением) и «срезает» большую часть
превышения давления. Перепуск нарастает не мгновенно, а с ограниченной
скоростью (`calculate_drv_response`).
"""

from __future__ import annotations

from dataclasses import dataclass

from pumpsim.config import DEFAULT_CONFIG, ReliefValveConfig


@dataclass(frozen=True)
class DrvOutput:
    bypass_gpm: float
    adjusted_pdp: float
    active: bool


def compute_drv(
    pdp: float,
    setpoint_psi: float,
    enabled: bool,
    engaged: bool,
    cfg: ReliefValveConfig | None = None,
) -> DrvOutput:
    cfg = cfg or DEFAULT_CONFIG.drv
    if not (enabled and engaged) or pdp <= setpoint_psi:
        return DrvOutput(bypass_gpm=0.0, adjusted_pdp=float(pdp), active=False)

    over = pdp - setpoint_psi
    bypass = min(cfg.gain_gpm_per_psi * over, cfg.max_bypass_gpm)
    adjusted = max(setpoint_psi, pdp - cfg.relief_fraction * over)
    return DrvOutput(bypass_gpm=float(bypass), adjusted_pdp=float(adjusted), active=True)


def calculate_drv_response(current_bypass: float, target_bypass: float, dt: float, response_gpm_s: float = 100.0) -> float:
    """Move bypass toward target at a bounded rate (GPM/s)."""
    step = response_gpm_s * max(0.0, dt)
    delta = target_bypass - current_bypass
    if abs(delta) <= step:
        return float(target_bypass)
    return float(current_bypass + step if delta > 0 else current_bypass - step)


def is_drv_active(enabled: bool, bypass_gpm: float) -> bool:
    return bool(enabled) and bypass_gpm > 0


def drv_status(enabled: bool, engaged: bool, setpoint_psi: float, bypass_gpm: float, pdp: float) -> str:
    if not enabled:
        return "DRV Disabled"
    if not engaged:
        return "DRV Standby (Pump Off)"
    if pdp - setpoint_psi <= 0:
        return f"DRV Armed ({setpoint_psi:g} PSI)"
    if bypass_gpm > 0:
        return f"DRV Active (Bypass: {round(bypass_gpm)} GPM)"
    return "DRV Engaging..."
