"""Характеристика центробежного насоса (NFPA 1901 acceptance curve).

Кривая задана при номинальных оборотах; на других оборотах работают
законы подобия: Q ~ N, P ~ N^2.

`max_pdp`: давление, которое насос может развить при данных расходе,
оборотах и подпоре на всасывании. `required_rpm`: обратная задача,
решается численно (scipy.optimize.brentq), т.к. `max_pdp` монотонна по N.
"""

from __future__ import annotations

import numpy as np
from scipy.optimize import brentq

from pumpsim.config import DEFAULT_CONFIG, PumpConfig


def _curve_arrays(cfg: PumpConfig) -> tuple[np.ndarray, np.ndarray]:
    pts = np.asarray(cfg.curve, dtype=float)
    return pts[:, 0], pts[:, 1]


def rated_pressure(flow_gpm: float, cfg: PumpConfig | None = None) -> float:
    """Curve pressure at rated speed; clamps to churn/runout outside the table."""
    cfg = cfg or DEFAULT_CONFIG.pump
    q, p = _curve_arrays(cfg)
    return float(np.interp(max(0.0, float(flow_gpm)), q, p))


def max_pdp(flow_gpm: float, rpm: float, intake_psi: float, cfg: PumpConfig | None = None) -> float:
    cfg = cfg or DEFAULT_CONFIG.pump
    factor = float(rpm) / cfg.rated_rpm
    effective_flow = float(flow_gpm) / max(factor, 0.1)
    pressure = rated_pressure(effective_flow, cfg) * factor**2
    return max(0.0, pressure + float(intake_psi))


def required_rpm(target_pdp: float, flow_gpm: float, intake_psi: float, cfg: PumpConfig | None = None) -> float:
    """RPM at which the pump develops `target_pdp`, within [idle_rpm, max_rpm].

    Targets below the idle capability return idle; targets beyond max speed
    return max_rpm.
    """
    cfg = cfg or DEFAULT_CONFIG.pump

    def residual(n: float) -> float:
        return max_pdp(flow_gpm, n, intake_psi, cfg) - float(target_pdp)

    lo, hi = cfg.idle_rpm, cfg.max_rpm
    r_lo = residual(lo)
    if r_lo >= 0.0:
        return lo
    r_hi = residual(hi)
    if r_hi <= 0.0:
        return hi
    return float(brentq(residual, lo, hi, xtol=1e-3))


def check_runout(flow_gpm: float, cfg: PumpConfig | None = None) -> str | None:
    cfg = cfg or DEFAULT_CONFIG.pump
    runout = cfg.runout_gpm
    high_flow = cfg.curve[-2][0]
    if flow_gpm >= runout:
        return f"⚠️ RUNOUT: Flow {round(flow_gpm)} GPM exceeds max {runout:g} GPM"
    if flow_gpm > high_flow:
        pct = round(flow_gpm / cfg.rated_capacity_gpm * 100)
        return f"High flow: {round(flow_gpm)} GPM ({pct}% capacity)"
    return None


def is_cavitating(intake_psi: float, rpm: float, cfg: PumpConfig | None = None) -> bool:
    cfg = cfg or DEFAULT_CONFIG.pump
    return intake_psi < cfg.cavitation_intake_psi and rpm > cfg.cavitation_rpm
