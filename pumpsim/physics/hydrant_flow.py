"""Hydrant flow test math (static/residual method)."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class HydrantFlow:
    available_at_20psi: float
    available_at_150psi: float
    available_at_250psi: float
    pressure_drop: float


def available_hydrant_flow(static_psi: float, residual_psi: float, test_flow_gpm: float) -> HydrantFlow:
    """Q20 = Q_test * sqrt((S - 20) / (S - R)); 80% of it at 150 PSI PDP, 60% at 250."""
    drop = static_psi - residual_psi
    if static_psi <= 20.0:
        q20 = 0.0
    elif drop <= 0.0:
        # no measurable drop, nothing to extrapolate from
        q20 = max(0.0, float(test_flow_gpm))
    else:
        q20 = test_flow_gpm * math.sqrt((static_psi - 20.0) / drop)
    return HydrantFlow(
        available_at_20psi=q20,
        available_at_150psi=q20 * 0.8,
        available_at_250psi=q20 * 0.6,
        pressure_drop=drop,
    )


def hydrant_flow_guidance(static_psi: float, residual_psi: float) -> str:
    drop_pct = (static_psi - residual_psi) / static_psi * 100.0 if static_psi > 0 else 100.0
    if drop_pct > 25:
        return (
            f"HIGH PRESSURE DROP ({drop_pct:.0f}%): Hydrant may be undersized. "
            "Consider reducing flow or using additional supply."
        )
    if drop_pct > 10:
        return f"MODERATE PRESSURE DROP ({drop_pct:.0f}%): Monitor closely. Additional flow may be limited."
    return f"GOOD SUPPLY: Low pressure drop ({drop_pct:.0f}%). Hydrant can provide additional flow if needed."
