"""pumpsim.physics.formulas

Гидравлические формулы пожарного рукава (US units).

Контракт: функции никогда не бросают исключений на «плохих» входах,
значения зажимаются в физически осмысленный диапазон.

Две семьи функций:
- «панельные» (`pump_discharge_pressure`, `smooth_bore_flow`,
  `hazen_williams_friction_loss_per_100ft`) зажимают входы;
- «решательные» (`calculate_pdp`, `hazen_williams_fl`, `estimate_flow`)
  используются решателем и повторяют его исторические правила.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from pumpsim.core.types import NozzleType
from pumpsim.core.units import (
    FREEMAN_COEFF,
    HW_COEFF,
    HW_DIAMETER_EXP,
    HW_FLOW_EXP,
    PSI_PER_FT,
)

# Диапазоны зажима
MAX_FLOW_GPM = 2000.0
HOSE_DIAMETER_RANGE_IN = (1.0, 6.0)
HW_C_RANGE = (80.0, 180.0)
NOZZLE_PSI_RANGE = (0.0, 200.0)
APPLIANCE_LOSS_RANGE_PSI = (0.0, 50.0)
TIP_DIAMETER_RANGE_IN = (0.5, 2.0)

# Fog nozzle: design pressure (PSI) -> rated flow (GPM).
# 80 PSI is the master-stream tip.
FOG_FLOW_BY_NP = {
    50.0: 95.0,
    100.0: 150.0,
    80.0: 1000.0,
}
FOG_DEFAULT_GPM = 150.0


@dataclass(frozen=True)
class Hose:
    diameter_in: float
    length_ft: float
    c: float = 150.0


def _clip(x: float, bounds: tuple[float, float]) -> float:
    v = float(x)
    if math.isnan(v):
        return bounds[0]
    return float(np.clip(v, bounds[0], bounds[1]))


def elevation_pressure(elevation_ft: float) -> float:
    """Head correction, PSI. Negative elevation (pumping downhill) subtracts."""
    return PSI_PER_FT * float(elevation_ft)


def hazen_williams_friction_loss_per_100ft(q_gpm: float, diameter_in: float, c: float = 150.0) -> float:
    """Friction loss in PSI per 100 ft of hose.

    head_ft = 0.2083 * (100/C)^1.85 * Q^1.85 / d^4.87, then * 0.433 PSI/ft.
    """
    q = _clip(q_gpm, (0.0, MAX_FLOW_GPM))
    d = _clip(diameter_in, HOSE_DIAMETER_RANGE_IN)
    cc = _clip(c, HW_C_RANGE)
    if q <= 0.0:
        return 0.0
    head_ft = HW_COEFF * (100.0 / cc) ** HW_FLOW_EXP * q**HW_FLOW_EXP / d**HW_DIAMETER_EXP
    return head_ft * PSI_PER_FT


def total_friction_loss(hose: Hose, q_gpm: float) -> float:
    length = max(0.0, float(hose.length_ft))
    return hazen_williams_friction_loss_per_100ft(q_gpm, hose.diameter_in, hose.c) * length / 100.0


def pump_discharge_pressure(
    nozzle_psi: float,
    hose_loss_psi: float,
    appliance_loss_psi: float = 0.0,
    elevation_ft: float = 0.0,
) -> float:
    """PDP = NP + FL + AL + 0.433 * elevation (NP and AL clamped)."""
    np_psi = _clip(nozzle_psi, NOZZLE_PSI_RANGE)
    al_psi = _clip(appliance_loss_psi, APPLIANCE_LOSS_RANGE_PSI)
    return np_psi + float(hose_loss_psi) + al_psi + elevation_pressure(elevation_ft)


def smooth_bore_flow(tip_in: float, nozzle_psi: float) -> float:
    d = _clip(tip_in, TIP_DIAMETER_RANGE_IN)
    np_psi = _clip(nozzle_psi, NOZZLE_PSI_RANGE)
    return FREEMAN_COEFF * d * d * math.sqrt(np_psi)


def calculate_pdp(nozzle_psi: float, friction_loss_psi: float, appliance_loss_psi: float, elevation_ft: float) -> float:
    # Unclamped composition, used by the solver per line.
    return float(nozzle_psi) + float(friction_loss_psi) + float(appliance_loss_psi) + elevation_pressure(elevation_ft)


def hazen_williams_fl(gpm: float, diameter_in: float, length_ft: float, c: float = 150.0) -> float:
    """Total friction loss for a hose lay, PSI. Zero flow or zero bore -> 0."""
    if not gpm > 0.0 or not diameter_in > 0.0:
        return 0.0
    return total_friction_loss(Hose(diameter_in=diameter_in, length_ft=length_ft, c=c), gpm)


def estimate_flow(nozzle_type: NozzleType | str, tip_in: float, nozzle_psi: float) -> float:
    if nozzle_type == NozzleType.SMOOTH:
        np_psi = max(0.0, float(nozzle_psi))
        return FREEMAN_COEFF * float(tip_in) ** 2 * math.sqrt(np_psi)
    return FOG_FLOW_BY_NP.get(float(nozzle_psi), FOG_DEFAULT_GPM)
