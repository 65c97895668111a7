"""pumpsim.core.units

Минимальный слой единиц измерения и удобных множителей.

Принцип: везде, где есть числа, должна быть явная единица (например,
elevation_ft * PSI_PER_FT). Тренажёр работает в US fire-service units:
PSI, GPM, ft, inch, °F.
"""

from __future__ import annotations

# Hydrostatics
PSI_PER_FT: float = 0.433           # столб воды 1 ft -> PSI
INHG_PER_PSI: float = 2.036         # вакуум: PSI -> дюймы ртутного столба

# Time
SECONDS_PER_MINUTE: float = 60.0

# Hazen-Williams (US units, head in ft per 100 ft of hose)
HW_COEFF: float = 0.2083
HW_FLOW_EXP: float = 1.85
HW_DIAMETER_EXP: float = 4.87

# Smooth-bore (Freeman): Q = 29.7 * d^2 * sqrt(NP)
FREEMAN_COEFF: float = 29.7


def gpm_to_gallons(gpm: float, seconds: float) -> float:
    return gpm * seconds / SECONDS_PER_MINUTE


def psi_to_inhg(psi: float) -> float:
    return abs(psi) * INHG_PER_PSI
