"""Конфиги тренажёра насосной панели.

Все конфиги: frozen dataclass'ы с дефолтами, валидируются в __post_init__.
Точки входа движка/решателя принимают `cfg=None` и падают обратно на
`DEFAULT_CONFIG`.
"""

from __future__ import annotations

from .models import (  # noqa: F401
    DEFAULT_CONFIG,
    FoamConfig,
    GaugeConfig,
    GovernorConfig,
    PrimerConfig,
    PumpConfig,
    ReliefValveConfig,
    SimulationConfig,
    SolverConfig,
    SystemConfig,
    TankConfig,
    ThermalConfig,
)

__all__ = [
    "PumpConfig",
    "GovernorConfig",
    "ReliefValveConfig",
    "FoamConfig",
    "TankConfig",
    "PrimerConfig",
    "ThermalConfig",
    "SolverConfig",
    "GaugeConfig",
    "SimulationConfig",
    "SystemConfig",
    "DEFAULT_CONFIG",
]
