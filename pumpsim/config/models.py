from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from pumpsim.core.validation import (
    ensure_in_range,
    ensure_non_negative,
    ensure_ordered,
    ensure_positive,
)


@dataclass(frozen=True)
class PumpConfig:
    idle_rpm: float = 700.0
    max_rpm: float = 3000.0
    rated_rpm: float = 2200.0
    slew_rpm_s: float = 400.0           # скорость разгона/сброса оборотов
    max_pdp_psi: float = 400.0          # потолок манометра нагнетания
    # NFPA 1901 acceptance curve, 1500 GPM pump at rated speed: (gpm, psi)
    curve: Tuple[Tuple[float, float], ...] = (
        (0.0, 290.0),      # churn
        (750.0, 250.0),    # 50%
        (1050.0, 200.0),   # 70%
        (1500.0, 150.0),   # rated
        (1875.0, 125.0),   # 125%
        (2250.0, 95.0),    # 150%, runout
    )
    rated_capacity_gpm: float = 1500.0
    cavitation_intake_psi: float = 5.0
    cavitation_rpm: float = 2000.0
    cavitation_derate: float = 0.8

    def __post_init__(self) -> None:
        ensure_positive(self.idle_rpm, "idle_rpm")
        ensure_ordered(self.idle_rpm, self.max_rpm, "pump rpm range")
        ensure_positive(self.rated_rpm, "rated_rpm")
        ensure_positive(self.slew_rpm_s, "slew_rpm_s")
        ensure_positive(self.max_pdp_psi, "max_pdp_psi")
        ensure_in_range(self.cavitation_derate, 0.0, 1.0, "cavitation_derate")
        if len(self.curve) < 2:
            raise ValueError("pump curve needs at least two points")
        flows = [q for q, _ in self.curve]
        if any(b <= a for a, b in zip(flows, flows[1:])):
            raise ValueError("pump curve flows must be strictly increasing")

    @property
    def runout_gpm(self) -> float:
        return self.curve[-1][0]

    def rpm_clip(self, rpm: float) -> float:
        return max(self.idle_rpm, min(self.max_rpm, float(rpm)))


@dataclass(frozen=True)
class GovernorConfig:
    # PRESSURE-режим держит PDP в этом окне
    min_pdp_psi: float = 50.0
    max_pdp_psi: float = 250.0
    # выше этого давления PRESSURE-режим «охотится», нужен RPM
    rpm_mode_threshold_psi: float = 250.0
    return_to_pressure_psi: float = 240.0
    on_target_psi: float = 5.0
    on_target_rpm_frac: float = 0.05

    def __post_init__(self) -> None:
        ensure_ordered(self.min_pdp_psi, self.max_pdp_psi, "governor pdp range")
        ensure_ordered(self.return_to_pressure_psi, self.rpm_mode_threshold_psi, "governor hysteresis")


@dataclass(frozen=True)
class ReliefValveConfig:
    min_setpoint_psi: float = 75.0
    max_setpoint_psi: float = 300.0
    default_setpoint_psi: float = 200.0
    gain_gpm_per_psi: float = 2.0
    max_bypass_gpm: float = 500.0
    relief_fraction: float = 0.85       # доля превышения, которую сбрасывает клапан
    response_gpm_s: float = 100.0

    def __post_init__(self) -> None:
        ensure_ordered(self.min_setpoint_psi, self.max_setpoint_psi, "drv setpoint range")
        ensure_in_range(self.default_setpoint_psi, self.min_setpoint_psi, self.max_setpoint_psi, "default_setpoint_psi")
        ensure_positive(self.gain_gpm_per_psi, "gain_gpm_per_psi")
        ensure_positive(self.max_bypass_gpm, "max_bypass_gpm")
        ensure_in_range(self.relief_fraction, 0.0, 1.0, "relief_fraction")
        ensure_positive(self.response_gpm_s, "response_gpm_s")


@dataclass(frozen=True)
class FoamConfig:
    tank_capacity_gallons: float = 20.0
    max_pct: float = 9.9
    low_level_gallons: float = 5.0

    def __post_init__(self) -> None:
        ensure_positive(self.tank_capacity_gallons, "foam tank_capacity_gallons")
        ensure_positive(self.max_pct, "foam max_pct")
        ensure_non_negative(self.low_level_gallons, "foam low_level_gallons")


@dataclass(frozen=True)
class TankConfig:
    capacity_gallons: float = 500.0
    fill_gpm: float = 100.0             # долив через tank-fill при 100% рецирк.
    recirc_cooling_gpm: float = 50.0    # охлаждающий расход при 100% рецирк.
    leak_gpm: float = 50.0
    low_gallons: float = 100.0
    critical_gallons: float = 50.0

    def __post_init__(self) -> None:
        ensure_positive(self.capacity_gallons, "tank capacity_gallons")
        ensure_non_negative(self.fill_gpm, "tank fill_gpm")
        ensure_non_negative(self.recirc_cooling_gpm, "tank recirc_cooling_gpm")
        ensure_non_negative(self.leak_gpm, "tank leak_gpm")
        ensure_ordered(self.critical_gallons, self.low_gallons, "tank warning levels")


@dataclass(frozen=True)
class PrimerConfig:
    duration_s: float = 15.0

    def __post_init__(self) -> None:
        ensure_positive(self.duration_s, "primer duration_s")


@dataclass(frozen=True)
class ThermalConfig:
    ambient_f: float = 70.0
    pump_initial_f: float = 100.0
    pump_max_f: float = 250.0
    min_cooling_gpm: float = 10.0
    heat_rate_f_s: float = 5.0
    flow_cool_rate_f_s: float = 2.0
    idle_cool_rate_f_s: float = 1.0
    engine_min_f: float = 140.0
    engine_max_f: float = 250.0
    engine_base_f: float = 180.0
    engine_load_rise_f: float = 40.0    # прирост при max_rpm
    engine_relax_per_s: float = 0.1
    engine_overheat_f: float = 230.0
    pump_elevated_f: float = 180.0
    pump_overheat_f: float = 200.0
    pump_boiling_f: float = 212.0

    def __post_init__(self) -> None:
        ensure_ordered(self.ambient_f, self.pump_max_f, "pump temperature range")
        ensure_ordered(self.engine_min_f, self.engine_max_f, "engine temperature range")
        ensure_in_range(self.engine_relax_per_s, 0.0, 1.0, "engine_relax_per_s")
        ensure_ordered(self.pump_elevated_f, self.pump_overheat_f, "pump warning levels")
        ensure_ordered(self.pump_overheat_f, self.pump_boiling_f, "pump warning levels")


@dataclass(frozen=True)
class SolverConfig:
    appliance_loss_psi: float = 10.0
    hazen_williams_c: float = 150.0
    # hose diameter (in) -> smooth-bore tip (in); прочие линии -> default_tip_in
    tip_by_hose_in: Tuple[Tuple[float, float], ...] = ((1.75, 0.875), (2.5, 1.125))
    default_tip_in: float = 1.375
    tank_intake_psi: float = 45.0
    hydrant_intake_psi: float = 60.0
    relay_intake_psi: float = 30.0
    draft_intake_psi: float = -20.0
    priming_intake_psi: float = -10.0

    def __post_init__(self) -> None:
        ensure_non_negative(self.appliance_loss_psi, "appliance_loss_psi")
        ensure_positive(self.hazen_williams_c, "hazen_williams_c")
        ensure_positive(self.default_tip_in, "default_tip_in")

    def tip_for_hose(self, diameter_in: float) -> float:
        for hose_in, tip_in in self.tip_by_hose_in:
            if diameter_in == hose_in:
                return tip_in
        return self.default_tip_in


@dataclass(frozen=True)
class GaugeConfig:
    max_lift_inhg: float = 20.0
    low_residual_psi: float = 20.0
    low_tank_psi: float = 40.0
    low_relay_psi: float = 10.0
    high_pressure_psi: float = 250.0
    caution_psi: float = 350.0
    max_psi: float = 400.0
    changeover_min_intake_psi: float = 10.0

    def __post_init__(self) -> None:
        ensure_ordered(self.high_pressure_psi, self.caution_psi, "gauge thresholds")
        ensure_ordered(self.caution_psi, self.max_psi, "gauge thresholds")


@dataclass(frozen=True)
class SimulationConfig:
    tick_s: float = 0.1
    substep_s: float = 0.02             # внутренний шаг интегрирования
    max_substeps: int = 5000
    overpressure_burst_s: float = 5.0

    def __post_init__(self) -> None:
        ensure_positive(self.tick_s, "tick_s")
        ensure_positive(self.substep_s, "substep_s")
        ensure_positive(self.max_substeps, "max_substeps")
        ensure_positive(self.overpressure_burst_s, "overpressure_burst_s")


@dataclass(frozen=True)
class SystemConfig:
    pump: PumpConfig = field(default_factory=PumpConfig)
    governor: GovernorConfig = field(default_factory=GovernorConfig)
    drv: ReliefValveConfig = field(default_factory=ReliefValveConfig)
    foam: FoamConfig = field(default_factory=FoamConfig)
    tank: TankConfig = field(default_factory=TankConfig)
    primer: PrimerConfig = field(default_factory=PrimerConfig)
    thermal: ThermalConfig = field(default_factory=ThermalConfig)
    solver: SolverConfig = field(default_factory=SolverConfig)
    gauges: GaugeConfig = field(default_factory=GaugeConfig)
    sim: SimulationConfig = field(default_factory=SimulationConfig)


DEFAULT_CONFIG = SystemConfig()
