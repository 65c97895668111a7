"""Состояние одного пожарного автомобиля (насос, напорные линии, всасы).

Все записи неизменяемые (frozen dataclass). Редьюсер и движок не мутируют
состояние, а строят новое через `dataclasses.replace` и helper'ы `with_*`.

Напорные линии и всасы хранятся в кортежах: порядок итерации стабилен
(так их видит решатель и UI), поиск по id линейный.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterator, Optional, Tuple

from pumpsim.config import DEFAULT_CONFIG, SystemConfig
from pumpsim.core.types import (
    DischargeId,
    Governor,
    IntakeId,
    NozzleType,
    WaterSource,
)


@dataclass(frozen=True)
class Discharge:
    id: DischargeId
    diameter_in: float
    length_ft: float
    nozzle_type: NozzleType
    nozzle_psi: float
    open: float = 0.0           # 0..1
    foam_pct: float = 0.0       # 0 = foam off


@dataclass(frozen=True)
class Intake:
    id: IntakeId
    source: WaterSource = WaterSource.HYDRANT
    ldh: bool = True
    psi: float = 0.0
    # True -> psi задан инструктором/сценарием и движок его не перезаписывает
    psi_override: bool = False


@dataclass(frozen=True)
class ReliefValve:
    enabled: bool = False
    setpoint_psi: float = 200.0
    bypass_gpm: float = 0.0


@dataclass(frozen=True)
class Pump:
    engaged: bool = False
    governor: Governor = Governor.PRESSURE
    setpoint: float = 150.0     # RPM или PSI, в зависимости от governor
    rpm: float = 0.0
    pdp: float = 0.0
    intake_psi: float = 0.0
    foam_tank_gallons: float = 20.0
    foam_tank_capacity_gallons: float = 20.0
    foam_system_enabled: bool = False
    drv: ReliefValve = field(default_factory=ReliefValve)


@dataclass(frozen=True)
class SimState:
    pump: Pump
    discharges: Tuple[Discharge, ...]
    intakes: Tuple[Intake, ...]
    elevation_ft: float = 0.0
    tank_to_pump_open: bool = False
    tank_fill_recirc_pct: float = 0.0
    primer_active: bool = False
    primed: bool = False
    is_active_priming: bool = False
    priming_progress: float = 0.0

    # booster tank
    tank_gallons: float = 500.0
    tank_capacity_gallons: float = 500.0
    tank_leak_active: bool = False

    # thermal, °F
    pump_temp_f: float = 100.0
    engine_temp_f: float = 180.0

    # overpressure bookkeeping
    overpressure_s: float = 0.0
    burst_lines: Tuple[DischargeId, ...] = ()

    # ---- lookup ----

    def discharge(self, discharge_id) -> Optional[Discharge]:
        for d in self.discharges:
            if d.id == discharge_id:
                return d
        return None

    def intake(self, intake_id) -> Optional[Intake]:
        for i in self.intakes:
            if i.id == intake_id:
                return i
        return None

    @property
    def primary_intake(self) -> Optional[Intake]:
        return self.intakes[0] if self.intakes else None

    @property
    def primary_source(self) -> Optional[WaterSource]:
        intake = self.primary_intake
        return intake.source if intake is not None else None

    def open_discharges(self) -> Iterator[Discharge]:
        return (d for d in self.discharges if d.open > 0)

    def is_drafting(self) -> bool:
        return any(i.source == WaterSource.DRAFT for i in self.intakes)

    # ---- copy-on-write helpers ----

    def with_pump(self, **changes) -> "SimState":
        return replace(self, pump=replace(self.pump, **changes))

    def with_drv(self, **changes) -> "SimState":
        return self.with_pump(drv=replace(self.pump.drv, **changes))

    def with_discharge(self, discharge_id, **changes) -> "SimState":
        """Replace one discharge; unknown id -> the same state object."""
        if self.discharge(discharge_id) is None:
            return self
        discharges = tuple(replace(d, **changes) if d.id == discharge_id else d for d in self.discharges)
        return replace(self, discharges=discharges)

    def with_intake(self, intake_id, **changes) -> "SimState":
        if self.intake(intake_id) is None:
            return self
        intakes = tuple(replace(i, **changes) if i.id == intake_id else i for i in self.intakes)
        return replace(self, intakes=intakes)

    def with_all_intakes(self, **changes) -> "SimState":
        return replace(self, intakes=tuple(replace(i, **changes) for i in self.intakes))


def default_discharges() -> Tuple[Discharge, ...]:
    return (
        Discharge(DischargeId.XLAY1, diameter_in=1.75, length_ft=200.0, nozzle_type=NozzleType.FOG, nozzle_psi=100.0),
        Discharge(DischargeId.XLAY2, diameter_in=1.75, length_ft=200.0, nozzle_type=NozzleType.SMOOTH, nozzle_psi=50.0),
        Discharge(DischargeId.XLAY3, diameter_in=1.75, length_ft=200.0, nozzle_type=NozzleType.FOG, nozzle_psi=100.0),
        Discharge(DischargeId.TRASH, diameter_in=1.75, length_ft=100.0, nozzle_type=NozzleType.FOG, nozzle_psi=100.0),
        Discharge(DischargeId.DECK, diameter_in=3.0, length_ft=25.0, nozzle_type=NozzleType.SMOOTH, nozzle_psi=80.0),
        Discharge(DischargeId.REAR_LDH, diameter_in=5.0, length_ft=50.0, nozzle_type=NozzleType.FOG, nozzle_psi=100.0),
    )


def default_intakes() -> Tuple[Intake, ...]:
    return (
        Intake(IntakeId.LDH_DRIVER, source=WaterSource.HYDRANT, ldh=True, psi=0.0),
        Intake(IntakeId.LDH_OFFICER, source=WaterSource.HYDRANT, ldh=True, psi=0.0),
    )


def create_initial_state(cfg: SystemConfig | None = None) -> SimState:
    """Idle pump, all discharges closed, dual hydrant LDH intakes, zero elevation."""
    cfg = cfg or DEFAULT_CONFIG
    pump = Pump(
        foam_tank_gallons=cfg.foam.tank_capacity_gallons,
        foam_tank_capacity_gallons=cfg.foam.tank_capacity_gallons,
        drv=ReliefValve(enabled=False, setpoint_psi=cfg.drv.default_setpoint_psi),
    )
    return SimState(
        pump=pump,
        discharges=default_discharges(),
        intakes=default_intakes(),
        tank_gallons=cfg.tank.capacity_gallons,
        tank_capacity_gallons=cfg.tank.capacity_gallons,
        pump_temp_f=cfg.thermal.pump_initial_f,
        engine_temp_f=cfg.thermal.engine_base_f,
    )
