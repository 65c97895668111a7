"""Continuous-time update engine.

`update_time_based_state(state, dt)` продвигает состояние на dt секунд.
Внутри фиксированный шаг интегрирования (`SimulationConfig.substep_s`):
dt режется на N одинаковых подшагов, поэтому один TICK(1.0) и десять
TICK(0.1) проходят одну и ту же последовательность подшагов.

На каждом подшаге:
1) решатель (расходы, подпор на всасе);
2) обороты ползут к цели регулятора с ограниченной скоростью;
3) PDP по характеристике насоса, кавитация, DRV, потолок 400 PSI;
4) разрыв рукава при длительном переопрессовывании;
5) пенообразователь, цистерна (расход, утечка, долив), температуры;
6) прогресс заливки (primer).

Скрытого состояния нет: всё, что нужно между подшагами, лежит в SimState.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Dict

from pumpsim.config import DEFAULT_CONFIG, SystemConfig
from pumpsim.core.types import DischargeId, WaterSource
from pumpsim.core.units import gpm_to_gallons
from pumpsim.core.validation import clamp
from pumpsim.governor import target_rpm
from pumpsim.physics.drv import calculate_drv_response, compute_drv
from pumpsim.physics.pump_curves import is_cavitating, max_pdp
from pumpsim.physics.thermal import Temperatures, cooling_flow, update_temperatures
from pumpsim.solver import SolverResult, solve
from pumpsim.state import SimState

logger = logging.getLogger(__name__)


def substep_plan(delta_time: float, cfg: SystemConfig | None = None) -> tuple[int, float]:
    """(N, h) with N * h == delta_time and h <= substep_s (unless capped)."""
    scfg = (cfg or DEFAULT_CONFIG).sim
    n = max(1, math.ceil(delta_time / scfg.substep_s - 1e-9))
    n = min(n, scfg.max_substeps)
    return n, delta_time / n


def slew(current: float, target: float, max_rate: float, dt: float) -> float:
    step = max_rate * dt
    if abs(target - current) <= step:
        return float(target)
    return float(current + math.copysign(step, target - current))


def supply_pressure(state: SimState, result: SolverResult) -> float:
    """Intake pressure the pump actually sees this step."""
    primary = state.primary_intake
    if (
        primary is not None
        and primary.psi_override
        and primary.source.pressurized
        and not state.tank_to_pump_open
    ):
        return primary.psi
    if state.tank_to_pump_open and state.tank_gallons <= 0:
        return 0.0
    return result.intake_psi


def _refresh_intakes(state: SimState, psi: float) -> SimState:
    if all(i.psi_override or i.psi == psi for i in state.intakes):
        return state
    intakes = tuple(i if i.psi_override else replace(i, psi=psi) for i in state.intakes)
    return replace(state, intakes=intakes)


def _advance_priming(state: SimState, h: float, cfg: SystemConfig) -> SimState:
    if not state.primer_active:
        return state
    progress = state.priming_progress + h
    if progress >= cfg.primer.duration_s:
        logger.info("Primer complete after %.1f s", cfg.primer.duration_s)
        return replace(
            state,
            primer_active=False,
            is_active_priming=False,
            primed=True,
            priming_progress=cfg.primer.duration_s,
        )
    return replace(state, priming_progress=progress, is_active_priming=True)


def _foam_used(state: SimState, flows: Dict[DischargeId, float], h: float) -> float:
    if not state.pump.foam_system_enabled:
        return 0.0
    concentrate_gpm = sum(
        flows.get(d.id, 0.0) * d.foam_pct / 100.0
        for d in state.discharges
        if d.open > 0 and d.foam_pct > 0
    )
    return gpm_to_gallons(concentrate_gpm, h)


def _tank_level(state: SimState, delivered_gpm: float, h: float, cfg: SystemConfig) -> float:
    level = state.tank_gallons
    pump = state.pump
    if pump.engaged and state.tank_to_pump_open:
        level -= gpm_to_gallons(delivered_gpm, h)
    if state.tank_leak_active:
        level -= gpm_to_gallons(cfg.tank.leak_gpm, h)
    if pump.engaged and state.tank_fill_recirc_pct > 0 and state.primary_source == WaterSource.HYDRANT:
        level += gpm_to_gallons(state.tank_fill_recirc_pct / 100.0 * cfg.tank.fill_gpm, h)
    return clamp(level, 0.0, state.tank_capacity_gallons)


def _burst_highest_flow_line(state: SimState, result: SolverResult) -> SimState:
    flowing = [d for d in state.discharges if d.open > 0]
    if not flowing:
        return state
    victim = max(flowing, key=lambda d: result.discharge_flows.get(d.id, 0.0))
    logger.warning("Overpressure: hose %s burst", victim.id.value)
    state = state.with_discharge(victim.id, open=0.0)
    if victim.id not in state.burst_lines:
        state = replace(state, burst_lines=state.burst_lines + (victim.id,))
    return state


def _step(state: SimState, h: float, cfg: SystemConfig) -> SimState:
    result = solve(state, cfg)
    pump = state.pump
    intake_psi = supply_pressure(state, result)

    if pump.engaged:
        goal = target_rpm(pump.governor, pump.setpoint, result.total_gpm, intake_psi, cfg)
    else:
        goal = 0.0
    rpm = slew(pump.rpm, goal, cfg.pump.slew_rpm_s, h)

    drafting_dry = state.primary_source == WaterSource.DRAFT and not state.primed and not state.tank_to_pump_open
    # unprimed draft delivers no water
    if drafting_dry:
        flows: Dict[DischargeId, float] = {}
        delivered_gpm = 0.0
    else:
        flows = result.discharge_flows
        delivered_gpm = result.total_gpm

    overpressure_s = 0.0
    if pump.engaged:
        raw = 0.0 if drafting_dry else max_pdp(result.total_gpm, rpm, intake_psi, cfg.pump)
        if is_cavitating(intake_psi, rpm, cfg.pump):
            raw *= cfg.pump.cavitation_derate

        drv = compute_drv(raw, pump.drv.setpoint_psi, pump.drv.enabled, pump.engaged, cfg.drv)
        bypass = calculate_drv_response(pump.drv.bypass_gpm, drv.bypass_gpm, h, cfg.drv.response_gpm_s)
        effective = drv.adjusted_pdp
        pdp = clamp(effective, 0.0, cfg.pump.max_pdp_psi)

        if effective > cfg.gauges.max_psi:
            overpressure_s = state.overpressure_s + h
    else:
        bypass = calculate_drv_response(pump.drv.bypass_gpm, 0.0, h, cfg.drv.response_gpm_s)
        pdp = 0.0

    foam = max(0.0, pump.foam_tank_gallons - _foam_used(state, flows, h))

    temps = update_temperatures(
        Temperatures(pump_f=state.pump_temp_f, engine_f=state.engine_temp_f),
        pump.engaged,
        rpm,
        cooling_flow(delivered_gpm, state.tank_fill_recirc_pct, cfg),
        h,
        cfg,
    )

    new_state = replace(
        state.with_pump(rpm=rpm, pdp=pdp, intake_psi=intake_psi, foam_tank_gallons=foam).with_drv(bypass_gpm=bypass),
        tank_gallons=_tank_level(state, delivered_gpm, h, cfg),
        pump_temp_f=temps.pump_f,
        engine_temp_f=temps.engine_f,
        overpressure_s=overpressure_s,
    )

    if overpressure_s >= cfg.sim.overpressure_burst_s:
        new_state = replace(_burst_highest_flow_line(new_state, result), overpressure_s=0.0)

    new_state = _refresh_intakes(new_state, result.intake_psi)
    return _advance_priming(new_state, h, cfg)


def update_time_based_state(state: SimState, delta_time: float, cfg: SystemConfig | None = None) -> SimState:
    cfg = cfg or DEFAULT_CONFIG
    dt = float(delta_time)
    if not math.isfinite(dt) or dt <= 0.0:
        return state

    n, h = substep_plan(dt, cfg)
    for _ in range(n):
        state = _step(state, h, cfg)
    return state
