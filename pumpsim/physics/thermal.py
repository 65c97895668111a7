"""Тепловая модель насоса и двигателя.

Насос греется, когда крутится «вхолостую» без охлаждающего расхода
(вода в корпусе взбивается крыльчаткой). Охлаждающий расход = расход через
стволы + рециркуляция в цистерну. Двигатель релаксирует к температуре,
зависящей от нагрузки (оборотов).
"""

from __future__ import annotations

from dataclasses import dataclass

from pumpsim.config import DEFAULT_CONFIG, SystemConfig
from pumpsim.core.validation import clamp


@dataclass(frozen=True)
class Temperatures:
    pump_f: float
    engine_f: float

    def engine_overheating(self, cfg: SystemConfig | None = None) -> bool:
        return self.engine_f > (cfg or DEFAULT_CONFIG).thermal.engine_overheat_f


def cooling_flow(discharge_gpm: float, recirc_pct: float, cfg: SystemConfig | None = None) -> float:
    cfg = cfg or DEFAULT_CONFIG
    return max(0.0, discharge_gpm) + clamp(recirc_pct, 0.0, 100.0) / 100.0 * cfg.tank.recirc_cooling_gpm


def update_temperatures(
    temps: Temperatures,
    engaged: bool,
    rpm: float,
    cooling_gpm: float,
    dt: float,
    cfg: SystemConfig | None = None,
) -> Temperatures:
    cfg = cfg or DEFAULT_CONFIG
    th = cfg.thermal

    if engaged and cooling_gpm >= th.min_cooling_gpm:
        rate = -th.flow_cool_rate_f_s
    elif engaged:
        rate = th.heat_rate_f_s
    else:
        rate = -th.idle_cool_rate_f_s
    pump_f = clamp(temps.pump_f + rate * dt, th.ambient_f, th.pump_max_f)

    load = max(0.0, rpm) / cfg.pump.max_rpm
    engine_target = th.engine_base_f + load * th.engine_load_rise_f
    k = min(1.0, th.engine_relax_per_s * dt)
    engine_f = clamp(temps.engine_f + (engine_target - temps.engine_f) * k, th.engine_min_f, th.engine_max_f)

    return Temperatures(pump_f=pump_f, engine_f=engine_f)


def temperature_warnings(temps: Temperatures, cfg: SystemConfig | None = None) -> list[str]:
    th = (cfg or DEFAULT_CONFIG).thermal
    warnings: list[str] = []
    pump = round(temps.pump_f)

    if temps.pump_f > th.pump_boiling_f:
        warnings.append(f"🚨 CRITICAL: Pump boiling! Steam damage risk! ({pump}°F)")
    elif temps.pump_f > th.pump_overheat_f:
        warnings.append(f"⚠️ Pump Overheating: {pump}°F")
    elif temps.pump_f > th.pump_elevated_f:
        warnings.append(f"Pump temperature elevated: {pump}°F")
    if temps.pump_f > th.pump_elevated_f:
        warnings.append("Increase flow or enable recirculation to cool pump")

    if temps.engine_overheating(cfg):
        warnings.append(f"⚠️ Engine Overheating: {round(temps.engine_f)}°F")

    return warnings
