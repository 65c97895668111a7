"""pumpsim.core.validation

Базовые проверки, чтобы ловить физически невозможные значения конфигурации
как можно раньше.

Runtime-значения (положение рукоятки, давление, расход) здесь не проверяются:
их просто зажимают в допустимый диапазон через `clamp`.
"""

from __future__ import annotations

import math


def ensure_non_negative(value: float, name: str) -> None:
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")


def ensure_positive(value: float, name: str) -> None:
    if value <= 0:
        raise ValueError(f"{name} must be > 0, got {value}")


def ensure_in_range(value: float, min_value: float, max_value: float, name: str) -> None:
    if not (min_value <= value <= max_value):
        raise ValueError(f"{name} must be in [{min_value}, {max_value}], got {value}")


def ensure_ordered(low: float, high: float, name: str) -> None:
    if low > high:
        raise ValueError(f"{name}: lower bound {low} exceeds upper bound {high}")


def clamp(value: float, min_value: float, max_value: float) -> float:
    """Clamp without raising. NaN collapses to the lower bound."""
    v = float(value)
    if math.isnan(v):
        return float(min_value)
    return max(float(min_value), min(float(max_value), v))
