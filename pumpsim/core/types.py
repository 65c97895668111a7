"""pumpsim.core.types

Идентификаторы и перечисления панели.

Все enum'ы наследуют `str`, поэтому сравниваются с «проводными» строками
(`DischargeId.XLAY1 == "xlay1"`) и сериализуются без адаптеров.
"""

from __future__ import annotations

from enum import Enum


class Governor(str, Enum):
    RPM = "RPM"
    PRESSURE = "PRESSURE"


class WaterSource(str, Enum):
    TANK = "tank"
    HYDRANT = "hydrant"
    DRAFT = "draft"
    RELAY = "relay"

    @property
    def pressurized(self) -> bool:
        return self in (WaterSource.HYDRANT, WaterSource.RELAY)


class NozzleType(str, Enum):
    SMOOTH = "smooth"
    FOG = "fog"


class DischargeId(str, Enum):
    XLAY1 = "xlay1"
    XLAY2 = "xlay2"
    XLAY3 = "xlay3"
    TRASH = "trash"
    DECK = "deck"
    REAR_LDH = "rear_ldh"


class IntakeId(str, Enum):
    LDH_DRIVER = "ldh_driver"
    LDH_OFFICER = "ldh_officer"


def parse_enum(enum_cls, value):
    """Wire string -> enum member, or None for anything unknown."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except (TypeError, ValueError):
        return None
