"""Instructor bridge: remote instructor messages -> reducer actions.

Транспорт (WebSocket-комната) вне пакета; сюда приходят уже разобранные
dict'ы или сырые JSON-строки. Некорректные сообщения не роняют тренажёр:
пишем в лог и возвращаем None.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional, Union

from pumpsim.actions import (
    Action,
    ScenarioGovernorFailure,
    ScenarioHoseBurst,
    ScenarioIntakeFailure,
    ScenarioTankLeak,
    SetIntakePressure,
)
from pumpsim.core.types import DischargeId, IntakeId, parse_enum

logger = logging.getLogger(__name__)


def _scenario_event(msg: Mapping[str, Any]) -> Optional[Action]:
    event = msg.get("event")
    if event == "HOSE_BURST":
        line = parse_enum(DischargeId, msg.get("lineId"))
        return ScenarioHoseBurst(line) if line is not None else None
    if event == "INTAKE_FAILURE":
        intake = parse_enum(IntakeId, msg.get("intakeId"))
        return ScenarioIntakeFailure(intake) if intake is not None else None
    if event == "TANK_LEAK":
        return ScenarioTankLeak()
    if event == "GOVERNOR_FAILURE":
        return ScenarioGovernorFailure()
    return None


def _set_parameter(msg: Mapping[str, Any]) -> Optional[Action]:
    if msg.get("parameter") != "hydrantPressure":
        return None
    value = msg.get("value")
    intake = parse_enum(IntakeId, msg.get("intakeId"))
    if intake is None or isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return SetIntakePressure(intake, float(value))


def translate_message(message: Union[str, bytes, Mapping[str, Any]]) -> Optional[Action]:
    """SCENARIO_EVENT / SET_PARAMETER -> Action, or None."""
    if isinstance(message, (str, bytes)):
        try:
            message = json.loads(message)
        except ValueError:
            logger.warning("Instructor message is not valid JSON: %.80r", message)
            return None

    if not isinstance(message, Mapping):
        logger.warning("Instructor message is not an object: %r", message)
        return None

    kind = message.get("type")
    if kind == "SCENARIO_EVENT":
        action = _scenario_event(message)
    elif kind == "SET_PARAMETER":
        action = _set_parameter(message)
    else:
        action = None

    if action is None:
        logger.warning("Ignoring instructor message: %r", message)
    else:
        logger.info("Instructor message -> %s", action.type)
    return action
