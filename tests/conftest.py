"""Pytest configuration.

Goal: make `import pumpsim` work reliably when running tests without installing
package (editable install).

This repo uses a flat layout (pumpsim/ at repo root). Some environments run
pytest with a working directory where repo root isn't on sys.path, leading to
`ModuleNotFoundError: pumpsim`.

This conftest ensures repo root is on sys.path and provides the common
apparatus fixtures.
"""

from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path

import pytest


_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))


from pumpsim.state import SimState, create_initial_state  # noqa: E402


@pytest.fixture()
def state() -> SimState:
    return create_initial_state()


@pytest.fixture()
def engaged(state: SimState) -> SimState:
    return state.with_pump(engaged=True)


@pytest.fixture()
def tank_attack(engaged: SimState) -> SimState:
    """Engaged pump on booster tank with crosslay 1 fully open."""
    return replace(engaged, tank_to_pump_open=True).with_discharge("xlay1", open=1.0)
