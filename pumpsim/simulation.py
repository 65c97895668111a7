"""Simulation owner: holds the single SimState and drives ticks.

`Simulation` единственный владелец состояния. Действия идут через
`dispatch`, время через `advance` (TickScheduler накапливает реальное
время и выдаёт TICK фиксированного периода). После каждого изменения
подписчики получают пару (state, result).
"""

from __future__ import annotations

import logging
from typing import Callable, Iterator, List, Optional

import numpy as np

from pumpsim.actions import Action, Reducer, Tick
from pumpsim.alerts import Alert, collect_alerts
from pumpsim.config import DEFAULT_CONFIG, SystemConfig
from pumpsim.instructor import translate_message
from pumpsim.solver import SolverResult, solve
from pumpsim.state import SimState, create_initial_state

logger = logging.getLogger(__name__)

Observer = Callable[[SimState, SolverResult], None]


class TickScheduler:
    """Accumulates wall-clock time and releases fixed-period ticks."""

    def __init__(self, period_s: float = 0.1, max_catch_up: int = 50):
        if period_s <= 0:
            raise ValueError(f"period_s must be > 0, got {period_s}")
        self.period_s = float(period_s)
        self.max_catch_up = int(max_catch_up)
        self._accum = 0.0

    @property
    def pending_s(self) -> float:
        return self._accum

    def feed(self, elapsed_s: float) -> Iterator[float]:
        """Yield tick durations covering the accumulated whole periods.

        Normally one period per tick. A backlog longer than `max_catch_up`
        periods (a stall) goes out as a single catch-up tick; the engine
        substeps it, so no simulated time is lost.
        """
        if elapsed_s > 0:
            self._accum += float(elapsed_s)
        n = int(self._accum / self.period_s + 1e-9)
        if n <= 0:
            return
        if n > self.max_catch_up:
            catch_up = n * self.period_s
            self._accum = max(0.0, self._accum - catch_up)
            logger.debug("Catch-up tick: %.3f s (%d periods)", catch_up, n)
            yield catch_up
            return
        for _ in range(n):
            self._accum = max(0.0, self._accum - self.period_s)
            yield self.period_s

    def reset(self) -> None:
        self._accum = 0.0


class Simulation:
    def __init__(
        self,
        cfg: SystemConfig | None = None,
        state: SimState | None = None,
        rng: np.random.Generator | None = None,
    ):
        self.cfg = cfg or DEFAULT_CONFIG
        self.reducer = Reducer(self.cfg, rng)
        self.scheduler = TickScheduler(self.cfg.sim.tick_s)
        self._state = state if state is not None else create_initial_state(self.cfg)
        self._observers: List[Observer] = []
        self.time_s = 0.0

    @property
    def state(self) -> SimState:
        return self._state

    @property
    def result(self) -> SolverResult:
        return solve(self._state, self.cfg)

    @property
    def alerts(self) -> List[Alert]:
        return collect_alerts(self._state, self.result, self.cfg)

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def dispatch(self, action: Action) -> SimState:
        new_state = self.reducer(self._state, action)
        if isinstance(action, Tick):
            self.time_s += max(0.0, float(action.delta_time))
        if new_state is self._state:
            logger.debug("%s: no change", action.type)
            return new_state
        self._state = new_state
        self._notify()
        return new_state

    def dispatch_instructor(self, message) -> Optional[SimState]:
        action = translate_message(message)
        if action is None:
            return None
        return self.dispatch(action)

    def advance(self, elapsed_s: float) -> int:
        """Feed wall time; returns how many ticks were dispatched."""
        n = 0
        for dt in self.scheduler.feed(elapsed_s):
            self.dispatch(Tick(dt))
            n += 1
        return n

    def _notify(self) -> None:
        if not self._observers:
            return
        result = self.result
        for observer in list(self._observers):
            observer(self._state, result)
