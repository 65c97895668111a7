"""pumpsim package.

Важно: пакет не должен иметь побочных эффектов при импорте.
Поэтому здесь нет eager-import'ов (решатель/движок/конфиги).

Импортируй нужное напрямую:
- from pumpsim.state import create_initial_state
- from pumpsim.actions import reduce, SetPoint
- from pumpsim.solver import solve
- from pumpsim.config import DEFAULT_CONFIG
"""

from __future__ import annotations

__all__: list[str] = []
