from __future__ import annotations

from dataclasses import dataclass, field
import datetime as dt
from typing import Iterable

from goalplanner.domain.goal import Goal, GoalStatus, GoalType
from goalplanner.engine.dates import windows_overlap


def _sorted(goals: Iterable[Goal]) -> list[Goal]:
    # Tri déterministe : priority, created_at, id
    return sorted(goals, key=lambda g: (g.priority, g.created_at, g.id))


@dataclass
class InMemoryGoalRepository:
    """
    Repo en mémoire.
    - Déterministe
    - Facile à tester
    - Suffisant pour brancher API + use-cases
    """
    _items: dict[str, Goal] = field(default_factory=dict)

    async def save(self, goal: Goal) -> Goal:
        self._items[goal.id] = goal
        return goal

    async def find_by_id(self, goal_id: str) -> Goal | None:
        return self._items.get(goal_id)

    async def find_all(self) -> list[Goal]:
        return _sorted(self._items.values())

    async def find_by_user_id(self, user_id: str) -> list[Goal]:
        return _sorted(g for g in self._items.values() if g.user_id == user_id)

    async def find_by_type(self, goal_type: GoalType | str) -> list[Goal]:
        wanted = GoalType(goal_type)
        return _sorted(g for g in self._items.values() if g.type == wanted)

    async def find_by_status(self, status: GoalStatus | str) -> list[Goal]:
        wanted = GoalStatus(status)
        return _sorted(g for g in self._items.values() if g.status == wanted)

    async def find_active(self) -> list[Goal]:
        return await self.find_by_status(GoalStatus.ACTIVE)

    async def find_by_date_range(self, start: dt.date, end: dt.date) -> list[Goal]:
        return _sorted(
            g for g in self._items.values()
            if windows_overlap(g.start_date, g.end_date, start, end)
        )

    async def delete(self, goal_id: str) -> bool:
        return self._items.pop(goal_id, None) is not None

    async def count(self) -> int:
        return len(self._items)

    async def count_by_user_id(self, user_id: str) -> int:
        return sum(1 for g in self._items.values() if g.user_id == user_id)

    async def count_active(self) -> int:
        return sum(1 for g in self._items.values() if g.is_active())
