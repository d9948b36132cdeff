from __future__ import annotations

from typing import Protocol
import datetime as dt

from goalplanner.domain.goal import Goal, GoalStatus, GoalType


class GoalRepository(Protocol):
    """
    Contrat de persistance des metas. Tout est async: l'implémentation
    réelle (base de données, fichiers) fait des I/O.
    Le moteur de calcul n'appelle jamais ce contrat; seuls les use-cases le font.
    """

    async def save(self, goal: Goal) -> Goal:
        """Insert ou remplace (même id)."""
        ...

    async def find_by_id(self, goal_id: str) -> Goal | None:
        ...

    async def find_all(self) -> list[Goal]:
        ...

    async def find_by_user_id(self, user_id: str) -> list[Goal]:
        ...

    async def find_by_type(self, goal_type: GoalType | str) -> list[Goal]:
        ...

    async def find_by_status(self, status: GoalStatus | str) -> list[Goal]:
        ...

    async def find_active(self) -> list[Goal]:
        ...

    async def find_by_date_range(self, start: dt.date, end: dt.date) -> list[Goal]:
        """Metas dont la fenêtre [start_date, end_date] croise [start, end]."""
        ...

    async def delete(self, goal_id: str) -> bool:
        """Return True if deleted, False if not found."""
        ...

    async def count(self) -> int:
        ...

    async def count_by_user_id(self, user_id: str) -> int:
        ...

    async def count_active(self) -> int:
        ...
