# goalplanner/services/goal_use_cases.py
from __future__ import annotations

from dataclasses import dataclass
import datetime as dt
import logging
from typing import Any, Optional

from goalplanner.domain.errors import (
    DomainError,
    GoalNotFound,
    InvalidAmount,
    InvalidGoalField,
    RepositoryError,
)
from goalplanner.domain.events import DomainEvent, goal_completed, goal_created, goal_deleted, goal_updated
from goalplanner.domain.goal import Goal, GoalImportance, GoalStatus, GoalType
from goalplanner.domain.money import Money
from goalplanner.domain.result import Result, failure, success
from goalplanner.repositories.goal_repository import GoalRepository
from goalplanner.services.event_bus import EventPublisher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreateGoalRequest:
    user_id: str
    description: str
    type: GoalType
    target_value: Money
    start_date: dt.date
    end_date: dt.date
    monthly_income: Money
    fixed_expenses: Money
    available_per_month: Money
    importance: GoalImportance
    priority: int
    monthly_contribution: Money
    num_parcela: int
    strategy: Optional[str] = None
    status: GoalStatus = GoalStatus.ACTIVE


@dataclass(frozen=True)
class GoalFilters:
    user_id: str | None = None
    type: GoalType | None = None
    status: GoalStatus | None = None


def _storage_failure(action: str, exc: Exception) -> RepositoryError:
    logger.exception("Goal repository failure while %s: %s", action, exc)
    return RepositoryError(f"Erro ao {action} objetivo")


def _publish(event_bus: EventPublisher | None, event: DomainEvent) -> None:
    if event_bus is not None:
        event_bus.publish(event.type.value, event)


class CreateGoalUseCase:
    def __init__(
        self,
        goal_repository: GoalRepository,
        event_bus: EventPublisher | None = None,
    ) -> None:
        self._repo = goal_repository
        self._events = event_bus

    async def execute(self, request: CreateGoalRequest) -> Result[Goal, Exception]:
        if request.target_value.amount <= 0:
            return failure(InvalidAmount("Target value must be greater than zero"))

        try:
            goal = Goal.create(
                user_id=request.user_id,
                description=request.description,
                type=request.type,
                target_value=request.target_value,
                start_date=request.start_date,
                end_date=request.end_date,
                monthly_income=request.monthly_income,
                fixed_expenses=request.fixed_expenses,
                available_per_month=request.available_per_month,
                importance=request.importance,
                priority=request.priority,
                strategy=request.strategy,
                monthly_contribution=request.monthly_contribution,
                num_parcela=request.num_parcela,
                status=request.status,
            )
        except DomainError as e:
            return failure(e)

        try:
            saved = await self._repo.save(goal)
        except Exception as e:
            return failure(_storage_failure("salvar", e))

        logger.info("Goal %s created for user %s", saved.id, saved.user_id)
        _publish(self._events, goal_created(saved))
        return success(saved)


class GetGoalByIdUseCase:
    def __init__(self, goal_repository: GoalRepository) -> None:
        self._repo = goal_repository

    async def execute(self, goal_id: str) -> Result[Goal, Exception]:
        try:
            goal = await self._repo.find_by_id(goal_id)
        except Exception as e:
            return failure(_storage_failure("buscar", e))

        if goal is None:
            return failure(GoalNotFound(goal_id))
        return success(goal)


class GetGoalsUseCase:
    def __init__(self, goal_repository: GoalRepository) -> None:
        self._repo = goal_repository

    async def execute(self, filters: GoalFilters | None = None) -> Result[list[Goal], Exception]:
        filters = filters or GoalFilters()
        try:
            if filters.user_id is not None:
                goals = await self._repo.find_by_user_id(filters.user_id)
            else:
                goals = await self._repo.find_all()
        except Exception as e:
            return failure(_storage_failure("listar", e))

        if filters.type is not None:
            wanted_type = GoalType(filters.type)
            goals = [g for g in goals if g.type == wanted_type]
        if filters.status is not None:
            wanted_status = GoalStatus(filters.status)
            goals = [g for g in goals if g.status == wanted_status]

        return success(goals)


class UpdateGoalUseCase:
    """Mise à jour copy-on-write: nouvelle instance, invariants re-vérifiés."""

    def __init__(
        self,
        goal_repository: GoalRepository,
        event_bus: EventPublisher | None = None,
    ) -> None:
        self._repo = goal_repository
        self._events = event_bus

    async def execute(self, goal_id: str, changes: dict[str, Any]) -> Result[Goal, Exception]:
        found = await GetGoalByIdUseCase(self._repo).execute(goal_id)
        if found.is_failure():
            return found

        target = changes.get("target_value")
        if target is not None and target.amount <= 0:
            return failure(InvalidAmount("Target value must be greater than zero"))

        previous = found.unwrap()
        try:
            updated = previous.with_changes(**changes)
        except DomainError as e:
            return failure(e)

        try:
            saved = await self._repo.save(updated)
        except Exception as e:
            return failure(_storage_failure("atualizar", e))

        _publish(self._events, goal_updated(saved))
        if saved.is_completed() and not previous.is_completed():
            _publish(self._events, goal_completed(saved))
        return success(saved)


class ChangeGoalStatusUseCase:
    def __init__(
        self,
        goal_repository: GoalRepository,
        event_bus: EventPublisher | None = None,
    ) -> None:
        self._repo = goal_repository
        self._events = event_bus

    async def execute(self, goal_id: str, status: GoalStatus | str) -> Result[Goal, Exception]:
        found = await GetGoalByIdUseCase(self._repo).execute(goal_id)
        if found.is_failure():
            return found

        try:
            wanted = GoalStatus(status)
        except ValueError:
            return failure(InvalidGoalField(f"Invalid goal status: {status}"))

        goal = found.unwrap()
        if wanted == GoalStatus.COMPLETED:
            updated = goal.mark_as_completed()
        else:
            updated = goal.with_status(wanted)

        try:
            saved = await self._repo.save(updated)
        except Exception as e:
            return failure(_storage_failure("atualizar", e))

        logger.info("Goal %s moved to status %s", saved.id, saved.status.value)
        _publish(self._events, goal_updated(saved))
        if saved.is_completed() and not goal.is_completed():
            _publish(self._events, goal_completed(saved))
        return success(saved)


class DeleteGoalUseCase:
    def __init__(
        self,
        goal_repository: GoalRepository,
        event_bus: EventPublisher | None = None,
    ) -> None:
        self._repo = goal_repository
        self._events = event_bus

    async def execute(self, goal_id: str) -> Result[bool, Exception]:
        try:
            deleted = await self._repo.delete(goal_id)
        except Exception as e:
            return failure(_storage_failure("excluir", e))

        if not deleted:
            return failure(GoalNotFound(goal_id))

        _publish(self._events, goal_deleted(goal_id))
        return success(True)
