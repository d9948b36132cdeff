from __future__ import annotations

from dataclasses import dataclass, field
import datetime as dt
from enum import Enum
from typing import Any

from goalplanner.domain.goal import Goal


class GoalEventType(str, Enum):
    GOAL_CREATED = "GoalCreated"
    GOAL_UPDATED = "GoalUpdated"
    GOAL_DELETED = "GoalDeleted"
    GOAL_COMPLETED = "GoalCompleted"


@dataclass(frozen=True)
class DomainEvent:
    """
    Fait métier déjà arrivé. `data` = la meta concernée,
    ou {"goal_id": ...} quand elle n'existe plus.
    """
    type: GoalEventType
    data: Any
    timestamp: dt.datetime = field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))


def goal_created(goal: Goal) -> DomainEvent:
    return DomainEvent(type=GoalEventType.GOAL_CREATED, data=goal)


def goal_updated(goal: Goal) -> DomainEvent:
    return DomainEvent(type=GoalEventType.GOAL_UPDATED, data=goal)


def goal_deleted(goal_id: str) -> DomainEvent:
    return DomainEvent(type=GoalEventType.GOAL_DELETED, data={"goal_id": goal_id})


def goal_completed(goal: Goal) -> DomainEvent:
    return DomainEvent(type=GoalEventType.GOAL_COMPLETED, data=goal)
