from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from goalplanner.domain.errors import (
    EmptyDescription,
    InvalidDateRange,
    InvalidGoalField,
    InvalidGoalType,
    InvalidPriority,
)
from goalplanner.domain.money import Money


class GoalType(str, Enum):
    ECONOMIA = "economia"
    COMPRA = "compra"


class GoalStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    PAUSED = "paused"
    CANCELLED = "cancelled"


class GoalImportance(str, Enum):
    BAIXA = "baixa"
    MEDIA = "média"
    ALTA = "alta"


_MONEY_FIELDS = (
    "target_value",
    "monthly_income",
    "fixed_expenses",
    "available_per_month",
    "monthly_contribution",
)

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


@dataclass(frozen=True, eq=False)
class Goal:
    """
    Meta financeira (entité).
    - invariants vérifiés une seule fois, à la construction
    - immuable: toute "mise à jour" produit une nouvelle instance
    - égalité par identité (id), pas structurelle
    """
    id: str
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
    created_at: dt.datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        # l'ordre des contrôles fait partie du contrat (messages affichés à l'utilisateur)
        if not isinstance(self.description, str) or self.description.strip() == "":
            raise EmptyDescription("Goal description cannot be empty")

        try:
            object.__setattr__(self, "type", GoalType(self.type))
        except ValueError:
            raise InvalidGoalType(f"Invalid goal type: {self.type}") from None

        if isinstance(self.priority, bool) or not isinstance(self.priority, int):
            raise InvalidPriority("Priority must be between 1 and 5")
        if self.priority < 1 or self.priority > 5:
            raise InvalidPriority("Priority must be between 1 and 5")

        if not isinstance(self.start_date, dt.date) or not isinstance(self.end_date, dt.date):
            raise InvalidDateRange("start_date and end_date must be dates")
        if self.end_date <= self.start_date:
            raise InvalidDateRange("End date must be after start date")

        try:
            object.__setattr__(self, "importance", GoalImportance(self.importance))
        except ValueError:
            raise InvalidGoalField(f"Invalid goal importance: {self.importance}") from None

        try:
            object.__setattr__(self, "status", GoalStatus(self.status))
        except ValueError:
            raise InvalidGoalField(f"Invalid goal status: {self.status}") from None

        for name in _MONEY_FIELDS:
            if not isinstance(getattr(self, name), Money):
                raise InvalidGoalField(f"{name} must be a Money")

        if isinstance(self.num_parcela, bool) or not isinstance(self.num_parcela, int) or self.num_parcela < 1:
            raise InvalidGoalField("num_parcela must be a positive integer")

        if self.strategy is not None:
            if not isinstance(self.strategy, str):
                raise InvalidGoalField("strategy must be a string")
            stripped = self.strategy.strip()
            object.__setattr__(self, "strategy", stripped or None)

        if not isinstance(self.created_at, dt.datetime):
            raise InvalidGoalField("created_at must be a datetime")

    @staticmethod
    def create(*, id: Optional[str] = None, **props: Any) -> "Goal":
        """Factory: génère l'id (uuid4) quand l'appelant n'en fournit pas."""
        return Goal(id=id or str(uuid4()), **props)

    # -------- queries --------

    def is_economy(self) -> bool:
        return self.type == GoalType.ECONOMIA

    def is_purchase(self) -> bool:
        return self.type == GoalType.COMPRA

    def is_active(self) -> bool:
        return self.status == GoalStatus.ACTIVE

    def is_completed(self) -> bool:
        return self.status == GoalStatus.COMPLETED

    def is_paused(self) -> bool:
        return self.status == GoalStatus.PAUSED

    def is_cancelled(self) -> bool:
        return self.status == GoalStatus.CANCELLED

    # -------- derived values --------

    def get_total_contribution_needed(self) -> Money:
        return self.monthly_contribution.multiply(self.num_parcela)

    def get_progress_percentage(self, current_value: Money) -> Decimal:
        if self.target_value.is_zero():
            return _ZERO
        pct = current_value.amount / self.target_value.amount * _HUNDRED
        return max(_ZERO, min(pct, _HUNDRED))

    def get_remaining_amount(self, current_value: Money) -> Money:
        remaining = self.target_value.amount - current_value.amount
        return Money(max(_ZERO, remaining), self.target_value.currency)

    # -------- state transitions --------

    def mark_as_completed(self) -> "Goal":
        return replace(self, status=GoalStatus.COMPLETED)

    def mark_as_paused(self) -> "Goal":
        return replace(self, status=GoalStatus.PAUSED)

    def mark_as_cancelled(self) -> "Goal":
        return replace(self, status=GoalStatus.CANCELLED)

    def reactivate(self) -> "Goal":
        return replace(self, status=GoalStatus.ACTIVE)

    def with_status(self, status: GoalStatus | str) -> "Goal":
        return replace(self, status=status)

    def with_changes(self, **changes: Any) -> "Goal":
        """
        Copie avec champs modifiés, invariants re-vérifiés.
        id et created_at ne sont pas modifiables.
        """
        frozen_keys = {"id", "created_at"} & changes.keys()
        if frozen_keys:
            raise InvalidGoalField(f"Cannot change {', '.join(sorted(frozen_keys))}")

        known = {f.name for f in fields(self)}
        unknown = set(changes) - known
        if unknown:
            raise InvalidGoalField(f"Unknown goal fields: {', '.join(sorted(unknown))}")

        return replace(self, **changes)

    # -------- identity --------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Goal):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    # -------- serialization --------

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "description": self.description,
            "type": self.type.value,
            "target_value": float(self.target_value.amount),
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "monthly_income": float(self.monthly_income.amount),
            "fixed_expenses": float(self.fixed_expenses.amount),
            "available_per_month": float(self.available_per_month.amount),
            "importance": self.importance.value,
            "priority": self.priority,
            "strategy": self.strategy,
            "monthly_contribution": float(self.monthly_contribution.amount),
            "num_parcela": self.num_parcela,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
        }
