from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from goalplanner.domain.errors import ProfileError
from goalplanner.domain.goal import GoalImportance
from goalplanner.domain.money import Money


class RiskTolerance(str, Enum):
    CONSERVADOR = "conservador"
    MODERADO = "moderado"
    AGRESSIVO = "agressivo"


class RecommendationType(str, Enum):
    EMERGENCY_FUND = "emergency_fund"
    RETIREMENT = "retirement"
    HOUSE_PURCHASE = "house_purchase"
    INVESTMENT = "investment"
    VACATION = "vacation"
    EDUCATION = "education"
    VEHICLE = "vehicle"
    BUSINESS = "business"


@dataclass(frozen=True)
class FinancialProfile:
    """Photo de la situation financière. Entrée des recommandations, jamais persistée."""
    monthly_income: Money
    fixed_expenses: Money
    available_per_month: Money
    current_savings: Money
    age: int
    risk_tolerance: RiskTolerance = RiskTolerance.MODERADO

    def __post_init__(self) -> None:
        for name in ("monthly_income", "fixed_expenses", "available_per_month", "current_savings"):
            if not isinstance(getattr(self, name), Money):
                raise ProfileError(f"{name} must be a Money")

        if isinstance(self.age, bool) or not isinstance(self.age, int) or self.age < 0:
            raise ProfileError("age must be a non-negative integer")

        try:
            object.__setattr__(self, "risk_tolerance", RiskTolerance(self.risk_tolerance))
        except ValueError:
            raise ProfileError(f"Invalid risk tolerance: {self.risk_tolerance}") from None


@dataclass(frozen=True)
class GoalTimeline:
    months: int
    monthly_contribution: Money


@dataclass(frozen=True)
class GoalRecommendation:
    type: RecommendationType
    target_value: Money
    priority: int
    timeline: GoalTimeline
    importance: GoalImportance
    description: str


@dataclass(frozen=True)
class RecommendationFeasibility:
    is_feasible: bool
    confidence: int
    reasons: list[str]
