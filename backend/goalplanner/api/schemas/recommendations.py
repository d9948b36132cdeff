from __future__ import annotations

from pydantic import BaseModel, Field

from goalplanner.api.schemas.goals import amount_field
from goalplanner.domain.goal import GoalImportance
from goalplanner.domain.profile import RecommendationType, RiskTolerance


class RecommendationRequest(BaseModel):
    currency: str | None = None
    monthly_income: str = amount_field()
    fixed_expenses: str = amount_field()
    available_per_month: str = amount_field()
    current_savings: str = amount_field()
    age: int = Field(..., ge=0)
    risk_tolerance: RiskTolerance = RiskTolerance.MODERADO
    # si fourni: on évite de proposer ce que l'utilisateur a déjà
    user_id: str | None = None


class RecommendationFeasibilityOut(BaseModel):
    is_feasible: bool
    confidence: int
    reasons: list[str]


class RecommendationOut(BaseModel):
    type: RecommendationType
    currency: str
    target_value: str
    priority: int
    months: int
    monthly_contribution: str
    importance: GoalImportance
    description: str
    feasibility: RecommendationFeasibilityOut


class RecommendationResponse(BaseModel):
    recommendations: list[RecommendationOut]
