from __future__ import annotations

import datetime as dt
from pydantic import BaseModel, Field

from goalplanner.domain.goal import GoalImportance, GoalStatus, GoalType

AMOUNT_PATTERN = r"^\d+(\.\d{1,2})?$"


def amount_field(**kwargs):
    return Field(
        pattern=AMOUNT_PATTERN,
        examples=["1500.00", "100000"],
        description="Non-negative amount as string, e.g. '1500.00'",
        **kwargs,
    )


class GoalCreateRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    # pas de min_length: le message métier ("Goal description cannot be empty") doit remonter
    description: str
    type: GoalType
    currency: str | None = Field(default=None, description="3-letter code, defaults to settings")
    target_value: str = amount_field()
    start_date: dt.date
    end_date: dt.date
    monthly_income: str = amount_field()
    fixed_expenses: str = amount_field()
    available_per_month: str = amount_field()
    importance: GoalImportance
    priority: int
    strategy: str | None = None
    monthly_contribution: str = amount_field()
    num_parcela: int
    status: GoalStatus = GoalStatus.ACTIVE


class GoalUpdateRequest(BaseModel):
    description: str | None = None
    type: GoalType | None = None
    target_value: str | None = amount_field(default=None)
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    monthly_income: str | None = amount_field(default=None)
    fixed_expenses: str | None = amount_field(default=None)
    available_per_month: str | None = amount_field(default=None)
    importance: GoalImportance | None = None
    priority: int | None = None
    strategy: str | None = None
    monthly_contribution: str | None = amount_field(default=None)
    num_parcela: int | None = None


class GoalStatusRequest(BaseModel):
    status: GoalStatus


class GoalResponse(BaseModel):
    id: str
    user_id: str
    description: str
    type: GoalType
    currency: str
    target_value: str
    start_date: dt.date
    end_date: dt.date
    monthly_income: str
    fixed_expenses: str
    available_per_month: str
    importance: GoalImportance
    priority: int
    strategy: str | None
    monthly_contribution: str
    num_parcela: int
    status: GoalStatus
    created_at: dt.datetime


class GoalProgressResponse(BaseModel):
    goal_id: str
    currency: str
    current: str
    progress: int
    remaining: str
    # None = jamais atteint au rythme actuel (contribution nulle)
    estimated_months: int | None
    months_until_deadline: int
    optimal_monthly_contribution: str
    total_contribution_needed: str


class GoalFeasibilityResponse(BaseModel):
    goal_id: str
    is_achievable: bool
    is_feasible: bool
    monthly_deficit: str
    total_deficit: str
    feasibility_score: int
    is_valid: bool
    errors: list[str]
    warnings: list[str]
    recommendations: list[str]


class GoalConflictsResponse(BaseModel):
    goal_id: str
    has_conflicts: bool
    conflicts: list[str]
    priority_errors: list[str]
    priority_warnings: list[str]
