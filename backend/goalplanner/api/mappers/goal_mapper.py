from __future__ import annotations

from goalplanner.api.schemas.goals import GoalResponse
from goalplanner.api.schemas.recommendations import RecommendationFeasibilityOut, RecommendationOut
from goalplanner.domain.goal import Goal
from goalplanner.domain.money import Money
from goalplanner.domain.profile import GoalRecommendation, RecommendationFeasibility


def money_str(m: Money) -> str:
    return f"{m.amount:.2f}"


def goal_to_response(goal: Goal) -> GoalResponse:
    return GoalResponse(
        id=goal.id,
        user_id=goal.user_id,
        description=goal.description,
        type=goal.type,
        currency=goal.target_value.currency,
        target_value=money_str(goal.target_value),
        start_date=goal.start_date,
        end_date=goal.end_date,
        monthly_income=money_str(goal.monthly_income),
        fixed_expenses=money_str(goal.fixed_expenses),
        available_per_month=money_str(goal.available_per_month),
        importance=goal.importance,
        priority=goal.priority,
        strategy=goal.strategy,
        monthly_contribution=money_str(goal.monthly_contribution),
        num_parcela=goal.num_parcela,
        status=goal.status,
        created_at=goal.created_at,
    )


def recommendation_to_out(
    rec: GoalRecommendation,
    feasibility: RecommendationFeasibility,
) -> RecommendationOut:
    return RecommendationOut(
        type=rec.type,
        currency=rec.target_value.currency,
        target_value=money_str(rec.target_value),
        priority=rec.priority,
        months=rec.timeline.months,
        monthly_contribution=money_str(rec.timeline.monthly_contribution),
        importance=rec.importance,
        description=rec.description,
        feasibility=RecommendationFeasibilityOut(
            is_feasible=feasibility.is_feasible,
            confidence=feasibility.confidence,
            reasons=list(feasibility.reasons),
        ),
    )
