from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from goalplanner.api.deps import get_app_settings, get_goal_repo, get_recommendation_service
from goalplanner.api.mappers.goal_mapper import recommendation_to_out
from goalplanner.api.schemas.recommendations import RecommendationRequest, RecommendationResponse
from goalplanner.domain.errors import DomainError
from goalplanner.domain.money import Money
from goalplanner.domain.profile import FinancialProfile
from goalplanner.services.goal_use_cases import GetGoalsUseCase, GoalFilters

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/recommendations", tags=["recommendations"])


@router.post("", response_model=RecommendationResponse)
async def recommend_goals(payload: RecommendationRequest) -> RecommendationResponse:
    currency = payload.currency or get_app_settings().default_currency

    try:
        profile = FinancialProfile(
            monthly_income=Money(payload.monthly_income, currency),
            fixed_expenses=Money(payload.fixed_expenses, currency),
            available_per_month=Money(payload.available_per_month, currency),
            current_savings=Money(payload.current_savings, currency),
            age=payload.age,
            risk_tolerance=payload.risk_tolerance,
        )
    except DomainError as e:
        raise HTTPException(status_code=422, detail=str(e))

    existing = []
    if payload.user_id is not None:
        result = await GetGoalsUseCase(get_goal_repo()).execute(GoalFilters(user_id=payload.user_id))
        if result.is_failure():
            logger.error("Could not load goals of user %s: %s", payload.user_id, result.error)
            raise HTTPException(status_code=500, detail="Internal error")
        existing = result.unwrap()

    service = get_recommendation_service()
    recs = service.generate_goal_recommendations(profile, existing)

    return RecommendationResponse(
        recommendations=[
            recommendation_to_out(r, service.validate_recommendation_feasibility(r, profile))
            for r in recs
        ]
    )
