from __future__ import annotations

import logging
import math
from decimal import Decimal
from typing import NoReturn

from fastapi import APIRouter, HTTPException, Query, Response

from goalplanner.api.deps import (
    get_app_settings,
    get_calculation_service,
    get_event_bus,
    get_goal_repo,
    get_validation_service,
)
from goalplanner.api.mappers.goal_mapper import goal_to_response, money_str
from goalplanner.api.schemas.goals import (
    AMOUNT_PATTERN,
    GoalConflictsResponse,
    GoalCreateRequest,
    GoalFeasibilityResponse,
    GoalProgressResponse,
    GoalResponse,
    GoalStatusRequest,
    GoalUpdateRequest,
)
from goalplanner.domain.errors import DomainError, GoalNotFound
from goalplanner.domain.goal import Goal, GoalStatus, GoalType
from goalplanner.domain.money import Money
from goalplanner.domain.result import Failure
from goalplanner.services.goal_use_cases import (
    ChangeGoalStatusUseCase,
    CreateGoalRequest,
    CreateGoalUseCase,
    DeleteGoalUseCase,
    GetGoalByIdUseCase,
    GetGoalsUseCase,
    GoalFilters,
    UpdateGoalUseCase,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/goals", tags=["goals"])

_MONEY_FIELDS = (
    "target_value",
    "monthly_income",
    "fixed_expenses",
    "available_per_month",
    "monthly_contribution",
)


def _raise_failure(result: Failure) -> NoReturn:
    err = result.error
    if isinstance(err, GoalNotFound):
        raise HTTPException(status_code=404, detail="Goal not found")
    if isinstance(err, DomainError):
        raise HTTPException(status_code=422, detail=str(err))
    logger.error("Goal use-case failed: %s", err)
    raise HTTPException(status_code=500, detail="Internal error")


async def _load_goal(goal_id: str) -> Goal:
    result = await GetGoalByIdUseCase(get_goal_repo()).execute(goal_id)
    if result.is_failure():
        _raise_failure(result)
    return result.unwrap()


@router.post("", response_model=GoalResponse, status_code=201)
async def create_goal(payload: GoalCreateRequest) -> GoalResponse:
    currency = payload.currency or get_app_settings().default_currency

    # 1) montants (domain)
    try:
        amounts = {name: Money(getattr(payload, name), currency) for name in _MONEY_FIELDS}
    except DomainError as e:
        raise HTTPException(status_code=422, detail=str(e))

    request = CreateGoalRequest(
        user_id=payload.user_id,
        description=payload.description,
        type=payload.type,
        start_date=payload.start_date,
        end_date=payload.end_date,
        importance=payload.importance,
        priority=payload.priority,
        strategy=payload.strategy,
        num_parcela=payload.num_parcela,
        status=payload.status,
        **amounts,
    )

    # 2) créer + stocker (domain rules inside)
    result = await CreateGoalUseCase(get_goal_repo(), get_event_bus()).execute(request)
    if result.is_failure():
        _raise_failure(result)
    return goal_to_response(result.unwrap())


@router.get("", response_model=list[GoalResponse])
async def list_goals(
    user_id: str | None = Query(default=None),
    type: GoalType | None = Query(default=None),
    status: GoalStatus | None = Query(default=None),
) -> list[GoalResponse]:
    filters = GoalFilters(user_id=user_id, type=type, status=status)
    result = await GetGoalsUseCase(get_goal_repo()).execute(filters)
    if result.is_failure():
        _raise_failure(result)
    return [goal_to_response(g) for g in result.unwrap()]


@router.get("/{goal_id}", response_model=GoalResponse)
async def get_goal(goal_id: str) -> GoalResponse:
    return goal_to_response(await _load_goal(goal_id))


@router.patch("/{goal_id}", response_model=GoalResponse)
async def update_goal(goal_id: str, payload: GoalUpdateRequest) -> GoalResponse:
    existing = await _load_goal(goal_id)
    currency = existing.target_value.currency

    changes = payload.model_dump(exclude_unset=True)
    try:
        for name in _MONEY_FIELDS:
            if changes.get(name) is not None:
                changes[name] = Money(changes[name], currency)
    except DomainError as e:
        raise HTTPException(status_code=422, detail=str(e))

    # un champ explicitement à null ne remplace rien (sauf strategy, optionnelle)
    changes = {k: v for k, v in changes.items() if v is not None or k == "strategy"}

    result = await UpdateGoalUseCase(get_goal_repo(), get_event_bus()).execute(goal_id, changes)
    if result.is_failure():
        _raise_failure(result)
    return goal_to_response(result.unwrap())


@router.post("/{goal_id}/status", response_model=GoalResponse)
async def change_goal_status(goal_id: str, payload: GoalStatusRequest) -> GoalResponse:
    result = await ChangeGoalStatusUseCase(get_goal_repo(), get_event_bus()).execute(goal_id, payload.status)
    if result.is_failure():
        _raise_failure(result)
    return goal_to_response(result.unwrap())


@router.delete("/{goal_id}", status_code=204)
async def delete_goal(goal_id: str) -> Response:
    result = await DeleteGoalUseCase(get_goal_repo(), get_event_bus()).execute(goal_id)
    if result.is_failure():
        _raise_failure(result)
    return Response(status_code=204)


@router.get("/{goal_id}/progress", response_model=GoalProgressResponse)
async def goal_progress(
    goal_id: str,
    current: str = Query(default="0", pattern=AMOUNT_PATTERN),
) -> GoalProgressResponse:
    goal = await _load_goal(goal_id)
    calc = get_calculation_service()
    current_value = Money(Decimal(current), goal.target_value.currency)

    eta = calc.calculate_estimated_completion_time(goal, current_value)

    return GoalProgressResponse(
        goal_id=goal.id,
        currency=goal.target_value.currency,
        current=money_str(current_value),
        progress=calc.calculate_progress(goal, current_value),
        remaining=money_str(calc.calculate_remaining_amount(goal, current_value)),
        estimated_months=None if math.isinf(eta) else int(eta),
        months_until_deadline=calc.calculate_months_until_deadline(goal),
        optimal_monthly_contribution=money_str(
            calc.calculate_optimal_monthly_contribution(goal, current_value)
        ),
        total_contribution_needed=money_str(calc.calculate_total_contribution_needed(goal)),
    )


@router.get("/{goal_id}/feasibility", response_model=GoalFeasibilityResponse)
async def goal_feasibility(goal_id: str) -> GoalFeasibilityResponse:
    goal = await _load_goal(goal_id)
    calc = get_calculation_service()
    analysis = calc.analyze_goal_feasibility(goal)
    summary = get_validation_service().get_validation_summary(goal)

    return GoalFeasibilityResponse(
        goal_id=goal.id,
        is_achievable=calc.is_goal_achievable(goal),
        is_feasible=analysis.is_feasible,
        monthly_deficit=money_str(analysis.monthly_deficit),
        total_deficit=money_str(analysis.total_deficit),
        feasibility_score=summary.feasibility_score,
        is_valid=summary.is_valid,
        errors=summary.errors,
        warnings=summary.warnings,
        recommendations=analysis.recommendations + summary.recommendations,
    )


@router.get("/{goal_id}/conflicts", response_model=GoalConflictsResponse)
async def goal_conflicts(goal_id: str) -> GoalConflictsResponse:
    goal = await _load_goal(goal_id)
    validation = get_validation_service()

    result = await GetGoalsUseCase(get_goal_repo()).execute(GoalFilters(user_id=goal.user_id))
    if result.is_failure():
        _raise_failure(result)
    user_goals = result.unwrap()

    others = [g for g in user_goals if g != goal]
    conflicts = validation.validate_goal_conflicts(goal, others)
    priorities = validation.validate_goal_priorities([g for g in user_goals if g.is_active()])

    return GoalConflictsResponse(
        goal_id=goal.id,
        has_conflicts=conflicts.has_conflicts,
        conflicts=conflicts.conflicts,
        priority_errors=priorities.errors,
        priority_warnings=priorities.warnings,
    )
