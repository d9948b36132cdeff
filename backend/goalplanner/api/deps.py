from __future__ import annotations

from functools import lru_cache

from goalplanner.engine.goal_calculation import GoalCalculationService
from goalplanner.engine.goal_recommendation import GoalRecommendationService
from goalplanner.engine.goal_validation import GoalValidationService
from goalplanner.repositories.in_memory_goal_repository import InMemoryGoalRepository
from goalplanner.services.event_bus import InMemoryEventBus
from goalplanner.settings import Settings, get_settings


@lru_cache
def get_app_settings() -> Settings:
    return get_settings()


@lru_cache
def get_goal_repo() -> InMemoryGoalRepository:
    # V0: stockage en mémoire (reset à chaque redémarrage)
    return InMemoryGoalRepository()


@lru_cache
def get_event_bus() -> InMemoryEventBus:
    return InMemoryEventBus()


@lru_cache
def get_calculation_service() -> GoalCalculationService:
    return GoalCalculationService()


@lru_cache
def get_validation_service() -> GoalValidationService:
    return GoalValidationService()


@lru_cache
def get_recommendation_service() -> GoalRecommendationService:
    return GoalRecommendationService()


def reset_caches() -> None:
    for fn in (
        get_app_settings,
        get_goal_repo,
        get_event_bus,
        get_calculation_service,
        get_validation_service,
        get_recommendation_service,
    ):
        fn.cache_clear()
