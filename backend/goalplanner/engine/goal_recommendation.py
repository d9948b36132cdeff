from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
import logging
from typing import Callable, Sequence

from goalplanner.domain.goal import Goal, GoalImportance, GoalType
from goalplanner.domain.money import Money
from goalplanner.domain.profile import (
    FinancialProfile,
    GoalRecommendation,
    GoalTimeline,
    RecommendationFeasibility,
    RecommendationType,
    RiskTolerance,
)
from goalplanner.engine.goal_calculation import ceil_decimal, round_half_up

logger = logging.getLogger(__name__)

RETIREMENT_AGE = 65
MIN_YEARS_TO_RETIREMENT = 20
RETIREMENT_INCOME_SHARE = Decimal("0.15")
VACATION_INCOME_SHARE = Decimal("0.5")

# part du revenu mensuel par type de meta
_INCOME_SHARE: dict[RecommendationType, Decimal] = {
    RecommendationType.EMERGENCY_FUND: Decimal("0.15"),
    RecommendationType.HOUSE_PURCHASE: Decimal("0.25"),
}
_DEFAULT_INCOME_SHARE = Decimal("0.10")

# bornes (min, max) en mois; None = pas de borne
_TIMELINE_BOUNDS: dict[RecommendationType, tuple[int | None, int | None]] = {
    RecommendationType.EMERGENCY_FUND: (None, 12),
    RecommendationType.RETIREMENT: (120, None),
    RecommendationType.HOUSE_PURCHASE: (36, 120),
    RecommendationType.INVESTMENT: (24, 60),
}
_DEFAULT_TIMELINE_BOUNDS = (6, 24)

_IMPORTANCE_RANK = {
    GoalImportance.ALTA: 3,
    GoalImportance.MEDIA: 2,
    GoalImportance.BAIXA: 1,
}

_EMERGENCY_KEYWORDS = ("emergência", "emergencia")


def _coerce_type(goal_type: RecommendationType | str) -> RecommendationType | None:
    try:
        return RecommendationType(goal_type)
    except ValueError:
        return None


def income_share(goal_type: RecommendationType | str, risk_tolerance: RiskTolerance | str) -> Decimal:
    t = _coerce_type(goal_type)
    risk = RiskTolerance(risk_tolerance)

    if t == RecommendationType.RETIREMENT:
        return Decimal("0.20") if risk == RiskTolerance.CONSERVADOR else Decimal("0.15")
    if t == RecommendationType.INVESTMENT:
        return Decimal("0.30") if risk == RiskTolerance.AGRESSIVO else Decimal("0.20")
    return _INCOME_SHARE.get(t, _DEFAULT_INCOME_SHARE)


def optimal_goal_value(
    monthly_income: Money,
    months: int,
    goal_type: RecommendationType | str,
    risk_tolerance: RiskTolerance | str = RiskTolerance.MODERADO,
) -> Money:
    share = income_share(goal_type, risk_tolerance)
    total = monthly_income.amount * share * months
    return Money(round_half_up(total), monthly_income.currency)


def has_emergency_fund(goals: Sequence[Goal]) -> bool:
    """
    Heuristique sur la description, pas de sous-type structurel.
    "emergência" ne compte que sur une meta economia; "emergencia" (sans accent)
    compte pour n'importe quel type, compra compris.
    """
    for g in goals:
        desc = g.description.lower()
        accented, plain = _EMERGENCY_KEYWORDS
        if (g.type == GoalType.ECONOMIA and accented in desc) or plain in desc:
            return True
    return False


def has_goal_tagged(goals: Sequence[Goal], goal_type: RecommendationType) -> bool:
    return any(g.type.value == goal_type.value for g in goals)


# -------- sizing --------

def emergency_fund_value(profile: FinancialProfile) -> Money:
    months = 6 if profile.current_savings.is_zero() else 3
    return profile.fixed_expenses.multiply(months)


def retirement_value(profile: FinancialProfile) -> Money:
    years = max(RETIREMENT_AGE - profile.age, MIN_YEARS_TO_RETIREMENT)
    total = profile.monthly_income.amount * RETIREMENT_INCOME_SHARE * 12 * years
    return Money(round_half_up(total), profile.monthly_income.currency)


def investment_value(profile: FinancialProfile) -> Money:
    return optimal_goal_value(
        profile.monthly_income, 24, RecommendationType.INVESTMENT, profile.risk_tolerance
    )


def house_purchase_value(profile: FinancialProfile) -> Money:
    return optimal_goal_value(profile.monthly_income, 60, RecommendationType.HOUSE_PURCHASE)


def vacation_value(profile: FinancialProfile) -> Money:
    return profile.monthly_income.multiply(VACATION_INCOME_SHARE)


@dataclass(frozen=True)
class RecommendationRule:
    """
    Une règle = (prédicat, dimensionnement).
    `applies` reçoit le profil et les metas existantes; `size` renvoie la valeur cible.
    """
    type: RecommendationType
    applies: Callable[[FinancialProfile, Sequence[Goal]], bool]
    size: Callable[[FinancialProfile], Money]
    priority: int
    importance: GoalImportance
    description: str


DEFAULT_RULES: tuple[RecommendationRule, ...] = (
    RecommendationRule(
        type=RecommendationType.EMERGENCY_FUND,
        applies=lambda p, goals: not has_emergency_fund(goals),
        size=emergency_fund_value,
        priority=1,
        importance=GoalImportance.ALTA,
        description="Fundo de emergência para 3-6 meses de despesas",
    ),
    RecommendationRule(
        type=RecommendationType.RETIREMENT,
        applies=lambda p, goals: p.age > 30 and not has_goal_tagged(goals, RecommendationType.RETIREMENT),
        size=retirement_value,
        priority=2,
        importance=GoalImportance.ALTA,
        description="Planejamento para aposentadoria",
    ),
    RecommendationRule(
        type=RecommendationType.INVESTMENT,
        applies=lambda p, goals: not has_goal_tagged(goals, RecommendationType.INVESTMENT),
        size=investment_value,
        priority=3,
        importance=GoalImportance.MEDIA,
        description="Portfólio de investimentos diversificado",
    ),
    RecommendationRule(
        type=RecommendationType.HOUSE_PURCHASE,
        applies=lambda p, goals: p.age < 40 and not has_goal_tagged(goals, RecommendationType.HOUSE_PURCHASE),
        size=house_purchase_value,
        priority=4,
        importance=GoalImportance.ALTA,
        description="Entrada para compra de imóvel",
    ),
    RecommendationRule(
        type=RecommendationType.VACATION,
        applies=lambda p, goals: not has_goal_tagged(goals, RecommendationType.VACATION),
        size=vacation_value,
        priority=5,
        importance=GoalImportance.BAIXA,
        description="Viagem de férias",
    ),
)


class GoalRecommendationService:
    """
    Moteur de règles: propose, dimensionne, planifie et ordonne de nouvelles metas
    à partir d'un FinancialProfile. Les règles sont évaluées dans l'ordre.
    """

    def __init__(self, rules: Sequence[RecommendationRule] | None = None) -> None:
        self._rules = tuple(rules) if rules is not None else DEFAULT_RULES

    @property
    def rules(self) -> tuple[RecommendationRule, ...]:
        return self._rules

    def generate_goal_recommendations(
        self,
        profile: FinancialProfile,
        existing_goals: Sequence[Goal],
    ) -> list[GoalRecommendation]:
        recommendations: list[GoalRecommendation] = []

        for rule in self._rules:
            if not rule.applies(profile, existing_goals):
                logger.debug("Recommendation rule %s skipped", rule.type.value)
                continue

            value = rule.size(profile)
            timeline = self.suggest_goal_timeline(value, profile.available_per_month, rule.type)
            recommendations.append(
                GoalRecommendation(
                    type=rule.type,
                    target_value=value,
                    priority=rule.priority,
                    timeline=timeline,
                    importance=rule.importance,
                    description=rule.description,
                )
            )

        return self.prioritize_goals(recommendations, profile.available_per_month)

    def suggest_goal_timeline(
        self,
        goal_value: Money,
        available_per_month: Money,
        goal_type: RecommendationType | str,
    ) -> GoalTimeline:
        t = _coerce_type(goal_type)
        lower, upper = _TIMELINE_BOUNDS.get(t, _DEFAULT_TIMELINE_BOUNDS)
        value = goal_value.amount
        available = available_per_month.amount

        if available > 0:
            months = int(ceil_decimal(value / available))
        else:
            # rien de disponible: on part de la borne la plus courte du type
            months = lower if lower is not None else (upper or 1)

        if lower is not None:
            months = max(lower, months)
        if upper is not None:
            months = min(upper, months)
        months = max(1, months)

        contribution = Money(ceil_decimal(value / months), goal_value.currency)

        # la contribution ne doit pas dépasser le disponible
        if available > 0 and contribution.amount > available:
            contribution = Money(available, goal_value.currency)
            months = int(ceil_decimal(value / available))

        return GoalTimeline(months=months, monthly_contribution=contribution)

    def calculate_optimal_goal_value(
        self,
        monthly_income: Money,
        timeline: int,
        goal_type: RecommendationType | str,
        risk_tolerance: RiskTolerance | str = RiskTolerance.MODERADO,
    ) -> Money:
        return optimal_goal_value(monthly_income, timeline, goal_type, risk_tolerance)

    def prioritize_goals(
        self,
        goals: Sequence[GoalRecommendation],
        available_per_month: Money | None = None,
    ) -> list[GoalRecommendation]:
        """
        Tri stable, sans modifier l'entrée:
        1) celles qui tiennent dans le budget (si budget fourni)
        2) importance décroissante
        3) priorité croissante
        """
        def key(rec: GoalRecommendation) -> tuple[int, int, int]:
            if available_per_month is not None:
                fits = rec.timeline.monthly_contribution.amount <= available_per_month.amount
                budget_rank = 0 if fits else 1
            else:
                budget_rank = 0
            return (budget_rank, -_IMPORTANCE_RANK[GoalImportance(rec.importance)], rec.priority)

        return sorted(goals, key=key)

    def validate_recommendation_feasibility(
        self,
        recommendation: GoalRecommendation,
        profile: FinancialProfile,
    ) -> RecommendationFeasibility:
        reasons: list[str] = []
        confidence = 100
        contribution = recommendation.timeline.monthly_contribution.amount
        available = profile.available_per_month.amount

        if contribution > available:
            reasons.append("Contribuição mensal excede a renda disponível")
            confidence -= 50

        if recommendation.target_value.amount > profile.monthly_income.amount * 100:
            reasons.append("Valor da meta muito alto em relação à renda")
            confidence -= 30

        if recommendation.timeline.months > 120:
            reasons.append("Prazo muito longo pode afetar a motivação")
            confidence -= 20

        if contribution > available * Decimal("0.8"):
            reasons.append("Pouca margem para outras metas")
            confidence -= 10

        return RecommendationFeasibility(
            is_feasible=confidence >= 60,
            confidence=max(0, confidence),
            reasons=reasons,
        )
