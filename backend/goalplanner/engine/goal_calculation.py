from __future__ import annotations

from dataclasses import dataclass, field
import datetime as dt
from decimal import Decimal, ROUND_CEILING, ROUND_HALF_UP
import math
from typing import Callable

from goalplanner.domain.goal import Goal
from goalplanner.domain.money import Money
from goalplanner.engine.dates import months_between
from goalplanner.settings import default_today

_ZERO = Decimal("0")
_ONE = Decimal("1")
_HUNDRED = Decimal("100")


def round_half_up(value: Decimal) -> Decimal:
    return value.quantize(_ONE, rounding=ROUND_HALF_UP)


def ceil_decimal(value: Decimal) -> Decimal:
    return value.to_integral_value(rounding=ROUND_CEILING)


@dataclass(frozen=True)
class FeasibilityAnalysis:
    is_feasible: bool
    monthly_deficit: Money
    total_deficit: Money
    recommendations: list[str] = field(default_factory=list)


class GoalCalculationService:
    """
    Calculs purs sur une meta: progression, reste à épargner, délai estimé,
    contribution optimale, viabilité.

    `today_provider` fixe la date de référence du calcul "mois restants avant
    l'échéance" (injectable pour des tests déterministes).
    """

    def __init__(self, *, today_provider: Callable[[], dt.date] | None = None) -> None:
        self._today_provider = today_provider or default_today

    def calculate_progress(self, goal: Goal, current_value: Money) -> int:
        """Progression en % entier (0-100)."""
        if current_value.amount <= 0:
            return 0
        if current_value.amount >= goal.target_value.amount:
            return 100
        return int(round_half_up(current_value.amount / goal.target_value.amount * _HUNDRED))

    def calculate_remaining_amount(self, goal: Goal, current_value: Money) -> Money:
        remaining = goal.target_value.amount - current_value.amount
        return Money(max(_ZERO, remaining), goal.target_value.currency)

    def calculate_estimated_completion_time(self, goal: Goal, current_value: Money) -> int | float:
        """Mois restants au rythme actuel. math.inf si aucune contribution."""
        remaining = self.calculate_remaining_amount(goal, current_value)

        if remaining.amount <= 0:
            return 0
        if goal.monthly_contribution.amount <= 0:
            return math.inf

        return int(ceil_decimal(remaining.amount / goal.monthly_contribution.amount))

    def calculate_optimal_monthly_contribution(self, goal: Goal, current_value: Money) -> Money:
        remaining = self.calculate_remaining_amount(goal, current_value)
        currency = goal.target_value.currency

        if remaining.amount <= 0:
            return Money.zero(currency)

        months = self.calculate_months_until_deadline(goal)
        if months <= 0:
            # échéance passée (ou ce mois-ci): tout le reste d'un coup
            return Money(remaining.amount, currency)

        return Money(round_half_up(remaining.amount / months), currency)

    def calculate_total_contribution_needed(self, goal: Goal) -> Money:
        return goal.monthly_contribution.multiply(goal.num_parcela)

    def is_goal_achievable(self, goal: Goal) -> bool:
        return goal.monthly_contribution.amount <= goal.available_per_month.amount

    def calculate_months_until_deadline(self, goal: Goal) -> int:
        today = self._today_provider()
        return max(0, months_between(today, goal.end_date))

    def analyze_goal_feasibility(self, goal: Goal) -> FeasibilityAnalysis:
        recommendations: list[str] = []
        is_feasible = True
        currency = goal.target_value.currency
        nothing_saved = Money.zero(currency)

        # déficit mensal
        monthly_deficit = goal.monthly_contribution.amount - goal.available_per_month.amount
        monthly_deficit_money = Money(max(_ZERO, monthly_deficit), currency)

        if monthly_deficit > 0:
            is_feasible = False
            recommendations.append(
                f"Reduza a contribuição mensal em {monthly_deficit_money.amount} "
                f"ou aumente o disponível por mês"
            )

        # total des contributions vs objectif
        total_contribution = self.calculate_total_contribution_needed(goal)
        total_deficit = goal.target_value.amount - total_contribution.amount
        total_deficit_money = Money(max(_ZERO, total_deficit), currency)

        if total_deficit > 0:
            is_feasible = False
            recommendations.append(
                f"Aumente a contribuição mensal ou estenda o prazo para cobrir {total_deficit_money.amount}"
            )

        # délai réaliste ?
        estimated_months = self.calculate_estimated_completion_time(goal, nothing_saved)
        months_until_deadline = self.calculate_months_until_deadline(goal)

        if estimated_months > months_until_deadline:
            is_feasible = False
            optimal = self.calculate_optimal_monthly_contribution(goal, nothing_saved)
            recommendations.append(
                f"Aumente a contribuição mensal para {optimal.amount} para atingir a meta no prazo"
            )

        return FeasibilityAnalysis(
            is_feasible=is_feasible,
            monthly_deficit=monthly_deficit_money,
            total_deficit=total_deficit_money,
            recommendations=recommendations,
        )
