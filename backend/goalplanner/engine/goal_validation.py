from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Sequence

from goalplanner.domain.goal import Goal, GoalImportance
from goalplanner.engine.dates import months_between, windows_overlap

# Seuils métier (constantes de module, pas dans le corps des fonctions)
HIGH_VALUE_TARGET = Decimal("50000")
HIGH_VALUE_MIN_MONTHS = 12
AGGRESSIVE_RATIO = Decimal("0.8")
TIMELINE_MAX_RATIO = Decimal("1.5")
LONG_TIMELINE_MONTHS = 60
SAFETY_MARGIN_RATIO = Decimal("0.9")
INTERMEDIATE_GOALS_MONTHS = 36

SCORE_CONTRIBUTION_EXCEEDS_AVAILABLE = 30
SCORE_TOTAL_INSUFFICIENT = 25
SCORE_AGGRESSIVE = 15
SCORE_PRIORITY_OUT_OF_RANGE = 10
SCORE_CAUTION_THRESHOLD = 80


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ConflictValidationResult:
    has_conflicts: bool
    conflicts: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ValidationSummary:
    is_valid: bool
    total_errors: int
    total_warnings: int
    feasibility_score: int
    recommendations: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def _result(errors: list[str], warnings: list[str]) -> ValidationResult:
    return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)


def goal_duration_months(goal: Goal) -> int:
    """Durée de la meta en mois calendaires, au moins 1."""
    return max(1, months_between(goal.start_date, goal.end_date))


def monthly_required(goal: Goal) -> Decimal:
    """Montant mensuel nécessaire pour atteindre l'objectif dans la fenêtre."""
    return goal.target_value.amount / goal_duration_months(goal)


class GoalValidationService:
    """
    Règles métier sur les metas. Ne lève jamais: chaque méthode renvoie un
    rapport (erreurs + avertissements) pour que l'appelant affiche tout d'un coup.
    """

    def validate_goal_feasibility(self, goal: Goal) -> ValidationResult:
        errors: list[str] = []
        warnings: list[str] = []

        contribution = goal.monthly_contribution.amount
        available = goal.available_per_month.amount
        target = goal.target_value.amount

        if contribution > available:
            errors.append(
                f"Contribuição mensal ({contribution}) excede o disponível por mês ({available})"
            )

        total_contribution = contribution * goal.num_parcela
        if total_contribution < target:
            errors.append(
                f"Total de contribuições ({total_contribution}) é insuficiente "
                f"para atingir a meta ({target})"
            )

        months = goal_duration_months(goal)
        if target > HIGH_VALUE_TARGET and months < HIGH_VALUE_MIN_MONTHS:
            warnings.append("Prazo muito curto para uma meta de alto valor. Considere estender o prazo.")

        if monthly_required(goal) > available * AGGRESSIVE_RATIO:
            warnings.append("Meta pode ser muito agressiva para sua capacidade financeira atual.")

        return _result(errors, warnings)

    def validate_goal_conflicts(
        self,
        new_goal: Goal,
        existing_goals: Sequence[Goal],
    ) -> ConflictValidationResult:
        conflicts: list[str] = []
        active_goals = [g for g in existing_goals if g.is_active()]

        total_monthly = sum(
            (g.monthly_contribution.amount for g in active_goals),
            Decimal("0"),
        ) + new_goal.monthly_contribution.amount
        available = new_goal.available_per_month.amount

        if total_monthly > available:
            conflicts.append(
                f"Total de contribuições mensais ({total_monthly}) excede o disponível por mês ({available})"
            )

        overlapping = [
            g for g in active_goals
            if g.type == new_goal.type
            and windows_overlap(g.start_date, g.end_date, new_goal.start_date, new_goal.end_date)
        ]
        if overlapping:
            conflicts.append(f'Existe outra meta do tipo "{new_goal.type.value}" no mesmo período')

        return ConflictValidationResult(has_conflicts=bool(conflicts), conflicts=conflicts)

    def validate_goal_timeline(self, goal: Goal) -> ValidationResult:
        errors: list[str] = []
        warnings: list[str] = []

        if goal.end_date <= goal.start_date:
            errors.append("Data de término deve ser posterior à data de início")

        if monthly_required(goal) > goal.available_per_month.amount * TIMELINE_MAX_RATIO:
            errors.append(
                "Prazo muito curto para o valor da meta. Considere estender o prazo ou reduzir o valor"
            )

        if goal_duration_months(goal) > LONG_TIMELINE_MONTHS:
            warnings.append("Prazo muito longo pode afetar a motivação. Considere metas intermediárias.")

        return _result(errors, warnings)

    def validate_goal_priority(self, goal: Goal) -> ValidationResult:
        errors: list[str] = []
        warnings: list[str] = []

        if goal.priority < 1 or goal.priority > 5:
            errors.append("Prioridade deve estar entre 1 e 5")

        if goal.importance == GoalImportance.ALTA and goal.priority > 2:
            warnings.append("Meta de alta importância deveria ter prioridade 1 ou 2")

        if goal.importance == GoalImportance.BAIXA and goal.priority <= 2:
            warnings.append("Meta de baixa importância não deveria ter prioridade alta")

        return _result(errors, warnings)

    def validate_goal_priorities(self, goals: Sequence[Goal]) -> ValidationResult:
        errors: list[str] = []
        warnings: list[str] = []

        priorities = [g.priority for g in goals]

        seen: set[int] = set()
        duplicates: list[int] = []
        for p in priorities:
            if p in seen and p not in duplicates:
                duplicates.append(p)
            seen.add(p)

        if duplicates:
            errors.append(
                "Prioridades duplicadas encontradas: " + ", ".join(str(p) for p in duplicates)
            )

        expected = list(range(1, len(priorities) + 1))
        if sorted(priorities) != expected:
            warnings.append("Há gaps nas prioridades. Considere reordenar as metas.")

        return _result(errors, warnings)

    def get_validation_summary(self, goal: Goal) -> ValidationSummary:
        reports = (
            self.validate_goal_feasibility(goal),
            self.validate_goal_timeline(goal),
            self.validate_goal_priority(goal),
        )
        errors = [e for r in reports for e in r.errors]
        warnings = [w for r in reports for w in r.warnings]
        is_valid = not errors

        score = self.calculate_feasibility_score(goal)
        months = goal_duration_months(goal)

        recommendations: list[str] = []
        if is_valid:
            if score < SCORE_CAUTION_THRESHOLD:
                recommendations.append(
                    "Meta viável, mas considere ajustes para melhorar a probabilidade de sucesso"
                )
            if goal.monthly_contribution.amount > goal.available_per_month.amount * SAFETY_MARGIN_RATIO:
                recommendations.append(
                    "Considere reduzir a contribuição mensal para ter uma margem de segurança"
                )
            if months > INTERMEDIATE_GOALS_MONTHS:
                recommendations.append("Para metas de longo prazo, considere criar metas intermediárias")

        return ValidationSummary(
            is_valid=is_valid,
            total_errors=len(errors),
            total_warnings=len(warnings),
            feasibility_score=score,
            recommendations=recommendations,
            errors=errors,
            warnings=warnings,
        )

    def calculate_feasibility_score(self, goal: Goal) -> int:
        """Score 0-100: part de 100, retire des points par problème détecté."""
        score = 100
        contribution = goal.monthly_contribution.amount
        available = goal.available_per_month.amount

        if contribution > available:
            score -= SCORE_CONTRIBUTION_EXCEEDS_AVAILABLE

        if contribution * goal.num_parcela < goal.target_value.amount:
            score -= SCORE_TOTAL_INSUFFICIENT

        if monthly_required(goal) > available * AGGRESSIVE_RATIO:
            score -= SCORE_AGGRESSIVE

        if goal.priority < 1 or goal.priority > 5:
            score -= SCORE_PRIORITY_OUT_OF_RANGE

        return max(0, score)
