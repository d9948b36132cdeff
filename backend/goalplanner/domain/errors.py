from __future__ import annotations


class DomainError(ValueError):
    """Base des erreurs métier. Hérite de ValueError (contrat historique)."""


# -------- Money --------

class MoneyError(DomainError):
    pass


class InvalidAmount(MoneyError):
    pass


class InvalidCurrency(MoneyError):
    pass


class InsufficientAmount(MoneyError):
    pass


class InvalidFactor(MoneyError):
    pass


class CurrencyMismatch(MoneyError):
    pass


class InvalidFormat(MoneyError):
    pass


# -------- Goal --------

class GoalError(DomainError):
    pass


class EmptyDescription(GoalError):
    pass


class InvalidGoalType(GoalError):
    pass


class InvalidPriority(GoalError):
    pass


class InvalidDateRange(GoalError):
    pass


class InvalidGoalField(GoalError):
    pass


class GoalNotFound(GoalError):
    def __init__(self, goal_id: str) -> None:
        super().__init__(f"Goal not found: {goal_id}")
        self.goal_id = goal_id


# -------- Profile / repo --------

class ProfileError(DomainError):
    pass


class RepositoryError(Exception):
    """Erreur d'infrastructure (stockage). Pas une erreur métier."""
