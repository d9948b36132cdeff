from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")
R = TypeVar("R")


class ResultError(Exception):
    """Levée par unwrap() quand l'erreur portée n'est pas une exception."""

    def __init__(self, error: object) -> None:
        super().__init__(str(error))
        self.error = error


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    def is_success(self) -> bool:
        return True

    def is_failure(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, fn: Callable[[T], U]) -> "Success[U]":
        return Success(fn(self.value))

    def flat_map(self, fn: Callable[[T], "Result[U, E]"]) -> "Result[U, E]":
        return fn(self.value)

    def match(self, on_success: Callable[[T], R], on_failure: Callable[[object], R]) -> R:
        return on_success(self.value)


@dataclass(frozen=True)
class Failure(Generic[E]):
    error: E

    def is_success(self) -> bool:
        return False

    def is_failure(self) -> bool:
        return True

    def unwrap(self):
        if isinstance(self.error, BaseException):
            raise self.error
        raise ResultError(self.error)

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, fn: Callable) -> "Failure[E]":
        return self

    def flat_map(self, fn: Callable) -> "Failure[E]":
        return self

    def match(self, on_success: Callable[[object], R], on_failure: Callable[[E], R]) -> R:
        return on_failure(self.error)


Result = Union[Success[T], Failure[E]]


def success(value: T) -> Success[T]:
    return Success(value)


def failure(error: E) -> Failure[E]:
    return Failure(error)
