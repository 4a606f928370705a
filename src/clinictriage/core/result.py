"""
Result type for explicit success/failure returns.

Repository and messaging ports return ``Result`` so that infrastructure
failures are ordinary values instead of exceptions.
"""

from typing import Any, Callable, Generic, Iterable, List, Optional, TypeVar

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")
F = TypeVar("F")
R = TypeVar("R")


class Result(Generic[T, E]):
    """Success-or-failure container.

    A success may carry ``None`` (e.g. a publish with nothing to return), so
    the outcome is tracked with an explicit flag rather than by which slot
    is filled.
    """

    __slots__ = ("_success", "_value", "_error")

    def __init__(
        self, success: bool, value: Optional[T] = None, error: Optional[E] = None
    ) -> None:
        if success and error is not None:
            raise ValueError("A successful Result cannot carry an error")
        if not success and error is None:
            raise ValueError("A failed Result must carry an error")
        self._success = success
        self._value = value
        self._error = error

    @classmethod
    def ok(cls, value: Optional[T] = None) -> "Result[T, E]":
        return cls(True, value=value)

    @classmethod
    def fail(cls, error: E) -> "Result[T, E]":
        return cls(False, error=error)

    @classmethod
    def from_callable(
        cls, func: Callable[[], T], *catch: type
    ) -> "Result[T, Exception]":
        """Run ``func`` and capture the listed exception types as a failure."""
        catch_types = tuple(catch) or (Exception,)
        try:
            return cls.ok(func())
        except catch_types as exc:  # type: ignore[misc]
            return cls.fail(exc)

    @staticmethod
    def combine(results: Iterable["Result[Any, E]"]) -> "Result[List[Any], E]":
        """Collect all values, or return the first failure."""
        values: List[Any] = []
        for result in results:
            if result.is_failure:
                return Result.fail(result.error)
            values.append(result.value)
        return Result.ok(values)

    @property
    def is_success(self) -> bool:
        return self._success

    @property
    def is_failure(self) -> bool:
        return not self._success

    @property
    def value(self) -> Optional[T]:
        if not self._success:
            raise ValueError("Cannot read value of a failed Result")
        return self._value

    @property
    def error(self) -> E:
        if self._success:
            raise ValueError("Cannot read error of a successful Result")
        return self._error  # type: ignore[return-value]

    def unwrap(self) -> Optional[T]:
        """Return the value or raise the error (wrapped if not an exception)."""
        if self._success:
            return self._value
        if isinstance(self._error, BaseException):
            raise self._error
        raise ValueError(f"Called unwrap() on a failed Result: {self._error!r}")

    def value_or(self, default: T) -> Optional[T]:
        return self._value if self._success else default

    def map(self, func: Callable[[Optional[T]], U]) -> "Result[U, E]":
        if self._success:
            return Result.ok(func(self._value))
        return Result.fail(self._error)

    def flat_map(self, func: Callable[[Optional[T]], "Result[U, E]"]) -> "Result[U, E]":
        if self._success:
            return func(self._value)
        return Result.fail(self._error)

    def map_error(self, func: Callable[[E], F]) -> "Result[T, F]":
        if self._success:
            return Result.ok(self._value)
        return Result.fail(func(self._error))  # type: ignore[arg-type]

    def match(
        self,
        on_success: Callable[[Optional[T]], R],
        on_failure: Callable[[E], R],
    ) -> R:
        if self._success:
            return on_success(self._value)
        return on_failure(self._error)  # type: ignore[arg-type]

    def on_success(self, func: Callable[[Optional[T]], Any]) -> "Result[T, E]":
        if self._success:
            func(self._value)
        return self

    def on_failure(self, func: Callable[[E], Any]) -> "Result[T, E]":
        if not self._success:
            func(self._error)  # type: ignore[arg-type]
        return self

    def __repr__(self) -> str:
        if self._success:
            return f"Result.ok({self._value!r})"
        return f"Result.fail({self._error!r})"
