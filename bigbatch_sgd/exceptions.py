"""Custom exception types for adaptive stepsize control."""

from __future__ import annotations


class BigBatchSGDError(Exception):
    """Base class for domain-specific errors."""


class ConfigurationError(BigBatchSGDError, ValueError):
    """Raised when a stepsize parameter is outside its admissible range."""


class InvalidBatchError(ConfigurationError):
    """Raised when a batch description cannot be used for an update.

    A batch size of 1 below the dataset size is always rejected, although
    the mini-batch decay only divides by ``batch_size - 1`` when the sample
    variance is non-zero. The check runs before the iterate moves.
    """

    def __init__(
        self,
        message: str,
        *,
        offset: int | None = None,
        batch_size: int | None = None,
        num_functions: int | None = None,
    ) -> None:
        super().__init__(message)
        self.offset = offset
        self.batch_size = batch_size
        self.num_functions = num_functions


class ShapeMismatchError(BigBatchSGDError, ValueError):
    """Raised when iterate, gradient and stored iterate shapes disagree."""

    def __init__(
        self,
        name: str,
        expected: tuple[int, ...],
        actual: tuple[int, ...],
    ) -> None:
        super().__init__(
            f"{name} has shape {actual}, expected {expected}."
        )
        self.name = name
        self.expected = expected
        self.actual = actual


class LineSearchError(BigBatchSGDError):
    """Raised when backtracking cannot satisfy the sufficient-decrease test."""

    def __init__(
        self, step_size: float, backtracks: int, message: str | None = None
    ) -> None:
        if message is None:
            message = (
                f"Backtracking stopped after {backtracks} shrink steps "
                f"(step size {step_size:.3e}) without sufficient decrease."
            )
        super().__init__(message)
        self.step_size = step_size
        self.backtracks = backtracks


__all__ = [
    "BigBatchSGDError",
    "ConfigurationError",
    "InvalidBatchError",
    "ShapeMismatchError",
    "LineSearchError",
]
