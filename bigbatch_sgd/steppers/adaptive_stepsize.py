"""Adaptive stepsize policy for big-batch SGD.

The stepsize is derived from a curvature estimate of the quadratic model
between consecutive iterates and from the sample variance of per-sample
gradients, as described in De et al., "Big Batch SGD: Automated Inference
using Adaptive Batch Sizes" (arXiv:1610.05792). Each update is bracketed by
two Armijo-Goldstein backtracking searches.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from bigbatch_sgd.exceptions import (
    ConfigurationError,
    InvalidBatchError,
    ShapeMismatchError,
)
from bigbatch_sgd.functions import validate_sample_range
from bigbatch_sgd.parameters import StepsizeParameters
from bigbatch_sgd.steppers.base import BaseStepsizePolicy
from bigbatch_sgd.steppers.line_search import backtracking_line_search

logger = logging.getLogger('bigbatch_sgd')


def l2_norm(x: np.ndarray) -> float:
    """Induced 2-norm of a matrix, Euclidean norm of a vector.

    A matrix with a single row or column is treated as a vector; both
    definitions agree there.
    """
    if x.ndim == 2 and min(x.shape) > 1:
        return float(np.linalg.norm(x, 2))
    return float(np.linalg.norm(x))


@dataclass(frozen=True)
class StepsizeUpdate:
    """Scalars produced by one :meth:`AdaptiveStepsize.update` call."""

    step_size: float
    gradient_norm: float
    sample_variance: float
    curvature: float
    step_size_decay: float


class AdaptiveStepsize(BaseStepsizePolicy):
    """Non-monotone stepsize scheme driven by curvature and noise estimates.

    The instance remembers the iterate produced by its last update, so one
    controller belongs to one optimizer run and its updates must be issued
    sequentially.
    """

    def __init__(
        self,
        backtrack_step_size: float = 0.5,
        search_parameter: float = 0.1,
        max_backtracks: int | None = 100,
        step_size_floor: float = 0.0,
    ) -> None:
        self.backtrack_step_size = backtrack_step_size
        self.search_parameter = search_parameter
        self.max_backtracks = max_backtracks
        self.step_size_floor = step_size_floor
        self._previous_iterate: np.ndarray | None = None

    @classmethod
    def from_parameters(cls, params) -> "AdaptiveStepsize":
        """Build a controller from a :class:`StepsizeParameters` or a dict."""
        if not isinstance(params, StepsizeParameters):
            params = StepsizeParameters(params)
        return cls(
            backtrack_step_size=params.get("backtrack_step_size"),
            search_parameter=params.get("search_parameter"),
            max_backtracks=params.get("max_backtracks"),
            step_size_floor=params.get("step_size_floor"),
        )

    @property
    def backtrack_step_size(self) -> float:
        """Shrink factor applied to rejected trial steps."""
        return self._backtrack_step_size

    @backtrack_step_size.setter
    def backtrack_step_size(self, value: float) -> None:
        value = float(value)
        if not 0.0 < value < 1.0:
            raise ConfigurationError(
                f"backtrack_step_size must lie in (0, 1), got {value}"
            )
        self._backtrack_step_size = value

    @property
    def search_parameter(self) -> float:
        """Sufficient-decrease constant of the line search."""
        return self._search_parameter

    @search_parameter.setter
    def search_parameter(self, value: float) -> None:
        value = float(value)
        if not value > 0.0:
            raise ConfigurationError(
                f"search_parameter must be positive, got {value}"
            )
        self._search_parameter = value

    @property
    def max_backtracks(self) -> int | None:
        return self._max_backtracks

    @max_backtracks.setter
    def max_backtracks(self, value: int | None) -> None:
        if value is not None:
            value = int(value)
            if value < 0:
                raise ConfigurationError(
                    f"max_backtracks must be non-negative, got {value}"
                )
        self._max_backtracks = value

    @property
    def step_size_floor(self) -> float:
        return self._step_size_floor

    @step_size_floor.setter
    def step_size_floor(self, value: float) -> None:
        value = float(value)
        if value < 0.0:
            raise ConfigurationError(
                f"step_size_floor must be non-negative, got {value}"
            )
        self._step_size_floor = value

    @property
    def previous_iterate(self) -> np.ndarray | None:
        """Iterate stored by the last update, ``None`` before the first one."""
        return self._previous_iterate

    def backtracking(
        self,
        function,
        step_size: float,
        iterate: np.ndarray,
        gradient: np.ndarray,
        gradient_norm: float,
        offset: int,
        backtracking_batch_size: int,
    ) -> float:
        """Run the line search with this controller's settings."""
        return backtracking_line_search(
            function,
            step_size,
            iterate,
            gradient,
            gradient_norm,
            offset,
            backtracking_batch_size,
            backtrack_step_size=self._backtrack_step_size,
            search_parameter=self._search_parameter,
            max_backtracks=self._max_backtracks,
            step_size_floor=self._step_size_floor,
        )

    def _check_arguments(
        self,
        function,
        iterate: np.ndarray,
        gradient: np.ndarray,
        offset: int,
        batch_size: int,
        backtracking_batch_size: int,
    ) -> int:
        num_functions = validate_sample_range(
            function, offset, backtracking_batch_size
        )
        if batch_size < 0:
            raise InvalidBatchError(
                f"Batch size must be non-negative, got {batch_size}.",
                offset=offset,
                batch_size=batch_size,
                num_functions=num_functions,
            )
        # Rejected up front even when the variance of this call turns out to
        # be 0, so that no update is left half applied.
        if batch_size == 1 and batch_size < num_functions:
            raise InvalidBatchError(
                "A batch size of 1 leaves the mini-batch variance term "
                "undefined; use at least 2 samples.",
                offset=offset,
                batch_size=batch_size,
                num_functions=num_functions,
            )
        if gradient.shape != iterate.shape:
            raise ShapeMismatchError("gradient", iterate.shape, gradient.shape)
        previous = self._previous_iterate
        if previous is not None and previous.shape != iterate.shape:
            raise ShapeMismatchError("iterate", previous.shape, iterate.shape)
        return num_functions

    def update(
        self,
        function,
        step_size: float,
        iterate: np.ndarray,
        gradient: np.ndarray,
        gradient_norm: float,
        sample_variance: float,
        offset: int,
        batch_size: int,
        backtracking_batch_size: int,
        reset: bool = False,
    ) -> StepsizeUpdate:
        """Perform one adaptive stepsize iteration.

        ``iterate`` is moved along ``-gradient`` and ``gradient`` is replaced
        by the sum of the per-sample gradients at the new iterate over
        ``[offset, offset + backtracking_batch_size)``. The incoming
        ``sample_variance`` is superseded by the estimate computed on that
        batch. ``reset`` is accepted for interface compatibility and has no
        effect.

        Returns
        -------
        StepsizeUpdate
            New step size, squared norm of the averaged gradient and sample
            variance, together with the curvature and decay used.

        Raises
        ------
        InvalidBatchError
            If the sample range or batch size cannot be used.
        ShapeMismatchError
            If ``gradient`` or the stored iterate do not match ``iterate``.
        LineSearchError
            If a backtracking guard trips.
        """
        num_functions = self._check_arguments(
            function, iterate, gradient, offset, batch_size,
            backtracking_batch_size,
        )
        if reset:
            logger.debug("Reset requested; the stored iterate is kept.")

        step_size = self.backtracking(
            function, step_size, iterate, gradient, gradient_norm, offset,
            backtracking_batch_size,
        )

        iterate -= step_size * gradient

        if self._previous_iterate is None:
            self._previous_iterate = np.zeros_like(iterate)
        previous = self._previous_iterate

        function_gradient = np.empty_like(iterate)
        function_gradient_prev = np.empty_like(iterate)
        grad_prev_iterate = np.empty_like(iterate)

        function.gradient(iterate, offset, gradient, 1)
        function.gradient(previous, offset, grad_prev_iterate, 1)

        # Running mean of the per-sample gradients; the mean over the first
        # j + 1 samples uses weight 1 / j for the newest sample.
        variance = 0.0
        mean = gradient.copy()
        for j in range(1, backtracking_batch_size):
            function.gradient(iterate, offset + j, function_gradient, 1)
            updated_mean = mean + (function_gradient - mean) / j

            variance += l2_norm(function_gradient - mean) * l2_norm(
                function_gradient - updated_mean
            )

            mean = updated_mean
            gradient += function_gradient

            function.gradient(previous, offset + j, function_gradient_prev, 1)
            grad_prev_iterate += function_gradient_prev

        sample_variance = variance
        averaged = gradient / backtracking_batch_size
        gradient_norm = l2_norm(averaged) ** 2

        # Curvature of the quadratic model between the two iterates. A zero
        # step gives 0/0, in which case the curvature counts as 0.
        delta_iterate = iterate - previous
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            curvature = np.float64(
                np.vdot(delta_iterate, gradient - grad_prev_iterate)
            ) / np.float64(l2_norm(delta_iterate) ** 2)
        if np.isfinite(curvature):
            curvature = float(curvature)
        else:
            logger.debug("Curvature estimate is not finite; using 0.")
            curvature = 0.0

        self._previous_iterate = iterate.copy()

        step_size_decay = 0.0
        if gradient_norm and sample_variance and batch_size and curvature:
            if batch_size < num_functions:
                step_size_decay = (
                    1.0
                    - (sample_variance / (batch_size - 1))
                    / (batch_size * gradient_norm)
                ) / curvature
            else:
                step_size_decay = 1.0 / curvature

        # Stepsize smoothing.
        ratio = batch_size / num_functions
        step_size = step_size * (1.0 - ratio) + step_size_decay * ratio

        logger.debug(
            "Adaptive stepsize: curvature=%.6e, sample_variance=%.6e, "
            "gradient_norm=%.6e, decay=%.6e, blended step=%.6e",
            curvature,
            sample_variance,
            gradient_norm,
            step_size_decay,
            step_size,
        )

        step_size = self.backtracking(
            function, step_size, iterate, gradient, gradient_norm, offset,
            backtracking_batch_size,
        )

        return StepsizeUpdate(
            step_size=step_size,
            gradient_norm=gradient_norm,
            sample_variance=sample_variance,
            curvature=curvature,
            step_size_decay=step_size_decay,
        )
