# bigbatch_sgd/steppers/base.py
"""Abstract base class for stepsize policies."""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np


class BaseStepsizePolicy(ABC):
    """Base interface for classes adapting the stepsize of big-batch SGD."""

    @abstractmethod
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
    ):
        """Advance ``iterate`` and adapt ``step_size`` for one iteration.

        Parameters
        ----------
        function : DecomposableFunction
            Objective being minimized.
        step_size : float
            Step size proposed for this iteration.
        iterate : np.ndarray
            Current parameters; updated in place.
        gradient : np.ndarray
            Gradient estimate at ``iterate``; updated in place.
        gradient_norm : float
            Squared norm of the averaged gradient.
        sample_variance : float
            Gradient noise estimate of the previous iteration.
        offset : int
            Index of the first sample of this iteration's batch.
        batch_size : int
            Batch size of the outer algorithm.
        backtracking_batch_size : int
            Number of samples used for the line search and the curvature and
            variance estimates.
        reset : bool
            Reset request from the driver.

        Returns
        -------
        StepsizeUpdate
            The new step size, gradient norm and sample variance.
        """

    def __repr__(self) -> str:  # pragma: no cover - simple utility
        params = ", ".join(
            f"{k.lstrip('_')}={v!r}"
            for k, v in vars(self).items()
            if not isinstance(v, np.ndarray) and v is not None
        )
        return f"{self.__class__.__name__}({params})"
