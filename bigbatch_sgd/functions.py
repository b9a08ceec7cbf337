"""Interface of the decomposable objective consumed by stepsize policies."""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from bigbatch_sgd.exceptions import InvalidBatchError


class DecomposableFunction(ABC):
    """Objective written as a sum of per-sample terms.

    Samples are addressed by index in ``[0, num_functions())``. Every call
    is synchronous and deterministic for fixed arguments. Stepsize policies
    only rely on the three methods below, so any object providing them can
    be passed where a ``DecomposableFunction`` is expected.
    """

    @abstractmethod
    def evaluate(self, iterate: np.ndarray, offset: int, batch_size: int) -> float:
        """Return the objective over samples ``[offset, offset + batch_size)``."""

    @abstractmethod
    def gradient(
        self,
        iterate: np.ndarray,
        offset: int,
        gradient_out: np.ndarray,
        batch_size: int,
    ) -> None:
        """Write the gradient over the same sample range into ``gradient_out``."""

    @abstractmethod
    def num_functions(self) -> int:
        """Return the number of addressable samples."""


def validate_sample_range(function, offset: int, batch_size: int) -> int:
    """Check that ``[offset, offset + batch_size)`` addresses real samples.

    Returns
    -------
    int
        ``function.num_functions()``, so callers do not query it twice.

    Raises
    ------
    InvalidBatchError
        If the dataset is empty, ``batch_size < 1``, ``offset < 0`` or the
        range runs past the last sample.
    """
    num_functions = int(function.num_functions())
    if num_functions <= 0:
        raise InvalidBatchError(
            "Objective exposes no samples; num_functions() must be positive.",
            offset=offset,
            batch_size=batch_size,
            num_functions=num_functions,
        )
    if batch_size < 1:
        raise InvalidBatchError(
            f"Batch size must be at least 1, got {batch_size}.",
            offset=offset,
            batch_size=batch_size,
            num_functions=num_functions,
        )
    if offset < 0 or offset + batch_size > num_functions:
        raise InvalidBatchError(
            f"Samples [{offset}, {offset + batch_size}) are outside "
            f"[0, {num_functions}).",
            offset=offset,
            batch_size=batch_size,
            num_functions=num_functions,
        )
    return num_functions


__all__ = ["DecomposableFunction", "validate_sample_range"]
