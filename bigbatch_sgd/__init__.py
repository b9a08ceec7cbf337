"""Adaptive stepsize control for big-batch stochastic gradient descent.

The package provides the stepsize policy consumed by an outer optimizer
driver. Batch-size growth, data iteration and termination live in the
driver.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from bigbatch_sgd.exceptions import (
    BigBatchSGDError,
    ConfigurationError,
    InvalidBatchError,
    LineSearchError,
    ShapeMismatchError,
)
from bigbatch_sgd.functions import DecomposableFunction
from bigbatch_sgd.logging_config import setup_logging
from bigbatch_sgd.parameters import StepsizeParameters, load_parameters
from bigbatch_sgd.steppers import (
    AdaptiveStepsize,
    StepsizeUpdate,
    backtracking_line_search,
)

try:
    __version__ = version("bigbatch-sgd")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

__all__ = [
    "AdaptiveStepsize",
    "StepsizeUpdate",
    "backtracking_line_search",
    "DecomposableFunction",
    "StepsizeParameters",
    "load_parameters",
    "setup_logging",
    "BigBatchSGDError",
    "ConfigurationError",
    "InvalidBatchError",
    "LineSearchError",
    "ShapeMismatchError",
]
