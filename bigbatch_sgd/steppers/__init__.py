"""Stepsize policies and line searches for big-batch SGD."""

from .adaptive_stepsize import AdaptiveStepsize, StepsizeUpdate
from .line_search import backtracking_line_search

__all__ = ["AdaptiveStepsize", "StepsizeUpdate", "backtracking_line_search"]
