# parameters.py
"""Configuration store for the adaptive stepsize controller."""

import json
import logging

import yaml

from bigbatch_sgd.exceptions import ConfigurationError

logger = logging.getLogger('bigbatch_sgd')


class StepsizeParameters:
    def __init__(self, initial_params=None):
        """
        Defaults of the backtracking and guard settings; ``initial_params``
        overrides them and may carry extra keys, which are stored untouched.
        """
        self._params = {
            # Shrink factor applied to a rejected trial step, in (0, 1).
            "backtrack_step_size": 0.5,
            # Armijo-Goldstein sufficient-decrease constant, > 0.
            "search_parameter": 0.1,
            # Safety guard for the backtracking loop. ``None`` (or null in a
            # parameter file) restores the unbounded search.
            "max_backtracks": 100,
            # Smallest trial step accepted before giving up; 0 disables it.
            "step_size_floor": 0.0,
        }
        if initial_params:
            self.update(initial_params)

    def __getattr__(self, name):
        """Attribute access for known parameter keys."""
        params = self.__dict__.get("_params")
        if params is not None and name in params:
            return params[name]
        raise AttributeError(
            f"{type(self).__name__!s} object has no attribute {name!r}"
        )

    def __setattr__(self, name, value):
        if name == "_params":
            object.__setattr__(self, name, value)
            return
        params = self.__dict__.get("_params")
        if params is not None and name in params:
            params[name] = value
            return
        object.__setattr__(self, name, value)

    def get(self, key, default=None):
        """Retrieve a parameter value, or return a default if not found."""
        return self._params.get(key, default)

    def set(self, key, value):
        """Set or update a parameter."""
        self._params[key] = value

    def update(self, params):
        """Update multiple parameters at once."""
        self._params.update(params)

    def __contains__(self, key):
        return key in self._params

    def __repr__(self):
        return f"StepsizeParameters({self._params})"

    def to_dict(self):
        """Return a copy of the parameters for serialization."""
        return dict(self._params)


def load_parameters(filename):
    """Load stepsize parameters from a YAML or JSON file.

    The file either holds the parameters at its top level or nests them
    under a ``stepsize`` mapping, e.g.::

        stepsize:
          backtrack_step_size: 0.5
          search_parameter: 0.1
    """
    filename_str = str(filename)
    with open(filename_str, "r") as f:
        if filename_str.endswith((".yaml", ".yml")):
            data = yaml.safe_load(f)
        elif filename_str.endswith(".json"):
            data = json.load(f)
        else:
            logger.error(f"Unsupported file format for: {filename_str}")
            raise ConfigurationError(
                f"Unsupported file format for: {filename_str}"
            )

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Expected a mapping of parameters in {filename_str}, "
            f"got {type(data).__name__}"
        )
    section = data.get("stepsize", data)
    if not isinstance(section, dict):
        raise ConfigurationError(
            f"'stepsize' section in {filename_str} must be a mapping"
        )
    return StepsizeParameters(section)
