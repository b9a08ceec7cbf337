import logging

import numpy as np

from bigbatch_sgd.exceptions import LineSearchError

logger = logging.getLogger('bigbatch_sgd')


def backtracking_line_search(
    function,
    step_size: float,
    iterate: np.ndarray,
    gradient: np.ndarray,
    gradient_norm: float,
    offset: int,
    batch_size: int,
    backtrack_step_size: float = 0.5,
    search_parameter: float = 0.1,
    max_backtracks: int | None = None,
    step_size_floor: float = 0.0,
) -> float:
    """Armijo-Goldstein backtracking along the negative gradient.

    The trial step ``step_size`` is multiplied by ``backtrack_step_size``
    until

        f(iterate - step_size * gradient) <= f(iterate)
            - search_parameter * step_size * gradient_norm

    holds, with ``f`` evaluated on samples ``[offset, offset + batch_size)``.

    Parameters
    ----------
    function : DecomposableFunction
        Objective being minimized.
    step_size : float
        Initial step size to try.
    iterate : np.ndarray
        Current parameters. Not modified.
    gradient : np.ndarray
        Search direction is ``-gradient``. Not modified.
    gradient_norm : float
        Squared gradient norm used by the decrease test.
    offset : int
        First sample of the evaluation batch.
    batch_size : int
        Number of samples the objective is evaluated on.
    backtrack_step_size : float, optional
        Shrink factor in ``(0, 1)``, by default ``0.5``.
    search_parameter : float, optional
        Sufficient-decrease constant, by default ``0.1``.
    max_backtracks : int | None, optional
        Number of shrink steps allowed before giving up. ``None`` searches
        without bound.
    step_size_floor : float, optional
        Give up once the trial step drops below this value; ``0`` disables
        the check.

    Returns
    -------
    float
        The accepted step size.

    Raises
    ------
    LineSearchError
        If one of the guards stops the search.
    """
    objective = function.evaluate(iterate, offset, batch_size)

    iterate_update = iterate - step_size * gradient
    objective_update = function.evaluate(iterate_update, offset, batch_size)

    backtracks = 0
    while objective_update > (
        objective - search_parameter * step_size * gradient_norm
    ):
        if max_backtracks is not None and backtracks >= max_backtracks:
            logger.warning(
                "Line search gave up after %d backtracks (step size %.3e, "
                "objective %.6e -> %.6e).",
                backtracks,
                step_size,
                objective,
                objective_update,
            )
            raise LineSearchError(step_size, backtracks)

        step_size *= backtrack_step_size
        backtracks += 1

        if step_size_floor > 0 and step_size < step_size_floor:
            logger.warning(
                "Line search step size %.3e fell below floor %.3e after %d "
                "backtracks.",
                step_size,
                step_size_floor,
                backtracks,
            )
            raise LineSearchError(step_size, backtracks)

        iterate_update = iterate - step_size * gradient
        objective_update = function.evaluate(iterate_update, offset, batch_size)

    logger.debug(
        "Line search accepted step size %.3e after %d backtracks "
        "(objective %.6e -> %.6e).",
        step_size,
        backtracks,
        objective,
        objective_update,
    )
    return step_size
