"""Conservation diagnostics.

Area weighted global sums used to monitor the integration. None of them feeds
back into the model state.
"""

import numba
import numpy as np
from loguru import logger

from ..api import TimeLevel
from ..coefficients import GridCoefficients
from ..config import SolverConfig, Strictness
from ..datastructure import PrognosticState, TransformedState, Workspace
from ..jit import weighted_sum, weighted_abs_sum


class MassConservationError(RuntimeError):
    """Raised if the depth tendency does not integrate to zero."""


@numba.njit  # type: ignore
def _total_energy(
    ut: np.ndarray,
    vt: np.ndarray,
    gd: np.ndarray,
    ghs: np.ndarray,
    cos_lat: np.ndarray,
) -> float:  # pragma: no cover
    nj = cos_lat.shape[0]
    ni = gd.shape[1] - 2
    total = 0.0
    for j in range(nj):
        jh = j + 1
        for ih in range(1, ni + 1):
            h = gd[jh, ih] + ghs[jh, ih]
            total += (ut[jh, ih] ** 2 + vt[jh, ih] ** 2 + h**2) * cos_lat[j]
    return total


def total_energy(
    state: PrognosticState,
    transformed: TransformedState,
    coef: GridCoefficients,
    level: TimeLevel,
) -> float:
    """Return `sum((ut^2 + vt^2 + (gd + ghs)^2) * cos_lat)` over all cells."""
    return _total_energy(
        transformed.ut[level],
        transformed.vt[level],
        state.gd[level],
        state.ghs[None],
        coef.cos_lat,
    )


def total_mass(state: PrognosticState, coef: GridCoefficients, level: TimeLevel) -> float:
    """Return `sum(gd * cos_lat)` over all cells."""
    return weighted_sum(state.gd[level], coef.cos_lat)


def relative_bias(new: float, old: float) -> float:
    """Return `|new - old| * 2 / (new + old)`, zero if both are equal."""
    if new == old:
        return 0.0
    return abs(new - old) * 2 / (new + old)


def mass_divergence(workspace: Workspace, coef: GridCoefficients) -> float:
    """Return the area weighted sum of the depth tendency.

    The discrete divergence theorem requires this sum to vanish up to rounding.
    """
    return weighted_sum(workspace.dgd.data, coef.cos_lat)


def check_mass_divergence(
    workspace: Workspace, coef: GridCoefficients, solver_config: SolverConfig
) -> float:
    """Verify that the depth tendency conserves mass.

    The tolerance is `solver_config.mass_tolerance` scaled by
    `max(1, sum(|dgd * cos_lat|))`.

    Returns
    -------
    float
      The area weighted sum of the depth tendency, NaN if the check is off.

    Raises
    ------
    MassConservationError
      Raised if the sum exceeds the tolerance and `solver_config.mass_check` is
      `Strictness.RAISE`.
    """
    if solver_config.mass_check is Strictness.OFF:
        return float("nan")
    residual = mass_divergence(workspace, coef)
    scale = max(1.0, weighted_abs_sum(workspace.dgd.data, coef.cos_lat))
    if abs(residual) >= solver_config.mass_tolerance * scale:
        msg = (
            f"Depth tendency does not conserve mass: sum(dgd * cos_lat) = "
            f"{residual:.3e}, scale {scale:.3e}."
        )
        if solver_config.mass_check is Strictness.RAISE:
            raise MassConservationError(msg)
        logger.warning(msg)
    return residual
