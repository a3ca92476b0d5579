"""Just-in-time compiled helpers.

All functions operate on two-dimensional arrays including a halo of one grid
point, i.e. mesh cell `(i, j)` is located at `[j + 1, i + 1]`. The halo is never
written, it is filled by the boundary condition pass of the fields.
"""
import numba
import numpy as np


@numba.njit(parallel=True)  # type: ignore
def advance(
    old: np.ndarray, tendency: np.ndarray, dt: float, out: np.ndarray
) -> None:  # pragma: no cover
    """Compute `out = old - dt * tendency` on all mesh cells."""
    nj = out.shape[0] - 2
    ni = out.shape[1] - 2
    for jh in numba.prange(1, nj + 1):
        for ih in range(1, ni + 1):
            out[jh, ih] = old[jh, ih] - dt * tendency[jh, ih]


@numba.njit(parallel=True)  # type: ignore
def sqrt_into(src: np.ndarray, out: np.ndarray) -> None:  # pragma: no cover
    """Compute `out = sqrt(src)` on all mesh cells."""
    nj = out.shape[0] - 2
    ni = out.shape[1] - 2
    for jh in numba.prange(1, nj + 1):
        for ih in range(1, ni + 1):
            out[jh, ih] = np.sqrt(src[jh, ih])


@numba.njit(parallel=True)  # type: ignore
def divide_into(
    numerator: np.ndarray, denominator: np.ndarray, out: np.ndarray
) -> None:  # pragma: no cover
    """Compute `out = numerator / denominator` on all mesh cells."""
    nj = out.shape[0] - 2
    ni = out.shape[1] - 2
    for jh in numba.prange(1, nj + 1):
        for ih in range(1, ni + 1):
            out[jh, ih] = numerator[jh, ih] / denominator[jh, ih]


@numba.njit  # type: ignore
def weighted_sum(arr: np.ndarray, weight: np.ndarray) -> float:  # pragma: no cover
    """Return the sum of `arr * weight[row]` over all mesh cells.

    Rows are summed in ascending order, hence the result is reproducible.
    """
    nj = arr.shape[0] - 2
    ni = arr.shape[1] - 2
    total = 0.0
    for j in range(nj):
        for ih in range(1, ni + 1):
            total += arr[j + 1, ih] * weight[j]
    return total


@numba.njit  # type: ignore
def weighted_abs_sum(arr: np.ndarray, weight: np.ndarray) -> float:  # pragma: no cover
    """Return the sum of `|arr * weight[row]|` over all mesh cells."""
    nj = arr.shape[0] - 2
    ni = arr.shape[1] - 2
    total = 0.0
    for j in range(nj):
        for ih in range(1, ni + 1):
            total += abs(arr[j + 1, ih] * weight[j])
    return total
