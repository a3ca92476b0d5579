"""Treatment of the pole rows.

cos(lat) vanishes at the poles, hence the general stencils are not applied
there. Instead, the divergence at a pole is the mean meridional mass flux
through the adjacent row, applied uniformly to all longitudes. Momentum
tendencies and fluxes are zero at the poles.
"""

from enum import Enum, unique

import numba
import numpy as np


@unique
class RowKind(Enum):
    """Kind of a latitude row.

    The value of a pole is the direction towards the adjacent interior row,
    which is also the sign of the flux entering the pole cell.
    """

    INTERIOR = 0
    POLE_SOUTH = 1
    POLE_NORTH = -1

    @property
    def is_pole(self) -> bool:
        """Return True for the pole rows."""
        return self is not RowKind.INTERIOR

    def row(self, num_lat: int) -> int:
        """Return the index of the pole row."""
        if self is RowKind.POLE_SOUTH:
            return 0
        if self is RowKind.POLE_NORTH:
            return num_lat - 1
        raise ValueError("Interior rows have no unique index.")

    def neighbor(self, num_lat: int) -> int:
        """Return the index of the interior row next to the pole."""
        return self.row(num_lat) + self.value


POLES = (RowKind.POLE_SOUTH, RowKind.POLE_NORTH)


def row_kind(j: int, num_lat: int) -> RowKind:
    """Classify latitude row `j`."""
    if not 0 <= j < num_lat:
        raise IndexError(f"Row {j} outside of 0..{num_lat - 1}.")
    if j == 0:
        return RowKind.POLE_SOUTH
    if j == num_lat - 1:
        return RowKind.POLE_NORTH
    return RowKind.INTERIOR


@numba.njit  # type: ignore
def _row_sum(arr: np.ndarray, jh: int) -> float:  # pragma: no cover
    """Sum a row over all longitudes, excluding the halo."""
    ni = arr.shape[1] - 2
    total = 0.0
    for ih in range(1, ni + 1):
        total += arr[jh, ih]
    return total


def pole_divergence(gdv: np.ndarray, factor_lat: np.ndarray, dgd: np.ndarray) -> None:
    """Set the depth tendency on both pole rows.

    Must be called after the mass flux `gdv` of the rows next to the poles is
    complete. The result is a single value per pole broadcast to all
    longitudes.

    Arguments
    ---------
    gdv : np.ndarray
      Meridional mass flux `vt * gdt * cos_lat`, including the halo.
    factor_lat : np.ndarray
      Scaling of meridional differences per row.
    dgd : np.ndarray
      Depth tendency, including the halo. Only the pole rows are written.
    """
    num_lat = factor_lat.shape[0]
    num_lon = dgd.shape[1] - 2
    for kind in POLES:
        row = kind.row(num_lat)
        flux = _row_sum(gdv, kind.neighbor(num_lat) + 1)
        dgd[row + 1, 1:-1] = kind.value * (flux * (factor_lat[row] / num_lon))


def zero_pole_rows(*arrs: np.ndarray) -> None:
    """Set the pole rows of halo arrays to zero."""
    for arr in arrs:
        arr[1, :] = 0.0
        arr[-2, :] = 0.0
