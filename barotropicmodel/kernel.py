"""Kernel functions.

Second level functions taking arrays and coefficient vectors, not dataclass
instances, as input. This enables numba to precompile computationally costly
operations. The public functions at the end of the module unpack the
dataclasses and call the kernels.

All stencils are centered second-order differences in index space. They are
evaluated on the rows strictly between the poles only and parallelized over
these rows. The pole rows are handled in :py:mod:`barotropicmodel.pole`.
"""

import numba
import numpy as np

from .api import TimeLevel
from .coefficients import GridCoefficients
from .datastructure import PrognosticState, TransformedState, Workspace
from .pole import pole_divergence


@numba.njit(parallel=True)  # type: ignore
def _mass_flux(
    ut: np.ndarray,
    vt: np.ndarray,
    gdt: np.ndarray,
    cos_lat: np.ndarray,
    gdu: np.ndarray,
    gdv: np.ndarray,
) -> None:  # pragma: no cover
    """Compute the mass fluxes including the longitude halo."""
    nj = cos_lat.shape[0]
    ni_h = gdu.shape[1]
    for j in numba.prange(1, nj - 1):
        jh = j + 1
        for ih in range(ni_h):
            gdu[jh, ih] = ut[jh, ih] * gdt[jh, ih]
            gdv[jh, ih] = vt[jh, ih] * gdt[jh, ih] * cos_lat[j]


@numba.njit(parallel=True)  # type: ignore
def _divergence(
    gdu: np.ndarray,
    gdv: np.ndarray,
    factor_lon: np.ndarray,
    factor_lat: np.ndarray,
    dgd: np.ndarray,
) -> None:  # pragma: no cover
    """Compute the depth tendency on the rows between the poles."""
    nj = factor_lon.shape[0]
    ni = dgd.shape[1] - 2
    for j in numba.prange(1, nj - 1):
        jh = j + 1
        for ih in range(1, ni + 1):
            dgd[jh, ih] = (gdu[jh, ih + 1] - gdu[jh, ih - 1]) * factor_lon[j] + (
                gdv[jh + 1, ih] - gdv[jh - 1, ih]
            ) * factor_lat[j]


@numba.njit(parallel=True)  # type: ignore
def _momentum_flux(
    q: np.ndarray,
    u: np.ndarray,
    v: np.ndarray,
    cos_lat: np.ndarray,
    fu: np.ndarray,
    fv: np.ndarray,
) -> None:  # pragma: no cover
    """Compute the fluxes of `q` including the longitude halo."""
    nj = cos_lat.shape[0]
    ni_h = fu.shape[1]
    for j in numba.prange(1, nj - 1):
        jh = j + 1
        for ih in range(ni_h):
            fu[jh, ih] = q[jh, ih] * u[jh, ih]
            fv[jh, ih] = q[jh, ih] * v[jh, ih] * cos_lat[j]


@numba.njit(parallel=True)  # type: ignore
def _advection(
    q: np.ndarray,
    u: np.ndarray,
    v: np.ndarray,
    fu: np.ndarray,
    fv: np.ndarray,
    cos_lat: np.ndarray,
    factor_lon: np.ndarray,
    factor_lat: np.ndarray,
    dq: np.ndarray,
) -> None:  # pragma: no cover
    """Compute the advection of `q` as mean of flux and advective form.

    Overwrites `dq` on the rows between the poles.
    """
    nj = cos_lat.shape[0]
    ni = dq.shape[1] - 2
    for j in numba.prange(1, nj - 1):
        jh = j + 1
        for ih in range(1, ni + 1):
            dx1 = fu[jh, ih + 1] - fu[jh, ih - 1]
            dy1 = fv[jh + 1, ih] - fv[jh - 1, ih]
            dx2 = u[jh, ih] * (q[jh, ih + 1] - q[jh, ih - 1])
            dy2 = v[jh, ih] * (q[jh + 1, ih] - q[jh - 1, ih]) * cos_lat[j]
            dq[jh, ih] = 0.5 * ((dx1 + dx2) * factor_lon[j] + (dy1 + dy2) * factor_lat[j])


@numba.njit(parallel=True)  # type: ignore
def _coriolis_zonal(
    u: np.ndarray,
    vt: np.ndarray,
    factor_cor: np.ndarray,
    factor_cur: np.ndarray,
    dut: np.ndarray,
) -> None:  # pragma: no cover
    """Subtract the Coriolis and curvature term from `dut`."""
    nj = factor_cor.shape[0]
    ni = dut.shape[1] - 2
    for j in numba.prange(1, nj - 1):
        jh = j + 1
        for ih in range(1, ni + 1):
            f = factor_cor[j] + u[jh, ih] * factor_cur[j]
            dut[jh, ih] -= f * vt[jh, ih]


@numba.njit(parallel=True)  # type: ignore
def _coriolis_meridional(
    u: np.ndarray,
    ut: np.ndarray,
    factor_cor: np.ndarray,
    factor_cur: np.ndarray,
    dvt: np.ndarray,
) -> None:  # pragma: no cover
    """Add the Coriolis and curvature term to `dvt`."""
    nj = factor_cor.shape[0]
    ni = dvt.shape[1] - 2
    for j in numba.prange(1, nj - 1):
        jh = j + 1
        for ih in range(1, ni + 1):
            f = factor_cor[j] + u[jh, ih] * factor_cur[j]
            dvt[jh, ih] += f * ut[jh, ih]


@numba.njit(parallel=True)  # type: ignore
def _pressure_gradient_lon(
    gd: np.ndarray,
    ghs: np.ndarray,
    gdt: np.ndarray,
    factor_lon: np.ndarray,
    dut: np.ndarray,
) -> None:  # pragma: no cover
    """Add the zonal pressure gradient to `dut`."""
    nj = factor_lon.shape[0]
    ni = dut.shape[1] - 2
    for j in numba.prange(1, nj - 1):
        jh = j + 1
        for ih in range(1, ni + 1):
            dut[jh, ih] += (
                (gd[jh, ih + 1] - gd[jh, ih - 1] + ghs[jh, ih + 1] - ghs[jh, ih - 1])
                * factor_lon[j]
                * gdt[jh, ih]
            )


@numba.njit(parallel=True)  # type: ignore
def _pressure_gradient_lat(
    gd: np.ndarray,
    ghs: np.ndarray,
    gdt: np.ndarray,
    factor_lat: np.ndarray,
    cos_lat: np.ndarray,
    dvt: np.ndarray,
) -> None:  # pragma: no cover
    """Add the meridional pressure gradient to `dvt`."""
    nj = factor_lat.shape[0]
    ni = dvt.shape[1] - 2
    for j in numba.prange(1, nj - 1):
        jh = j + 1
        for ih in range(1, ni + 1):
            dvt[jh, ih] += (
                (gd[jh + 1, ih] - gd[jh - 1, ih] + ghs[jh + 1, ih] - ghs[jh - 1, ih])
                * factor_lat[j]
                * cos_lat[j]
                * gdt[jh, ih]
            )


def continuity_tendency(
    transformed: TransformedState,
    workspace: Workspace,
    coef: GridCoefficients,
    level: TimeLevel = TimeLevel.HALF,
) -> None:
    """Compute the geopotential depth tendency `dgd`.

    Input: ut, vt, gdt at `level`
    Intermediate: gdu, gdv
    Output: dgd, including the pole rows
    """
    gdu, gdv, dgd = workspace.gdu.data, workspace.gdv.data, workspace.dgd.data
    _mass_flux(
        transformed.ut[level],
        transformed.vt[level],
        transformed.gdt[level],
        coef.cos_lat,
        gdu,
        gdv,
    )
    _divergence(gdu, gdv, coef.factor_lon, coef.factor_lat, dgd)
    pole_divergence(gdv, coef.factor_lat, dgd)


def advection(
    q: np.ndarray,
    state: PrognosticState,
    workspace: Workspace,
    coef: GridCoefficients,
    out: np.ndarray,
    level: TimeLevel = TimeLevel.HALF,
) -> None:
    """Overwrite `out` with the advection of the transformed variable `q`.

    Input: u, v at `level` and q
    Intermediate: fu, fv
    Output: out
    """
    u, v = state.u[level], state.v[level]
    fu, fv = workspace.fu.data, workspace.fv.data
    _momentum_flux(q, u, v, coef.cos_lat, fu, fv)
    _advection(q, u, v, fu, fv, coef.cos_lat, coef.factor_lon, coef.factor_lat, out)


def coriolis_zonal(
    state: PrognosticState,
    transformed: TransformedState,
    workspace: Workspace,
    coef: GridCoefficients,
    level: TimeLevel = TimeLevel.HALF,
) -> None:
    """Subtract `(f + u tan(lat) / a) * vt` from `dut`.

    Input: u, vt
    Output: dut
    """
    _coriolis_zonal(
        state.u[level],
        transformed.vt[level],
        coef.factor_cor,
        coef.factor_cur,
        workspace.dut.data,
    )


def coriolis_meridional(
    state: PrognosticState,
    transformed: TransformedState,
    workspace: Workspace,
    coef: GridCoefficients,
    level: TimeLevel = TimeLevel.HALF,
) -> None:
    """Add `(f + u tan(lat) / a) * ut` to `dvt`.

    Input: u, ut
    Output: dvt
    """
    _coriolis_meridional(
        state.u[level],
        transformed.ut[level],
        coef.factor_cor,
        coef.factor_cur,
        workspace.dvt.data,
    )


def pressure_gradient_lon(
    state: PrognosticState,
    transformed: TransformedState,
    workspace: Workspace,
    coef: GridCoefficients,
    level: TimeLevel = TimeLevel.HALF,
) -> None:
    """Add the zonal gradient of `gd + ghs` times `gdt` to `dut`.

    Input: gd, ghs, gdt
    Output: dut
    """
    _pressure_gradient_lon(
        state.gd[level],
        state.ghs[None],
        transformed.gdt[level],
        coef.factor_lon,
        workspace.dut.data,
    )


def pressure_gradient_lat(
    state: PrognosticState,
    transformed: TransformedState,
    workspace: Workspace,
    coef: GridCoefficients,
    level: TimeLevel = TimeLevel.HALF,
) -> None:
    """Add the meridional gradient of `gd + ghs` times `gdt * cos(lat)` to `dvt`.

    Input: gd, ghs, gdt
    Output: dvt
    """
    _pressure_gradient_lat(
        state.gd[level],
        state.ghs[None],
        transformed.gdt[level],
        coef.factor_lat,
        coef.cos_lat,
        workspace.dvt.data,
    )


def zonal_wind_tendency(
    state: PrognosticState,
    transformed: TransformedState,
    workspace: Workspace,
    coef: GridCoefficients,
    level: TimeLevel = TimeLevel.HALF,
) -> None:
    """Compute the tendency `dut` of the transformed zonal wind."""
    advection(transformed.ut[level], state, workspace, coef, workspace.dut.data, level)
    coriolis_zonal(state, transformed, workspace, coef, level)
    pressure_gradient_lon(state, transformed, workspace, coef, level)


def meridional_wind_tendency(
    state: PrognosticState,
    transformed: TransformedState,
    workspace: Workspace,
    coef: GridCoefficients,
    level: TimeLevel = TimeLevel.HALF,
) -> None:
    """Compute the tendency `dvt` of the transformed meridional wind."""
    advection(transformed.vt[level], state, workspace, coef, workspace.dvt.data, level)
    coriolis_meridional(state, transformed, workspace, coef, level)
    pressure_gradient_lat(state, transformed, workspace, coef, level)
