"""Square root transform of the prognostic variables.

With `gdt = sqrt(gd)`, `ut = u * gdt` and `vt = v * gdt` the total energy is a
quadratic form of `(ut, vt, gd)`, which the implicit midpoint scheme conserves.
The depth must be positive, this is not checked.
"""

import numpy as np

from .api import TimeLevel
from .datastructure import PrognosticState, TransformedState
from .jit import sqrt_into, divide_into


def transform_depth(
    state: PrognosticState,
    transformed: TransformedState,
    level: TimeLevel,
    update_half: bool = False,
) -> None:
    """Compute `gdt = sqrt(gd)` at `level` and fill the halo."""
    sqrt_into(state.gd[level], transformed.gdt[level])
    transformed.gdt.apply_bnd_cond(level, update_half)


def transform(
    state: PrognosticState,
    transformed: TransformedState,
    level: TimeLevel,
    update_half: bool = False,
) -> None:
    """Compute `gdt`, `ut` and `vt` from `gd`, `u` and `v` at `level`."""
    transform_depth(state, transformed, level, update_half)
    gdt = transformed.gdt.interior(level)
    for src, dst in ((state.u, transformed.ut), (state.v, transformed.vt)):
        np.multiply(src.interior(level), gdt, out=dst.interior(level))
        dst.apply_bnd_cond(level, update_half)


def untransform(
    state: PrognosticState,
    transformed: TransformedState,
    level: TimeLevel,
    update_half: bool = False,
) -> None:
    """Compute `u = ut / gdt` and `v = vt / gdt` at `level` and fill the halo."""
    gdt = transformed.gdt[level]
    for src, dst in ((transformed.ut, state.u), (transformed.vt, state.v)):
        divide_into(src[level], gdt, dst[level])
    for dst in (state.u, state.v):
        dst.apply_bnd_cond(level, update_half)


def seed_half_level(state: PrognosticState, transformed: TransformedState) -> None:
    """Initialize the HALF slot with the OLD state.

    Also computes the transformed variables of the OLD slot. Used before the
    first step, when no midpoint estimate of a previous step exists.
    """
    for f in state.time_level_fields():
        f.copy_level(TimeLevel.OLD, TimeLevel.HALF)
    transform(state, transformed, TimeLevel.OLD)
    for f in transformed:
        f.copy_level(TimeLevel.OLD, TimeLevel.HALF)
