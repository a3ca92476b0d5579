"""Shared fixtures."""
import numpy as np
import pytest

from barotropicmodel import (
    GridCoefficients,
    Mesh,
    Parameter,
    PrognosticState,
    SphereDomain,
    TimeLevel,
    TransformedState,
    Workspace,
)


@pytest.fixture
def mesh():
    return Mesh(SphereDomain(), num_lon=16, num_lat=9)


@pytest.fixture
def coef(mesh):
    return GridCoefficients.from_mesh(mesh, Parameter().omega)


@pytest.fixture
def state(mesh):
    return PrognosticState.create(mesh)


@pytest.fixture
def transformed(mesh):
    return TransformedState.create(mesh)


@pytest.fixture
def workspace(mesh):
    return Workspace.create(mesh)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def random_state(state, rng):
    """Smooth enough random state with positive depth in the OLD slot."""
    level = TimeLevel.OLD
    shape = state.gd.interior(level).shape
    state.u.interior(level)[...] = rng.normal(0.0, 10.0, shape)
    state.v.interior(level)[...] = rng.normal(0.0, 10.0, shape)
    state.gd.interior(level)[...] = 9.8e4 + rng.normal(0.0, 100.0, shape)
    for f in (state.u, state.v):
        f.interior(level)[0] = 0.0
        f.interior(level)[-1] = 0.0
    gd = state.gd.interior(level)
    gd[0] = gd[0].mean()
    gd[-1] = gd[-1].mean()
    for f in state.time_level_fields():
        f.apply_bnd_cond(level)
    state.ghs.apply_bnd_cond()
    return state
