"""Test the Rossby-Haurwitz initial condition."""
from types import SimpleNamespace

import numpy as np
import pytest

from barotropicmodel import (
    BarotropicModel,
    DomainMismatchError,
    RossbyHaurwitzWave,
    TimeLevel,
    TimeManager,
)
from barotropicmodel.api import DomainBase

OLD = TimeLevel.OLD


class PlaneDomain(DomainBase):
    """Domain without a sphere."""

    @property
    def radius(self):
        return np.inf


@pytest.fixture
def model():
    m = BarotropicModel()
    m.initialize(TimeManager("2000-01-01", "2000-01-01 01:00", 600.0), 32, 17)
    m.populate(RossbyHaurwitzWave())
    return m


class TestRossbyHaurwitzWave:
    """Test RossbyHaurwitzWave class."""

    def test_poles(self, model):
        """Test winds vanish and depth is phi0 at the poles."""
        phi0 = 8e3 * model.parameter.g
        for row in (0, -1):
            assert np.all(model.zonal_wind.interior(OLD)[row] == 0.0)
            assert np.all(model.meridional_wind.interior(OLD)[row] == 0.0)
            assert np.all(model.geopotential_depth.interior(OLD)[row] == phi0)

    def test_surface_geopotential(self, model):
        """Test flat bottom."""
        assert np.all(model.surface_geopotential.data == 0.0)

    def test_positive_depth(self, model):
        """Test geopotential depth is positive."""
        assert np.all(model.geopotential_depth[OLD] > 0.0)

    def test_wind_magnitude(self, model):
        """Test maximum wind speed is twice the wave speed at the equator."""
        speed = np.hypot(model.zonal_wind[OLD], model.meridional_wind[OLD])
        assert speed.max() == pytest.approx(2 * 6.371e6 * 3.924e-6, rel=1e-2)

    def test_symmetry(self, model):
        """Test u and gd are symmetric, v antisymmetric about the equator."""
        u = model.zonal_wind.interior(OLD)
        v = model.meridional_wind.interior(OLD)
        gd = model.geopotential_depth.interior(OLD)
        assert np.allclose(u, u[::-1])
        assert np.allclose(v, -v[::-1], atol=1e-10)
        assert np.allclose(gd, gd[::-1])

    def test_zonal_wavenumber(self, model):
        """Test pattern repeats after a quarter circle for R=4."""
        gd = model.geopotential_depth.interior(OLD)
        assert np.allclose(gd, np.roll(gd, 32 // 4, axis=1))

    def test_bnd_cond_applied(self, model):
        """Test halo is filled."""
        for f in (model.zonal_wind, model.meridional_wind, model.geopotential_depth):
            arr = f[OLD]
            assert np.all(arr[:, 0] == arr[:, -2])
            assert np.all(arr[:, -1] == arr[:, 1])
            assert np.all(arr[0, 1:-1] == f.pole_sign * np.roll(arr[2, 1:-1], -16))

    def test_custom_phi0(self):
        """Test depth offset is configurable."""
        m = BarotropicModel()
        m.initialize(TimeManager("2000-01-01", "2000-01-01", 600.0), 16, 9)
        m.populate(RossbyHaurwitzWave(phi0=1e5))
        assert np.all(m.geopotential_depth.interior(OLD)[0] == 1e5)

    def test_domain_mismatch(self):
        """Test non-sphere domains are rejected."""
        model = SimpleNamespace(domain=PlaneDomain())
        with pytest.raises(DomainMismatchError):
            RossbyHaurwitzWave().populate(model)

    def test_domain_mismatch_is_value_error(self):
        """Test error hierarchy."""
        assert issubclass(DomainMismatchError, ValueError)
