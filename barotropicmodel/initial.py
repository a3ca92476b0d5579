"""Analytic initial conditions."""

from typing import Any, Optional

import numpy as np

from .api import InitialConditionBase, Stagger, TimeLevel
from .grid import SphereDomain


class DomainMismatchError(ValueError):
    """Raised if an initial condition does not fit to the domain of the model."""


class RossbyHaurwitzWave(InitialConditionBase):
    r"""Rossby-Haurwitz wave on the sphere.

    Test case 6 of Williamson et al. (1992), "A standard test set for numerical
    approximations to the shallow water equations in spherical geometry",
    J. Comput. Phys. 102, 211-224. The wave pattern moves eastward without
    change of shape in the non-divergent barotropic limit.

    .. math::
       u = a\omega (\cos\phi + R \sin^2\phi \cos^{R-1}\phi \cos R\lambda
           - \cos^{R+1}\phi \cos R\lambda)

       v = -a\omega R \cos^{R-1}\phi \sin\phi \sin R\lambda

       gd = \phi_0 + a^2 (A(\phi) + B(\phi) \cos R\lambda + C(\phi) \cos 2R\lambda)

    The surface geopotential is zero. At the poles, both wind components vanish
    and the geopotential depth is `phi0`.

    Parameters
    ----------
    wavenumber : int, default=4
      Zonal wavenumber R.
    omega : float, default=3.924e-6
      Angular velocity of the wave in 1/s.
    phi0 : float, default=None
      Geopotential depth offset in m^2/s^2. Defaults to `g * 8000` with the
      gravitational acceleration of the model.
    """

    def __init__(
        self, wavenumber: int = 4, omega: float = 3.924e-6, phi0: Optional[float] = None
    ):
        """Initialize wave parameters."""
        self.wavenumber = wavenumber
        self.omega = omega
        self.phi0 = phi0

    def populate(self, model: Any) -> None:
        """Write the wave into the OLD slot of `model` and apply boundary conditions.

        Raises
        ------
        DomainMismatchError
          Raised if the model domain is not a sphere.
        """
        if not isinstance(model.domain, SphereDomain):
            raise DomainMismatchError(
                "Rossby-Haurwitz test case is only valid in sphere domain."
            )
        mesh = model.mesh
        a = model.domain.radius
        rot = model.parameter.omega
        phi0 = 8e3 * model.parameter.g if self.phi0 is None else self.phi0
        R = self.wavenumber
        w = self.omega

        # interior rows only, cos(lat) vanishes at the poles
        cos_lat = mesh.cos_lat(Stagger.FULL)[1:-1, np.newaxis]
        sin_lat = mesh.sin_lat(Stagger.FULL)[1:-1, np.newaxis]
        lon = mesh.lon(Stagger.FULL)[np.newaxis, :]
        cos_r = cos_lat**R
        cos2 = cos_lat**2
        cos_rlon = np.cos(R * lon)

        u = a * w * (
            cos_lat
            + R * cos_r / cos_lat * sin_lat**2 * cos_rlon
            - cos_r * cos_lat * cos_rlon
        )
        v = -a * w * R * cos_r / cos_lat * sin_lat * np.sin(R * lon)

        A = (w * rot + 0.5 * w**2) * cos2 + 0.25 * w**2 * cos_r**2 * (
            (R + 1) * cos2 + (2 * R**2 - R - 2) - 2 * R**2 / cos2
        )
        B = (
            2
            * (w * rot + w**2)
            * cos_r
            * ((R**2 + 2 * R + 2) - (R + 1) ** 2 * cos2)
            / ((R + 1) * (R + 2))
        )
        C = 0.25 * w**2 * cos_r**2 * ((R + 1) * cos2 - (R + 2))
        gd = phi0 + a**2 * (A + B * cos_rlon + C * np.cos(2 * R * lon))

        level = TimeLevel.OLD
        for field, values, pole_value in (
            (model.zonal_wind, u, 0.0),
            (model.meridional_wind, v, 0.0),
            (model.geopotential_depth, gd, phi0),
        ):
            interior = field.interior(level)
            interior[1:-1] = values
            interior[0] = pole_value
            interior[-1] = pole_value
            field.apply_bnd_cond(level)

        model.surface_geopotential.data[...] = 0.0
        model.surface_geopotential.apply_bnd_cond()
