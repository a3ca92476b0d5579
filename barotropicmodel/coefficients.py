"""Per-row coefficients of the finite difference operators.

The coefficients only depend on the latitude row and are computed once from the
mesh geometry. Terms with cos(lat) in the denominator are regularized at the
poles by replacing the cosine with a quarter of the cosine at the adjacent
`HALF` latitude.
"""

from dataclasses import dataclass

import numpy as np

from .api import Array, Axis, MeshBase, Stagger


@dataclass(frozen=True, eq=False)
class GridCoefficients:
    """Coefficients of the tendency operators for every `FULL` latitude row.

    Use :py:meth:`from_mesh` to create an instance. The arrays must be treated
    as read only.

    Attributes
    ----------
    cos_lat : Array
      Cosine of latitude, regularized at the poles.
    tan_lat : Array
      Tangent of latitude, at the poles `-/+ 1 / cos_lat`.
    factor_cor : Array
      Coriolis parameter `2 * omega * sin(lat)`.
    factor_cur : Array
      Curvature factor `tan(lat) / radius`.
    factor_lon : Array
      Scaling of centered differences along longitude
      `1 / (2 * dlon * radius * cos_lat)`.
    factor_lat : Array
      Scaling of centered differences along latitude
      `1 / (2 * dlat * radius * cos_lat)`.
    """

    cos_lat: Array
    tan_lat: Array
    factor_cor: Array
    factor_cur: Array
    factor_lon: Array
    factor_lat: Array

    @property
    def num_lat(self) -> int:
        """Return number of latitude rows."""
        return self.cos_lat.shape[0]

    @classmethod
    def from_mesh(cls, mesh: MeshBase, omega: float) -> "GridCoefficients":
        """Compute coefficients from mesh geometry.

        Arguments
        ---------
        mesh : MeshBase
          Equidistant longitude/latitude mesh with poles at the first and last row.
        omega : float
          Angular frequency of the rotating sphere.
        """
        radius = mesh.domain.radius
        dlon = mesh.grid_interval(Axis.LON, Stagger.FULL)
        dlat = mesh.grid_interval(Axis.LAT, Stagger.FULL)
        half_cos_lat = mesh.cos_lat(Stagger.HALF)

        cos_lat = np.array(mesh.cos_lat(Stagger.FULL), dtype=np.float64)
        cos_lat[0] = half_cos_lat[0] * 0.25
        cos_lat[-1] = half_cos_lat[-1] * 0.25

        tan_lat = np.array(mesh.tan_lat(Stagger.FULL), dtype=np.float64)
        tan_lat[0] = -1 / cos_lat[0]
        tan_lat[-1] = 1 / cos_lat[-1]

        return cls(
            cos_lat=cos_lat,
            tan_lat=tan_lat,
            factor_cor=2 * omega * np.asarray(mesh.sin_lat(Stagger.FULL), dtype=np.float64),
            factor_cur=tan_lat / radius,
            factor_lon=1 / (2 * dlon * radius * cos_lat),
            factor_lat=1 / (2 * dlat * radius * cos_lat),
        )
