"""Logic related to creation of grids."""

from dataclasses import dataclass
from functools import lru_cache

import numpy as np

from .api import Array, Axis, DomainBase, MeshBase, Stagger
from .config import config


@dataclass(frozen=True)
class SphereDomain(DomainBase):
    """Surface of a sphere.

    Parameters
    ----------
    sphere_radius : float, default=6.371e6
      Radius of the sphere, defaults to Earths' radius measured in meters.
    """

    sphere_radius: float = 6.371e6

    @property
    def radius(self) -> float:
        """Return radius of the sphere."""
        return self.sphere_radius


@dataclass(frozen=True)
class Mesh(MeshBase):
    """Regular longitude/latitude mesh covering the whole sphere.

    The first and last row of the `FULL` latitudes are located at the south and
    north pole. The `HALF` latitudes are the mid-points between two `FULL`
    latitudes, hence there is one row less. Along the longitude both placements
    have the same number of points, the `HALF` points being shifted eastward by
    half a grid interval. Indices start at zero.

    Arguments
    ---------
    domain : DomainBase
      Domain providing the radius.
    num_lon : int
      Number of grid points along longitude. Must be even.
    num_lat : int
      Number of `FULL` grid points along latitude, including both poles.

    Raises
    ------
    ValueError
      Raised if the number of grid points is too small or `num_lon` is odd.
    """

    domain: DomainBase
    num_lon: int
    num_lat: int

    def __post_init__(self):
        """Validate mesh size."""
        if self.num_lon < 4 or self.num_lon % 2 != 0:
            raise ValueError(
                f"num_lon must be an even number of at least 4. Got {self.num_lon}."
            )
        if self.num_lat < 3:
            raise ValueError(f"num_lat must be at least 3. Got {self.num_lat}.")

    @property
    def radius(self) -> float:
        """Return radius of the underlying domain."""
        return self.domain.radius

    @property
    def dlon(self) -> float:
        """Return grid interval along longitude in radians."""
        return 2 * np.pi / self.num_lon

    @property
    def dlat(self) -> float:
        """Return grid interval along latitude in radians."""
        return np.pi / (self.num_lat - 1)

    def num_grid(self, axis: Axis, stagger: Stagger) -> int:
        """Return number of grid points along `axis`."""
        if axis is Axis.LON:
            return self.num_lon
        if stagger is Stagger.FULL:
            return self.num_lat
        return self.num_lat - 1

    def grid_interval(self, axis: Axis, stagger: Stagger) -> float:
        """Return grid spacing in radians along `axis`.

        The mesh is equidistant, hence the spacing does not depend on the
        placement.
        """
        if axis is Axis.LON:
            return self.dlon
        return self.dlat

    def index_range(self, axis: Axis, stagger: Stagger) -> range:
        """Return the index range of grid points along `axis`."""
        return range(self.num_grid(axis, stagger))

    @property
    def shape(self) -> tuple[int, int]:
        """Return shape of the `FULL` grid as (num_lat, num_lon)."""
        return (self.num_lat, self.num_lon)

    @lru_cache(maxsize=config.lru_cache_maxsize)
    def lon(self, stagger: Stagger) -> Array:
        """Return longitudes in radians."""
        lon = np.arange(self.num_lon) * self.dlon
        if stagger is Stagger.HALF:
            lon = lon + 0.5 * self.dlon
        return lon

    @lru_cache(maxsize=config.lru_cache_maxsize)
    def lat(self, stagger: Stagger) -> Array:
        """Return latitudes in radians."""
        lat = np.linspace(-0.5 * np.pi, 0.5 * np.pi, self.num_lat)
        if stagger is Stagger.HALF:
            lat = lat[:-1] + 0.5 * self.dlat
        return lat

    @lru_cache(maxsize=config.lru_cache_maxsize)
    def cos_lat(self, stagger: Stagger) -> Array:
        """Return cosine of latitude for every row."""
        return super().cos_lat(stagger)

    @lru_cache(maxsize=config.lru_cache_maxsize)
    def sin_lat(self, stagger: Stagger) -> Array:
        """Return sine of latitude for every row."""
        return super().sin_lat(stagger)

    @lru_cache(maxsize=config.lru_cache_maxsize)
    def tan_lat(self, stagger: Stagger) -> Array:
        """Return tangent of latitude for every row."""
        return super().tan_lat(stagger)

    def zonal_spacing(self) -> Array:
        """Return the zonal distance between neighbouring `FULL` points in meters."""
        return self.radius * self.cos_lat(Stagger.FULL) * self.dlon
