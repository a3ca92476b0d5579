"""General datastructures.

Classes to hold parameters, fields and the collections of fields which make
up the model state.
"""

from dataclasses import dataclass, fields
from typing import Optional, Iterator

import numpy as np
import xarray

from .api import Array, MeshBase, Stagger, TimeLevel


@dataclass(frozen=True)
class Parameter:
    """Physical parameters of the rotating sphere.

    Parameters
    ----------
    radius : float, default=6.371e6
      Radius of the sphere in m.
    omega : float, default=7.292e-5
      Angular frequency of the rotating sphere in 1/s.
    g : float, default=9.80616
      Gravitational acceleration in m/s^2.
    """

    radius: float = 6.371e6
    omega: float = 7.292e-5
    g: float = 9.80616


class Field:
    """Named array over the mesh with a halo of one grid point.

    Cell `(i, j)` of the mesh is stored at position `[j + 1, i + 1]` of the
    two-dimensional array of a time slot. Fields with time levels store the
    slots :py:class:`TimeLevel` along the first axis, other fields store a
    single slot.

    Parameters
    ----------
    name : str
      Short name, also used as variable name for input and output.
    units : str
      Physical units.
    long_name : str
      Description of the field.
    mesh : MeshBase
      Mesh on which the field is defined.
    time_levels : bool, default=False
      If True, allocate the slots OLD, HALF and NEW.
    pole_sign : float, default=1.0
      Factor applied when reflecting values across a pole into the halo.
      -1 for vector components, 1 for scalars.
    """

    __slots__ = ("name", "units", "long_name", "mesh", "pole_sign", "data")

    def __init__(
        self,
        name: str,
        units: str,
        long_name: str,
        mesh: MeshBase,
        time_levels: bool = False,
        pole_sign: float = 1.0,
    ):
        """Allocate zero initialized data."""
        self.name = name
        self.units = units
        self.long_name = long_name
        self.mesh = mesh
        self.pole_sign = pole_sign
        shape = (mesh.num_lat + 2, mesh.num_lon + 2)
        if time_levels:
            shape = (len(TimeLevel),) + shape
        self.data = np.zeros(shape, dtype=np.float64)

    @property
    def has_time_levels(self) -> bool:
        """Return True if the field has OLD, HALF and NEW slots."""
        return self.data.ndim == 3

    def __getitem__(self, level: Optional[TimeLevel]) -> Array:
        """Return the array of a time slot including the halo.

        Single level fields ignore `level`.
        """
        if not self.has_time_levels:
            return self.data
        if level is None:
            raise ValueError(f"Field {self.name} requires a time level.")
        return self.data[level]

    def interior(self, level: Optional[TimeLevel] = None) -> Array:
        """Return a view of the time slot without the halo."""
        return self[level][1:-1, 1:-1]

    def apply_bnd_cond(
        self, level: Optional[TimeLevel] = None, update_half: bool = False
    ) -> None:
        """Fill the halo of a time slot.

        Along longitude, the halo is filled periodically. The halo rows beyond
        the poles are filled with the row next to the pole on the opposite
        meridian, multiplied by :py:attr:`pole_sign`.

        Arguments
        ---------
        level : TimeLevel, default=None
          Time slot to update. Ignored for single level fields.
        update_half : bool, default=False
          If True, set the HALF slot to the mean of OLD and NEW afterwards.
        """
        arr = self[level]
        nj = arr.shape[0] - 2
        ni = arr.shape[1] - 2
        shift = ni // 2
        arr[0, 1:-1] = self.pole_sign * np.roll(arr[2, 1:-1], -shift)
        arr[nj + 1, 1:-1] = self.pole_sign * np.roll(arr[nj - 1, 1:-1], -shift)
        arr[:, 0] = arr[:, ni]
        arr[:, ni + 1] = arr[:, 1]
        if update_half:
            self.update_half_level()

    def update_half_level(self) -> None:
        """Set the HALF slot to the arithmetic mean of OLD and NEW."""
        np.multiply(
            self.data[TimeLevel.OLD] + self.data[TimeLevel.NEW],
            0.5,
            out=self.data[TimeLevel.HALF],
        )

    def copy_level(self, src: TimeLevel, dst: TimeLevel) -> None:
        """Copy time slot `src` to `dst`, including the halo."""
        self.data[dst] = self.data[src]

    def commit(self) -> None:
        """Make the NEW slot the committed OLD slot.

        The HALF slot is kept and serves as midpoint estimate for the next step.
        """
        self.copy_level(TimeLevel.NEW, TimeLevel.OLD)

    def as_dataarray(
        self, level: Optional[TimeLevel] = None, time: Optional[np.datetime64] = None
    ) -> xarray.DataArray:
        """Return a time slot as :py:class:`xarray.DataArray`.

        The DataArray contains a copy of the data without the halo. Coordinates
        are given in degrees. If `time` is given, a time dimension of length one
        is prepended.
        """
        data = self.interior(level).copy()
        coords = dict(
            lat=("lat", np.rad2deg(self.mesh.lat(Stagger.FULL))),
            lon=("lon", np.rad2deg(self.mesh.lon(Stagger.FULL))),
        )
        dims = ["lat", "lon"]
        if time is not None:
            data = np.expand_dims(data, axis=0)
            coords["time"] = ("time", [time])
            dims.insert(0, "time")
        return xarray.DataArray(
            data=data,
            coords=coords,
            dims=dims,
            name=self.name,
            attrs=dict(units=self.units, long_name=self.long_name),
        )

    def __repr__(self) -> str:
        """Return short description."""
        return f"Field({self.name!r}, units={self.units!r}, shape={self.data.shape})"


class _FieldCollection:
    """Iteration over the fields of a dataclass."""

    def __iter__(self) -> Iterator[Field]:
        """Iterate over all fields."""
        return (getattr(self, f.name) for f in fields(self))  # type: ignore

    def by_name(self) -> dict[str, Field]:
        """Return mapping of field names to fields."""
        return {f.name: f for f in self}


@dataclass
class PrognosticState(_FieldCollection):
    """Prognostic variables and static forcing.

    Attributes
    ----------
    u : Field
      Zonal wind speed.
    v : Field
      Meridional wind speed.
    gd : Field
      Geopotential depth.
    ghs : Field
      Surface geopotential, single level.
    """

    u: Field
    v: Field
    gd: Field
    ghs: Field

    @classmethod
    def create(cls, mesh: MeshBase) -> "PrognosticState":
        """Allocate zero initialized fields on `mesh`."""
        return cls(
            u=Field("u", "m s-1", "zonal wind speed", mesh, True, -1.0),
            v=Field("v", "m s-1", "meridional wind speed", mesh, True, -1.0),
            gd=Field("gd", "m2 s-2", "geopotential depth", mesh, True),
            ghs=Field("ghs", "m2 s-2", "surface geopotential", mesh),
        )

    def time_level_fields(self) -> tuple[Field, Field, Field]:
        """Return the fields with time levels."""
        return (self.u, self.v, self.gd)


@dataclass
class TransformedState(_FieldCollection):
    """Prognostic variables multiplied by the square root of the depth.

    Attributes
    ----------
    ut : Field
      `u * sqrt(gd)`
    vt : Field
      `v * sqrt(gd)`
    gdt : Field
      `sqrt(gd)`
    """

    ut: Field
    vt: Field
    gdt: Field

    @classmethod
    def create(cls, mesh: MeshBase) -> "TransformedState":
        """Allocate zero initialized fields on `mesh`."""
        return cls(
            ut=Field("ut", "m2 s-2", "transformed zonal wind speed", mesh, True, -1.0),
            vt=Field(
                "vt", "m2 s-2", "transformed meridional wind speed", mesh, True, -1.0
            ),
            gdt=Field("gdt", "m s-1", "transformed geopotential depth", mesh, True),
        )


@dataclass
class Workspace(_FieldCollection):
    """Transient buffers, overwritten in every iteration.

    Momentum tendencies and fluxes stay zero on the pole rows, since the
    operators never write them there.

    Attributes
    ----------
    dut, dvt, dgd : Field
      Tendencies of `ut`, `vt` and `gd`.
    gdu, gdv : Field
      Mass fluxes `ut * gdt` and `vt * gdt * cos_lat`.
    fu, fv : Field
      Momentum fluxes `q * u` and `q * v * cos_lat` of the advected variable `q`.
    """

    dut: Field
    dvt: Field
    dgd: Field
    gdu: Field
    gdv: Field
    fu: Field
    fv: Field

    @classmethod
    def create(cls, mesh: MeshBase) -> "Workspace":
        """Allocate zero initialized buffers on `mesh`."""
        return cls(
            dut=Field("dut", "m2 s-3", "transformed zonal wind tendency", mesh),
            dvt=Field("dvt", "m2 s-3", "transformed meridional wind tendency", mesh),
            dgd=Field("dgd", "m2 s-3", "geopotential depth tendency", mesh),
            gdu=Field("gdu", "m3 s-3", "ut * gdt", mesh),
            gdv=Field("gdv", "m3 s-3", "vt * gdt * cos_lat", mesh),
            fu=Field("fu", "m3 s-3", "zonal momentum flux", mesh),
            fv=Field("fv", "m3 s-3", "meridional momentum flux", mesh),
        )
