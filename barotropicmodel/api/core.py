"""Core API."""
from abc import ABC, abstractmethod
from enum import Enum, IntEnum, unique
from typing import Any, Iterable

import numpy as np

from .typing import Array


@unique
class Stagger(Enum):
    """Placement of grid points along one axis.

    `FULL` points are the cell centers, `HALF` points the cell edges in between.
    """

    FULL = "full"  #: cell centers
    HALF = "half"  #: cell edges


@unique
class Axis(IntEnum):
    """Horizontal axes of a longitude/latitude mesh."""

    LON = 0  #: zonal axis, periodic
    LAT = 1  #: meridional axis, bounded by the poles


@unique
class TimeLevel(IntEnum):
    """Logical time slots of a double-buffered field.

    The value of the enumerator is the index of the slot along the first axis of
    the field data. `OLD` holds the committed state, `HALF` the midpoint estimate
    and `NEW` the state under construction.
    """

    OLD = 0  #: committed state of the current step
    HALF = 1  #: midpoint estimate used to evaluate tendencies
    NEW = 2  #: iterate of the state at the next step


class DomainBase(ABC):
    """Base class for geometric domains."""

    @property
    @abstractmethod
    def radius(self) -> float:  # pragma: no cover
        """Return radius of the domain."""
        ...


class MeshBase(ABC):
    """Base class for structured longitude/latitude meshes."""

    domain: DomainBase

    @abstractmethod
    def num_grid(self, axis: Axis, stagger: Stagger) -> int:  # pragma: no cover
        """Return number of grid points along `axis`."""
        ...

    @abstractmethod
    def grid_interval(self, axis: Axis, stagger: Stagger) -> float:  # pragma: no cover
        """Return grid spacing in radians along `axis`."""
        ...

    @abstractmethod
    def index_range(self, axis: Axis, stagger: Stagger) -> range:  # pragma: no cover
        """Return the index range of grid points along `axis`."""
        ...

    @abstractmethod
    def lon(self, stagger: Stagger) -> Array:  # pragma: no cover
        """Return longitudes in radians."""
        ...

    @abstractmethod
    def lat(self, stagger: Stagger) -> Array:  # pragma: no cover
        """Return latitudes in radians."""
        ...

    def cos_lat(self, stagger: Stagger) -> Array:
        """Return cosine of latitude for every row."""
        return np.cos(self.lat(stagger))

    def sin_lat(self, stagger: Stagger) -> Array:
        """Return sine of latitude for every row."""
        return np.sin(self.lat(stagger))

    def tan_lat(self, stagger: Stagger) -> Array:
        """Return tangent of latitude for every row."""
        return np.tan(self.lat(stagger))


class TimeManagerBase(ABC):
    """Base class for time stepping bookkeeping."""

    @property
    @abstractmethod
    def step_size(self) -> float:  # pragma: no cover
        """Return time step in seconds."""
        ...

    @property
    @abstractmethod
    def current_time(self) -> np.datetime64:  # pragma: no cover
        """Return the model time."""
        ...

    @abstractmethod
    def advance(self) -> None:  # pragma: no cover
        """Move model time one step forward."""
        ...

    @abstractmethod
    def is_finished(self) -> bool:  # pragma: no cover
        """Return True if the end time is reached."""
        ...


class IOManagerBase(ABC):
    """Base class for reading and writing fields."""

    @abstractmethod
    def register_input_file(self, path: Any) -> Any:  # pragma: no cover
        """Register a file to read from."""
        ...

    @abstractmethod
    def register_output_file(self, pattern: str, interval: float) -> Any:  # pragma: no cover
        """Register a file pattern to write to."""
        ...

    @abstractmethod
    def open(self, file: Any) -> None:  # pragma: no cover
        """Open the file handle."""
        ...

    @abstractmethod
    def close(self, file: Any) -> None:  # pragma: no cover
        """Close the file handle."""
        ...

    @abstractmethod
    def read(self, file: Any, level: TimeLevel) -> None:  # pragma: no cover
        """Read all registered fields into the time slot `level`."""
        ...

    @abstractmethod
    def write(self, file: Any, level: TimeLevel) -> None:  # pragma: no cover
        """Write the time slot `level` of all registered fields."""
        ...


class InitialConditionBase(ABC):
    """Base class for providers of initial conditions."""

    @abstractmethod
    def populate(self, model: Any) -> None:  # pragma: no cover
        """Write u, v, gd and ghs into the OLD slot of `model` and apply boundary conditions."""
        ...


def check_fields_exist(names: Iterable[str], available: Iterable[str]) -> None:
    """Raise ValueError if any of `names` is not in `available`."""
    missing = sorted(set(names) - set(available))
    if missing:
        raise ValueError(f"Fields not available: {', '.join(missing)}.")
