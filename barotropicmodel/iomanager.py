"""Reading and writing fields from and to netCDF files."""

from dataclasses import dataclass, field
from enum import Enum, unique
from pathlib import Path
from typing import Optional, Union

import numpy as np
import xarray
from loguru import logger

from .api import IOManagerBase, MeshBase, TimeLevel, check_fields_exist
from .datastructure import Field
from .timemanager import TimeManager
from .util import seconds_between


@unique
class FileMode(Enum):
    """Direction of data flow of a registered file."""

    INPUT = "input"
    OUTPUT = "output"


@dataclass(eq=False)
class DataFile:
    """File registered with a :py:class:`NetCDFIOManager`.

    Attributes
    ----------
    location : str
      Path of an input file or file name pattern of an output file. The pattern
      is formatted with the keywords `step` and `time`.
    mode : FileMode
      Input or output.
    interval : float
      Output interval in seconds. Ignored for input files.
    fields : list[Field]
      Fields to read or write.
    """

    location: str
    mode: FileMode
    interval: float = 0.0
    fields: list[Field] = field(default_factory=list)
    dataset: Optional[xarray.Dataset] = field(default=None, repr=False)
    last_written: Optional[np.datetime64] = None

    def register_fields(self, *fields: Field) -> "DataFile":
        """Add fields to read or write, returns the file itself."""
        for f in fields:
            if f.name in (g.name for g in self.fields):
                raise ValueError(f"Field {f.name} already registered.")
            self.fields.append(f)
        return self

    @property
    def is_open(self) -> bool:
        """Return True if the file handle is open."""
        return self.dataset is not None


class NetCDFIOManager(IOManagerBase):
    """Manage netCDF input and output of fields.

    Fields are stored without halo as variables named after the field, with
    dimensions `(time, lat, lon)` and coordinates in degrees.

    Parameters
    ----------
    mesh : MeshBase
      Mesh of all fields.
    time_manager : TimeManager
      Provides the model time for reading and writing.
    """

    def __init__(self, mesh: MeshBase, time_manager: TimeManager):
        """Initialize manager without any files."""
        self.mesh = mesh
        self.time_manager = time_manager
        self.files: list[DataFile] = []

    def register_input_file(self, path: Union[str, Path]) -> DataFile:
        """Register an existing file to read from."""
        file = DataFile(location=str(path), mode=FileMode.INPUT)
        self.files.append(file)
        return file

    def register_output_file(self, pattern: str, interval: float) -> DataFile:
        """Register a file name pattern to write to every `interval` seconds.

        Example
        -------
        >>> io.register_output_file("output.{step:05d}.nc", 3600.0)
        """
        if interval < 0:
            raise ValueError(f"Output interval must not be negative. Got {interval}.")
        file = DataFile(location=pattern, mode=FileMode.OUTPUT, interval=interval)
        self.files.append(file)
        return file

    def remove_file(self, file: DataFile) -> None:
        """Close the file and forget about it."""
        self._check_registered(file)
        self.close(file)
        self.files.remove(file)

    def open(self, file: DataFile) -> None:
        """Open an input file for reading."""
        self._check_registered(file)
        if file.mode is not FileMode.INPUT:
            raise ValueError("Only input files can be opened for reading.")
        if not file.is_open:
            file.dataset = xarray.open_dataset(file.location)

    def close(self, file: DataFile) -> None:
        """Close the file handle if it is open."""
        if file.is_open:
            file.dataset.close()
            file.dataset = None

    def read(self, file: DataFile, level: TimeLevel = TimeLevel.OLD) -> None:
        """Read all registered fields of an open input file.

        Fields with time levels are written to slot `level`, single level
        fields to their only slot. Halos are not updated. If a variable has a
        time dimension, the entry nearest to the current model time is used.

        Raises
        ------
        ValueError
          Raised if the file is not open, a field is missing, or a variable does
          not match the mesh.
        """
        self._check_registered(file)
        if not file.is_open:
            raise ValueError(f"File {file.location} is not open.")
        ds = file.dataset
        check_fields_exist((f.name for f in file.fields), ds.data_vars)

        current_time = self.time_manager.current_time
        for f in file.fields:
            da = ds[f.name]
            if "time" in da.dims:
                da = da.sel(time=current_time, method="nearest")
            if "lat" in da.coords:
                da = da.sortby("lat")
            if set(da.dims) == {"lat", "lon"}:
                da = da.transpose("lat", "lon")
            if da.shape != (self.mesh.num_lat, self.mesh.num_lon):
                raise ValueError(
                    f"Variable {f.name} has shape {da.shape}, "
                    f"expected {(self.mesh.num_lat, self.mesh.num_lon)}."
                )
            f.interior(level)[...] = da.values
        logger.info("Read {} from {}.", ", ".join(f.name for f in file.fields), file.location)

    def is_due(self, file: DataFile) -> bool:
        """Return True if the output interval has passed since the last write."""
        if file.last_written is None:
            return True
        elapsed = seconds_between(file.last_written, self.time_manager.current_time)
        return elapsed >= file.interval

    def write(self, file: DataFile, level: TimeLevel = TimeLevel.OLD) -> Path:
        """Write all registered fields at the current model time.

        The file name is the pattern of `file` formatted with the current step
        and time. Existing files are overwritten.

        Returns
        -------
        Path
          Path of the written file.
        """
        self._check_registered(file)
        if file.mode is not FileMode.OUTPUT:
            raise ValueError("Only output files can be written.")
        tm = self.time_manager
        time = tm.current_time
        path = Path(
            file.location.format(step=tm.step, time=np.datetime_as_string(time, unit="s"))
        )
        ds = xarray.Dataset(
            {f.name: f.as_dataarray(level, time=time) for f in file.fields}
        )
        ds.to_netcdf(path)
        file.last_written = time
        logger.info("Wrote {} at {}.", path, time)
        return path

    def _check_registered(self, file: DataFile) -> None:
        if not any(file is f for f in self.files):
            raise ValueError(f"File {file.location} is not registered.")
