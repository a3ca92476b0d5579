"""Barotropic shallow water model on the sphere."""

from pathlib import Path
from typing import Optional, Union

from loguru import logger

from .api import InitialConditionBase, TimeLevel
from .coefficients import GridCoefficients
from .config import SolverConfig
from .datastructure import Field, Parameter, PrognosticState, TransformedState, Workspace
from .grid import Mesh, SphereDomain
from .integrate import ImplicitMidpointIntegrator, StepReport
from .iomanager import DataFile, NetCDFIOManager
from .timemanager import TimeManager


class BarotropicModel:
    """Barotropic model on an unstaggered longitude/latitude mesh.

    The prognostic variables zonal wind `u`, meridional wind `v` and
    geopotential depth `gd` are integrated in time with the energy conserving
    implicit midpoint scheme of :py:class:`ImplicitMidpointIntegrator`.

    Parameters
    ----------
    parameter : Parameter, default=None
      Physical parameters. Defaults to `Parameter()`.
    solver_config : SolverConfig, default=None
      Settings of the iteration. Defaults to `SolverConfig()`.

    Example
    -------
    >>> model = BarotropicModel()
    >>> model.initialize(TimeManager("2000-01-01", "2000-01-02", 60.0), 128, 64)
    >>> model.populate(RossbyHaurwitzWave())
    >>> model.run()
    """

    def __init__(
        self,
        parameter: Optional[Parameter] = None,
        solver_config: Optional[SolverConfig] = None,
    ):
        """Create model. Call :py:meth:`initialize` before use."""
        self.parameter = Parameter() if parameter is None else parameter
        self.solver_config = SolverConfig() if solver_config is None else solver_config
        self.time_manager: Optional[TimeManager] = None
        self.io: Optional[NetCDFIOManager] = None
        self._domain: Optional[SphereDomain] = None
        self._mesh: Optional[Mesh] = None
        self._coefficients: Optional[GridCoefficients] = None
        self.state: Optional[PrognosticState] = None
        self.transformed: Optional[TransformedState] = None
        self.workspace: Optional[Workspace] = None
        self.integrator: Optional[ImplicitMidpointIntegrator] = None
        self._last_report: Optional[StepReport] = None

    def initialize(self, time_manager: TimeManager, num_lon: int, num_lat: int) -> None:
        """Set up mesh, coefficients and fields.

        Arguments
        ---------
        time_manager : TimeManager
          Provides the time step and the end of the integration.
        num_lon : int
          Number of grid points along longitude. Must be even.
        num_lat : int
          Number of grid points along latitude, including both poles.
        """
        self.time_manager = time_manager
        self._domain = SphereDomain(self.parameter.radius)
        self._mesh = Mesh(self._domain, num_lon, num_lat)
        self.io = NetCDFIOManager(self._mesh, time_manager)
        self._coefficients = GridCoefficients.from_mesh(self._mesh, self.parameter.omega)
        self.state = PrognosticState.create(self._mesh)
        self.transformed = TransformedState.create(self._mesh)
        self.workspace = Workspace.create(self._mesh)
        self.integrator = ImplicitMidpointIntegrator(
            self._coefficients, self.solver_config
        )
        self._last_report = None
        logger.info(
            "Initialized {}x{} mesh, time step {} s.",
            num_lon,
            num_lat,
            time_manager.step_size,
        )

    def load_input(self, path: Union[str, Path]) -> None:
        """Read u, v, gd and ghs from a netCDF file into the OLD slot."""
        self._check_initialized()
        file = self.io.register_input_file(path)
        file.register_fields(*self.state)
        self.io.open(file)
        try:
            self.io.read(file, TimeLevel.OLD)
        finally:
            self.io.remove_file(file)
        self._apply_bnd_cond()
        self.integrator.reset()

    def populate(self, provider: InitialConditionBase) -> None:
        """Fill the OLD slot by an initial condition provider."""
        self._check_initialized()
        provider.populate(self)
        self.integrator.reset()

    def step_once(self, dt: float) -> StepReport:
        """Compute the NEW slot from the OLD slot with time step `dt`.

        The OLD slot is not modified, call :py:meth:`commit` to accept the step.
        """
        self._check_initialized()
        self._last_report = self.integrator.step(
            self.state, self.transformed, self.workspace, dt
        )
        return self._last_report

    def commit(self) -> None:
        """Make the NEW slot of all prognostic and transformed fields the OLD slot."""
        self._check_initialized()
        for f in self.state.time_level_fields():
            f.commit()
        for f in self.transformed:
            f.commit()

    def run(
        self, output_pattern: str = "output.{step:05d}.nc", output_interval: float = 3600.0
    ) -> None:
        """Integrate until the time manager is finished.

        The initial state and every state reached after `output_interval`
        seconds are written to files named by `output_pattern`, see
        :py:meth:`NetCDFIOManager.register_output_file`.
        """
        self._check_initialized()
        tm = self.time_manager
        file = self.io.register_output_file(output_pattern, output_interval)
        file.register_fields(*self.state)
        try:
            self._output(file)
            while not tm.is_finished():
                self.step_once(tm.step_size)
                tm.advance()
                self.commit()
                self._output(file)
        finally:
            self.io.remove_file(file)

    def _output(self, file: DataFile) -> None:
        if self.io.is_due(file):
            self.io.write(file, TimeLevel.OLD)

    def _apply_bnd_cond(self) -> None:
        for f in self.state.time_level_fields():
            f.apply_bnd_cond(TimeLevel.OLD)
        self.state.ghs.apply_bnd_cond()

    def _check_initialized(self) -> None:
        if self.state is None:
            raise RuntimeError("Model is not initialized. Call initialize first.")

    @property
    def domain(self) -> SphereDomain:
        """Return the domain of the model."""
        return self._domain

    @property
    def mesh(self) -> Mesh:
        """Return the mesh of the model."""
        return self._mesh

    @property
    def coefficients(self) -> GridCoefficients:
        """Return the per-row coefficients of the operators."""
        return self._coefficients

    @property
    def last_report(self) -> Optional[StepReport]:
        """Return the report of the last time step."""
        return self._last_report

    @property
    def zonal_wind(self) -> Field:
        """Return zonal wind field `u`."""
        return self.state.u

    @property
    def meridional_wind(self) -> Field:
        """Return meridional wind field `v`."""
        return self.state.v

    @property
    def geopotential_depth(self) -> Field:
        """Return geopotential depth field `gd`."""
        return self.state.gd

    @property
    def surface_geopotential(self) -> Field:
        """Return surface geopotential field `ghs`."""
        return self.state.ghs
