"""Implicit midpoint time integration.

One time step solves

    x_new = x_old - dt * F((x_old + x_new) / 2)

for the transformed state `x = (ut, vt, gd)` by fixed-point iteration. The
HALF slot of every field holds the midpoint `(x_old + x_new) / 2` of the latest
iterate and is updated by the boundary condition pass after each partial
update. The iteration stops when the total energy of the new iterate matches
the one of the old state to near machine precision, or when the iteration
budget is used up.
"""

from dataclasses import dataclass
from enum import Enum, unique
from typing import Optional

from loguru import logger

from .api import TimeLevel
from .coefficients import GridCoefficients
from .config import ExhaustedPolicy, SolverConfig
from .datastructure import PrognosticState, TransformedState, Workspace
from .diag import check_mass_divergence, relative_bias, total_energy, total_mass
from .jit import advance
from .kernel import continuity_tendency, meridional_wind_tendency, zonal_wind_tendency
from .pole import zero_pole_rows
from .transform import seed_half_level, transform_depth, untransform

OLD, HALF, NEW = TimeLevel.OLD, TimeLevel.HALF, TimeLevel.NEW


class NonConvergenceError(RuntimeError):
    """Raised if the iteration budget is exhausted and this is configured to fail."""


@unique
class IterationStatus(Enum):
    """States of the fixed-point iteration of one time step."""

    SEEDED = "seeded"  #: HALF slot initialized from OLD, first step only
    ITERATING = "iterating"  #: iteration in progress
    CONVERGED = "converged"  #: energy criterion met
    EXHAUSTED = "exhausted"  #: iteration budget reached without convergence


@dataclass
class StepReport:
    """Outcome of one time step.

    Attributes
    ----------
    status : IterationStatus
      Final state of the iteration.
    iterations : int
      Number of iterations performed.
    energy0, mass0 : float
      Total energy and mass of the OLD state.
    energy1, mass1 : float
      Total energy and mass of the last NEW iterate.
    seeded : bool
      True if the HALF slot was seeded from the OLD slot in this step.
    """

    status: IterationStatus
    iterations: int = 0
    energy0: float = float("nan")
    mass0: float = float("nan")
    energy1: float = float("nan")
    mass1: float = float("nan")
    seeded: bool = False

    @property
    def relative_energy_bias(self) -> float:
        """Return `|E1 - E0| * 2 / (E1 + E0)`."""
        return relative_bias(self.energy1, self.energy0)

    @property
    def relative_mass_bias(self) -> float:
        """Return `|M1 - M0| * 2 / (M1 + M0)`."""
        return relative_bias(self.mass1, self.mass0)


class ImplicitMidpointIntegrator:
    """Advance the barotropic equations by one implicit midpoint step.

    Parameters
    ----------
    coefficients : GridCoefficients
      Per-row coefficients of the mesh.
    solver_config : SolverConfig, default=None
      Iteration settings. Defaults to `SolverConfig()`.
    """

    def __init__(
        self,
        coefficients: GridCoefficients,
        solver_config: Optional[SolverConfig] = None,
    ):
        """Initialize integrator."""
        self.coefficients = coefficients
        self.solver_config = SolverConfig() if solver_config is None else solver_config
        self.first_run = True

    def reset(self) -> None:
        """Seed the HALF slot again with the next step, e.g. after new input."""
        self.first_run = True

    def step(
        self,
        state: PrognosticState,
        transformed: TransformedState,
        workspace: Workspace,
        dt: float,
    ) -> StepReport:
        """Compute the NEW slot from the OLD slot.

        The OLD slot is not modified. Committing NEW to OLD is left to the
        caller.

        Arguments
        ---------
        state : PrognosticState
          u, v, gd and ghs. OLD slot must be populated and boundary conditions
          applied.
        transformed : TransformedState
          ut, vt and gdt. OLD slot is computed with the first step.
        workspace : Workspace
          Buffers for tendencies and fluxes.
        dt : float
          Time step in seconds.

        Returns
        -------
        StepReport

        Raises
        ------
        NonConvergenceError
          Raised if the iteration budget is exhausted and
          `solver_config.on_exhausted` is `ExhaustedPolicy.RAISE`.
        MassConservationError
          Raised if the depth tendency does not integrate to zero and
          `solver_config.mass_check` is `Strictness.RAISE`.
        """
        coef = self.coefficients
        cfg = self.solver_config
        report = StepReport(status=IterationStatus.ITERATING)

        if self.first_run:
            report.status = IterationStatus.SEEDED
            report.seeded = True
            seed_half_level(state, transformed)
            zero_pole_rows(*(f.data for f in workspace))
            self.first_run = False

        report.energy0 = total_energy(state, transformed, coef, OLD)
        report.mass0 = total_mass(state, coef, OLD)
        logger.info(
            "energy: {:20.2f}  mass: {:20.2f}", report.energy0, report.mass0
        )

        report.status = IterationStatus.ITERATING
        for iteration in range(1, cfg.max_iterations + 1):
            report.iterations = iteration
            self._iterate(state, transformed, workspace, dt)

            report.energy1 = total_energy(state, transformed, coef, NEW)
            bias = report.relative_energy_bias
            logger.opt(lazy=True).debug(
                "iteration {:3d} energy: {:20.2f}  mass: {:20.2f}  energy bias: {:.16e}",
                lambda: report.iterations,
                lambda: report.energy1,
                lambda: total_mass(state, coef, NEW),
                lambda: bias,
            )
            if bias < cfg.energy_tolerance:
                report.status = IterationStatus.CONVERGED
                break

        if report.status is not IterationStatus.CONVERGED:
            report.status = IterationStatus.EXHAUSTED
            logger.debug(
                "No convergence after {} iterations, energy bias {:.3e}.",
                report.iterations,
                report.relative_energy_bias,
            )
            if cfg.on_exhausted is ExhaustedPolicy.RAISE:
                raise NonConvergenceError(
                    f"Energy bias {report.relative_energy_bias:.3e} after "
                    f"{report.iterations} iterations exceeds {cfg.energy_tolerance:.1e}."
                )

        report.mass1 = total_mass(state, coef, NEW)
        return report

    def _iterate(
        self,
        state: PrognosticState,
        transformed: TransformedState,
        workspace: Workspace,
        dt: float,
    ) -> None:
        """Perform one fixed-point iteration using the HALF slot."""
        coef = self.coefficients

        # geopotential depth
        continuity_tendency(transformed, workspace, coef, HALF)
        check_mass_divergence(workspace, coef, self.solver_config)
        advance(state.gd[OLD], workspace.dgd.data, dt, state.gd[NEW])
        state.gd.apply_bnd_cond(NEW, update_half=True)
        transform_depth(state, transformed, NEW, update_half=True)

        # transformed wind
        zonal_wind_tendency(state, transformed, workspace, coef, HALF)
        meridional_wind_tendency(state, transformed, workspace, coef, HALF)
        advance(transformed.ut[OLD], workspace.dut.data, dt, transformed.ut[NEW])
        advance(transformed.vt[OLD], workspace.dvt.data, dt, transformed.vt[NEW])
        transformed.ut.apply_bnd_cond(NEW, update_half=True)
        transformed.vt.apply_bnd_cond(NEW, update_half=True)

        untransform(state, transformed, NEW, update_half=True)
