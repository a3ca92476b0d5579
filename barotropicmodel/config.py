"""Package configuration.

`config` holds package wide settings. Solver policies are collected in
:py:class:`SolverConfig` which is passed to the integrator.
"""

from dataclasses import dataclass
from enum import Enum, unique


@dataclass
class Config:
    """Package wide settings.

    Attributes
    ----------
    lru_cache_maxsize: int
      Size of the caches of mesh queries.
    """

    lru_cache_maxsize: int = 256


config = Config()


@unique
class Strictness(Enum):
    """Reaction on a violated numerical invariant."""

    OFF = "off"  #: invariant is not evaluated
    WARN = "warn"  #: violation is logged as warning
    RAISE = "raise"  #: violation raises an exception


@unique
class ExhaustedPolicy(Enum):
    """Reaction on an iteration budget exhausted without convergence."""

    ACCEPT = "accept"  #: keep the last iterate
    RAISE = "raise"  #: raise NonConvergenceError


@dataclass(frozen=True)
class SolverConfig:
    """Settings of the implicit midpoint iteration.

    Parameters
    ----------
    max_iterations : int, default=8
      Maximum number of fixed-point iterations per time step.
    energy_tolerance : float, default=5e-15
      Iteration stops once the relative energy bias
      `|E1 - E0| * 2 / (E1 + E0)` drops below this value.
    mass_tolerance : float, default=1e-10
      Tolerance of the area weighted sum of the depth tendency. It is scaled by
      `max(1, sum(|dgd * cos_lat|))`.
    mass_check : Strictness, default=Strictness.RAISE
      What to do if the depth tendency does not sum up to zero.
    on_exhausted : ExhaustedPolicy, default=ExhaustedPolicy.ACCEPT
      What to do if `max_iterations` is reached without convergence.
    """

    max_iterations: int = 8
    energy_tolerance: float = 5e-15
    mass_tolerance: float = 1e-10
    mass_check: Strictness = Strictness.RAISE
    on_exhausted: ExhaustedPolicy = ExhaustedPolicy.ACCEPT

    def __post_init__(self):
        """Validate settings."""
        if self.max_iterations < 1:
            raise ValueError("max_iterations needs to be larger than 0.")
