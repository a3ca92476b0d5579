"""Barotropic shallow water model on the sphere.

Energy conserving implicit midpoint integration of the barotropic shallow
water equations on an unstaggered longitude/latitude mesh.
"""

from .config import config, SolverConfig, Strictness, ExhaustedPolicy

from .api import Stagger, Axis, TimeLevel

from .grid import SphereDomain, Mesh

from .coefficients import GridCoefficients

from .datastructure import (
    Parameter,
    Field,
    PrognosticState,
    TransformedState,
    Workspace,
)

from .transform import transform, untransform

from .pole import RowKind, row_kind

from .diag import (
    MassConservationError,
    total_energy,
    total_mass,
)

from .integrate import (
    ImplicitMidpointIntegrator,
    IterationStatus,
    NonConvergenceError,
    StepReport,
)

from .timemanager import TimeManager

from .iomanager import NetCDFIOManager, DataFile

from .initial import RossbyHaurwitzWave, DomainMismatchError

from .model import BarotropicModel

from .log import setup_logging

from .util import str_to_date
