"""Diagnostics of the model state."""

from .conservation import (
    MassConservationError,
    total_energy,
    total_mass,
    relative_bias,
    mass_divergence,
    check_mass_divergence,
)
from .cache import lru_cache_info, log_lru_cache_info
