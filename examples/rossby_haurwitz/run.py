"""Integrate the Rossby-Haurwitz wave for one day and report conservation."""

from pathlib import Path

import xarray as xr

from barotropicmodel import (
    BarotropicModel,
    RossbyHaurwitzWave,
    TimeLevel,
    TimeManager,
    setup_logging,
)
from barotropicmodel.diag import relative_bias, total_mass

setup_logging("INFO")

time_manager = TimeManager("2000-01-01", "2000-01-02", step_size=60.0)

model = BarotropicModel()
model.initialize(time_manager, num_lon=128, num_lat=64)
model.populate(RossbyHaurwitzWave())

mass0 = total_mass(model.state, model.coefficients, TimeLevel.OLD)
model.run(output_pattern="rh.{step:05d}.nc", output_interval=6 * 3600.0)
mass1 = total_mass(model.state, model.coefficients, TimeLevel.OLD)

print(f"relative mass change after one day: {relative_bias(mass1, mass0):.3e}")

ds = xr.concat(
    [xr.load_dataset(p) for p in sorted(Path(".").glob("rh.*.nc"))], dim="time"
)
print(ds.gd.max(("lat", "lon")).to_series())
