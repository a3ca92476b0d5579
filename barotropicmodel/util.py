"""Utility functions."""

from typing import Union
import numpy as np

# See https://numpy.org/doc/stable/reference/arrays.datetime.html#datetime-units
dt64_units = "us"
factor_relative_to_seconds = 1_000_000

dt64_dtype = f"datetime64[{dt64_units}]"


def str_to_date(date: str) -> np.datetime64:
    """Convert string to numpy.datetime64."""
    return np.datetime64(date, dt64_units)


def to_datetime64(date: Union[str, np.datetime64]) -> np.datetime64:
    """Convert string or numpy.datetime64 to numpy.datetime64 with `dt64_units`."""
    if isinstance(date, np.datetime64):
        return date.astype(dt64_dtype)
    return str_to_date(date)


def add_time(date: np.datetime64, time: float) -> np.datetime64:
    """Add time to a date time object.

    Note that time will be converted to `dt64_units` and rounded, hence there might
    be a loss of precision. Change `dt64_units` to increase precision.
    """
    td = np.timedelta64(round(time * factor_relative_to_seconds), dt64_units)
    return np.datetime64(date + td, dt64_units)


def seconds_between(start: np.datetime64, end: np.datetime64) -> float:
    """Return the time from `start` to `end` in seconds."""
    delta = (end - start).astype(f"timedelta64[{dt64_units}]")
    return delta.astype(np.int64) / factor_relative_to_seconds
