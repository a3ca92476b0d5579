"""Time stepping bookkeeping."""

from typing import Union

import numpy as np

from .api import TimeManagerBase
from .util import add_time, seconds_between, to_datetime64


class TimeManager(TimeManagerBase):
    """Keep track of the model time.

    Parameters
    ----------
    start : str or np.datetime64
      Start of the integration.
    end : str or np.datetime64
      End of the integration. Will be reduced to the last integral multiple of
      `step_size` after `start`.
    step_size : float
      Time step in seconds.

    Raises
    ------
    ValueError
      Raised if `step_size` is not positive or `end` is before `start`.
    """

    def __init__(
        self,
        start: Union[str, np.datetime64],
        end: Union[str, np.datetime64],
        step_size: float,
    ):
        """Initialize time manager at `start`."""
        if step_size <= 0:
            raise ValueError(f"step_size must be positive. Got {step_size}.")
        self.start = to_datetime64(start)
        self.end = to_datetime64(end)
        if self.end < self.start:
            raise ValueError("End time before start time.")
        self._step_size = float(step_size)
        self.num_steps = int(seconds_between(self.start, self.end) // self._step_size)
        self.step = 0

    @property
    def step_size(self) -> float:
        """Return time step in seconds."""
        return self._step_size

    @property
    def elapsed(self) -> float:
        """Return time since start in seconds."""
        return self.step * self._step_size

    @property
    def current_time(self) -> np.datetime64:
        """Return the model time."""
        return add_time(self.start, self.elapsed)

    def advance(self) -> None:
        """Move model time one step forward."""
        self.step += 1

    def is_finished(self) -> bool:
        """Return True if all steps are done."""
        return self.step >= self.num_steps
