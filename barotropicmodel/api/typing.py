"""Types and Type Aliases defined for this project."""

import numpy as np

Array = np.ndarray
