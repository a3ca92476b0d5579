"""API declarations.

All APIs, i.e. interfaces for classes, are declared here.
"""

# import public base classes
from .core import (
    Stagger,
    Axis,
    TimeLevel,
    DomainBase,
    MeshBase,
    TimeManagerBase,
    IOManagerBase,
    InitialConditionBase,
    check_fields_exist,
)

# import public type aliases
from .typing import Array
