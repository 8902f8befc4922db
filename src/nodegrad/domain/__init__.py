"""
Domain layer: contracts, value objects and error types.

Nothing in this package depends on NumPy; concrete implementations live in
`nodegrad.infrastructure`.
"""

from ._shape import Shape
from ._tensor import ITensor
from ._backend import IBackend
from ._op import Op
from ._parameter import IParameter
from ._module import IModule
from ._optimizers import IOptimizer
from ._errors import (
    BackwardError,
    GradientCheckError,
    GradientShapeError,
    ShapeMismatch,
    StaleGradientError,
    StaleGradientWarning,
    UninitializedParameter,
    UnregisteredOp,
)

__all__ = [
    Shape.__name__,
    ITensor.__name__,
    IBackend.__name__,
    Op.__name__,
    IParameter.__name__,
    IModule.__name__,
    IOptimizer.__name__,
    BackwardError.__name__,
    GradientCheckError.__name__,
    GradientShapeError.__name__,
    ShapeMismatch.__name__,
    StaleGradientError.__name__,
    StaleGradientWarning.__name__,
    UninitializedParameter.__name__,
    UnregisteredOp.__name__,
]
