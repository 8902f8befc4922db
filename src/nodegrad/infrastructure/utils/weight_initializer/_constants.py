"""
Constant weight initializers.

Provided initializers
---------------------
- ``zeros``: every element set to zero.
- ``ones``: every element set to one.

These are typically used for bias parameters and deterministic test setups.
They accept an `rng` argument for signature compatibility and draw nothing
from it.
"""

from typing import Optional

from ._base import WeightInitializer
from ..._determinism import DeterminismContext
from ...tensor._tensor import Tensor


@WeightInitializer.register_initializer("zeros")
def zeros(tensor: Tensor, *, rng: Optional[DeterminismContext] = None) -> Tensor:
    """Fill `tensor` with zeros in place and return it."""
    tensor.fill(0.0)
    return tensor


@WeightInitializer.register_initializer("ones")
def ones(tensor: Tensor, *, rng: Optional[DeterminismContext] = None) -> Tensor:
    """Fill `tensor` with ones in place and return it."""
    tensor.fill(1.0)
    return tensor
