"""
He (Kaiming) weight initializers.

Implemented variants
--------------------
- ``he_uniform``:
    ``U(-sqrt(6/fan_in), +sqrt(6/fan_in))``, suited to layers followed by
    ReLU.
- ``kaiming``:
    He normal initialization using ``std = sqrt(2 / fan_in)``.

Notes
-----
Fan-in is ``shape[0]`` for the ``(in_features, out_features)`` layout.
"""

import math
from typing import Optional

from ._base import WeightInitializer, _resolve_rng
from ..._determinism import DeterminismContext
from ...tensor._tensor import Tensor
from ....domain.utils._weight_initialization import _calculate_fan_in


@WeightInitializer.register_initializer("he_uniform")
def he_uniform(tensor: Tensor, *, rng: Optional[DeterminismContext] = None) -> Tensor:
    """
    Apply He uniform initialization.

        U(-bound, +bound), where bound = sqrt(6 / fan_in)

    Parameters
    ----------
    tensor:
        The tensor to initialize in-place.
    rng:
        Random stream to draw from. Defaults to the process context.

    Returns
    -------
    Tensor
        The initialized tensor (same object).
    """
    fan_in = max(1, int(_calculate_fan_in(tuple(tensor.shape))))
    bound = math.sqrt(6.0 / float(fan_in))
    tensor.copy_from_numpy(_resolve_rng(rng).uniform(-bound, bound, tensor.numel))
    return tensor


@WeightInitializer.register_initializer("kaiming")
def kaiming(tensor: Tensor, *, rng: Optional[DeterminismContext] = None) -> Tensor:
    """Apply He normal initialization with ``std = sqrt(2 / fan_in)``."""
    fan_in = max(1, int(_calculate_fan_in(tuple(tensor.shape))))
    std = math.sqrt(2.0 / float(fan_in))
    tensor.copy_from_numpy(_resolve_rng(rng).normal(tensor.numel, 0.0, std))
    return tensor
