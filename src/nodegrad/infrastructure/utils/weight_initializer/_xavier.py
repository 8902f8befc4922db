"""
Xavier/Glorot weight initializers.

Implemented variants
--------------------
- ``xavier_uniform``:
    ``U(-sqrt(6/(fan_in+fan_out)), +sqrt(6/(fan_in+fan_out)))``.
- ``xavier``:
    Xavier normal initialization using ``std = sqrt(2 / (fan_in + fan_out))``.

Notes
-----
- Fan-in and fan-out follow the ``(in_features, out_features)`` weight
  layout (see ``_calculate_fan_in_and_fan_out``).
- Initializers overwrite the provided tensor in place and return it.
"""

import math
from typing import Optional

from ._base import WeightInitializer, _resolve_rng
from ..._determinism import DeterminismContext
from ...tensor._tensor import Tensor
from ....domain.utils._weight_initialization import _calculate_fan_in_and_fan_out


@WeightInitializer.register_initializer("xavier_uniform")
def xavier_uniform(
    tensor: Tensor, *, rng: Optional[DeterminismContext] = None
) -> Tensor:
    """
    Apply Xavier (Glorot) uniform initialization.

    This initializes weights from a uniform distribution:

        U(-bound, +bound), where bound = sqrt(6 / (fan_in + fan_out))

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
    fan_in, fan_out = _calculate_fan_in_and_fan_out(tuple(tensor.shape))
    fan_in = max(1, int(fan_in))
    fan_out = max(1, int(fan_out))

    bound = math.sqrt(6.0 / float(fan_in + fan_out))
    tensor.copy_from_numpy(_resolve_rng(rng).uniform(-bound, bound, tensor.numel))
    return tensor


@WeightInitializer.register_initializer("xavier")
def xavier(tensor: Tensor, *, rng: Optional[DeterminismContext] = None) -> Tensor:
    """
    Apply Xavier (Glorot) normal initialization.

    Draws from a zero-mean normal distribution with standard deviation

        std = sqrt(2 / (fan_in + fan_out))
    """
    fan_in, fan_out = _calculate_fan_in_and_fan_out(tuple(tensor.shape))
    fan_in = max(1, int(fan_in))
    fan_out = max(1, int(fan_out))

    std = math.sqrt(2.0 / float(fan_in + fan_out))
    tensor.copy_from_numpy(_resolve_rng(rng).normal(tensor.numel, 0.0, std))
    return tensor
