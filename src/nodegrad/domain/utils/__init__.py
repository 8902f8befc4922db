from ._weight_initialization import (
    _WeightInitializer,
    _calculate_fan_in,
    _calculate_fan_in_and_fan_out,
)

__all__ = [
    _WeightInitializer.__name__,
    _calculate_fan_in.__name__,
    _calculate_fan_in_and_fan_out.__name__,
]
