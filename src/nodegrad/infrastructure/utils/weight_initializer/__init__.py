"""
Weight initialization public API.

Importing this package registers the built-in initializers (``xavier``,
``xavier_uniform``, ``he_uniform``, ``kaiming``, ``zeros``, ``ones``) with
the `WeightInitializer` registry. Concrete initializer functions are
reached through registry names.
"""

from ._xavier import *
from ._kaiming import *
from ._constants import *
from ._base import WeightInitializer

__all__ = [
    WeightInitializer.__name__,
]
