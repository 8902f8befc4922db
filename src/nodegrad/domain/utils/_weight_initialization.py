"""
Abstract interfaces and utilities for weight initialization.

This module defines the abstract base class for weight initializer
dispatchers, along with shared helper functions for computing fan-in and
fan-out values from parameter shapes.

The concrete registry and the initialization strategies live in the
infrastructure layer. This module exists in the domain layer to define the
contract and shared arithmetic without binding to NumPy.

Layout convention
-----------------
nodegrad computes affine layers as ``y = x @ W + b`` so a rank-2 weight has
layout ``(in_features, out_features)``. Fan computations follow that
layout: ``fan_in = shape[0]`` and ``fan_out = shape[1]``.
"""

from abc import ABC
from typing import Any, Callable, Dict, Tuple, TypeVar

from .._tensor import ITensor


T = TypeVar("T", bound=Callable[..., ITensor])


class _WeightInitializer(ABC):
    """
    Abstract base class for weight initializer dispatchers.

    Design notes
    ------------
    - Initializers are identified by string names.
    - Each initializer is a callable ``(tensor, *, rng) -> tensor`` that
      fills `tensor` in place from the determinism context `rng` and
      returns it.
    - This class does not prescribe how initializers are stored or invoked;
      it only defines the expected interface.
    """

    INITIALIZERS: Dict[str, Callable] = {}

    def __init__(self, initializer_name: str) -> None:
        """
        Construct a weight initializer dispatcher.

        Parameters
        ----------
        initializer_name:
            The string key identifying a registered initializer.
        """
        ...

    @classmethod
    def register_initializer(
        cls, name: str, *, overwrite: bool = False
    ) -> Callable[[T], T]:
        """
        Register a weight initializer under a given name.

        Parameters
        ----------
        name:
            Name used to identify the initializer.
        overwrite:
            Whether to allow overwriting an existing registration.

        Returns
        -------
        Callable
            A decorator that registers the initializer function.
        """
        ...

    @classmethod
    def available(cls) -> Tuple[str, ...]:
        """
        Return the names of all registered initializers, sorted.
        """
        ...

    @classmethod
    def get(cls, name: str) -> Callable[..., ITensor]:
        """
        Get a registered initializer callable by name.
        """
        ...

    def __call__(self, tensor: ITensor, *args: Any, **kwargs: Any) -> ITensor:
        """
        Apply the initializer to a tensor.

        Parameters
        ----------
        tensor:
            The tensor to be initialized.
        *args, **kwargs:
            Forwarded to the initializer (typically ``rng=``).

        Returns
        -------
        ITensor
            The initialized tensor.
        """
        ...


def _calculate_fan_in(shape: Tuple[int, ...]) -> int:
    """
    Compute the fan-in value for a parameter shape.

    Parameters
    ----------
    shape:
        Shape of the weight tensor.

    Returns
    -------
    int
        Number of input connections feeding one output unit.
    """
    if len(shape) == 0:
        return 1  # scalar
    # Linear: (in_features, out_features); bias-like vectors use their length
    return int(shape[0])


def _calculate_fan_in_and_fan_out(shape: Tuple[int, ...]) -> Tuple[int, int]:
    """
    Compute both fan-in and fan-out values for a parameter shape.

    Parameters
    ----------
    shape:
        Shape of the weight tensor.

    Returns
    -------
    tuple[int, int]
        A tuple of (fan_in, fan_out).
    """
    if len(shape) == 0:
        return 1, 1
    if len(shape) == 1:
        return int(shape[0]), int(shape[0])
    fan_in, fan_out = int(shape[0]), int(shape[1])
    receptive_field = 1
    for d in shape[2:]:
        receptive_field *= int(d)
    return fan_in * receptive_field, fan_out * receptive_field
