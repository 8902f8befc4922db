"""
Shape value object.

A `Shape` is an ordered, immutable sequence of non-negative dimension sizes.
It owns the element-count arithmetic used by tensors and backends:

- ``numel`` is the product of the dimensions (1 for a rank-0 shape)
- ``rank`` is the number of dimensions

Shapes are hashable and compare equal only to other shapes with identical
dimensions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple, Union

ShapeLike = Union["Shape", Iterable[int], int]


@dataclass(frozen=True)
class Shape:
    """
    Ordered sequence of dimension sizes.

    Parameters
    ----------
    dims : tuple[int, ...]
        Dimension sizes. Each entry must be a non-negative integer.

    Raises
    ------
    ValueError
        If any dimension is negative or not an integer.
    """

    dims: Tuple[int, ...]

    def __init__(self, dims: Iterable[int] = ()) -> None:
        normalized = []
        for d in tuple(dims):
            if isinstance(d, bool) or not hasattr(d, "__index__"):
                raise ValueError(f"Shape dimensions must be integers, got {d!r}")
            d = int(d)
            if d < 0:
                raise ValueError(f"Shape dimensions must be non-negative, got {d}")
            normalized.append(d)
        object.__setattr__(self, "dims", tuple(normalized))

    @classmethod
    def of(cls, value: ShapeLike) -> "Shape":
        """
        Coerce a shape-like value into a `Shape`.

        Accepts an existing `Shape` (returned unchanged), a single int, or
        any iterable of ints.
        """
        if isinstance(value, Shape):
            return value
        if isinstance(value, int):
            return cls((value,))
        return cls(value)

    @property
    def rank(self) -> int:
        """Number of dimensions."""
        return len(self.dims)

    @property
    def numel(self) -> int:
        """Total number of elements (product of dimensions)."""
        n = 1
        for d in self.dims:
            n *= d
        return n

    def same_as(self, other: ShapeLike) -> bool:
        """Return True if `other` has exactly the same dimensions."""
        return self.dims == Shape.of(other).dims

    def is_scalar(self) -> bool:
        """Return True for shapes holding exactly one element."""
        return self.numel == 1

    def __len__(self) -> int:
        return len(self.dims)

    def __iter__(self) -> Iterator[int]:
        return iter(self.dims)

    def __getitem__(self, index: int) -> int:
        return self.dims[index]

    def __repr__(self) -> str:
        return f"Shape{self.dims}"

    def __str__(self) -> str:
        return str(self.dims)
