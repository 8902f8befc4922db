"""
Concrete Tensor implementation (NumPy storage).

A `Tensor` exclusively owns a flat, C-contiguous ``float64`` NumPy buffer
together with a `Shape`. It carries no autograd state: gradients live on
graph nodes and parameters, and all numeric work goes through a backend.

Design notes
------------
- Every constructor copies its input, so a tensor never aliases caller
  memory. Sharing happens by passing the `Tensor` object itself around
  (e.g., a Parameter and the leaf node bound to it hold the same object).
- The buffer is kept flat; `to_numpy()` returns a shaped copy.
- Mutation is confined to a few explicit methods (`copy_from_numpy`,
  `fill`, `assign_`, `add_`) used by initializers, optimizers and
  gradient accumulation.
- ``float64`` is used throughout so central-difference gradient checks can
  be held to tight tolerances.
"""

from __future__ import annotations

from typing import Any, Iterable, Union

import numpy as np
from typing_extensions import Self

from ...domain._errors import ShapeMismatch
from ...domain._shape import Shape, ShapeLike
from ...domain._tensor import ITensor

Number = Union[int, float]

DTYPE = np.float64


class Tensor(ITensor):
    """
    Owned contiguous buffer plus shape.

    Parameters
    ----------
    shape : ShapeLike
        Tensor shape.
    data : array-like, optional
        Initial values. Anything NumPy can turn into an array with
        ``shape.numel`` elements; it is copied and flattened in row-major
        order. Defaults to zeros.

    Raises
    ------
    ShapeMismatch
        If `data` does not hold exactly ``shape.numel`` elements.
    """

    __slots__ = ("_shape", "_buffer")

    def __init__(self, shape: ShapeLike, data: Any = None) -> None:
        self._shape = Shape.of(shape)
        if data is None:
            self._buffer = np.zeros(self._shape.numel, dtype=DTYPE)
            return
        if isinstance(data, Tensor):
            data = data._buffer

        flat = np.array(data, dtype=DTYPE, copy=True).reshape(-1)
        if flat.size != self._shape.numel:
            raise ShapeMismatch(
                "tensor",
                self._shape,
                tuple(np.shape(data)),
                detail=f"{flat.size} values for {self._shape.numel} elements",
            )
        self._buffer = np.ascontiguousarray(flat)

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------
    @classmethod
    def zeros(cls, shape: ShapeLike) -> Self:
        """Return a zero-filled tensor."""
        return cls(shape)

    @classmethod
    def ones(cls, shape: ShapeLike) -> Self:
        """Return a one-filled tensor."""
        return cls.full(shape, 1.0)

    @classmethod
    def full(cls, shape: ShapeLike, value: Number) -> Self:
        """Return a tensor filled with `value`."""
        t = cls(shape)
        t._buffer.fill(float(value))
        return t

    @classmethod
    def scalar(cls, value: Number) -> Self:
        """Return a shape ``(1,)`` tensor holding `value`."""
        return cls.full((1,), value)

    @classmethod
    def from_numpy(cls, arr: Any) -> Self:
        """
        Construct a tensor from an array-like, copying its values.

        The resulting shape is the array's shape. A 0-d input becomes a
        rank-0 tensor.
        """
        arr = np.asarray(arr, dtype=DTYPE)
        return cls(arr.shape, arr)

    @classmethod
    def _wrap(cls, shape: Shape, flat: np.ndarray) -> Self:
        """
        Adopt an already-owned flat float64 buffer without copying.

        Internal fast path for backends, which always allocate fresh arrays.
        """
        t = cls.__new__(cls)
        t._shape = shape
        t._buffer = np.ascontiguousarray(flat, dtype=DTYPE).reshape(-1)
        if t._buffer.size != shape.numel:
            raise ShapeMismatch("tensor", shape, (t._buffer.size,))
        return t

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def shape(self) -> Shape:
        return self._shape

    @property
    def numel(self) -> int:
        return self._shape.numel

    @property
    def rank(self) -> int:
        return self._shape.rank

    @property
    def data(self) -> np.ndarray:
        """
        Read-only flat view of the buffer.

        Returns
        -------
        numpy.ndarray
            A non-writeable view; use the mutators to change values.
        """
        view = self._buffer.view()
        view.flags.writeable = False
        return view

    def to_numpy(self) -> np.ndarray:
        """Return a shaped copy of the values."""
        return self._buffer.reshape(self._shape.dims).copy()

    def tolist(self) -> list:
        """Return the flat values as a Python list."""
        return self._buffer.tolist()

    def item(self) -> float:
        """
        Return the single value of a one-element tensor.

        Raises
        ------
        ValueError
            If the tensor does not hold exactly one element.
        """
        if self.numel != 1:
            raise ValueError(
                f"Tensor.item() requires a 1-element tensor, got shape={self._shape}"
            )
        return float(self._buffer[0])

    def clone(self) -> "Tensor":
        """Return a deep copy with its own buffer."""
        return Tensor._wrap(self._shape, self._buffer.copy())

    def allclose(self, other: "Tensor", rtol: float = 1e-5, atol: float = 1e-8) -> bool:
        """Return True if shapes match and values agree within tolerance."""
        return self._shape.same_as(other.shape) and bool(
            np.allclose(self._buffer, other._buffer, rtol=rtol, atol=atol)
        )

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------
    def copy_from_numpy(self, arr: Any) -> None:
        """
        Overwrite the values in place from an array-like.

        Raises
        ------
        ShapeMismatch
            If `arr` does not hold exactly ``numel`` elements.
        """
        flat = np.asarray(arr, dtype=DTYPE).reshape(-1)
        if flat.size != self.numel:
            raise ShapeMismatch(
                "copy_from_numpy", self._shape, tuple(np.shape(arr))
            )
        self._buffer[...] = flat

    def fill(self, value: Number) -> None:
        """Set every element to `value`."""
        self._buffer.fill(float(value))

    def assign_(self, other: "Tensor") -> None:
        """
        Copy `other`'s values into this tensor in place.

        Raises
        ------
        ShapeMismatch
            If the shapes differ.
        """
        if not self._shape.same_as(other.shape):
            raise ShapeMismatch("assign_", self._shape, other.shape)
        self._buffer[...] = other._buffer

    def add_(self, other: "Tensor") -> None:
        """
        Accumulate `other` into this tensor in place.

        Raises
        ------
        ShapeMismatch
            If the shapes differ.
        """
        if not self._shape.same_as(other.shape):
            raise ShapeMismatch("add_", self._shape, other.shape)
        self._buffer += other._buffer

    def _raw(self) -> np.ndarray:
        """Writable flat buffer, for in-package numeric code only."""
        return self._buffer

    # ------------------------------------------------------------------
    # Dunder helpers
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        if self._shape.rank == 0:
            raise TypeError("len() of a rank-0 tensor")
        return self._shape[0]

    def __iter__(self) -> Iterable[float]:
        return iter(self._buffer.tolist())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tensor):
            return NotImplemented
        return self._shape == other._shape and bool(
            np.array_equal(self._buffer, other._buffer)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        values = np.array2string(self.to_numpy(), precision=4, threshold=20)
        return f"Tensor(shape={self._shape.dims}, data={values})"
