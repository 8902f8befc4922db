"""
Error and warning types for nodegrad.

This module defines every exception raised by the autograd core. The types
fall into two families:

- usage errors diagnosable at the call site (`ShapeMismatch`,
  `GradientShapeError`, `UninitializedParameter`), which are raised to the
  immediate caller;
- wiring errors (`UnregisteredOp`), which indicate that the program was
  assembled incorrectly and abort graph construction.

Errors carry structured attributes in addition to their message so callers
and tests can inspect what went wrong without parsing strings.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence


def _fmt_shape(shape: Any) -> str:
    """Render a shape-like value (Shape, tuple, list) as ``(a, b, ...)``."""
    dims = getattr(shape, "dims", shape)
    try:
        return str(tuple(int(d) for d in dims))
    except TypeError:
        return repr(shape)


class ShapeMismatch(ValueError):
    """
    Raised when an operation receives operands with incompatible shapes.

    Attributes
    ----------
    op : str
        Name of the operation that rejected its operands (e.g., "matmul").
    expected : Any
        The shape (or textual shape constraint) the operation required.
    actual : Any
        The shape that was actually supplied.
    """

    def __init__(self, op: str, expected: Any, actual: Any, detail: str = "") -> None:
        """
        Initialize the ShapeMismatch.

        Parameters
        ----------
        op : str
            Operation name.
        expected : Any
            Expected shape, or a string describing the constraint.
        actual : Any
            Actual shape received.
        detail : str, optional
            Extra context appended to the message.
        """
        exp = expected if isinstance(expected, str) else _fmt_shape(expected)
        msg = f"{op}: shape mismatch, expected {exp}, got {_fmt_shape(actual)}"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)
        self.op = op
        self.expected = expected
        self.actual = actual


class GradientShapeError(ValueError):
    """
    Raised when a gradient does not match the shape of the node it targets.

    This covers both the seed gradient supplied to `backward` and gradients
    returned by an op's backward function for its inputs.

    Attributes
    ----------
    expected : Any
        Shape of the node the gradient belongs to.
    actual : Any
        Shape of the offending gradient.
    node_index : Optional[int]
        Arena index of the node, when known.
    """

    def __init__(
        self,
        expected: Any,
        actual: Any,
        *,
        node_index: Optional[int] = None,
        detail: str = "",
    ) -> None:
        where = f" at node {node_index}" if node_index is not None else ""
        msg = (
            f"gradient shape mismatch{where}: expected {_fmt_shape(expected)}, "
            f"got {_fmt_shape(actual)}"
        )
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)
        self.expected = expected
        self.actual = actual
        self.node_index = node_index


class UnregisteredOp(RuntimeError):
    """
    Raised when a graph references an op name absent from the registry.

    This is a configuration error: the op was never registered during the
    startup registration phase. Graph construction is aborted and no node is
    created.

    Attributes
    ----------
    name : str
        The op name that was requested.
    available : tuple[str, ...]
        Names registered at the time of the lookup, in registration order.
    """

    def __init__(self, name: str, available: Sequence[str] = ()) -> None:
        listing = ", ".join(available) or "<none>"
        super().__init__(f"Unregistered op: {name!r}. Registered ops: {listing}")
        self.name = name
        self.available = tuple(available)


class UninitializedParameter(RuntimeError):
    """
    Raised when a Parameter's value is read before it has been initialized.

    Attributes
    ----------
    name : Optional[str]
        Parameter name, if one was assigned.
    """

    def __init__(self, name: Optional[str] = None) -> None:
        label = repr(name) if name else "<unnamed>"
        super().__init__(
            f"Parameter {label} is used before being initialized. "
            "Call an initializer (or copy_from_numpy) first."
        )
        self.name = name


class BackwardError(RuntimeError):
    """
    Raised when an op's backward function fails during a backward pass.

    The whole pass is aborted and no gradient from it is committed to any
    accumulator. The original exception is chained as ``__cause__``.

    Attributes
    ----------
    node_index : int
        Arena index of the node whose backward failed.
    op_name : str
        Name of the op whose backward failed.
    """

    def __init__(self, node_index: int, op_name: str, reason: str) -> None:
        super().__init__(
            f"backward of op {op_name!r} failed at node {node_index}: {reason}"
        )
        self.node_index = node_index
        self.op_name = op_name


class StaleGradientError(RuntimeError):
    """
    Raised in strict mode when a Parameter enters a new graph while still
    holding a gradient that an optimizer already applied.

    Attributes
    ----------
    name : Optional[str]
        Parameter name, if one was assigned.
    """

    def __init__(self, name: Optional[str] = None) -> None:
        label = repr(name) if name else "<unnamed>"
        super().__init__(
            f"Parameter {label} still holds a gradient consumed by an optimizer "
            "step; call zero_grad() before the next forward pass."
        )
        self.name = name


class StaleGradientWarning(UserWarning):
    """
    Warning counterpart of `StaleGradientError`, emitted outside strict mode.

    New gradient contributions keep being added to the stale one, which is
    the documented leakage hazard of skipping `zero_grad()`.
    """


class GradientCheckError(AssertionError):
    """
    Raised when an analytic gradient disagrees with its finite-difference
    estimate.

    Attributes
    ----------
    input_index : int
        Position of the checked input.
    element : int
        Flat index of the first mismatching element.
    analytic : float
        Gradient computed by the backward pass.
    numerical : float
        Central-difference estimate.
    """

    def __init__(
        self, input_index: int, element: int, analytic: float, numerical: float
    ) -> None:
        super().__init__(
            f"input {input_index} element {element}: autograd {analytic!r} "
            f"vs numerical {numerical!r}"
        )
        self.input_index = input_index
        self.element = element
        self.analytic = analytic
        self.numerical = numerical
