"""Shape-checked dense matrix primitives.

Every value is a two dimensional ``numpy.ndarray``; column vectors have
shape ``(n, 1)``. Element-wise operations require identical shapes and
never broadcast, so a transposed vector is reported instead of silently
expanding into a matrix.
"""

from __future__ import annotations

from typing import Callable, List, Sequence

import numpy as np

from .errors import ShapeMismatchError
from .types import Array


def shape_of(a: Array) -> tuple[int, ...]:
    return tuple(np.shape(a))


def _same_shape(op: str, a: Array, b: Array) -> None:
    if shape_of(a) != shape_of(b):
        raise ShapeMismatchError(op, shape_of(a), shape_of(b))


def add(a: Array, b: Array) -> Array:
    _same_shape("add", a, b)
    return np.add(a, b)


def subtract(a: Array, b: Array) -> Array:
    _same_shape("subtract", a, b)
    return np.subtract(a, b)


def elementwise_multiply(a: Array, b: Array) -> Array:
    """Hadamard product of two equally shaped matrices."""

    _same_shape("elementwise_multiply", a, b)
    return np.multiply(a, b)


def matmul(a: Array, b: Array) -> Array:
    """Matrix product; the inner dimensions must agree."""

    if np.ndim(a) != 2 or np.ndim(b) != 2 or shape_of(a)[1] != shape_of(b)[0]:
        raise ShapeMismatchError("matmul", shape_of(a), shape_of(b))
    return np.matmul(a, b)


def transpose(a: Array) -> Array:
    return np.transpose(a).copy()


def apply(a: Array, func: Callable[[Array], Array]) -> Array:
    """Apply the element-wise ``func`` and check that the shape is preserved."""

    out = np.asarray(func(a), dtype=np.float64)
    if out.shape != np.shape(a):
        raise ShapeMismatchError("apply", np.shape(a), out.shape)
    return out


def scale(a: Array, factor: float) -> Array:
    return np.multiply(a, float(factor))


def zeros_like(a: Array | Sequence[Array]) -> Array | List[Array]:
    """Zero-filled clone of a matrix, or of every matrix in a tensor list."""

    if isinstance(a, np.ndarray):
        return np.zeros_like(a, dtype=np.float64)
    return [np.zeros_like(item, dtype=np.float64) for item in a]


def deep_copy(tensors: Sequence[Array], *, readonly: bool = False) -> tuple[Array, ...]:
    """Return independent copies of ``tensors``; optionally frozen."""

    copies = []
    for item in tensors:
        clone = np.array(item, dtype=np.float64, copy=True)
        if readonly:
            clone.setflags(write=False)
        copies.append(clone)
    return tuple(copies)


__all__ = [
    "add",
    "apply",
    "deep_copy",
    "elementwise_multiply",
    "matmul",
    "scale",
    "shape_of",
    "subtract",
    "transpose",
    "zeros_like",
]
