"""Error kinds raised by SGDNet."""

from __future__ import annotations


class SGDNetError(Exception):
    """Base class for all SGDNet errors."""


class ConfigurationError(SGDNetError, ValueError):
    """Training options are invalid; raised before any training work starts."""


class ShapeMismatchError(SGDNetError, ValueError):
    """Operand shapes are incompatible with the requested matrix operation."""

    def __init__(self, op: str, left: tuple, right: tuple | None = None) -> None:
        self.op = op
        self.left = tuple(left)
        self.right = tuple(right) if right is not None else None
        if right is None:
            message = f"{op}: unsupported shape {self.left}"
        else:
            message = f"{op}: incompatible shapes {self.left} and {self.right}"
        super().__init__(message)


class EmptyBatchError(SGDNetError, RuntimeError):
    """A mini-batch with no examples reached the optimizer."""


__all__ = [
    "SGDNetError",
    "ConfigurationError",
    "ShapeMismatchError",
    "EmptyBatchError",
]
