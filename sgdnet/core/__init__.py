"""Core numerical primitives for SGDNet."""

from . import activations, costs, errors, initializers, matrix, network, sampling, types

__all__ = [
    "activations",
    "costs",
    "errors",
    "initializers",
    "matrix",
    "network",
    "sampling",
    "types",
]
