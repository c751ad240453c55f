"""Activation registry for SGDNet."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, Iterable, Mapping

import numpy as np

from .errors import ConfigurationError
from .types import Array

ElementwiseFn = Callable[[Array], Array]


@dataclass(frozen=True)
class Activation:
    """Element-wise non-linearity paired with its derivative."""

    name: str
    func: ElementwiseFn
    derivative: ElementwiseFn

    def __call__(self, z: Array) -> Array:
        return self.func(z)


class ActivationRegistry:
    """Name to :class:`Activation` lookup."""

    def __init__(self) -> None:
        self._registry: Dict[str, Activation] = {}

    def register(self, name: str, func: ElementwiseFn, derivative: ElementwiseFn) -> None:
        self._registry[name] = Activation(name, func, derivative)

    def names(self) -> Iterable[str]:
        return sorted(self._registry)

    def __contains__(self, name: object) -> bool:
        return name in self._registry

    def as_mapping(self) -> Mapping[str, Activation]:
        return MappingProxyType(self._registry)

    def resolve(self, name: str | Activation) -> Activation:
        if isinstance(name, Activation):
            return name
        if name not in self._registry:
            available = ", ".join(self.names())
            raise ConfigurationError(
                f"Unknown activation {name!r}. Available activations: {available}"
            )
        return self._registry[name]


REGISTRY = ActivationRegistry()


def sigmoid(z: Array) -> Array:
    """Return the logistic sigmoid of ``z``."""

    return 1.0 / (1.0 + np.exp(-np.clip(z, -500.0, 500.0)))


def sigmoid_prime(z: Array) -> Array:
    s = sigmoid(z)
    return s * (1.0 - s)


def tanh(z: Array) -> Array:
    return np.tanh(z)


def tanh_prime(z: Array) -> Array:
    return 1.0 - np.tanh(z) ** 2


def relu(z: Array) -> Array:
    """Return the ReLU activation."""

    return np.maximum(z, 0.0)


def relu_prime(z: Array) -> Array:
    # zero at the kink
    return (np.asarray(z) > 0).astype(np.float64)


REGISTRY.register("sigmoid", sigmoid, sigmoid_prime)
REGISTRY.register("tanh", tanh, tanh_prime)
REGISTRY.register("relu", relu, relu_prime)

ACTIVATIONS = REGISTRY.as_mapping()


def get(name: str | Activation) -> Activation:
    return REGISTRY.resolve(name)


__all__ = [
    "ACTIVATIONS",
    "Activation",
    "ActivationRegistry",
    "REGISTRY",
    "get",
    "relu",
    "relu_prime",
    "sigmoid",
    "sigmoid_prime",
    "tanh",
    "tanh_prime",
]
