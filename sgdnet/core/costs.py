"""Cost registry seeding backpropagation at the output layer."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, Iterable, Mapping

import numpy as np

from . import matrix
from .activations import Activation
from .errors import ConfigurationError, ShapeMismatchError
from .types import Array

CostFn = Callable[[Array, Array], float]
DeltaFn = Callable[[Array, Array, Array, Activation], Array]


@dataclass(frozen=True)
class Cost:
    """Scalar cost together with the output-layer error signal."""

    name: str
    fn: CostFn
    delta: DeltaFn

    def __call__(self, output: Array, target: Array) -> float:
        return self.fn(output, target)


class CostRegistry:
    """Central registry for cost functions."""

    def __init__(self) -> None:
        self._registry: Dict[str, Cost] = {}

    def register(self, name: str, fn: CostFn, delta: DeltaFn) -> None:
        self._registry[name] = Cost(name, fn, delta)

    def alias(self, alias: str, name: str) -> None:
        self._registry[alias] = self._registry[name]

    def names(self) -> Iterable[str]:
        return sorted(self._registry)

    def __contains__(self, name: object) -> bool:
        return name in self._registry

    def as_mapping(self) -> Mapping[str, Cost]:
        return MappingProxyType(self._registry)

    def resolve(self, name: str | Cost) -> Cost:
        if isinstance(name, Cost):
            return name
        if name not in self._registry:
            available = ", ".join(self.names())
            raise ConfigurationError(f"Unknown cost {name!r}. Available costs: {available}")
        return self._registry[name]


REGISTRY = CostRegistry()


def _quadratic(output: Array, target: Array) -> float:
    diff = matrix.subtract(output, target)
    return float(0.5 * np.sum(np.square(diff)))


def _quadratic_delta(output: Array, target: Array, z: Array, activation: Activation) -> Array:
    return matrix.elementwise_multiply(
        matrix.subtract(output, target), matrix.apply(z, activation.derivative)
    )


def _cross_entropy(output: Array, target: Array) -> float:
    if np.shape(output) != np.shape(target):
        raise ShapeMismatchError("cross_entropy", np.shape(output), np.shape(target))
    with np.errstate(divide="ignore", invalid="ignore"):
        terms = -target * np.log(output) - (1.0 - target) * np.log(1.0 - output)
    return float(np.sum(np.nan_to_num(terms)))


def _cross_entropy_delta(
    output: Array, target: Array, z: Array, activation: Activation
) -> Array:
    # sigma'(z) cancels against the cost derivative for sigmoid outputs
    return matrix.subtract(output, target)


REGISTRY.register("quadratic", _quadratic, _quadratic_delta)
REGISTRY.register("cross_entropy", _cross_entropy, _cross_entropy_delta)
# camelCase name used by older option files
REGISTRY.alias("crossEntropy", "cross_entropy")

COSTS = REGISTRY.as_mapping()


def get(name: str | Cost) -> Cost:
    return REGISTRY.resolve(name)


__all__ = ["COSTS", "Cost", "CostRegistry", "REGISTRY", "get"]
