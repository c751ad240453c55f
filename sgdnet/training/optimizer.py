"""Mini-batch gradient descent."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from ..core import matrix
from ..core.activations import REGISTRY as ACTIVATION_REGISTRY
from ..core.activations import Activation
from ..core.costs import REGISTRY as COST_REGISTRY
from ..core.costs import Cost
from ..core.errors import EmptyBatchError
from ..core.network import backprop
from ..core.types import Array, Example, Parameters


def accumulate_gradients(
    batch: Sequence[Example],
    biases: Sequence[Array],
    weights: Sequence[Array],
    cost: Cost,
    activation: Activation,
) -> tuple[List[Array], List[Array]]:
    """Sum the per-example gradients of ``batch`` into fresh accumulators."""

    nabla_b: List[Array] = matrix.zeros_like(biases)  # type: ignore[assignment]
    nabla_w: List[Array] = matrix.zeros_like(weights)  # type: ignore[assignment]
    for example in batch:
        delta_b, delta_w = backprop(example.x, example.y, biases, weights, cost, activation)
        nabla_b = [matrix.add(nb, db) for nb, db in zip(nabla_b, delta_b)]
        nabla_w = [matrix.add(nw, dw) for nw, dw in zip(nabla_w, delta_w)]
    return nabla_b, nabla_w


def update_mini_batch(
    batch: Sequence[Example],
    eta: float,
    biases: Sequence[Array],
    weights: Sequence[Array],
    cost: Cost | str,
    activation: Activation | str,
) -> Parameters:
    """Apply one gradient-descent step averaged over ``batch``.

    The step size is ``eta / len(batch)`` so a short final batch is
    averaged over its true length. The input arrays are left untouched.
    """

    if len(batch) == 0:
        raise EmptyBatchError("update_mini_batch received an empty mini-batch")
    cost_fn = COST_REGISTRY.resolve(cost)
    act = ACTIVATION_REGISTRY.resolve(activation)
    nabla_b, nabla_w = accumulate_gradients(batch, biases, weights, cost_fn, act)
    rate = eta / len(batch)
    new_biases = [matrix.subtract(b, matrix.scale(nb, rate)) for b, nb in zip(biases, nabla_b)]
    new_weights = [matrix.subtract(w, matrix.scale(nw, rate)) for w, nw in zip(weights, nabla_w)]
    return Parameters(biases=new_biases, weights=new_weights)


@dataclass(frozen=True)
class SGDOptimizer:
    """Vanilla SGD bound to a resolved cost and activation."""

    eta: float
    cost: Cost
    activation: Activation

    def step(self, params: Parameters, batch: Sequence[Example]) -> Parameters:
        return update_mini_batch(
            batch, self.eta, params.biases, params.weights, self.cost, self.activation
        )


__all__ = ["SGDOptimizer", "accumulate_gradients", "update_mini_batch"]
