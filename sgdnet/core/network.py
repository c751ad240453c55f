"""Forward pass and backpropagation for fully-connected networks."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from . import matrix
from .activations import REGISTRY as ACTIVATION_REGISTRY
from .activations import Activation
from .costs import REGISTRY as COST_REGISTRY
from .costs import Cost
from .types import Array, ForwardTrace

Gradients = Tuple[List[Array], List[Array]]


def forward_trace(
    x: Array,
    biases: Sequence[Array],
    weights: Sequence[Array],
    activation: Activation | str,
) -> ForwardTrace:
    """Run the forward pass keeping every ``z_i`` and ``a_i`` (``a_0 = x``)."""

    act = ACTIVATION_REGISTRY.resolve(activation)
    a = x
    activations: List[Array] = [x]
    zs: List[Array] = []
    for b, W in zip(biases, weights):
        z = matrix.add(matrix.matmul(W, a), b)
        zs.append(z)
        a = matrix.apply(z, act.func)
        activations.append(a)
    return ForwardTrace(activations=activations, zs=zs)


def feed_forward(
    x: Array,
    biases: Sequence[Array],
    weights: Sequence[Array],
    activation: Activation | str,
) -> Array:
    """Return the network output ``a_L`` for the column vector ``x``."""

    act = ACTIVATION_REGISTRY.resolve(activation)
    a = x
    for b, W in zip(biases, weights):
        a = matrix.apply(matrix.add(matrix.matmul(W, a), b), act.func)
    return a


def backprop(
    x: Array,
    y: Array,
    biases: Sequence[Array],
    weights: Sequence[Array],
    cost: Cost | str,
    activation: Activation | str,
) -> Gradients:
    """Return ``(nabla_b, nabla_w)`` for a single example.

    The backward sweep only reads the ``z`` and ``a`` values recorded by
    :func:`forward_trace`; nothing is recomputed.
    """

    act = ACTIVATION_REGISTRY.resolve(activation)
    cost_fn = COST_REGISTRY.resolve(cost)

    trace = forward_trace(x, biases, weights, act)
    activations = trace.activations
    zs = trace.zs

    nabla_b: List[Array] = matrix.zeros_like(biases)  # type: ignore[assignment]
    nabla_w: List[Array] = matrix.zeros_like(weights)  # type: ignore[assignment]

    delta = cost_fn.delta(activations[-1], y, zs[-1], act)
    nabla_b[-1] = delta
    nabla_w[-1] = matrix.matmul(delta, matrix.transpose(activations[-2]))

    for layer in range(len(weights) - 2, -1, -1):
        back = matrix.matmul(matrix.transpose(weights[layer + 1]), delta)
        delta = matrix.elementwise_multiply(back, matrix.apply(zs[layer], act.derivative))
        nabla_b[layer] = delta
        nabla_w[layer] = matrix.matmul(delta, matrix.transpose(activations[layer]))

    return nabla_b, nabla_w


__all__ = ["Gradients", "backprop", "feed_forward", "forward_trace"]
