"""Initial biases and weights for a layer topology."""

from __future__ import annotations

import math
from typing import Callable, List, Sequence

import numpy as np

from .sampling import GaussianSampler
from .types import Array, Parameters

Sampler = Callable[[], float]


def _default_sampler(sampler: Sampler | None) -> Sampler:
    return sampler if sampler is not None else GaussianSampler(0.0, 1.0)


def init_biases(sizes: Sequence[int], sampler: Sampler | None = None) -> List[Array]:
    """Return one standard-normal column vector per layer transition."""

    draw = _default_sampler(sampler)
    biases: List[Array] = []
    for i in range(len(sizes) - 1):
        column = np.empty((int(sizes[i + 1]), 1), dtype=np.float64)
        for j in range(column.shape[0]):
            column[j, 0] = draw()
        biases.append(column)
    return biases


def init_weights(sizes: Sequence[int], sampler: Sampler | None = None) -> List[Array]:
    """Return fan-in scaled weight matrices of shape ``(sizes[i+1], sizes[i])``.

    Rows index neurons of the target layer and columns neurons of the source
    layer, so ``W @ a`` maps a source activation to target pre-activations.
    """

    draw = _default_sampler(sampler)
    weights: List[Array] = []
    for i in range(len(sizes) - 1):
        fan_in = int(sizes[i])
        root = math.sqrt(fan_in)
        matrix = np.empty((int(sizes[i + 1]), fan_in), dtype=np.float64)
        for j in range(matrix.shape[0]):
            for k in range(fan_in):
                matrix[j, k] = draw() / root
        weights.append(matrix)
    return weights


def init_parameters(sizes: Sequence[int], sampler: Sampler | None = None) -> Parameters:
    draw = _default_sampler(sampler)
    biases = init_biases(sizes, draw)
    weights = init_weights(sizes, draw)
    return Parameters(biases=biases, weights=weights)


__all__ = ["init_biases", "init_weights", "init_parameters"]
