"""Test-set evaluation with argmax classification."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Sequence

import numpy as np

from ..core.activations import REGISTRY as ACTIVATION_REGISTRY
from ..core.activations import Activation
from ..core.costs import REGISTRY as COST_REGISTRY
from ..core.costs import Cost
from ..core.errors import ConfigurationError
from ..core.network import feed_forward
from ..core.types import Array, EvaluationResult, Example, LabelBucket, Parameters


class ArgmaxPolicy(str, Enum):
    """How the predicted label is read off the output scores."""

    FIRST = "first"
    """Seed the running maximum with the first score; a true argmax."""

    ZERO_FLOOR = "zero_floor"
    """Seed the running maximum at ``0``; all non-positive outputs predict ``0``."""

    @classmethod
    def parse(cls, value: "ArgmaxPolicy | str") -> "ArgmaxPolicy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value))
        except ValueError as exc:
            choices = ", ".join(p.value for p in cls)
            raise ConfigurationError(
                f"Unknown argmax policy {value!r}. Expected one of: {choices}"
            ) from exc


def predict_label(scores: Sequence[float], policy: ArgmaxPolicy | str = ArgmaxPolicy.FIRST) -> int:
    """Return the index of the largest score using a strict ``>`` scan.

    Ties go to the lowest index. Under ``ZERO_FLOOR`` the scan starts from a
    threshold of ``0`` at index ``0``, so outputs that are all ``<= 0`` are
    classified as label ``0`` whatever their ordering.
    """

    policy = ArgmaxPolicy.parse(policy)
    values = [float(v) for v in np.ravel(scores)]
    if not values:
        raise ValueError("predict_label requires at least one score")
    if policy is ArgmaxPolicy.ZERO_FLOOR:
        best, index, start = 0.0, 0, 0
    else:
        best, index, start = values[0], 0, 1
    for j in range(start, len(values)):
        if values[j] > best:
            best = values[j]
            index = j
    return index


def evaluate(
    test_data: Sequence[Example],
    biases: Sequence[Array],
    weights: Sequence[Array],
    activation: Activation | str,
    argmax: ArgmaxPolicy | str = ArgmaxPolicy.FIRST,
) -> EvaluationResult:
    """Classify every example and build the per-label confusion map."""

    act = ACTIVATION_REGISTRY.resolve(activation)
    policy = ArgmaxPolicy.parse(argmax)
    label_map: Dict[int, LabelBucket] = {}
    count = 0
    for idx, example in enumerate(test_data):
        if example.y_index is None:
            raise ConfigurationError(f"Test example {idx} has no y_index label")
        scores = np.ravel(feed_forward(example.x, biases, weights, act))
        predicted = predict_label(scores, policy)
        expected = int(example.y_index)
        bucket = label_map.setdefault(expected, LabelBucket())
        if predicted == expected:
            count += 1
            bucket.correct.append(idx)
        else:
            bucket.wrong.setdefault(predicted, []).append(idx)
    return EvaluationResult(count=count, total=len(test_data), label_map=label_map)


def total_cost(
    data: Sequence[Example],
    parameters: Parameters,
    cost: Cost | str,
    activation: Activation | str,
) -> float:
    """Mean per-example cost of ``parameters`` over ``data``."""

    if not data:
        return 0.0
    cost_fn = COST_REGISTRY.resolve(cost)
    act = ACTIVATION_REGISTRY.resolve(activation)
    values = [
        cost_fn(feed_forward(ex.x, parameters.biases, parameters.weights, act), ex.y)
        for ex in data
    ]
    return float(np.mean(values))


__all__ = ["ArgmaxPolicy", "evaluate", "predict_label", "total_cost"]
