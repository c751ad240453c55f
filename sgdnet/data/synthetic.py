"""Pure in-memory synthetic datasets."""

from __future__ import annotations

from typing import List, Sequence

import numpy as np

from ..core.types import Example
from .registry import DatasetSplits, register_dataset

XOR_TABLE = (
    ((0.0, 0.0), 0.0),
    ((0.0, 1.0), 1.0),
    ((1.0, 0.0), 1.0),
    ((1.0, 1.0), 0.0),
)


def one_hot(index: int, num_classes: int) -> np.ndarray:
    out = np.zeros((num_classes, 1), dtype=np.float64)
    out[index, 0] = 1.0
    return out


def xor_examples() -> List[Example]:
    """The four canonical XOR examples with a single sigmoid-style output."""

    return [Example.from_values(x, [y]) for x, y in XOR_TABLE]


def _xor_factory(**_: object) -> DatasetSplits:
    train = xor_examples()
    # one output unit, nothing to argmax over
    return DatasetSplits(name="xor", train=train, test=[], provenance={"type": "xor"})


def make_blobs(
    n_per_class: int = 40,
    centers: Sequence[Sequence[float]] = ((2.0, 2.0), (-2.0, -2.0), (2.0, -2.0)),
    spread: float = 0.5,
    seed: int = 0,
) -> List[Example]:
    """Gaussian clusters, one per centre, with one-hot targets."""

    rng = np.random.default_rng(seed)
    centres = np.asarray(centers, dtype=np.float64)
    num_classes = centres.shape[0]
    examples: List[Example] = []
    for label, centre in enumerate(centres):
        points = centre + spread * rng.standard_normal((n_per_class, centres.shape[1]))
        for point in points:
            examples.append(
                Example(x=point.reshape(-1, 1), y=one_hot(label, num_classes), y_index=label)
            )
    order = rng.permutation(len(examples))
    return [examples[int(i)] for i in order]


def _blobs_factory(
    n_per_class: int = 40,
    centers: Sequence[Sequence[float]] = ((2.0, 2.0), (-2.0, -2.0), (2.0, -2.0)),
    spread: float = 0.5,
    seed: int = 0,
    test_split: float = 0.25,
    **_: object,
) -> DatasetSplits:
    examples = make_blobs(n_per_class=n_per_class, centers=centers, spread=spread, seed=seed)
    n_test = int(round(len(examples) * float(test_split)))
    n_test = min(n_test, len(examples) - 1)
    train, test = examples[n_test:], examples[:n_test]
    provenance = {
        "type": "blobs",
        "n_per_class": n_per_class,
        "spread": spread,
        "seed": seed,
        "test_split": test_split,
    }
    return DatasetSplits(name="blobs", train=train, test=test, provenance=provenance)


register_dataset("xor", _xor_factory)
register_dataset("blobs", _blobs_factory)

__all__ = ["XOR_TABLE", "make_blobs", "one_hot", "xor_examples"]
