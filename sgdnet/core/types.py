"""Core typing contracts for SGDNet."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Optional, Sequence

import numpy as np

Array = np.ndarray
Tensor = List[Array]


@dataclass(frozen=True)
class Example:
    """A single labelled example made of column vectors."""

    x: Array
    y: Array
    y_index: Optional[int] = None

    @classmethod
    def from_values(
        cls, x: Sequence[float], y: Sequence[float], y_index: int | None = None
    ) -> "Example":
        """Build an example from flat sequences."""

        x_arr = np.asarray(x, dtype=np.float64).reshape(-1, 1)
        y_arr = np.asarray(y, dtype=np.float64).reshape(-1, 1)
        return cls(x=x_arr, y=y_arr, y_index=None if y_index is None else int(y_index))


class Parameters(NamedTuple):
    """Biases and weights of a network; updates produce a new value."""

    biases: Tensor
    weights: Tensor

    @property
    def sizes(self) -> List[int]:
        if not self.weights:
            return []
        dims = [int(self.weights[0].shape[1])]
        dims.extend(int(w.shape[0]) for w in self.weights)
        return dims

    def parameter_count(self) -> int:
        return int(sum(b.size for b in self.biases) + sum(w.size for w in self.weights))


@dataclass
class ForwardTrace:
    """Activations ``a_0..a_L`` and pre-activations ``z_0..z_{L-1}`` of one pass."""

    activations: List[Array]
    zs: List[Array]

    @property
    def output(self) -> Array:
        return self.activations[-1]


@dataclass
class LabelBucket:
    """Indices of correctly and wrongly classified examples for one label."""

    correct: List[int] = field(default_factory=list)
    wrong: Dict[int, List[int]] = field(default_factory=dict)


@dataclass(frozen=True)
class EvaluationResult:
    """Outcome of evaluating a labelled test set."""

    count: int
    total: int
    label_map: Dict[int, LabelBucket]

    @property
    def accuracy(self) -> float:
        return self.count / self.total if self.total else 0.0

    def wrong_count(self) -> int:
        return sum(
            len(indices)
            for bucket in self.label_map.values()
            for indices in bucket.wrong.values()
        )


@dataclass(frozen=True)
class Snapshot:
    """Point-in-time copy of the parameters delivered to observers."""

    biases: tuple
    weights: tuple
    epoch: int
    evaluation: Optional[EvaluationResult] = None

    def parameters(self) -> Parameters:
        """Return writable copies usable as a training starting point."""

        return Parameters(
            biases=[b.copy() for b in self.biases],
            weights=[w.copy() for w in self.weights],
        )


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :meth:`sgdnet.training.trainer.Trainer.run`."""

    epochs: int
    parameters: Parameters
    snapshots: int
    last_snapshot: Optional[Snapshot] = None
    metrics_path: str = ""


__all__ = [
    "Array",
    "Tensor",
    "Example",
    "Parameters",
    "ForwardTrace",
    "LabelBucket",
    "EvaluationResult",
    "Snapshot",
    "RunResult",
]
