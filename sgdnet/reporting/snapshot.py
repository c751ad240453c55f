"""Per-epoch snapshots delivered to an external observer."""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from ..core import matrix
from ..core.activations import Activation
from ..core.types import Example, Parameters, Snapshot
from ..training.evaluation import ArgmaxPolicy, evaluate

Observer = Callable[[Snapshot, int], None]


def progress_line(epoch: int, snapshot: Snapshot) -> str:
    if snapshot.evaluation is None:
        return f"Epoch {epoch} complete"
    result = snapshot.evaluation
    return f"Epoch {epoch} complete: {result.count} out of {result.total}"


def report(
    parameters: Parameters,
    epoch: int,
    activation: Activation | str,
    test_data: Optional[Sequence[Example]] = None,
    observer: Optional[Observer] = None,
    *,
    argmax: ArgmaxPolicy | str = ArgmaxPolicy.FIRST,
) -> Snapshot:
    """Copy the parameters, evaluate if asked and hand the snapshot over.

    The observer is called synchronously; training resumes only after it
    returns. The snapshot owns read-only copies, so later updates never show
    through it.
    """

    biases = matrix.deep_copy(parameters.biases, readonly=True)
    weights = matrix.deep_copy(parameters.weights, readonly=True)
    evaluation = None
    if test_data:
        evaluation = evaluate(test_data, biases, weights, activation, argmax=argmax)
    snapshot = Snapshot(biases=biases, weights=weights, epoch=int(epoch), evaluation=evaluation)
    if epoch > 0:
        print(progress_line(epoch, snapshot))
    if observer is not None:
        observer(snapshot, epoch)
    return snapshot


__all__ = ["Observer", "progress_line", "report"]
