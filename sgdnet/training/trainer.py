"""Epoch scheduling and the training entry point."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from functools import reduce
from typing import Any, List, Mapping, Optional, Sequence

import numpy as np

from ..core.activations import REGISTRY as ACTIVATION_REGISTRY
from ..core.activations import Activation
from ..core.costs import REGISTRY as COST_REGISTRY
from ..core.costs import Cost
from ..core.errors import ConfigurationError
from ..core.initializers import init_parameters
from ..core.sampling import GaussianSampler, make_rng
from ..core.types import Example, Parameters, RunResult, Snapshot
from ..reporting.snapshot import Observer, report
from .evaluation import ArgmaxPolicy
from .optimizer import SGDOptimizer

_CAMEL_KEYS = {
    "miniBatchSize": "mini_batch_size",
    "costFunction": "cost_function",
    "activationType": "activation_type",
}


@dataclass
class TrainingOptions:
    """Hyper-parameters of a training run."""

    sizes: Sequence[int]
    epochs: int
    mini_batch_size: int
    eta: float
    cost_function: str = "quadratic"
    activation_type: str = "sigmoid"
    seed: Optional[int] = None
    argmax: str = ArgmaxPolicy.FIRST.value

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "TrainingOptions":
        """Build options from snake_case or camelCase keys."""

        known = {"sizes", "epochs", "mini_batch_size", "eta", "cost_function",
                 "activation_type", "seed", "argmax"}
        values: dict = {}
        unknown = []
        for key, value in raw.items():
            name = _CAMEL_KEYS.get(key, key)
            if name in known:
                values[name] = value
            else:
                unknown.append(key)
        if unknown:
            raise ConfigurationError(
                f"Unknown training option(s): {', '.join(sorted(unknown))}"
            )
        missing = {"sizes", "epochs", "mini_batch_size", "eta"} - set(values)
        if missing:
            raise ConfigurationError(
                f"Training options missing required keys: {', '.join(sorted(missing))}"
            )
        return cls(**values)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, np.integer, np.floating)) and not isinstance(value, bool)


def _is_int_at_least(value: Any, minimum: int) -> bool:
    return _is_number(value) and float(value).is_integer() and value >= minimum


def validate_options(
    options: TrainingOptions,
    training_data: Sequence[Example],
    test_data: Optional[Sequence[Example]] = None,
) -> tuple[Cost, Activation, ArgmaxPolicy]:
    """Check ``options`` and resolve the registry names up front.

    Cost and activation are looked up independently, each against its own
    registry.
    """

    cost = COST_REGISTRY.resolve(options.cost_function)
    activation = ACTIVATION_REGISTRY.resolve(options.activation_type)
    policy = ArgmaxPolicy.parse(options.argmax)

    sizes = list(options.sizes)
    if len(sizes) < 2:
        raise ConfigurationError(f"sizes must list at least two layers, got {sizes}")
    if any(not _is_int_at_least(s, 1) for s in sizes):
        raise ConfigurationError(f"sizes must be positive integers, got {sizes}")
    if not _is_int_at_least(options.epochs, 0):
        raise ConfigurationError(f"epochs must be a non-negative integer, got {options.epochs}")
    if not _is_int_at_least(options.mini_batch_size, 1):
        raise ConfigurationError(
            f"mini_batch_size must be a positive integer, got {options.mini_batch_size}"
        )
    if not (_is_number(options.eta) and options.eta > 0):
        raise ConfigurationError(f"eta must be positive, got {options.eta}")
    if not training_data:
        raise ConfigurationError("training_data must contain at least one example")
    if test_data:
        for idx, example in enumerate(test_data):
            if example.y_index is None:
                raise ConfigurationError(f"Test example {idx} has no y_index label")
    return cost, activation, policy


def shuffle(data: Sequence[Example], rng: np.random.Generator) -> List[Example]:
    """Return a uniformly shuffled copy of ``data``."""

    order = rng.permutation(len(data))
    return [data[int(i)] for i in order]


def split_into_mini_batches(data: Sequence[Example], size: int) -> List[List[Example]]:
    """Partition ``data`` into consecutive batches of ``size``.

    >>> [len(b) for b in split_into_mini_batches(list(range(10)), 4)]
    [4, 4, 2]
    """

    if size <= 0:
        raise ConfigurationError(f"mini-batch size must be positive, got {size}")
    return [list(data[start : start + size]) for start in range(0, len(data), size)]


class TrainerState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    DONE = "done"


class Trainer:
    """Run the epoch loop: shuffle, partition, fold the optimizer, report."""

    def __init__(
        self,
        optimizer: SGDOptimizer,
        mini_batch_size: int,
        rng: np.random.Generator,
        *,
        observer: Optional[Observer] = None,
        argmax: ArgmaxPolicy | str = ArgmaxPolicy.FIRST,
    ) -> None:
        self.optimizer = optimizer
        self.mini_batch_size = int(mini_batch_size)
        self.rng = rng
        self.observer = observer
        self.argmax = ArgmaxPolicy.parse(argmax)
        self.state = TrainerState.IDLE

    def run_epoch(self, params: Parameters, training_data: Sequence[Example]) -> Parameters:
        batches = split_into_mini_batches(shuffle(training_data, self.rng), self.mini_batch_size)
        return reduce(self.optimizer.step, batches, params)

    def run(
        self,
        params: Parameters,
        training_data: Sequence[Example],
        epochs: int,
        test_data: Optional[Sequence[Example]] = None,
    ) -> RunResult:
        if self.state is not TrainerState.IDLE:
            raise RuntimeError(f"Trainer cannot run from state {self.state.value!r}")
        self.state = TrainerState.RUNNING
        print(f"Training data points: {len(training_data)}")

        last: Snapshot = self._report(params, 0, test_data)
        emitted = 1
        for epoch in range(1, epochs + 1):
            params = self.run_epoch(params, training_data)
            last = self._report(params, epoch, test_data)
            emitted += 1

        self.state = TrainerState.DONE
        return RunResult(epochs=epochs, parameters=params, snapshots=emitted, last_snapshot=last)

    def _report(
        self, params: Parameters, epoch: int, test_data: Optional[Sequence[Example]]
    ) -> Snapshot:
        return report(
            params,
            epoch,
            self.optimizer.activation,
            test_data,
            self.observer,
            argmax=self.argmax,
        )


def train_network(
    options: TrainingOptions | Mapping[str, Any],
    training_data: Sequence[Example],
    test_data: Optional[Sequence[Example]] = None,
    on_state_update: Optional[Observer] = None,
    rng: Optional[np.random.Generator] = None,
) -> RunResult:
    """Validate ``options``, initialise parameters and train.

    Configuration problems surface as :class:`ConfigurationError` before any
    parameter is drawn. Errors raised while training propagate unchanged.
    """

    if not isinstance(options, TrainingOptions):
        options = TrainingOptions.from_mapping(options)
    cost, activation, policy = validate_options(options, training_data, test_data)

    print("Starting...")
    rng = rng if rng is not None else make_rng(options.seed)
    params = init_parameters(list(options.sizes), GaussianSampler(0.0, 1.0, rng))
    optimizer = SGDOptimizer(eta=float(options.eta), cost=cost, activation=activation)
    trainer = Trainer(
        optimizer,
        options.mini_batch_size,
        rng,
        observer=on_state_update,
        argmax=policy,
    )
    return trainer.run(params, training_data, int(options.epochs), test_data)


__all__ = [
    "Trainer",
    "TrainerState",
    "TrainingOptions",
    "shuffle",
    "split_into_mini_batches",
    "train_network",
    "validate_options",
]
