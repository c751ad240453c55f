"""SGDNet public API."""

from .core import activations, costs, matrix, types  # noqa: F401
from .core.errors import ConfigurationError, EmptyBatchError, SGDNetError, ShapeMismatchError
from .core.initializers import init_biases, init_parameters, init_weights
from .core.network import backprop, feed_forward, forward_trace
from .core.sampling import GaussianSampler
from .core.types import Example, Parameters, Snapshot
from .training.evaluation import ArgmaxPolicy, evaluate, total_cost
from .training.optimizer import SGDOptimizer, update_mini_batch
from .training.pipelines import load_preset, presets, run_pipeline
from .training.trainer import Trainer, TrainingOptions, split_into_mini_batches, train_network

__all__ = [
    "ArgmaxPolicy",
    "ConfigurationError",
    "EmptyBatchError",
    "Example",
    "GaussianSampler",
    "Parameters",
    "SGDNetError",
    "SGDOptimizer",
    "ShapeMismatchError",
    "Snapshot",
    "Trainer",
    "TrainingOptions",
    "activations",
    "backprop",
    "costs",
    "evaluate",
    "feed_forward",
    "forward_trace",
    "init_biases",
    "init_parameters",
    "init_weights",
    "load_preset",
    "matrix",
    "presets",
    "run_pipeline",
    "split_into_mini_batches",
    "total_cost",
    "train_network",
    "types",
    "update_mini_batch",
]
