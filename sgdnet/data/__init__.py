"""Example sets used by the presets and tests."""

from . import synthetic  # noqa: F401  registers the built-in datasets
from .registry import DatasetSplits, available_datasets, get_dataset, register_dataset

__all__ = ["DatasetSplits", "available_datasets", "get_dataset", "register_dataset"]
