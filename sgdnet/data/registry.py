"""Dataset registry returning in-memory example splits."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, MutableMapping

from ..core.types import Example


@dataclass(frozen=True)
class DatasetSplits:
    """Training and test examples of a dataset."""

    name: str
    train: List[Example]
    test: List[Example]
    provenance: Dict[str, Any] = field(default_factory=dict)

    @property
    def d_in(self) -> int:
        return int(self.train[0].x.shape[0])

    @property
    def d_out(self) -> int:
        return int(self.train[0].y.shape[0])


DatasetFactory = Callable[..., DatasetSplits]


_REGISTRY: MutableMapping[str, DatasetFactory] = {}


def register_dataset(
    name: str | None = None,
    factory: DatasetFactory | None = None,
) -> Callable[[DatasetFactory], DatasetFactory] | DatasetFactory:
    """Register a dataset factory.

    Works as a decorator::

        @register_dataset("xor")
        def make_xor(**kwargs):
            ...

    or directly::

        register_dataset("xor", make_xor)
    """

    def _decorator(func: DatasetFactory) -> DatasetFactory:
        _REGISTRY[str(name or func.__name__)] = func
        return func

    if factory is not None:
        return _decorator(factory)
    return _decorator


def get_dataset(name: str, /, **options: Any) -> DatasetSplits:
    """Return the :class:`DatasetSplits` for ``name``."""

    if name not in _REGISTRY:
        available = ", ".join(available_datasets())
        raise KeyError(f"Unknown dataset {name!r}. Available datasets: {available}")
    splits = _REGISTRY[name](**options)
    _validate(splits)
    return splits


def available_datasets() -> Iterable[str]:
    return sorted(_REGISTRY)


def _validate(splits: DatasetSplits) -> None:
    if not splits.train:
        raise ValueError(f"Dataset {splits.name!r} has no training examples")
    shapes = {(ex.x.shape, ex.y.shape) for ex in [*splits.train, *splits.test]}
    if len(shapes) != 1:
        raise ValueError(f"Dataset {splits.name!r} mixes example shapes: {sorted(shapes)}")


__all__ = ["DatasetSplits", "available_datasets", "get_dataset", "register_dataset"]
