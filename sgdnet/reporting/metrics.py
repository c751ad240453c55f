"""Metrics sinks that consume training snapshots."""

from __future__ import annotations

import csv
import json
import subprocess
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional, Sequence

from ..core.activations import Activation
from ..core.costs import Cost
from ..core.types import Example, Snapshot
from ..training.evaluation import total_cost


def _git_sha() -> str:
    try:
        out = subprocess.check_output(["git", "rev-parse", "HEAD"], stderr=subprocess.DEVNULL)
        return out.decode().strip()
    except Exception:  # pragma: no cover - git may be unavailable in tests
        return "unknown"


def snapshot_metrics(
    snapshot: Snapshot,
    *,
    data: Optional[Sequence[Example]] = None,
    cost: Cost | str | None = None,
    activation: Activation | str | None = None,
) -> Dict[str, float]:
    """Flatten a snapshot into numeric metrics."""

    metrics: Dict[str, float] = {}
    if snapshot.evaluation is not None:
        result = snapshot.evaluation
        metrics["correct"] = float(result.count)
        metrics["total"] = float(result.total)
        metrics["accuracy"] = float(result.accuracy)
    if data and cost is not None and activation is not None:
        metrics["cost"] = total_cost(data, snapshot.parameters(), cost, activation)
    return metrics


class _SnapshotSink:
    def __init__(
        self,
        *,
        data: Optional[Sequence[Example]] = None,
        cost: Cost | str | None = None,
        activation: Activation | str | None = None,
    ) -> None:
        self.data = data
        self.cost = cost
        self.activation = activation

    def _metrics(self, snapshot: Snapshot) -> Dict[str, float]:
        return snapshot_metrics(
            snapshot, data=self.data, cost=self.cost, activation=self.activation
        )

    def _write(self, epoch: int, metrics: Mapping[str, float]) -> None:
        raise NotImplementedError

    def on_snapshot(self, snapshot: Snapshot, epoch: int) -> None:
        self._write(epoch, self._metrics(snapshot))

    __call__ = on_snapshot


class JsonlSink(_SnapshotSink):
    """Append-only JSONL writer, one record per snapshot."""

    def __init__(
        self,
        path: str | Path,
        *,
        seed: int | None = None,
        sha: str | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")
        self.seed = seed
        self.sha = sha or _git_sha()

    def _write(self, epoch: int, metrics: Mapping[str, float]) -> None:
        record = {"epoch": int(epoch), "seed": self.seed, "sha": self.sha}
        record.update({k: float(v) for k, v in metrics.items()})
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record) + "\n")


class CsvSink(_SnapshotSink):
    """Write snapshot metrics to CSV with a stable schema."""

    def __init__(self, path: str | Path, **kwargs) -> None:
        super().__init__(**kwargs)
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")

    def _write(self, epoch: int, metrics: Mapping[str, float]) -> None:
        row = {"epoch": int(epoch)}
        row.update({k: float(v) for k, v in metrics.items()})
        with self.path.open("a", encoding="utf-8", newline="") as handle:
            fieldnames = sorted(row.keys())
            writer = csv.DictWriter(handle, fieldnames=fieldnames)
            if handle.tell() == 0:
                writer.writeheader()
            writer.writerow(row)


class ObserverChain:
    """Deliver each snapshot to several observers, in order."""

    def __init__(self, observers: Iterable[object]) -> None:
        self.observers = [obs for obs in observers if obs is not None]

    def __call__(self, snapshot: Snapshot, epoch: int) -> None:
        for observer in self.observers:
            observer(snapshot, epoch)  # type: ignore[operator]


class SnapshotHistory:
    """Keep every delivered snapshot in memory."""

    def __init__(self) -> None:
        self.snapshots: list[Snapshot] = []
        self.epochs: list[int] = []

    def __call__(self, snapshot: Snapshot, epoch: int) -> None:
        self.snapshots.append(snapshot)
        self.epochs.append(int(epoch))

    @property
    def last(self) -> Optional[Snapshot]:
        return self.snapshots[-1] if self.snapshots else None


__all__ = ["CsvSink", "JsonlSink", "ObserverChain", "SnapshotHistory", "snapshot_metrics"]
