"""Reporting utilities for SGDNet."""

from .metrics import CsvSink, JsonlSink, ObserverChain, SnapshotHistory
from .plots import PlotAdapter
from .snapshot import report

__all__ = ["CsvSink", "JsonlSink", "ObserverChain", "PlotAdapter", "SnapshotHistory", "report"]
