"""Pipeline assembly: presets, dataset lookup, sinks and training."""

from __future__ import annotations

import json
from copy import deepcopy
from dataclasses import replace
from pathlib import Path
from typing import Dict, List, Mapping, Sequence

from .. import data as datasets
from ..core.errors import ConfigurationError
from ..core.types import RunResult
from ..reporting.metrics import CsvSink, JsonlSink, ObserverChain
from ..reporting.plots import PlotAdapter
from .trainer import TrainingOptions, train_network

_PRESETS: Dict[str, Mapping[str, object]] = {
    "xor-sigmoid-quadratic": {
        "data": {"name": "xor", "options": {}},
        "model": {"hidden": [2], "activation": "sigmoid"},
        "train": {
            "epochs": 1000,
            "mini_batch_size": 1,
            "eta": 3.0,
            "cost": "quadratic",
            "seed": 0,
            "run_dir": "runs/xor-sigmoid-quadratic",
            "enable_plots": False,
        },
    },
    "xor-sigmoid-cross-entropy": {
        "data": {"name": "xor", "options": {}},
        "model": {"hidden": [3], "activation": "sigmoid"},
        "train": {
            "epochs": 500,
            "mini_batch_size": 2,
            "eta": 1.0,
            "cost": "cross_entropy",
            "seed": 1,
            "run_dir": "runs/xor-sigmoid-cross-entropy",
            "enable_plots": False,
        },
    },
    "blobs-sigmoid": {
        "data": {"name": "blobs", "options": {"n_per_class": 40, "seed": 0}},
        "model": {"hidden": [8], "activation": "sigmoid"},
        "train": {
            "epochs": 10,
            "mini_batch_size": 10,
            "eta": 3.0,
            "cost": "cross_entropy",
            "seed": 7,
            "run_dir": "runs/blobs-sigmoid",
            "enable_plots": False,
        },
    },
    "blobs-tanh-quadratic": {
        "data": {"name": "blobs", "options": {"n_per_class": 40, "seed": 0}},
        "model": {"hidden": [8], "activation": "tanh"},
        "train": {
            "epochs": 10,
            "mini_batch_size": 8,
            "eta": 0.5,
            "cost": "quadratic",
            "seed": 3,
            "run_dir": "runs/blobs-tanh-quadratic",
            "enable_plots": False,
        },
    },
}


def presets() -> Mapping[str, Mapping[str, object]]:
    return {name: deepcopy(cfg) for name, cfg in _PRESETS.items()}


def load_preset(name: str) -> Dict[str, object]:
    try:
        return deepcopy(_PRESETS[name])  # type: ignore[return-value]
    except KeyError as exc:
        available = ", ".join(sorted(_PRESETS))
        raise KeyError(f"Unknown preset {name!r}. Available presets: {available}") from exc


def load_config_file(path: str | Path) -> Dict[str, object]:
    """Read a JSON or YAML config mapping."""

    path = Path(path)
    text = path.read_text()
    if path.suffix.lower() in {".yml", ".yaml"}:
        try:
            import yaml  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to load YAML configs") from exc
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text or "{}")
    if not isinstance(data, Mapping):
        raise TypeError(f"Config {path.name} must decode to a mapping")
    return dict(data)


def merge_config(base: Dict[str, object], override: Mapping[str, object]) -> Dict[str, object]:
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), Mapping):
            base[key] = merge_config(dict(base[key]), value)  # type: ignore[arg-type]
        else:
            base[key] = value
    return base


def build_sizes(model_cfg: Mapping[str, object], d_in: int, d_out: int) -> List[int]:
    """Resolve the topology from ``sizes`` or from ``hidden`` plus data dims."""

    if "sizes" in model_cfg:
        return [int(s) for s in model_cfg["sizes"]]  # type: ignore[union-attr]
    hidden = [int(h) for h in model_cfg.get("hidden", [])]  # type: ignore[union-attr]
    return [int(d_in), *hidden, int(d_out)]


def build_options(config: Mapping[str, object], sizes: Sequence[int]) -> TrainingOptions:
    model_cfg = dict(config.get("model", {}))  # type: ignore[arg-type]
    train_cfg = dict(config.get("train", {}))  # type: ignore[arg-type]
    seed = train_cfg.get("seed")
    return TrainingOptions(
        sizes=list(sizes),
        epochs=int(train_cfg.get("epochs", 1)),
        mini_batch_size=int(train_cfg.get("mini_batch_size", 10)),
        eta=float(train_cfg.get("eta", 3.0)),
        cost_function=str(train_cfg.get("cost", "quadratic")),
        activation_type=str(model_cfg.get("activation", "sigmoid")),
        seed=int(seed) if seed is not None else None,
        argmax=str(train_cfg.get("argmax", "first")),
    )


def run_pipeline(config: Mapping[str, object]) -> RunResult:
    """Train the network described by ``config`` and write metrics sinks."""

    data_cfg = dict(config["data"])  # type: ignore[arg-type]
    model_cfg = dict(config.get("model", {}))  # type: ignore[arg-type]
    train_cfg = dict(config.get("train", {}))  # type: ignore[arg-type]

    splits = datasets.get_dataset(str(data_cfg["name"]), **dict(data_cfg.get("options", {})))
    sizes = build_sizes(model_cfg, splits.d_in, splits.d_out)
    if sizes[0] != splits.d_in or sizes[-1] != splits.d_out:
        raise ConfigurationError(
            f"Topology {sizes} does not match dataset dims "
            f"({splits.d_in} in, {splits.d_out} out)"
        )
    options = build_options(config, sizes)

    _print_startup_summary(
        dataset_name=splits.name,
        sizes=sizes,
        options=options,
        param_count=sum(sizes[i + 1] * (sizes[i] + 1) for i in range(len(sizes) - 1)),
    )

    observers: list = []
    jsonl = None
    plots = None
    run_dir = train_cfg.get("run_dir")
    if run_dir:
        run_dir = Path(str(run_dir))
        run_dir.mkdir(parents=True, exist_ok=True)
        sink_kwargs = {
            "data": splits.train,
            "cost": options.cost_function,
            "activation": options.activation_type,
        }
        jsonl = JsonlSink(run_dir / "metrics.jsonl", seed=options.seed, **sink_kwargs)
        observers.append(jsonl)
        observers.append(CsvSink(run_dir / "metrics.csv", **sink_kwargs))
        plots = PlotAdapter(run_dir, enable_plots=bool(train_cfg.get("enable_plots", False)))
        observers.append(plots)
        (run_dir / "config.json").write_text(json.dumps(_safe_config(config, sizes), indent=2))

    result = train_network(
        options,
        splits.train,
        splits.test or None,
        on_state_update=ObserverChain(observers) if observers else None,
    )
    if plots is not None:
        plots.close()
    if jsonl is not None:
        result = replace(result, metrics_path=str(jsonl.path))
    return result


def _safe_config(config: Mapping[str, object], sizes: Sequence[int]) -> Mapping[str, object]:
    copied = json.loads(json.dumps(config))
    copied.setdefault("model", {})["sizes"] = list(sizes)
    return copied


def _print_startup_summary(
    *,
    dataset_name: str,
    sizes: Sequence[int],
    options: TrainingOptions,
    param_count: int,
) -> None:
    print("=== SGDNet run ===")
    print(f"Dataset       : {dataset_name}")
    print(f"Topology      : {list(sizes)}")
    print(f"Activation    : {options.activation_type}")
    print(f"Cost          : {options.cost_function}")
    print(f"Eta           : {options.eta}")
    print(f"Batch size    : {options.mini_batch_size}")
    print(f"Epochs        : {options.epochs}")
    print(f"Parameters    : {param_count}")
    print("==================")


__all__ = [
    "build_options",
    "build_sizes",
    "load_config_file",
    "load_preset",
    "merge_config",
    "presets",
    "run_pipeline",
]
