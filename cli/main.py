"""Command line entry point for SGDNet training runs."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Iterable

from sgdnet.core.activations import REGISTRY as ACTIVATION_REGISTRY
from sgdnet.core.costs import REGISTRY as COST_REGISTRY
from sgdnet.training import pipelines


def _format_result(result) -> str:
    payload = {
        "epochs": result.epochs,
        "snapshots": result.snapshots,
        "metrics": result.metrics_path,
    }
    last = result.last_snapshot
    if last is not None and last.evaluation is not None:
        payload["correct"] = last.evaluation.count
        payload["total"] = last.evaluation.total
    return json.dumps(payload, sort_keys=True)


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    preset_names = sorted(pipelines.presets().keys())
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        choices=preset_names,
        default="xor-sigmoid-quadratic",
        help="Preset configuration to execute",
    )
    parser.add_argument("--config", type=Path, help="Optional JSON/YAML config override")
    parser.add_argument("--epochs", type=int, help="Number of training epochs")
    parser.add_argument("--eta", type=float, help="Learning rate")
    parser.add_argument("--mini-batch-size", type=int, help="Examples per gradient step")
    parser.add_argument(
        "--activation",
        choices=sorted(ACTIVATION_REGISTRY.names()),
        help="Activation applied at every layer",
    )
    parser.add_argument("--cost", choices=sorted(COST_REGISTRY.names()), help="Cost function")
    parser.add_argument("--seed", type=int, help="Seed for initialisation and shuffling")
    parser.add_argument("--run-dir", type=Path, help="Directory for metrics sinks")
    parser.add_argument(
        "--enable-plots", action="store_true", help="Enable plotting adapters"
    )
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )
    return parser.parse_args(argv)


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)

    if args.list_presets:
        for name in sorted(pipelines.presets().keys()):
            print(name)
        raise SystemExit(0)

    config = pipelines.load_preset(args.preset)
    if args.config:
        override = pipelines.load_config_file(args.config)
        if {"data", "model", "train"} <= set(override.keys()):
            config = json.loads(json.dumps(override))
        else:
            config = pipelines.merge_config(config, override)

    train_cfg = config.setdefault("train", {})
    if args.epochs is not None:
        train_cfg["epochs"] = int(args.epochs)
    if args.eta is not None:
        train_cfg["eta"] = float(args.eta)
    if args.mini_batch_size is not None:
        train_cfg["mini_batch_size"] = int(args.mini_batch_size)
    if args.cost is not None:
        train_cfg["cost"] = args.cost
    if args.seed is not None:
        train_cfg["seed"] = int(args.seed)
    if args.run_dir is not None:
        train_cfg["run_dir"] = str(args.run_dir)
    if args.enable_plots:
        train_cfg["enable_plots"] = True
    if args.activation is not None:
        config.setdefault("model", {})["activation"] = args.activation

    if args.dump_config:
        args.dump_config.parent.mkdir(parents=True, exist_ok=True)
        args.dump_config.write_text(json.dumps(config, indent=2))

    result = pipelines.run_pipeline(config)
    print(_format_result(result))


if __name__ == "__main__":
    main()
