import json
from pathlib import Path

import pytest

from cli.main import main


def test_cli_runs_preset(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    main(["--preset", "blobs-sigmoid", "--epochs", "2"])
    run_dir = Path("runs/blobs-sigmoid")
    assert (run_dir / "metrics.jsonl").exists()
    assert (run_dir / "metrics.csv").exists()
    payload = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert payload["epochs"] == 2
    assert payload["snapshots"] == 3
    assert "correct" in payload


def test_cli_overrides_and_dump_config(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    main(
        [
            "--preset",
            "xor-sigmoid-quadratic",
            "--epochs",
            "1",
            "--eta",
            "0.5",
            "--activation",
            "tanh",
            "--run-dir",
            str(tmp_path / "custom"),
            "--dump-config",
            str(tmp_path / "resolved.json"),
        ]
    )
    resolved = json.loads((tmp_path / "resolved.json").read_text())
    assert resolved["train"]["eta"] == 0.5
    assert resolved["model"]["activation"] == "tanh"
    assert (tmp_path / "custom" / "metrics.jsonl").exists()


def test_cli_lists_presets(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--list-presets"])
    assert exc.value.code == 0
    assert "xor-sigmoid-quadratic" in capsys.readouterr().out.splitlines()
