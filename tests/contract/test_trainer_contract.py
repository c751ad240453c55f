from __future__ import annotations

import numpy as np
import pytest

from sgdnet.core.errors import ConfigurationError
from sgdnet.core.initializers import init_parameters
from sgdnet.core.sampling import GaussianSampler
from sgdnet.core.types import Example
from sgdnet.data.synthetic import make_blobs, xor_examples
from sgdnet.reporting.metrics import SnapshotHistory
from sgdnet.training import trainer as trainer_module
from sgdnet.training.trainer import (
    Trainer,
    TrainerState,
    TrainingOptions,
    train_network,
    validate_options,
)


def _options(**overrides) -> TrainingOptions:
    values = dict(
        sizes=[2, 3, 1],
        epochs=2,
        mini_batch_size=2,
        eta=1.0,
        cost_function="quadratic",
        activation_type="sigmoid",
        seed=0,
    )
    values.update(overrides)
    return TrainingOptions(**values)


def test_zero_epochs_reports_initial_parameters_once():
    history = SnapshotHistory()
    result = train_network(
        _options(epochs=0), xor_examples(), on_state_update=history, rng=np.random.default_rng(5)
    )
    expected = init_parameters([2, 3, 1], GaussianSampler(rng=np.random.default_rng(5)))

    assert history.epochs == [0]
    assert result.snapshots == 1
    for got, want in zip(result.parameters.weights, expected.weights):
        assert np.array_equal(got, want)
    for got, want in zip(history.last.biases, expected.biases):
        assert np.array_equal(got, want)


def test_observer_sees_every_epoch_in_order():
    history = SnapshotHistory()
    result = train_network(_options(epochs=4), xor_examples(), on_state_update=history)
    assert history.epochs == [0, 1, 2, 3, 4]
    assert [s.epoch for s in history.snapshots] == [0, 1, 2, 3, 4]
    assert result.snapshots == 5
    assert result.last_snapshot is history.last


def test_snapshots_do_not_alias_live_parameters():
    history = SnapshotHistory()
    result = train_network(_options(epochs=3), xor_examples(), on_state_update=history)
    initial = history.snapshots[0]
    final = result.parameters

    assert not np.allclose(initial.weights[0], final.weights[0])
    assert np.array_equal(history.last.weights[0], final.weights[0])
    assert history.last.weights[0] is not final.weights[0]
    with pytest.raises(ValueError):
        initial.weights[0][0, 0] = 1.0


def test_training_is_reproducible_with_a_seed():
    first = train_network(_options(epochs=5, seed=11), xor_examples())
    second = train_network(_options(epochs=5, seed=11), xor_examples())
    other = train_network(_options(epochs=5, seed=12), xor_examples())
    for a, b in zip(first.parameters.weights, second.parameters.weights):
        assert np.array_equal(a, b)
    assert not np.array_equal(first.parameters.weights[0], other.parameters.weights[0])


def test_progress_lines(capsys):
    test_data = make_blobs(n_per_class=4, seed=1)
    train_network(
        _options(sizes=[2, 4, 3], epochs=2, mini_batch_size=3),
        make_blobs(n_per_class=5, seed=0),
        test_data=test_data,
    )
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "Starting..."
    assert lines[1] == "Training data points: 15"
    assert lines[2].startswith("Epoch 1 complete: ")
    assert lines[2].endswith(f" out of {len(test_data)}")
    assert lines[3].startswith("Epoch 2 complete: ")
    assert len(lines) == 4


def test_progress_lines_without_test_data(capsys):
    train_network(_options(epochs=1), xor_examples())
    out = capsys.readouterr().out.splitlines()
    assert out[-1] == "Epoch 1 complete"


@pytest.mark.parametrize(
    "overrides",
    [
        {"cost_function": "hinge"},
        {"activation_type": "softplus"},
        {"cost_function": "crossEntropy", "activation_type": "swish"},
        {"mini_batch_size": 0},
        {"mini_batch_size": -3},
        {"sizes": [3]},
        {"sizes": [2, 0, 1]},
        {"epochs": -1},
        {"eta": 0.0},
        {"argmax": "largest"},
    ],
)
def test_configuration_errors_fail_before_initialisation(monkeypatch, overrides):
    def _forbidden(*args, **kwargs):
        raise AssertionError("parameters must not be initialised")

    monkeypatch.setattr(trainer_module, "init_parameters", _forbidden)
    with pytest.raises(ConfigurationError):
        train_network(_options(**overrides), xor_examples())


def test_empty_training_data_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        train_network(_options(), [])


def test_unlabelled_test_data_is_rejected():
    unlabelled = [Example.from_values([0.0, 1.0], [1.0])]
    with pytest.raises(ConfigurationError):
        validate_options(_options(), xor_examples(), unlabelled)


def test_options_accept_camel_case_keys():
    options = TrainingOptions.from_mapping(
        {
            "sizes": [2, 2, 1],
            "epochs": 1,
            "miniBatchSize": 4,
            "eta": 3.0,
            "costFunction": "crossEntropy",
            "activationType": "tanh",
        }
    )
    assert options.mini_batch_size == 4
    assert options.cost_function == "crossEntropy"
    assert options.activation_type == "tanh"
    with pytest.raises(ConfigurationError):
        TrainingOptions.from_mapping({"sizes": [2, 1]})


def test_misspelled_option_keys_are_rejected_before_training(monkeypatch):
    def _fail(*args, **kwargs):
        raise AssertionError("parameters must not be initialised")

    monkeypatch.setattr(trainer_module, "init_parameters", _fail)
    raw = {
        "sizes": [2, 2, 1],
        "epochs": 0,
        "miniBatchSize": 1,
        "eta": 1.0,
        "activation_typ": "relu",
        "costfunction": "crossEntropy",
    }
    with pytest.raises(ConfigurationError, match="activation_typ, costfunction"):
        train_network(raw, xor_examples())


@pytest.mark.parametrize(
    "overrides",
    [
        {"sizes": [2, None, 1]},
        {"sizes": [2, "3", 1]},
        {"sizes": [2, 2.5, 1]},
        {"epochs": None},
        {"mini_batch_size": "4"},
        {"eta": None},
    ],
)
def test_malformed_numbers_raise_configuration_error(overrides):
    with pytest.raises(ConfigurationError):
        validate_options(_options(**overrides), xor_examples())


def test_trainer_state_machine():
    options = _options(epochs=1)
    cost, activation, _ = validate_options(options, xor_examples())
    from sgdnet.training.optimizer import SGDOptimizer

    rng = np.random.default_rng(0)
    trainer = Trainer(SGDOptimizer(1.0, cost, activation), 2, rng)
    params = init_parameters([2, 3, 1], GaussianSampler(rng=rng))
    assert trainer.state is TrainerState.IDLE
    trainer.run(params, xor_examples(), 1)
    assert trainer.state is TrainerState.DONE
    with pytest.raises(RuntimeError):
        trainer.run(params, xor_examples(), 1)


def test_shape_mismatch_propagates_from_training():
    from sgdnet.core.errors import ShapeMismatchError

    bad = [Example.from_values([0.0, 1.0, 2.0], [1.0])]
    with pytest.raises(ShapeMismatchError):
        train_network(_options(epochs=1), bad)
