import math

import numpy as np
import pytest

from sgdnet.core import matrix
from sgdnet.core.activations import REGISTRY as ACTIVATIONS
from sgdnet.core.costs import REGISTRY as COSTS
from sgdnet.core.errors import ConfigurationError, ShapeMismatchError
from sgdnet.core.initializers import init_biases, init_parameters, init_weights
from sgdnet.core.sampling import GaussianSampler


class _ScriptedRng:
    """Stand-in generator returning pre-set uniform draws."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def uniform(self, low, high):
        self.calls += 1
        return self.values.pop(0)


def test_gaussian_sampler_caches_second_value_of_pair():
    rng = _ScriptedRng([0.3, 0.4])
    sampler = GaussianSampler(0.0, 1.0, rng=rng)
    s = 0.3**2 + 0.4**2
    w = math.sqrt(-2.0 * math.log(s) / s)

    assert sampler.sample() == pytest.approx(0.3 * w)
    assert sampler.sample() == pytest.approx(0.4 * w)
    assert rng.calls == 2


def test_gaussian_sampler_rejects_points_outside_unit_disk():
    rng = _ScriptedRng([0.9, 0.9, 0.6, 0.0])
    sampler = GaussianSampler(5.0, 2.0, rng=rng)
    w = math.sqrt(-2.0 * math.log(0.36) / 0.36)

    assert sampler() == pytest.approx(5.0 + 2.0 * 0.6 * w)
    assert rng.calls == 4


def test_gaussian_sampler_is_seedable_and_well_distributed():
    first = GaussianSampler(rng=np.random.default_rng(3))
    second = GaussianSampler(rng=np.random.default_rng(3))
    draws_a = [first.sample() for _ in range(20000)]
    draws_b = [second.sample() for _ in range(20000)]
    assert draws_a == draws_b
    assert abs(np.mean(draws_a)) < 0.05
    assert abs(np.std(draws_a) - 1.0) < 0.05

    shifted = GaussianSampler(10.0, 0.5, rng=np.random.default_rng(4))
    values = np.array([shifted() for _ in range(20000)])
    assert abs(values.mean() - 10.0) < 0.05
    assert abs(values.std() - 0.5) < 0.05


@pytest.mark.parametrize("sizes", [[2, 3, 1], [4, 1], [784, 30, 10], [3, 5, 5, 2]])
def test_initializer_shapes_follow_topology(sizes):
    sampler = GaussianSampler(rng=np.random.default_rng(0))
    biases = init_biases(sizes, sampler)
    weights = init_weights(sizes, sampler)
    assert len(biases) == len(weights) == len(sizes) - 1
    for i in range(len(sizes) - 1):
        assert biases[i].shape == (sizes[i + 1], 1)
        assert weights[i].shape == (sizes[i + 1], sizes[i])


def test_weights_are_fan_in_scaled_and_biases_are_not():
    sizes = [400, 300, 2]
    params = init_parameters(sizes, GaussianSampler(rng=np.random.default_rng(1)))
    assert params.weights[0].std() == pytest.approx(1.0 / math.sqrt(400), rel=0.05)
    assert params.weights[1].std() == pytest.approx(1.0 / math.sqrt(300), rel=0.1)
    assert params.biases[0].std() == pytest.approx(1.0, rel=0.2)
    assert params.sizes == sizes


def test_initializer_draw_order_is_row_major():
    sizes = [2, 2]
    reference = GaussianSampler(rng=np.random.default_rng(9))
    draws = [reference() for _ in range(4)]
    weights = init_weights(sizes, GaussianSampler(rng=np.random.default_rng(9)))
    root = math.sqrt(2)
    assert np.allclose(weights[0], np.array(draws).reshape(2, 2) / root)


def test_matrix_ops_refuse_broadcasting():
    column = np.ones((3, 1))
    row = np.ones((1, 3))
    with pytest.raises(ShapeMismatchError):
        matrix.add(column, row)
    with pytest.raises(ShapeMismatchError):
        matrix.subtract(column, np.ones((2, 1)))
    with pytest.raises(ShapeMismatchError):
        matrix.elementwise_multiply(column, row)
    with pytest.raises(ShapeMismatchError):
        matrix.matmul(np.ones((2, 3)), np.ones((2, 1)))
    assert matrix.matmul(column, row).shape == (3, 3)
    assert matrix.transpose(column).shape == (1, 3)


def test_matrix_errors_carry_operand_shapes():
    assert matrix.shape_of(np.ones((4, 2))) == (4, 2)
    with pytest.raises(ShapeMismatchError) as exc:
        matrix.add(np.ones((3, 1)), np.ones((1, 3)))
    assert (exc.value.op, exc.value.left, exc.value.right) == ("add", (3, 1), (1, 3))


def test_matrix_zeros_like_and_deep_copy():
    tensors = [np.ones((2, 1)), np.ones((3, 2))]
    zeros = matrix.zeros_like(tensors)
    assert [z.shape for z in zeros] == [(2, 1), (3, 2)]
    assert all(not z.any() for z in zeros)

    copies = matrix.deep_copy(tensors, readonly=True)
    tensors[0][0, 0] = 42.0
    assert copies[0][0, 0] == 1.0
    with pytest.raises(ValueError):
        copies[1][0, 0] = 5.0


def test_activation_registry_derivatives_match_finite_differences():
    z = np.linspace(-3.0, 3.0, 13).reshape(-1, 1) + 0.05
    eps = 1e-6
    for name in ("sigmoid", "tanh", "relu"):
        act = ACTIVATIONS.resolve(name)
        numeric = (act.func(z + eps) - act.func(z - eps)) / (2 * eps)
        assert np.allclose(act.derivative(z), numeric, atol=1e-6), name


def test_sigmoid_is_stable_for_large_inputs():
    act = ACTIVATIONS.resolve("sigmoid")
    out = act.func(np.array([[-1000.0], [1000.0]]))
    assert np.all(np.isfinite(out))
    assert out[0, 0] == pytest.approx(0.0)
    assert out[1, 0] == pytest.approx(1.0)


def test_registries_reject_unknown_names():
    with pytest.raises(ConfigurationError, match="softplus"):
        ACTIVATIONS.resolve("softplus")
    with pytest.raises(ConfigurationError, match="Available costs"):
        COSTS.resolve("hinge")
    assert COSTS.resolve("crossEntropy") is COSTS.resolve("cross_entropy")
    with pytest.raises(TypeError):
        ACTIVATIONS.as_mapping()["sigmoid"] = None  # type: ignore[index]
