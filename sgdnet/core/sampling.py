"""Random sources used for initialisation and shuffling."""

from __future__ import annotations

import math

import numpy as np


def make_rng(seed: int | None = None) -> np.random.Generator:
    """Return a fresh generator; ``None`` draws entropy from the OS."""

    return np.random.default_rng(seed)


class GaussianSampler:
    """Normal draws via the polar Box-Muller method.

    Each accepted point on the unit disk yields two independent standard
    normal values; the second one is cached and returned by the next call.
    """

    def __init__(
        self,
        mean: float = 0.0,
        stdev: float = 1.0,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.mean = float(mean)
        self.stdev = float(stdev)
        self.rng = rng if rng is not None else make_rng()
        self._cached: float | None = None

    def _standard_pair(self) -> tuple[float, float]:
        while True:
            x1 = float(self.rng.uniform(-1.0, 1.0))
            x2 = float(self.rng.uniform(-1.0, 1.0))
            s = x1 * x1 + x2 * x2
            # s == 0 would make the log undefined
            if 0.0 < s < 1.0:
                break
        w = math.sqrt(-2.0 * math.log(s) / s)
        return x1 * w, x2 * w

    def sample(self) -> float:
        if self._cached is not None:
            y = self._cached
            self._cached = None
        else:
            y, self._cached = self._standard_pair()
        return self.mean + self.stdev * y

    __call__ = sample


__all__ = ["GaussianSampler", "make_rng"]
