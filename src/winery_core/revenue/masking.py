"""Amount masking strategies for the revenue dataset.

Real dollar figures are obfuscated before they reach the silver layer. The
masking step is a pluggable strategy so the deterministic classification can
be tested on its own and pipeline runs can be made reproducible.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np
import pandas as pd


class AmountMasker(ABC):
    """Abstract base class for amount masking strategies."""

    @abstractmethod
    def mask(self, amounts: pd.Series) -> pd.Series:
        """Return masked amounts aligned to the input index.

        Args:
            amounts: Float series with no nulls.

        Returns:
            Series of the same length and index.
        """


class IdentityAmountMasker(AmountMasker):
    """Leaves amounts unchanged."""

    def mask(self, amounts: pd.Series) -> pd.Series:
        return amounts.copy()


class RandomAmountMasker(AmountMasker):
    """Inflate each amount by a random multiplier between 1.01 and 3.00.

    Multipliers are drawn uniformly from the cent grid (1.01, 1.02, ... 3.00)
    and results are rounded to cents. With a ``seed``, every call to
    :meth:`mask` starts from the same generator state, so the same masker
    instance gives the same amounts on every run.
    """

    MIN_STEP = 101
    MAX_STEP = 300

    def __init__(self, seed: int | None = None):
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def _generator(self) -> np.random.Generator:
        if self.seed is None:
            return self._rng
        return np.random.default_rng(self.seed)

    def multipliers(self, n: int) -> np.ndarray:
        steps = self._generator().integers(self.MIN_STEP, self.MAX_STEP, endpoint=True, size=n)
        return steps / 100.0

    def mask(self, amounts: pd.Series) -> pd.Series:
        factors = self.multipliers(len(amounts))
        return (amounts.astype(float) * factors).round(2)
