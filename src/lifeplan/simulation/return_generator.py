# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Yearly market outcome generators.

A return source supplies one AnnualReturnSample per simulated year. Two
variants exist:

- StochasticReturnSource: expected return plus a uniform shock in
  [-risk, +risk] for stock and crypto, with constant inflation.
- HistoricalReturnSource: cyclic lookup into the reference series, starting
  at a pattern offset.
"""

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .historical_data import CRYPTO_DATA_START_INDEX, HistoricalDataSet
from .parameters import SimulationParameters

logger = logging.getLogger(__name__)

DEFAULT_RETURN = 0.0
DEFAULT_INFLATION = 0.02


@dataclass(frozen=True)
class AnnualReturnSample:
    """One year of market outcomes, in decimal form (0.08 for 8%)."""
    stock_return: float
    crypto_return: float
    inflation_rate: float


class ReturnSource(ABC):
    """Supplies the market outcome for a simulated year."""

    @abstractmethod
    def sample(self, year_index: int, pattern_offset: int = 0) -> AnnualReturnSample:
        """Return the sample for year_index (1-based) of the trajectory
        anchored at pattern_offset."""

    def reported_anomalies(self) -> List[Tuple[int, str]]:
        """(data index, series name) of every substituted lookup so far."""
        return []


class StochasticReturnSource(ReturnSource):
    """Monte Carlo returns: ``expected + uniform(-1, 1) * risk``.

    Stock is drawn before crypto on every call. The shock is uniform, not
    normal, so the output spread matches the configured risk band exactly.

    Example:
        >>> source = StochasticReturnSource(0.05, 0.15, 0.12, 0.35, 0.01,
        ...                                 np.random.default_rng(7))
        >>> sample = source.sample(1)
        >>> -0.10 <= sample.stock_return <= 0.20
        True
    """

    def __init__(self,
                 stock_return: float,
                 stock_risk: float,
                 crypto_return: float,
                 crypto_risk: float,
                 inflation_rate: float,
                 rng: Optional[np.random.Generator] = None):
        self.stock_return = stock_return
        self.stock_risk = stock_risk
        self.crypto_return = crypto_return
        self.crypto_risk = crypto_risk
        self.inflation_rate = inflation_rate
        self.rng = rng if rng is not None else np.random.default_rng()

    @classmethod
    def from_parameters(cls, params: SimulationParameters,
                        rng: Optional[np.random.Generator] = None) -> 'StochasticReturnSource':
        return cls(
            stock_return=params.investment_return_rate,
            stock_risk=params.investment_risk,
            crypto_return=params.crypto_return_rate,
            crypto_risk=params.crypto_risk,
            inflation_rate=params.inflation_rate,
            rng=rng,
        )

    def sample(self, year_index: int, pattern_offset: int = 0) -> AnnualReturnSample:
        stock_draw = self.rng.uniform(-1.0, 1.0)
        crypto_draw = self.rng.uniform(-1.0, 1.0)
        return AnnualReturnSample(
            stock_return=self.stock_return + stock_draw * self.stock_risk,
            crypto_return=self.crypto_return + crypto_draw * self.crypto_risk,
            inflation_rate=self.inflation_rate,
        )


class HistoricalReturnSource(ReturnSource):
    """Replays reference data from a start offset, wrapping at the end.

    Year ``y`` of a trajectory anchored at offset ``p`` reads index
    ``(p + y - 1) % length``. Crypto entries before crypto_start_index are
    replaced by the stock return of the same year. A non-finite lookup is
    replaced by DEFAULT_RETURN / DEFAULT_INFLATION and recorded in
    ``anomalies``.
    """

    def __init__(self,
                 stock_returns: Sequence[float],
                 inflation_rates: Sequence[float],
                 crypto_returns: Sequence[float],
                 crypto_start_index: int = CRYPTO_DATA_START_INDEX):
        if not (len(stock_returns) == len(inflation_rates) == len(crypto_returns)):
            raise ValueError("Historical series must have the same length")
        if len(stock_returns) == 0:
            raise ValueError("Historical series cannot be empty")
        self.stock_returns = tuple(stock_returns)
        self.inflation_rates = tuple(inflation_rates)
        self.crypto_returns = tuple(crypto_returns)
        self.crypto_start_index = crypto_start_index
        self.anomalies: List[Tuple[int, str]] = []

    @classmethod
    def from_parameters(cls, params: SimulationParameters,
                        data: Optional[HistoricalDataSet] = None) -> 'HistoricalReturnSource':
        data = data or HistoricalDataSet.default()
        return cls(
            stock_returns=data.stock_series(params.stock_region),
            inflation_rates=data.inflation_series(params.inflation_region),
            crypto_returns=data.crypto_returns,
            crypto_start_index=data.crypto_start_index,
        )

    @property
    def data_length(self) -> int:
        return len(self.stock_returns)

    def reported_anomalies(self) -> List[Tuple[int, str]]:
        return list(self.anomalies)

    def data_index(self, year_index: int, pattern_offset: int = 0) -> int:
        return (pattern_offset + year_index - 1) % self.data_length

    def sample(self, year_index: int, pattern_offset: int = 0) -> AnnualReturnSample:
        idx = self.data_index(year_index, pattern_offset)

        stock = self._lookup(self.stock_returns, idx, "stock", DEFAULT_RETURN)
        if idx < self.crypto_start_index:
            crypto = stock
        else:
            crypto = self._lookup(self.crypto_returns, idx, "crypto", DEFAULT_RETURN)
        inflation = self._lookup(self.inflation_rates, idx, "inflation", DEFAULT_INFLATION)

        return AnnualReturnSample(stock_return=stock, crypto_return=crypto,
                                  inflation_rate=inflation)

    def _lookup(self, series: Tuple[float, ...], idx: int, name: str, default: float) -> float:
        value = series[idx]
        if math.isfinite(value):
            return value
        logger.warning("Invalid %s data at index %d (%r); using %.2f", name, idx, value, default)
        self.anomalies.append((idx, name))
        return default
