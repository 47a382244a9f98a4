# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Aggregation of simulated trajectories into yearly statistics.

For every year the total assets of all trajectories that reached that year
are sorted and percentiles are read off as ``sorted[floor(count * fraction)]``.
The same rule gives the median of each asset class.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from .trajectory import TrajectoryResult

logger = logging.getLogger(__name__)

PERCENTILES = {
    "p10": 0.10,
    "p25": 0.25,
    "median": 0.50,
    "p75": 0.75,
    "p90": 0.90,
}


@dataclass(frozen=True)
class YearlyStatistics:
    """Distribution of holdings across trajectories for one simulated year."""
    year: int
    age: int
    p10: float
    p25: float
    median: float
    p75: float
    p90: float
    median_stock: float
    median_crypto: float
    median_cash: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def order_statistic(sorted_values: Sequence[float], fraction: float) -> float:
    """Value at index floor(len * fraction) of an ascending sequence."""
    idx = int(len(sorted_values) * fraction)
    idx = min(idx, len(sorted_values) - 1)
    return float(sorted_values[idx])


def aggregate(trajectories: Sequence[TrajectoryResult],
              initial_age: int,
              simulation_period: Optional[int] = None) -> List[YearlyStatistics]:
    """Combine trajectories into per-year statistics.

    Covers years 0..simulation_period, or every year reached by some
    trajectory when no period is given. Years that no trajectory reached are
    left out of the result.
    """
    if simulation_period is None:
        num_years = max((t.num_years for t in trajectories), default=0)
    else:
        num_years = simulation_period + 1
    statistics = []

    for year in range(num_years):
        snapshots = [t.snapshots[year] for t in trajectories if year < t.num_years]
        if not snapshots:
            logger.warning("No valid outcomes for year %d", year)
            continue

        totals = np.sort([s.total for s in snapshots])
        stock = np.sort([s.stock for s in snapshots])
        crypto = np.sort([s.crypto for s in snapshots])
        cash = np.sort([s.cash for s in snapshots])

        percentiles = {name: order_statistic(totals, f) for name, f in PERCENTILES.items()}
        statistics.append(YearlyStatistics(
            year=year,
            age=initial_age + year,
            median_stock=order_statistic(stock, 0.5),
            median_crypto=order_statistic(crypto, 0.5),
            median_cash=order_statistic(cash, 0.5),
            **percentiles,
        ))

    return statistics


class SimulationResults:
    """Yearly statistics plus the bookkeeping of the trajectories behind them.

    Example:
        >>> results = SimulationResults.from_trajectories(trajectories, initial_age=30)
        >>> df = results.to_dataframe()
        >>> print(df.loc[65, 'median'])
        >>> print(f"Success rate: {results.success_rate():.1%}")
    """

    def __init__(self, statistics: List[YearlyStatistics],
                 trajectories: Sequence[TrajectoryResult]):
        self.statistics = statistics
        self.num_trajectories = len(trajectories)
        self.truncated_count = sum(1 for t in trajectories if t.is_truncated)
        self._final_totals = np.array(
            [t.snapshots[-1].total for t in trajectories if t.snapshots]
        )
        self._min_totals = np.array(
            [min(t.totals()) for t in trajectories if t.snapshots]
        )

    @classmethod
    def from_trajectories(cls, trajectories: Sequence[TrajectoryResult],
                          initial_age: int,
                          simulation_period: Optional[int] = None) -> 'SimulationResults':
        return cls(aggregate(trajectories, initial_age, simulation_period), trajectories)

    def __len__(self) -> int:
        return len(self.statistics)

    def get_ages(self) -> List[int]:
        return [s.age for s in self.statistics]

    def get_final_values(self) -> np.ndarray:
        """Last recorded total assets of each trajectory."""
        return self._final_totals.copy()

    def success_rate(self, min_balance: float = 0) -> float:
        """Share of trajectories whose total assets never fell below min_balance.

        Returns:
            Success rate as decimal (0.0 to 1.0)
        """
        if len(self._min_totals) == 0:
            return 0.0
        return float(np.mean(self._min_totals >= min_balance))

    def to_records(self) -> List[Dict[str, float]]:
        return [s.to_dict() for s in self.statistics]

    def to_dataframe(self) -> pd.DataFrame:
        """Statistics as a DataFrame indexed by age."""
        columns = [f for f in YearlyStatistics.__dataclass_fields__]
        df = pd.DataFrame(self.to_records(), columns=columns)
        return df.set_index('age')

    def __repr__(self) -> str:
        return (f"SimulationResults(num_trajectories={self.num_trajectories}, "
                f"num_years={len(self.statistics)}, truncated={self.truncated_count})")
