# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Multi-asset trajectory simulation for household life plans.

This module projects stock, crypto and cash holdings year by year under
either Monte Carlo risk-band returns or replayed historical returns, and
summarizes many trajectories into yearly percentiles.
"""

from .config import SimulationConfig
from .parameters import (
    SimulationParameters,
    SimulationMethod,
    LiquidationPriority,
    StockRegion,
    InflationRegion,
)
from .historical_data import HistoricalDataSet, PeriodValidation, validate_simulation_period
from .return_generator import (
    AnnualReturnSample,
    ReturnSource,
    StochasticReturnSource,
    HistoricalReturnSource,
)
from .trajectory import AssetState, TrajectoryResult, TrajectoryStatus, TrajectorySimulator
from .results import YearlyStatistics, SimulationResults, aggregate
from .simulator import LifePlanSimulator, SimulationOutcome, simulate

__all__ = [
    'SimulationConfig',
    'SimulationParameters',
    'SimulationMethod',
    'LiquidationPriority',
    'StockRegion',
    'InflationRegion',
    'HistoricalDataSet',
    'PeriodValidation',
    'validate_simulation_period',
    'AnnualReturnSample',
    'ReturnSource',
    'StochasticReturnSource',
    'HistoricalReturnSource',
    'AssetState',
    'TrajectoryResult',
    'TrajectoryStatus',
    'TrajectorySimulator',
    'YearlyStatistics',
    'SimulationResults',
    'aggregate',
    'LifePlanSimulator',
    'SimulationOutcome',
    'simulate',
]
