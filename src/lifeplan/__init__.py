# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Life Plan Simulator

Projects a household's stock, crypto and cash holdings forward in annual
steps and reports, for every age, how the total is distributed across many
simulated futures.

Example usage:
    from lifeplan import LifePlanSimulator, SimulationParameters, SimulationConfig

    params = SimulationParameters(initial_age=30, end_age=90, salary=4_000_000,
                                  simulation_method='historical')
    outcome = LifePlanSimulator(SimulationConfig(random_seed=1)).run(params)
    for year in outcome.statistics:
        print(year.age, year.p10, year.median, year.p90)
"""

from .simulation import (
    SimulationConfig,
    SimulationParameters,
    SimulationMethod,
    LiquidationPriority,
    StockRegion,
    InflationRegion,
    HistoricalDataSet,
    LifePlanSimulator,
    SimulationOutcome,
    SimulationResults,
    YearlyStatistics,
    simulate,
)

from .__meta__ import __version__

__all__ = [
    'SimulationConfig', 'SimulationParameters', 'SimulationMethod',
    'LiquidationPriority', 'StockRegion', 'InflationRegion',
    'HistoricalDataSet',
    'LifePlanSimulator', 'SimulationOutcome', 'SimulationResults',
    'YearlyStatistics', 'simulate',
    '__version__',
]
