# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Life plan simulation orchestrator.

This module provides the LifePlanSimulator class which validates a request,
decides how many trajectories to run and with which pattern offsets, runs
them with the matching return source and aggregates the results.
"""

import logging
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from .config import SimulationConfig
from .historical_data import (
    MAX_START_YEARS,
    OPTIMAL_PATTERN_COUNT,
    HistoricalDataSet,
    validate_simulation_period,
)
from .parameters import SimulationMethod, SimulationParameters
from .results import SimulationResults, YearlyStatistics
from .return_generator import HistoricalReturnSource, ReturnSource, StochasticReturnSource
from .trajectory import TrajectoryResult, TrajectorySimulator

logger = logging.getLogger(__name__)


@dataclass
class SimulationOutcome:
    """Everything a caller gets back from one simulation request.

    A declined request has ``accepted=False``, a human-readable ``message``
    and no statistics.
    """
    accepted: bool
    statistics: List[YearlyStatistics] = field(default_factory=list)
    message: str = ""
    diagnostics: List[str] = field(default_factory=list)
    results: Optional[SimulationResults] = None

    @classmethod
    def declined(cls, message: str) -> 'SimulationOutcome':
        return cls(accepted=False, message=message)


@dataclass
class _TrajectoryTask:
    params: SimulationParameters
    pattern_offset: int
    seed: np.random.SeedSequence
    data: HistoricalDataSet


def _build_return_source(task: _TrajectoryTask, rng: np.random.Generator) -> ReturnSource:
    if task.params.simulation_method is SimulationMethod.MONTE_CARLO:
        return StochasticReturnSource.from_parameters(task.params, rng)
    return HistoricalReturnSource.from_parameters(task.params, task.data)


def _run_trajectory(task: _TrajectoryTask) -> Tuple[TrajectoryResult, List[Tuple[int, str]]]:
    """Run one trajectory. Module level so it can be sent to worker processes."""
    rng = np.random.default_rng(task.seed)
    source = _build_return_source(task, rng)
    result = TrajectorySimulator(task.params, rng).run(source, task.pattern_offset)
    return result, source.reported_anomalies()


class LifePlanSimulator:
    """Runs a complete simulation request.

    The workflow:
    1. Validate the simulation period (declined if over 100 years)
    2. Pick the pattern offsets for the chosen method
    3. Run one trajectory per offset, sequentially or in a process pool
    4. Aggregate the trajectories into yearly statistics

    Example:
        >>> simulator = LifePlanSimulator(SimulationConfig(random_seed=42))
        >>> outcome = simulator.run(SimulationParameters(initial_age=30, end_age=90))
        >>> print(outcome.statistics[-1].median)
    """

    def __init__(self,
                 config: Optional[SimulationConfig] = None,
                 data: Optional[HistoricalDataSet] = None):
        """Initialize the simulator.

        Args:
            config: Execution configuration. If None, uses defaults.
            data: Reference data for the historical method. If None, uses
                  the built-in 1994-2023 data.
        """
        self.config = config or SimulationConfig()
        self.data = data or HistoricalDataSet.default()

    def plan_offsets(self, params: SimulationParameters) -> List[int]:
        """Pattern offsets, one per trajectory.

        Monte Carlo runs num_simulations independent draws. The historical
        method uses every start offset whose window fits inside the data, or
        all offsets with cyclic reuse once the period is longer than the data.
        Non-overlapping start offsets are taken to mean non-wrapping windows:
        windows may share years but none runs past the end of the series.
        """
        if params.simulation_method is SimulationMethod.MONTE_CARLO:
            return list(range(params.num_simulations))

        length = self.data.length
        period = params.simulation_period
        if period <= length:
            count = min(MAX_START_YEARS, length - period + 1)
        else:
            count = min(OPTIMAL_PATTERN_COUNT, length)
        return list(range(count))

    def run(self, params: SimulationParameters) -> SimulationOutcome:
        """Run the simulation.

        Args:
            params: Household and market parameters for this request

        Returns:
            SimulationOutcome; declined when the period is not supported
        """
        validation = validate_simulation_period(params.initial_age, params.end_age,
                                                self.data.length)
        if not validation.is_valid:
            logger.warning("Simulation declined: %s", validation.message)
            return SimulationOutcome.declined(validation.message)

        diagnostics = []
        if validation.cyclic and params.simulation_method is SimulationMethod.HISTORICAL:
            logger.info(validation.message)
            diagnostics.append(validation.message)

        offsets = self.plan_offsets(params)
        logger.info("Running %d %s trajectories over %d years",
                    len(offsets), params.simulation_method.value, params.simulation_period)

        seeds = np.random.SeedSequence(self.config.random_seed).spawn(len(offsets))
        tasks = [
            _TrajectoryTask(params, offset, seed, self.data)
            for offset, seed in zip(offsets, seeds)
        ]
        trajectories, anomalies = self._execute(tasks)

        if anomalies:
            diagnostics.append(
                f"{len(anomalies)} historical lookups were invalid and replaced with defaults"
            )
        results = SimulationResults.from_trajectories(
            trajectories, params.initial_age, params.simulation_period
        )
        if results.truncated_count:
            diagnostics.append(
                f"{results.truncated_count} of {results.num_trajectories} trajectories "
                "were truncated after non-finite values"
            )

        message = ""
        if not results.statistics:
            message = "The simulation produced no valid trajectories."
            logger.warning(message)

        logger.debug("Simulation finished: %r", results)
        return SimulationOutcome(
            accepted=True,
            statistics=results.statistics,
            message=message,
            diagnostics=diagnostics,
            results=results,
        )

    def _execute(self, tasks: List[_TrajectoryTask]) -> Tuple[List[TrajectoryResult], List]:
        if self.config.parallel and len(tasks) >= self.config.parallel_threshold:
            chunksize = max(1, len(tasks) // (self.config.max_workers * 4))
            logger.debug("Using %d worker processes", self.config.max_workers)
            with ProcessPoolExecutor(max_workers=self.config.max_workers) as executor:
                outputs = list(executor.map(_run_trajectory, tasks, chunksize=chunksize))
        else:
            outputs = [_run_trajectory(task) for task in tasks]

        trajectories = [result for result, _ in outputs]
        anomalies = [anomaly for _, found in outputs for anomaly in found]
        return trajectories, anomalies


def simulate(params: SimulationParameters,
             config: Optional[SimulationConfig] = None) -> List[YearlyStatistics]:
    """Yearly statistics for params; empty when the request is declined."""
    return LifePlanSimulator(config).run(params).statistics
