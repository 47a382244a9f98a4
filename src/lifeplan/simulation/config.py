# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""Run configuration for the life plan simulator."""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class SimulationConfig:
    """How a simulation is executed, independent of what is simulated.

    Attributes:
        random_seed: Optional seed for reproducible Monte Carlo draws and
            randomized liquidation choices. Default None.
        max_workers: Worker processes used for trajectories. Default 1
            (sequential).
        parallel_threshold: Minimum trajectory count before a process pool
            is used. Default 2000.
    """
    random_seed: Optional[int] = None
    max_workers: int = 1
    parallel_threshold: int = 2000

    def __post_init__(self):
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if self.parallel_threshold < 1:
            raise ValueError("parallel_threshold must be at least 1")

    @property
    def parallel(self) -> bool:
        return self.max_workers > 1

    @classmethod
    def from_env(cls) -> 'SimulationConfig':
        """Read LIFEPLAN_RANDOM_SEED, LIFEPLAN_MAX_WORKERS and
        LIFEPLAN_PARALLEL_THRESHOLD, keeping defaults for unset values."""
        seed = os.getenv("LIFEPLAN_RANDOM_SEED", "").strip()
        workers = os.getenv("LIFEPLAN_MAX_WORKERS", "").strip()
        threshold = os.getenv("LIFEPLAN_PARALLEL_THRESHOLD", "").strip()
        return cls(
            random_seed=int(seed) if seed else None,
            max_workers=int(workers) if workers else 1,
            parallel_threshold=int(threshold) if threshold else 2000,
        )
