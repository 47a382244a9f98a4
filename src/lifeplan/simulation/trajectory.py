# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Single trajectory simulation.

TrajectorySimulator evolves one household year by year: market returns,
income and expenses, then the cash ceiling/floor rebalancing policy and the
asset floor top-up. All mutable state for one run lives in an AssetState and
a CashflowState created at the start of that run.

Liquidation divides the amount sold by the asset's tax rate, so an asset
whose rate is 0 is never sold to cover a cash shortfall. It can still
receive surplus cash and be topped up to its floor.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

import numpy as np

from .parameters import LiquidationPriority, SimulationParameters
from .return_generator import ReturnSource

logger = logging.getLogger(__name__)

STOCK = "stock"
CRYPTO = "crypto"


class TrajectoryStatus(Enum):
    COMPLETED = "completed"
    TRUNCATED = "truncated"


@dataclass
class AssetState:
    """Holdings of one trajectory in currency units."""
    stock: float
    crypto: float
    cash: float

    @property
    def total(self) -> float:
        return self.stock + self.crypto + self.cash

    def is_finite(self) -> bool:
        return math.isfinite(self.stock) and math.isfinite(self.crypto) and math.isfinite(self.cash)

    def copy(self) -> 'AssetState':
        return AssetState(self.stock, self.crypto, self.cash)


@dataclass
class CashflowState:
    """Yearly cashflow amounts that drift with inflation and age."""
    living_expenses: float
    entertainment_expenses: float
    housing_maintenance: float
    medical_care: float
    real_estate_income: float

    @classmethod
    def from_parameters(cls, params: SimulationParameters) -> 'CashflowState':
        return cls(
            living_expenses=params.living_expenses,
            entertainment_expenses=params.entertainment_expenses,
            housing_maintenance=params.housing_maintenance,
            medical_care=params.medical_care,
            real_estate_income=params.real_estate_income,
        )

    def apply_inflation(self, rate: float):
        growth = 1 + rate
        self.living_expenses *= growth
        self.entertainment_expenses *= growth
        self.housing_maintenance *= growth
        self.medical_care *= growth
        self.real_estate_income *= growth


@dataclass
class TrajectoryResult:
    """Snapshots of one trajectory, index 0 being the initial holdings.

    A truncated trajectory stops at the last year whose holdings were finite.
    """
    snapshots: List[AssetState] = field(default_factory=list)
    status: TrajectoryStatus = TrajectoryStatus.COMPLETED
    pattern_offset: int = 0
    truncated_at_year: Optional[int] = None

    @property
    def is_truncated(self) -> bool:
        return self.status is TrajectoryStatus.TRUNCATED

    @property
    def num_years(self) -> int:
        return len(self.snapshots)

    def totals(self) -> List[float]:
        return [snapshot.total for snapshot in self.snapshots]


class TrajectorySimulator:
    """Runs one trajectory for a fixed parameter set.

    The simulator is deterministic given the sequence produced by its return
    source. Only the randomized liquidation priority consumes ``rng``.

    Example:
        >>> params = SimulationParameters(initial_age=30, end_age=40)
        >>> simulator = TrajectorySimulator(params, np.random.default_rng(1))
        >>> source = StochasticReturnSource.from_parameters(params)
        >>> result = simulator.run(source)
        >>> len(result.snapshots)
        11
    """

    def __init__(self, params: SimulationParameters,
                 rng: Optional[np.random.Generator] = None):
        self.params = params
        self.rng = rng if rng is not None else np.random.default_rng()
        self._limits = {
            STOCK: (params.stock_lower_limit, params.stock_tax_rate),
            CRYPTO: (params.crypto_lower_limit, params.crypto_tax_rate),
        }

    def run(self, return_source: ReturnSource, pattern_offset: int = 0) -> TrajectoryResult:
        p = self.params
        assets = AssetState(p.initial_stock_value, p.initial_crypto_value, p.initial_cash_value)
        cashflows = CashflowState.from_parameters(p)
        result = TrajectoryResult(snapshots=[assets.copy()], pattern_offset=pattern_offset)

        for year in range(1, p.simulation_period + 1):
            age = p.initial_age + year - 1
            sample = return_source.sample(year, pattern_offset)

            assets.stock *= 1 + sample.stock_return
            assets.crypto *= 1 + sample.crypto_return

            salary = p.salary if age <= p.retirement_age else 0
            income = salary + cashflows.real_estate_income

            if age >= p.entertainment_expenses_decline_start_age:
                cashflows.entertainment_expenses *= 1 - p.entertainment_expenses_decline_rate

            expenses = (
                cashflows.living_expenses
                + cashflows.entertainment_expenses
                + cashflows.housing_maintenance
                + (cashflows.medical_care if age >= p.medical_care_start_age else 0)
                + (p.housing_loan if year - 1 < p.loan_duration else 0)
            )

            assets.cash += income - expenses

            if assets.cash > p.cash_upper_limit:
                self._invest_surplus(assets)
            if assets.cash < p.cash_lower_limit:
                self._cover_shortfall(assets)
            self._enforce_asset_floors(assets)

            if not assets.is_finite():
                logger.warning(
                    "Non-finite holdings at year %d (offset %d): stock=%r crypto=%r cash=%r; "
                    "truncating trajectory", year, pattern_offset,
                    assets.stock, assets.crypto, assets.cash,
                )
                result.status = TrajectoryStatus.TRUNCATED
                result.truncated_at_year = year
                break

            result.snapshots.append(assets.copy())
            cashflows.apply_inflation(sample.inflation_rate)

        return result

    def _coin_flip(self) -> bool:
        return self.rng.random() < 0.5

    def _surplus_target(self, assets: AssetState) -> str:
        priority = self.params.liquidation_priority
        if priority is LiquidationPriority.STOCK:
            return STOCK
        if priority is LiquidationPriority.CRYPTO:
            return CRYPTO

        stock_above = assets.stock > self.params.stock_lower_limit
        crypto_above = assets.crypto > self.params.crypto_lower_limit
        if stock_above and crypto_above:
            return STOCK if self._coin_flip() else CRYPTO
        if crypto_above:
            return CRYPTO
        return STOCK

    def _liquidation_order(self) -> Tuple[str, str]:
        priority = self.params.liquidation_priority
        if priority is LiquidationPriority.STOCK:
            return STOCK, CRYPTO
        if priority is LiquidationPriority.CRYPTO:
            return CRYPTO, STOCK
        return (STOCK, CRYPTO) if self._coin_flip() else (CRYPTO, STOCK)

    def _invest_surplus(self, assets: AssetState):
        surplus = assets.cash - self.params.cash_upper_limit
        if self._surplus_target(assets) == STOCK:
            assets.stock += surplus
        else:
            assets.crypto += surplus
        assets.cash = self.params.cash_upper_limit

    def _cover_shortfall(self, assets: AssetState):
        shortfall = self.params.cash_lower_limit - assets.cash
        for asset in self._liquidation_order():
            if shortfall <= 0:
                break
            floor, tax_rate = self._limits[asset]
            if tax_rate == 0:
                continue
            value = getattr(assets, asset)
            available = value - floor
            if available <= 0:
                continue
            sell_amount = min(shortfall * tax_rate, available)
            setattr(assets, asset, value - sell_amount)
            cash_gained = sell_amount / tax_rate
            assets.cash += cash_gained
            shortfall -= cash_gained

    def _enforce_asset_floors(self, assets: AssetState):
        # May drive cash negative
        for asset in (STOCK, CRYPTO):
            floor, _ = self._limits[asset]
            value = getattr(assets, asset)
            if value < floor:
                deficit = floor - value
                assets.cash -= deficit
                setattr(assets, asset, value + deficit)
