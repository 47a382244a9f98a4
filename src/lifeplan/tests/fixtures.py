# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""Shared builders for simulation tests."""

from typing import List, Sequence

from ..simulation.parameters import SimulationParameters
from ..simulation.return_generator import AnnualReturnSample, ReturnSource


def make_params(**overrides) -> SimulationParameters:
    """Parameters with no flows, no returns and no limits in the way."""
    base = dict(
        initial_age=30,
        retirement_age=65,
        end_age=35,
        loan_duration=0,
        medical_care_start_age=75,
        entertainment_expenses_decline_start_age=75,
        entertainment_expenses_decline_rate=0.0,
        inflation_rate=0.0,
        investment_return_rate=0.0,
        investment_risk=0.0,
        crypto_return_rate=0.0,
        crypto_risk=0.0,
        stock_tax_rate=1.1,
        crypto_tax_rate=1.3,
        cash_upper_limit=1e12,
        cash_lower_limit=0,
        crypto_lower_limit=0,
        stock_lower_limit=0,
        liquidation_priority='stock',
        initial_stock_value=100_000,
        initial_crypto_value=50_000,
        initial_cash_value=20_000,
        living_expenses=0,
        entertainment_expenses=0,
        housing_maintenance=0,
        medical_care=0,
        housing_loan=0,
        salary=0,
        real_estate_income=0,
        num_simulations=50,
        simulation_method='montecarlo',
    )
    base.update(overrides)
    return SimulationParameters(**base)


class ScriptedReturnSource(ReturnSource):
    """Plays back a fixed list of samples, repeating the last one."""

    def __init__(self, samples: Sequence[AnnualReturnSample]):
        self.samples: List[AnnualReturnSample] = list(samples)
        self.calls = []

    @classmethod
    def constant(cls, stock=0.0, crypto=0.0, inflation=0.0) -> 'ScriptedReturnSource':
        return cls([AnnualReturnSample(stock, crypto, inflation)])

    def sample(self, year_index, pattern_offset=0):
        self.calls.append((year_index, pattern_offset))
        return self.samples[min(year_index - 1, len(self.samples) - 1)]
