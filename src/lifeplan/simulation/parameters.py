# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Input parameters for a life plan simulation.

SimulationParameters is the single immutable value handed to the simulator.
It carries ages, market assumptions, cash/asset limits, the liquidation
policy, initial holdings, yearly cashflows and the method selector.

Tax rates use the sell-multiplier convention: a rate of 1.1 means 1.1 units
of an asset are sold for every unit of cash raised. The rate is applied as
given and never reinterpreted. A rate of 0 marks the asset as unsellable.
"""

import re
from dataclasses import asdict, dataclass, fields, replace
from enum import Enum
from typing import Any, Dict


class SimulationMethod(str, Enum):
    """Source of yearly market outcomes."""
    MONTE_CARLO = "montecarlo"
    HISTORICAL = "historical"


class LiquidationPriority(str, Enum):
    """Which risk asset absorbs surplus cash and is sold first for shortfalls."""
    STOCK = "stock"
    CRYPTO = "crypto"
    RANDOM = "random"


class StockRegion(str, Enum):
    SP500 = "sp500"
    NIKKEI = "nikkei"
    WORLD = "world"


class InflationRegion(str, Enum):
    JAPAN = "japan"
    US = "us"
    WORLD = "world"


_ENUM_FIELDS = {
    "liquidation_priority": LiquidationPriority,
    "simulation_method": SimulationMethod,
    "stock_region": StockRegion,
    "inflation_region": InflationRegion,
}

_INT_FIELDS = (
    "initial_age",
    "retirement_age",
    "end_age",
    "loan_duration",
    "medical_care_start_age",
    "entertainment_expenses_decline_start_age",
    "num_simulations",
)


def _camel_to_snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


@dataclass(frozen=True)
class SimulationParameters:
    """Everything needed to project one household forward in time.

    Attributes:
        initial_age: Age at the start of the simulation (year 0).
        retirement_age: Salary is received while age <= retirement_age.
        end_age: Age at the final simulated year. Must exceed initial_age.
        loan_duration: Number of leading years in which housing_loan is paid.
        medical_care_start_age: Age from which medical_care is spent.
        entertainment_expenses_decline_start_age: Age from which entertainment
            spending shrinks by entertainment_expenses_decline_rate each year.
        entertainment_expenses_decline_rate: Yearly decline as decimal (0.1 = 10%).
        inflation_rate: Constant yearly inflation for the Monte Carlo method.
        investment_return_rate: Expected yearly stock return.
        investment_risk: Half-width of the uniform band around the stock return.
        crypto_return_rate: Expected yearly crypto return.
        crypto_risk: Half-width of the uniform band around the crypto return.
        stock_tax_rate: Sell multiplier applied when liquidating stock.
        crypto_tax_rate: Sell multiplier applied when liquidating crypto.
        cash_upper_limit: Cash above this is moved into a risk asset.
        cash_lower_limit: Cash below this triggers liquidation.
        crypto_lower_limit: Crypto floor, never sold below and topped up to.
        stock_lower_limit: Stock floor, never sold below and topped up to.
        liquidation_priority: stock, crypto or random.
        num_simulations: Monte Carlo trajectory count.
        simulation_method: montecarlo or historical.
        inflation_region: Inflation series used by the historical method.
        stock_region: Stock series used by the historical method.
    """
    initial_age: int = 30
    retirement_age: int = 65
    end_age: int = 100
    loan_duration: int = 30
    medical_care_start_age: int = 75
    entertainment_expenses_decline_start_age: int = 75
    entertainment_expenses_decline_rate: float = 0.1

    inflation_rate: float = 0.01
    investment_return_rate: float = 0.05
    investment_risk: float = 0.15
    crypto_return_rate: float = 0.12
    crypto_risk: float = 0.35
    stock_tax_rate: float = 1.1
    crypto_tax_rate: float = 1.3

    cash_upper_limit: float = 20_000_000
    cash_lower_limit: float = 5_000_000
    crypto_lower_limit: float = 5_000_000
    stock_lower_limit: float = 5_000_000
    liquidation_priority: LiquidationPriority = LiquidationPriority.CRYPTO

    initial_stock_value: float = 0
    initial_crypto_value: float = 0
    initial_cash_value: float = 5_000_000

    living_expenses: float = 2_000_000
    entertainment_expenses: float = 500_000
    housing_maintenance: float = 600_000
    medical_care: float = 750_000
    housing_loan: float = 1_200_000

    salary: float = 3_000_000
    real_estate_income: float = 0

    num_simulations: int = 1000
    simulation_method: SimulationMethod = SimulationMethod.MONTE_CARLO
    inflation_region: InflationRegion = InflationRegion.JAPAN
    stock_region: StockRegion = StockRegion.SP500

    def __post_init__(self):
        for name, enum_type in _ENUM_FIELDS.items():
            value = getattr(self, name)
            if not isinstance(value, enum_type):
                try:
                    object.__setattr__(self, name, enum_type(value))
                except ValueError:
                    choices = [member.value for member in enum_type]
                    raise ValueError(
                        f"Invalid {name}: {value!r}. Expected one of {choices}"
                    ) from None

        if self.num_simulations < 1:
            raise ValueError("num_simulations must be at least 1")
        if self.stock_tax_rate < 0:
            raise ValueError(f"stock_tax_rate cannot be negative: {self.stock_tax_rate}")
        if self.crypto_tax_rate < 0:
            raise ValueError(f"crypto_tax_rate cannot be negative: {self.crypto_tax_rate}")
        if self.entertainment_expenses_decline_rate < 0:
            raise ValueError(
                "entertainment_expenses_decline_rate cannot be negative: "
                f"{self.entertainment_expenses_decline_rate}"
            )

    @property
    def simulation_period(self) -> int:
        """Number of simulated years after year 0."""
        return self.end_age - self.initial_age

    def replace(self, **changes: Any) -> 'SimulationParameters':
        """Return a copy with the given fields changed."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize every field; enums are stored as their string values."""
        data = asdict(self)
        for name in _ENUM_FIELDS:
            data[name] = data[name].value
        return data

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> 'SimulationParameters':
        """Build parameters from a snake_case or camelCase mapping.

        Unknown keys are ignored and missing keys take their defaults.

        Raises:
            ValueError: If a value cannot be converted or fails validation
        """
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for raw_key, value in payload.items():
            key = raw_key if raw_key in known else _camel_to_snake(str(raw_key))
            if key not in known or value is None:
                continue
            if key in _ENUM_FIELDS:
                kwargs[key] = value
            elif key in _INT_FIELDS:
                kwargs[key] = _to_int(key, value)
            else:
                kwargs[key] = _to_float(key, value)
        return cls(**kwargs)


def _to_float(name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got {value!r}") from None


def _to_int(name: str, value: Any) -> int:
    number = _to_float(name, value)
    if not number.is_integer():
        raise ValueError(f"{name} must be a whole number, got {value!r}")
    return int(number)
