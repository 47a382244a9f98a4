# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Reference return data for the historical simulation method.

Thirty annual observations (1994-2023) per series: total stock returns for
three markets, CPI inflation for three regions and a single crypto series.
Bitcoin data only exists from 2014 onwards; earlier crypto entries are the
S&P 500 returns of the same year and the return source replaces them with the
selected stock market's return.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np

from .parameters import InflationRegion, StockRegion


HISTORICAL_START_YEAR = 1994
HISTORICAL_DATA_LENGTH = 30
MAX_START_YEARS = 30
OPTIMAL_PATTERN_COUNT = 30
MAX_SIMULATION_YEARS = 100

CRYPTO_DATA_START_YEAR = 2014
CRYPTO_DATA_START_INDEX = CRYPTO_DATA_START_YEAR - HISTORICAL_START_YEAR

HISTORICAL_YEARS: List[int] = [HISTORICAL_START_YEAR + i for i in range(HISTORICAL_DATA_LENGTH)]

# Total returns including dividends
SP500_RETURNS: Tuple[float, ...] = (
    0.0131, 0.3756, 0.2296, 0.3336, 0.2858,     # 1994-1998
    0.2104, -0.0910, -0.1189, -0.2210, 0.2868,  # 1999-2003
    0.1088, 0.0491, 0.1579, 0.0549, -0.3700,    # 2004-2008
    0.2646, 0.1506, 0.0211, 0.1600, 0.3239,     # 2009-2013
    0.1369, 0.0138, 0.1196, 0.2183, -0.0438,    # 2014-2018
    0.3157, 0.1840, 0.2889, -0.1825, 0.2626,    # 2019-2023
)

NIKKEI_RETURNS: Tuple[float, ...] = (
    0.1324, 0.0074, -0.0255, -0.2119, -0.0928,
    0.3680, -0.2719, -0.2347, -0.1863, 0.2445,
    0.0761, 0.4024, 0.0694, -0.1106, -0.4212,
    0.1904, -0.0301, -0.1734, 0.2294, 0.5672,
    0.0712, 0.0907, 0.0042, 0.1910, -0.1208,
    0.1818, 0.1601, 0.0491, -0.0937, 0.2820,
)

# MSCI World, USD, net dividends reinvested
WORLD_STOCK_RETURNS: Tuple[float, ...] = (
    0.0508, 0.2072, 0.1348, 0.1576, 0.2432,
    0.2493, -0.1319, -0.1683, -0.1989, 0.3311,
    0.1472, 0.0949, 0.2007, 0.0904, -0.4071,
    0.2999, 0.1176, -0.0554, 0.1583, 0.2668,
    0.0494, -0.0087, 0.0751, 0.2240, -0.0871,
    0.2767, 0.1590, 0.2182, -0.1814, 0.2379,
)

# Consumer price index, year over year
JAPAN_INFLATION_RATES: Tuple[float, ...] = (
    0.007, -0.001, 0.001, 0.018, 0.007,
    -0.003, -0.007, -0.007, -0.009, -0.003,
    0.000, -0.003, 0.002, 0.001, 0.014,
    -0.014, -0.007, -0.003, 0.000, 0.004,
    0.027, 0.008, -0.001, 0.005, 0.010,
    0.005, 0.000, -0.002, 0.024, 0.032,
)

US_INFLATION_RATES: Tuple[float, ...] = (
    0.026, 0.028, 0.030, 0.023, 0.016,
    0.022, 0.034, 0.028, 0.016, 0.023,
    0.027, 0.034, 0.032, 0.028, 0.038,
    -0.004, 0.016, 0.032, 0.021, 0.015,
    0.016, 0.001, 0.013, 0.021, 0.024,
    0.018, 0.012, 0.047, 0.080, 0.041,
)

WORLD_INFLATION_RATES: Tuple[float, ...] = (
    0.101, 0.089, 0.066, 0.055, 0.054,
    0.034, 0.034, 0.038, 0.029, 0.030,
    0.034, 0.041, 0.043, 0.048, 0.089,
    0.029, 0.033, 0.048, 0.037, 0.026,
    0.024, 0.014, 0.016, 0.022, 0.024,
    0.022, 0.019, 0.035, 0.080, 0.057,
)

# 1994-2013 mirror SP500_RETURNS; Bitcoin from 2014
CRYPTO_RETURNS: Tuple[float, ...] = SP500_RETURNS[:CRYPTO_DATA_START_INDEX] + (
    -0.5817, 0.3533, 1.2500, 1.3318, -0.7269,
    0.8700, 3.0017, 0.5973, -0.6426, 1.5648,
)

STOCK_OPTIONS: List[Tuple[str, str]] = [
    (StockRegion.SP500.value, "S&P 500 (US)"),
    (StockRegion.NIKKEI.value, "Nikkei 225 (Japan)"),
    (StockRegion.WORLD.value, "MSCI World"),
]

INFLATION_OPTIONS: List[Tuple[str, str]] = [
    (InflationRegion.JAPAN.value, "Japan CPI"),
    (InflationRegion.US.value, "US CPI"),
    (InflationRegion.WORLD.value, "World CPI"),
]

_STOCK_SERIES: Dict[StockRegion, Tuple[float, ...]] = {
    StockRegion.SP500: SP500_RETURNS,
    StockRegion.NIKKEI: NIKKEI_RETURNS,
    StockRegion.WORLD: WORLD_STOCK_RETURNS,
}

_INFLATION_SERIES: Dict[InflationRegion, Tuple[float, ...]] = {
    InflationRegion.JAPAN: JAPAN_INFLATION_RATES,
    InflationRegion.US: US_INFLATION_RATES,
    InflationRegion.WORLD: WORLD_INFLATION_RATES,
}


def get_stock_data(region) -> Tuple[float, ...]:
    """Stock return series for a region, S&P 500 for unknown regions."""
    try:
        return _STOCK_SERIES[StockRegion(region)]
    except ValueError:
        return SP500_RETURNS


def get_inflation_data(region) -> Tuple[float, ...]:
    """Inflation series for a region, Japan for unknown regions."""
    try:
        return _INFLATION_SERIES[InflationRegion(region)]
    except ValueError:
        return JAPAN_INFLATION_RATES


@dataclass(frozen=True)
class HistoricalDataSet:
    """Immutable bundle of reference series used by the historical method.

    All series must share one length and hold only finite values; the return
    source relies on this and only guards individual lookups.

    Attributes:
        stock_returns: Stock return series keyed by region
        inflation_rates: Inflation series keyed by region
        crypto_returns: Global crypto return series
        crypto_start_index: First index holding real crypto data
    """
    stock_returns: Dict[StockRegion, Tuple[float, ...]]
    inflation_rates: Dict[InflationRegion, Tuple[float, ...]]
    crypto_returns: Tuple[float, ...]
    crypto_start_index: int = CRYPTO_DATA_START_INDEX
    length: int = field(init=False)

    def __post_init__(self):
        series = {"crypto": self.crypto_returns}
        series.update({f"stock:{k.value}": v for k, v in self.stock_returns.items()})
        series.update({f"inflation:{k.value}": v for k, v in self.inflation_rates.items()})

        lengths = {name: len(values) for name, values in series.items()}
        if len(set(lengths.values())) != 1:
            raise ValueError(f"Historical series lengths differ: {lengths}")
        length = len(self.crypto_returns)
        if length == 0:
            raise ValueError("Historical series cannot be empty")
        for name, values in series.items():
            if not np.all(np.isfinite(np.asarray(values, dtype=float))):
                raise ValueError(f"Historical series '{name}' contains non-finite values")
        if not 0 <= self.crypto_start_index <= length:
            raise ValueError(f"crypto_start_index out of range: {self.crypto_start_index}")
        object.__setattr__(self, "length", length)

    @classmethod
    def default(cls) -> 'HistoricalDataSet':
        """The built-in 1994-2023 reference data."""
        return cls(
            stock_returns=dict(_STOCK_SERIES),
            inflation_rates=dict(_INFLATION_SERIES),
            crypto_returns=CRYPTO_RETURNS,
        )

    def stock_series(self, region: StockRegion) -> Tuple[float, ...]:
        return self.stock_returns[StockRegion(region)]

    def inflation_series(self, region: InflationRegion) -> Tuple[float, ...]:
        return self.inflation_rates[InflationRegion(region)]


def get_historical_stats(stock_region=StockRegion.SP500,
                         inflation_region=InflationRegion.JAPAN) -> Dict[str, float]:
    """Summary averages of the reference data.

    The crypto average only covers the years with real crypto data.
    """
    stock = get_stock_data(stock_region)
    inflation = get_inflation_data(inflation_region)
    crypto_real = CRYPTO_RETURNS[CRYPTO_DATA_START_INDEX:]
    return {
        "stock_average": float(np.mean(stock)),
        "inflation_average": float(np.mean(inflation)),
        "crypto_average": float(np.mean(crypto_real)),
        "data_years": HISTORICAL_DATA_LENGTH,
        "max_simulation_years": MAX_SIMULATION_YEARS,
        "crypto_real_data_years": len(crypto_real),
    }


@dataclass(frozen=True)
class PeriodValidation:
    """Outcome of checking a requested simulation period."""
    is_valid: bool
    max_end_age: int
    message: str = ""
    cyclic: bool = False


def validate_simulation_period(initial_age: int, end_age: int,
                               data_length: Optional[int] = None) -> PeriodValidation:
    """Check that a period is positive and within MAX_SIMULATION_YEARS.

    Periods longer than the reference data are valid but reuse it cyclically;
    the returned message says so.
    """
    data_length = data_length or HISTORICAL_DATA_LENGTH
    period = end_age - initial_age
    max_end_age = initial_age + MAX_SIMULATION_YEARS

    if period > MAX_SIMULATION_YEARS:
        return PeriodValidation(
            is_valid=False,
            max_end_age=max_end_age,
            message=(
                f"Simulations are limited to at most {MAX_SIMULATION_YEARS} years. "
                f"Set the end age to {max_end_age} or lower."
            ),
        )
    if period < 1:
        return PeriodValidation(
            is_valid=False,
            max_end_age=max_end_age,
            message=f"End age ({end_age}) must be greater than initial age ({initial_age}).",
        )
    if period > data_length:
        return PeriodValidation(
            is_valid=True,
            max_end_age=end_age,
            message=(
                f"The {period}-year period exceeds the {data_length} years of historical "
                "data; the data is reused cyclically."
            ),
            cyclic=True,
        )
    return PeriodValidation(is_valid=True, max_end_age=end_age)


