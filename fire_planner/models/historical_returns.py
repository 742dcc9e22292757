"""
Historical market returns for bootstrap Monte Carlo trials.

The table holds S&P 500 nominal annual total returns (dividends reinvested) for
1928-2024 as decimals. ``HistoricalReturnsSampler`` draws calendar years from
the table with replacement, so a trial sees realistic fat-tailed years in a
random order. Both accounts receive the sampled year's return; the configured
means and volatility are not used in this mode.
"""

from typing import Dict, Optional, Tuple

import numpy as np

SP500_ANNUAL_RETURNS: Dict[int, float] = {
    1928: 0.4361,
    1929: -0.0842,
    1930: -0.2490,
    1931: -0.4334,
    1932: -0.0819,
    1933: 0.5399,
    1934: -0.0144,
    1935: 0.4767,
    1936: 0.3392,
    1937: -0.3503,
    1938: 0.3112,
    1939: -0.0041,
    1940: -0.0978,
    1941: -0.1159,
    1942: 0.2034,
    1943: 0.2590,
    1944: 0.1975,
    1945: 0.3644,
    1946: -0.0807,
    1947: 0.0571,
    1948: 0.0550,
    1949: 0.1879,
    1950: 0.3171,
    1951: 0.2402,
    1952: 0.1837,
    1953: -0.0099,
    1954: 0.5262,
    1955: 0.3156,
    1956: 0.0656,
    1957: -0.1078,
    1958: 0.4336,
    1959: 0.1196,
    1960: 0.0047,
    1961: 0.2689,
    1962: -0.0873,
    1963: 0.2280,
    1964: 0.1648,
    1965: 0.1245,
    1966: -0.1006,
    1967: 0.2398,
    1968: 0.1106,
    1969: -0.0850,
    1970: 0.0401,
    1971: 0.1431,
    1972: 0.1898,
    1973: -0.1466,
    1974: -0.2647,
    1975: 0.3720,
    1976: 0.2384,
    1977: -0.0718,
    1978: 0.0656,
    1979: 0.1844,
    1980: 0.3242,
    1981: -0.0491,
    1982: 0.2155,
    1983: 0.2256,
    1984: 0.0627,
    1985: 0.3173,
    1986: 0.1867,
    1987: 0.0525,
    1988: 0.1661,
    1989: 0.3169,
    1990: -0.0310,
    1991: 0.3047,
    1992: 0.0762,
    1993: 0.1008,
    1994: 0.0132,
    1995: 0.3758,
    1996: 0.2296,
    1997: 0.3336,
    1998: 0.2858,
    1999: 0.2104,
    2000: -0.0910,
    2001: -0.1189,
    2002: -0.2210,
    2003: 0.2868,
    2004: 0.1088,
    2005: 0.0491,
    2006: 0.1579,
    2007: 0.0549,
    2008: -0.3700,
    2009: 0.2646,
    2010: 0.1506,
    2011: 0.0211,
    2012: 0.1600,
    2013: 0.3239,
    2014: 0.1369,
    2015: 0.0138,
    2016: 0.1196,
    2017: 0.2183,
    2018: -0.0438,
    2019: 0.3149,
    2020: 0.1840,
    2021: 0.2871,
    2022: -0.1811,
    2023: 0.2629,
    2024: 0.2500,
}


class HistoricalReturnsSampler:
    """Samples annual returns from a historical table."""

    def __init__(
        self, seed: Optional[int] = None, returns: Optional[Dict[int, float]] = None
    ):
        """Initialize the sampler.

        Args:
            seed: Seed for the numpy Generator choosing years
            returns: Year to return table; the S&P 500 table when omitted
        """
        table = returns if returns is not None else SP500_ANNUAL_RETURNS
        if not table:
            raise ValueError("Historical returns table cannot be empty")
        years = sorted(table)
        self.returns = np.array([table[year] for year in years], dtype=np.float64)
        self.rng = np.random.default_rng(seed)

    def sample(self) -> float:
        """Draw one historical annual return."""
        return float(self.returns[self.rng.integers(len(self.returns))])

    def annual_returns(
        self, tax_advantaged_mean: float, taxable_mean: float, volatility: float
    ) -> Tuple[float, float]:
        value = self.sample()
        return value, value
