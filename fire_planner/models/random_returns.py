"""
Random returns generator for Monte Carlo simulation.

Annual returns are drawn from a normal distribution using the Box-Muller
transform. The uniform source is injected so that runs are reproducible: by
default it is a seeded numpy ``Generator``, and per-trial seeds are spawned from
a single master seed so results do not depend on how trials are distributed
across workers.
"""

import math
from typing import List, Optional, Protocol, Tuple

import numpy as np


class UniformSource(Protocol):
    """Anything that yields floats in [0, 1) from ``random()``."""

    def random(self) -> float: ...


class AnnualReturnsSource(Protocol):
    """Yields one pair of account returns per projected year."""

    def annual_returns(
        self, tax_advantaged_mean: float, taxable_mean: float, volatility: float
    ) -> Tuple[float, float]: ...


def box_muller(u1: float, u2: float) -> float:
    """
    Standard normal variate from two uniforms in (0, 1).

    Args:
        u1: First uniform draw (must be > 0)
        u2: Second uniform draw

    Returns:
        Standard normal sample
    """
    return math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)


def spawn_seeds(seed: Optional[int], count: int) -> List[int]:
    """
    Derive independent per-trial seeds from a master seed.

    Args:
        seed: Master seed (None draws fresh entropy)
        count: Number of seeds to spawn

    Returns:
        List of integer seeds, stable for a given master seed
    """
    children = np.random.SeedSequence(seed).spawn(count)
    return [int(child.generate_state(1, dtype=np.uint64)[0]) for child in children]


class RandomReturnsGenerator:
    """Draws normally distributed annual returns."""

    def __init__(
        self, source: Optional[UniformSource] = None, seed: Optional[int] = None
    ):
        """Initialize the generator.

        Args:
            source: Uniform random source; a seeded numpy Generator when omitted
            seed: Seed for the default source
        """
        self.source = source if source is not None else np.random.default_rng(seed)

    def uniform(self) -> float:
        """Uniform draw in (0, 1), redrawing exact zeros."""
        value = float(self.source.random())
        while value == 0.0:
            value = float(self.source.random())
        return value

    def standard_normal(self) -> float:
        return box_muller(self.uniform(), self.uniform())

    def normal_return(self, mean: float, volatility: float) -> float:
        """
        Draw one annual return.

        Args:
            mean: Expected annual return (decimal)
            volatility: Standard deviation of the annual return (decimal)

        Returns:
            Sampled return
        """
        return mean + volatility * self.standard_normal()

    def annual_returns(
        self, tax_advantaged_mean: float, taxable_mean: float, volatility: float
    ) -> Tuple[float, float]:
        """Independent draws for the tax-advantaged and taxable accounts."""
        return (
            self.normal_return(tax_advantaged_mean, volatility),
            self.normal_return(taxable_mean, volatility),
        )
