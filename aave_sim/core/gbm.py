# aave_sim/core/gbm.py

import math

from .fixed_point import sqrt_price_x96_of
from .. import config


class Gbm:
    """
    External market for the token pair. Token A follows a geometric
    Brownian motion, token B is the numeraire and stays constant. An
    external feedback term (price impact from the pool) is added on top of
    the GBM leg to give the price the pool is arbitraged against.
    """
    def __init__(self, dt: float, mu: float, sigma: float,
                 price_a: float, price_a_with_impact: float, price_b: float):
        if price_a <= 0 or price_b <= 0:
            raise ValueError(f"Initial prices must be positive, got {price_a} and {price_b}")
        self.dt = float(dt)
        self.mu = float(mu)
        self.sigma = float(sigma)
        self.price_a = float(price_a)
        self.price_a_with_impact = float(price_a_with_impact)
        self.price_b = float(price_b)

    def advance(self, rng, feedback: float):
        """
        One GBM step for token A using a standard normal draw from `rng`.

        Args:
            rng (random.Random): The simulation's seeded random source.
            feedback (float): Accumulated price impact added to the new price.
        """
        z = rng.normalvariate(0.0, 1.0)
        new_price_a = self.price_a * math.exp(
            (self.mu - 0.5 * self.sigma) * self.dt + self.sigma * math.sqrt(self.dt) * z
        )
        self.price_a, self.price_a_with_impact = new_price_a, new_price_a + feedback

    def apply_shock(self, factor: float):
        price_before_shock = self.price_a
        self.price_a *= factor
        self.price_a_with_impact *= factor
        if config.VERBOSE_LOGGING:
            print(f"    !!!! MARKET SHOCK APPLIED !!!! Price before: {price_before_shock:.2f}, "
                  f"Factor: {factor:.2f}, Price after: {self.price_a:.2f}")

    def price_of_a(self) -> float:
        return self.price_a_with_impact / self.price_b

    def sqrt_price_token_a_x96(self) -> int:
        return sqrt_price_x96_of(self.price_a_with_impact, self.price_b)

    def sqrt_price_token_b_x96(self) -> int:
        return sqrt_price_x96_of(self.price_b, self.price_a_with_impact)

    def __repr__(self):
        return (f"Gbm(price_a={self.price_a:.2f}, price_a_with_impact={self.price_a_with_impact:.2f}, "
                f"price_b={self.price_b:.2f}, mu={self.mu}, sigma={self.sigma}, dt={self.dt})")
