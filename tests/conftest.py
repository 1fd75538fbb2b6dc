"""Shared test helpers."""

import pytest


class FixedRandom:
    """Random source that always gives the same answers.

    random() returns `value`; uniform(low, high) returns the point at
    fraction `fraction` of the way from low to high.
    """

    def __init__(self, value: float = 0.5, fraction: float = 0.75):
        self.value = value
        self.fraction = fraction
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        return self.value

    def uniform(self, low: float, high: float) -> float:
        self.calls += 1
        return low + (high - low) * self.fraction


@pytest.fixture
def fixed_rng():
    return FixedRandom()
