import math
import random

from .models import StageSpec
from .validators import validate_distribution, validate_stage

class Sampler:
    """A distribution resolved once, ready to draw from a caller's rng."""

    def sample(self, rng: random.Random) -> float:
        raise NotImplementedError

    @property
    def mean(self) -> float:
        raise NotImplementedError

class NormalSampler(Sampler):
    def __init__(self, mean: float, std: float):
        self.mu = mean
        self.std = std

    def sample(self, rng: random.Random) -> float:
        return rng.gauss(self.mu, self.std)

    @property
    def mean(self) -> float:
        return self.mu

    def __repr__(self):
        return f"NormalSampler(mean={self.mu}, std={self.std})"

class ExponentialSampler(Sampler):
    def __init__(self, mean: float):
        # mean = 1/rate
        self.beta = mean
        self.rate = 1.0 / mean

    def sample(self, rng: random.Random) -> float:
        return -math.log(1.0 - rng.random()) / self.rate

    @property
    def mean(self) -> float:
        return self.beta

    def __repr__(self):
        return f"ExponentialSampler(mean={self.beta})"

class UniformSampler(Sampler):
    def __init__(self, low: float, high: float):
        self.low = low
        self.high = high

    def sample(self, rng: random.Random) -> float:
        return rng.uniform(self.low, self.high)

    @property
    def mean(self) -> float:
        return (self.low + self.high) / 2.0

    def __repr__(self):
        return f"UniformSampler(low={self.low}, high={self.high})"

class NonNegative(Sampler):
    """Floors draws at zero so they stay meaningful as durations."""

    def __init__(self, inner: Sampler):
        self.inner = inner

    def sample(self, rng: random.Random) -> float:
        x = self.inner.sample(rng)
        return x if x > 0 else 0.0

    @property
    def mean(self) -> float:
        return self.inner.mean

    def __repr__(self):
        return f"NonNegative({self.inner!r})"

def _build(family: str, p1: float, p2: float) -> Sampler:
    if family == "normal":
        return NormalSampler(p1, math.sqrt(p2))
    if family == "exponential":
        return ExponentialSampler(p1)
    return UniformSampler(p1, p2)

def prepare(family: str, p1: float, p2: float = 0.0, name: str = "distribution") -> Sampler:
    """
    Resolve a family tag + parameters into a sampler.
    normal: (mean, variance), exponential: (mean, -), uniform: (min, max).
    """
    return _build(validate_distribution(name, family, p1, p2), p1, p2)

def prepare_stage(stage: StageSpec, index: int = 0) -> Sampler:
    fam = validate_stage(stage, index)
    return NonNegative(_build(fam, stage.param1, stage.param2))

def prepare_arrivals(rate_per_hour: float) -> ExponentialSampler:
    # Poisson arrivals: gaps ~ Exp(rate/60) in minutes
    return ExponentialSampler(60.0 / rate_per_hour)

def bernoulli(p: float, rng: random.Random) -> bool:
    return rng.random() < p
