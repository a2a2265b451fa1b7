import math
import random

import pytest

from stagesim.distributions import (
    ExponentialSampler, NonNegative, NormalSampler, UniformSampler, bernoulli,
    prepare, prepare_arrivals, prepare_stage,
)
from stagesim.errors import InvalidConfiguration
from stagesim.models import StageSpec


def test_prepare_resolves_each_family_once():
    assert isinstance(prepare("normal", 5.0, 4.0), NormalSampler)
    assert isinstance(prepare("exponential", 2.0), ExponentialSampler)
    assert isinstance(prepare("UNIFORM", 1.0, 3.0), UniformSampler)


def test_normal_takes_variance():
    s = prepare("normal", 10.0, 9.0)
    assert s.std == 3.0
    assert s.mean == 10.0


def test_means():
    assert prepare("exponential", 4.0).mean == 4.0
    assert prepare("uniform", 0.0, 6.0).mean == 3.0
    assert prepare_stage(StageSpec("dry", "uniform", 1.0, 3.0)).mean == 2.0


@pytest.mark.parametrize("family,p1,p2", [
    ("normal", 1.0, -0.5),
    ("exponential", 0.0, 0.0),
    ("uniform", 2.0, 1.0),
    ("weibull", 1.0, 1.0),
])
def test_prepare_rejects_bad_parameters(family, p1, p2):
    with pytest.raises(InvalidConfiguration):
        prepare(family, p1, p2)


def test_stage_samplers_are_non_negative():
    s = prepare_stage(StageSpec("wash", "normal", 0.0, 4.0))
    assert isinstance(s, NonNegative)
    rng = random.Random(3)
    draws = [s.sample(rng) for _ in range(2000)]
    assert min(draws) == 0.0
    assert all(d >= 0.0 for d in draws)


def test_uniform_stays_in_bounds():
    s = prepare("uniform", 2.0, 5.0)
    rng = random.Random(1)
    assert all(2.0 <= s.sample(rng) <= 5.0 for _ in range(1000))


def test_arrival_gaps_have_mean_sixty_over_rate():
    gaps = prepare_arrivals(12.0)
    assert gaps.mean == 5.0
    rng = random.Random(8)
    n = 20000
    assert sum(gaps.sample(rng) for _ in range(n)) / n == pytest.approx(5.0, rel=0.05)


def test_exponential_inverse_transform():
    class Fixed(random.Random):
        def random(self):
            return 0.5

    assert ExponentialSampler(2.0).sample(Fixed()) == pytest.approx(2.0 * math.log(2.0))


def test_bernoulli_edges():
    rng = random.Random(0)
    assert not any(bernoulli(0.0, rng) for _ in range(100))
    assert all(bernoulli(1.0, rng) for _ in range(100))
