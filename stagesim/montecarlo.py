import logging
import math
import operator
import random
from dataclasses import dataclass, field
from typing import List, Literal, Optional

from pydantic import StrictInt

from .distributions import prepare
from .errors import InvalidConfiguration
from .generator import draw_for
from .validators import require_finite, require_int_at_least

logger = logging.getLogger(__name__)

PREVIEW_SIZE = 50

OPERATORS = {
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}

@dataclass
class VariableSpec:
    name: str
    family: str           # normal(mean, variance) | exponential(beta) | uniform(min, max)
    param1: float
    param2: float = 0.0
    multiplier: float = 1.0   # 1.0 adds, -1.0 subtracts

@dataclass
class AnalysisMode:
    mode_type: Literal["aggregation", "probability"] = "aggregation"
    threshold: float = 0.0
    operator: str = "<"
    cost_per_event: float = 0.0
    population_size: float = 0.0

@dataclass
class MonteCarloConfig:
    n_simulations: StrictInt
    variables: List[VariableSpec]
    analysis: AnalysisMode = field(default_factory=AnalysisMode)
    seed: Optional[int] = None

@dataclass
class MonteCarloResult:
    iterations: int
    mean: float
    std_dev: float
    min: float
    max: float
    samples_preview: List[float]
    success_count: Optional[int] = None
    probability: Optional[float] = None
    expected_cost: Optional[float] = None

def _validate(config: MonteCarloConfig) -> None:
    require_int_at_least("n_simulations", config.n_simulations, 1)
    if not config.variables:
        raise InvalidConfiguration("at least one variable is required")
    for v in config.variables:
        require_finite(f"{v.name}.multiplier", v.multiplier)

    a = config.analysis
    if a.mode_type not in ("aggregation", "probability"):
        raise InvalidConfiguration(f"unknown analysis mode '{a.mode_type}'")
    if a.mode_type == "probability":
        if a.operator not in OPERATORS:
            raise InvalidConfiguration(f"operator must be one of {', '.join(OPERATORS)}")
        require_finite("threshold", a.threshold)
        require_finite("cost_per_event", a.cost_per_event)
        require_finite("population_size", a.population_size)

def run_montecarlo(config: MonteCarloConfig, rng: Optional[random.Random] = None) -> MonteCarloResult:
    """
    Sum one draw of every (multiplied) variable per iteration and collect
    running moments; in probability mode also count threshold hits.
    """
    _validate(config)
    dists = [(prepare(v.family, v.param1, v.param2, v.name), v.multiplier) for v in config.variables]

    if rng is None:
        rng = random.Random(config.seed)

    probability_mode = config.analysis.mode_type == "probability"
    passes = OPERATORS.get(config.analysis.operator)
    threshold = config.analysis.threshold

    n = config.n_simulations
    sum_x = 0.0
    sum_x2 = 0.0
    lo = math.inf
    hi = -math.inf
    hits = 0
    preview: List[float] = []

    for i in range(n):
        total = 0.0
        for dist, mult in dists:
            total += dist.sample(rng) * mult

        sum_x += total
        sum_x2 += total * total
        lo = min(lo, total)
        hi = max(hi, total)
        if i < PREVIEW_SIZE:
            preview.append(total)
        if probability_mode and passes(total, threshold):
            hits += 1

    mean = sum_x / n
    variance = sum_x2 / n - mean * mean
    result = MonteCarloResult(
        iterations=n,
        mean=mean,
        std_dev=math.sqrt(max(variance, 0.0)),
        min=lo,
        max=hi,
        samples_preview=preview,
    )

    if probability_mode:
        p = hits / n
        result.success_count = hits
        result.probability = p
        result.expected_cost = p * config.analysis.cost_per_event * config.analysis.population_size

    logger.debug("monte carlo: %d iterations, mean %.4f", n, mean)
    return result

# sample means use the generator's parameter conventions, not the simulator's
SAMPLE_MEAN_FAMILIES = ("uniform", "normal", "exponential")

def sample_means(family: str, n_samples: int, n_trials: int, param1: float = 0.0,
                 param2: float = 1.0, seed: Optional[int] = None) -> List[float]:
    """
    One sample mean per trial, each over n_samples draws.
    Parameters read as in generate(): uniform is U(0,1), normal takes
    (mean, std), exponential a beta with beta ~ 0 falling back to 1.
    """
    if (family or "").strip().lower() not in SAMPLE_MEAN_FAMILIES:
        raise InvalidConfiguration(f"unknown distribution '{family}'")
    require_int_at_least("n_samples", n_samples, 1)
    require_int_at_least("n_trials", n_trials, 1)
    draw = draw_for(family, param1, param2)
    rng = random.Random(seed)
    return [
        sum(draw(rng) for _ in range(n_samples)) / n_samples
        for _ in range(n_trials)
    ]
