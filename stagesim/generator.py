import math
import random
from typing import Callable, Dict, List, Optional

from .errors import InvalidConfiguration
from .validators import require_finite, require_int_at_least

# Knuth's product method underflows for large means; split into chunks
# (a sum of independent Poissons is Poisson with the summed mean).
POISSON_CHUNK = 30.0

def _poisson_small(lam: float, rng: random.Random) -> int:
    limit = math.exp(-lam)
    k = 0
    p = rng.random()
    while p > limit:
        k += 1
        p *= rng.random()
    return k

def sample_poisson(lam: float, rng: random.Random) -> int:
    total = 0
    remaining = lam
    while remaining > POISSON_CHUNK:
        total += _poisson_small(POISSON_CHUNK, rng)
        remaining -= POISSON_CHUNK
    return total + _poisson_small(remaining, rng)

def _uniform(p1, p2, rng):
    return rng.random()

def _normal(p1, p2, rng):
    return rng.gauss(p1, p2)

def _exponential(p1, p2, rng):
    lam = 1.0 if abs(p1) < 1e-9 else 1.0 / p1
    return -math.log(1.0 - rng.random()) / lam

def _poisson(p1, p2, rng):
    return float(sample_poisson(p1, rng))

def _binomial(p1, p2, rng):
    return float(rng.binomialvariate(int(p1), p2))

GENERATORS: Dict[str, Callable[[float, float, random.Random], float]] = {
    "uniform": _uniform,
    "normal": _normal,
    "exponential": _exponential,
    "poisson": _poisson,
    "binomial": _binomial,
}

def _check(family: str, p1: float, p2: float) -> None:
    require_finite("param1", p1)
    require_finite("param2", p2)
    if family == "normal" and p2 < 0:
        raise InvalidConfiguration("normal std must be >= 0")
    if family == "exponential" and p1 < 0:
        raise InvalidConfiguration("exponential beta must be >= 0")
    if family == "poisson" and p1 < 0:
        raise InvalidConfiguration("poisson lambda must be >= 0")
    if family == "binomial":
        if p1 < 0 or p1 != int(p1):
            raise InvalidConfiguration("binomial n must be a non-negative integer")
        if not 0.0 <= p2 <= 1.0:
            raise InvalidConfiguration("binomial p must be in [0, 1]")

def draw_for(family: str, param1: float = 0.0, param2: float = 1.0) -> Callable[[random.Random], float]:
    """Validate a generator family and its parameters once; return a one-draw callable."""
    fam = (family or "").strip().lower()
    if fam not in GENERATORS:
        raise InvalidConfiguration(f"unknown generator '{family}'")
    _check(fam, param1, param2)
    draw = GENERATORS[fam]
    return lambda rng: draw(param1, param2, rng)

def generate(family: str, n: int, param1: float = 0.0, param2: float = 1.0,
             seed: Optional[int] = None) -> List[float]:
    """
    Draw n variates. Parameters per family:
      uniform      standard U(0,1), params ignored
      normal       mean, std
      exponential  beta (scale); beta ~ 0 falls back to 1
      poisson      lambda
      binomial     n trials, p
    """
    draw = draw_for(family, param1, param2)
    require_int_at_least("n", n, 1)
    rng = random.Random(seed)
    return [draw(rng) for _ in range(n)]
