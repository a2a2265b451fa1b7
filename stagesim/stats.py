import math
from dataclasses import dataclass, field
from typing import List, Sequence

from .errors import EmptyOrMissingInput

# values closer than 1/MODE_PRECISION count as the same value for the mode
MODE_PRECISION = 10000.0

@dataclass
class SummaryStats:
    n: int
    mean: float
    variance_pop: float
    variance_sample: float
    std_pop: float
    std_sample: float
    cv: float                  # percent
    median: float
    mode: List[float] = field(default_factory=list)
    skewness: float = 0.0
    kurtosis_excess: float = 0.0
    min: float = 0.0
    max: float = 0.0
    range: float = 0.0
    k: int = 1
    amplitude: float = 0.0

def sturges_bins(n: int) -> int:
    """Sturges' rule, k = 1 + 3.322 log10(n), rounded and forced odd."""
    if n <= 0:
        return 1
    k = int(round(1.0 + 3.322 * math.log10(n)))
    return k + 1 if k % 2 == 0 else k

def percentile(sorted_data: Sequence[float], p: float) -> float:
    n = len(sorted_data)
    if n == 0:
        return float("nan")
    r = p * (n - 1)
    i = int(math.floor(r))
    f = r - i
    if i + 1 < n:
        return sorted_data[i] * (1.0 - f) + sorted_data[i + 1] * f
    return sorted_data[i]

def _same(a: float, b: float) -> bool:
    return abs(a - b) * MODE_PRECISION < 1.0

def _modes(sorted_data: Sequence[float]) -> List[float]:
    # run-length over sorted data; first value of each run represents it
    runs = []
    current = sorted_data[0]
    streak = 0
    for x in sorted_data:
        if _same(x, current):
            streak += 1
        else:
            runs.append((current, streak))
            current, streak = x, 1
    runs.append((current, streak))

    top = max(s for _, s in runs)
    if top <= 1:
        return []
    return [v for v, s in runs if s == top]

def summarize_sorted(sorted_data: Sequence[float], nbins: int) -> SummaryStats:
    """Summary statistics over data that is already sorted ascending."""
    n = len(sorted_data)
    k = nbins if nbins > 0 else 1

    if n == 0:
        return SummaryStats(
            n=0, mean=0.0, variance_pop=0.0, variance_sample=0.0,
            std_pop=0.0, std_sample=0.0, cv=0.0, median=0.0, k=k,
        )

    lo = sorted_data[0]
    hi = sorted_data[-1]
    spread = hi - lo
    mean = sum(sorted_data) / n

    m2 = m3 = m4 = 0.0
    for x in sorted_data:
        d = x - mean
        d2 = d * d
        m2 += d2
        m3 += d2 * d
        m4 += d2 * d2

    var_pop = m2 / n
    var_sample = m2 / (n - 1) if n > 1 else 0.0
    std_pop = math.sqrt(var_pop)
    std_sample = math.sqrt(var_sample)

    cv = 0.0 if abs(mean) < 1e-9 else (std_sample / mean) * 100.0
    skew = 0.0 if m2 == 0 else (n * m3) / (m2 ** 1.5)
    kurt = -3.0 if m2 == 0 else (n * m4) / (m2 * m2) - 3.0

    mid = n // 2
    median = (sorted_data[mid - 1] + sorted_data[mid]) * 0.5 if n % 2 == 0 else sorted_data[mid]

    return SummaryStats(
        n=n,
        mean=mean,
        variance_pop=var_pop,
        variance_sample=var_sample,
        std_pop=std_pop,
        std_sample=std_sample,
        cv=cv,
        median=median,
        mode=_modes(sorted_data),
        skewness=skew,
        kurtosis_excess=kurt,
        min=lo,
        max=hi,
        range=spread,
        k=k,
        amplitude=0.0 if spread == 0 else spread / k,
    )

def summarize(data: Sequence[float]) -> SummaryStats:
    if not data:
        raise EmptyOrMissingInput("data must not be empty")
    ordered = sorted(data)
    return summarize_sorted(ordered, sturges_bins(len(ordered)))
