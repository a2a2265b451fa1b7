import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from .aggregation import (
    BoxStats, FrequencyTable, Histogram, StemLeaf, boxplot_sorted, histogram,
    stem_leaf, table_from_counts,
)
from .errors import EmptyOrMissingInput, InvalidConfiguration
from .stats import SummaryStats, summarize_sorted, sturges_bins

NEG_INF = float("-inf")
INF = float("inf")
CURVE_POINTS = 100
LOG_2PI = math.log(2.0 * math.pi)


# ---------- Result Models ----------
@dataclass
class FitResult:
    name: str
    aic: float
    ll: float
    params: List[float]
    expected_counts: List[float] = field(default_factory=list)

@dataclass
class Curves:
    x: List[float]
    best_freq: List[float]

@dataclass
class AnalysisResult:
    summary: SummaryStats
    histogram: Histogram
    freq_table: FrequencyTable
    boxplot: BoxStats
    stem_leaf: List[StemLeaf]
    best_fit: FitResult
    curves: Curves


# ---------- Log-likelihoods ----------
def ll_normal(data: Sequence[float], mu: float, sigma: float) -> float:
    if sigma <= 0:
        return NEG_INF
    n = len(data)
    ss = sum((x - mu) ** 2 for x in data)
    return -0.5 * n * LOG_2PI - n * math.log(sigma) - ss / (2.0 * sigma * sigma)

def ll_exponential(data: Sequence[float], beta: float) -> float:
    if beta <= 0:
        return NEG_INF
    return -len(data) * math.log(beta) - sum(data) / beta

def ll_lognormal(data: Sequence[float], mu: float, sigma: float) -> float:
    if sigma <= 0:
        return NEG_INF
    n = len(data)
    sum_log = 0.0
    ss = 0.0
    for x in data:
        if x <= 0:
            return NEG_INF
        lx = math.log(x)
        sum_log += lx
        ss += (lx - mu) ** 2
    return -0.5 * n * LOG_2PI - n * math.log(sigma) - sum_log - ss / (2.0 * sigma * sigma)

def ll_uniform(data: Sequence[float], a: float, b: float) -> float:
    if a >= b:
        return NEG_INF
    if any(x < a or x > b for x in data):
        return NEG_INF
    return -len(data) * math.log(b - a)

def aic(n_params: int, ll: float) -> float:
    return 2.0 * n_params - 2.0 * ll


# ---------- PDFs ----------
def normal_pdf(x: float, mu: float, sigma: float) -> float:
    if sigma <= 0:
        return 0.0
    z = (x - mu) / sigma
    return math.exp(-0.5 * z * z) / (sigma * math.sqrt(2.0 * math.pi))

def exponential_pdf(x: float, beta: float) -> float:
    if x < 0 or beta <= 0:
        return 0.0
    return math.exp(-x / beta) / beta

def lognormal_pdf(x: float, mu: float, sigma: float) -> float:
    if x <= 0 or sigma <= 0:
        return 0.0
    z = (math.log(x) - mu) / sigma
    return math.exp(-0.5 * z * z) / (x * sigma * math.sqrt(2.0 * math.pi))

def uniform_pdf(x: float, a: float, b: float) -> float:
    return 1.0 / (b - a) if b > a and a <= x <= b else 0.0


# ---------- CDFs ----------
def normal_cdf(x: float, mu: float, sigma: float) -> float:
    if sigma <= 0:
        return 1.0 if x >= mu else 0.0
    return 0.5 * (1.0 + math.erf((x - mu) / (sigma * math.sqrt(2.0))))

def exponential_cdf(x: float, beta: float) -> float:
    return 0.0 if x < 0 else 1.0 - math.exp(-x / beta)

def lognormal_cdf(x: float, mu: float, sigma: float) -> float:
    return 0.0 if x <= 0 else normal_cdf(math.log(x), mu, sigma)

def uniform_cdf(x: float, a: float, b: float) -> float:
    if x < a:
        return 0.0
    if x >= b:
        return 1.0
    return (x - a) / (b - a)

PDFS: Dict[str, Callable[..., float]] = {
    "normal": normal_pdf,
    "exponential": exponential_pdf,
    "lognormal": lognormal_pdf,
    "uniform": uniform_pdf,
}

CDFS: Dict[str, Callable[..., float]] = {
    "normal": normal_cdf,
    "exponential": exponential_cdf,
    "lognormal": lognormal_cdf,
    "uniform": uniform_cdf,
}


# ---------- Selection ----------
def best_fit(sorted_data: Sequence[float], summary: SummaryStats) -> FitResult:
    """
    Maximum-likelihood fit of normal, exponential, lognormal and uniform,
    returning the family with the lowest AIC. Families whose support
    excludes the data get AIC = +inf.
    """
    mean, std = summary.mean, summary.std_pop
    lo, hi = summary.min, summary.max
    n = len(sorted_data)

    ll_n = ll_normal(sorted_data, mean, std)
    ll_u = ll_uniform(sorted_data, lo, hi)
    fits = [
        FitResult("normal", aic(2, ll_n), ll_n, [mean, std]),
    ]

    if lo < 0 or mean <= 0:
        fits.append(FitResult("exponential", INF, NEG_INF, []))
    else:
        ll_e = ll_exponential(sorted_data, mean)
        fits.append(FitResult("exponential", aic(1, ll_e), ll_e, [mean]))

    if lo <= 0:
        fits.append(FitResult("lognormal", INF, NEG_INF, []))
    else:
        logs = [math.log(x) for x in sorted_data]
        ln_mean = sum(logs) / n
        ln_sigma = math.sqrt(sum((v - ln_mean) ** 2 for v in logs) / n)
        ll_l = ll_lognormal(sorted_data, ln_mean, ln_sigma)
        fits.append(FitResult("lognormal", aic(2, ll_l), ll_l, [ln_mean, ln_sigma]))

    fits.append(FitResult("uniform", aic(2, ll_u), ll_u, [lo, hi]))

    # stable sort keeps the listed order on ties (all +inf for constant data)
    return sorted(fits, key=lambda f: f.aic)[0]

def _curve_fns(fit: FitResult):
    if not fit.params:
        return (lambda x: 0.0), (lambda x: 0.0)
    pdf, cdf = PDFS[fit.name], CDFS[fit.name]
    return (lambda x: pdf(x, *fit.params)), (lambda x: cdf(x, *fit.params))

def fit_curves(fit: FitResult, edges: Sequence[float], minv: float, maxv: float,
               n: int, width: float) -> Curves:
    """Fill fit.expected_counts per class and return a scaled PDF curve."""
    pdf, cdf = _curve_fns(fit)

    cdf_vals = [cdf(e) for e in edges]
    fit.expected_counts = [
        max(cdf_vals[i + 1] - cdf_vals[i], 0.0) * n for i in range(len(edges) - 1)
    ]

    xs = [minv + (i / (CURVE_POINTS - 1)) * (maxv - minv) for i in range(CURVE_POINTS)]
    return Curves(x=xs, best_freq=[pdf(x) * n * width for x in xs])


# ---------- Orchestrator ----------
def analyze(data: Sequence[float], round_odd: bool = False, forced_k: int = 0,
            forced_min: Optional[float] = None, forced_max: Optional[float] = None) -> AnalysisResult:
    if not data:
        raise EmptyOrMissingInput("data must not be empty")

    ordered = sorted(data)
    n = len(ordered)

    if forced_k > 0:
        k = forced_k
    else:
        k = sturges_bins(n)
        if round_odd and k % 2 == 0:
            k += 1

    summary = summarize_sorted(ordered, k)
    # manual limits let callers reproduce hand-built tables
    if forced_min is not None:
        summary.min = forced_min
    if forced_max is not None:
        summary.max = forced_max
    if summary.min > summary.max:
        raise InvalidConfiguration(f"class limits inverted: min {summary.min} > max {summary.max}")
    summary.range = summary.max - summary.min
    summary.amplitude = summary.range / k

    hist = histogram(ordered, k, summary.min, summary.max)
    table = table_from_counts(hist.counts, n, summary.min, hist.amplitude)
    fit = best_fit(ordered, summary)
    curves = fit_curves(fit, hist.edges, summary.min, summary.max, n, hist.amplitude)

    return AnalysisResult(
        summary=summary,
        histogram=hist,
        freq_table=table,
        boxplot=boxplot_sorted(ordered),
        stem_leaf=stem_leaf(ordered, 100.0),
        best_fit=fit,
        curves=curves,
    )
