import math
from collections import defaultdict
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .errors import EmptyOrMissingInput, InvalidConfiguration
from .stats import percentile

# ---------- Result Models ----------
@dataclass
class Histogram:
    edges: List[float]
    counts: List[int]
    centers: List[float]
    densities: List[float]
    k: int
    amplitude: float

@dataclass
class ClassRow:
    lower: float
    upper: float
    midpoint: float
    abs_freq: int
    rel_freq: float
    cum_abs: int
    cum_rel: float

@dataclass
class FrequencyTable:
    classes: List[ClassRow]
    amplitude: float

@dataclass
class BoxStats:
    min: float
    q1: float
    median: float
    q3: float
    max: float
    iqr: float
    lower_fence: float
    upper_fence: float
    outliers: List[float] = field(default_factory=list)

@dataclass
class StemLeaf:
    stem: int
    leaves: List[int]


# ---------- Helpers ----------
def _require_data(data: Sequence[float], nbins: Optional[int] = None) -> None:
    if not data:
        raise EmptyOrMissingInput("data must not be empty")
    if nbins is not None and nbins <= 0:
        raise EmptyOrMissingInput("nbins must be >= 1")

def bin_index(value: float, minv: float, width: float, nbins: int) -> int:
    """Class index for value, clamped to [0, nbins-1]."""
    if width <= 0 or nbins == 0:
        return 0
    raw = (value - minv) / width
    idx = 0 if raw < 0 else int(math.floor(raw))
    return min(idx, nbins - 1)

def _width(minv: float, maxv: float, nbins: int) -> float:
    return 1.0 if maxv - minv == 0 else (maxv - minv) / nbins

def _counts(data: Sequence[float], nbins: int, minv: float, width: float) -> List[int]:
    counts = [0] * nbins
    for x in data:
        counts[bin_index(x, minv, width, nbins)] += 1
    return counts


# ---------- Histogram ----------
def histogram(data: Sequence[float], nbins: int,
              minv: Optional[float] = None, maxv: Optional[float] = None) -> Histogram:
    _require_data(data, nbins)
    minv = min(data) if minv is None else minv
    maxv = max(data) if maxv is None else maxv

    n = len(data)
    width = _width(minv, maxv, nbins)
    counts = _counts(data, nbins, minv, width)

    edges = [minv + i * width for i in range(nbins + 1)]
    centers = [minv + (i + 0.5) * width for i in range(nbins)]
    densities = [c / (n * width) for c in counts]

    return Histogram(edges=edges, counts=counts, centers=centers,
                     densities=densities, k=nbins, amplitude=width)


# ---------- Frequency table ----------
def table_from_counts(counts: Sequence[int], n: int, minv: float, width: float) -> FrequencyTable:
    rows: List[ClassRow] = []
    cum_a = 0
    cum_r = 0.0
    for i, c in enumerate(counts):
        lower = minv + i * width
        upper = lower + width
        rel = c / n
        cum_a += c
        cum_r += rel
        rows.append(ClassRow(
            lower=lower, upper=upper, midpoint=0.5 * (lower + upper),
            abs_freq=c, rel_freq=rel, cum_abs=cum_a, cum_rel=cum_r,
        ))
    return FrequencyTable(classes=rows, amplitude=width)

def frequency_table(data: Sequence[float], nbins: int,
                    minv: Optional[float] = None, maxv: Optional[float] = None) -> FrequencyTable:
    _require_data(data, nbins)
    minv = min(data) if minv is None else minv
    maxv = max(data) if maxv is None else maxv
    width = _width(minv, maxv, nbins)
    return table_from_counts(_counts(data, nbins, minv, width), len(data), minv, width)


# ---------- Boxplot ----------
def boxplot_sorted(sorted_data: Sequence[float]) -> BoxStats:
    q1 = percentile(sorted_data, 0.25)
    med = percentile(sorted_data, 0.5)
    q3 = percentile(sorted_data, 0.75)
    iqr = q3 - q1
    lower_f = q1 - 1.5 * iqr
    upper_f = q3 + 1.5 * iqr
    return BoxStats(
        min=sorted_data[0],
        q1=q1,
        median=med,
        q3=q3,
        max=sorted_data[-1],
        iqr=iqr,
        lower_fence=lower_f,
        upper_fence=upper_f,
        outliers=[x for x in sorted_data if x < lower_f or x > upper_f],
    )

def boxplot(data: Sequence[float]) -> BoxStats:
    _require_data(data)
    return boxplot_sorted(sorted(data))


# ---------- Stem and leaf ----------
def stem_leaf(data: Sequence[float], scale: float = 100.0) -> List[StemLeaf]:
    """
    Group values by stem. With scale=100, 12.34 -> 1234 -> stem 12, leaf 34.
    Stems come back ascending, leaves sorted inside each stem.
    """
    _require_data(data)
    if scale <= 0:
        raise InvalidConfiguration("scale must be > 0")

    unit = int(scale) or 1
    groups = defaultdict(list)
    for x in data:
        scaled = int(round(x * scale))
        # truncate toward zero so -1234 splits as stem -12, leaf 34
        stem = abs(scaled) // unit * (-1 if scaled < 0 else 1)
        leaf = abs(scaled) % unit
        groups[stem].append(leaf)

    return [StemLeaf(stem=s, leaves=sorted(groups[s])) for s in sorted(groups)]
