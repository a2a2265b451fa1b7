import math
from dataclasses import dataclass
from statistics import NormalDist
from typing import Optional

from .errors import InvalidConfiguration
from .validators import require_finite, validate_distribution

_STD_NORMAL = NormalDist()

@dataclass
class InverseCdfResult:
    value: float
    z_score: Optional[float] = None   # normal only

def inverse_cdf(family: str, probability: float, param1: float, param2: float = 0.0) -> InverseCdfResult:
    """
    Turn a uniform draw U (the probability) into X = F^-1(U).

    normal: param1 = mean, param2 = variance
    exponential: param1 = beta (mean)
    uniform: param1 = min, param2 = max
    """
    require_finite("probability", probability)
    if probability <= 0.0 or probability >= 1.0:
        raise InvalidConfiguration("probability must be strictly between 0 and 1")

    fam = validate_distribution("inverse_cdf", family, param1, param2)

    if fam == "normal":
        z = _STD_NORMAL.inv_cdf(probability)
        return InverseCdfResult(value=param1 + z * math.sqrt(param2), z_score=z)
    if fam == "exponential":
        return InverseCdfResult(value=-param1 * math.log(1.0 - probability))
    return InverseCdfResult(value=param1 + (param2 - param1) * probability)
