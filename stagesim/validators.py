import math

from .errors import EmptyOrMissingInput, InvalidConfiguration
from .models import SimulationConfig, StageSpec

FAMILIES = ("normal", "exponential", "uniform")

def require_finite(name: str, value: float) -> None:
    if value is None or isinstance(value, bool) or not math.isfinite(value):
        raise InvalidConfiguration(f"{name} must be a finite number")

def require_positive(name: str, value: float) -> None:
    require_finite(name, value)
    if value <= 0:
        raise InvalidConfiguration(f"{name} must be > 0")

def require_non_negative(name: str, value: float) -> None:
    require_finite(name, value)
    if value < 0:
        raise InvalidConfiguration(f"{name} must be >= 0")

def require_int_at_least(name: str, value: int, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise InvalidConfiguration(f"{name} must be an integer >= {minimum}")

def require_probability(name: str, value: float) -> None:
    require_finite(name, value)
    if not 0.0 <= value <= 1.0:
        raise InvalidConfiguration(f"{name} must be in [0, 1]")

def normalize_family(name: str, family: str) -> str:
    fam = (family or "").strip().lower()
    if fam not in FAMILIES:
        raise InvalidConfiguration(
            f"{name}: unknown distribution '{family}' (expected one of {', '.join(FAMILIES)})"
        )
    return fam

def validate_distribution(name: str, family: str, p1: float, p2: float) -> str:
    """Check one family/parameter pair and return the normalized family tag."""
    fam = normalize_family(name, family)
    require_finite(f"{name}.param1", p1)

    if fam == "normal":
        require_finite(f"{name}.param2", p2)
        if p2 < 0:
            raise InvalidConfiguration(f"{name}: normal variance must be >= 0")
    elif fam == "exponential":
        if p1 <= 0:
            raise InvalidConfiguration(f"{name}: exponential mean must be > 0")
    else:
        require_finite(f"{name}.param2", p2)
        if p1 >= p2:
            raise InvalidConfiguration(f"{name}: uniform requires min < max")
    return fam

def validate_stage(stage: StageSpec, index: int) -> str:
    label = stage.name or f"stage[{index}]"
    return validate_distribution(label, stage.family, stage.param1, stage.param2)

def validate_config(config: SimulationConfig) -> None:
    """
    Reject a configuration before any simulation state exists.
    Raises EmptyOrMissingInput for None, InvalidConfiguration otherwise.
    """
    if config is None:
        raise EmptyOrMissingInput("no simulation configuration supplied")

    require_int_at_least("hours", config.hours, 1)
    require_positive("arrival_rate_per_hour", config.arrival_rate_per_hour)
    require_non_negative("tolerance_minutes", config.tolerance_minutes)
    require_probability("abandon_probability", config.abandon_probability)

    if not config.stages:
        raise InvalidConfiguration("at least one stage is required")
    for i, stage in enumerate(config.stages):
        validate_stage(stage, i)
