"""
JSON boundary for the core.

Callers on the other side of a process or language boundary hand in a
JSON document and always get one back: either the result, or an error
envelope {"error": ..., "kind": ...}. A report is only serialized once
the run has completed, so a partial report never crosses the boundary.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from pydantic import TypeAdapter, ValidationError

from .errors import EmptyOrMissingInput, InvalidConfiguration, SimulationError
from .fitting import AnalysisResult, analyze
from .models import SimulationConfig, SimulationReport
from .montecarlo import MonteCarloConfig, MonteCarloResult, run_montecarlo
from .probabilities import InverseCdfResult, inverse_cdf
from .simulation import simulate

logger = logging.getLogger(__name__)

@dataclass
class ErrorPayload:
    error: str
    kind: str

@dataclass
class InverseCdfRequest:
    dist_type: str
    probability: float
    param1: float
    param2: float = 0.0

@dataclass
class AnalyzeRequest:
    data: List[float]
    round_odd: bool = False
    forced_k: int = 0
    forced_min: Optional[float] = None
    forced_max: Optional[float] = None

_config_adapter = TypeAdapter(SimulationConfig)
_report_adapter = TypeAdapter(SimulationReport)
_mc_config_adapter = TypeAdapter(MonteCarloConfig)
_mc_result_adapter = TypeAdapter(MonteCarloResult)
_icdf_request_adapter = TypeAdapter(InverseCdfRequest)
_icdf_result_adapter = TypeAdapter(InverseCdfResult)
_analyze_request_adapter = TypeAdapter(AnalyzeRequest)
_analysis_adapter = TypeAdapter(AnalysisResult)
_error_adapter = TypeAdapter(ErrorPayload)


def _parse(adapter: TypeAdapter, text: Optional[str], what: str) -> Any:
    if text is None or text.strip() in ("", "null"):
        raise EmptyOrMissingInput(f"no {what} supplied")
    try:
        return adapter.validate_json(text)
    except ValidationError as e:
        raise InvalidConfiguration(f"invalid {what}: {e}") from e

def config_from_json(text: Optional[str]) -> SimulationConfig:
    return _parse(_config_adapter, text, "simulation configuration")

def config_to_json(config: SimulationConfig) -> str:
    return _config_adapter.dump_json(config).decode()

def report_to_json(report: SimulationReport) -> str:
    return _report_adapter.dump_json(report).decode()

def report_from_json(text: str) -> SimulationReport:
    return _report_adapter.validate_json(text)

def error_to_json(err: SimulationError) -> str:
    return _error_adapter.dump_json(ErrorPayload(error=str(err), kind=type(err).__name__)).decode()


def _guarded(call: Callable[[], str]) -> str:
    try:
        return call()
    except SimulationError as e:
        logger.warning("rejected request: %s", e)
        return error_to_json(e)

def simulate_json(text: Optional[str]) -> str:
    """Run one simulation from a JSON configuration; always returns JSON."""
    return _guarded(lambda: report_to_json(simulate(config_from_json(text))))

def montecarlo_json(text: Optional[str]) -> str:
    def call():
        config = _parse(_mc_config_adapter, text, "monte carlo configuration")
        return _mc_result_adapter.dump_json(run_montecarlo(config)).decode()
    return _guarded(call)

def inverse_cdf_json(text: Optional[str]) -> str:
    def call():
        req = _parse(_icdf_request_adapter, text, "inverse cdf request")
        res = inverse_cdf(req.dist_type, req.probability, req.param1, req.param2)
        return _icdf_result_adapter.dump_json(res).decode()
    return _guarded(call)

def analyze_json(text: Optional[str]) -> str:
    def call():
        req = _parse(_analyze_request_adapter, text, "analysis request")
        res = analyze(req.data, req.round_odd, req.forced_k, req.forced_min, req.forced_max)
        return analysis_to_json(res)
    return _guarded(call)

def analysis_to_json(result: AnalysisResult) -> str:
    # +/-inf (AIC of excluded families) is written as null
    return _analysis_adapter.dump_json(result).decode()
