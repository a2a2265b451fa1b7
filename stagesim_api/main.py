import logging
from typing import List

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from stagesim_api.schemas import (
    AnalyzeRequest, GenerateRequest, InverseCdfRequest, InverseCdfResponse,
    MonteCarloRequest, MonteCarloResponse, ReplicationRequest, ReplicationResponse,
    SampleMeansRequest, SimulationRequest, SimulationResponse,
)
from stagesim_api.settings import Settings

from stagesim.errors import EmptyOrMissingInput, InvalidConfiguration
from stagesim.fitting import analyze
from stagesim.generator import generate
from stagesim.models import SimulationConfig, StageSpec as CoreStageSpec
from stagesim.montecarlo import (
    AnalysisMode as CoreAnalysisMode, MonteCarloConfig, VariableSpec as CoreVariableSpec,
    run_montecarlo, sample_means,
)
from stagesim.probabilities import inverse_cdf
from stagesim.simulation import run_replications, simulate
from stagesim.transport import analysis_to_json

settings = Settings.from_env()
logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Stage Simulator API", version="1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(InvalidConfiguration)
def invalid_configuration(request: Request, exc: InvalidConfiguration):
    logger.warning("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=422, content={"error": str(exc), "kind": "InvalidConfiguration"})

@app.exception_handler(EmptyOrMissingInput)
def empty_input(request: Request, exc: EmptyOrMissingInput):
    logger.warning("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=400, content={"error": str(exc), "kind": "EmptyOrMissingInput"})

def _to_core_config(req: SimulationRequest) -> SimulationConfig:
    # convert pydantic schema -> core dataclass
    return SimulationConfig(
        hours=req.hours,
        arrival_rate_per_hour=req.arrival_rate_per_hour,
        stages=[CoreStageSpec(s.name, s.family, s.param1, s.param2) for s in req.stages],
        tolerance_minutes=req.tolerance_minutes,
        abandon_probability=req.abandon_probability,
        seed=req.seed,
    )

@app.get("/health")
def health():
    return {"status": "ok"}

@app.post("/simulate", response_model=SimulationResponse)
def simulate_endpoint(req: SimulationRequest):
    return simulate(_to_core_config(req))

@app.post("/simulate/replications", response_model=ReplicationResponse)
def replications_endpoint(req: ReplicationRequest):
    summary = run_replications(_to_core_config(req), req.runs, seed=req.seed)
    return ReplicationResponse(
        runs=summary.runs,
        mean_avg_wait=summary.mean_avg_wait,
        max_avg_wait=summary.max_avg_wait,
        mean_customers=summary.mean_customers,
        avg_wait_per_run=[r.avg_wait_time for r in summary.reports],
    )

@app.post("/montecarlo", response_model=MonteCarloResponse)
def montecarlo_endpoint(req: MonteCarloRequest):
    config = MonteCarloConfig(
        n_simulations=req.n_simulations,
        variables=[CoreVariableSpec(**v.model_dump()) for v in req.variables],
        analysis=CoreAnalysisMode(**req.analysis.model_dump()),
        seed=req.seed,
    )
    return run_montecarlo(config)

@app.post("/montecarlo/sample-means", response_model=List[float])
def sample_means_endpoint(req: SampleMeansRequest):
    return sample_means(req.family, req.n_samples, req.n_trials, req.param1, req.param2, seed=req.seed)

@app.post("/generate", response_model=List[float])
def generate_endpoint(req: GenerateRequest):
    return generate(req.family, req.n, req.param1, req.param2, seed=req.seed)

@app.post("/inverse-cdf", response_model=InverseCdfResponse)
def inverse_cdf_endpoint(req: InverseCdfRequest):
    return inverse_cdf(req.dist_type, req.probability, req.param1, req.param2)

@app.post("/analyze")
def analyze_endpoint(req: AnalyzeRequest):
    res = analyze(req.data, req.round_odd, req.forced_k, req.forced_min, req.forced_max)
    # serialized by the core so infinite AICs become null instead of failing
    return Response(content=analysis_to_json(res), media_type="application/json")
