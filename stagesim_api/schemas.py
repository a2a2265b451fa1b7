from typing import List, Literal, Optional

from pydantic import BaseModel, Field, StrictInt, model_validator


Family = Literal["normal", "exponential", "uniform"]
GeneratorFamily = Literal["uniform", "normal", "exponential", "poisson", "binomial"]

# ---------- Simulation ----------
class StageSpec(BaseModel):
    name: str
    family: Family
    param1: float = Field(..., examples=[5.0])
    param2: float = 0.0

class SimulationRequest(BaseModel):
    hours: StrictInt = Field(..., ge=1, le=10000)
    arrival_rate_per_hour: float = Field(..., gt=0)
    stages: List[StageSpec] = Field(..., min_length=1)
    tolerance_minutes: float = Field(0.0, ge=0)
    abandon_probability: float = Field(0.0, ge=0, le=1)
    seed: Optional[int] = None

class ReplicationRequest(SimulationRequest):
    runs: int = Field(..., ge=1, le=1000)

class CustomerRecord(BaseModel):
    customer_id: int
    hour_arrived: int
    arrival_time_abs: float
    arrival_minute: float
    start_time: float
    end_time: float
    total_duration: float
    wait_time: float
    idle_time: float
    stage_durations: List[float]
    stage_start_times: List[float]
    stage_end_times: List[float]
    left: bool
    pending: bool
    satisfied: bool

class HourRecord(BaseModel):
    hour_index: int
    estimated_arrivals: int
    served_count: int
    pending_count: int
    left_count: int
    customers: List[CustomerRecord]

class SimulationResponse(BaseModel):
    hours: List[HourRecord]
    total_customers: int
    avg_wait_time: float
    max_wait_time: float

class ReplicationResponse(BaseModel):
    runs: int
    mean_avg_wait: float
    max_avg_wait: float
    mean_customers: float
    avg_wait_per_run: List[float]

# ---------- Monte Carlo ----------
class VariableSpec(BaseModel):
    name: str
    family: Family
    param1: float
    param2: float = 0.0
    multiplier: float = 1.0

class AnalysisMode(BaseModel):
    mode_type: Literal["aggregation", "probability"] = "aggregation"
    threshold: float = 0.0
    operator: Literal["<", "<=", ">", ">="] = "<"
    cost_per_event: float = 0.0
    population_size: float = 0.0

class MonteCarloRequest(BaseModel):
    n_simulations: StrictInt = Field(..., ge=1, le=5_000_000)
    variables: List[VariableSpec] = Field(..., min_length=1)
    analysis: AnalysisMode = AnalysisMode()
    seed: Optional[int] = None

class MonteCarloResponse(BaseModel):
    iterations: int
    mean: float
    std_dev: float
    min: float
    max: float
    samples_preview: List[float]
    success_count: Optional[int] = None
    probability: Optional[float] = None
    expected_cost: Optional[float] = None

class SampleMeansRequest(BaseModel):
    family: Family
    n_samples: int = Field(..., ge=1, le=100000)
    n_trials: int = Field(..., ge=1, le=100000)
    param1: float = 0.0
    param2: float = 1.0
    seed: Optional[int] = None

# ---------- Sampling ----------
class GenerateRequest(BaseModel):
    family: GeneratorFamily
    n: int = Field(..., ge=1, le=1_000_000)
    param1: float = 0.0
    param2: float = 1.0
    seed: Optional[int] = None

class InverseCdfRequest(BaseModel):
    dist_type: Family
    probability: float = Field(..., gt=0, lt=1)
    param1: float
    param2: float = 0.0

class InverseCdfResponse(BaseModel):
    value: float
    z_score: Optional[float] = None

# ---------- Analysis ----------
class AnalyzeRequest(BaseModel):
    data: List[float] = Field(..., min_length=1)
    round_odd: bool = False
    forced_k: int = Field(0, ge=0)
    forced_min: Optional[float] = None
    forced_max: Optional[float] = None

    @model_validator(mode="after")
    def check_limits(self):
        if self.forced_min is not None and self.forced_max is not None:
            if self.forced_min > self.forced_max:
                raise ValueError("forced_min must be <= forced_max")
        return self

