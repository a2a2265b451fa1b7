from dataclasses import dataclass, field
from typing import List, Optional

from pydantic import StrictInt

@dataclass
class StageSpec:
    name: str
    family: str     # "normal" | "exponential" | "uniform"
    param1: float   # normal: mean, exponential: mean (beta), uniform: min
    param2: float = 0.0  # normal: variance, uniform: max

@dataclass
class SimulationConfig:
    hours: StrictInt              # simulated horizon, whole hours; JSON true is not 1
    arrival_rate_per_hour: float  # Poisson arrival rate
    stages: List[StageSpec]       # served in this order, one server each
    tolerance_minutes: float = 0.0
    abandon_probability: float = 0.0
    seed: Optional[int] = None    # None -> fresh entropy per run

@dataclass
class CustomerRecord:
    customer_id: int
    hour_arrived: int          # 1-based
    arrival_time_abs: float    # minutes since the start of the run
    arrival_minute: float      # offset inside its arrival hour (0..60)
    start_time: float          # entry into stage 1 (arrival time if left)
    end_time: float
    total_duration: float
    wait_time: float
    idle_time: float           # server idle time absorbed by this customer
    stage_durations: List[float] = field(default_factory=list)
    stage_start_times: List[float] = field(default_factory=list)
    stage_end_times: List[float] = field(default_factory=list)
    left: bool = False
    pending: bool = False
    satisfied: bool = False

@dataclass
class HourRecord:
    hour_index: int            # 1-based
    estimated_arrivals: int
    served_count: int
    pending_count: int
    left_count: int
    customers: List[CustomerRecord] = field(default_factory=list)

@dataclass
class SimulationReport:
    hours: List[HourRecord]
    total_customers: int
    avg_wait_time: float
    max_wait_time: float

@dataclass
class ReplicationSummary:
    runs: int
    mean_avg_wait: float
    max_avg_wait: float
    mean_customers: float
    reports: List[SimulationReport] = field(default_factory=list)
