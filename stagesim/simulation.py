import logging
import random
from typing import List, Optional

from .distributions import Sampler, bernoulli, prepare_arrivals, prepare_stage
from .models import (
    CustomerRecord, HourRecord, ReplicationSummary, SimulationConfig, SimulationReport,
)
from .validators import require_int_at_least, validate_config

logger = logging.getLogger(__name__)

MINUTES_PER_HOUR = 60.0

class ServerTable:
    """
    busy_until per stage: the instant each stage's single server frees up.
    Customers are processed in arrival order, so reserve() is the only
    write and every row only moves forward.
    """

    def __init__(self, n_stages: int):
        self.busy_until = [0.0] * n_stages

    def __len__(self):
        return len(self.busy_until)

    def free_at(self, stage: int) -> float:
        return self.busy_until[stage]

    def reserve(self, stage: int, start: float, end: float) -> None:
        if start < self.busy_until[stage] or end < start:
            raise RuntimeError(
                f"stage {stage} reserved out of order: [{start}, {end}] before {self.busy_until[stage]}"
            )
        self.busy_until[stage] = end

def _abandon(customer_id: int, hour_no: int, arrival: float, minute: float, wait: float) -> CustomerRecord:
    return CustomerRecord(
        customer_id=customer_id,
        hour_arrived=hour_no,
        arrival_time_abs=arrival,
        arrival_minute=minute,
        start_time=arrival,
        end_time=arrival,
        total_duration=0.0,
        wait_time=wait,
        idle_time=0.0,
        left=True,
    )

def _serve(customer_id: int, hour_no: int, arrival: float, minute: float, entry: float,
           hour_end: float, stages: List[Sampler], servers: ServerTable,
           rng: random.Random) -> CustomerRecord:
    current = entry
    wait = entry - arrival
    idle = 0.0

    durations: List[float] = []
    starts: List[float] = []
    ends: List[float] = []

    for idx, dist in enumerate(stages):
        server_free_at = servers.free_at(idx)
        start = max(current, server_free_at)

        # server sat idle until this customer showed up
        if start > server_free_at:
            idle += start - server_free_at
        # customer queued for a busy server
        if start > current:
            wait += start - current

        duration = dist.sample(rng)
        end = start + duration
        servers.reserve(idx, start, end)

        durations.append(duration)
        starts.append(start)
        ends.append(end)
        current = end

    satisfied = current <= hour_end
    return CustomerRecord(
        customer_id=customer_id,
        hour_arrived=hour_no,
        arrival_time_abs=arrival,
        arrival_minute=minute,
        start_time=entry,
        end_time=current,
        total_duration=current - arrival,
        wait_time=wait,
        idle_time=idle,
        stage_durations=durations,
        stage_start_times=starts,
        stage_end_times=ends,
        left=False,
        pending=not satisfied,
        satisfied=satisfied,
    )

def simulate(config: SimulationConfig, rng: Optional[random.Random] = None) -> SimulationReport:
    validate_config(config)

    if rng is None:
        rng = random.Random(config.seed)

    stages = [prepare_stage(s, i) for i, s in enumerate(config.stages)]
    arrivals = prepare_arrivals(config.arrival_rate_per_hour)
    servers = ServerTable(len(stages))

    logger.debug(
        "simulating %d h at %.3f arrivals/h through %d stage(s)",
        config.hours, config.arrival_rate_per_hour, len(stages),
    )
    for i, stage in enumerate(stages):
        # nominal load ignores the floor at zero applied to service draws
        load = stage.mean / arrivals.mean
        if load >= 1.0:
            logger.warning("stage %d (%s) is overloaded: nominal load %.2f", i, config.stages[i].name, load)

    hours: List[HourRecord] = []
    customer_id = 0
    total_wait = 0.0
    max_wait = 0.0

    clock = arrivals.sample(rng)

    for h in range(config.hours):
        hour_start = h * MINUTES_PER_HOUR
        hour_end = hour_start + MINUTES_PER_HOUR
        hour_no = h + 1

        customers: List[CustomerRecord] = []
        served = 0
        left = 0

        while clock < hour_end:
            customer_id += 1
            arrival = clock
            minute = arrival - hour_start

            candidate = max(arrival, servers.free_at(0))
            expected_wait = candidate - arrival

            # entry at or past the hour boundary never counts for this hour
            if candidate >= hour_end or (
                expected_wait > config.tolerance_minutes
                and bernoulli(config.abandon_probability, rng)
            ):
                rec = _abandon(customer_id, hour_no, arrival, minute, expected_wait)
                left += 1
            else:
                rec = _serve(customer_id, hour_no, arrival, minute, candidate,
                             hour_end, stages, servers, rng)
                if rec.satisfied:
                    served += 1

            total_wait += rec.wait_time
            max_wait = max(max_wait, rec.wait_time)
            customers.append(rec)

            clock += arrivals.sample(rng)

        hours.append(HourRecord(
            hour_index=hour_no,
            estimated_arrivals=len(customers),
            served_count=served,
            pending_count=sum(1 for c in customers if c.pending),
            left_count=left,
            customers=customers,
        ))

    avg_wait = total_wait / customer_id if customer_id > 0 else 0.0
    logger.info(
        "simulation finished: %d customers, avg wait %.3f min, max wait %.3f min",
        customer_id, avg_wait, max_wait,
    )

    return SimulationReport(
        hours=hours,
        total_customers=customer_id,
        avg_wait_time=avg_wait,
        max_wait_time=max_wait,
    )

def run_replications(config: SimulationConfig, runs: int, seed: Optional[int] = None) -> ReplicationSummary:
    """
    Independent replications of one configuration. Each run gets its own
    Random derived from `seed`, so runs never share generator state.
    """
    require_int_at_least("runs", runs, 1)
    validate_config(config)

    master = random.Random(seed)
    reports = [simulate(config, random.Random(master.getrandbits(64))) for _ in range(runs)]

    waits = [r.avg_wait_time for r in reports]
    return ReplicationSummary(
        runs=runs,
        mean_avg_wait=sum(waits) / runs,
        max_avg_wait=max(waits),
        mean_customers=sum(r.total_customers for r in reports) / runs,
        reports=reports,
    )
