# run.py

import logging

from stagesim.fitting import analyze
from stagesim.generator import generate
from stagesim.models import SimulationConfig, StageSpec
from stagesim.montecarlo import AnalysisMode, MonteCarloConfig, VariableSpec, run_montecarlo
from stagesim.probabilities import inverse_cdf
from stagesim.simulation import run_replications, simulate
from stagesim.transport import simulate_json

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

# =====================================================
# 1️⃣ Car wash: wash -> rinse -> dry
# =====================================================
cfg = SimulationConfig(
    hours=3,
    arrival_rate_per_hour=8.0,
    stages=[
        StageSpec("wash", "normal", 5.0, 1.0),
        StageSpec("rinse", "exponential", 2.0),
        StageSpec("dry", "uniform", 1.0, 3.0),
    ],
    tolerance_minutes=10.0,
    abandon_probability=0.5,
    seed=42,
)

report = simulate(cfg)

print("=== Simulation (per hour) ===")
for h in report.hours:
    print(f"hour {h.hour_index}: arrivals={h.estimated_arrivals} served={h.served_count} "
          f"pending={h.pending_count} left={h.left_count}")
print(f"total={report.total_customers} avg_wait={report.avg_wait_time:.2f} max_wait={report.max_wait_time:.2f}")

print("\nFirst customers:")
for c in report.hours[0].customers[:5]:
    print(c)

# =====================================================
# 2️⃣ Replications
# =====================================================
summary = run_replications(cfg, runs=20, seed=7)
print(f"\n=== 20 replications === mean avg wait {summary.mean_avg_wait:.2f}, worst {summary.max_avg_wait:.2f}")

# =====================================================
# 3️⃣ JSON boundary
# =====================================================
print("\n=== JSON errors ===")
print(simulate_json(None))
print(simulate_json('{"hours": 0, "arrival_rate_per_hour": 5, "stages": []}'))

# =====================================================
# 4️⃣ Monte Carlo: profit = revenue - cost
# =====================================================
mc = run_montecarlo(MonteCarloConfig(
    n_simulations=100000,
    variables=[
        VariableSpec("revenue", "normal", 100.0, 225.0),
        VariableSpec("cost", "uniform", 60.0, 90.0, multiplier=-1.0),
    ],
    analysis=AnalysisMode("probability", threshold=0.0, operator="<",
                          cost_per_event=500.0, population_size=1000.0),
    seed=1,
))
print("\n=== Monte Carlo ===")
print(f"mean={mc.mean:.3f} std={mc.std_dev:.3f} P(loss)={mc.probability:.4f} cost={mc.expected_cost:.1f}")

# =====================================================
# 5️⃣ Sample analysis + inverse CDF
# =====================================================
sample = generate("exponential", 500, 4.0, seed=3)
res = analyze(sample)
print("\n=== Analysis of Exp(beta=4) sample ===")
print(f"n={res.summary.n} mean={res.summary.mean:.3f} k={res.summary.k} best fit={res.best_fit.name} {res.best_fit.params}")

print("\n=== Inverse CDF ===")
print(inverse_cdf("normal", 0.975, 0.0, 1.0))
print(inverse_cdf("exponential", 0.5, 2.0))
