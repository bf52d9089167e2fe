"""
alife/types_config.py - ALifeConfig Dataclass and Scenario Presets

Immutable configuration for a population substrate.
Frozen dataclass, no behavior.
"""

from dataclasses import dataclass
from typing import Tuple

from .constants import INT32_MAX


@dataclass(frozen=True)
class ALifeConfig:
    """Substrate configuration (immutable)."""
    random_seed: int = 42  # 0 = wall clock, non-reproducible
    population_size: int = 1024  # Topology capacity
    input_range: Tuple[int, int] = (0, INT32_MAX)  # [lo, hi) for environment inputs
    tenant_id: str = "alife"
    scenario_name: str = "BASELINE"


# =============================================================================
# SCENARIO PRESETS
# =============================================================================

SCENARIO_BASELINE = ALifeConfig(
    random_seed=42,
    population_size=1024,
    scenario_name="BASELINE"
)

# Tiny world: every birth almost certainly displaces someone
SCENARIO_SMALL_WORLD = ALifeConfig(
    random_seed=43,
    population_size=8,
    input_range=(0, 16),
    scenario_name="SMALL_WORLD"
)

# Seed 0 opts out of reproducibility
SCENARIO_WALLCLOCK = ALifeConfig(
    random_seed=0,
    population_size=1024,
    scenario_name="WALLCLOCK"
)

MANDATORY_SCENARIOS = [
    SCENARIO_BASELINE,
    SCENARIO_SMALL_WORLD,
    SCENARIO_WALLCLOCK,
]
