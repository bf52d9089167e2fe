"""
alife - Artificial-Life Substrate Package

Public API: reproducible random engine, well-mixed topology, instruction
dispatcher, plus the reference instruction set and population environment.
"""

# =============================================================================
# TYPES (Dataclasses)
# =============================================================================
from .types_config import (
    ALifeConfig,
    SCENARIO_BASELINE,
    SCENARIO_SMALL_WORLD,
    SCENARIO_WALLCLOCK,
    MANDATORY_SCENARIOS,
)
from .types_state import Location, Organism, Hardware, ReplacementTracker

# =============================================================================
# CONSTANTS
# =============================================================================
from .constants import (
    Opcode,
    Head,
    Register,
    N_BUILTIN_OPCODES,
    INT32_MIN,
    INT32_MAX,
    MAX_REJECTIONS,
    RECEIPT_SCHEMA,
)

# =============================================================================
# CORE
# =============================================================================
from .rng import RandomEngine, derive_seed, spawn_engines
from .topology import WellMixedTopology, NeighborhoodStream
from .isa import InstructionDispatcher
from .instructions import Instruction, BUILTIN_INSTRUCTIONS, default_instruction_set

# =============================================================================
# COLLABORATORS
# =============================================================================
from .hardware import step
from .environment import Environment
from .checkpointing import checkpoint, restore

# =============================================================================
# PUBLIC API
# =============================================================================
__all__ = [
    # Types
    "ALifeConfig",
    "Location",
    "Organism",
    "Hardware",
    "ReplacementTracker",
    # Scenario presets
    "SCENARIO_BASELINE",
    "SCENARIO_SMALL_WORLD",
    "SCENARIO_WALLCLOCK",
    "MANDATORY_SCENARIOS",
    # Constants
    "Opcode",
    "Head",
    "Register",
    "N_BUILTIN_OPCODES",
    "INT32_MIN",
    "INT32_MAX",
    "MAX_REJECTIONS",
    "RECEIPT_SCHEMA",
    # Core
    "RandomEngine",
    "derive_seed",
    "spawn_engines",
    "WellMixedTopology",
    "NeighborhoodStream",
    "InstructionDispatcher",
    "Instruction",
    "BUILTIN_INSTRUCTIONS",
    "default_instruction_set",
    # Collaborators
    "step",
    "Environment",
    "checkpoint",
    "restore",
]
