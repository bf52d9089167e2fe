"""
alife/types_state.py - Location, Organism, Hardware and Tracker Dataclasses

Mutable state records shared by the topology, the dispatcher and the
reference instruction set. Dataclasses for state, no policy.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional

from .constants import Head, Register


# =============================================================================
# TOPOLOGY SLOT
# =============================================================================

@dataclass(eq=False)
class Location:
    """One addressable slot in the topology.

    The occupant reference is non-owning: the population manager owns
    organisms. At most one occupant at a time; index never changes.
    """
    index: int
    occupant: Optional[Any] = None

    @property
    def occupied(self) -> bool:
        return self.occupant is not None


# =============================================================================
# REFERENCE ORGANISM / HARDWARE
# =============================================================================

@dataclass
class Hardware:
    """Per-organism execution state: memory, heads, registers, I/O buffers."""
    memory: List[int] = field(default_factory=list)
    heads: List[int] = field(default_factory=lambda: [0] * len(Head))
    registers: List[int] = field(default_factory=lambda: [0] * len(Register))
    inputs: List[int] = field(default_factory=list)
    outputs: List[int] = field(default_factory=list)
    cycles: int = 0
    jumped: bool = False  # handler moved the IP; step() must not advance it

    @property
    def ip(self) -> int:
        return self.heads[Head.IP]

    def wrap(self, position: int) -> int:
        """Heads address memory circularly."""
        if not self.memory:
            return 0
        return position % len(self.memory)


@dataclass(eq=False)
class Organism:
    """Population member. Topology only touches `alive` and `location`."""
    genome: List[int]
    organism_id: int = 0
    generation: int = 0
    alive: bool = True
    location: Optional[Location] = None
    hardware: Optional[Hardware] = None

    def __post_init__(self):
        if self.hardware is None:
            self.hardware = Hardware(memory=list(self.genome))


# =============================================================================
# WITHOUT-REPLACEMENT TRACKER
# =============================================================================

@dataclass
class ReplacementTracker:
    """Positions not yet returned by RandomEngine.choice(sequence, tracker).

    `initialized` separates "never used" from "used up": a fresh tracker is
    filled with every position on first use, an exhausted one stays empty.
    """
    eligible: List[int] = field(default_factory=list)
    initialized: bool = False
    length: int = 0

    def __len__(self) -> int:
        return len(self.eligible)

    @property
    def exhausted(self) -> bool:
        return self.initialized and not self.eligible

    def clear(self) -> None:
        """Forget all draws; the next choice() re-fills the tracker."""
        self.eligible = []
        self.initialized = False
        self.length = 0
