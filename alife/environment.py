"""
alife/environment.py - Population Environment

Owns the organisms and wires the engine and topology together. The
reproduction instruction calls replicate(); externally triggered deaths go
through kill(). Both end in topology.replace(), which only marks displaced
organisms dead. reap() is where they leave the population.
"""

from typing import Any, List, Optional

from receipts import emit_receipt, stoprule_contract, LocationOutOfRange, RangeInfeasible

from .rng import RandomEngine
from .topology import WellMixedTopology
from .types_config import ALifeConfig, SCENARIO_BASELINE
from .types_state import Location


class Environment:
    """Population + topology + engine + receipt ledger for one simulation."""

    def __init__(self, rng: RandomEngine, topology: WellMixedTopology,
                 config: ALifeConfig = SCENARIO_BASELINE):
        self.rng = rng
        self.topology = topology
        self.config = config
        self.population: List[Any] = []
        self.receipt_ledger: List[dict] = []
        self._last_id = 0

    @classmethod
    def from_config(cls, config: ALifeConfig) -> "Environment":
        """Seed an engine, size a topology, and record both."""
        rng = RandomEngine(config.random_seed)
        topology = WellMixedTopology(rng)
        topology.initialize(config.population_size)
        env = cls(rng, topology, config)
        env.receipt_ledger.append(emit_receipt("topology_init", {
            "tenant_id": config.tenant_id,
            "scenario": config.scenario_name,
            "capacity": config.population_size,
            "seed": rng.seed,
        }))
        return env

    def _assign_id(self, organism: Any) -> None:
        self._last_id += 1
        organism.organism_id = self._last_id

    def _place(self, location: Location, organism: Any) -> Optional[Any]:
        displaced = self.topology.replace(location, organism)
        if organism is not None:
            self.population.append(organism)
        return displaced

    # =========================================================================
    # BIRTH / DEATH
    # =========================================================================

    def inject(self, organism: Any, index: Optional[int] = None) -> Location:
        """
        Place an organism from outside the population (e.g. the ancestor).

        Args:
            organism: New organism
            index: Location index; a random Location if None

        Returns:
            Location: Where it landed
        """
        if index is None:
            index = self.rng.choice(self.topology.locations)
        elif not 0 <= index < self.topology.capacity:
            stoprule_contract(LocationOutOfRange,
                              f"location {index} outside topology of {self.topology.capacity}",
                              tenant_id=self.config.tenant_id, index=index,
                              capacity=self.topology.capacity)
        location = self.topology[index]
        self._assign_id(organism)
        displaced = self._place(location, organism)
        self.receipt_ledger.append(emit_receipt("replacement_event", {
            "tenant_id": self.config.tenant_id,
            "cause": "inject",
            "location": location.index,
            "organism_id": organism.organism_id,
            "displaced_id": getattr(displaced, "organism_id", None),
        }))
        return location

    def replicate(self, parent: Any, offspring: Any) -> Location:
        """Place offspring at the first draw of the parent's neighborhood."""
        location = next(self.topology.neighborhood(parent), None)
        if location is None:
            stoprule_contract(RangeInfeasible, "no locations to place offspring",
                              tenant_id=self.config.tenant_id, capacity=0)
        self._assign_id(offspring)
        displaced = self._place(location, offspring)
        self.receipt_ledger.append(emit_receipt("replication_event", {
            "tenant_id": self.config.tenant_id,
            "parent_id": getattr(parent, "organism_id", None),
            "offspring_id": offspring.organism_id,
            "generation": getattr(offspring, "generation", 0),
            "location": location.index,
            "displaced_id": getattr(displaced, "organism_id", None),
        }))
        return location

    def kill(self, organism: Any) -> None:
        """Externally triggered death: empty the organism's Location."""
        location = getattr(organism, "location", None)
        if location is None or location.occupant is not organism:
            organism.alive = False
            return
        self.topology.replace(location, None)
        self.receipt_ledger.append(emit_receipt("replacement_event", {
            "tenant_id": self.config.tenant_id,
            "cause": "kill",
            "location": location.index,
            "organism_id": None,
            "displaced_id": getattr(organism, "organism_id", None),
        }))

    def reap(self) -> List[Any]:
        """Drop dead organisms from the population. Returns the ones removed."""
        dead = [org for org in self.population if not org.alive]
        self.population = [org for org in self.population if org.alive]
        return dead

    # =========================================================================
    # INPUTS
    # =========================================================================

    def next_input(self) -> int:
        lo, hi = self.config.input_range
        return self.rng.uniform_int(lo, hi)
