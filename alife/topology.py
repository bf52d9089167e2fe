"""
alife/topology.py - Well-Mixed Spatial Topology

A fixed-size array of Locations. There is no adjacency: every Location is
equally likely to be any organism's neighbor.

neighborhood() returns a sampling STREAM, not an enumeration of Locations.
Its length is a quota equal to the capacity; each element is an independent
with-replacement draw made at the moment it is read. The same Location can
appear more than once and some never appear.

replace() is the only way occupancy changes: births and deaths both go
through it. Access is assumed to be serialized (one update at a time). A host
that reads neighborhoods and applies replacements from several threads must
separate the two into phases or lock per Location.
"""

from typing import Any, Iterator, List, Optional

from receipts import stoprule_contract, TopologyNotInitialized

from .rng import RandomEngine
from .types_state import Location


# =============================================================================
# NEIGHBORHOOD STREAM
# =============================================================================

class NeighborhoodStream:
    """
    Bounded, single-pass stream of randomly drawn Locations.

    current() draws a fresh Location on every call without using up quota;
    next() draws one and advances. Exactly `len(stream)` advances are allowed.
    """

    def __init__(self, locations: List[Location], rng: RandomEngine):
        self._locations = locations
        self._rng = rng
        self._quota = len(locations)
        self._n = 0

    def __len__(self) -> int:
        return self._quota

    def __iter__(self) -> Iterator[Location]:
        return self

    def __next__(self) -> Location:
        if self._n >= self._quota:
            raise StopIteration
        location = self.current()
        self._n += 1
        return location

    @property
    def remaining(self) -> int:
        return self._quota - self._n

    def current(self) -> Location:
        """Draw at the current stream position. Calling twice draws twice."""
        return self._locations[self._rng.choice(self._locations)]


# =============================================================================
# WELL-MIXED TOPOLOGY
# =============================================================================

class WellMixedTopology:
    """Population slots with no fixed adjacency."""

    def __init__(self, rng: RandomEngine):
        self.rng = rng
        self._locations: Optional[List[Location]] = None

    def initialize(self, capacity: int) -> None:
        """Allocate `capacity` empty Locations. Re-initializing drops all occupancy."""
        if capacity < 0:
            raise ValueError(f"capacity must be non-negative, got {capacity}")
        self._locations = [Location(index=i) for i in range(capacity)]

    @property
    def initialized(self) -> bool:
        return self._locations is not None

    @property
    def locations(self) -> List[Location]:
        if self._locations is None:
            stoprule_contract(TopologyNotInitialized,
                              "topology used before initialize()")
        return self._locations

    @property
    def capacity(self) -> int:
        return len(self.locations)

    def __len__(self) -> int:
        return self.capacity

    def __getitem__(self, index: int) -> Location:
        return self.locations[index]

    def neighborhood(self, organism: Any) -> NeighborhoodStream:
        """
        Random neighbors of `organism`.

        The organism is not consulted: in a well-mixed world every organism has
        the same neighborhood distribution.
        """
        return NeighborhoodStream(self.locations, self.rng)

    def replace(self, location: Location, organism: Any) -> Optional[Any]:
        """
        Put `organism` at `location`, killing whoever lived there.

        The displaced occupant is marked not-alive and detached but NOT
        destroyed; the population manager reclaims it. Passing None empties
        the slot (externally triggered death).

        Returns:
            The displaced organism, or None if the slot was empty
        """
        if self._locations is None:
            stoprule_contract(TopologyNotInitialized,
                              "topology used before initialize()")
        displaced = location.occupant
        if displaced is not None:
            displaced.alive = False
            if getattr(displaced, "location", None) is location:
                displaced.location = None
        location.occupant = organism
        if organism is not None and hasattr(organism, "location"):
            organism.location = location
        return displaced

    def occupied(self) -> List[Location]:
        return [loc for loc in self.locations if loc.occupant is not None]

    def vacancies(self) -> List[Location]:
        return [loc for loc in self.locations if loc.occupant is None]
