"""
alife/rng.py - Reproducible Random Engine

Seeded pseudorandom source for the whole substrate. Given the same seed and the
same sequence of calls, every method returns the same sequence of values.
Seed 0 means "use the wall clock" and gives up reproducibility on purpose.

The engine is an explicitly passed handle. There is no module-level generator:
every component that needs randomness receives the simulation's engine. It is
single-writer state; hosts that update organisms in parallel must either
serialize all draws or give each worker its own engine from derive_seed().

Two calling styles are offered:
    engine.uniform_int(0, 10)                  # one-shot
    draw = engine.uniform_int_stream(0, 10)    # reusable in hot loops
    draw(); draw()
Both consume the same underlying stream, so mixing them stays deterministic.

Loop contracts: uniform_real_nonzero, generate_distinct and
choose_two_distinct resample on collision. Ranges that cannot satisfy them
raise RangeInfeasible instead of spinning forever.
"""

import json
import math
import time
from typing import Any, Callable, List, Optional, Sequence, Tuple

import numpy as np

from receipts import (
    stoprule_contract,
    CheckpointCorrupt,
    ProbabilityOutOfRange,
    RangeInfeasible,
    TrackerExhausted,
)

from .constants import INT32_MIN, INT32_MAX, MAX_REJECTIONS, SEED_MODULUS
from .types_state import ReplacementTracker

STATE_VERSION = 1
BIT_GENERATOR = "MT19937"


def _wallclock_seed() -> int:
    return int(time.time())


# =============================================================================
# STATE TOKEN ENCODING
# =============================================================================

def _encode_state(value: Any) -> Any:
    """numpy bit-generator state -> JSON-safe structure."""
    if isinstance(value, dict):
        return {k: _encode_state(v) for k, v in value.items()}
    if isinstance(value, np.ndarray):
        return {"__ndarray__": value.tolist(), "dtype": str(value.dtype)}
    if isinstance(value, np.integer):
        return int(value)
    return value


def _decode_state(value: Any) -> Any:
    if isinstance(value, dict):
        if "__ndarray__" in value:
            return np.asarray(value["__ndarray__"], dtype=value["dtype"])
        return {k: _decode_state(v) for k, v in value.items()}
    return value


# =============================================================================
# RANDOM ENGINE
# =============================================================================

class RandomEngine:
    """Seeded random source: distributions, probability tests, sampling."""

    def __init__(self, seed: int = 0):
        self._bit_generator = np.random.MT19937(1)
        self._generator = np.random.Generator(self._bit_generator)
        self.seed = 0
        self.reset(seed)

    def __repr__(self) -> str:
        return f"RandomEngine(seed={self.seed})"

    # -------------------------------------------------------------------------
    # seeding
    # -------------------------------------------------------------------------

    def reset(self, seed: int) -> int:
        """
        Reseed the engine. Prior state is discarded, not mixed in.

        Args:
            seed: Non-negative integer; 0 substitutes the current time

        Returns:
            int: The seed actually used
        """
        seed = int(seed)
        if seed < 0:
            raise ValueError(f"seed must be non-negative, got {seed}")
        if seed == 0:
            seed = _wallclock_seed()

        # Reseed in place so streams handed out earlier keep drawing from this engine
        self._bit_generator.state = np.random.MT19937(seed).state
        self.seed = seed

        self._p = self.uniform_real_stream(0.0, 1.0)
        self._bit = self.uniform_int_stream(0, 2)
        return seed

    # -------------------------------------------------------------------------
    # reusable streams
    # -------------------------------------------------------------------------

    def uniform_real_stream(self, lo: float, hi: float) -> Callable[[], float]:
        """Zero-argument callable drawing reals from [lo, hi)."""
        generator = self._generator

        def draw() -> float:
            return float(generator.uniform(lo, hi))
        return draw

    def uniform_int_stream(self, lo: int, hi: int) -> Callable[[], int]:
        """Zero-argument callable drawing integers from [lo, hi). hi is never returned."""
        if hi <= lo:
            stoprule_contract(RangeInfeasible, f"empty integer range [{lo}, {hi})",
                              lo=lo, hi=hi)
        generator = self._generator

        def draw() -> int:
            return int(generator.integers(lo, hi))
        return draw

    # -------------------------------------------------------------------------
    # scalar draws
    # -------------------------------------------------------------------------

    def probability(self, p: float) -> bool:
        """True with probability p. p outside [0, 1] is a contract violation, never clamped."""
        if not 0.0 <= p <= 1.0:
            stoprule_contract(ProbabilityOutOfRange,
                              f"probability must be in [0, 1], got {p}", p=repr(p))
        return self._p() < p

    def bit(self) -> bool:
        """Fair coin flip."""
        return bool(self._bit())

    def uniform_real(self, lo: float, hi: float) -> float:
        return float(self._generator.uniform(lo, hi))

    def uniform_real_nonzero(self, lo: float, hi: float) -> float:
        """
        Uniform real from [lo, hi), resampled until nonzero.

        Raises:
            RangeInfeasible: lo == hi == 0, or MAX_REJECTIONS consecutive zeros
        """
        if lo == 0.0 and hi == 0.0:
            stoprule_contract(RangeInfeasible, "range [0, 0) cannot produce a nonzero value",
                              lo=lo, hi=hi)
        r = self.uniform_real(lo, hi)
        rejections = 0
        while r == 0.0:
            rejections += 1
            if rejections > MAX_REJECTIONS:
                stoprule_contract(RangeInfeasible,
                                  f"no nonzero draw from [{lo}, {hi}) after {MAX_REJECTIONS} tries",
                                  lo=lo, hi=hi)
            r = self.uniform_real(lo, hi)
        return r

    def normal_real(self, mean: float, variance: float) -> float:
        """Normal draw. Second argument is the variance, not the standard deviation."""
        if variance < 0:
            raise ValueError(f"variance must be non-negative, got {variance}")
        return float(self._generator.normal(mean, math.sqrt(variance)))

    def normal_int(self, mean: int, variance: float) -> int:
        """normal_real rounded to nearest (halves round up)."""
        return int(math.floor(self.normal_real(float(mean), variance) + 0.5))

    def uniform_int(self, lo: Optional[int] = None, hi: Optional[int] = None) -> int:
        """
        Uniform integer from [lo, hi); hi is exclusive.

        With no arguments, draws from the full 32-bit range [INT32_MIN, INT32_MAX).
        """
        if lo is None and hi is None:
            lo, hi = INT32_MIN, INT32_MAX
        elif lo is None or hi is None:
            raise TypeError("uniform_int() takes both bounds or neither")
        if hi <= lo:
            stoprule_contract(RangeInfeasible, f"empty integer range [{lo}, {hi})",
                              lo=lo, hi=hi)
        return int(self._generator.integers(lo, hi))

    def __call__(self, n: int) -> int:
        """Integer in [0, n), so the engine can stand in for a `randbelow`-style callable."""
        return self.uniform_int(0, n)

    # -------------------------------------------------------------------------
    # multi-value draws
    # -------------------------------------------------------------------------

    def generate_distinct(self, n: int, lo: int, hi: int,
                          output: Optional[List[int]] = None) -> List[int]:
        """
        n distinct integers from [lo, hi), in draw order, by rejection.

        Args:
            n: How many values
            lo, hi: Half-open range
            output: List to append to (a new list if None)

        Returns:
            list: output, with n values appended
        """
        out = [] if output is None else output
        if n > hi - lo:
            stoprule_contract(RangeInfeasible,
                              f"cannot draw {n} distinct values from [{lo}, {hi})",
                              n=n, lo=lo, hi=hi)
        if n <= 0:
            return out

        draw = self.uniform_int_stream(lo, hi)
        seen = set()
        while len(seen) < n:
            i = draw()
            if i not in seen:
                seen.add(i)
                out.append(i)
        return out

    def choose_two_distinct(self, lo: int, hi: int) -> Tuple[int, int]:
        """Two different integers from [lo, hi), returned as (smaller, larger)."""
        if hi - lo < 2:
            stoprule_contract(RangeInfeasible,
                              f"range [{lo}, {hi}) holds fewer than two values", lo=lo, hi=hi)
        draw = self.uniform_int_stream(lo, hi)
        one = draw()
        two = draw()
        while one == two:
            two = draw()
        if one > two:
            one, two = two, one
        return one, two

    def choose_two_distinct_in_range(self, sequence: Sequence) -> Tuple[int, int]:
        """Two different positions in sequence, first position before second."""
        return self.choose_two_distinct(0, len(sequence))

    def sample_with_replacement(self, sequence: Sequence, n: int,
                                output: Optional[list] = None) -> list:
        """Append n independent uniform picks from sequence to output."""
        out = [] if output is None else output
        if n <= 0:
            return out
        if len(sequence) == 0:
            stoprule_contract(RangeInfeasible, "cannot sample from an empty sequence", n=n)
        draw = self.uniform_int_stream(0, len(sequence))
        for _ in range(n):
            out.append(sequence[draw()])
        return out

    def sample_without_replacement(self, sequence: Sequence, n: int,
                                   output: Optional[list] = None) -> list:
        """Append n elements from n different positions of sequence to output."""
        out = [] if output is None else output
        if n > len(sequence):
            stoprule_contract(RangeInfeasible,
                              f"cannot sample {n} items without replacement from {len(sequence)}",
                              n=n, available=len(sequence))
        remaining = list(range(len(sequence)))
        for _ in range(n):
            i = self.uniform_int(0, len(remaining))
            out.append(sequence[remaining.pop(i)])
        return out

    def choice(self, sequence: Sequence,
               tracker: Optional[ReplacementTracker] = None) -> int:
        """
        Uniformly select a position in sequence.

        Without a tracker, positions are drawn with replacement. With a tracker,
        each position is returned at most once; an unused tracker is filled with
        every position on first call, so N calls on a length-N sequence yield a
        permutation and call N+1 raises TrackerExhausted.

        Returns:
            int: Index into sequence
        """
        size = len(sequence)
        if size == 0:
            stoprule_contract(RangeInfeasible, "cannot choose from an empty sequence")
        if tracker is None:
            return self.uniform_int(0, size)

        if not tracker.initialized:
            tracker.eligible = list(range(size))
            tracker.length = size
            tracker.initialized = True
        elif tracker.length != size:
            raise ValueError(
                f"tracker was built for a sequence of {tracker.length}, got {size}"
            )
        if not tracker.eligible:
            stoprule_contract(TrackerExhausted,
                              f"all {size} positions already chosen", length=size)

        i = self.uniform_int(0, len(tracker.eligible))
        return tracker.eligible.pop(i)

    # -------------------------------------------------------------------------
    # checkpointing
    # -------------------------------------------------------------------------

    def save(self) -> str:
        """
        Export the exact generator state as an opaque string token.

        Loading the token into any engine reproduces the remaining output
        sequence as if no save/load had happened.
        """
        token = {
            "version": STATE_VERSION,
            "seed": self.seed,
            "state": _encode_state(self._bit_generator.state),
        }
        return json.dumps(token, sort_keys=True, separators=(",", ":"))

    def load(self, token: str) -> None:
        """
        Import a token produced by save(). Malformed tokens raise CheckpointCorrupt
        and leave the engine untouched.
        """
        try:
            payload = json.loads(token)
            if payload.get("version") != STATE_VERSION:
                raise ValueError(f"unsupported state version {payload.get('version')!r}")
            seed = payload["seed"]
            if isinstance(seed, bool) or not isinstance(seed, int) or seed < 0:
                raise ValueError(f"seed must be a non-negative integer, got {seed!r}")
            state = _decode_state(payload["state"])
            if state.get("bit_generator") != BIT_GENERATOR:
                raise ValueError(f"unexpected bit generator {state.get('bit_generator')!r}")
            # Validate against a scratch generator so a bad key cannot half-write ours
            scratch = np.random.MT19937(1)
            scratch.state = state
            state = scratch.state
        except (ValueError, KeyError, TypeError, IndexError, AttributeError) as e:
            stoprule_contract(CheckpointCorrupt, f"cannot load rng state: {e}")
        self._bit_generator.state = state
        self.seed = seed


# =============================================================================
# PER-WORKER ENGINES
# =============================================================================

def derive_seed(master_seed: int, worker_index: int) -> int:
    """
    Deterministic, nonzero seed for worker `worker_index` of a run seeded with
    `master_seed`. master_seed must already be resolved (not 0).
    """
    if master_seed <= 0:
        raise ValueError("master_seed must be a resolved, positive seed")
    if worker_index < 0:
        raise ValueError(f"worker_index must be non-negative, got {worker_index}")
    state = np.random.SeedSequence([master_seed, worker_index]).generate_state(1)
    return int(state[0]) % SEED_MODULUS + 1


def spawn_engines(master_seed: int, n: int) -> List[RandomEngine]:
    """One independently seeded engine per worker."""
    return [RandomEngine(derive_seed(master_seed, i)) for i in range(n)]
