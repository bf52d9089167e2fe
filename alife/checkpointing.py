"""
alife/checkpointing.py - Engine Checkpoint and Restore

Wraps RandomEngine.save()/load() in a hashed record so a corrupted or
hand-edited token is caught before it silently changes a run. The record's
outer encoding (file, database, archive) belongs to whoever persists it.
"""

from typing import Any, Dict

from receipts import dual_hash, emit_receipt, stoprule_contract, CheckpointCorrupt

from .rng import RandomEngine


def checkpoint(rng: RandomEngine, tenant_id: str = "default") -> Dict[str, Any]:
    """
    Snapshot the engine.

    Returns:
        dict: rng_checkpoint receipt carrying rng_state, state_hash and seed
    """
    state = rng.save()
    return emit_receipt("rng_checkpoint", {
        "tenant_id": tenant_id,
        "seed": rng.seed,
        "rng_state": state,
        "state_hash": dual_hash(state),
    })


def restore(rng: RandomEngine, record: Dict[str, Any],
            tenant_id: str = "default") -> Dict[str, Any]:
    """
    Load a checkpoint record into `rng` after verifying its hash.

    Raises:
        CheckpointCorrupt: Missing fields or hash mismatch

    Returns:
        dict: rng_restore receipt
    """
    state = record.get("rng_state")
    expected = record.get("state_hash")
    if not isinstance(state, str) or expected is None:
        stoprule_contract(CheckpointCorrupt, "checkpoint record lacks rng_state or state_hash",
                          tenant_id=tenant_id)
    actual = dual_hash(state)
    if actual != expected:
        stoprule_contract(CheckpointCorrupt, "checkpoint state_hash mismatch",
                          tenant_id=tenant_id, expected=expected, actual=actual)
    rng.load(state)
    return emit_receipt("rng_restore", {
        "tenant_id": tenant_id,
        "seed": rng.seed,
        "state_hash": actual,
    })
