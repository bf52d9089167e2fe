"""
receipts.py - Foundation Module

Canonical emit_receipt() and the StopRule exception family. Every module in
the alife package imports from here; this is the single source of truth for
receipt emission and for contract violations.

Never single hash. Always dual_hash (SHA256:BLAKE3).
"""

import hashlib
import json
from datetime import datetime, timezone
from typing import Any, Dict, Union

import blake3

__all__ = [
    "dual_hash",
    "emit_receipt",
    "stoprule_contract",
    "StopRule",
    "ContractViolation",
    "ProbabilityOutOfRange",
    "OpcodeOutOfRange",
    "LocationOutOfRange",
    "RangeInfeasible",
    "TrackerExhausted",
    "TopologyNotInitialized",
    "CheckpointCorrupt",
    "RECEIPT_SCHEMA",
]

# =============================================================================
# CONSTANTS
# =============================================================================

RECEIPT_SCHEMA = {
    "receipt_type": "str",
    "ts": "ISO8601",
    "tenant_id": "str",
    "payload_hash": "str (SHA256:BLAKE3)",
}


# =============================================================================
# CORE FUNCTION 1: dual_hash
# =============================================================================

def dual_hash(data: Union[bytes, str]) -> str:
    """
    SHA256:BLAKE3 - ALWAYS use this, never single hash.

    Args:
        data: Bytes or string to hash

    Returns:
        str: "sha256_hex:blake3_hex" format
    """
    if isinstance(data, str):
        data = data.encode()
    sha = hashlib.sha256(data).hexdigest()
    b3 = blake3.blake3(data).hexdigest()
    return f"{sha}:{b3}"


# =============================================================================
# CORE FUNCTION 2: emit_receipt
# =============================================================================

def emit_receipt(receipt_type: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build a receipt for a state change.

    Args:
        receipt_type: Type identifier for this receipt
        data: Receipt payload (may include tenant_id, defaults to 'default')

    Returns:
        dict: Complete receipt with ts, tenant_id, payload_hash, and data fields
    """
    receipt = {
        "receipt_type": receipt_type,
        "ts": datetime.now(timezone.utc).isoformat(),
        "tenant_id": data.get("tenant_id", "default"),
        "payload_hash": dual_hash(json.dumps(data, sort_keys=True, default=str)),
        **data
    }
    return receipt


# =============================================================================
# STOPRULE EXCEPTIONS
# =============================================================================

class StopRule(Exception):
    """Raised when stoprule triggers. Never catch silently."""
    pass


class ContractViolation(StopRule):
    """A caller broke an operation's precondition. Fatal: never clamp, never retry."""
    pass


class ProbabilityOutOfRange(ContractViolation, ValueError):
    """Probability argument outside [0, 1]."""


class OpcodeOutOfRange(ContractViolation, IndexError):
    """Opcode index outside the registered instruction table."""


class LocationOutOfRange(ContractViolation, IndexError):
    """Location index outside [0, capacity)."""


class RangeInfeasible(ContractViolation, ValueError):
    """A sampling request the given range cannot satisfy."""


class TrackerExhausted(ContractViolation, IndexError):
    """Without-replacement tracker has no eligible positions left."""


class TopologyNotInitialized(ContractViolation, RuntimeError):
    """Topology used before initialize()."""


class CheckpointCorrupt(ContractViolation, ValueError):
    """Checkpoint token could not be verified or decoded."""


# =============================================================================
# CORE FUNCTION 3: stoprule_contract
# =============================================================================

def stoprule_contract(violation_cls: type, message: str,
                      tenant_id: str = "default", **detail: Any) -> None:
    """
    Emit a contract_violation receipt, then raise.

    Args:
        violation_cls: ContractViolation subclass to raise
        message: Human-readable description
        tenant_id: Tenant identifier
        **detail: Extra payload fields for the receipt

    Raises:
        ContractViolation: Always (the given subclass)
    """
    receipt = emit_receipt("contract_violation", {
        "tenant_id": tenant_id,
        "violation": violation_cls.__name__,
        "message": message,
        **detail,
    })
    exc = violation_cls(message)
    exc.receipt = receipt
    raise exc
