"""
tests/test_receipts.py - Tests for receipts.py

dual_hash, emit_receipt and the StopRule family.
"""

import pytest

from receipts import (
    CheckpointCorrupt,
    ContractViolation,
    LocationOutOfRange,
    OpcodeOutOfRange,
    RangeInfeasible,
    StopRule,
    TopologyNotInitialized,
    TrackerExhausted,
    dual_hash,
    emit_receipt,
    stoprule_contract,
)


class TestDualHash:
    """dual_hash format."""

    def test_format(self):
        """Two 64-char hex digests joined by a colon."""
        h = dual_hash("hello")
        sha, b3 = h.split(":")
        assert len(sha) == 64 and len(b3) == 64, f"Unexpected digest lengths in {h}"
        assert sha != b3, "SHA256 and BLAKE3 halves should differ"

    def test_str_and_bytes_agree(self):
        """str input is utf-8 encoded first."""
        assert dual_hash("abc") == dual_hash(b"abc"), "str/bytes hashes differ"


class TestEmitReceipt:
    """emit_receipt fields."""

    def test_fields(self):
        """Receipt carries type, ts, tenant, hash and payload."""
        r = emit_receipt("replication_event", {"tenant_id": "t1", "location": 4})
        assert r["receipt_type"] == "replication_event", "Wrong type"
        assert r["tenant_id"] == "t1", "Wrong tenant"
        assert r["location"] == 4, "Payload missing"
        assert "ts" in r and ":" in r["payload_hash"], "Missing ts or payload_hash"

    def test_default_tenant(self):
        """tenant_id defaults to 'default'."""
        assert emit_receipt("x", {})["tenant_id"] == "default", "Default tenant not applied"


class TestStopruleContract:
    """stoprule_contract emits then raises."""

    @pytest.mark.parametrize("cls", [
        OpcodeOutOfRange, LocationOutOfRange, RangeInfeasible, TrackerExhausted,
        TopologyNotInitialized, CheckpointCorrupt,
    ])
    def test_raises_given_class(self, cls):
        """Raises the requested subclass, catchable as StopRule."""
        with pytest.raises(cls) as exc_info:
            stoprule_contract(cls, "boom", detail=1)
        assert isinstance(exc_info.value, ContractViolation), "Not a ContractViolation"
        assert isinstance(exc_info.value, StopRule), "Not a StopRule"
        assert "boom" in str(exc_info.value), "Message lost"

    def test_receipt_attached(self):
        """The contract_violation receipt rides on the exception."""
        with pytest.raises(RangeInfeasible) as exc_info:
            stoprule_contract(RangeInfeasible, "empty", tenant_id="t2", lo=1, hi=1)
        receipt = exc_info.value.receipt
        assert receipt["receipt_type"] == "contract_violation", "Wrong receipt type"
        assert receipt["violation"] == "RangeInfeasible", "Violation class not recorded"
        assert receipt["tenant_id"] == "t2", "Tenant not recorded"
        assert receipt["lo"] == 1 and receipt["hi"] == 1, "Detail not recorded"
