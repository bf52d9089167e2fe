"""
tests/test_instructions.py - Tests for alife/instructions.py and alife/hardware.py

Reference handlers, operand helpers and the single-instruction step.
"""

import pytest

from alife.constants import Head, Opcode, Register
from alife.environment import Environment
from alife.hardware import complement, read_label, step, to_int32
from alife.isa import InstructionDispatcher
from alife.types_config import SCENARIO_SMALL_WORLD
from alife.types_state import Hardware, Organism

A, B, C, X = Opcode.NOP_A, Opcode.NOP_B, Opcode.NOP_C, Opcode.NOP_X


@pytest.fixture
def isa():
    return InstructionDispatcher()


@pytest.fixture
def env():
    return Environment.from_config(SCENARIO_SMALL_WORLD)


def _organism(genome):
    return Organism(genome=[int(op) for op in genome])


class TestHelpers:
    """to_int32, complement, read_label."""

    def test_to_int32_wraps(self):
        """Values wrap to signed 32 bits."""
        assert to_int32(2 ** 31) == -2 ** 31, "2**31 should wrap to INT32_MIN"
        assert to_int32(-1) == -1, "-1 is already int32"
        assert to_int32(2 ** 32 + 5) == 5, "High bits should be dropped"

    def test_complement(self):
        """A->B, B->C, C->A."""
        assert complement([A, B, C]) == [B, C, A], "Wrong complement"

    def test_read_label_stops_at_non_label(self):
        """nop_x ends a label."""
        org = _organism([Opcode.H_SEARCH, A, C, X, B])
        label = read_label(org.hardware)
        assert label == [A, C], f"Expected [A, C], got {label}"
        assert org.hardware.ip == 2, "IP should sit on the last label nop"

    def test_read_label_all_nops_terminates(self):
        """A genome of nothing but label nops does not loop forever."""
        org = _organism([A, A, A, A])
        label = read_label(org.hardware)
        assert len(label) == 3, f"Label should be capped at len-1, got {len(label)}"


class TestArithmeticAndIO:
    """nand, input, output."""

    def test_nand_default_bx(self, isa, env):
        """BX <- ~(BX & CX)."""
        org = _organism([Opcode.NAND, X])
        hw = org.hardware
        hw.registers[Register.BX] = 0b1100
        hw.registers[Register.CX] = 0b1010
        assert isa.execute(Opcode.NAND, hw, org, env), "nand should succeed"
        assert hw.registers[Register.BX] == ~0b1000, f"Got {hw.registers[Register.BX]}"

    def test_nand_modifier_selects_register(self, isa, env):
        """A trailing nop_a sends the result to AX and is consumed."""
        org = _organism([Opcode.NAND, A, X])
        hw = org.hardware
        hw.registers[Register.BX] = -1
        hw.registers[Register.CX] = -1
        step(hw, org, isa, env)
        assert hw.registers[Register.AX] == 0, f"AX should be ~(-1) = 0, got {hw.registers[0]}"
        assert hw.registers[Register.BX] == -1, "BX should be untouched"
        assert hw.ip == 2, f"IP should skip the consumed modifier, got {hw.ip}"

    def test_input(self, isa, env):
        """input reads from the environment into BX and records it."""
        org = _organism([Opcode.INPUT, X])
        hw = org.hardware
        isa.execute(Opcode.INPUT, hw, org, env)
        lo, hi = SCENARIO_SMALL_WORLD.input_range
        assert len(hw.inputs) == 1, "Input not recorded"
        assert lo <= hw.inputs[0] < hi, f"Input {hw.inputs[0]} outside {lo}..{hi}"
        assert hw.registers[Register.BX] == hw.inputs[0], "BX should hold the input"

    def test_output(self, isa, env):
        """output appends the selected register."""
        org = _organism([Opcode.OUTPUT, C])
        hw = org.hardware
        hw.registers[Register.CX] = 42
        isa.execute(Opcode.OUTPUT, hw, org, env)
        assert hw.outputs == [42], f"Expected [42], got {hw.outputs}"


class TestFlowControl:
    """mov_head, h_search, if_label."""

    def test_mov_head_ip_jumps(self, isa, env):
        """Unmodified mov_head moves the IP to the flow head, and step does not advance past it."""
        org = _organism([Opcode.MOV_HEAD, X, X, X, X])
        hw = org.hardware
        hw.heads[Head.FLOW] = 3
        step(hw, org, isa, env)
        assert hw.ip == 3, f"IP should be at flow head 3, got {hw.ip}"

    def test_mov_head_modified(self, isa, env):
        """nop_b moves the read head instead."""
        org = _organism([Opcode.MOV_HEAD, B, X, X, X])
        hw = org.hardware
        hw.heads[Head.FLOW] = 4
        step(hw, org, isa, env)
        assert hw.heads[Head.READ] == 4, "Read head should move to flow head"
        assert hw.ip == 2, f"IP should advance past modifier, got {hw.ip}"

    def test_h_search_found(self, isa, env):
        """Finds the complement and sets BX, CX and the flow head."""
        org = _organism([Opcode.H_SEARCH, A, X, X, B, X])
        hw = org.hardware
        assert isa.execute(Opcode.H_SEARCH, hw, org, env), "Search should succeed"
        assert hw.registers[Register.BX] == 3, f"Distance {hw.registers[Register.BX]}"
        assert hw.registers[Register.CX] == 1, "Label length should be 1"
        assert hw.heads[Head.FLOW] == 5, f"Flow head {hw.heads[Head.FLOW]}"

    def test_h_search_not_found(self, isa, env):
        """No match: BX = CX = 0, flow head after the label."""
        org = _organism([Opcode.H_SEARCH, A, X, X])
        hw = org.hardware
        assert not isa.execute(Opcode.H_SEARCH, hw, org, env), "Search should fail"
        assert hw.registers[Register.BX] == 0 and hw.registers[Register.CX] == 0, "Registers not cleared"
        assert hw.heads[Head.FLOW] == 2, f"Flow head {hw.heads[Head.FLOW]}"

    def test_h_search_without_label(self, isa, env):
        """No label: nothing to search for."""
        org = _organism([Opcode.H_SEARCH, X, X])
        hw = org.hardware
        assert not isa.execute(Opcode.H_SEARCH, hw, org, env), "Search should fail"
        assert hw.heads[Head.FLOW] == 1, "Flow head should be the next instruction"

    def test_if_label_match_executes_next(self, isa, env):
        """Complement just written: the next instruction runs."""
        org = _organism([Opcode.IF_LABEL, A, X, B, X])
        hw = org.hardware
        hw.heads[Head.WRITE] = 4
        step(hw, org, isa, env)
        assert hw.ip == 2, f"Next instruction should be at 2, got {hw.ip}"

    def test_if_label_mismatch_skips_next(self, isa, env):
        """No match: the next instruction is skipped."""
        org = _organism([Opcode.IF_LABEL, A, X, B, X])
        hw = org.hardware
        hw.heads[Head.WRITE] = 3
        assert step(hw, org, isa, env) is False, "if_label should report mismatch"
        assert hw.ip == 3, f"Instruction at 2 should be skipped, got IP {hw.ip}"


class TestRepro:
    """repro places an offspring through the environment."""

    def test_offspring_placed(self, isa, env):
        """Offspring copies the genome, lands in the topology, joins the population."""
        parent = _organism([Opcode.REPRO, X])
        env.inject(parent, 0)
        assert isa.execute(Opcode.REPRO, parent.hardware, parent, env), "repro should succeed"

        assert len(env.population) == 2, f"Expected 2 organisms, got {len(env.population)}"
        child = env.population[-1]
        assert child.genome == parent.genome, "Genome not copied"
        assert child.generation == 1, "Generation should increment"
        assert child.alive and child.location.occupant is child, "Child not placed"
        assert parent.alive == (child.location.index != 0), "Parent liveness inconsistent"
        assert env.receipt_ledger[-1]["receipt_type"] == "replication_event", "No receipt"

    def test_dead_parent_cannot_reproduce(self, isa, env):
        """A displaced organism's repro does nothing."""
        parent = _organism([Opcode.REPRO])
        parent.alive = False
        assert not isa.execute(Opcode.REPRO, parent.hardware, parent, env), "Dead parent reproduced"
        assert env.population == [], "Population should be unchanged"


class TestStep:
    """Single-instruction step."""

    def test_empty_memory(self, isa, env):
        """Nothing to execute."""
        org = Organism(genome=[])
        assert step(org.hardware, org, isa, env) is False, "Empty memory should return False"

    def test_standalone_modifier(self, isa, env):
        """A nop reached on its own does nothing and advances."""
        org = _organism([A, X])
        assert step(org.hardware, org, isa, env) is True, "Standalone nop should succeed"
        assert org.hardware.ip == 1, "IP should advance"
        assert org.hardware.cycles == 1, "Cycle count should increment"

    def test_ip_wraps(self, isa, env):
        """IP wraps to the start of memory."""
        org = _organism([X, X])
        step(org.hardware, org, isa, env)
        step(org.hardware, org, isa, env)
        assert org.hardware.ip == 0, f"IP should wrap to 0, got {org.hardware.ip}"

    def test_hardware_memory_is_a_copy(self):
        """Hardware memory starts as a copy of the genome."""
        org = _organism([A, B])
        org.hardware.memory[0] = int(C)
        assert org.genome[0] == A, "Genome changed through hardware memory"
