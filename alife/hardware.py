"""
alife/hardware.py - Fetch/Execute Step and Operand Helpers

One instruction per call: fetch the opcode under the instruction pointer, ask
the dispatcher to run it, advance. Standalone modifiers (nops) do nothing when
reached on their own; instructions that take operands consume the modifiers
that follow them through modifier() and read_label().

This is not a scheduler. Which organism steps next, and how often, is up to
the caller.
"""

from typing import Any, List

from .constants import (
    Head,
    INT32_MASK,
    LABEL_OPCODES,
    MODIFIER_INDEX,
    NOP_COMPLEMENT,
)
from .types_state import Hardware


def to_int32(value: int) -> int:
    """Wrap an arbitrary Python int to signed 32 bits."""
    value &= INT32_MASK
    return value - (1 << 32) if value & 0x80000000 else value


def peek(hw: Hardware, offset: int = 1) -> int:
    """Opcode `offset` positions after the instruction pointer."""
    return hw.memory[hw.wrap(hw.ip + offset)]


def modifier(hw: Hardware, default: int) -> int:
    """
    Operand selected by a trailing nop_a/b/c, consuming it.

    Returns:
        int: 0/1/2 for nop_a/b/c, or `default` when no label nop follows
    """
    if not hw.memory:
        return default
    nxt = peek(hw)
    if nxt in MODIFIER_INDEX:
        hw.heads[Head.IP] = hw.wrap(hw.ip + 1)
        return MODIFIER_INDEX[nxt]
    return default


def read_label(hw: Hardware) -> List[int]:
    """Consume the run of label nops following the instruction pointer."""
    label = []
    # A genome made only of nops must not loop forever
    while hw.memory and len(label) < len(hw.memory) - 1 and peek(hw) in LABEL_OPCODES:
        hw.heads[Head.IP] = hw.wrap(hw.ip + 1)
        label.append(hw.memory[hw.ip])
    return label


def complement(label: List[int]) -> List[int]:
    return [int(NOP_COMPLEMENT[op]) for op in label]


def step(hw: Hardware, organism: Any, isa: Any, environment: Any) -> bool:
    """
    Execute the instruction under the IP and advance it.

    Args:
        hw: The organism's hardware
        organism: Passed through to the handler
        isa: InstructionDispatcher
        environment: Passed through to the handler

    Returns:
        bool: The handler's result (True for a standalone modifier, False
        for empty memory)
    """
    if not hw.memory:
        return False
    hw.jumped = False
    hw.cycles += 1

    opcode = hw.memory[hw.ip]
    if isa.is_modifier(opcode):
        result = True
    else:
        result = isa.execute(opcode, hw, organism, environment)

    if not hw.jumped:
        hw.heads[Head.IP] = hw.wrap(hw.ip + 1)
    return result
