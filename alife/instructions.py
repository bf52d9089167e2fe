"""
alife/instructions.py - Reference Instruction Set

The eleven built-in handlers, in opcode order. Every handler has the same
shape:

    handler(hardware, organism, environment) -> bool

Registers default to BX, heads default to IP; a trailing nop_a/b/c selects
the first/second/third register or head instead. Labels are runs of
nop_a/b/c; nop_x is a modifier that is never part of a label.
"""

from typing import Any, Callable, List, NamedTuple

from .constants import Head, Register
from .hardware import complement, modifier, read_label, to_int32
from .types_state import Hardware, Organism


class Instruction(NamedTuple):
    """One row of the dispatch table."""
    name: str
    handler: Callable[[Hardware, Any, Any], bool]
    is_modifier: bool = False


# =============================================================================
# MODIFIERS
# =============================================================================

def nop(hw: Hardware, organism: Any, environment: Any) -> bool:
    return True


# =============================================================================
# FLOW CONTROL
# =============================================================================

def mov_head(hw: Hardware, organism: Any, environment: Any) -> bool:
    """Move a head (IP unless modified) to the flow head."""
    head = modifier(hw, Head.IP)
    hw.heads[head] = hw.heads[Head.FLOW]
    if head == Head.IP:
        hw.jumped = True
    return True


def if_label(hw: Hardware, organism: Any, environment: Any) -> bool:
    """Execute the next instruction only if the complement of the label was just written."""
    target = complement(read_label(hw))
    n = len(target)
    if n > len(hw.memory):
        matched = False
    else:
        end = hw.heads[Head.WRITE]
        recent = [hw.memory[hw.wrap(end - n + i)] for i in range(n)]
        matched = recent == target
    if not matched:
        hw.heads[Head.IP] = hw.wrap(hw.ip + 1)
    return matched


def h_search(hw: Hardware, organism: Any, environment: Any) -> bool:
    """
    Find the nearest forward copy of the label's complement.

    BX <- distance to the match, CX <- label length, flow head <- just past
    the match. No label or no match: BX = CX = 0, flow head <- next instruction.
    """
    target = complement(read_label(hw))
    ip = hw.ip
    size = len(hw.memory)
    n = len(target)

    if n:
        for distance in range(1, size):
            start = ip + distance
            if all(hw.memory[hw.wrap(start + k)] == target[k] for k in range(n)):
                hw.registers[Register.BX] = distance
                hw.registers[Register.CX] = n
                hw.heads[Head.FLOW] = hw.wrap(start + n)
                return True

    hw.registers[Register.BX] = 0
    hw.registers[Register.CX] = 0
    hw.heads[Head.FLOW] = hw.wrap(ip + 1)
    return False


# =============================================================================
# ARITHMETIC / IO
# =============================================================================

def nand(hw: Hardware, organism: Any, environment: Any) -> bool:
    reg = modifier(hw, Register.BX)
    b = hw.registers[Register.BX]
    c = hw.registers[Register.CX]
    hw.registers[reg] = to_int32(~(b & c))
    return True


def input_(hw: Hardware, organism: Any, environment: Any) -> bool:
    reg = modifier(hw, Register.BX)
    value = environment.next_input()
    hw.inputs.append(value)
    hw.registers[reg] = value
    return True


def output(hw: Hardware, organism: Any, environment: Any) -> bool:
    reg = modifier(hw, Register.BX)
    hw.outputs.append(hw.registers[reg])
    return True


# =============================================================================
# REPLICATION
# =============================================================================

def repro(hw: Hardware, organism: Any, environment: Any) -> bool:
    """Copy the genome into an offspring and hand it to the environment for placement."""
    if not organism.alive:
        return False
    offspring = Organism(genome=list(hw.memory), generation=organism.generation + 1)
    environment.replicate(organism, offspring)
    return True


# =============================================================================
# BUILT-IN TABLE (opcode order is a wire contract: append only)
# =============================================================================

BUILTIN_INSTRUCTIONS = (
    Instruction("nop_a", nop, True),
    Instruction("nop_b", nop, True),
    Instruction("nop_c", nop, True),
    Instruction("nop_x", nop, True),
    Instruction("mov_head", mov_head),
    Instruction("if_label", if_label),
    Instruction("h_search", h_search),
    Instruction("nand", nand),
    Instruction("input", input_),
    Instruction("output", output),
    Instruction("repro", repro),
)


def default_instruction_set() -> List[Instruction]:
    return list(BUILTIN_INSTRUCTIONS)
