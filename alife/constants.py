"""
alife/constants.py - Engine, Topology and Instruction-Set Constants

Centralized for tuning. Pure data, no behavior.
"""

from enum import IntEnum

# =============================================================================
# INTEGER RANGE (uniform_int() with no arguments draws from this range)
# =============================================================================

INT32_MIN = -2 ** 31
INT32_MAX = 2 ** 31 - 1
INT32_MASK = 0xFFFFFFFF

# =============================================================================
# RANDOM ENGINE
# =============================================================================

MAX_REJECTIONS = 100_000  # Safety cap for rejection loops; exceeded -> RangeInfeasible
SEED_MODULUS = 2 ** 32 - 1  # Derived seeds land in [1, SEED_MODULUS]

# =============================================================================
# INSTRUCTION SET
# Opcode numbering is a wire contract with every genome already encoded.
# Append only. Never reorder.
# =============================================================================


class Opcode(IntEnum):
    NOP_A = 0
    NOP_B = 1
    NOP_C = 2
    NOP_X = 3
    MOV_HEAD = 4
    IF_LABEL = 5
    H_SEARCH = 6
    NAND = 7
    INPUT = 8
    OUTPUT = 9
    REPRO = 10


N_BUILTIN_OPCODES = len(Opcode)

# Label elements and their complements (nop_x is a modifier, not a label element)
LABEL_OPCODES = (Opcode.NOP_A, Opcode.NOP_B, Opcode.NOP_C)
NOP_COMPLEMENT = {
    Opcode.NOP_A: Opcode.NOP_B,
    Opcode.NOP_B: Opcode.NOP_C,
    Opcode.NOP_C: Opcode.NOP_A,
}

# =============================================================================
# HARDWARE
# =============================================================================


class Head(IntEnum):
    IP = 0
    READ = 1
    WRITE = 2
    FLOW = 3


class Register(IntEnum):
    AX = 0
    BX = 1
    CX = 2


# nop_a/b/c select the first/second/third head or register when used as a modifier
MODIFIER_INDEX = {
    Opcode.NOP_A: 0,
    Opcode.NOP_B: 1,
    Opcode.NOP_C: 2,
}

# =============================================================================
# RECEIPTS
# =============================================================================

RECEIPT_SCHEMA = [
    "rng_checkpoint",
    "rng_restore",
    "topology_init",
    "replacement_event",
    "replication_event",
    "contract_violation",
]
