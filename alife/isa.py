"""
alife/isa.py - Instruction Dispatcher

Ordered table from opcode index to instruction handler. Insertion order IS the
opcode numbering, and genomes are encoded against it, so the table is
append-only and the built-in order never changes:

    0 nop_a   1 nop_b   2 nop_c   3 nop_x   4 mov_head   5 if_label
    6 h_search   7 nand   8 input   9 output   10 repro

The dispatcher classifies and runs opcodes. It does not resolve operands;
handlers consume trailing modifiers themselves through the hardware helpers.
"""

from typing import Any, Iterable, List, Optional

from receipts import stoprule_contract, OpcodeOutOfRange

from .instructions import Instruction, default_instruction_set


class InstructionDispatcher:
    """Opcode table over a fixed capability set: execute() and is_modifier()."""

    def __init__(self, instructions: Optional[Iterable[Instruction]] = None):
        self._table: List[Instruction] = []
        self._by_name = {}
        if instructions is None:
            instructions = default_instruction_set()
        for instruction in instructions:
            self.append(instruction)

    def append(self, instruction: Instruction) -> int:
        """
        Register an instruction at the next free opcode.

        Returns:
            int: The opcode assigned
        """
        if instruction.name in self._by_name:
            raise ValueError(f"instruction {instruction.name!r} already registered "
                             f"as opcode {self._by_name[instruction.name]}")
        opcode = len(self._table)
        self._table.append(instruction)
        self._by_name[instruction.name] = opcode
        return opcode

    def __len__(self) -> int:
        return len(self._table)

    def _lookup(self, opcode: int) -> Instruction:
        if not 0 <= opcode < len(self._table):
            stoprule_contract(OpcodeOutOfRange,
                              f"opcode {opcode} outside table of {len(self._table)}",
                              opcode=int(opcode), table_size=len(self._table))
        return self._table[opcode]

    def execute(self, opcode: int, hardware: Any, organism: Any, environment: Any) -> bool:
        """Run the handler for `opcode`; its result's meaning belongs to the handler."""
        return bool(self._lookup(opcode).handler(hardware, organism, environment))

    def is_modifier(self, opcode: int) -> bool:
        """True for nop-class opcodes, which act as operands of the preceding instruction."""
        return self._lookup(opcode).is_modifier

    def opcode(self, name: str) -> int:
        return self._by_name[name]

    def name(self, opcode: int) -> str:
        return self._lookup(opcode).name

    def names(self) -> List[str]:
        return [inst.name for inst in self._table]
