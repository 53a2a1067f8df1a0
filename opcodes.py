"""
Intcode Opcode Table
Ten operations, three parameter modes, fixed instruction lengths
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from errors import UnknownMode, UnknownOpcode


class Operation(Enum):
    """Intcode operations (value = opcode)"""
    ADD = 1
    MUL = 2
    INPUT = 3
    OUTPUT = 4
    JUMP_IF_NOT_ZERO = 5
    JUMP_IF_ZERO = 6
    LESS_THAN = 7
    EQUAL_TO = 8
    ADJUST_RELATIVE_BASE = 9
    END = 99


class Mode(Enum):
    """Parameter modes (value = mode digit)"""
    POINTER = 0     # Operand is an address: p -> mem[p]
    VALUE = 1       # Operand is the literal value: p
    RELATIVE = 2    # Operand is an offset from the relative base: mem[rb + p]


# Cells per instruction, opcode included
LENGTHS = {
    Operation.END: 1,
    Operation.ADD: 4,
    Operation.MUL: 4,
    Operation.INPUT: 2,
    Operation.OUTPUT: 2,
    Operation.JUMP_IF_NOT_ZERO: 3,
    Operation.JUMP_IF_ZERO: 3,
    Operation.LESS_THAN: 4,
    Operation.EQUAL_TO: 4,
    Operation.ADJUST_RELATIVE_BASE: 2,
}

# Short names for trace lines and the inspector
MNEMONICS = {
    Operation.END: "END",
    Operation.ADD: "ADD",
    Operation.MUL: "MUL",
    Operation.INPUT: "IN",
    Operation.OUTPUT: "OUT",
    Operation.JUMP_IF_NOT_ZERO: "JNZ",
    Operation.JUMP_IF_ZERO: "JZ",
    Operation.LESS_THAN: "LT",
    Operation.EQUAL_TO: "EQ",
    Operation.ADJUST_RELATIVE_BASE: "ARB",
}

NUM_MODES = 3

_OPERATIONS = {op.value: op for op in Operation}
_MODES = {mode.value: mode for mode in Mode}


@dataclass(frozen=True)
class Instruction:
    """Decoded instruction cell"""
    operation: Operation
    modes: Tuple[Mode, Mode, Mode]

    @property
    def length(self) -> int:
        return LENGTHS[self.operation]

    @property
    def mnemonic(self) -> str:
        return MNEMONICS[self.operation]


def operation(value: int, address: Optional[int] = None) -> Operation:
    """Operation selected by the last two decimal digits of a cell"""
    op = _OPERATIONS.get(value % 100) if value >= 0 else None
    if op is None:
        raise UnknownOpcode(value, address)
    return op


def modes(value: int, address: Optional[int] = None) -> Tuple[Mode, Mode, Mode]:
    """
    Parameter modes from the digits above the opcode.
    Least significant digit is the first parameter's mode.
    Always three modes, whether or not the operation uses them.
    """
    if value < 0:
        raise UnknownOpcode(value, address)
    digits = value // 100
    result = []
    for _ in range(NUM_MODES):
        digit = digits % 10
        mode = _MODES.get(digit)
        if mode is None:
            raise UnknownMode(digit, value, address)
        result.append(mode)
        digits //= 10
    return tuple(result)


def length(op: Operation) -> int:
    """Instruction width in cells"""
    return LENGTHS[op]


def decode(value: int, address: Optional[int] = None) -> Instruction:
    """Decode a memory cell into operation + modes"""
    op = operation(value, address)
    if op is Operation.END:
        # END takes no parameters, so its mode digits are never consulted
        return Instruction(op, (Mode.POINTER,) * NUM_MODES)
    return Instruction(op, modes(value, address))
