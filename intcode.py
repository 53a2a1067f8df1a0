"""
Intcode Virtual Machine
Flat integer tape as code and memory, relative-base register,
single-step engine with a run loop on top of it.
"""

import sys
from dataclasses import dataclass
from typing import Iterable, List, Optional

from errors import AddressError, LoadError
from intcode_io import INT_BITS, Input, Output, parse_int
from opcodes import Instruction, Mode, Operation, decode

# Arithmetic wraps like a native signed 64-bit integer
INT_MASK = (1 << INT_BITS) - 1
INT_SIGN = 1 << (INT_BITS - 1)


def to_signed(val: int) -> int:
    """Wrap to the signed 64-bit range"""
    val &= INT_MASK
    if val >= INT_SIGN:
        return val - (1 << INT_BITS)
    return val


def parse_code(text: str) -> List[int]:
    """
    Parse program source: signed integers separated by commas or line breaks.
    Empty fields are skipped.
    """
    code = []
    for lineno, line in enumerate(text.splitlines(), 1):
        for field in line.split(','):
            field = field.strip()
            if not field:
                continue
            try:
                code.append(parse_int(field))
            except ValueError:
                raise LoadError(field, lineno)
    return code


def read_code(stream) -> List[int]:
    """Read program source from a text or binary stream"""
    data = stream.read()
    if isinstance(data, bytes):
        data = data.decode('ascii', errors='replace')
    return parse_code(data)


@dataclass(frozen=True)
class TraceEntry:
    """One executed instruction"""
    address: int
    value: int


class Program:
    """Intcode VM instance"""

    def __init__(self, code: Iterable[int]):
        self.image = tuple(code)      # Pristine program, never written
        self.memory = list(self.image)
        self.relative_base = 0
        self.trace: List[TraceEntry] = []

    @classmethod
    def from_string(cls, text: str) -> "Program":
        return cls(parse_code(text))

    @classmethod
    def from_file(cls, filename: str) -> "Program":
        with open(filename, 'r') as f:
            return cls(read_code(f))

    def reset(self, full: bool = False):
        """
        Restore memory to the program image.

        A soft reset (default) leaves the relative base and the execution
        trace alone, so an inspector session keeps its history. With
        full=True both are cleared as well, for a fresh run.
        """
        self.memory = list(self.image)
        if full:
            self.relative_base = 0
            self.trace = []

    def copy(self) -> "Program":
        """New VM from the same image (memory not shared)"""
        return Program(self.image)

    # Memory access
    def _grow(self, address: int):
        if address < 0:
            raise AddressError(f"Negative address {address}")
        if address >= len(self.memory):
            self.memory.extend([0] * (address + 1 - len(self.memory)))

    def peek(self, address: int) -> int:
        """Read a cell, growing memory with zeros if needed"""
        self._grow(address)
        return self.memory[address]

    def poke(self, address: int, value: int) -> Optional[int]:
        """Write a cell. Returns the previous value, or None for a new cell."""
        existed = 0 <= address < len(self.memory)
        self._grow(address)
        old = self.memory[address]
        self.memory[address] = value
        return old if existed else None

    # Addressing modes
    def resolve_value(self, mode: Mode, operand: int) -> int:
        if mode is Mode.POINTER:
            return self.peek(operand)
        elif mode is Mode.VALUE:
            return operand
        else:
            return self.peek(operand + self.relative_base)

    def resolve_address(self, mode: Mode, operand: int) -> int:
        if mode is Mode.POINTER:
            return operand
        elif mode is Mode.RELATIVE:
            return operand + self.relative_base
        raise AddressError(f"Value mode used as write target (operand {operand})")

    def instruction_at(self, address: int) -> Instruction:
        """Decode the instruction at address without executing it"""
        return decode(self.peek(address), address)

    # Execution
    def step(self, address: int, trace: bool = False,
             input: Input = Input.none(), output: Output = Output.none()) -> Optional[int]:
        """
        Execute one instruction at address.
        Returns the next instruction address, or None on END.
        """
        value = self.peek(address)
        instr = decode(value, address)
        self.trace.append(TraceEntry(address, value))

        if trace:
            print(f"[TRACE] {address:6d}: {value:6d}  {instr.mnemonic} "
                  f"{' '.join(m.name for m in instr.modes)}  rb={self.relative_base}",
                  file=sys.stderr)

        op = instr.operation
        m1, m2, m3 = instr.modes

        if op is Operation.END:
            return None

        p1 = self.peek(address + 1)

        if op is Operation.INPUT:
            # A bad target fails before any value is consumed
            target = self.resolve_address(m1, p1)
            self.poke(target, input.read(output))
            return address + 2

        elif op is Operation.OUTPUT:
            output.write(self.resolve_value(m1, p1))
            return address + 2

        elif op is Operation.ADJUST_RELATIVE_BASE:
            self.relative_base += self.resolve_value(m1, p1)
            return address + 2

        a = self.resolve_value(m1, p1)
        b = self.resolve_value(m2, self.peek(address + 2))

        if op is Operation.JUMP_IF_NOT_ZERO:
            return b if a != 0 else address + 3

        elif op is Operation.JUMP_IF_ZERO:
            return b if a == 0 else address + 3

        if op is Operation.ADD:
            result = to_signed(a + b)
        elif op is Operation.MUL:
            result = to_signed(a * b)
        elif op is Operation.LESS_THAN:
            result = 1 if a < b else 0
        else:  # EQUAL_TO
            result = 1 if a == b else 0

        self.poke(self.resolve_address(m3, self.peek(address + 3)), result)
        return address + 4

    def run(self, start: int = 0, trace: bool = False,
            input: Input = Input.none(), output: Output = Output.none()):
        """Run from start until END. The first error propagates unchanged."""
        address = start
        while address is not None:
            address = self.step(address, trace, input, output)

    exe = run

    def __len__(self) -> int:
        return len(self.memory)

    def __str__(self) -> str:
        return ','.join(str(v) for v in self.memory)

    def __repr__(self) -> str:
        return f"Program({len(self.memory)} cells, rb={self.relative_base})"
