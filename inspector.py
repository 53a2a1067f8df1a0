"""
Intcode Inspector - line-oriented single-step front end

Shows the instruction pointer, relative base, a memory window with the
current instruction's cells bracketed, recent execution trace and output.

Commands:
    <enter>, s     step one instruction
    i <n>          step an INPUT instruction with value n
    <n>            same as "i <n>" when the current instruction is INPUT
    r              run until END (stops early at an INPUT)
    m [addr]       show memory from addr (no addr: follow IP)
    q              quit
"""

import sys
from typing import List, Optional

from channel import Channel
from errors import IntcodeError
from intcode import Program
from intcode_io import Input, Output
from opcodes import Instruction, Operation


class Inspector:
    """Single-step inspector over one Program"""

    WINDOW = 24         # Cells shown in the memory window
    ROW = 8             # Cells per row
    TRACE_LINES = 10    # Trace entries shown

    def __init__(self, program: Program, out=sys.stdout, start: int = 0):
        self.program = program
        self.out = out
        self.ip = start
        self.halted = False
        self.status = ""
        self.view: Optional[int] = None   # None = follow IP
        self.outputs: List[int] = []
        self._sink = Channel("inspector")

    def current(self) -> Optional[Instruction]:
        """Decoded instruction at IP, or None if it cannot be decoded"""
        try:
            return self.program.instruction_at(self.ip)
        except IntcodeError:
            return None

    def waiting_for_input(self) -> bool:
        instr = self.current()
        return instr is not None and instr.operation is Operation.INPUT

    def step(self, line: Optional[str] = None) -> bool:
        """Execute one instruction. Returns False once halted."""
        if self.halted:
            return False

        if self.waiting_for_input():
            if line is None:
                self.status = "Input required: i <n>"
                return True
            inp = Input.literal(line)
        else:
            inp = Input.none()

        try:
            next_ip = self.program.step(self.ip, input=inp, output=Output.channel(self._sink))
        except IntcodeError as e:
            self.status = f"Error: {e}"
            self.halted = True
            return False
        finally:
            self.outputs.extend(self._sink.drain())

        if next_ip is None:
            self.status = "Halted"
            self.halted = True
            return False

        self.ip = next_ip
        self.status = ""
        return True

    def run(self) -> bool:
        """Step until END, an error, or an INPUT instruction"""
        while not self.halted:
            if self.waiting_for_input():
                self.status = "Input required: i <n>"
                break
            self.step()
        return not self.halted

    def command(self, line: str) -> bool:
        """Dispatch one command line. Returns False to quit."""
        parts = line.split()
        cmd = parts[0] if parts else "s"

        if cmd == "q":
            return False
        elif cmd == "s":
            self.step()
        elif cmd == "i":
            if len(parts) < 2:
                self.status = "Usage: i <n>"
            else:
                self.step(parts[1])
        elif cmd == "r":
            self.run()
        elif cmd == "m":
            if len(parts) < 2:
                self.view = None
            else:
                try:
                    self.view = max(0, int(parts[1]))
                except ValueError:
                    self.status = f"Bad address: {parts[1]}"
        elif self.waiting_for_input():
            self.step(line.strip())
        else:
            self.status = f"Unknown command: {cmd}"
        return True

    def render(self) -> str:
        lines = []
        instr = self.current()
        name = instr.mnemonic if instr else "??"
        lines.append(f"IP={self.ip} RB={self.program.relative_base} "
                     f"STEPS={len(self.program.trace)} OP={name}")

        # Memory window, current instruction bracketed
        span = instr.length if instr else 1
        start = self.view if self.view is not None else max(0, self.ip - self.ip % self.ROW)
        for row in range(start, start + self.WINDOW, self.ROW):
            cells = []
            for addr in range(row, row + self.ROW):
                val = self.program.memory[addr] if addr < len(self.program.memory) else 0
                if self.ip <= addr < self.ip + span:
                    cells.append(f"[{val}]")
                else:
                    cells.append(f" {val} ")
            lines.append(f"{row:6d}: " + "".join(c.rjust(10) for c in cells))

        lines.append("Trace:")
        for entry in self.program.trace[-self.TRACE_LINES:]:
            lines.append(f"  {entry.address:6d}: {entry.value}")

        lines.append("Output: " + ",".join(str(v) for v in self.outputs))
        if self.status:
            lines.append(self.status)
        return "\n".join(lines)

    def loop(self, stdin=sys.stdin):
        """Read commands until q or end of input"""
        while True:
            print(self.render(), file=self.out)
            print("> ", end="", file=self.out, flush=True)
            line = stdin.readline()
            if not line:
                break
            if not self.command(line.rstrip("\n")):
                break


def debug(program: Program, stdin=sys.stdin, out=sys.stdout) -> Inspector:
    """Open an inspector session on program"""
    inspector = Inspector(program, out)
    inspector.loop(stdin)
    return inspector
