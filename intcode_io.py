"""
Intcode I/O capabilities
Input: none, literal string, line reader, channel
Output: none, writer, channel

Each direction is a closed set of variants. The VM dispatches on `kind`
once per INPUT/OUTPUT instruction.
"""

import io
import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from channel import Channel, ChannelClosed
from errors import InputOutputError

PROMPT = b"?"


class InputKind(Enum):
    NONE = auto()       # Input disabled
    LITERAL = auto()    # Fixed text, parsed on every read
    READER = auto()     # Blocking line-oriented stream
    CHANNEL = auto()    # Inter-program channel


class OutputKind(Enum):
    NONE = auto()       # Output disabled
    WRITER = auto()     # Stream sink, one value per line
    CHANNEL = auto()    # Inter-program channel


# Cells are signed 64-bit integers
INT_BITS = 64
INT_MIN = -(1 << (INT_BITS - 1))
INT_MAX = (1 << (INT_BITS - 1)) - 1

# Optional sign and ASCII digits only: no '_' separators, no other scripts
_INTEGER = re.compile(r"[+-]?[0-9]+")


def parse_int(text: str) -> int:
    """Parse one decimal cell value; ValueError if malformed or out of range"""
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"not an integer: {text!r}")
    value = int(text)
    if not INT_MIN <= value <= INT_MAX:
        raise ValueError(f"out of 64-bit range: {text!r}")
    return value


def _parse(operation: str, text) -> int:
    if isinstance(text, bytes):
        text = text.decode("ascii", errors="replace")
    try:
        return parse_int(text.strip())
    except ValueError as e:
        raise InputOutputError(operation, str(e))


def _is_text(stream) -> bool:
    return isinstance(stream, io.TextIOBase)


@dataclass(frozen=True)
class Output:
    """Where OUTPUT instructions send their value"""
    kind: OutputKind
    target: Any = None

    @classmethod
    def none(cls) -> "Output":
        return cls(OutputKind.NONE)

    @classmethod
    def writer(cls, stream) -> "Output":
        return cls(OutputKind.WRITER, stream)

    @classmethod
    def channel(cls, ch: Channel) -> "Output":
        return cls(OutputKind.CHANNEL, ch)

    @property
    def active(self) -> bool:
        return self.kind is not OutputKind.NONE

    def write(self, value: int):
        if self.kind is OutputKind.WRITER:
            line = f"{value}\n"
            try:
                self.target.write(line if _is_text(self.target) else line.encode("ascii"))
                self.target.flush()
            except OSError as e:
                raise InputOutputError("Output", f"write failed: {e}")
        elif self.kind is OutputKind.CHANNEL:
            try:
                self.target.send(value)
            except ChannelClosed as e:
                raise InputOutputError("Output", str(e))
        else:
            raise InputOutputError("Output", "no output configured")

    def prompt(self):
        """Tell an interactive reader that input is awaited"""
        if self.kind is not OutputKind.WRITER:
            return
        try:
            self.target.write(PROMPT.decode("ascii") if _is_text(self.target) else PROMPT)
            self.target.flush()
        except OSError as e:
            raise InputOutputError("Input", f"prompt failed: {e}")


@dataclass(frozen=True)
class Input:
    """Where INPUT instructions get their value"""
    kind: InputKind
    source: Any = None

    @classmethod
    def none(cls) -> "Input":
        return cls(InputKind.NONE)

    @classmethod
    def literal(cls, text: str) -> "Input":
        return cls(InputKind.LITERAL, text)

    @classmethod
    def reader(cls, stream) -> "Input":
        return cls(InputKind.READER, stream)

    @classmethod
    def channel(cls, ch: Channel) -> "Input":
        return cls(InputKind.CHANNEL, ch)

    def read(self, output: Output) -> int:
        if self.kind is InputKind.LITERAL:
            return _parse("Input", self.source)
        elif self.kind is InputKind.READER:
            if output.active:
                output.prompt()
            try:
                line = self.source.readline()
            except OSError as e:
                raise InputOutputError("Input", f"read failed: {e}")
            if not line:
                raise InputOutputError("Input", "end of input")
            return _parse("Input", line)
        elif self.kind is InputKind.CHANNEL:
            try:
                return self.source.recv()
            except ChannelClosed as e:
                raise InputOutputError("Input", str(e))
        else:
            raise InputOutputError("Input", "no input configured")
