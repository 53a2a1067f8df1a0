"""
Intcode error types
Every failure the VM can report derives from IntcodeError
"""

from typing import Optional


class IntcodeError(Exception):
    """Base class for all Intcode failures"""
    pass


class LoadError(IntcodeError, ValueError):
    """Program source contains a field that is not a signed integer"""

    def __init__(self, field: str, line: int):
        self.field = field
        self.line = line
        super().__init__(f"Invalid integer {field!r} on line {line}")


class DecodeError(IntcodeError):
    """Instruction cell could not be decoded"""

    def __init__(self, message: str, value: int, address: Optional[int] = None):
        self.value = value
        self.address = address
        if address is not None:
            message = f"{message} at address {address} (cell {value})"
        super().__init__(message)


class UnknownOpcode(DecodeError):
    def __init__(self, value: int, address: Optional[int] = None):
        opcode = value % 100 if value >= 0 else value
        super().__init__(f"Unknown opcode {opcode}", value, address)


class UnknownMode(DecodeError):
    def __init__(self, digit: int, value: int, address: Optional[int] = None):
        self.digit = digit
        super().__init__(f"Unknown parameter mode {digit}", value, address)


class InputOutputError(IntcodeError):
    """Input or output capability failed (missing, unparseable, closed)"""

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation}: {reason}")


class AddressError(IntcodeError):
    """Negative address or a literal used as a write target"""
    pass
