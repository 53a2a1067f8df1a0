"""
Unit tests for the Intcode instruction decoder
"""

import unittest

from errors import DecodeError, UnknownMode, UnknownOpcode
from opcodes import Mode, Operation, decode, length, modes, operation


class TestOperation(unittest.TestCase):
    """Opcode selection from the last two digits"""

    def test_all_opcodes(self):
        """Every defined opcode maps to its operation"""
        expected = {
            1: Operation.ADD, 2: Operation.MUL, 3: Operation.INPUT,
            4: Operation.OUTPUT, 5: Operation.JUMP_IF_NOT_ZERO,
            6: Operation.JUMP_IF_ZERO, 7: Operation.LESS_THAN,
            8: Operation.EQUAL_TO, 9: Operation.ADJUST_RELATIVE_BASE,
            99: Operation.END,
        }
        for value, op in expected.items():
            self.assertIs(operation(value), op)

    def test_end_ignores_leading_digits(self):
        """99, 1099, 11199 all decode to END"""
        for value in (99, 1099, 11199, 99999):
            self.assertIs(decode(value).operation, Operation.END)

    def test_unknown_opcode(self):
        """Opcodes outside the table are fatal"""
        for value in (0, 10, 98, 1100):
            with self.assertRaises(UnknownOpcode):
                operation(value)

    def test_negative_cell_is_unknown(self):
        """A negative cell never decodes, whatever its digits"""
        for value in (-1, -99, -1002, -101):
            with self.assertRaises(UnknownOpcode):
                decode(value)
            with self.assertRaises(UnknownOpcode):
                modes(value)

    def test_unknown_opcode_reports_address(self):
        """Decode errors carry the offending address and cell"""
        with self.assertRaises(DecodeError) as ctx:
            decode(42, address=7)
        self.assertEqual(ctx.exception.address, 7)
        self.assertEqual(ctx.exception.value, 42)
        self.assertIn("address 7", str(ctx.exception))


class TestModes(unittest.TestCase):
    """Parameter mode digits"""

    def test_mul_1002(self):
        """1002: MUL with modes [Pointer, Value, Pointer]"""
        instr = decode(1002)
        self.assertIs(instr.operation, Operation.MUL)
        self.assertEqual(instr.modes, (Mode.POINTER, Mode.VALUE, Mode.POINTER))

    def test_arb_109(self):
        """109: ARB with modes [Value, Pointer, Pointer]"""
        instr = decode(109)
        self.assertIs(instr.operation, Operation.ADJUST_RELATIVE_BASE)
        self.assertEqual(instr.modes, (Mode.VALUE, Mode.POINTER, Mode.POINTER))

    def test_relative_modes(self):
        """21201: ADD with modes [Relative, Value, Relative]"""
        self.assertEqual(modes(21201), (Mode.RELATIVE, Mode.VALUE, Mode.RELATIVE))

    def test_always_three_modes(self):
        """Modes are produced even where the operation takes fewer"""
        self.assertEqual(len(modes(4)), 3)
        self.assertEqual(modes(4), (Mode.POINTER,) * 3)

    def test_unknown_mode(self):
        """Mode digits other than 0, 1, 2 are fatal"""
        with self.assertRaises(UnknownMode) as ctx:
            decode(301)
        self.assertEqual(ctx.exception.digit, 3)

    def test_unknown_third_mode(self):
        """A bad digit in the third position is caught too"""
        with self.assertRaises(UnknownMode):
            decode(50001)


class TestLength(unittest.TestCase):
    """Instruction widths"""

    def test_lengths(self):
        self.assertEqual(length(Operation.END), 1)
        for op in (Operation.ADD, Operation.MUL, Operation.LESS_THAN, Operation.EQUAL_TO):
            self.assertEqual(length(op), 4)
        for op in (Operation.INPUT, Operation.OUTPUT, Operation.ADJUST_RELATIVE_BASE):
            self.assertEqual(length(op), 2)
        for op in (Operation.JUMP_IF_NOT_ZERO, Operation.JUMP_IF_ZERO):
            self.assertEqual(length(op), 3)

    def test_instruction_length(self):
        self.assertEqual(decode(1105).length, 3)
        self.assertEqual(decode(1105).mnemonic, "JNZ")


if __name__ == '__main__':
    unittest.main()
