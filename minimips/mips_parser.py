# minimips/mips_parser.py
import logging

from minimips.mips_consts import (
    INSTRUCTION_FORMATS, INSTRUCTION_SIZE, LABEL_PREFIX, REGISTER_PREFIX,
    COMMENT_CHAR, WORD_MASK
)
from minimips.mips_errors import ParseError
from minimips.mips_program import Instruction, Program

logger = logging.getLogger(__name__)


def register_index(reg_str):
    """Converts a register token (r0, r17, ...) to its number, or None if malformed."""
    if len(reg_str) < 2 or not reg_str.startswith(REGISTER_PREFIX):
        return None
    digits = reg_str[len(REGISTER_PREFIX):]
    if not (digits.isascii() and digits.isdigit()):
        return None
    return int(digits)


def immediate_value(imm_str):
    """Converts an unsigned decimal literal to int, or None if malformed / wider than 32 bits."""
    if not (imm_str.isascii() and imm_str.isdigit()):
        return None
    val = int(imm_str)
    if val > WORD_MASK:
        return None
    return val


class MipsParser:
    """
    Single pass parser for the line-oriented assembly dialect.
    Builds the instruction list and the label table together; labels are
    only looked up at execution time, so forward references need no second pass.
    """
    def __init__(self):
        self.labels = {}
        self.instructions = []
        self.current_address = 0

    def _parse_register(self, reg_str, line_num, text):
        if register_index(reg_str) is None:
            raise ParseError(line_num, f"Invalid register name: '{reg_str}'", text)

    def _parse_immediate(self, imm_str, line_num, text):
        if immediate_value(imm_str) is None:
            raise ParseError(line_num, f"Invalid immediate value: '{imm_str}' (expected unsigned 32-bit decimal)", text)

    def _bind_label(self, label, line_num, text):
        if not label:
            raise ParseError(line_num, "Empty label name", text)
        if label in self.labels:
            logger.warning(f"Line {line_num}: label '{label}' redefined, 0x{self.labels[label]:04x} -> 0x{self.current_address:04x}")
        self.labels[label] = self.current_address
        logger.debug(f"Label '{label}' bound to 0x{self.current_address:04x}")

    def _parse_line(self, line, line_num):
        """Handles one source line: optional label, then optional instruction."""
        text = line.rstrip("\r")
        tokens = line.split(COMMENT_CHAR, 1)[0].split()
        if not tokens:
            return None  # blank / comment only

        if tokens[0].startswith(LABEL_PREFIX):
            self._bind_label(tokens[0][len(LABEL_PREFIX):], line_num, text)
            tokens = tokens[1:]
            if not tokens:
                return None  # label only

        opcode, operands = tokens[0], tokens[1:]
        expected_ops = INSTRUCTION_FORMATS.get(opcode)
        if expected_ops is None:
            raise ParseError(line_num, f"Unknown instruction: '{opcode}'", text)
        if len(operands) < len(expected_ops):
            raise ParseError(line_num, f"Missing operand for '{opcode}'. Expected {len(expected_ops)}, got {len(operands)}.", text)
        if len(operands) > len(expected_ops):
            raise ParseError(line_num, f"Too many operands for '{opcode}'. Expected {len(expected_ops)}, got {len(operands)}.", text)

        for op_type, op_str in zip(expected_ops, operands):
            if op_type == "reg":
                self._parse_register(op_str, line_num, text)
            elif op_type == "imm":
                self._parse_immediate(op_str, line_num, text)
            # label operands are resolved by the executor

        return Instruction(opcode, tuple(operands), line_num, text.strip())

    def parse(self, source):
        """Parses the whole source text into a Program. Raises ParseError on the first bad line."""
        self.labels = {}
        self.instructions = []
        self.current_address = 0

        # Lines are "\n" separated; other Unicode line breaks stay inside the line
        for i, line in enumerate(source.split("\n")):
            instr = self._parse_line(line, i + 1)
            if instr is None:
                continue
            self.instructions.append(instr)
            logger.debug(f"0x{self.current_address:04x}: {instr} (line {instr.line_num})")
            self.current_address += INSTRUCTION_SIZE

        program = Program(tuple(self.instructions), dict(self.labels))
        logger.info(f"Program length: {len(program)} instructions, {len(program.labels)} labels")
        return program


def parse_program(source):
    return MipsParser().parse(source)
