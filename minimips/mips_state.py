# minimips/mips_state.py
import logging

from minimips.mips_consts import NUM_REGISTERS, MEMORY_SIZE, HALT_PC, WORD_MASK, BYTE_MASK
from minimips.mips_errors import RegisterOutOfRange, MemoryFault

logger = logging.getLogger(__name__)


class MachineState:
    """
    Program counter, register file and byte memory for one run.
    Registers hold unsigned 32-bit patterns; memory is a flat bytearray.
    """
    def __init__(self, num_registers=NUM_REGISTERS, memory_size=MEMORY_SIZE):
        self.pc = 0
        self.registers = [0] * num_registers
        self.memory = bytearray(memory_size)

    @property
    def memory_size(self):
        return len(self.memory)

    @property
    def halted(self):
        return self.pc < 0

    def halt(self):
        self.pc = HALT_PC

    # --- Register Access ---

    def _check_register(self, reg_index):
        if not 0 <= reg_index < len(self.registers):
            logger.error(f"Attempted to access invalid register index {reg_index}")
            raise RegisterOutOfRange(reg_index)

    def read_register(self, reg_index):
        self._check_register(reg_index)
        return self.registers[reg_index]

    def write_register(self, reg_index, value):
        """Stores 'value' truncated to 32 bits. r0 is an ordinary register."""
        self._check_register(reg_index)
        self.registers[reg_index] = value & WORD_MASK
        logger.debug(f"Set Register r{reg_index} = 0x{self.registers[reg_index]:08x}")

    # --- Memory Access ---

    def _check_address(self, address):
        if not 0 <= address < len(self.memory):
            logger.error(f"Memory access out of range at 0x{address:08x} (size {len(self.memory)})")
            raise MemoryFault(address)

    def read_byte(self, address):
        self._check_address(address)
        return self.memory[address]

    def write_byte(self, address, value):
        """Stores the low 8 bits of 'value'."""
        self._check_address(address)
        self.memory[address] = value & BYTE_MASK

    # --- Inspection ---

    def snapshot(self):
        return self.registers[:]

    def dump(self):
        lines = [f"pc: {self.pc}"]
        for i, reg in enumerate(self.registers):
            lines.append(f"\tr{i} = 0x{reg:X}")
        return "\n".join(lines)
