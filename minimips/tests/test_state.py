# minimips/tests/test_state.py
import pytest
from minimips.mips_state import MachineState
from minimips.mips_consts import NUM_REGISTERS, MEMORY_SIZE, HALT_PC
from minimips.mips_errors import RegisterOutOfRange, MemoryFault


@pytest.fixture
def machine():
    """Provides a fresh MachineState for each test."""
    return MachineState()

def test_initial_state(machine):
    assert machine.pc == 0
    assert machine.registers == [0] * NUM_REGISTERS
    assert machine.memory_size == MEMORY_SIZE
    assert not any(machine.memory), "Memory should be zero-initialised"
    assert not machine.halted

def test_halt(machine):
    machine.halt()
    assert machine.pc == HALT_PC
    assert machine.halted

# --- Registers ---

def test_register_zero_is_writable(machine):
    machine.write_register(0, 42)
    assert machine.read_register(0) == 42, "r0 is an ordinary register"

def test_register_write_truncates_to_32_bits(machine):
    machine.write_register(5, 0x1_0000_0003)
    assert machine.read_register(5) == 3
    machine.write_register(6, -1)
    assert machine.read_register(6) == 0xFFFFFFFF

@pytest.mark.parametrize("reg", [32, 100, -1])
def test_register_out_of_range(machine, reg):
    with pytest.raises(RegisterOutOfRange) as excinfo:
        machine.write_register(reg, 1)
    assert excinfo.value.register == reg
    with pytest.raises(RegisterOutOfRange):
        machine.read_register(reg)

def test_snapshot_is_a_copy(machine):
    snap = machine.snapshot()
    machine.write_register(1, 9)
    assert snap[1] == 0
    assert len(snap) == NUM_REGISTERS

# --- Memory ---

def test_byte_read_write(machine):
    machine.write_byte(0, 0x7f)
    machine.write_byte(MEMORY_SIZE - 1, 0xab)
    assert machine.read_byte(0) == 0x7f
    assert machine.read_byte(MEMORY_SIZE - 1) == 0xab

def test_byte_write_keeps_low_byte(machine):
    machine.write_byte(10, 0x1234)
    assert machine.read_byte(10) == 0x34

@pytest.mark.parametrize("address", [MEMORY_SIZE, MEMORY_SIZE + 7, -1])
def test_memory_out_of_range(machine, address):
    with pytest.raises(MemoryFault) as excinfo:
        machine.read_byte(address)
    assert excinfo.value.address == address
    with pytest.raises(MemoryFault):
        machine.write_byte(address, 1)

def test_configurable_sizes():
    small = MachineState(num_registers=4, memory_size=16)
    small.write_byte(15, 1)
    with pytest.raises(MemoryFault):
        small.write_byte(16, 1)
    with pytest.raises(RegisterOutOfRange):
        small.read_register(4)

def test_dump(machine):
    machine.write_register(3, 255)
    text = machine.dump()
    assert text.startswith("pc: 0")
    assert "r3 = 0xFF" in text
