# minimips/mips_executor.py
import logging

from minimips.mips_consts import INSTRUCTION_SIZE, LINK_REGISTER, WORD_MASK, CONTROL_OPCODES
from minimips.mips_errors import SimulatorError, UnimplementedOpcode
from minimips.mips_parser import register_index, immediate_value

logger = logging.getLogger(__name__)

# Step outcomes
RUNNING = "running"
EXITED = "exit"
END_OF_PROGRAM = "end_of_program"
ALREADY_HALTED = "halted"


class MipsExecutor:
    """
    Fetch-decode-execute for one instruction at a time.
    Holds no state of its own: everything lives in the Program (read-only)
    and the MachineState (mutated here and nowhere else).
    """

    def _reg(self, state, reg_str):
        return state.read_register(register_index(reg_str))

    def _set_reg(self, state, reg_str, value):
        state.write_register(register_index(reg_str), value)

    def _effective_address(self, state, rs_str, imm_str):
        return (self._reg(state, rs_str) + immediate_value(imm_str)) & WORD_MASK

    def step(self, program, state):
        """
        Executes the instruction at state.pc.
        Returns RUNNING, EXITED, END_OF_PROGRAM or ALREADY_HALTED.
        Faults propagate as SimulatorError subclasses carrying the source
        line and pc of the faulting instruction; pc is left pointing at it.
        """
        # --- Fetch ---
        if state.halted:
            return ALREADY_HALTED

        index = state.pc // INSTRUCTION_SIZE
        if index >= len(program):
            logger.info("Program done")
            state.halt()
            return END_OF_PROGRAM

        instr = program.fetch(index)
        pc_current = state.pc
        # Advance first; control transfers overwrite this
        state.pc += INSTRUCTION_SIZE

        logger.debug(f"Step: PC=0x{pc_current:04x}, Instr='{instr}' (line {instr.line_num})")

        try:
            outcome = self._execute(program, state, instr)
        except SimulatorError as e:
            e.line = instr.line_num
            e.pc = pc_current
            state.pc = pc_current
            logger.error(f"Fault at PC 0x{pc_current:04x} (line {instr.line_num}, '{instr}'): {e}")
            raise

        if instr.opcode in CONTROL_OPCODES and outcome == RUNNING and state.pc != pc_current + INSTRUCTION_SIZE:
            logger.debug(f"Branch/Jump taken. New PC=0x{state.pc:04x}")
        return outcome

    def _execute(self, program, state, instr):
        """Decode / execute one fetched instruction. state.pc already holds the next address."""
        opcode = instr.opcode
        ops = instr.operands

        if opcode == "mov":      # mov rd, rs
            self._set_reg(state, ops[0], self._reg(state, ops[1]))
        elif opcode == "movi":   # movi rd, imm
            self._set_reg(state, ops[0], immediate_value(ops[1]))
        elif opcode == "add":    # add rd, rs, rt
            result = (self._reg(state, ops[1]) + self._reg(state, ops[2])) & WORD_MASK
            self._set_reg(state, ops[0], result)
        elif opcode == "sub":    # sub rd, rs, rt
            result = (self._reg(state, ops[1]) - self._reg(state, ops[2])) & WORD_MASK
            self._set_reg(state, ops[0], result)
        elif opcode == "lw":     # lw rt, rs, imm  (single byte, zero-extended)
            address = self._effective_address(state, ops[1], ops[2])
            self._set_reg(state, ops[0], state.read_byte(address))
        elif opcode == "sw":     # sw rt, rs, imm  (low byte only)
            address = self._effective_address(state, ops[1], ops[2])
            state.write_byte(address, self._reg(state, ops[0]))
        elif opcode == "beq":    # beq rs, rt, label
            if self._reg(state, ops[0]) == self._reg(state, ops[1]):
                state.pc = program.resolve(ops[2])
        elif opcode == "bne":    # bne rs, rt, label
            if self._reg(state, ops[0]) != self._reg(state, ops[1]):
                state.pc = program.resolve(ops[2])
        elif opcode == "j":      # j label
            state.pc = program.resolve(ops[0])
        elif opcode == "jal":    # jal label
            target = program.resolve(ops[0])
            state.write_register(LINK_REGISTER, state.pc)
            state.pc = target
        elif opcode == "exit":
            logger.info("Exiting gracefully")
            state.halt()
            return EXITED
        else:
            raise UnimplementedOpcode(opcode)
        return RUNNING
