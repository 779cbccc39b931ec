# minimips/mips_simulator.py
import abc
import logging

from minimips.mips_errors import SimulatorError, ParseError
from minimips.mips_executor import MipsExecutor, RUNNING, EXITED, END_OF_PROGRAM
from minimips.mips_parser import parse_program
from minimips.mips_program import Program
from minimips.mips_state import MachineState
from minimips.mips_consts import NUM_REGISTERS, MEMORY_SIZE

logger = logging.getLogger(__name__)

# termination_reason values are the executor outcomes; these are the log texts
TERMINATION_MESSAGES = {
    EXITED: "Program exited via 'exit'.",
    END_OF_PROGRAM: "Execution ran off the end of the program.",
}


class RegisterSink(abc.ABC):
    """Host side observer. Receives the full register file after every step."""

    @abc.abstractmethod
    def update_registers(self, registers):
        """'registers' is a list of unsigned 32-bit ints ordered r0..r31."""


class CallbackSink(RegisterSink):
    def __init__(self, callback):
        self.callback = callback

    def update_registers(self, registers):
        self.callback(registers)


class RecordingSink(RegisterSink):
    """Keeps every snapshot it is given, oldest first."""
    def __init__(self):
        self.snapshots = []

    def update_registers(self, registers):
        self.snapshots.append(list(registers))

    @property
    def last(self):
        return self.snapshots[-1] if self.snapshots else None


class MipsSimulator:
    """
    Drives a run: parse once, then step the executor until the machine halts.
    Manages the simulation state string, sink notifications, the optional
    step budget / cancellation hook, and error reporting.
    """
    def __init__(self, sinks=None, num_registers=NUM_REGISTERS, memory_size=MEMORY_SIZE):
        self.num_registers = num_registers
        self.memory_size = memory_size
        self.sinks = list(sinks) if sinks else []
        self.executor = MipsExecutor()
        self.reset()

    def reset(self):
        """Drops the loaded program and machine state."""
        self.program = Program()
        self.machine = MachineState(self.num_registers, self.memory_size)
        # Possible states: idle, loaded, paused, finished, stopped, error
        self.state = "idle"
        self.error_message = None
        self.last_error = None
        self.termination_reason = None
        self.steps = 0
        logger.info("Simulator reset complete.")

    def add_sink(self, sink):
        if callable(sink) and not isinstance(sink, RegisterSink):
            sink = CallbackSink(sink)
        self.sinks.append(sink)
        return sink

    def remove_sink(self, sink):
        self.sinks.remove(sink)

    def _notify(self):
        snapshot = self.machine.snapshot()
        for sink in self.sinks:
            sink.update_registers(snapshot)

    def _fail(self, error):
        self.state = "error"
        self.last_error = error
        self.error_message = str(error)
        logger.error(f"Simulation aborted: {error}")

    # --- Program Loading ---

    def load_program(self, source):
        """Parses 'source' and prepares a fresh machine. Returns the Program; raises ParseError."""
        self.reset()
        try:
            self.program = parse_program(source)
        except ParseError as e:
            self._fail(e)
            raise
        self.state = "loaded"
        logger.debug("Loaded program:\n" + self.program.dump())
        return self.program

    # --- Simulation Control ---

    def step(self):
        """
        Executes one step and notifies the sinks.
        Returns the updated state dictionary; faults are recorded then re-raised.
        """
        if self.state not in ["loaded", "paused", "stopped"]:
            logger.warning(f"Cannot step, simulator state is '{self.state}'")
            return self.get_state()

        try:
            outcome = self.executor.step(self.program, self.machine)
        except SimulatorError as e:
            self._fail(e)
            raise
        self.steps += 1

        if outcome == RUNNING:
            self.state = "paused"
        else:
            self.state = "finished"
            self.termination_reason = outcome
            logger.info(TERMINATION_MESSAGES.get(outcome, outcome))
            logger.debug("Final machine state:\n" + self.machine.dump())

        self._notify()
        return self.get_state()

    def run(self, source=None, max_steps=None, cancel=None):
        """
        Steps until the machine halts.
        'max_steps' caps the number of steps taken by this call and 'cancel' is a
        zero-argument callable polled before every step; either one ends the
        run early with state 'stopped'. Returns the final state dictionary.
        """
        if source is not None:
            self.load_program(source)

        taken = 0
        while self.state in ["loaded", "paused", "stopped"]:
            if max_steps is not None and taken >= max_steps:
                self.state = "stopped"
                logger.info(f"Step budget of {max_steps} exhausted at PC 0x{self.machine.pc:04x}")
                break
            if cancel is not None and cancel():
                self.state = "stopped"
                logger.info(f"Run cancelled by host at PC 0x{self.machine.pc:04x}")
                break
            self.step()
            taken += 1

        return self.get_state()

    def get_state(self):
        """Returns a dictionary representing the current state of the simulator."""
        state_data = {
            "pc": self.machine.pc,
            "registers": self.machine.snapshot(),
            "state": self.state,
            "error": self.error_message,
            "steps": self.steps,
            "program_length": len(self.program),
        }
        if self.last_error is not None:
            state_data["error_detail"] = self.last_error.to_dict()
        if self.state == "finished":
            state_data["termination_reason"] = self.termination_reason
        return state_data


def run_program(source, sink=None, max_steps=None, cancel=None):
    """Convenience wrapper: parse and run 'source' on a fresh simulator."""
    simulator = MipsSimulator()
    if sink is not None:
        simulator.add_sink(sink)
    return simulator.run(source, max_steps=max_steps, cancel=cancel)
