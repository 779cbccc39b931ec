# minimips/mips_errors.py


class SimulatorError(Exception):
    """Base class for every fault that aborts a simulation run."""
    # Source line and pc of the faulting instruction, filled in by the executor
    line = None
    pc = None

    def to_dict(self):
        data = {"type": type(self).__name__, "message": str(self)}
        if self.line is not None:
            data["line"] = self.line
        if self.pc is not None:
            data["pc"] = self.pc
        return data


class ParseError(SimulatorError):
    """Malformed source line. Parsing stops at the first one."""

    def __init__(self, line, reason, text=""):
        self.line = line
        self.reason = reason
        self.text = text
        super().__init__(f"Line {line}: {reason}")

    def to_dict(self):
        data = super().to_dict()
        data.update({"line": self.line, "reason": self.reason, "text": self.text})
        return data


class UnknownLabel(SimulatorError):
    def __init__(self, name):
        self.name = name
        super().__init__(f"Unknown label: '{name}'")


class RegisterOutOfRange(SimulatorError):
    def __init__(self, register):
        self.register = register
        super().__init__(f"Register r{register} is out of range")


class MemoryFault(SimulatorError):
    def __init__(self, address):
        self.address = address
        super().__init__(f"Memory access out of range at address {address} (0x{address:08x})")


class UnimplementedOpcode(SimulatorError):
    def __init__(self, opcode):
        self.opcode = opcode
        super().__init__(f"Execution not implemented for opcode '{opcode}'")
