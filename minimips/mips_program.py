# minimips/mips_program.py
from dataclasses import dataclass, field

from minimips.mips_consts import INSTRUCTION_SIZE
from minimips.mips_errors import UnknownLabel


@dataclass(frozen=True)
class Instruction:
    """One parsed source instruction. Operands are kept as raw tokens."""
    opcode: str
    operands: tuple = ()
    line_num: int = 0
    text: str = ""

    def __str__(self):
        if self.operands:
            return f"{self.opcode} {' '.join(self.operands)}"
        return self.opcode


@dataclass(frozen=True)
class Program:
    """
    Ordered instructions plus the label table built while parsing.
    Read-only once the parser hands it over.
    """
    instructions: tuple = ()
    labels: dict = field(default_factory=dict)

    def __len__(self):
        return len(self.instructions)

    def fetch(self, index):
        return self.instructions[index]

    def address_of(self, index):
        return index * INSTRUCTION_SIZE

    def resolve(self, label):
        """Returns the byte address bound to 'label'."""
        if label not in self.labels:
            raise UnknownLabel(label)
        return self.labels[label]

    def dump(self):
        """Human readable listing: one instruction per line, then the labels."""
        lines = []
        for i, instr in enumerate(self.instructions):
            lines.append(f"0x{self.address_of(i):04x}: {instr}")
        for name, address in sorted(self.labels.items(), key=lambda item: item[1]):
            lines.append(f"{name}: 0x{address:04x}")
        return "\n".join(lines)

    def to_dict(self):
        return {
            "instructions": [
                {
                    "address": self.address_of(i),
                    "opcode": instr.opcode,
                    "operands": list(instr.operands),
                    "line": instr.line_num,
                }
                for i, instr in enumerate(self.instructions)
            ],
            "labels": dict(self.labels),
        }
