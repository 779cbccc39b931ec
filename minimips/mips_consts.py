# minimips/mips_consts.py

# --- Machine Geometry ---
NUM_REGISTERS = 32      # Size of the general purpose register file
MEMORY_SIZE = 1024      # Bytes of byte-addressable data memory
INSTRUCTION_SIZE = 4    # Each instruction occupies one 4-byte slot in the address space

# Program counter value meaning "execution has terminated"
HALT_PC = -1

# jal stores its return address here (r31 plays the role of $ra)
LINK_REGISTER = 31

WORD_MASK = 0xFFFFFFFF
BYTE_MASK = 0xFF

# --- Source Syntax ---
LABEL_PREFIX = "."
REGISTER_PREFIX = "r"
COMMENT_CHAR = "#"

# --- Instruction Formats ---
# Operand kinds in source order for each opcode.
#   reg   - register token (rN)
#   imm   - unsigned 32-bit decimal literal
#   label - label name resolved at execution time
INSTRUCTION_FORMATS = {
    "mov":  ["reg", "reg"],                 # mov rd, rs
    "movi": ["reg", "imm"],                 # movi rd, imm
    "add":  ["reg", "reg", "reg"],          # add rd, rs, rt
    "sub":  ["reg", "reg", "reg"],          # sub rd, rs, rt
    "lw":   ["reg", "reg", "imm"],          # lw rt, rs, imm
    "sw":   ["reg", "reg", "imm"],          # sw rt, rs, imm
    "beq":  ["reg", "reg", "label"],        # beq rs, rt, label
    "bne":  ["reg", "reg", "label"],        # bne rs, rt, label
    "j":    ["label"],                      # j label
    "jal":  ["label"],                      # jal label
    "exit": [],                             # exit
}

# Opcodes that may overwrite the provisional pc advance
CONTROL_OPCODES = {"beq", "bne", "j", "jal", "exit"}

# --- Simulator Driver / Web Host ---
DEFAULT_MAX_STEPS = 100000
CORS_ORIGINS = "http://localhost:3000"
