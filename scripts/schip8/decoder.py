from collections import namedtuple


# every field of a CHIP-8 instruction, whether the opcode uses it or not
#   p    bits 15-12, opcode family
#   x    bits 11-8, register index
#   y    bits 7-4, register index
#   n    bits 3-0, nibble
#   kk   bits 7-0, immediate byte
#   nnn  bits 11-0, address
Instruction = namedtuple("Instruction", ["opcode", "p", "x", "y", "n", "kk", "nnn"])


def decode(opcode: int) -> Instruction:
    opcode &= 0xFFFF
    return Instruction(
        opcode=opcode,
        p=opcode >> 12,
        x=(opcode & 0x0F00) >> 8,
        y=(opcode & 0x00F0) >> 4,
        n=opcode & 0x000F,
        kk=opcode & 0x00FF,
        nnn=opcode & 0x0FFF,
    )
