from .machine import MAX_ROM_SIZE


class RomError(Exception):
    """the ROM file can't be loaded in memory"""


def _check_size(rom, path):
    if len(rom) == 0:
        raise RomError(f"The ROM at path {path} is empty")
    if len(rom) > MAX_ROM_SIZE:
        raise RomError(f"The ROM at path {path} is too large: {len(rom)} bytes, at most {MAX_ROM_SIZE} fit in memory")
    return rom


def read_rom(path) -> bytes:
    """read a raw binary ROM (big endian 16 bit instructions)"""
    with open(path, mode='rb') as f:
        rom = f.read()
    return _check_size(rom, path)


def read_hex(path) -> bytes:
    """read a ROM written as text, two hex digits per byte, whitespace is ignored"""
    with open(path, mode='r') as f:
        text = f.read()
    try:
        rom = bytes.fromhex(text)
    except ValueError as e:
        raise RomError(f"The HEX file at path {path} is malformed: {e}") from e
    return _check_size(rom, path)
