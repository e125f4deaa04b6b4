"""CHIP-8 / SUPER-CHIP interpreter, the pygame front end lives in schip8.frontend"""

__version__ = "0.1.0"

from .cpu import Chip8
from .display import Display
from .keywait import RUNNING, Running, WaitingForKey
from .machine import Machine
from .rom import RomError, read_hex, read_rom

__all__ = ["Chip8", "Display", "Machine", "RUNNING", "Running", "WaitingForKey", "RomError", "read_hex", "read_rom"]
