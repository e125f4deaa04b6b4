import argparse
import sys

import pygame

from . import __version__
from . import cpu
from .cpu import Chip8
from .frontend import SCALE, Beeper, Keypad, Screen
from .rom import RomError, read_hex, read_rom


FPS = 60
DEFAULT_SPEED = 16      # instructions executed per frame


def positive_int(value):
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"invalid value {value}: must be a positive number")
    return number


def get_args(argv=None):
    parser = argparse.ArgumentParser(prog="schip8", description="CHIP-8 / SUPER-CHIP emulator")
    parser.add_argument("-f", "--file", required=True, help="input rom file")
    parser.add_argument("--hex", action="store_true", help="the rom file is written as hex digits instead of binary")
    parser.add_argument("--mute", action="store_true", help="don't open the audio device")
    parser.add_argument("--debug", action="store_true", help="print every executed instruction")
    parser.add_argument("-s", "--speed", type=positive_int, default=DEFAULT_SPEED, help="instructions executed per frame")
    parser.add_argument("--scale", type=positive_int, default=None, help="window size of an extended mode pixel")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


# ******************** ENTRY POINT SECTION
def main(argv=None):
    args = get_args(argv)
    if args.debug:
        cpu.set_debug(True)
    try:
        rom = read_hex(args.file) if args.hex else read_rom(args.file)
    except (RomError, OSError) as e:
        sys.exit(f"Cannot load ROM: {e}")

    # pygame initialization
    pygame.init()
    clock = pygame.time.Clock()
    # IO
    s = Screen(s=args.scale or SCALE, caption=args.file.split('/')[-1])
    k = Keypad()
    b = None
    if not args.mute:
        try:
            b = Beeper()
        except pygame.error as e:
            print(f"Couldn't enable sound, running muted: {e}")
    # CPU
    chip = Chip8()
    chip.set_key_poller(k.is_down)
    if b is not None:
        chip.set_speaker(b.toggle)
    chip.load(rom)
    cpu.debug(f"The ROM at path {args.file} has been loaded successfully, speed: {args.speed} instructions per frame")
    # emulation loop
    run = True
    clock.tick()
    while run and not chip.halted:
        # frames per second, tick returns the milliseconds elapsed since the previous frame
        delta = clock.tick(FPS)
        # process user input
        # loop throught the event queue
        for event in pygame.event.get():
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                run = False
            elif event.type == pygame.QUIT:
                run = False
        chip.update_time(delta)
        for _ in range(args.speed):
            chip.step()
        s.render(chip.display)
    if chip.halted:
        print(f"The program has exited\n{chip}")
    if b is not None:
        b.close()
    pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())
