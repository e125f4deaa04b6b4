import math
from array import array

import os
os.environ["PYGAME_HIDE_SUPPORT_PROMPT"] = "no welcome message"   # this env var disable pygame's welcome message when imported
import pygame
from pygame.locals import (
    K_1, K_2, K_3, K_4,
    K_q, K_w, K_e, K_r,
    K_a, K_s, K_d, K_f,
    K_z, K_x, K_c, K_v,
)

from .display import EXTENDED_WIDTH, EXTENDED_HEIGHT


# ******************** STATIC SECTION
# CHIP-8 hex keypad    PC keyboard
#   1 2 3 C            1 2 3 4
#   4 5 6 D            Q W E R
#   7 8 9 E            A S D F
#   A 0 B F            Z X C V
KEY_MAPPINGS = {
    0x0: K_x,
    0x1: K_1,
    0x2: K_2,
    0x3: K_3,
    0x4: K_q,
    0x5: K_w,
    0x6: K_e,
    0x7: K_a,
    0x8: K_s,
    0x9: K_d,
    0xA: K_z,
    0xB: K_c,
    0xC: K_4,
    0xD: K_r,
    0xE: K_f,
    0xF: K_v,
}

SCALE = 5               # size of an extended mode pixel, normal mode pixels are twice as big
BLUE = pygame.Color(80,69,155,255)
LIGHT_BLUE = pygame.Color(136,126,203,255)
TONE_FREQUENCY = 1000
SAMPLE_RATE = 44100
TONE_VOLUME = 0.25


# ******************** I/O SECTION
class Screen:
    """
    the window is always sized for the 128x64 extended geometry, in normal mode each
    CHIP-8 pixel is drawn as a 2x2 block so the window never needs to be resized
    """
    def __init__(self, s=SCALE, caption="SUPER-CHIP", bg_color=BLUE, fg_color=LIGHT_BLUE):
        self.scale = s
        self.background = bg_color
        self.foreground = fg_color
        self.surface = pygame.display.set_mode(
            (EXTENDED_WIDTH * self.scale, EXTENDED_HEIGHT * self.scale),
        )
        pygame.display.set_caption(caption)
        self.surface.fill(self.background)

    def render(self, display):
        """redraw the whole window from the display buffer"""
        size = self.scale * EXTENDED_WIDTH // display.width
        self.surface.fill(self.background)
        for x, y in display.lit_pixels():
            pygame.draw.rect(self.surface, self.foreground, (x * size, y * size, size, size))
        pygame.display.flip()


class Keypad:
    """keyboard state straight from pygame, pass is_down to Chip8.set_key_poller"""
    def is_down(self, key):
        return bool(pygame.key.get_pressed()[KEY_MAPPINGS[key & 0xF]])


class Beeper:
    """1KHz tone looping while enabled, pass toggle to Chip8.set_speaker"""
    def __init__(self, frequency=TONE_FREQUENCY, sample_rate=SAMPLE_RATE):
        pygame.mixer.init(frequency=sample_rate, size=-16, channels=1)
        rate, _, channels = pygame.mixer.get_init()
        # one full second of signed 16 bit sine samples, repeated for every channel
        samples = array('h')
        amplitude = int(32767 * TONE_VOLUME)
        for i in range(rate):
            sample = int(amplitude * math.sin(2 * math.pi * frequency * i / rate))
            samples.extend([sample] * channels)
        self.tone = pygame.mixer.Sound(buffer=samples.tobytes())
        self.playing = False

    def toggle(self, enabled):
        if enabled and not self.playing:
            self.tone.play(loops=-1)
        elif not enabled and self.playing:
            self.tone.stop()
        self.playing = enabled

    def close(self):
        self.toggle(False)
        pygame.mixer.quit()
