# CHIP-8 / SUPER-CHIP DISPLAY
# one byte per pixel (0 is OFF, 1 is ON), row major
# the buffer is always sized for the extended 128x64 geometry, in normal 64x32 mode
# only its first 2048 cells are used


NORMAL_WIDTH, NORMAL_HEIGHT = 64, 32
EXTENDED_WIDTH, EXTENDED_HEIGHT = 128, 64
BUFFER_SIZE = EXTENDED_WIDTH * EXTENDED_HEIGHT


class Display:
    def __init__(self, extended=False):
        self.extended = extended
        self.buffer = bytearray(BUFFER_SIZE)

    @property
    def width(self):
        return EXTENDED_WIDTH if self.extended else NORMAL_WIDTH

    @property
    def height(self):
        return EXTENDED_HEIGHT if self.extended else NORMAL_HEIGHT

    @property
    def resolution(self):
        return self.width, self.height

    def _offset(self, x, y):
        # coordinates outside the screen wrap around
        return (y % self.height) * self.width + (x % self.width)

    # ********** PIXELS
    def get_pixel(self, x, y):
        """return 1 if pixel is ON, return 0 if pixel is OFF"""
        return 1 if self.buffer[self._offset(x, y)] else 0

    def set_pixel(self, x, y):
        self.buffer[self._offset(x, y)] = 1

    def clear_pixel(self, x, y):
        self.buffer[self._offset(x, y)] = 0

    def clear(self):
        self.buffer[:] = bytes(BUFFER_SIZE)

    # ********** ROWS AND COLUMNS
    def _write_row(self, y, value):
        start = (y % self.height) * self.width
        self.buffer[start:start+self.width] = bytes([value]) * self.width

    def _write_column(self, x, value):
        for y in range(self.height):
            self.buffer[self._offset(x, y)] = value

    def fill_row(self, y):
        self._write_row(y, 1)

    def clear_row(self, y):
        self._write_row(y, 0)

    def fill_column(self, x):
        self._write_column(x, 1)

    def clear_column(self, x):
        self._write_column(x, 0)

    # ********** SCROLLING
    # pixels pushed past the border are lost, the band left behind is blank
    def scroll_down(self, n):
        w, h = self.width, self.height
        n = min(n, h)
        if n == 0:
            return
        visible = w * h
        self.buffer[n*w:visible] = self.buffer[0:visible-n*w]
        self.buffer[0:n*w] = bytes(n * w)

    def scroll_right(self, n):
        w = self.width
        n = min(n, w)
        if n == 0:
            return
        for y in range(self.height):
            start = y * w
            self.buffer[start+n:start+w] = self.buffer[start:start+w-n]
            self.buffer[start:start+n] = bytes(n)

    def scroll_left(self, n):
        w = self.width
        n = min(n, w)
        if n == 0:
            return
        for y in range(self.height):
            start = y * w
            self.buffer[start:start+w-n] = self.buffer[start+n:start+w]
            self.buffer[start+w-n:start+w] = bytes(n)

    # ********** SPRITES
    def draw_sprite(self, mem, address, x, y, rows):
        """
        XOR a sprite read from mem at address onto the screen at (x, y), wrapping around the borders
        the sprite is 8 pixels wide and `rows` tall, or 16x16 (two bytes per row) when rows is 0
        in extended mode
        return 1 if any pixel went from ON to OFF (collision), 0 otherwise
        """
        if self.extended and rows == 0:
            width, height, bytes_per_row = 16, 16, 2
        else:
            width, height, bytes_per_row = 8, rows, 1
        collision = 0
        for j in range(height):
            sprite_row = 0
            for b in range(bytes_per_row):
                sprite_row = sprite_row << 8 | mem[address + j * bytes_per_row + b]
            y_coordinate = (y + j) % self.height
            for i in range(width):
                if not sprite_row & (1 << (width - 1 - i)):
                    continue
                offset = y_coordinate * self.width + (x + i) % self.width
                # the only case when a pixel gets erased is when it was ON and is turned ON again
                if self.buffer[offset]:
                    collision = 1
                self.buffer[offset] ^= 1
        return collision

    def lit_pixels(self):
        """(x, y) of every pixel ON within the current geometry, used by the renderer"""
        w = self.width
        for offset in range(w * self.height):
            if self.buffer[offset]:
                yield offset % w, offset // w

    def __str__(self):
        w = self.width
        lines = []
        for y in range(self.height):
            row = self.buffer[y*w:(y+1)*w]
            lines.append("".join("#" if p else "." for p in row))
        return "\n".join(lines)
