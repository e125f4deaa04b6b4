import unittest

from schip8.display import Display


class TestPixels(unittest.TestCase):
    def setUp(self):
        self.display = Display()

    def test_geometry(self):
        self.assertEqual(self.display.resolution, (64, 32))
        self.display.extended = True
        self.assertEqual(self.display.resolution, (128, 64))

    def test_set_get_clear_pixel(self):
        self.display.set_pixel(10, 10)
        self.display.set_pixel(20, 20)
        for y in range(32):
            for x in range(64):
                expected = 1 if (x, y) in ((10, 10), (20, 20)) else 0
                self.assertEqual(self.display.get_pixel(x, y), expected)
        self.display.clear_pixel(10, 10)
        self.assertEqual(self.display.get_pixel(10, 10), 0)

    def test_pixel_coordinates_wrap(self):
        self.display.set_pixel(64 + 3, 32 + 1)
        self.assertEqual(self.display.get_pixel(3, 1), 1)

    def test_row_stride_follows_mode(self):
        self.display.extended = True
        self.display.set_pixel(0, 1)
        self.assertEqual(self.display.buffer[128], 1)
        self.display.extended = False
        self.display.set_pixel(0, 1)
        self.assertEqual(self.display.buffer[64], 1)

    def test_clear(self):
        self.display.extended = True
        for y in range(64):
            self.display.fill_row(y)
        self.display.clear()
        self.assertEqual(list(self.display.lit_pixels()), [])


class TestRowsAndColumns(unittest.TestCase):
    def setUp(self):
        self.display = Display()

    def test_fill_column(self):
        self.display.fill_column(4)
        for y in range(32):
            for x in range(64):
                self.assertEqual(self.display.get_pixel(x, y), 1 if x == 4 else 0)

    def test_clear_column(self):
        for y in range(32):
            self.display.fill_row(y)
        self.display.clear_column(8)
        for y in range(32):
            for x in range(64):
                self.assertEqual(self.display.get_pixel(x, y), 0 if x == 8 else 1)

    def test_fill_row(self):
        self.display.fill_row(4)
        for y in range(32):
            for x in range(64):
                self.assertEqual(self.display.get_pixel(x, y), 1 if y == 4 else 0)

    def test_clear_row(self):
        for y in range(32):
            self.display.fill_row(y)
        self.display.clear_row(6)
        for y in range(32):
            for x in range(64):
                self.assertEqual(self.display.get_pixel(x, y), 0 if y == 6 else 1)

    def test_extended_row_is_128_wide(self):
        self.display.extended = True
        self.display.fill_row(63)
        self.assertEqual(sorted(self.display.lit_pixels()), [(x, 63) for x in range(128)])


class TestScrolling(unittest.TestCase):
    def setUp(self):
        self.display = Display()

    def test_scroll_down_zero_fills(self):
        self.display.fill_row(0)
        self.display.fill_row(31)
        self.display.scroll_down(2)
        self.assertEqual({y for _, y in self.display.lit_pixels()}, {2})

    def test_scroll_down_whole_screen(self):
        self.display.fill_row(0)
        self.display.scroll_down(15)
        self.display.scroll_down(15)
        self.display.scroll_down(15)
        self.assertEqual(list(self.display.lit_pixels()), [])

    def test_scroll_down_zero_rows(self):
        self.display.fill_row(3)
        self.display.scroll_down(0)
        self.assertEqual({y for _, y in self.display.lit_pixels()}, {3})

    def test_scroll_right_discards_last_columns(self):
        self.display.fill_column(62)
        self.display.fill_column(1)
        self.display.scroll_right(4)
        self.assertEqual({x for x, _ in self.display.lit_pixels()}, {5})

    def test_scroll_left_discards_first_columns(self):
        self.display.extended = True
        self.display.fill_column(2)
        self.display.fill_column(127)
        self.display.scroll_left(4)
        self.assertEqual({x for x, _ in self.display.lit_pixels()}, {123})

    def test_scroll_keeps_rows_apart(self):
        self.display.set_pixel(63, 0)
        self.display.scroll_right(4)
        self.assertEqual(list(self.display.lit_pixels()), [])
        self.display.set_pixel(0, 1)
        self.display.scroll_left(4)
        self.assertEqual(list(self.display.lit_pixels()), [])


class TestSprites(unittest.TestCase):
    def setUp(self):
        self.display = Display()
        self.mem = bytearray(4096)

    def test_draw_reports_collision_only_on_erase(self):
        self.mem[0] = 0b10100000
        self.mem[1] = 0b01000000
        self.assertEqual(self.display.draw_sprite(self.mem, 0, 0, 0, 1), 0)
        # 0b01000000 doesn't overlap the pixels already ON
        self.assertEqual(self.display.draw_sprite(self.mem, 1, 0, 0, 1), 0)
        self.assertEqual([self.display.get_pixel(x, 0) for x in range(4)], [1, 1, 1, 0])
        self.assertEqual(self.display.draw_sprite(self.mem, 0, 0, 0, 1), 1)
        self.assertEqual([self.display.get_pixel(x, 0) for x in range(4)], [0, 1, 0, 0])

    def test_draw_wraps_vertically(self):
        self.mem[0:3] = bytes([0x80, 0x80, 0x80])
        self.display.draw_sprite(self.mem, 0, 5, 31, 3)
        self.assertEqual(sorted(self.display.lit_pixels()), [(5, 0), (5, 1), (5, 31)])

    def test_draw_16x16_reads_two_bytes_per_row(self):
        self.display.extended = True
        self.mem[0], self.mem[1] = 0x80, 0x01
        self.display.draw_sprite(self.mem, 0, 120, 0, 0)
        self.assertEqual(sorted(self.display.lit_pixels()), [(7, 0), (120, 0)])

    def test_str(self):
        self.display.set_pixel(0, 0)
        lines = str(self.display).split("\n")
        self.assertEqual(len(lines), 32)
        self.assertEqual(lines[0], "#" + "." * 63)


if __name__ == "__main__":
    unittest.main()
