import os
import tempfile
import unittest

from schip8.rom import RomError, read_hex, read_rom


class RomFileTestCase(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def write(self, name, content):
        path = os.path.join(self.tmp.name, name)
        with open(path, mode='wb') as f:
            f.write(content)
        return path


class TestReadRom(RomFileTestCase):
    def test_read(self):
        path = self.write("pong.ch8", b"\x60\x01\x12\x00")
        self.assertEqual(read_rom(path), b"\x60\x01\x12\x00")

    def test_largest_rom_fits(self):
        path = self.write("big.ch8", bytes(3584))
        self.assertEqual(len(read_rom(path)), 3584)

    def test_too_large(self):
        path = self.write("huge.ch8", bytes(3585))
        with self.assertRaises(RomError):
            read_rom(path)

    def test_empty(self):
        path = self.write("empty.ch8", b"")
        with self.assertRaises(RomError):
            read_rom(path)

    def test_missing_file(self):
        with self.assertRaises(OSError):
            read_rom(os.path.join(self.tmp.name, "missing.ch8"))


class TestReadHex(RomFileTestCase):
    def test_read(self):
        path = self.write("pong.hex", b"6001 1200\n")
        self.assertEqual(read_hex(path), b"\x60\x01\x12\x00")

    def test_lowercase_and_newlines(self):
        path = self.write("prog.hex", b"a2\n1e\r\nff\n")
        self.assertEqual(read_hex(path), b"\xa2\x1e\xff")

    def test_malformed(self):
        path = self.write("bad.hex", b"60G1")
        with self.assertRaises(RomError):
            read_hex(path)

    def test_too_large(self):
        path = self.write("huge.hex", b"00" * 3585)
        with self.assertRaises(RomError):
            read_hex(path)


if __name__ == "__main__":
    unittest.main()
