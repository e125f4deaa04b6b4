import math
import unittest

from schip8.machine import Machine
from schip8.timers import update_time


class TestDelayTimer(unittest.TestCase):
    def setUp(self):
        self.machine = Machine()
        self.machine.dt = 100

    def test_less_than_a_frame_does_nothing(self):
        self.assertEqual(update_time(self.machine, 16), 0)
        self.assertEqual(self.machine.dt, 100)

    def test_remainder_is_kept_between_calls(self):
        update_time(self.machine, 16)
        self.assertEqual(update_time(self.machine, 1), 1)
        self.assertEqual(self.machine.dt, 99)

    def test_one_big_delta_ticks_many_times(self):
        self.assertEqual(update_time(self.machine, 50), 3)
        self.assertEqual(self.machine.dt, 97)

    def test_ticks_match_total_elapsed_time(self):
        deltas = [5, 7, 16, 17, 1, 33, 0, 12, 250, 3]
        ticks = sum(update_time(self.machine, d) for d in deltas)
        self.assertEqual(ticks, math.floor(sum(deltas) * 60 / 1000))
        self.assertEqual(self.machine.dt, 100 - ticks)

    def test_exactly_one_second_is_sixty_ticks(self):
        for _ in range(1000):
            update_time(self.machine, 1)
        self.assertEqual(self.machine.dt, 40)

    def test_never_below_zero(self):
        self.machine.dt = 1
        update_time(self.machine, 1000)
        self.assertEqual(self.machine.dt, 0)


class TestSoundTimer(unittest.TestCase):
    def setUp(self):
        self.machine = Machine()
        self.calls = []
        self.machine.speaker = self.calls.append

    def test_speaker_follows_sound_timer(self):
        self.machine.st = 2
        update_time(self.machine, 17)
        self.assertEqual(self.calls, [True])
        update_time(self.machine, 17)
        self.assertEqual(self.calls, [True, False])
        update_time(self.machine, 17)
        self.assertEqual(self.calls, [True, False])
        self.assertEqual(self.machine.st, 0)

    def test_speaker_is_only_told_about_changes(self):
        self.machine.st = 100
        update_time(self.machine, 0)
        update_time(self.machine, 17)
        update_time(self.machine, 17)
        self.assertEqual(self.calls, [True])
        self.assertTrue(self.machine.speaker_on)

    def test_no_speaker(self):
        self.machine.speaker = None
        self.machine.st = 3
        update_time(self.machine, 100)
        self.assertEqual(self.machine.st, 0)

    def test_timers_are_independent(self):
        self.machine.dt, self.machine.st = 1, 5
        update_time(self.machine, 34)
        self.assertEqual((self.machine.dt, self.machine.st), (0, 3))


if __name__ == "__main__":
    unittest.main()
