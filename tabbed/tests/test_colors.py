import unittest

from tabbed.colors import MIN_BRIGHTNESS, NEUTRAL_ACCENT, accent_color, color_hash, window_hash


class TestColorHash(unittest.TestCase):

    def test_channels_are_in_unit_range(self):
        for wid in range(0x100000, 0x100000 + 500, 7):
            for c in color_hash(wid):
                self.assertGreaterEqual(c, 0.)
                self.assertLess(c, 1.)

    def test_is_deterministic(self):
        self.assertEqual(color_hash(0x1c00003), color_hash(0x1c00003))
        self.assertEqual(window_hash(42), window_hash(42))

    def test_is_stable_across_runs(self):
        rgb = window_hash(0x100) & 0xffffffff
        self.assertEqual(color_hash(0x100), (((rgb >> 16) & 0xff) / 256.,
                                             ((rgb >> 8) & 0xff) / 256.,
                                             (rgb & 0xff) / 256.))

    def test_distinct_ids_rarely_collide(self):
        colors = set(color_hash(wid) for wid in range(0x200000, 0x200000 + 256))
        self.assertGreater(len(colors), 250)

    def test_multiples_of_256_are_spread(self):
        # X window ids usually differ in their higher bits only
        colors = set(color_hash(0x1000000 + i * 0x100000) for i in range(32))
        self.assertGreater(len(colors), 30)


class TestAccentColor(unittest.TestCase):

    def test_channels_are_floored(self):
        for wid in range(1000):
            for c in accent_color(wid):
                self.assertGreaterEqual(c, MIN_BRIGHTNESS)

    def test_neutral_without_colors(self):
        self.assertEqual(accent_color(0x100, colors=False), NEUTRAL_ACCENT)
        self.assertEqual(accent_color(0x200, colors=False), NEUTRAL_ACCENT)


if __name__ == '__main__':
    unittest.main()
