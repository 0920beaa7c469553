"""
Unit tests for the PositionTracker.

These tests verify the rolling window bookkeeping and the stationarity verdict.
"""

import unittest

from moorspeed.navigation.geo import Position, path_length
from moorspeed.navigation.tracker import PositionTracker

MARINA = Position(latitude=37.8078, longitude=-122.4177)

def jitter(i: int) -> Position:
    """A fix within a few metres of the marina, as a moored boat's GPS reports."""
    return Position(MARINA.latitude + (i % 3) * 1e-5, MARINA.longitude - (i % 2) * 1e-5)

def underway(i: int) -> Position:
    """A fix on a northbound track, about 0.06 nm per step."""
    return Position(MARINA.latitude + i * 0.001, MARINA.longitude)

class TestPositionTracker(unittest.TestCase):
    """Test cases for the PositionTracker class."""

    def setUp(self):
        self.tracker = PositionTracker(capacity=30)

    def test_default_capacity(self):
        self.assertEqual(PositionTracker().capacity, 30)

    def test_rejects_tiny_capacity(self):
        with self.assertRaises(ValueError):
            PositionTracker(capacity=1)

    def test_record_is_newest_first(self):
        for i in range(3):
            self.tracker.record(underway(i))
        self.assertEqual(self.tracker.positions, (underway(2), underway(1), underway(0)))

    def test_window_never_exceeds_capacity(self):
        for i in range(45):
            self.tracker.record(underway(i))
            self.assertLessEqual(len(self.tracker), 30)
        self.assertEqual(len(self.tracker), 30)
        # The oldest fixes were evicted
        self.assertEqual(self.tracker.positions[0], underway(44))
        self.assertEqual(self.tracker.positions[-1], underway(15))

    def test_path_length_matches_direct_construction(self):
        """A capped window measures the same as the same fixes assembled directly."""
        fixes = [underway(i) for i in range(40)]
        for fix in fixes:
            self.tracker.record(fix)
        direct = list(reversed(fixes))[:30]
        self.assertEqual(list(self.tracker.positions), direct)
        self.assertEqual(self.tracker.path_length(), path_length(direct))

    def test_not_stationary_until_full(self):
        """A partial window is never stationary, however still the boat is."""
        for _ in range(29):
            self.tracker.record(MARINA)
            self.assertFalse(self.tracker.is_stationary(0.1))
            self.assertFalse(self.tracker.is_stationary(1000.0))
        self.tracker.record(MARINA)
        self.assertTrue(self.tracker.is_stationary(0.1))

    def test_full_window_within_threshold_is_stationary(self):
        for i in range(30):
            self.tracker.record(jitter(i))
        self.assertTrue(self.tracker.is_full)
        self.assertLessEqual(self.tracker.path_length(), 0.1)
        self.assertTrue(self.tracker.is_stationary(0.1))
        self.assertTrue(self.tracker.is_stationary())

    def test_full_window_spanning_threshold_is_not_stationary(self):
        for i in range(30):
            self.tracker.record(underway(i))
        self.assertGreater(self.tracker.path_length(), 0.1)
        self.assertFalse(self.tracker.is_stationary(0.1))

    def test_arriving_vessel_becomes_stationary_once_track_leaves_window(self):
        for i in range(10):
            self.tracker.record(underway(i))
        for _ in range(29):
            self.tracker.record(MARINA)
        self.assertFalse(self.tracker.is_stationary())
        self.tracker.record(MARINA)
        self.assertTrue(self.tracker.is_stationary())

    def test_reset_empties_window(self):
        for i in range(30):
            self.tracker.record(jitter(i))
        self.tracker.reset()
        self.assertEqual(len(self.tracker), 0)
        self.assertEqual(self.tracker.positions, ())
        self.assertEqual(self.tracker.path_length(), 0.0)
        self.assertFalse(self.tracker.is_stationary())

if __name__ == "__main__":
    unittest.main()
