"""
Unit tests for the great-circle distance helpers.
"""

import unittest

from moorspeed.navigation.geo import Position, distance, distance_between, path_length

# One degree of arc in nautical miles with the conversion used by distance()
NM_PER_DEGREE = 60 * 1.1515 * 0.8684

class TestDistance(unittest.TestCase):
    """Test cases for distance()."""

    def test_identical_points_are_zero(self):
        """Identical points return exactly zero."""
        for lat, lon in [(0.0, 0.0), (37.8, -122.4), (-33.9, 151.2), (89.999, 179.999)]:
            self.assertEqual(distance(lat, lon, lat, lon), 0.0)

    def test_symmetric(self):
        """Swapping the endpoints gives the same distance."""
        pairs = [
            ((37.8, -122.4), (37.81, -122.41)),
            ((0.0, 179.9), (0.0, -179.9)),
            ((-45.0, 10.0), (50.0, -20.0)),
        ]
        for (lat1, lon1), (lat2, lon2) in pairs:
            self.assertEqual(distance(lat1, lon1, lat2, lon2), distance(lat2, lon2, lat1, lon1))

    def test_one_degree_of_longitude_at_equator(self):
        self.assertAlmostEqual(distance(0.0, 0.0, 0.0, 1.0), NM_PER_DEGREE, places=6)

    def test_one_minute_of_latitude(self):
        """One minute of arc is roughly one nautical mile."""
        self.assertAlmostEqual(distance(10.0, 20.0, 10.0 + 1 / 60, 20.0), NM_PER_DEGREE / 60, places=6)
        self.assertAlmostEqual(distance(10.0, 20.0, 10.0 + 1 / 60, 20.0), 1.0, places=3)

    def test_nearly_identical_points_do_not_raise(self):
        """Rounding that pushes the cosine above 1 is clamped."""
        d = distance(45.0, 10.0, 45.0, 10.0 + 1e-12)
        self.assertGreaterEqual(d, 0.0)
        self.assertLess(d, 1e-3)

    def test_antipodal_points(self):
        self.assertAlmostEqual(distance(0.0, 0.0, 0.0, 180.0), 180 * NM_PER_DEGREE, places=6)

    def test_never_negative(self):
        for lat2 in (-90.0, -10.0, 0.0, 10.0, 90.0):
            self.assertGreaterEqual(distance(5.0, 5.0, lat2, -170.0), 0.0)

    def test_distance_between_positions(self):
        a = Position(latitude=37.8, longitude=-122.4)
        b = Position(latitude=37.9, longitude=-122.4)
        self.assertEqual(distance_between(a, b), distance(37.8, -122.4, 37.9, -122.4))

class TestPathLength(unittest.TestCase):
    """Test cases for path_length()."""

    def test_empty_and_single_point(self):
        self.assertEqual(path_length([]), 0.0)
        self.assertEqual(path_length([Position(1.0, 2.0)]), 0.0)

    def test_sums_consecutive_legs(self):
        points = [Position(0.0, 0.0), Position(0.0, 1.0), Position(0.0, 3.0)]
        self.assertAlmostEqual(path_length(points), 3 * NM_PER_DEGREE, places=6)

    def test_out_and_back_counts_both_legs(self):
        """Path length is travelled distance, not displacement."""
        points = [Position(0.0, 0.0), Position(1.0, 0.0), Position(0.0, 0.0)]
        self.assertAlmostEqual(path_length(points), 2 * NM_PER_DEGREE, places=6)

    def test_same_total_in_either_direction(self):
        points = [Position(10.0 + i * 0.01, 20.0 - i * 0.02) for i in range(10)]
        self.assertAlmostEqual(path_length(points), path_length(list(reversed(points))), places=9)

class TestPosition(unittest.TestCase):

    def test_immutable(self):
        position = Position(1.0, 2.0)
        with self.assertRaises(AttributeError):
            position.latitude = 3.0

    def test_to_dict(self):
        self.assertEqual(Position(1.5, -2.5).to_dict(), {"latitude": 1.5, "longitude": -2.5})

if __name__ == "__main__":
    unittest.main()
