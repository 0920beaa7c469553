"""Great-circle distances between position fixes, in nautical miles."""

import math
from dataclasses import dataclass
from typing import Any, Dict, Sequence

# Angular degrees -> statute miles -> nautical miles
STATUTE_MILES_PER_MINUTE = 1.1515
NAUTICAL_MILES_PER_STATUTE_MILE = 0.8684


@dataclass(frozen=True, slots=True)
class Position:
    """
    A single position fix.

    Attributes:
        latitude: Latitude in decimal degrees.
        longitude: Longitude in decimal degrees.
    """

    latitude: float
    longitude: float

    def to_dict(self) -> Dict[str, Any]:
        return {"latitude": self.latitude, "longitude": self.longitude}


def distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute the great-circle distance between two points with the spherical law of cosines.

    Args:
        lat1: Latitude 1 in degrees.
        lon1: Longitude 1 in degrees.
        lat2: Latitude 2 in degrees.
        lon2: Longitude 2 in degrees.

    Returns:
        Distance in nautical miles, never negative. Identical points return exactly 0.
    """

    if lat1 == lat2 and lon1 == lon2:
        return 0.0

    rad_lat1 = math.radians(lat1)
    rad_lat2 = math.radians(lat2)
    rad_theta = math.radians(lon1 - lon2)

    cos_angle = (
        math.sin(rad_lat1) * math.sin(rad_lat2)
        + math.cos(rad_lat1) * math.cos(rad_lat2) * math.cos(rad_theta)
    )
    # Rounding can push the cosine just outside [-1, 1] for near-identical or antipodal points
    cos_angle = max(-1.0, min(1.0, cos_angle))

    degrees = math.degrees(math.acos(cos_angle))
    return degrees * 60 * STATUTE_MILES_PER_MINUTE * NAUTICAL_MILES_PER_STATUTE_MILE


def distance_between(a: Position, b: Position) -> float:
    """Distance in nautical miles between two Position fixes."""

    return distance(a.latitude, a.longitude, b.latitude, b.longitude)


def path_length(positions: Sequence[Position]) -> float:
    """Total distance travelled along an ordered sequence of fixes.

    Args:
        positions: Fixes in travel order (either direction gives the same total).

    Returns:
        Sum of the legs in nautical miles; 0.0 for fewer than two fixes.
    """

    if len(positions) < 2:
        return 0.0
    return sum(distance_between(positions[i - 1], positions[i]) for i in range(1, len(positions)))
