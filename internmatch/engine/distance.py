"""Geographic proximity between a candidate's target city and a posting.

Distances are banded rather than mapped continuously, so tiny coordinate
differences never move a score and each tier can be explained in words.
"""

import math

from internmatch.core.config import DistanceConfig
from internmatch.core.reference import REMOTE_CITY, ReferenceRepository
from internmatch.core.schemas import CityRef, Location

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometres."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    a = min(1.0, a)
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def _coordinates(
    location: Location, city: str, reference: ReferenceRepository,
) -> tuple[float, float] | None:
    if (
        isinstance(location, CityRef)
        and location.latitude is not None
        and location.longitude is not None
    ):
        return location.latitude, location.longitude
    return reference.city_coordinates(city)


def distance_band(distance_km: float, config: DistanceConfig) -> float:
    """Map a distance to its proximity tier."""
    for band in config.bands:
        if distance_km <= band.max_km:
            return band.proximity
    return config.far_proximity


def location_proximity(
    a: Location | None,
    b: Location | None,
    reference: ReferenceRepository,
    config: DistanceConfig | None = None,
) -> float | None:
    """Proximity in (0, 1] between two city references.

    Returns None when either side has no location at all; callers decide
    what neutral value that maps to. Unknown cities get a low but non-zero
    proximity.
    """
    config = config or DistanceConfig()
    city_a = reference.canonical_city(a)
    city_b = reference.canonical_city(b)
    if a is None or b is None or not city_a or not city_b:
        return None

    if REMOTE_CITY in (city_a, city_b):
        return config.remote_proximity
    if city_a == city_b:
        return config.same_city_proximity

    coords_a = _coordinates(a, city_a, reference)
    coords_b = _coordinates(b, city_b, reference)
    if coords_a is None or coords_b is None:
        return config.unknown_proximity

    return distance_band(haversine_km(*coords_a, *coords_b), config)
