"""Great-circle distance helpers used by the hospital directory and SMS dispatch."""
from __future__ import annotations

import math
from typing import Iterable, Optional

EARTH_RADIUS_KM = 6371.0
DEFAULT_RADIUS_KM = 50.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def nearest_hospital(hospitals: Iterable, lat: float, lon: float) -> tuple[Optional[object], Optional[float]]:
    """Linear scan for the closest hospital with known coordinates."""
    best, best_distance = None, None
    for hospital in hospitals:
        if not hospital.has_coordinates:
            continue
        distance = haversine_km(lat, lon, hospital.latitude, hospital.longitude)
        if best_distance is None or distance < best_distance:
            best, best_distance = hospital, distance
    return best, best_distance


def with_distances(hospitals: Iterable, lat: float, lon: float, radius_km: float = DEFAULT_RADIUS_KM) -> list:
    """Annotate ``hospital.distance`` and keep those within ``radius_km``.

    Hospitals without coordinates are kept with ``distance = None`` and
    sort after every located hospital.
    """
    kept = []
    for hospital in hospitals:
        if hospital.has_coordinates:
            hospital.distance = haversine_km(lat, lon, hospital.latitude, hospital.longitude)
            if hospital.distance > radius_km:
                continue
        else:
            hospital.distance = None
        kept.append(hospital)
    kept.sort(key=lambda h: (h.distance is None, h.distance or 0.0))
    return kept
