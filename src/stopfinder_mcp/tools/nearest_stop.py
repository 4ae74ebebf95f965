"""MCP tool for finding the stop closest to a coordinate."""

from typing import Any, Dict, Optional

from ..catalog import StopCatalog
from ._format import stop_to_dict


async def nearest_stop(
    catalog: StopCatalog,
    lat: float,
    lon: float,
    max_distance_km: Optional[float] = None,
) -> Dict[str, Any]:
    """
    Find the stop nearest to a latitude/longitude.

    Args:
        catalog: The loaded stop catalog.
        lat: Latitude of the point of interest.
        lon: Longitude of the point of interest.
        max_distance_km: Ignore stops this far away or further (default: no limit).

    Returns:
        The nearest stop and its distance in kilometres, or ``stop: None``
        when no stop qualifies.
    """
    found = catalog.nearest(lat, lon, max_distance_km)
    if found is None:
        return {"stop": None, "distance_km": None}

    stop, distance = found
    return {
        "stop": stop_to_dict(stop),
        "distance_km": round(distance, 4),
    }
