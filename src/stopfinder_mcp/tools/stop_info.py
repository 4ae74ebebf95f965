"""MCP tool for describing a single stop and the trips serving it."""

from typing import Any, Dict

from ..catalog import StopCatalog
from ._format import stop_to_dict


async def stop_info(catalog: StopCatalog, stop_id: str) -> Dict[str, Any]:
    """
    Describe a stop.

    Args:
        catalog: The loaded stop catalog.
        stop_id: The stop ID to describe.

    Returns:
        The stop, the IDs of trips through it, and the routes those trips run on.
    """
    stop = catalog.get(stop_id)
    if stop is None:
        return {"stop_id": stop_id, "found": False, "stop": None, "trips": [], "routes": []}

    routes = []
    for route in catalog.routes_through(stop_id):
        routes.append({
            "route_id": route.route_id,
            "short_name": route.route_short_name,
            "long_name": route.route_long_name,
            "color": f"#{route.route_color}" if route.route_color else None,
        })

    info = stop_to_dict(stop)
    info["code"] = stop.stop_code
    info["description"] = stop.stop_desc
    return {
        "stop_id": stop_id,
        "found": True,
        "stop": info,
        "trips": catalog.trips_through(stop_id),
        "routes": routes,
    }
