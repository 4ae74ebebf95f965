"""MCP tool for searching stops by name."""

from typing import Any, Dict

from ..catalog import NO_MATCH, StopCatalog
from ._format import stop_to_dict


async def search_stops(catalog: StopCatalog, query: str) -> Dict[str, Any]:
    """
    Search for stops by name, ignoring case.

    Args:
        catalog: The loaded stop catalog.
        query: Full stop name or the start of one.

    Returns:
        The kind of match ("exact", "prefix" or "none") and the matching
        stops with id, name, latitude, longitude, and the ids of the routes
        serving each stop. Use stop_info for trips and route details.
    """
    if not query.strip():
        return {"query": query, "match": NO_MATCH, "stops": []}

    result = catalog.search(query)
    stops = []
    for stop in result.stops:
        stop_dict = stop_to_dict(stop)
        stop_dict["route_ids"] = [route.route_id for route in catalog.routes_through(stop.stop_id)]
        stops.append(stop_dict)

    return {
        "query": query,
        "match": result.match,
        "stops": stops,
    }
