"""FastMCP server for finding transit stops by location or name."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastmcp import FastMCP

from .catalog import StopCatalog
from .config import Settings
from .ingest.static_loader import FeedLoadError, StaticGTFSLoader
from .tools.nearest_stop import nearest_stop
from .tools.search_stops import search_stops
from .tools.stop_info import stop_info

VERSION = "0.1.0"

settings = Settings.from_env()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

mcp = FastMCP("stopfinder-mcp", version=VERSION)

static_loader = StaticGTFSLoader(settings)
catalog: Optional[StopCatalog] = None
initialized = False
last_loaded: Optional[datetime] = None
_load_lock = asyncio.Lock()


async def _load_catalog(force_refresh: bool = False) -> StopCatalog:
    """Build a complete catalog from the feed, falling back to an empty one."""
    try:
        data = await static_loader.load_feed(force_refresh=force_refresh)
        return StopCatalog.from_gtfs(data, settings)
    except FeedLoadError as e:
        logger.warning(f"GTFS data loading failed: {e} - using empty dataset")
    except Exception as e:
        logger.error(f"Could not build stop catalog: {e} - using empty dataset", exc_info=True)
    return StopCatalog.empty(settings)


async def _publish(force_refresh: bool = False) -> None:
    global catalog, initialized, last_loaded
    new_catalog = await _load_catalog(force_refresh)
    # swap in one assignment so tool calls see either the old or the new catalog
    catalog = new_catalog
    last_loaded = datetime.now(timezone.utc)
    initialized = True
    logger.info(f"Stop catalog ready with {len(new_catalog)} stops")


async def ensure_initialized():
    """Load the stop catalog on first use."""
    if initialized:
        return
    async with _load_lock:
        if not initialized:
            logger.info("Starting stop catalog initialization...")
            await _publish()


@mcp.tool
async def nearest_stop_tool(
    lat: float,
    lon: float,
    max_distance_km: Optional[float] = None,
) -> Dict[str, Any]:
    """Find the stop closest to a location.

    Args:
        lat: Latitude of the location
        lon: Longitude of the location
        max_distance_km: Only consider stops closer than this many kilometres

    Returns:
        The nearest stop with its ID, name, coordinates, and distance in kilometres
    """
    await ensure_initialized()
    if catalog is None:
        return {"stop": None, "distance_km": None}
    return await nearest_stop(catalog, lat, lon, max_distance_km)


@mcp.tool
async def search_stops_tool(query: str) -> Dict[str, Any]:
    """Search for stops by name.

    An exact (case-insensitive) name match is returned on its own; otherwise
    every stop whose name starts with the query is returned.

    Args:
        query: Stop name or the beginning of one

    Returns:
        The match kind and the matching stops with their ID, name, latitude,
        longitude, and the IDs of the routes serving each stop
    """
    await ensure_initialized()
    if catalog is None:
        return {"query": query, "match": "none", "stops": []}
    return await search_stops(catalog, query)


@mcp.tool
async def stop_info_tool(stop_id: str) -> Dict[str, Any]:
    """Get details for a stop, including the trips and routes that serve it.

    Args:
        stop_id: The stop ID to describe

    Returns:
        Stop details, trip IDs through the stop, and the routes of those trips
    """
    await ensure_initialized()
    if catalog is None:
        return {"stop_id": stop_id, "found": False, "stop": None, "trips": [], "routes": []}
    return await stop_info(catalog, stop_id)


@mcp.tool
async def health_check() -> Dict[str, Any]:
    """Report server status and the size of the loaded indexes."""
    stats = catalog.stats() if catalog is not None else {}
    return {
        "status": "healthy",
        "server": "stopfinder-mcp",
        "version": VERSION,
        "initialized": initialized,
        "stops_loaded": stats.get("stops", 0),
        "trips_loaded": stats.get("trips", 0),
        "quadtree_nodes": stats.get("quadtree_nodes", 0),
        "quadtree_depth": stats.get("quadtree_depth", 0),
        "last_loaded": last_loaded.isoformat() if last_loaded else None,
        "server_time": datetime.now(timezone.utc).isoformat(),
    }


@mcp.tool
async def reload_data(force_refresh: bool = False) -> Dict[str, Any]:
    """Rebuild the stop indexes from the feed.

    Args:
        force_refresh: Download the feed even if the cached copy is still fresh
    """
    async with _load_lock:
        await _publish(force_refresh)
    return {
        "status": "reloaded",
        "stops_loaded": len(catalog) if catalog is not None else 0,
        "last_loaded": last_loaded.isoformat() if last_loaded else None,
    }


server = mcp


def main():
    """Entry point for the stopfinder-mcp console script."""
    mcp.run()


if __name__ == "__main__":
    mcp.run()
