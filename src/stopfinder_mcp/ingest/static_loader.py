"""Static GTFS feed loader: download, cache and parse the stops of a transit feed."""

import asyncio
import csv
import io
import logging
import math
import zipfile
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

import aiofiles
import aiohttp

from ..config import Settings
from ..index.geometry import Point

logger = logging.getLogger(__name__)

CACHE_FILE_NAME = "google_transit.zip"


class FeedLoadError(Exception):
    """The feed could not be fetched, read or unpacked."""


@dataclass(frozen=True)
class Stop:
    """A stop; two stops are the same stop when their ids match."""

    stop_id: str
    stop_name: str = field(compare=False)
    stop_lat: float = field(compare=False)
    stop_lon: float = field(compare=False)
    stop_code: Optional[str] = field(default=None, compare=False)
    stop_desc: Optional[str] = field(default=None, compare=False)
    location: Optional[Point] = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return f"Stop Name: {self.stop_name}; ID: {self.stop_id}"


@dataclass
class Route:
    route_id: str
    route_short_name: str
    route_long_name: str
    route_color: Optional[str] = None


@dataclass
class Trip:
    trip_id: str
    route_id: str


@dataclass
class StopTime:
    trip_id: str
    stop_id: str


@dataclass
class GTFSData:
    routes: Dict[str, Route] = field(default_factory=dict)
    stops: Dict[str, Stop] = field(default_factory=dict)
    trips: Dict[str, Trip] = field(default_factory=dict)
    stop_times: List[StopTime] = field(default_factory=list)
    last_updated: Optional[datetime] = None


def _parse_coordinate(value: Optional[str]) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


class StaticGTFSLoader:
    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()

    @property
    def cache_file(self):
        return self.settings.cache_dir / CACHE_FILE_NAME

    async def download_feed(self) -> bytes:
        """Download the static GTFS feed."""
        timeout = aiohttp.ClientTimeout(total=self.settings.download_timeout)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(self.settings.feed_url) as response:
                    response.raise_for_status()
                    return await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise FeedLoadError(f"Could not download {self.settings.feed_url}: {e}") from e

    async def read_feed(self, force_refresh: bool = False) -> bytes:
        """Return the raw feed zip from a local file, the cache, or the network."""
        if self.settings.feed_path is not None:
            logger.info(f"Reading GTFS feed from {self.settings.feed_path}")
            try:
                async with aiofiles.open(self.settings.feed_path, "rb") as f:
                    return await f.read()
            except OSError as e:
                raise FeedLoadError(f"Could not read {self.settings.feed_path}: {e}") from e

        cache_file = self.cache_file
        if not force_refresh and cache_file.exists():
            age = datetime.now().timestamp() - cache_file.stat().st_mtime
            if age < self.settings.cache_max_age:
                logger.info("Using cached GTFS feed")
                async with aiofiles.open(cache_file, "rb") as f:
                    return await f.read()
            logger.info("Cache expired, downloading fresh feed")
        else:
            logger.info("Downloading GTFS feed")

        feed_data = await self.download_feed()
        try:
            cache_file.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(cache_file, "wb") as f:
                await f.write(feed_data)
        except OSError as e:
            logger.warning(f"Could not write feed cache {cache_file}: {e}")
        return feed_data

    def parse_csv(self, content: str) -> List[Dict[str, str]]:
        """Parse CSV content into list of dictionaries."""
        reader = csv.DictReader(io.StringIO(content))
        return list(reader)

    def parse_feed(self, feed_data: bytes) -> GTFSData:
        """Parse a GTFS zip archive into routes, stops, trips and stop times."""
        data = GTFSData()
        try:
            zf = zipfile.ZipFile(io.BytesIO(feed_data))
        except zipfile.BadZipFile as e:
            raise FeedLoadError(f"Feed is not a valid zip archive: {e}") from e

        with zf:
            names = zf.namelist()

            def rows(name: str) -> List[Dict[str, str]]:
                if name not in names:
                    return []
                return self.parse_csv(zf.read(name).decode("utf-8-sig"))

            for row in rows("routes.txt"):
                if not row.get("route_id"):
                    continue
                route = Route(
                    route_id=row["route_id"],
                    route_short_name=row.get("route_short_name") or "",
                    route_long_name=row.get("route_long_name") or "",
                    route_color=row.get("route_color") or None,
                )
                data.routes[route.route_id] = route

            skipped = 0
            for row in rows("stops.txt"):
                lat = _parse_coordinate(row.get("stop_lat"))
                lon = _parse_coordinate(row.get("stop_lon"))
                if not row.get("stop_id") or lat is None or lon is None:
                    skipped += 1
                    continue
                stop = Stop(
                    stop_id=row["stop_id"],
                    stop_name=row.get("stop_name") or "",
                    stop_lat=lat,
                    stop_lon=lon,
                    stop_code=row.get("stop_code") or None,
                    stop_desc=row.get("stop_desc") or None,
                )
                if stop.stop_id in data.stops:
                    logger.warning(f"Duplicate stop id {stop.stop_id}, keeping the first row")
                    continue
                data.stops[stop.stop_id] = stop
            if skipped:
                logger.warning(f"Skipped {skipped} stops without an id or usable coordinates")

            skipped = 0
            for row in rows("trips.txt"):
                if not row.get("trip_id") or not row.get("route_id"):
                    skipped += 1
                    continue
                data.trips[row["trip_id"]] = Trip(trip_id=row["trip_id"], route_id=row["route_id"])
            if skipped:
                logger.warning(f"Skipped {skipped} trips without a trip or route id")

            skipped = 0
            for row in rows("stop_times.txt"):
                if not row.get("trip_id") or not row.get("stop_id"):
                    skipped += 1
                    continue
                data.stop_times.append(StopTime(trip_id=row["trip_id"], stop_id=row["stop_id"]))
            if skipped:
                logger.warning(f"Skipped {skipped} stop times without a trip or stop id")

        data.last_updated = datetime.now()
        logger.info(f"Loaded {len(data.routes)} routes, {len(data.stops)} stops, "
                    f"{len(data.trips)} trips, {len(data.stop_times)} stop times")
        return data

    async def load_feed(self, force_refresh: bool = False) -> GTFSData:
        """Load and parse the GTFS static feed."""
        feed_data = await self.read_feed(force_refresh=force_refresh)
        return self.parse_feed(feed_data)
