"""Stop catalog: the id table, name trie and quadtree built from one feed load."""

import dataclasses
import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple

from .config import Settings
from .index.errors import OutOfBoundsError
from .index.geometry import Region
from .index.quadtree import SpatialIndex
from .index.trie import PrefixIndex
from .ingest.projection import Projection, bounding_region
from .ingest.static_loader import GTFSData, Route, Stop, StopTime, Trip

logger = logging.getLogger(__name__)

EXACT = "exact"
PREFIX = "prefix"
NO_MATCH = "none"


@dataclass
class SearchResult:
    match: str
    stops: List[Stop] = field(default_factory=list)


class StopCatalog:
    """
    Everything a query needs, built once per feed load.

    A catalog is never modified after ``build`` returns; a reload builds a
    new catalog and the caller swaps its reference to it.
    """

    def __init__(
        self,
        projection: Projection,
        region: Region,
        capacity: int = 4,
        max_depth: Optional[int] = 24,
    ) -> None:
        self.projection = projection
        self.stops_by_id: Dict[str, Stop] = {}
        self.stops_by_name = PrefixIndex()
        self.spatial_index = SpatialIndex(region, capacity, max_depth)
        self.routes: Dict[str, Route] = {}
        self.trips: Dict[str, Trip] = {}
        self._trips_by_stop: Dict[str, Set[str]] = defaultdict(set)

    @classmethod
    def empty(cls, settings: Optional[Settings] = None) -> "StopCatalog":
        settings = settings or Settings()
        return cls(
            Projection(0.0, 0.0),
            Region.from_bounds(-1.0, -1.0, 1.0, 1.0),
            settings.node_capacity,
            settings.max_depth,
        )

    @classmethod
    def build(
        cls,
        stops: Iterable[Stop],
        trips: Iterable[Trip] = (),
        stop_times: Iterable[StopTime] = (),
        routes: Iterable[Route] = (),
        settings: Optional[Settings] = None,
    ) -> "StopCatalog":
        settings = settings or Settings()
        stops = list(stops)
        if not stops:
            catalog = cls.empty(settings)
        else:
            projection = Projection.for_extents(
                min(s.stop_lat for s in stops),
                min(s.stop_lon for s in stops),
                max(s.stop_lat for s in stops),
                max(s.stop_lon for s in stops),
            )
            stops = [
                dataclasses.replace(s, location=projection.to_point(s.stop_lat, s.stop_lon))
                for s in stops
            ]
            region = bounding_region((s.location for s in stops), settings.padding_km)
            catalog = cls(projection, region, settings.node_capacity, settings.max_depth)

        for stop in stops:
            catalog._add_stop(stop)
        for route in routes:
            catalog.routes[route.route_id] = route
        for trip in trips:
            catalog.trips[trip.trip_id] = trip
        for stop_time in stop_times:
            if stop_time.stop_id in catalog.stops_by_id:
                catalog._trips_by_stop[stop_time.stop_id].add(stop_time.trip_id)

        logger.info(f"Indexed {len(catalog)} stops in {catalog.spatial_index.node_count()} "
                    f"quadtree nodes (depth {catalog.spatial_index.depth()})")
        return catalog

    @classmethod
    def from_gtfs(cls, data: GTFSData, settings: Optional[Settings] = None) -> "StopCatalog":
        return cls.build(
            data.stops.values(),
            data.trips.values(),
            data.stop_times,
            data.routes.values(),
            settings,
        )

    def _add_stop(self, stop: Stop) -> None:
        if stop.stop_id in self.stops_by_id:
            raise ValueError(f"Adding stop with duplicate ID: {stop.stop_id}")
        if not self.spatial_index.insert(stop):
            raise OutOfBoundsError(stop, self.spatial_index.region)
        self.stops_by_id[stop.stop_id] = stop
        self.stops_by_name.insert(stop.stop_name.lower(), stop)

    def __len__(self) -> int:
        return len(self.stops_by_id)

    def __contains__(self, stop_id: str) -> bool:
        return stop_id in self.stops_by_id

    def get(self, stop_id: str) -> Optional[Stop]:
        return self.stops_by_id.get(stop_id)

    def nearest(
        self, lat: float, lon: float, max_distance_km: Optional[float] = None
    ) -> Optional[Tuple[Stop, float]]:
        """Closest stop to a coordinate and its distance in kilometres."""
        target = self.projection.to_point(lat, lon)
        limit = math.inf if max_distance_km is None else max_distance_km
        result = self.spatial_index.search(target, limit)
        logger.debug(f"Nearest search at {target} visited {result.nodes_visited} nodes, "
                     f"pruned {result.nodes_pruned}")
        if result.entry is None:
            return None
        return result.entry, result.distance

    def search(self, query: str) -> SearchResult:
        """
        Case-insensitive name search.

        A name equal to the query wins outright; otherwise every stop whose
        name starts with the query is returned.
        """
        key = query.lower()
        exact = self.stops_by_name.lookup_exact(key)
        if exact:
            return SearchResult(EXACT, exact)
        matches = self.stops_by_name.lookup_prefix(key)
        if matches:
            return SearchResult(PREFIX, matches)
        return SearchResult(NO_MATCH)

    def trips_through(self, stop_id: str) -> List[str]:
        return sorted(self._trips_by_stop.get(stop_id, ()))

    def routes_through(self, stop_id: str) -> List[Route]:
        route_ids = set()
        for trip_id in self._trips_by_stop.get(stop_id, ()):
            trip = self.trips.get(trip_id)
            if trip is not None:
                route_ids.add(trip.route_id)
        return [self.routes[r] for r in sorted(route_ids) if r in self.routes]

    def stats(self) -> Dict[str, int]:
        return {
            "stops": len(self),
            "trips": len(self.trips),
            "routes": len(self.routes),
            "quadtree_nodes": self.spatial_index.node_count(),
            "quadtree_depth": self.spatial_index.depth(),
        }
