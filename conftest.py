"""Pytest configuration for stop finder tests."""

import pytest

from stopfinder_mcp.catalog import StopCatalog
from stopfinder_mcp.ingest.static_loader import GTFSData, Route, Stop, StopTime, Trip


@pytest.fixture
def sample_gtfs_data():
    """A handful of State College stops with two routes and three trips."""
    data = GTFSData()

    data.routes["BL"] = Route(
        route_id="BL",
        route_short_name="BL",
        route_long_name="Blue Loop",
        route_color="0000FF",
    )
    data.routes["N"] = Route(
        route_id="N",
        route_short_name="N",
        route_long_name="Campus Loop North",
    )

    for stop in (
        Stop(stop_id="HUB", stop_name="HUB-Robeson Center", stop_lat=40.7982, stop_lon=-77.8599,
             stop_code="HUB"),
        Stop(stop_id="CURTIN_BJC", stop_name="Curtin Rd at Bryce Jordan Center",
             stop_lat=40.8123, stop_lon=-77.8456, stop_code="287"),
        Stop(stop_id="CURTIN_POLLOCK", stop_name="Curtin Rd at Pollock Rd",
             stop_lat=40.8049, stop_lon=-77.8560),
        Stop(stop_id="ATHERTON_CVS", stop_name="1101 N. Atherton St at CVS",
             stop_lat=40.8012, stop_lon=-77.8634, stop_code="8"),
        Stop(stop_id="ALLEN_BEAVER", stop_name="Allen St at Beaver Ave",
             stop_lat=40.7950, stop_lon=-77.8612),
        Stop(stop_id="CURTIN", stop_name="Curtin", stop_lat=40.8060, stop_lon=-77.8530),
    ):
        data.stops[stop.stop_id] = stop

    data.trips["BL_001"] = Trip(trip_id="BL_001", route_id="BL")
    data.trips["BL_002"] = Trip(trip_id="BL_002", route_id="BL")
    data.trips["N_001"] = Trip(trip_id="N_001", route_id="N")

    for trip_id, stop_id in [
        ("BL_001", "HUB"),
        ("BL_001", "CURTIN_BJC"),
        ("BL_002", "HUB"),
        ("N_001", "HUB"),
        ("N_001", "ATHERTON_CVS"),
    ]:
        data.stop_times.append(StopTime(trip_id=trip_id, stop_id=stop_id))

    return data


@pytest.fixture
def sample_catalog(sample_gtfs_data):
    return StopCatalog.from_gtfs(sample_gtfs_data)
