"""Tests for MCP tools."""

import pytest

from stopfinder_mcp.catalog import StopCatalog
from stopfinder_mcp.tools.nearest_stop import nearest_stop
from stopfinder_mcp.tools.search_stops import search_stops
from stopfinder_mcp.tools.stop_info import stop_info


@pytest.mark.asyncio
async def test_nearest_stop(sample_catalog):
    """Test finding the stop nearest a coordinate."""
    result = await nearest_stop(sample_catalog, 40.7951, -77.8611)

    assert result["stop"]["stop_id"] == "ALLEN_BEAVER"
    assert result["stop"]["name"] == "Allen St at Beaver Ave"
    assert result["stop"]["lat"] == 40.7950
    assert result["stop"]["lon"] == -77.8612
    assert 0 < result["distance_km"] < 0.05


@pytest.mark.asyncio
async def test_nearest_stop_out_of_range(sample_catalog):
    """Test a distance limit that no stop satisfies."""
    result = await nearest_stop(sample_catalog, 41.0, -78.0, max_distance_km=0.5)

    assert result == {"stop": None, "distance_km": None}


@pytest.mark.asyncio
async def test_nearest_stop_empty_catalog():
    """Test nearest stop with no data loaded."""
    result = await nearest_stop(StopCatalog.build([]), 40.8, -77.86)

    assert result["stop"] is None


@pytest.mark.asyncio
async def test_search_stops(sample_catalog):
    """Test searching for stops."""
    # Exact name, any case
    results = await search_stops(sample_catalog, "hub-robeson center")
    assert results["match"] == "exact"
    assert [s["stop_id"] for s in results["stops"]] == ["HUB"]
    assert results["stops"][0]["route_ids"] == ["BL", "N"]

    # Name prefix
    results = await search_stops(sample_catalog, "Curtin Rd")
    assert results["match"] == "prefix"
    assert [s["stop_id"] for s in results["stops"]] == ["CURTIN_BJC", "CURTIN_POLLOCK"]
    assert [s["route_ids"] for s in results["stops"]] == [["BL"], []]

    # Search with no matches
    results = await search_stops(sample_catalog, "NONEXISTENT")
    assert results["match"] == "none"
    assert len(results["stops"]) == 0


@pytest.mark.asyncio
async def test_search_stops_blank_query(sample_catalog):
    """Test that a blank query matches nothing rather than everything."""
    for query in ("", "   "):
        results = await search_stops(sample_catalog, query)
        assert results["stops"] == []
        assert results["match"] == "none"


@pytest.mark.asyncio
async def test_stop_info(sample_catalog):
    """Test describing a stop with the trips that serve it."""
    info = await stop_info(sample_catalog, "HUB")

    assert info["found"] is True
    assert info["stop"]["name"] == "HUB-Robeson Center"
    assert info["stop"]["code"] == "HUB"
    assert info["trips"] == ["BL_001", "BL_002", "N_001"]
    assert info["routes"][0] == {
        "route_id": "BL",
        "short_name": "BL",
        "long_name": "Blue Loop",
        "color": "#0000FF",
    }
    assert info["routes"][1]["color"] is None


@pytest.mark.asyncio
async def test_stop_info_unknown_stop(sample_catalog):
    """Test describing a stop that does not exist."""
    info = await stop_info(sample_catalog, "NOPE")

    assert info["found"] is False
    assert info["stop"] is None
    assert info["trips"] == []
