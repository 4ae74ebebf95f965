"""Shared serialisation of stops for tool responses."""

from typing import Any, Dict

from ..ingest.static_loader import Stop


def stop_to_dict(stop: Stop) -> Dict[str, Any]:
    return {
        "stop_id": stop.stop_id,
        "name": stop.stop_name,
        "lat": stop.stop_lat,
        "lon": stop.stop_lon,
    }
