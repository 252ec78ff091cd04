"""Convert legacy OneDest data files into a RailGraph.

The legacy export is three documents: stations (named points with a
destination string), junctions (points carrying router configuration) and
lines (polylines in the X/Z plane). Line endpoints are attached to the
nearest station when one is close enough, otherwise to a waypoint node
created at the endpoint.
"""

from __future__ import annotations

__all__ = ["convert_onedest", "load_onedest", "slugify"]

import json
import math
import re
import warnings
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Sequence

from railscout.constants import (
    DEFAULT_JUNCTION_Y,
    DEFAULT_WAYPOINT_Y,
    MIN_REVERSE_EDGE_DISTANCE,
    STATION_SEARCH_RADIUS,
    STATION_SNAP_RADIUS,
)
from railscout.parser.model import (
    Edge,
    Exit,
    Node,
    NodeType,
    RailGraph,
    Segment,
    SegmentType,
    Vec3,
)

_DIRECTIONS = (("FromWest", "West"), ("FromEast", "East"), ("FromNorth", "North"), ("FromSouth", "South"))


def slugify(name: str) -> str:
    """``"Icenia City"`` -> ``"icenia_city"``."""
    slug = re.sub(r"[^a-z0-9]", "_", name.lower())
    return re.sub(r"_+", "_", slug).strip("_")


def _features(doc: Any) -> list[Mapping[str, Any]]:
    if isinstance(doc, Mapping):
        return list(doc.get("features", []))
    return list(doc)


def _direction(key: str) -> str:
    for marker, direction in _DIRECTIONS:
        if marker in key:
            return direction
    return "Unknown"


def _junction_exits(dests: Any) -> list[Exit]:
    if not isinstance(dests, Mapping):
        return []
    exits = []
    for key, config in dests.items():
        if not isinstance(config, Mapping) or not config.get("default") or not config.get("dests"):
            continue
        exits.append(
            Exit(
                direction=_direction(key),
                onedest_args=tuple(d.lower() for d in config["dests"]),
                target_node=slugify(config["default"]),
            )
        )
    return exits


def _closest_station(
    point: tuple[float, float],
    stations: Sequence[Mapping[str, Any]],
    radius: float,
) -> tuple[Mapping[str, Any], float] | None:
    best = None
    best_dist = math.inf
    for station in stations:
        d = math.hypot(point[0] - station["x"], point[1] - station["z"])
        if d < radius and d < best_dist:
            best, best_dist = station, d
    return None if best is None else (best, best_dist)


def _endpoint_node(
    point: tuple[float, float],
    graph: RailGraph,
    stations: Sequence[Mapping[str, Any]],
) -> Node:
    """Station near ``point`` if within the snap radius, else a waypoint."""
    match = _closest_station(point, stations, STATION_SEARCH_RADIUS)
    if match is not None and match[1] < STATION_SNAP_RADIUS:
        return graph.nodes[slugify(match[0]["name"])]

    wp_id = f"wp_{round(point[0])}_{round(point[1])}"
    if wp_id in graph.nodes:
        return graph.nodes[wp_id]

    # borrow the elevation of a station that is near but not near enough
    y = float(match[0]["y"]) if match is not None else DEFAULT_WAYPOINT_Y
    return graph.add_node(
        Node(
            id=wp_id,
            type=NodeType.OTHER,
            name=f"Waypoint {round(point[0])}, {round(point[1])}",
            coords=(float(point[0]), y, float(point[1])),
        )
    )


def _full_copper(distance: float) -> list[Segment] | None:
    if distance <= 0:
        return None
    return [Segment(0.0, distance, SegmentType.COPPERED)]


def convert_onedest(
    stations: Any,
    junctions: Any,
    lines: Any,
) -> RailGraph:
    """Build a network from the three legacy documents.

    Each document may be the raw ``{"features": [...]}`` object or the
    feature list itself. Every usable line becomes an edge, plus a reverse
    edge unless the line is a short loop.
    """
    station_feats = _features(stations)
    graph = RailGraph()

    for st in station_feats:
        graph.add_node(
            Node(
                id=slugify(st["name"]),
                type=NodeType.STATION,
                name=st["name"],
                coords=(float(st["x"]), float(st["y"]), float(st["z"])),
            )
        )

    for junction in _features(junctions):
        data = junction["data"]
        graph.add_node(
            Node(
                id=slugify(data["name"]),
                type=NodeType.JUNCTION,
                name=data["name"],
                coords=(float(data["x"]), DEFAULT_JUNCTION_Y, float(data["z"])),
                exits=_junction_exits(data.get("dests")),
            )
        )

    skipped = 0
    counter = 0
    for line in _features(lines):
        points = [
            (float(p[0]), float(p[1]))
            for part in line.get("line") or []
            for p in part
            if len(p) >= 2
        ]
        if len(points) < 2:
            skipped += 1
            continue

        start = _endpoint_node(points[0], graph, station_feats)
        end = _endpoint_node(points[-1], graph, station_feats)
        distance = round(math.dist(start.coords, end.coords), 1)

        n = len(points) - 1
        sy, ey = start.coords[1], end.coords[1]
        geometry: list[Vec3] = [
            (x, sy + (ey - sy) * i / n, z) for i, (x, z) in enumerate(points)
        ]

        graph.add_edge(
            Edge(
                id=f"edge_{counter:03d}",
                source=start.id,
                target=end.id,
                distance=distance,
                segments=_full_copper(distance),
                geometry=geometry,
            )
        )
        counter += 1
        if distance > MIN_REVERSE_EDGE_DISTANCE:
            graph.add_edge(
                Edge(
                    id=f"edge_{counter:03d}",
                    source=end.id,
                    target=start.id,
                    distance=distance,
                    segments=_full_copper(distance),
                    geometry=list(reversed(geometry)),
                )
            )
            counter += 1

    if skipped:
        warnings.warn(
            f"Skipped {skipped} line(s) with fewer than two points", stacklevel=2
        )

    graph.metadata = {
        "converted_from": "OneDest legacy format (stations, junctions, lines)",
        "conversion_date": datetime.now(timezone.utc).isoformat(),
    }
    return graph


def load_onedest(
    stations_path: str | Path,
    junctions_path: str | Path,
    lines_path: str | Path,
) -> RailGraph:
    """Read the three legacy JSON files and convert them."""
    docs = [json.loads(Path(p).read_text()) for p in (stations_path, junctions_path, lines_path)]
    return convert_onedest(*docs)
