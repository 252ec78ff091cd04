"""Read and write network.json and survey report documents.

Documents are validated structurally while they are turned into model
objects; anything malformed raises NetworkParseError naming the offending
location (e.g. ``edges[3].segments[0].type``).
"""

from __future__ import annotations

__all__ = [
    "dump_network",
    "dump_segments",
    "load_network",
    "load_survey",
    "parse_network",
    "parse_survey",
    "save_network",
]

import json
import warnings
from pathlib import Path
from typing import Any, Mapping

from railscout.errors import NetworkParseError
from railscout.parser.model import (
    Edge,
    Exit,
    Node,
    NodeType,
    RailGraph,
    Segment,
    SegmentType,
    SurveyReport,
    SurveySample,
    Vec3,
)

_NODE_FIELDS = {"id", "type", "exits", "name", "coords", "external"}
_EDGE_FIELDS = {
    "id",
    "from",
    "to",
    "distance",
    "routing_weight",
    "segments",
    "geometry",
    "total_copper_coverage",
    "external",
    "is_external",
}
_DOCUMENT_FIELDS = {"nodes", "edges", "routers", "metadata"}
# Legacy converter output calls intermediate line vertices "waypoint".
_NODE_TYPE_ALIASES = {"waypoint": NodeType.OTHER}


def _load_document(data: str | bytes | Mapping[str, Any], kind: str) -> Mapping[str, Any]:
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise NetworkParseError(f"invalid JSON: {e}", kind) from e
    if not isinstance(data, Mapping):
        raise NetworkParseError("expected a JSON object", kind)
    return data


def _number(value: Any, loc: str) -> float:
    # bool is an int subclass; true/false are never valid measurements
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise NetworkParseError(f"expected a number, got {value!r}", loc)
    return float(value)


def _optional_number(obj: Mapping[str, Any], key: str, loc: str) -> float | None:
    value = obj.get(key)
    if value is None:
        return None
    return _number(value, f"{loc}.{key}")


def _string(value: Any, loc: str) -> str:
    if not isinstance(value, str) or not value:
        raise NetworkParseError(f"expected a non-empty string, got {value!r}", loc)
    return value


def _vec3(value: Any, loc: str) -> Vec3:
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise NetworkParseError(f"expected [x, y, z], got {value!r}", loc)
    x, y, z = (_number(v, f"{loc}[{i}]") for i, v in enumerate(value))
    return (x, y, z)


def _mapping(value: Any, loc: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise NetworkParseError(f"expected an object, got {type(value).__name__}", loc)
    return value


def _parse_exit(raw: Any, loc: str) -> Exit:
    obj = _mapping(raw, loc)
    args = obj.get("onedest_args", obj.get("args", []))
    if not isinstance(args, list):
        raise NetworkParseError("expected a list of destination strings", f"{loc}.onedest_args")
    target = obj.get("target_node")
    return Exit(
        direction=_string(obj.get("direction"), f"{loc}.direction"),
        onedest_args=tuple(
            _string(a, f"{loc}.onedest_args[{i}]") for i, a in enumerate(args)
        ),
        target_node=None if target is None else _string(target, f"{loc}.target_node"),
    )


def _parse_exits(raw: Any, loc: str) -> list[Exit]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise NetworkParseError("expected a list of exits", loc)
    return [_parse_exit(e, f"{loc}[{i}]") for i, e in enumerate(raw)]


def _parse_node(
    raw: Any, loc: str, node_id: str | None = None
) -> tuple[Node, dict[str, Any]]:
    obj = _mapping(raw, loc)
    nid = _string(obj.get("id", node_id), f"{loc}.id")

    ntype: NodeType | None = None
    if obj.get("type") is not None:
        raw_type = obj["type"]
        if raw_type in _NODE_TYPE_ALIASES:
            ntype = _NODE_TYPE_ALIASES[raw_type]
        else:
            try:
                ntype = NodeType(raw_type)
            except ValueError:
                raise NetworkParseError(
                    f"unknown node type {raw_type!r}", f"{loc}.type"
                ) from None

    name = obj.get("name")
    node = Node(
        id=nid,
        type=ntype,
        exits=_parse_exits(obj.get("exits"), f"{loc}.exits"),
        name=None if name is None else str(name),
        coords=None if obj.get("coords") is None else _vec3(obj["coords"], f"{loc}.coords"),
        external=bool(obj.get("external", False)),
    )
    extras = {k: v for k, v in obj.items() if k not in _NODE_FIELDS}
    return node, extras


def _parse_segment(raw: Any, loc: str) -> Segment:
    obj = _mapping(raw, loc)
    try:
        stype = SegmentType(obj.get("type"))
    except ValueError:
        raise NetworkParseError(
            f"segment type must be 'coppered' or 'uncoppered', got {obj.get('type')!r}",
            f"{loc}.type",
        ) from None
    return Segment(
        start_offset=_number(obj.get("start_offset"), f"{loc}.start_offset"),
        end_offset=_number(obj.get("end_offset"), f"{loc}.end_offset"),
        type=stype,
        avg_speed=_optional_number(obj, "avg_speed", loc),
    )


def _parse_edge(raw: Any, loc: str) -> Edge:
    obj = _mapping(raw, loc)
    distance = _number(obj.get("distance"), f"{loc}.distance")
    if distance < 0:
        raise NetworkParseError(f"distance must be non-negative, got {distance}", f"{loc}.distance")

    segments = None
    if obj.get("segments") is not None:
        if not isinstance(obj["segments"], list):
            raise NetworkParseError("expected a list of segments", f"{loc}.segments")
        segments = [
            _parse_segment(s, f"{loc}.segments[{i}]") for i, s in enumerate(obj["segments"])
        ]

    geometry = None
    if obj.get("geometry") is not None:
        if not isinstance(obj["geometry"], list):
            raise NetworkParseError("expected a list of points", f"{loc}.geometry")
        geometry = [_vec3(p, f"{loc}.geometry[{i}]") for i, p in enumerate(obj["geometry"])]

    edge_id = obj.get("id")
    return Edge(
        source=_string(obj.get("from"), f"{loc}.from"),
        target=_string(obj.get("to"), f"{loc}.to"),
        distance=distance,
        id=None if edge_id is None else _string(edge_id, f"{loc}.id"),
        routing_weight=_optional_number(obj, "routing_weight", loc),
        segments=segments,
        geometry=geometry,
        total_copper_coverage=_optional_number(obj, "total_copper_coverage", loc),
        external=bool(obj.get("external", obj.get("is_external", False))),
        extras={k: v for k, v in obj.items() if k not in _EDGE_FIELDS},
    )


def parse_network(data: str | bytes | Mapping[str, Any]) -> RailGraph:
    """Build a RailGraph from a network.json document.

    ``nodes`` may be a list of node objects or a map keyed by node id. A
    top-level ``routers`` map (as written by the legacy converter) supplies
    exits for nodes that do not declare their own; a router entry for a
    node that does is ignored with a warning. Unknown edge fields and
    top-level keys are kept in ``Edge.extras`` and ``RailGraph.extras``.
    """
    doc = _load_document(data, "network")
    graph = RailGraph()

    raw_nodes = doc.get("nodes", [])
    if isinstance(raw_nodes, Mapping):
        entries = [(f"nodes.{k}", v, k) for k, v in raw_nodes.items()]
    elif isinstance(raw_nodes, list):
        entries = [(f"nodes[{i}]", v, None) for i, v in enumerate(raw_nodes)]
    else:
        raise NetworkParseError("expected a list or an id-keyed object", "nodes")

    for loc, raw, key in entries:
        node, extras = _parse_node(raw, loc, key)
        if node.id in graph.nodes:
            raise NetworkParseError(f"duplicate node id '{node.id}'", loc)
        graph.add_node(node)
        if extras:
            graph.node_extras[node.id] = extras

    routers = doc.get("routers")
    if routers is not None:
        for node_id, router in _mapping(routers, "routers").items():
            loc = f"routers.{node_id}"
            if node_id not in graph.nodes:
                raise NetworkParseError(f"router for unknown node '{node_id}'", loc)
            exits = _parse_exits(_mapping(router, loc).get("exits"), f"{loc}.exits")
            if graph.nodes[node_id].exits:
                warnings.warn(
                    f"Node '{node_id}' declares its own exits; {loc} ignored",
                    stacklevel=2,
                )
            else:
                graph.nodes[node_id].exits = exits

    raw_edges = doc.get("edges", [])
    if not isinstance(raw_edges, list):
        raise NetworkParseError("expected a list", "edges")
    for i, raw in enumerate(raw_edges):
        loc = f"edges[{i}]"
        edge = _parse_edge(raw, loc)
        for end, node_id in (("from", edge.source), ("to", edge.target)):
            if node_id not in graph.nodes:
                raise NetworkParseError(f"unknown node '{node_id}'", f"{loc}.{end}")
        graph.add_edge(edge)

    if doc.get("metadata") is not None:
        graph.metadata = dict(_mapping(doc["metadata"], "metadata"))
    graph.extras = {k: v for k, v in doc.items() if k not in _DOCUMENT_FIELDS}
    return graph


def parse_survey(data: str | bytes | Mapping[str, Any]) -> SurveyReport:
    """Build a SurveyReport from a survey document, keeping sample order."""
    doc = _load_document(data, "survey")
    raw_samples = doc.get("samples")
    if not isinstance(raw_samples, list):
        raise NetworkParseError("expected a list of samples", "samples")

    samples = []
    for i, raw in enumerate(raw_samples):
        loc = f"samples[{i}]"
        obj = _mapping(raw, loc)
        tick = obj.get("tick")
        if tick is not None:
            tick = int(_number(tick, f"{loc}.tick"))
        samples.append(
            SurveySample(
                coords=_vec3(obj.get("coords"), f"{loc}.coords"),
                speed=_number(obj.get("speed"), f"{loc}.speed"),
                tick=tick,
            )
        )

    metadata = doc.get("metadata")
    return SurveyReport(
        samples=samples,
        metadata={} if metadata is None else dict(_mapping(metadata, "metadata")),
    )


def dump_segments(segments: list[Segment]) -> list[dict[str, Any]]:
    out = []
    for s in segments:
        d: dict[str, Any] = {
            "start_offset": s.start_offset,
            "end_offset": s.end_offset,
            "type": s.type.value,
        }
        if s.avg_speed is not None:
            d["avg_speed"] = s.avg_speed
        out.append(d)
    return out


def _dump_exit(ex: Exit) -> dict[str, Any]:
    d: dict[str, Any] = {"direction": ex.direction, "onedest_args": list(ex.onedest_args)}
    if ex.target_node is not None:
        d["target_node"] = ex.target_node
    return d


def _dump_node(node: Node, extras: Mapping[str, Any]) -> dict[str, Any]:
    d: dict[str, Any] = {"id": node.id}
    if node.type is not None:
        d["type"] = node.type.value
    if node.name is not None:
        d["name"] = node.name
    if node.coords is not None:
        d["coords"] = list(node.coords)
    if node.exits:
        d["exits"] = [_dump_exit(ex) for ex in node.exits]
    if node.external:
        d["external"] = True
    d.update(extras)
    return d


def _dump_edge(edge: Edge) -> dict[str, Any]:
    d: dict[str, Any] = {}
    if edge.id is not None:
        d["id"] = edge.id
    d["from"] = edge.source
    d["to"] = edge.target
    d["distance"] = edge.distance if edge.distance is not None else edge.length
    if edge.routing_weight is not None:
        d["routing_weight"] = edge.routing_weight
    if edge.segments is not None:
        d["segments"] = dump_segments(edge.segments)
    if edge.total_copper_coverage is not None:
        d["total_copper_coverage"] = edge.total_copper_coverage
    if edge.geometry is not None:
        d["geometry"] = [list(p) for p in edge.geometry]
    if edge.external:
        d["external"] = True
    d.update(edge.extras)
    return d


def dump_network(graph: RailGraph, keyed: bool = False) -> dict[str, Any]:
    """Serialize a RailGraph to a network.json document.

    With ``keyed=True`` nodes are written as an id-keyed object instead of
    a list.
    """
    nodes = [_dump_node(n, graph.node_extras.get(n.id, {})) for n in graph.nodes.values()]
    doc: dict[str, Any] = {
        "nodes": {n.pop("id"): n for n in nodes} if keyed else nodes,
        "edges": [_dump_edge(e) for e in graph.edges],
    }
    if graph.metadata:
        doc["metadata"] = dict(graph.metadata)
    doc.update(graph.extras)
    return doc


def load_network(path: str | Path) -> RailGraph:
    return parse_network(Path(path).read_text())


def load_survey(path: str | Path) -> SurveyReport:
    return parse_survey(Path(path).read_text())


def save_network(graph: RailGraph, path: str | Path, keyed: bool = False) -> None:
    Path(path).write_text(json.dumps(dump_network(graph, keyed=keyed), indent=2) + "\n")
