"""Command-line interface for railscout."""

from __future__ import annotations

import json
from pathlib import Path

import click
import networkx as nx

from railscout import __version__
from railscout.constants import DEFAULT_SNAP_THRESHOLD
from railscout.convert import load_onedest
from railscout.errors import NetworkParseError, UnknownNodeError
from railscout.parser.model import NodeType, RailGraph
from railscout.parser.network import dump_segments, load_network, load_survey, save_network
from railscout.render.svg import render_svg
from railscout.routing import (
    ConflictDetected,
    build_adjacency,
    iter_prefix_conflicts,
    shortest_path,
    suggest_check_order,
    validate_router_layout,
)
from railscout.survey import apply_reconciliation, reconcile_survey
from railscout.themes import THEMES
from railscout.validate import Severity, validate_network

_existing = click.Path(exists=True, dir_okay=False, path_type=Path)


def _load(path: Path) -> RailGraph:
    try:
        return load_network(path)
    except NetworkParseError as e:
        raise click.ClickException(f"{path}: {e}") from e


@click.group()
@click.version_option(__version__, prog_name="railscout")
def cli() -> None:
    """railscout: rail network routing, router checks and survey reconciliation."""


@cli.command()
@click.argument("network", type=_existing)
def info(network: Path) -> None:
    """Summarize a network file."""
    graph = _load(network)
    by_type: dict[str, int] = {}
    for node in graph.nodes.values():
        key = node.type.value if node.type else "untyped"
        by_type[key] = by_type.get(key, 0) + 1

    G = build_adjacency(graph)
    surveyed = [e for e in graph.edges if e.total_copper_coverage is not None]

    click.echo(f"Nodes: {len(graph.nodes)}")
    for key in sorted(by_type):
        click.echo(f"  {key}: {by_type[key]}")
    click.echo(f"Edges: {len(graph.edges)}")
    click.echo(f"Connected components: {nx.number_weakly_connected_components(G)}")
    click.echo(f"Routers: {sum(1 for n in graph.nodes.values() if n.exits)}")
    if surveyed:
        mean = sum(e.total_copper_coverage for e in surveyed) / len(surveyed)
        click.echo(f"Surveyed edges: {len(surveyed)} (mean copper coverage {mean:.1%})")


@cli.command()
@click.argument("network", type=_existing)
@click.argument("source")
@click.argument("target")
def route(network: Path, source: str, target: str) -> None:
    """Find the cheapest path from SOURCE to TARGET."""
    graph = _load(network)
    try:
        result = shortest_path(graph, source, target)
    except UnknownNodeError as e:
        raise click.ClickException(str(e)) from e

    if result.path is None:
        click.echo(f"No path from {source} to {target}")
        return
    click.echo(" -> ".join(result.path.nodes))
    click.echo(f"Distance: {result.distance:g}")


@cli.command("check-router")
@click.argument("network", type=_existing)
@click.argument("node_ids", nargs=-1)
@click.option("--all-conflicts", is_flag=True, help="List every conflict, not just the first.")
@click.option("--order", is_flag=True, help="Print a physical check order that resolves conflicts.")
@click.option("--strict", is_flag=True, help="Exit non-zero if any router has a conflict.")
def check_router(
    network: Path,
    node_ids: tuple[str, ...],
    all_conflicts: bool,
    order: bool,
    strict: bool,
) -> None:
    """Check junction routers for destination prefix conflicts.

    Checks NODE_IDS, or every node with exits if none are given.
    """
    graph = _load(network)
    if node_ids:
        unknown = [n for n in node_ids if n not in graph.nodes]
        if unknown:
            raise click.ClickException(f"Unknown node(s): {', '.join(unknown)}")
        nodes = [graph.nodes[n] for n in node_ids]
    else:
        nodes = [n for n in graph.nodes.values() if n.exits]

    conflicted = 0
    for node in nodes:
        result = validate_router_layout(node.exits)
        click.echo(f"{node.id}: {result.status.value}")
        if not isinstance(result, ConflictDetected):
            continue
        conflicted += 1
        if all_conflicts:
            for c in iter_prefix_conflicts(node.exits):
                click.echo(
                    f"  '{c.arg_a}' ({c.exit_a.direction}) is a prefix of "
                    f"'{c.arg_b}' ({c.exit_b.direction})"
                )
        else:
            click.echo(f"  {result.reason}")
        if order:
            click.echo("  Check order:")
            for i, (arg, ex) in enumerate(suggest_check_order(node.exits), 1):
                click.echo(f"    {i}. {arg} -> {ex.direction}")

    if strict and conflicted:
        click.get_current_context().exit(1)


@cli.command()
@click.argument("network", type=_existing)
@click.argument("survey", type=_existing)
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Write the updated network here.")
@click.option("--threshold", type=float, default=DEFAULT_SNAP_THRESHOLD, show_default=True,
              help="Max distance (blocks) from a sample to an edge.")
@click.option("--json", "as_json", is_flag=True, help="Print diffs as JSON.")
def reconcile(
    network: Path,
    survey: Path,
    output: Path | None,
    threshold: float,
    as_json: bool,
) -> None:
    """Merge a SURVEY report into the condition segments of NETWORK."""
    graph = _load(network)
    try:
        report = load_survey(survey)
    except NetworkParseError as e:
        raise click.ClickException(f"{survey}: {e}") from e

    result = reconcile_survey(graph, report, threshold_blocks=threshold)

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "edgeId": d.edge_id,
                        "oldSegments": None if d.old_segments is None else dump_segments(d.old_segments),
                        "newSegments": dump_segments(d.new_segments),
                    }
                    for d in result.diffs
                ],
                indent=2,
            )
        )
    else:
        click.echo(f"Samples: {len(report.samples)}, edges changed: {len(result.diffs)}")
        for d in result.diffs:
            before = "none" if d.old_coverage is None else f"{d.old_coverage:.1%}"
            click.echo(f"  {d.edge_id}: copper coverage {before} -> {d.new_coverage:.1%}")

    if output is not None:
        save_network(apply_reconciliation(graph, result), output)
        click.echo(f"Wrote {output}", err=True)


@cli.command()
@click.argument("network", type=_existing)
def check(network: Path) -> None:
    """Validate NETWORK; exits non-zero if any error is found."""
    graph = _load(network)
    violations = validate_network(graph)
    for v in violations:
        click.echo(f"[{v.severity.value.upper()}] {v.check}: {v.message}")
    errors = sum(1 for v in violations if v.severity == Severity.ERROR)
    click.echo(f"{errors} error(s), {len(violations) - errors} warning(s)")
    if errors:
        click.get_current_context().exit(1)


@cli.command()
@click.argument("stations", type=_existing)
@click.argument("junctions", type=_existing)
@click.argument("lines", type=_existing)
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), required=True)
@click.option("--keyed/--list", default=True, show_default=True,
              help="Write nodes as an id-keyed object or as a list.")
def convert(stations: Path, junctions: Path, lines: Path, output: Path, keyed: bool) -> None:
    """Convert legacy OneDest STATIONS, JUNCTIONS and LINES files."""
    try:
        graph = load_onedest(stations, junctions, lines)
    except (KeyError, TypeError, ValueError) as e:
        raise click.ClickException(f"Could not convert legacy data: {e!r}") from e
    save_network(graph, output, keyed=keyed)

    counts = {t: sum(1 for n in graph.nodes.values() if n.type == t) for t in NodeType}
    click.echo(
        f"Stations: {counts[NodeType.STATION]}, junctions: {counts[NodeType.JUNCTION]}, "
        f"waypoints: {counts[NodeType.OTHER]}, edges: {len(graph.edges)}"
    )
    click.echo(f"Wrote {output}", err=True)


@cli.command()
@click.argument("network", type=_existing)
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), required=True)
@click.option("--theme", type=click.Choice(sorted(THEMES)), default="light", show_default=True)
@click.option("--title", default=None, help="Map title (defaults to metadata.title).")
@click.option("--labels/--no-labels", default=True, show_default=True)
@click.option("--legend/--no-legend", default=True, show_default=True)
def render(
    network: Path,
    output: Path,
    theme: str,
    title: str | None,
    labels: bool,
    legend: bool,
) -> None:
    """Render NETWORK to an SVG file."""
    graph = _load(network)
    svg = render_svg(
        graph, THEMES[theme], title=title, show_labels=labels, show_legend=legend
    )
    output.write_text(svg)
    click.echo(f"Wrote {output}", err=True)
