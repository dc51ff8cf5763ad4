"""Click commands: ``pipewatch serve`` and ``pipewatch simulate``."""

from __future__ import annotations

import asyncio
import json
from dataclasses import replace

import click

from pipewatch.app import build_dashboard
from pipewatch.config import load_config
from pipewatch.dashboard import Dashboard
from pipewatch.models.config import PipewatchConfig
from pipewatch.observability.logging import setup_logging
from pipewatch.query import format_duration, format_timestamp


@click.group()
@click.version_option(package_name="pipewatch")
def cli() -> None:
    """CI/CD pipeline dashboard simulator."""


@cli.command()
def serve() -> None:
    """Run the simulator with its REST API until interrupted."""
    from pipewatch.app import main

    asyncio.run(main())


@cli.command()
@click.option("--ticks", default=10, show_default=True, type=click.IntRange(min=0), help="Live events to generate.")
@click.option("--seed", "random_seed", type=int, default=None, help="Random seed for reproducible output.")
@click.option("--buckets", default=None, type=click.IntRange(min=1, max=500), help="Time-series bucket count.")
@click.option("--limit", default=10, show_default=True, type=click.IntRange(min=0), help="Newest events to list.")
@click.option("--json", "as_json", is_flag=True, help="Emit a JSON document instead of tables.")
def simulate(ticks: int, random_seed: int | None, buckets: int | None, limit: int, as_json: bool) -> None:
    """Seed history, run TICKS refreshes and print the dashboard views."""
    config = _load(random_seed)
    setup_logging("warning", cache=False)
    dashboard = build_dashboard(config)
    for _ in range(ticks):
        dashboard.tick()

    bucket_count = buckets or config.aggregation.bucket_count
    if as_json:
        click.echo(json.dumps(_as_document(dashboard, bucket_count, limit), indent=2))
    else:
        _print_report(dashboard, bucket_count, limit)


def _load(random_seed: int | None) -> PipewatchConfig:
    config = load_config()
    if random_seed is not None:
        config.simulation = replace(config.simulation, random_seed=random_seed)
    return config


def _as_document(dashboard: Dashboard, bucket_count: int, limit: int) -> dict[str, object]:
    summary = dashboard.summary()
    series = dashboard.time_series(bucket_count)
    outcomes = dashboard.deployment_outcomes()
    return {
        "summary": {
            "total": summary.total,
            "successes": summary.successes,
            "failures": summary.failures,
            "deployments": summary.deployments,
            "deployment_successes": summary.deployment_successes,
            "deployment_rate": summary.deployment_rate,
        },
        "deployments": {"success": outcomes.success, "failed": outcomes.failed},
        "pipelines": {c.pipeline_id: c.count for c in dashboard.per_source_counts()},
        "timeseries": {
            "labels": series.labels,
            "success": series.success_counts,
            "failed": series.failure_counts,
        },
        "events": [
            {
                "id": e.id,
                "pipeline": e.source_name,
                "environment": e.environment.value,
                "triggered_by": e.triggered_by,
                "status": e.status.value,
                "duration_seconds": e.duration_seconds,
                "timestamp": e.timestamp.isoformat(),
                "is_deployment": e.is_deployment,
            }
            for e in dashboard.query()[:limit]
        ],
    }


def _print_report(dashboard: Dashboard, bucket_count: int, limit: int) -> None:
    summary = dashboard.summary()
    click.secho("Summary", bold=True)
    click.echo(f"  total builds     {summary.total}")
    click.echo(f"  successful       {summary.successes}")
    click.echo(f"  failed           {summary.failures}")
    click.echo(
        f"  deployment rate  {summary.deployment_rate}% "
        f"({summary.deployment_successes} / {summary.deployments} deployments)"
    )

    click.secho("\nBuilds per pipeline", bold=True)
    for count in dashboard.per_source_counts():
        click.echo(f"  {count.pipeline_name:<16} {count.count}")

    series = dashboard.time_series(bucket_count)
    click.secho("\nBuild history", bold=True)
    for label, ok, failed in zip(series.labels, series.success_counts, series.failure_counts, strict=True):
        click.echo(f"  {label}  {click.style('+' * ok, fg='green')}{click.style('x' * failed, fg='red')}")

    click.secho("\nRecent builds", bold=True)
    for event in dashboard.query()[:limit]:
        click.echo(
            f"  {event.id}  {event.source_name:<14} {event.triggered_by:<20} "
            f"{event.status.value:<8} {format_duration(event.duration_seconds):>7}  "
            f"{format_timestamp(event.timestamp)}"
        )
