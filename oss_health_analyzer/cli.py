"""
Command-line interface for OSS Health Analyzer.
"""

import asyncio
import json
from datetime import datetime, timezone
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.table import Table

from oss_health_analyzer import thresholds as threshold_config
from oss_health_analyzer.config import set_verbose, set_verify_ssl
from oss_health_analyzer.core import (
    EvaluationResult,
    apply_config_overrides,
    evaluate_repository_sync,
    parse_repository_identifier,
)
from oss_health_analyzer.errors import AcquisitionError
from oss_health_analyzer.http_client import close_http_client
from oss_health_analyzer.metrics import load_metric_specs
from oss_health_analyzer.scoring import ScoreLevel
from oss_health_analyzer.thresholds import (
    BooleanThreshold,
    CategoricalThreshold,
    NumericThreshold,
    ThresholdConfig,
)
from oss_health_analyzer.vcs import get_vcs_provider

# --- Typer App ---
app = typer.Typer(help="Evaluate the health of open-source GitHub repositories.")
console = Console()

LEVEL_STYLES = {
    ScoreLevel.EXCELLENT: "green",
    ScoreLevel.GOOD: "green",
    ScoreLevel.FAIR: "yellow",
    ScoreLevel.POOR: "red",
    ScoreLevel.CRITICAL: "red",
}

# --- Helper Functions ---


def _score_color(score: float) -> str:
    if score >= 80:
        return "green"
    if score >= 50:
        return "yellow"
    return "red"


def _fail(error: AcquisitionError) -> NoReturn:
    console.print(f"[red]Error:[/red] {error}")
    console.print(f"[dim]{error.hint}[/dim]")
    raise typer.Exit(code=1)


def result_to_dict(result: EvaluationResult) -> dict[str, Any]:
    """Machine-readable form of an evaluation result."""
    health = result.health_score
    return {
        "repository": f"{result.owner}/{result.name}",
        "repo_url": result.repo_url,
        "evaluated_at": result.evaluated_at.isoformat(),
        "overall_score": round(health.overall_score, 1),
        "overall_grade": health.overall_grade,
        "categories": {
            category_id: {
                "name": category.name,
                "weight": category.weight,
                "score": round(category.score, 1),
                "grade": category.grade,
                "metrics": [m.id for m in category.metrics],
            }
            for category_id, category in health.categories.items()
        },
        "metrics": [
            {
                "id": metric.id,
                "name": metric.name,
                "category": metric.category,
                "value": metric.display_value,
                "score": round(metric.score, 1),
                "level": metric.level.value,
            }
            for metric in result.metrics
        ],
        "summary": {
            "text": health.summary.text,
            "strengths": health.summary.strengths,
            "improvements": health.summary.improvements,
        },
        "fetches": result.fetches,
    }


def display_result(result: EvaluationResult) -> None:
    """Display an evaluation result in rich tables."""
    health = result.health_score
    color = _score_color(health.overall_score)

    console.print(f"\n📦 [bold cyan]{result.owner}/{result.name}[/bold cyan]")
    console.print(
        f"   Overall: [{color}]{health.overall_score:.1f}/100 "
        f"({health.overall_grade})[/{color}]"
    )

    category_table = Table(title="Categories", header_style="bold magenta")
    category_table.add_column("Category", style="cyan", no_wrap=True)
    category_table.add_column("Weight", justify="right")
    category_table.add_column("Score", justify="right")
    category_table.add_column("Grade", justify="center")
    for category in health.categories.values():
        if not category.metrics:
            category_table.add_row(
                category.name, f"{category.weight:.2f}", "[dim]-[/dim]", "[dim]-[/dim]"
            )
            continue
        category_color = _score_color(category.score)
        category_table.add_row(
            category.name,
            f"{category.weight:.2f}",
            f"[{category_color}]{category.score:.1f}[/{category_color}]",
            category.grade,
        )
    console.print(category_table)

    metrics_table = Table(title="Metrics", header_style="bold magenta")
    metrics_table.add_column("Metric", style="cyan", no_wrap=True)
    metrics_table.add_column("Value", justify="right")
    metrics_table.add_column("Score", justify="right", style="magenta")
    metrics_table.add_column("Level", justify="left")
    for metric in result.metrics:
        style = LEVEL_STYLES[metric.level]
        metrics_table.add_row(
            metric.name,
            metric.display_value,
            f"{metric.score:.0f}",
            f"[{style}]{metric.level.value}[/{style}]",
        )
    console.print(metrics_table)

    console.print(f"\n{health.summary.text}")
    if health.summary.strengths:
        console.print(
            f"[green]Strengths:[/green] {', '.join(health.summary.strengths)}"
        )
    if health.summary.improvements:
        console.print(
            f"[yellow]Areas to improve:[/yellow] "
            f"{', '.join(health.summary.improvements)}"
        )


def describe_threshold(config: ThresholdConfig) -> tuple[str, str]:
    """Return (kind, description) for a threshold configuration."""
    if isinstance(config, NumericThreshold):
        pairs = ", ".join(
            f"{t:g}→{s:g}" for t, s in zip(config.thresholds, config.scores)
        )
        return config.direction.value, pairs
    if isinstance(config, BooleanThreshold):
        return "boolean", f"yes→{config.pass_score:g}, no→{config.fail_score:g}"
    if isinstance(config, CategoricalThreshold):
        levels = ", ".join(f"{tag}→{s:g}" for tag, s in config.levels.items())
        return "categorical", levels
    return type(config).__name__, ""


# --- Commands ---


@app.command()
def evaluate(
    repository: str = typer.Argument(
        ...,
        help="Repository to evaluate, as OWNER/REPO or a github.com URL.",
    ),
    output_json: bool = typer.Option(
        False,
        "--json",
        help="Print a machine-readable JSON document instead of tables.",
    ),
    insecure: bool = typer.Option(
        False,
        "--insecure",
        help="Disable SSL certificate verification for HTTPS requests.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Print acquisition and retry status lines.",
    ),
    token: str | None = typer.Option(
        None,
        "--token",
        help="GitHub token (default: GITHUB_TOKEN environment variable).",
    ),
):
    """Evaluate the health of a GitHub repository."""
    set_verify_ssl(not insecure)
    if verbose:
        set_verbose(True)

    try:
        owner, name = parse_repository_identifier(repository)
    except AcquisitionError as e:
        _fail(e)

    try:
        apply_config_overrides()
        client = get_vcs_provider("github", token=token)
    except ValueError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        raise typer.Exit(code=1) from None

    if not output_json:
        console.print(f"🔍 Evaluating [bold]{owner}/{name}[/bold]...")

    try:
        result = evaluate_repository_sync(owner, name, client=client)
    except AcquisitionError as e:
        _fail(e)

    if output_json:
        typer.echo(json.dumps(result_to_dict(result), indent=2))
    else:
        display_result(result)


@app.command("thresholds")
def show_thresholds():
    """List the scoring thresholds configured for each metric."""
    try:
        apply_config_overrides()
    except ValueError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        raise typer.Exit(code=1) from None

    table = Table(title="Metric Thresholds", header_style="bold magenta")
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Category")
    table.add_column("Type")
    table.add_column("Breakpoints → Scores")
    for spec in load_metric_specs():
        kind, description = describe_threshold(threshold_config.get_threshold(spec.id))
        table.add_row(spec.id, spec.category, kind, description)
    console.print(table)


@app.command("rate-limit")
def rate_limit(
    token: str | None = typer.Option(
        None,
        "--token",
        help="GitHub token (default: GITHUB_TOKEN environment variable).",
    ),
    insecure: bool = typer.Option(
        False,
        "--insecure",
        help="Disable SSL certificate verification for HTTPS requests.",
    ),
):
    """Show the remaining GitHub core API quota."""
    set_verify_ssl(not insecure)
    client = get_vcs_provider("github", token=token)

    async def _fetch() -> dict[str, Any]:
        try:
            return (await client.get_rate_limit()).payload
        finally:
            await close_http_client()

    try:
        core = asyncio.run(_fetch())
    except AcquisitionError as e:
        _fail(e)

    remaining = core.get("remaining", 0)
    limit = core.get("limit", 0)
    reset = core.get("reset")
    color = "green" if remaining > limit * 0.2 else "yellow" if remaining else "red"
    console.print("[bold cyan]GitHub API Rate Limit[/bold cyan]")
    console.print(f"  Remaining: [{color}]{remaining}[/{color}] / {limit}")
    if reset:
        reset_at = datetime.fromtimestamp(reset, tz=timezone.utc)
        console.print(f"  Resets at: {reset_at:%Y-%m-%d %H:%M:%S} UTC")


if __name__ == "__main__":
    app()
