"""CLI interface for evaluating and tuning dynamic difficulty."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, NoReturn

import click

from .benchmark import BudgetPolicy, evaluate_budget, run_benchmark
from .errors import DifficultyError
from .game_stats import generate_config, load_game_stats
from .logging import setup_logging
from .modifier_config import DifficultyConfig, dump_config, load_config
from .presets import PRESET_DESCRIPTIONS, PRESETS
from .service import DifficultyService
from .settings import Settings
from .snapshot import PlayerSnapshot, load_snapshot, providers_from_snapshot


def _fail(message: str) -> NoReturn:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _echo_json(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2, sort_keys=True))


def _resolve_config(config_path: Path | None, settings: Settings) -> DifficultyConfig:
    path = config_path or settings.config_path
    if path is None:
        return DifficultyConfig.default()
    try:
        return load_config(path)
    except DifficultyError as exc:
        _fail(str(exc))


def _build_service(snapshot: PlayerSnapshot, config: DifficultyConfig, settings: Settings) -> DifficultyService:
    providers, _ = providers_from_snapshot(snapshot)
    return DifficultyService.from_config(config, providers, slow_modifier_ms=settings.slow_modifier_ms)


config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON difficulty configuration (defaults to DYNDIFF_CONFIG_PATH, then built-in defaults).",
)


@click.group()
@click.pass_context
def main(ctx: click.Context):
    """Dynamic difficulty evaluation tools."""
    try:
        settings = Settings.from_env()
        setup_logging(settings.log_format, settings.log_level)
    except (RuntimeError, ValueError) as exc:
        _fail(str(exc))
    ctx.obj = settings


@main.command()
@click.option(
    "--preset", "preset_name",
    type=click.Choice(list(PRESETS.keys())),
    help="Evaluate a built-in player scenario.",
)
@click.option(
    "--snapshot", "snapshot_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Evaluate a player snapshot loaded from JSON.",
)
@config_option
@click.option("--apply", "apply_result", is_flag=True, help="Persist the result and notify modifiers.")
@click.pass_obj
def evaluate(
    settings: Settings,
    preset_name: str | None,
    snapshot_file: Path | None,
    config_path: Path | None,
    apply_result: bool,
):
    """Evaluate one player and print the result as JSON."""
    if preset_name and snapshot_file:
        _fail("Specify either --preset or --snapshot, not both.")
    if not preset_name and not snapshot_file:
        _fail("Specify --preset or --snapshot.")

    if snapshot_file:
        try:
            snapshot = load_snapshot(snapshot_file)
        except DifficultyError as exc:
            _fail(str(exc))
    else:
        snapshot = PRESETS[preset_name]

    config = _resolve_config(config_path, settings)
    service = _build_service(snapshot, config, settings)

    result = service.on_session_start() if apply_result else service.evaluate()
    payload = result.to_dict()
    payload["applied"] = apply_result
    if apply_result:
        payload["stored_difficulty"] = service.current_difficulty
    _echo_json(payload)


@main.command("list-presets")
def list_presets():
    """List built-in player scenarios."""
    for name, snapshot in PRESETS.items():
        click.echo(f"{name}:")
        click.echo(f"  {PRESET_DESCRIPTIONS.get(name, '')}")
        stored = "none" if not snapshot.current_difficulty else f"{snapshot.current_difficulty:.1f}"
        click.echo(f"  Stored difficulty: {stored}")
        sections = [
            section
            for section in ("streaks", "time_away", "quits", "level_progress", "session_history")
            if getattr(snapshot, section) is not None
        ]
        click.echo(f"  Data: {', '.join(sections)}")
        click.echo()


@main.command("show-config")
@config_option
@click.pass_obj
def show_config(settings: Settings, config_path: Path | None):
    """Print the effective difficulty configuration."""
    _echo_json(dump_config(_resolve_config(config_path, settings)))


@main.command("generate-config")
@click.option(
    "--stats", "stats_file",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Game analytics (GameStats) as JSON.",
)
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Write config to JSON file.")
def generate_config_command(stats_file: Path, output: Path | None):
    """Generate a difficulty configuration from game analytics."""
    try:
        stats = load_game_stats(stats_file)
    except DifficultyError as exc:
        _fail(str(exc))

    payload = dump_config(generate_config(stats))
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(json.dumps(payload, indent=2, sort_keys=True) + "\n", encoding="utf-8")
        click.echo(f"Wrote config to {output}")
    else:
        _echo_json(payload)


@main.command()
@click.option(
    "--preset", "preset_name",
    type=click.Choice(list(PRESETS.keys())),
    default="frustrated_player",
    show_default=True,
    help="Player scenario to evaluate repeatedly.",
)
@click.option("--iterations", type=click.IntRange(min=1), default=1000, show_default=True)
@click.option("--budget-ms", type=click.FloatRange(min=0, min_open=True), default=2.0, show_default=True)
@config_option
@click.pass_obj
def benchmark(
    settings: Settings,
    preset_name: str,
    iterations: int,
    budget_ms: float,
    config_path: Path | None,
):
    """Time repeated evaluations against a p95 budget (exit 1 when over budget)."""
    config = _resolve_config(config_path, settings)
    service = _build_service(PRESETS[preset_name], config, settings)

    summary = run_benchmark(service, iterations=iterations, label=preset_name)
    report = evaluate_budget(summary, BudgetPolicy(p95_budget_ms=budget_ms))
    _echo_json(report)
    if report["status"] != "pass":
        sys.exit(1)
