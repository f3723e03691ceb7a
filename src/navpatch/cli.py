from __future__ import annotations

import warnings
from pathlib import Path
from typing import Optional

import typer

from navpatch.catalog import select_profile
from navpatch.config import load_settings
from navpatch.exceptions import NavPatchError, PatchSkippedWarning
from navpatch.host import read_host_source
from navpatch.model import FeatureFlags, SynthesisPlan
from navpatch.pipeline import synthesize_navigation_module
from navpatch.schema import SynthesisReportDTO

app = typer.Typer(add_completion=False)

_EXIT_HOST_INCOMPATIBLE = 2


def _plan_or_exit(
    host_source: Path,
    host_version: Optional[str],
    numbered_items: Optional[bool],
    config: Optional[Path],
) -> tuple[SynthesisPlan, str]:
    settings = load_settings(config_path=config)
    version = host_version or settings.host_version
    if not version:
        typer.echo(
            "Host version required: pass --host-version or set [host] version.",
            err=True,
        )
        raise typer.Exit(code=_EXIT_HOST_INCOMPATIBLE)
    features = settings.features
    if numbered_items is not None:
        features = FeatureFlags(arrays_tuples_numbered_items=numbered_items)
    try:
        profile = select_profile(version)
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", PatchSkippedWarning)
            plan = synthesize_navigation_module(
                read_host_source(host_source), profile, features
            )
    except NavPatchError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=_EXIT_HOST_INCOMPATIBLE) from exc
    for message in plan.warnings:
        typer.echo(message, err=True)
    return plan, version


@app.command("synthesize")
def synthesize(
    host_source: Path = typer.Argument(..., help="Host entry script to patch."),
    host_version: Optional[str] = typer.Option(None, "--host-version"),
    numbered_items: Optional[bool] = typer.Option(
        None, "--numbered-items/--no-numbered-items"
    ),
    config: Optional[Path] = typer.Option(None, "--config"),
    output: Optional[Path] = typer.Option(None, "--output", "-o"),
) -> None:
    """Print the patched outline module as it would be compiled."""
    plan, _version = _plan_or_exit(host_source, host_version, numbered_items, config)
    if output is None:
        typer.echo(plan.module_text, nl=False)
        return
    output.write_text(plan.module_text, encoding="utf-8")


@app.command("report")
def report(
    host_source: Path = typer.Argument(..., help="Host entry script to patch."),
    host_version: Optional[str] = typer.Option(None, "--host-version"),
    numbered_items: Optional[bool] = typer.Option(
        None, "--numbered-items/--no-numbered-items"
    ),
    config: Optional[Path] = typer.Option(None, "--config"),
) -> None:
    """Summarize which patches applied and which names were rebound."""
    plan, version = _plan_or_exit(host_source, host_version, numbered_items, config)
    payload = SynthesisReportDTO.from_plan(plan, host_version=version)
    typer.echo(payload.model_dump_json(indent=2))
