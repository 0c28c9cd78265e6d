"""Validate command."""

import click
from pathlib import Path
from typing import Optional

from cli.config import load_config, open_revision_control
from cli.options import selection_options
from skillpack_engine.errors import ChangeDetectionError
from skillpack_engine.outputs import ActionOutputs
from skillpack_engine.pipeline import validate_skills


@click.command()
@selection_options
@click.pass_context
def validate(
    ctx: click.Context,
    skill_paths: Optional[str],
    skills_dir: Optional[Path],
    output_dir: Optional[Path],
    full_build: bool,
    baseline: Optional[str],
):
    """Validate skills without writing archives."""
    config = load_config(
        skill_paths=skill_paths,
        skills_dir=skills_dir,
        output_dir=output_dir,
        full_build=full_build,
        baseline=baseline or None,
    )

    try:
        all_valid = validate_skills(config, open_revision_control(config), ActionOutputs(config.output_file))
    except ChangeDetectionError as e:
        click.echo(f"❌ Change detection failed: {e}", err=True)
        raise click.Abort()

    if all_valid:
        click.echo("✅ All skills valid")
    else:
        click.echo("❌ Some skills are invalid", err=True)
        ctx.exit(1)
