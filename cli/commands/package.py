"""Package command."""

import click
from pathlib import Path
from typing import Optional

from loguru import logger

from cli.config import load_config, open_publisher, open_revision_control
from cli.options import selection_options
from skillpack_engine.errors import ChangeDetectionError
from skillpack_engine.outputs import ActionOutputs
from skillpack_engine.pipeline import run_pipeline


@click.command()
@selection_options
@click.option("--release", "create_release", envvar="INPUT_CREATE_RELEASE", is_flag=True, default=False,
              help="Create releases for packaged skills")
@click.option("--release-prefix", envvar="INPUT_RELEASE_PREFIX", help="Prefix for release tags")
@click.option("--draft", envvar="INPUT_DRAFT", is_flag=True, default=False, help="Create releases as drafts")
@click.pass_context
def package(
    ctx: click.Context,
    skill_paths: Optional[str],
    skills_dir: Optional[Path],
    output_dir: Optional[Path],
    full_build: bool,
    baseline: Optional[str],
    create_release: bool,
    release_prefix: Optional[str],
    draft: bool,
):
    """Package skills into versioned zip archives and write manifest.json."""
    config = load_config(
        skill_paths=skill_paths,
        skills_dir=skills_dir,
        output_dir=output_dir,
        full_build=full_build,
        baseline=baseline or None,
        release=create_release,
        release_prefix=release_prefix,
        draft=draft,
    )

    try:
        publisher = open_publisher(config) if config.release else None
    except ValueError as e:
        click.echo(f"❌ {e}", err=True)
        raise click.Abort()

    try:
        run = run_pipeline(
            config,
            revisions=open_revision_control(config),
            publisher=publisher,
            outputs=ActionOutputs(config.output_file),
        )
    except ChangeDetectionError as e:
        logger.error(str(e))
        click.echo(f"❌ Change detection failed: {e}", err=True)
        raise click.Abort()

    if not run.skill_paths:
        click.echo("No skills found to process")
        return

    click.echo(f"📦 Packaged {len(run.results)}/{len(run.skill_paths)} skill(s)")
    if run.manifest_path:
        click.echo(f"   Manifest: {run.manifest_path}")
    for created in run.releases:
        click.echo(f"   Release: {created.tag} {created.url}")

    if not run.valid:
        ctx.exit(1)
