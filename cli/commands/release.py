"""Release command."""

import click
from pathlib import Path
from typing import Optional

from cli.config import load_config, open_publisher
from skillpack_engine.outputs import ActionOutputs
from skillpack_engine.pipeline import release_manifest


@click.command()
@click.argument("manifest_path", type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path))
@click.option("--release-prefix", envvar="INPUT_RELEASE_PREFIX", help="Prefix for release tags")
@click.option("--draft", envvar="INPUT_DRAFT", is_flag=True, default=False, help="Create releases as drafts")
def release(manifest_path: Path, release_prefix: Optional[str], draft: bool):
    """Create releases for the groups in an existing manifest."""
    config = load_config(release=True, release_prefix=release_prefix, draft=draft)

    try:
        publisher = open_publisher(config)
    except ValueError as e:
        click.echo(f"❌ {e}", err=True)
        raise click.Abort()

    click.echo(f"🚀 Releasing from manifest: {manifest_path}")
    releases = release_manifest(
        manifest_path,
        publisher,
        prefix=config.release_prefix,
        draft=config.draft,
        outputs=ActionOutputs(config.output_file),
    )

    for created in releases:
        click.echo(f"   {created.tag} {created.url}")
    click.echo(f"✅ Created {len(releases)} release(s)")
