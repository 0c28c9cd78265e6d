"""Options shared by commands that select skills."""

from pathlib import Path

import click


def selection_options(f):
    """Add the skill selection options, each readable from its INPUT_* variable."""
    options = [
        click.option(
            "--skill-paths",
            envvar="INPUT_SKILL_PATHS",
            help="Newline-separated skill directories; disables discovery and change detection",
        ),
        click.option(
            "--skills-dir",
            envvar="INPUT_SKILLS_DIR",
            type=click.Path(path_type=Path),
            help="Directory scanned for SKILL.md files (default: skills)",
        ),
        click.option(
            "--output-dir",
            envvar="INPUT_OUTPUT_DIR",
            type=click.Path(file_okay=False, path_type=Path),
            help="Directory for archives and manifest (default: dist)",
        ),
        click.option(
            "--full-build",
            envvar="INPUT_FULL_BUILD",
            is_flag=True,
            default=False,
            help="Package every discovered skill, skipping change detection",
        ),
        click.option("--baseline", envvar="INPUT_BASELINE", help="Git ref to detect changes against"),
    ]
    for option in reversed(options):
        f = option(f)
    return f
