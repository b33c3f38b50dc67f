import sys
from pathlib import Path

import click

from music_indexer.config import ConfigError, MediaType, load_config
from music_indexer.index_writer import IndexWriteError
from music_indexer.scanner import run_for_type

CONFIG_HELP = """
\b
Config keys:
  MUSIC_DIR=/path (repeatable, fallback for both types)
  MP3_DIR=/path (repeatable, preferred for mp3)
  FLAC_DIR=/path (repeatable, preferred for flac)
  INDEX_ROOT=/index
  ENABLE_TYPES=mp3,flac
  MP3_INDEXES=alpha,genre,year,groups
  FLAC_INDEXES=alpha,genre,groups,year
  MP3_RELEASE_DEPTH=1 (example: root/YYYY-MM-DD/<release>/... => 2)
  FLAC_RELEASE_DEPTH=1 (example: root/YYYY-MM-DD/<release>/... => 2)
  (Also supported index names: artist, album)
  RELATIVE_SYMLINKS=true|false
  CLEAN_ON_START=true|false
  FOLLOW_SYMLINKS=true|false

\b
Per-type summaries are printed on standard output,
warnings and errors on standard error.
"""


@click.command(
    epilog=CONFIG_HELP, context_settings={"help_option_names": ["-h", "--help"]}
)
@click.version_option()
@click.argument(
    "config_path", envvar="MUSIC_INDEXER_CONFIG", type=click.Path(path_type=Path)
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Report what would be linked without touching the filesystem",
)
@click.option(
    "-f",
    "--force",
    is_flag=True,
    help="Replace existing links in the index",
)
@click.option(
    "--clean/--no-clean",
    default=False,
    help="Empty the targeted facet directories first (overrides CLEAN_ON_START)",
)
def cli(config_path, dry_run, force, clean):
    """Build a browsable symlink index of the releases in a music collection."""
    try:
        config = load_config(config_path)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    ctx = click.get_current_context()
    if ctx.get_parameter_source("clean") is click.core.ParameterSource.DEFAULT:
        clean = config.clean_on_start

    click.echo(f"Config: {config_path}")
    click.echo(f"Index root: {config.index_root}")
    click.echo(f"Dry run: {dry_run}")
    click.echo(f"Force relink: {force}")
    click.echo(f"Clean: {clean}")

    # Types are always processed mp3 first, then flac
    for media_type in MediaType:
        if media_type not in config.enable_types:
            continue

        try:
            result = run_for_type(
                media_type,
                config,
                config.indexes(media_type),
                force=force,
                clean=clean,
                dry_run=dry_run,
            )
        except (IndexWriteError, OSError) as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)

        report_result(media_type, result)


def report_result(media_type, result):
    """Print the per-type summary of a scan."""
    prefix = f"[{media_type.value}]"

    for warning in result["warnings"]:
        click.echo(f"{prefix} Warning: {warning}", err=True)

    click.echo(
        f"{prefix} scanned files: {result['files_scanned']}, "
        f"indexed releases: {result['releases_indexed']}"
    )
    click.echo(
        f"{prefix} links created: {result['links_created']}, "
        f"replaced: {result['links_replaced']}, "
        f"skipped: {result['links_skipped']}"
    )
