"""Command-line interface for uploadmissing.

    s3-upload-missing LOCAL_ROOT BUCKET REMOTE_PATH [--acl=ACL] [--delete]
                      [--chmod-if-needed] [--verbose]

Exit codes: 0 on success, 1 on a usage error or a failed run.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import click

from uploadmissing.core.config import (
    CANNED_ACLS,
    DEFAULT_ACL,
    DEFAULT_CONCURRENCY,
    StorageConfig,
    SyncConfig,
)

LOG_FORMAT = "%(message)s"


class MirrorCommand(click.Command):
    """Command whose usage errors exit with status 1."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = 1
            raise


def setup_logging(verbose: bool) -> None:
    """Send uploadmissing logs to stderr.

    Progress is shown only with --verbose; otherwise the handler passes
    nothing below CRITICAL and the CLI reports failures itself.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.setLevel(logging.INFO if verbose else logging.CRITICAL)

    package_logger = logging.getLogger("uploadmissing")
    for existing in package_logger.handlers[:]:
        package_logger.removeHandler(existing)
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.INFO if verbose else logging.WARNING)
    # Prevent propagation to root logger
    package_logger.propagate = False


@click.command(cls=MirrorCommand)
@click.argument("local_root", type=click.Path(exists=True, file_okay=False))
@click.argument("bucket")
@click.argument("remote_path")
@click.option(
    "--acl",
    type=click.Choice(CANNED_ACLS),
    default=DEFAULT_ACL,
    show_default=True,
    help="Canned ACL for uploaded objects.",
)
@click.option("--delete", is_flag=True, help="Delete remote objects with no local file.")
@click.option(
    "--chmod-if-needed",
    is_flag=True,
    help="Temporarily make unreadable files readable to upload them.",
)
@click.option("--verbose", "-v", is_flag=True, help="Log progress to stderr.")
@click.option("--dry-run", is_flag=True, help="Only report what would change.")
@click.option(
    "--exclude",
    multiple=True,
    metavar="PATTERN",
    help="Skip local files matching PATTERN (repeatable).",
)
@click.option(
    "--concurrency",
    type=click.IntRange(min=1),
    default=DEFAULT_CONCURRENCY,
    show_default=True,
    help="Uploads in flight at once.",
)
@click.option("--endpoint-url", default=None, help="S3-compatible endpoint URL.")
@click.option("--region", default=None, help="Bucket region.")
@click.version_option(package_name="s3-upload-missing")
def cli(
    local_root: str,
    bucket: str,
    remote_path: str,
    acl: str,
    delete: bool,
    chmod_if_needed: bool,
    verbose: bool,
    dry_run: bool,
    exclude: tuple[str, ...],
    concurrency: int,
    endpoint_url: str | None,
    region: str | None,
) -> None:
    """Upload files missing from BUCKET/REMOTE_PATH.

    Files under LOCAL_ROOT whose relative name is absent from the bucket
    are uploaded. Existing objects are never overwritten. With --delete,
    objects under REMOTE_PATH with no local counterpart are removed.
    """
    from uploadmissing.storage import create_storage
    from uploadmissing.sync import SyncEngine

    setup_logging(verbose)

    config = SyncConfig(
        local_root=local_root,
        bucket=bucket,
        remote_path=remote_path,
        acl=acl,
        delete=delete,
        chmod_if_needed=chmod_if_needed,
        dry_run=dry_run,
        concurrency=concurrency,
        exclude=list(exclude),
    )

    storage_config = StorageConfig.from_env()
    if endpoint_url:
        storage_config.endpoint_url = endpoint_url
    if region:
        storage_config.region = region

    storage = create_storage(bucket, storage_config)
    report = SyncEngine(config, storage).run()

    if not report.success:
        click.echo(f"Error: {report.error}", err=True)
        sys.exit(1)


def main(args: Any = None) -> None:
    """Entry point for the CLI."""
    cli(args)
