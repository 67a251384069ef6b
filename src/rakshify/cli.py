#!/usr/bin/env python
"""Command-line interface for rakshify.

This module provides the main CLI entry point for the rakshify tool,
handling command-line argument parsing and running the batch
transformation over the given manifests.
"""

import sys
from pathlib import Path

import click
from icecream import ic

from rakshify import __version__, console
from rakshify.core.runner import run_batch
from rakshify.crypto import KEY_FILE_ENV, load_encryption_key
from rakshify.exceptions import EncryptionError, ManifestIOError
from rakshify.manifests.registry import parse_kind_ref
from rakshify.models import DEFAULT_SCRATCH_IMAGE, FileResult, FileStatus, TransformConfig


def _parse_kinds(values: tuple[str, ...]) -> frozenset[tuple[str, str]]:
    """Parse ``--register-kind`` values into (apiVersion, kind) pairs.

    Raises:
        click.BadParameter: If a value is not of the form <apiVersion>/<Kind>.

    """
    try:
        return frozenset(parse_kind_ref(value) for value in values)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--register-kind") from None


def print_summary(results: list[FileResult]) -> None:
    """Print the per-status file counts of a run."""
    counts = {status: 0 for status in FileStatus}
    for result in results:
        counts[result.status] += 1

    console.newline()
    console.summary_panel(
        "Secure Manifests",
        {
            "Processed": str(counts[FileStatus.SUCCESS]),
            "Skipped": str(counts[FileStatus.SKIPPED]),
            "Failed": str(counts[FileStatus.FAILED]),
            "Cancelled": str(counts[FileStatus.CANCELLED]),
        },
        failed=counts[FileStatus.FAILED] > 0,
    )


@click.command(help="Modify Kubernetes YAML and add the changes required for secure containers")
@click.option("--version", "-v", required=False, is_flag=True, help="print version")
@click.option("--debug", required=False, is_flag=True, help="print debug information")
@click.option("--filename", "-f", required=False, help="manifest file or directory to secure")
@click.option("--image", "-i", required=False, help="secure container runtime image")
@click.option("--output", "-o", required=False, help="directory to write secure manifests to")
@click.option(
    "--scratch-image",
    required=False,
    default=DEFAULT_SCRATCH_IMAGE,
    show_default=True,
    help="image replacing container images",
)
@click.option("--key", "-k", required=False, envvar=KEY_FILE_ENV, help="symmetric key file used for encryption")
@click.option("--vault-secret", required=False, help="secret holding Vault settings to inject as env")
@click.option("--register-kind", multiple=True, help="extra workload kind as <apiVersion>/<Kind> (repeatable)")
@click.option(
    "--workers",
    "-w",
    required=False,
    default=1,
    show_default=True,
    type=click.IntRange(min=1),
    help="files processed concurrently",
)
@click.option("--keep-going", required=False, is_flag=True, help="continue with remaining files after a failure")
def cli(
    version: bool,
    debug: bool,
    filename: str | None,
    image: str | None,
    output: str | None,
    scratch_image: str,
    key: str | None,
    vault_secret: str | None,
    register_kind: tuple[str, ...],
    workers: int,
    keep_going: bool,
) -> None:
    """Process CLI arguments and secure the given manifests.

    Args:
        version: Print version and exit.
        debug: Enable debug output.
        filename: Manifest file or directory to process.
        image: Secure container runtime image reference.
        output: Optional directory receiving the secure manifests.
        scratch_image: Placeholder image written over container images.
        key: Path to the symmetric key file.
        vault_secret: Optional secret name enabling Vault env injection.
        register_kind: Extra workload kinds accepted besides built-in ones.
        workers: Number of files processed concurrently.
        keep_going: Continue past files that fail.

    """
    if not debug:
        ic.disable()

    if version:
        click.echo(__version__)
        return

    if not filename or not image:
        raise click.UsageError("Required flag(s) filename and image")
    if not key:
        raise click.UsageError(f"Required flag key (or {KEY_FILE_ENV} environment variable)")

    extra_kinds = _parse_kinds(register_kind)
    if vault_secret:
        console.info(f"Injecting Vault settings from secret {console.highlight(vault_secret)}")

    try:
        config = TransformConfig(
            secure_image=image,
            key=load_encryption_key(key),
            scratch_image=scratch_image,
            vault_secret=vault_secret or None,
            output_dir=Path(output) if output else None,
            extra_kinds=extra_kinds,
        )
        ic(config)
        results = run_batch(filename, config, workers=workers, keep_going=keep_going)
    except (EncryptionError, ManifestIOError) as e:
        console.error(str(e))
        sys.exit(1)

    print_summary(results)
    if any(result.status is FileStatus.FAILED for result in results):
        sys.exit(1)


if __name__ == "__main__":
    cli()
