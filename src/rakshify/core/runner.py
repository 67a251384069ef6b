"""Batch processing of manifest files.

This module discovers manifest files, runs every transformable document of
each file through the pipeline and writes one secure manifest per input
file. Files are independent units of work processed by a bounded pool of
worker threads.

A failed file never rolls back files already written. In fail-fast mode,
files that have not started yet when a failure happens are reported as
cancelled.
"""

import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Any

from icecream import ic

from rakshify import console
from rakshify.core.transform import secure_object
from rakshify.exceptions import ManifestIOError, RakshifyError, UnregisteredKindError
from rakshify.manifests.parsing import load_documents, write_documents
from rakshify.manifests.registry import resolve_kind
from rakshify.models import FileResult, FileStatus, TransformConfig

MANIFEST_SUFFIXES = (".yaml", ".yml")
SECURE_FILE_SUFFIX = "-sc"


def secure_file_name(file: Path) -> str:
    """Return the output file name: ``app.yaml`` -> ``app-sc.yaml``."""
    return f"{file.stem}{SECURE_FILE_SUFFIX}{file.suffix}"


def secure_file_path(file: Path, src: Path, output_dir: Path | None = None) -> Path:
    """Return where the secure manifest for ``file`` is written.

    Without an output directory the file is written beside its input.
    Otherwise its path relative to the input root directory (or just its
    name, when the input root is the file itself) is placed under
    ``output_dir``.
    """
    secure = file.with_name(secure_file_name(file))
    if output_dir is None:
        return secure
    relative = secure.relative_to(src) if src.is_dir() else Path(secure.name)
    return output_dir / relative


def _is_generated(path: Path) -> bool:
    return path.stem.endswith(SECURE_FILE_SUFFIX)


def find_manifests(src: str | Path) -> list[Path]:
    """Find all manifest files under a path.

    Args:
        src: A manifest file or a directory searched recursively.

    Returns:
        Sorted ``.yaml``/``.yml`` paths. Previously generated ``-sc`` files
        are left out of directory searches.

    Raises:
        ManifestIOError: If the path does not exist.

    """
    root = Path(src)
    if not root.exists():
        raise ManifestIOError(f"Input path '{src}' does not exist")
    if root.is_file():
        return [root] if root.suffix in MANIFEST_SUFFIXES else []
    return sorted(
        path
        for path in root.rglob("*")
        if path.is_file() and path.suffix in MANIFEST_SUFFIXES and not _is_generated(path)
    )


def process_file(file: Path, src: Path, config: TransformConfig) -> FileResult:
    """Transform every registered document of one manifest file.

    For each transformed document the companion ConfigMap and then the
    SecureContainer are written, in input order, to the secure manifest.

    Args:
        file: The manifest file.
        src: The input root the file was discovered under.
        config: Run configuration.

    Returns:
        A SUCCESS result with the output path, or SKIPPED when no document
        of the file has a registered kind.

    Raises:
        RakshifyError: If reading, transforming or writing the file fails.

    """
    console.action(f"Processing {file}...")
    outputs: list[dict[str, Any]] = []
    for document in load_documents(file):
        try:
            resolve_kind(document, config.extra_kinds)
        except UnregisteredKindError as err:
            console.unsupported(file, f"{err.api_version}/{err.kind}")
            continue
        result = secure_object(document, config)
        outputs.extend([result.config_map, result.wrapper])

    if not outputs:
        return FileResult(path=file, status=FileStatus.SKIPPED)

    output = secure_file_path(file, src, config.output_dir)
    ic(output)
    write_documents(output, outputs)
    console.step(f"Wrote to {console.highlight(output)}")
    console.success(f"Processing {file}...: DONE")
    return FileResult(path=file, status=FileStatus.SUCCESS, output=output)


def _guarded(
    file: Path, src: Path, config: TransformConfig, stop: threading.Event, keep_going: bool
) -> FileResult:
    if stop.is_set():
        return FileResult(path=file, status=FileStatus.CANCELLED)
    try:
        return process_file(file, src, config)
    except RakshifyError as err:
        console.error(f"{file}: {err}")
        if not keep_going:
            stop.set()
        return FileResult(path=file, status=FileStatus.FAILED, error=err)


def run_batch(
    src: str | Path,
    config: TransformConfig,
    *,
    workers: int = 1,
    keep_going: bool = False,
    on_result: Callable[[FileResult], None] | None = None,
) -> list[FileResult]:
    """Process every manifest file under ``src``.

    Args:
        src: A manifest file or directory.
        config: Run configuration shared read-only by all workers.
        workers: Maximum number of files processed concurrently.
        keep_going: Continue with remaining files after a failure.
        on_result: Called with each result as soon as it is available.

    Returns:
        One result per discovered file, in discovery order.

    Raises:
        ManifestIOError: If ``src`` does not exist.

    """
    root = Path(src)
    files = find_manifests(root)
    ic(files)
    if not files:
        console.warning(f"No manifest files found in {src}")
        return []

    stop = threading.Event()
    results: dict[Path, FileResult] = {}
    with console.create_task_progress() as progress, ThreadPoolExecutor(max_workers=max(1, workers)) as executor:
        task = progress.add_task("Securing manifests", total=len(files))
        futures: dict[Future[FileResult], Path] = {
            executor.submit(_guarded, file, root, config, stop, keep_going): file for file in files
        }
        try:
            for future in as_completed(futures):
                if future.cancelled():
                    continue
                result = future.result()
                results[result.path] = result
                progress.advance(task)
                if on_result is not None:
                    on_result(result)
                if stop.is_set():
                    for pending in futures:
                        pending.cancel()
        except KeyboardInterrupt:
            stop.set()
            for pending in futures:
                pending.cancel()
            raise

    return [results.get(file) or FileResult(path=file, status=FileStatus.CANCELLED) for file in files]
