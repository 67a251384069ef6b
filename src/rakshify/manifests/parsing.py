"""Manifest file parsing and writing utilities.

This module provides functions for decoding multi-document YAML manifest
files and for writing generated documents back atomically.
"""

import contextlib
import os
from collections.abc import Iterable
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any, TextIO

import yaml

from rakshify.exceptions import ManifestIOError, ManifestParsingError

DOCUMENT_SEPARATOR = "---\n"


def load_documents(manifest_path: str | Path) -> list[dict[str, Any]]:
    """Parse every YAML document of a manifest file.

    Args:
        manifest_path: Path to the manifest file.

    Returns:
        The non-empty documents, in file order.

    Raises:
        ManifestIOError: If the file cannot be read.
        ManifestParsingError: If the file contains malformed YAML or a
            document that is not a mapping.

    """
    try:
        with open(manifest_path, encoding="utf-8") as stream:
            docs = [doc for doc in yaml.safe_load_all(stream) if doc is not None]
    except UnicodeDecodeError as err:
        raise ManifestParsingError(f"Manifest '{manifest_path}' is not valid UTF-8: {err.reason}") from err
    except OSError as err:
        raise ManifestIOError(f"Cannot read manifest '{manifest_path}': {err.strerror}") from err
    except yaml.YAMLError as err:
        raise ManifestParsingError(f"Manifest '{manifest_path}' contains malformed YAML: {err}") from err

    for index, doc in enumerate(docs):
        if not isinstance(doc, dict):
            raise ManifestParsingError(
                f"Document {index} of '{manifest_path}' is not a YAML mapping. "
                "Expected a Kubernetes resource document."
            )
    return docs


def dump_documents(documents: Iterable[dict[str, Any]], stream: TextIO) -> None:
    """Write documents to a stream, each preceded by a ``---`` marker."""
    for document in documents:
        stream.write(DOCUMENT_SEPARATOR)
        yaml.safe_dump(document, stream, default_flow_style=False)


def write_documents(output_path: Path, documents: Iterable[dict[str, Any]]) -> None:
    """Atomically write documents to a file.

    The documents are written to a temporary file in the target directory,
    which replaces the destination only once it has been fully written.
    Missing parent directories are created.

    Args:
        output_path: Destination file.
        documents: Documents to serialize, in order.

    Raises:
        ManifestIOError: If the directory or file cannot be written.

    """
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        temp_file = NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=output_path.parent,
            prefix=f".{output_path.name}.",
            suffix=".tmp",
            delete=False,
        )
    except OSError as err:
        raise ManifestIOError(f"Cannot write to output path '{output_path}': {err.strerror}") from err

    temp_path = Path(temp_file.name)
    try:
        with temp_file:
            dump_documents(documents, temp_file)
        os.replace(temp_path, output_path)
    except OSError as err:
        with contextlib.suppress(OSError):
            temp_path.unlink(missing_ok=True)
        raise ManifestIOError(f"Cannot write to output path '{output_path}': {err.strerror}") from err
    except BaseException:
        with contextlib.suppress(OSError):
            temp_path.unlink(missing_ok=True)
        raise
