"""Custom exceptions for rakshify.

This module defines the exception hierarchy used throughout the application
to tell file-local skips apart from failures that stop a run.
"""


class RakshifyError(Exception):
    """Base exception for all rakshify errors.

    All custom exceptions in this package inherit from this class,
    allowing callers to catch all rakshify errors with a single
    except clause if desired.
    """

    pass


class UnregisteredKindError(RakshifyError):
    """Raised when a document's apiVersion/kind has no known schema.

    This is the only condition that is skipped rather than treated as a
    failure. The document is reported with a warning and ignored.
    """

    def __init__(self, api_version: str, kind: str) -> None:
        super().__init__(f"no kind {kind!r} is registered for version {api_version!r}")
        self.api_version = api_version
        self.kind = kind


class ShapeMismatchError(RakshifyError):
    """Raised when a workload does not expose the expected metadata/pod spec.

    This can occur when:
    - The metadata block or its name is missing
    - A required field on the pod spec path is missing or null (e.g. spec.template)
    - A field on the path is not a mapping
    """

    pass


class EncryptionError(RakshifyError):
    """Raised when the encryption gateway fails.

    This can occur when:
    - The key file is missing, unreadable or empty
    - The key has an invalid length for AES
    - A ciphertext cannot be decoded or fails authentication
    """

    pass


class ManifestParsingError(RakshifyError):
    """Raised when parsing a manifest file fails.

    This can occur when:
    - The file is not valid YAML
    - A document is not a YAML mapping
    - A document lacks apiVersion or kind
    """

    pass


class ManifestIOError(RakshifyError):
    """Raised when reading or writing a manifest file fails."""

    pass


class PipelineOrderError(RakshifyError):
    """Raised when a transformation step is invoked out of order."""

    pass
