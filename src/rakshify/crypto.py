"""Symmetric encryption gateway for container specs.

Container specs are sealed with AES-256-GCM. The ciphertext stored in the
companion ConfigMap is the base64 encoding of ``nonce || tag || ciphertext``
so a consumer holding the same key can restore the original document.
"""

import base64
import binascii
import hashlib
from pathlib import Path

from Crypto.Cipher import AES
from Crypto.Random import get_random_bytes
from icecream import ic

from rakshify.exceptions import EncryptionError

AES_NONCE_SIZE = 12
AES_TAG_SIZE = 16

KEY_FILE_ENV = "RAKSHIFY_KEY_FILE"


def load_encryption_key(key_path: str | Path) -> bytes:
    """Load and normalize the symmetric key from a key file.

    The raw value is hashed so that any key material yields a fixed-length
    key suitable for AES-256.

    Args:
        key_path: Path to the key file.

    Returns:
        The 32-byte derived key.

    Raises:
        EncryptionError: If the file cannot be read or is empty.

    """
    try:
        raw = Path(key_path).read_bytes().strip()
    except OSError as err:
        raise EncryptionError(f"Cannot read key file '{key_path}': {err.strerror}") from err

    if not raw:
        raise EncryptionError(f"Key file '{key_path}' is empty")

    return hashlib.sha256(raw).digest()


def encrypt_config(data: bytes, key: bytes) -> str:
    """Encrypt a serialized container spec.

    Args:
        data: The plaintext bytes.
        key: A 16, 24 or 32 byte AES key.

    Returns:
        The ASCII ciphertext blob.

    Raises:
        EncryptionError: If the cipher cannot be created or fails.

    """
    try:
        cipher = AES.new(key, AES.MODE_GCM, nonce=get_random_bytes(AES_NONCE_SIZE))
        ciphertext, tag = cipher.encrypt_and_digest(data)
    except (TypeError, ValueError) as err:
        raise EncryptionError(f"Failed to encrypt container spec: {err}") from err

    ic(len(data), len(ciphertext))
    return base64.b64encode(cipher.nonce + tag + ciphertext).decode("ascii")


def decrypt_config(blob: str, key: bytes) -> bytes:
    """Restore a container spec sealed by :func:`encrypt_config`.

    Raises:
        EncryptionError: If the blob is malformed or fails authentication.

    """
    try:
        raw = base64.b64decode(blob, validate=True)
    except (binascii.Error, ValueError) as err:
        raise EncryptionError(f"Ciphertext is not valid base64: {err}") from err

    if len(raw) < AES_NONCE_SIZE + AES_TAG_SIZE:
        raise EncryptionError("Ciphertext is too short")

    nonce = raw[:AES_NONCE_SIZE]
    tag = raw[AES_NONCE_SIZE : AES_NONCE_SIZE + AES_TAG_SIZE]
    ciphertext = raw[AES_NONCE_SIZE + AES_TAG_SIZE :]
    try:
        cipher = AES.new(key, AES.MODE_GCM, nonce=nonce)
        return cipher.decrypt_and_verify(ciphertext, tag)
    except (TypeError, ValueError) as err:
        raise EncryptionError(f"Failed to decrypt container spec: {err}") from err
