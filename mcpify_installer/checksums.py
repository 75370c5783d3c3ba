"""
Checksum manifest handling and SHA-256 verification.

Release checksum manifests use the ``sha256sum`` output format: one
``<hex-digest>  <filename>`` pair per line. A file is only trusted once
its recomputed digest equals the manifest entry for its exact name.
"""

import hashlib
import hmac
import logging
from pathlib import Path
from typing import Dict, Optional, Union

from mcpify_installer.errors import ChecksumMismatchError, ChecksumNotFoundError

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


def parse_manifest(text: str) -> Dict[str, str]:
    """
    Parse a checksum manifest into a filename -> digest mapping.

    Lines with fewer than two fields are skipped. A leading ``*`` on the
    filename (binary mode marker) is dropped. When a filename appears
    more than once the first entry wins.

    Args:
        text: Manifest contents

    Returns:
        Dictionary mapping file names to lowercase hex digests
    """
    entries: Dict[str, str] = {}
    for line in text.splitlines():
        fields = line.split()
        if len(fields) < 2:
            continue
        digest, filename = fields[0], fields[1]
        if filename.startswith("*"):
            filename = filename[1:]
        entries.setdefault(filename, digest.lower())
    return entries


def lookup_digest(manifest_text: str, filename: str) -> str:
    """
    Find the expected digest for a file in a checksum manifest.

    Args:
        manifest_text: Manifest contents
        filename: Exact artifact file name

    Returns:
        Expected hex digest

    Raises:
        ChecksumNotFoundError: If the manifest has no entry for filename
    """
    digest = parse_manifest(manifest_text).get(filename)
    if not digest:
        raise ChecksumNotFoundError(f"Checksum not found for {filename}")
    return digest


def hash_file(filepath: Union[str, Path]) -> str:
    """
    Compute SHA-256 hash of a file.

    Args:
        filepath: Path to the file to hash

    Returns:
        64-character lowercase hex string
    """
    hasher = hashlib.sha256()
    with open(filepath, "rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            hasher.update(chunk)
    return hasher.hexdigest()


def verify_file(filepath: Union[str, Path], expected: str, label: Optional[str] = None) -> str:
    """
    Verify a file against its expected SHA-256 digest.

    Args:
        filepath: File to check
        expected: Expected hex digest (any case)
        label: Name used in the error message (defaults to the file name)

    Returns:
        The computed digest

    Raises:
        ChecksumMismatchError: If the digests differ
    """
    actual = hash_file(filepath)
    expected = expected.strip().lower()

    if not hmac.compare_digest(actual.encode(), expected.encode()):
        raise ChecksumMismatchError(label or Path(filepath).name, expected, actual)

    logger.debug(f"Checksum OK for {label or filepath}: {actual}")
    return actual
