"""
Persistence codec for the hash database.

The on-disk format is a zlib-compressed MessagePack map from canonical path
(str) to fingerprint (bin). There is no header or version byte, so files
written with a different HASH_SIZE are rejected as malformed.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
import zlib
from pathlib import Path
from typing import Mapping

import msgpack

from ..config import FINGERPRINT_BYTES
from ..exceptions import DecodeError, EncodeError, FilesystemError
from ..models import Fingerprint

logger = logging.getLogger(__name__)

# Error handler Python uses for undecodable bytes in filenames
UNICODE_ERRORS = "surrogateescape"


def encode(entries: Mapping[str, Fingerprint]) -> bytes:
    """
    Serialize a path -> fingerprint mapping.

    Raises:
        EncodeError: If a path or fingerprint cannot be represented
    """
    payload = {}
    for path, fingerprint in entries.items():
        if not isinstance(path, str) or not isinstance(fingerprint, Fingerprint):
            raise EncodeError(f"unsupported entry {path!r}: {type(fingerprint).__name__}")
        payload[path] = fingerprint.data

    try:
        # use_bin_type writes fingerprints as raw bin, not as str or int arrays.
        # surrogateescape keeps paths that are not valid UTF-8 byte-exact.
        packed = msgpack.packb(payload, use_bin_type=True, unicode_errors=UNICODE_ERRORS)
    except (TypeError, ValueError, OverflowError) as e:
        raise EncodeError(str(e)) from e

    return zlib.compress(packed)


def decode(blob: bytes) -> dict[str, Fingerprint]:
    """
    Deserialize the output of encode().

    Raises:
        DecodeError: If the stream is corrupt or has an unexpected structure
    """
    try:
        packed = zlib.decompress(blob)
    except zlib.error as e:
        raise DecodeError(f"bad compressed stream: {e}") from e

    try:
        payload = msgpack.unpackb(
            packed, raw=False, strict_map_key=True, unicode_errors=UNICODE_ERRORS
        )
    except (ValueError, TypeError, msgpack.exceptions.UnpackException) as e:
        raise DecodeError(f"malformed MessagePack data: {e}") from e

    if not isinstance(payload, dict):
        raise DecodeError(f"expected a map, found {type(payload).__name__}")

    entries: dict[str, Fingerprint] = {}
    for path, data in payload.items():
        # strict_map_key still lets bin keys through as bytes
        if not isinstance(path, str):
            raise DecodeError(f"path {path!r} is not a string")
        if not isinstance(data, bytes):
            raise DecodeError(f"fingerprint for {path} is {type(data).__name__}, not bytes")
        try:
            entries[path] = Fingerprint.from_bytes(data, expected_length=FINGERPRINT_BYTES)
        except ValueError as e:
            raise DecodeError(f"bad fingerprint for {path}: {e}") from e

    return entries


def _file_mode(filepath: Path) -> int:
    """Permission bits for a saved database: the existing file's, else the umask default."""
    try:
        return stat.S_IMODE(os.stat(filepath).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def save(entries: Mapping[str, Fingerprint], filepath: str | Path) -> None:
    """
    Write a mapping to a database file.

    The data is written to a temporary file in the same directory and moved
    into place, so an interrupted save never leaves a truncated database.
    An existing file keeps its permissions.

    Raises:
        EncodeError: If the mapping cannot be encoded
        FilesystemError: If the file cannot be written
    """
    filepath = Path(filepath)
    blob = encode(entries)

    tmp_path = None
    try:
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{filepath.name}.", suffix=".tmp", dir=filepath.parent
        )
        with os.fdopen(fd, 'wb') as f:
            f.write(blob)
        os.chmod(tmp_path, _file_mode(filepath))
        os.replace(tmp_path, filepath)
    except OSError as e:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise FilesystemError(str(filepath), e) from e

    logger.debug(f"Wrote {len(entries):,} entries ({len(blob):,} bytes) to {filepath}")


def load(filepath: str | Path) -> dict[str, Fingerprint]:
    """
    Read a mapping from a database file.

    Raises:
        DecodeError: If the file contents are malformed
        FilesystemError: If the file cannot be read
    """
    try:
        blob = Path(filepath).read_bytes()
    except OSError as e:
        raise FilesystemError(str(filepath), e) from e

    entries = decode(blob)
    logger.debug(f"Read {len(entries):,} entries from {filepath}")
    return entries


__all__ = ['encode', 'decode', 'save', 'load']
