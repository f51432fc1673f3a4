"""Short hashes that sign stream links."""

from __future__ import annotations

from .types import HashableFile


def pack_file(file_name: str, file_size: int, mime_type: str, file_id: int) -> str:
    """Return the full hash of a file's properties."""
    return HashableFile(file_name, file_size, mime_type, file_id).pack()


def get_short_hash(full_hash: str, length: int) -> str:
    """Return the first ``length`` characters of a full hash."""
    if not 0 <= length <= len(full_hash):
        raise ValueError(f"hash length {length} out of range for a {len(full_hash)}-character hash")
    return full_hash[:length]


def check_hash(input_hash: str, expected_hash: str, length: int) -> bool:
    """Tell whether a short hash from a link matches the expected full hash."""
    return input_hash == get_short_hash(expected_hash, length)