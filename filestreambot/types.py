"""Data types shared by the bot and the HTTP server."""

from __future__ import annotations

import hashlib
from dataclasses import asdict, dataclass
from typing import Any


@dataclass
class File:
    """A Telegram document that can be streamed."""

    location: Any
    file_size: int
    file_name: str
    mime_type: str
    id: int


@dataclass(frozen=True)
class HashableFile:
    """The file properties that links are signed with."""

    file_name: str
    file_size: int
    mime_type: str
    file_id: int

    def pack(self) -> str:
        """Return the hex MD5 of the fields written one after another."""
        hasher = hashlib.md5()
        for part in (self.file_name, str(self.file_size), self.mime_type, str(self.file_id)):
            hasher.update(part.encode())
        return hasher.hexdigest()


@dataclass(frozen=True)
class RootResponse:
    """Body of the server's status endpoint."""

    message: str
    ok: bool
    uptime: str
    version: str

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready mapping of this response."""
        return asdict(self)