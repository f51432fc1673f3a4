"""HTTP server that streams files through the bot workers."""

from __future__ import annotations

import logging
import pickle
import re
import time
from typing import Any, Protocol, runtime_checkable

from aiohttp import web

from .cache import FileCache
from .config import Config
from .hashing import check_hash, pack_file
from .ranges import RangeError, parse_range
from .reader import DEFAULT_CHUNK_SIZE, TelegramReader
from .timefmt import time_format
from .types import File, RootResponse
from .workers import Worker, WorkerPool

log = logging.getLogger(__name__)

VERSION = "3.0.0"
_CACHE_SECONDS = 3600
_DEFAULT_MIME_TYPE = "application/octet-stream"
_INT_RE = re.compile(r"[+-]?\d+")


@runtime_checkable
class FileSource(Protocol):
    """What a worker's client must offer for files to be streamed from it."""

    async def get_file(self, message_id: int) -> File:
        """Return the file attached to a message of the log channel."""
        ...

    async def fetch_chunk(self, location: Any, offset: int, limit: int) -> bytes:
        """Return up to ``limit`` bytes of a file starting at ``offset``."""
        ...


def _error(status: int, message: str, headers: dict[str, str] | None = None) -> web.Response:
    return web.Response(status=status, text=message + "\n", headers=headers)


def create_app(config: Config, pool: WorkerPool, start_time: float | None = None) -> web.Application:
    """Build the web application with the status and stream routes."""
    started = time.time() if start_time is None else start_time
    cache = FileCache()

    async def file_for(worker: Worker, message_id: int) -> File:
        key = f"file:{message_id}:{worker.id}"
        try:
            cached = cache.get(key)
        except KeyError:
            pass
        else:
            log.debug("Using cached media properties of message %d", message_id)
            return cached
        log.debug("Fetching file properties of message %d", message_id)
        file = await worker.client.get_file(message_id)
        try:
            cache.set(key, file, _CACHE_SECONDS)
        except (pickle.PicklingError, TypeError, AttributeError, ValueError) as exc:
            log.warning("Could not cache file of message %d: %s", message_id, exc)
        return file

    async def root(request: web.Request) -> web.Response:
        uptime = time_format(max(0, int(time.time() - started)))
        body = RootResponse(message="Server is running.", ok=True, uptime=uptime, version=VERSION)
        return web.json_response(body.to_dict())

    async def stream(request: web.Request) -> web.StreamResponse:
        raw_id = request.match_info["messageID"]
        if not _INT_RE.fullmatch(raw_id):
            return _error(400, f"invalid message id {raw_id!r}")
        message_id = int(raw_id)

        auth_hash = request.query.get("hash", "")
        if not auth_hash:
            return _error(400, "missing hash param")

        headers = {"Accept-Ranges": "bytes"}
        try:
            worker = pool.next_worker()
        except LookupError as exc:
            return _error(503, str(exc), headers)

        try:
            file = await file_for(worker, message_id)
        except Exception as exc:  # any lookup failure is reported to the client
            log.info("Could not get file of message %d: %s", message_id, exc)
            return _error(400, str(exc), headers)

        expected = pack_file(file.file_name, file.file_size, file.mime_type, file.id)
        if not check_hash(auth_hash, expected, config.hash_length):
            return _error(400, "invalid hash", headers)

        range_header = request.headers.get("Range", "")
        if not range_header:
            start, end, status = 0, file.file_size - 1, 200
        else:
            try:
                first = parse_range(file.file_size, range_header)[0]
            except RangeError as exc:
                return _error(400, str(exc), headers)
            start, end, status = first.start, first.end, 206
            headers["Content-Range"] = f"bytes {start}-{end}/{file.file_size}"
            log.info("Content-Range start=%d end=%d fileSize=%d", start, end, file.file_size)

        content_length = max(0, end - start + 1)
        disposition = "attachment" if request.query.get("d") == "true" else "inline"
        headers["Content-Type"] = file.mime_type or _DEFAULT_MIME_TYPE
        headers["Content-Disposition"] = f'{disposition}; filename="{file.file_name}"'

        response = web.StreamResponse(status=status, headers=headers)
        response.content_length = content_length
        await response.prepare(request)

        if request.method != "HEAD" and content_length > 0:
            async def fetch(offset: int, limit: int) -> bytes:
                return await worker.client.fetch_chunk(file.location, offset, limit)

            reader = TelegramReader(fetch, start, end, content_length)
            try:
                while chunk := await reader.read(DEFAULT_CHUNK_SIZE):
                    await response.write(chunk)
            except Exception as exc:  # the client may go away or a chunk may fail
                log.error("Error while copying stream: %s", exc)
            finally:
                await reader.close()

        await response.write_eof()
        return response

    app = web.Application()
    app.router.add_get("/", root)
    app.router.add_get("/stream/{messageID}", stream)
    log.info("Loaded all API routes")
    return app