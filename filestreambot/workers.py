"""Round-robin pool of bot clients used to serve downloads."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any

log = logging.getLogger(__name__)


@dataclass
class Worker:
    """A started bot client and its identity."""

    id: int
    client: Any
    username: str

    def __str__(self) -> str:
        return f"{{Worker ({self.id}|@{self.username})}}"


class WorkerPool:
    """Holds workers and hands them out in turn."""

    def __init__(self) -> None:
        self._workers: list[Worker] = []
        self._starting = 0
        self._index = 0
        self._lock = threading.Lock()

    @property
    def workers(self) -> tuple[Worker, ...]:
        """The workers in the order they were added."""
        with self._lock:
            return tuple(self._workers)

    def add(self, client: Any, username: str) -> Worker:
        """Register a client under the next worker id and return its worker."""
        with self._lock:
            self._starting += 1
            worker = Worker(id=self._starting, client=client, username=username)
            self._workers.append(worker)
        log.info("Bot @%s loaded with ID %d", username, worker.id)
        return worker

    def next_worker(self) -> Worker:
        """Return the next worker in rotation; raise LookupError if there are none."""
        with self._lock:
            if not self._workers:
                raise LookupError("no workers available")
            self._index = (self._index + 1) % len(self._workers)
            worker = self._workers[self._index]
        log.debug("Using worker %d", worker.id)
        return worker