"""Registry of open streams keyed by their id."""

from __future__ import annotations

import threading
from typing import Callable, Iterator

from .service import Service


class ServiceMap:
    """Thread-safe mapping of stream ids to services."""

    def __init__(self):
        self._remotes: dict[int, Service] = {}
        self._lock = threading.RLock()

    def end(self) -> None:
        """End every service and forget them all."""
        with self._lock:
            services = list(self._remotes.values())
            self._remotes.clear()
        for service in services:
            service.end()

    def insert(self, remote_id: int, service: Service) -> None:
        """Add ``service`` under ``remote_id``; the id must be unused."""
        with self._lock:
            if remote_id in self._remotes:
                raise ValueError(f"Remote ID {remote_id} is already being used")
            self._remotes[remote_id] = service

    def get(self, remote_id: int) -> Service | None:
        with self._lock:
            return self._remotes.get(remote_id)

    def remove(self, remote_id: int) -> Service | None:
        """Forget and return the service under ``remote_id``, if any."""
        with self._lock:
            return self._remotes.pop(remote_id, None)

    def clear(self) -> None:
        """Forget all services without ending them."""
        with self._lock:
            self._remotes.clear()

    def end_service(self, remote_id: int) -> bool:
        """End and forget one service; returns whether it existed."""
        service = self.remove(remote_id)
        if service is None:
            return False
        service.end()
        return True

    def for_each(self, fn: Callable[[int, Service], None]) -> None:
        for remote_id, service in self.items():
            fn(remote_id, service)

    def items(self) -> list[tuple[int, Service]]:
        with self._lock:
            return list(self._remotes.items())

    def ids(self) -> list[int]:
        with self._lock:
            return list(self._remotes)

    @property
    def count(self) -> int:
        return len(self)

    def __len__(self) -> int:
        with self._lock:
            return len(self._remotes)

    def __contains__(self, remote_id: object) -> bool:
        with self._lock:
            return remote_id in self._remotes

    def __iter__(self) -> Iterator[int]:
        return iter(self.ids())