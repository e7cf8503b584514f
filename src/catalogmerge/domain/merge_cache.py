"""Time-boxed, rebuildable view of the merge registry."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from catalogmerge.domain.errors import StoreUnavailableError
from catalogmerge.domain.model import MergeSnapshot

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from catalogmerge.domain.model import MergeDirective

DEFAULT_TTL_SECONDS = 60.0

log = getLogger(__name__)


class DirectiveSource(Protocol):
    """Anything that can list the active merge directives (normally the registry)."""

    def list(self) -> Sequence[MergeDirective]: ...


@dataclass(slots=True)
class _Rebuild:
    """One in-flight rebuild that concurrent readers wait on."""

    generation: int
    done: threading.Event = field(default_factory=threading.Event)
    snapshot: MergeSnapshot | None = None
    error: BaseException | None = None


class MergeCache:
    """Materialised ``MergeSnapshot`` refreshed at most once per TTL.

    Snapshots are immutable and swapped by reference, so readers never see a partial
    rebuild. Concurrent readers of a stale cache share a single rebuild. When a
    rebuild fails the last good snapshot is served; without one the error propagates.
    """

    def __init__(
        self,
        source: DirectiveSource,
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds < 0:
            raise ValueError("ttl_seconds must be non-negative")
        self._source = source
        self._ttl = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._snapshot: MergeSnapshot | None = None
        self._last_good: MergeSnapshot | None = None
        self._in_flight: _Rebuild | None = None
        self._generation = 0

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    @property
    def snapshot(self) -> MergeSnapshot | None:
        return self._snapshot

    def read(self) -> MergeSnapshot:
        with self._lock:
            snapshot = self._snapshot
            if snapshot is not None and not self._is_stale(snapshot):
                return snapshot
            rebuild = self._in_flight
            leader = rebuild is None
            if rebuild is None:
                rebuild = _Rebuild(generation=self._generation)
                self._in_flight = rebuild

        if leader:
            self._rebuild(rebuild)
        else:
            rebuild.done.wait()

        if rebuild.snapshot is not None:
            return rebuild.snapshot
        if rebuild.error is not None:
            raise rebuild.error
        raise RuntimeError("Merge cache rebuild finished without a result")

    def invalidate(self) -> None:
        """Drop the current snapshot; the next ``read`` rebuilds regardless of TTL."""
        with self._lock:
            self._snapshot = None
            self._generation += 1
            # readers arriving from now on must not join a rebuild that started earlier
            self._in_flight = None
        log.debug("Merge cache invalidated")

    def _is_stale(self, snapshot: MergeSnapshot) -> bool:
        return self._clock() - snapshot.built_at >= self._ttl

    def _rebuild(self, rebuild: _Rebuild) -> None:
        log.info("Refreshing merge cache")
        try:
            directives = self._source.list()
            snapshot = MergeSnapshot.build(directives, built_at=self._clock())
        except StoreUnavailableError as exc:
            fallback = self._release(rebuild)
            if fallback is not None:
                log.warning("Merge cache refresh failed, serving stale snapshot: %s", exc)
                rebuild.snapshot = fallback
            else:
                log.error("Merge cache refresh failed with no snapshot to fall back on: %s", exc)
                rebuild.error = exc
            rebuild.done.set()
            return
        except Exception as exc:
            self._release(rebuild)
            rebuild.error = exc
            rebuild.done.set()
            raise

        with self._lock:
            if rebuild.generation == self._generation:
                self._snapshot = snapshot
            self._last_good = snapshot
            if self._in_flight is rebuild:
                self._in_flight = None
        rebuild.snapshot = snapshot
        rebuild.done.set()
        log.info(
            "Merge cache refreshed: %s hidden products, %s primary products with merges",
            len(snapshot.hidden_handles),
            len(snapshot.merge_map),
        )

    def _release(self, rebuild: _Rebuild) -> MergeSnapshot | None:
        with self._lock:
            if self._in_flight is rebuild:
                self._in_flight = None
            return self._last_good
