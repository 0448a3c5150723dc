"""In-memory mapping store for short codes.

The store holds two mirror-image dictionaries, short code to URL and URL
to short code, guarded by one reader/writer lock. It lives only as long
as the process; nothing is persisted.

Architecture Overview
=====================
::
    ┌──────────────────────────────────────────────┐
    │                 MappingStore                 │
    │                                              │
    │   ReadWriteLock                              │
    │   ├─ shared:    resolve(), list_recent()     │
    │   └─ exclusive: shorten()                    │
    │                                              │
    │   _forward: code ──▶ url                     │
    │   _reverse: url  ──▶ code                    │
    └──────────────────────────────────────────────┘

Flow Diagram - shorten()
========================
::
    ┌─────────────┐
    │ Acquire     │
    │ write lock  │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ URL already │──── YES ──▶ return existing code
    │ in reverse? │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Generate    │◀──────────┐
    │ code        │           │ collision or reserved
    └──────┬──────┘           │ (up to max_attempts)
           ▼                  │
    ┌─────────────┐           │
    │ Free?       │───── NO ──┘
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Insert into │
    │ both maps   │
    └─────────────┘

How to Use
===========
**Step 1 - Build a store**::
    store = MappingStore(max_attempts=10, reserved_codes={"health"})

**Step 2 - Shorten and resolve**::
    code = store.shorten("http://example.com")
    assert store.resolve(code) == "http://example.com"

**Step 3 - List mappings**::
    for mapping in store.list_recent(10):
        print(mapping.short_code, mapping.original_url)

Key Behaviours
===============
- Shortening a URL that is already stored returns its existing code and
  adds nothing.
- The reverse-lookup check, code generation and both inserts run under a
  single write-lock hold, so no two URLs can ever share a code.
- Reads run concurrently; a waiting writer blocks new readers.
- ``list_recent`` returns newest mappings first. Callers should only rely
  on getting at most ``limit`` mappings.
"""

__all__ = ["DEFAULT_MAX_ATTEMPTS", "Mapping", "MappingStore", "ReadWriteLock"]

import threading
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from shortener.codes import generate_short_code
from shortener.errors import ExhaustedError, NotFoundError

DEFAULT_MAX_ATTEMPTS = 10


class ReadWriteLock:
    """Lock allowing many concurrent readers or a single writer.

    Writers are preferred: once a writer is waiting, new readers queue
    behind it. The lock is not reentrant.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


@dataclass(frozen=True)
class Mapping:
    short_code: str
    original_url: str


class MappingStore:
    """Thread-safe short code <-> URL mapping store.

    Args:
        code_generator: Zero-argument callable returning a candidate code.
        max_attempts: How many candidates ``shorten`` tries before giving up.
        reserved_codes: Codes that are never handed out (e.g. route names
            that would shadow a short code).
    """

    def __init__(
        self,
        code_generator: Callable[[], str] = generate_short_code,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        reserved_codes: Iterable[str] = (),
    ) -> None:
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts!r}")
        self._generate = code_generator
        self._max_attempts = max_attempts
        self._reserved = frozenset(reserved_codes)
        self._forward: dict[str, str] = {}
        self._reverse: dict[str, str] = {}
        self._lock = ReadWriteLock()

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._forward)

    def shorten(self, normalized_url: str) -> str:
        """Return the short code for a normalized URL, creating one if needed.

        Args:
            normalized_url: URL already passed through ``normalize_url``.

        Returns:
            str: The existing code for this URL, or a newly generated one.

        Raises:
            ExhaustedError: If the random source fails or every attempt
                produced a code that is taken or reserved.
        """
        with self._lock.write_locked():
            existing = self._reverse.get(normalized_url)
            if existing is not None:
                return existing

            code = self._next_free_code()
            self._forward[code] = normalized_url
            self._reverse[normalized_url] = code
            return code

    def resolve(self, short_code: str) -> str:
        """Look up the original URL for a short code.

        Raises:
            NotFoundError: If no mapping exists for ``short_code``.
        """
        with self._lock.read_locked():
            url = self._forward.get(short_code)
        if url is None:
            raise NotFoundError(f"Short URL not found: {short_code}")
        return url

    def list_recent(self, limit: int) -> list[Mapping]:
        """Return up to ``limit`` mappings, newest first."""
        if limit <= 0:
            return []
        with self._lock.read_locked():
            mappings = []
            for code in reversed(self._forward):
                if len(mappings) >= limit:
                    break
                mappings.append(Mapping(short_code=code, original_url=self._forward[code]))
        return mappings

    def _next_free_code(self) -> str:
        # Caller holds the write lock.
        for _ in range(self._max_attempts):
            try:
                code = self._generate()
            except (OSError, NotImplementedError) as exc:
                raise ExhaustedError(f"failed to generate short code: {exc}") from exc
            if code not in self._forward and code not in self._reserved:
                return code
        raise ExhaustedError(f"failed to generate a unique short code after {self._max_attempts} attempts")
