from __future__ import annotations

import copy
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from threading import Lock
from typing import Any, Callable, Iterable

from bilemo.core.config import CACHE_DEFAULT_LIFETIME_SECONDS

logger = logging.getLogger(__name__)

CUSTOMERS_CACHE_TAG = "customersCache"
PHONES_CACHE_TAG = "phonesCache"
USERS_CACHE_TAG = "usersCache"


def build_cache_key(name: str, page: int, limit: int) -> str:
    return f"{name}{page}-{limit}"


@dataclass
class CacheEntry:
    value: Any
    tags: frozenset[str] = field(default_factory=frozenset)
    expires_at: float | None = None

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and now >= self.expires_at


class TagAwareCache(ABC):
    @abstractmethod
    def get(self, key: str, compute: Callable[[], Any], *, tags: Iterable[str] = ()) -> Any:
        """Retorna o valor em cache ou calcula, marca com as tags e armazena."""

    @abstractmethod
    def invalidate_tags(self, tags: Iterable[str]) -> int:
        """Remove todas as entradas marcadas com qualquer uma das tags."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...


class InMemoryTagAwareCache(TagAwareCache):
    """Cache em memória com invalidação por tag.

    Estrutura com interface para futura troca por Redis/distribuído. Não há
    proteção contra recomputação concorrente da mesma chave: duas requests
    simultâneas num miss calculam o valor duas vezes e a última grava.
    """

    def __init__(self, *, default_lifetime_seconds: int = CACHE_DEFAULT_LIFETIME_SECONDS) -> None:
        self.default_lifetime_seconds = default_lifetime_seconds
        self._entries: dict[str, CacheEntry] = {}
        self._keys_by_tag: dict[str, set[str]] = {}
        self._lock = Lock()

    def get(self, key: str, compute: Callable[[], Any], *, tags: Iterable[str] = ()) -> Any:
        now = time.monotonic()
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and not entry.is_expired(now):
                logger.debug("cache hit key=%s", key)
                return copy.deepcopy(entry.value)
            if entry is not None:
                self._forget(key)

        logger.debug("cache miss key=%s", key)
        value = compute()

        expires_at = None
        if self.default_lifetime_seconds > 0:
            expires_at = time.monotonic() + self.default_lifetime_seconds
        entry = CacheEntry(value=copy.deepcopy(value), tags=frozenset(tags), expires_at=expires_at)

        with self._lock:
            self._forget(key)
            self._entries[key] = entry
            for tag in entry.tags:
                self._keys_by_tag.setdefault(tag, set()).add(key)
        return value

    def invalidate_tags(self, tags: Iterable[str]) -> int:
        tags = [tags] if isinstance(tags, str) else list(tags)
        removed = 0
        with self._lock:
            for tag in tags:
                for key in self._keys_by_tag.pop(tag, set()):
                    if key in self._entries:
                        self._forget(key)
                        removed += 1
        logger.debug("cache invalidated tags=%s removed=%s", ",".join(tags), removed)
        return removed

    def delete(self, key: str) -> bool:
        with self._lock:
            if key not in self._entries:
                return False
            self._forget(key)
            return True

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._keys_by_tag.clear()

    def __contains__(self, key: str) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and not entry.is_expired(time.monotonic())

    def _forget(self, key: str) -> None:
        entry = self._entries.pop(key, None)
        if entry is None:
            return
        for tag in entry.tags:
            keys = self._keys_by_tag.get(tag)
            if keys is None:
                continue
            keys.discard(key)
            if not keys:
                del self._keys_by_tag[tag]


cache = InMemoryTagAwareCache()
