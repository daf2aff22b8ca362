# Overview: Process-local read-through cache for the settings lookup lists.

from __future__ import annotations

import threading
from typing import Any, Callable

from flask import current_app


class _CacheState:
    def __init__(self):
        self.lock = threading.Lock()
        self.values: dict[str, Any] = {}
        # Bumped by invalidate; a load only lands if its key was not bumped meanwhile
        self.generations: dict[str, int] = {}
        self.epoch = 0
        self.hits = 0
        self.misses = 0


class LookupCache:
    """
    Read-through cache for small lookup lists (categories, materials).

    State lives on the app (app.extensions["lookup_cache"]), so each app
    instance, and each test app, gets its own cache. Entries stay until a
    mutating settings call invalidates them; there is no TTL.
    """

    def __init__(self, app=None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app) -> None:
        app.extensions["lookup_cache"] = _CacheState()

    @staticmethod
    def _state() -> _CacheState:
        return current_app.extensions["lookup_cache"]

    def get_or_load(self, key: str, loader: Callable[[], Any]) -> Any:
        state = self._state()
        with state.lock:
            if key in state.values:
                state.hits += 1
                return state.values[key]
            state.misses += 1
            seen = (state.epoch, state.generations.get(key, 0))
        value = loader()
        with state.lock:
            if (state.epoch, state.generations.get(key, 0)) == seen:
                state.values[key] = value
        return value

    def invalidate(self, *keys: str) -> None:
        state = self._state()
        with state.lock:
            if not keys:
                state.values.clear()
                state.epoch += 1
                return
            for key in keys:
                state.values.pop(key, None)
                state.generations[key] = state.generations.get(key, 0) + 1

    def stats(self) -> dict:
        state = self._state()
        with state.lock:
            return {"keys": sorted(state.values), "hits": state.hits, "misses": state.misses}
