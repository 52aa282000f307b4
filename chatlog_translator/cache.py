"""In-memory translation cache keyed on the exact source text."""

import threading


class TranslationCache:
    """Maps source text to translated text for the lifetime of the process.

    Entries never expire and are not tied to the credential that produced
    them. A lock guards the map so the cache stays consistent if more than
    one worker ever shares it.
    """

    def __init__(self):
        self._entries: dict[str, str] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def lookup(self, text: str) -> str | None:
        """Return the cached translation, or None if ``text`` is unknown."""
        with self._lock:
            translated = self._entries.get(text)
            if translated is None:
                self._misses += 1
            else:
                self._hits += 1
            return translated

    def store(self, text: str, translated: str):
        with self._lock:
            self._entries[text] = translated

    @property
    def hits(self) -> int:
        with self._lock:
            return self._hits

    @property
    def misses(self) -> int:
        with self._lock:
            return self._misses

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, text: str) -> bool:
        with self._lock:
            return text in self._entries
