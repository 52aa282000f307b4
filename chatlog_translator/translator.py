"""Cached translation with credential rotation on quota errors."""

import logging

from chatlog_translator.cache import TranslationCache
from chatlog_translator.credentials import CredentialRotator
from chatlog_translator.errors import AllCredentialsExhaustedError, QuotaExceededError

logger = logging.getLogger(__name__)


class Translator:
    """Translates text through a provider client, consulting a cache first.

    ``client`` is anything with ``translate(text, credential) -> str`` that
    raises QuotaExceededError when the credential's quota is used up
    (normally a PapagoClient). The cache and rotator are owned by the
    caller and only mutated from the calling thread.
    """

    def __init__(self, client, cache: TranslationCache, rotator: CredentialRotator):
        self._client = client
        self._cache = cache
        self._rotator = rotator

    @property
    def cache(self) -> TranslationCache:
        return self._cache

    @property
    def rotator(self) -> CredentialRotator:
        return self._rotator

    def translate(self, text: str) -> str:
        """Return the translation of ``text``.

        Each quota error moves the rotator to the next credential and retries
        once with it; the loop is bounded by the number of credentials left.
        Raises AllCredentialsExhaustedError when none remain. Other
        TranslationErrors propagate unchanged.
        """
        if text == "":
            return ""

        cached = self._cache.lookup(text)
        if cached is not None:
            logger.debug("Using translation cache: %s", text)
            return cached

        for _ in range(self._rotator.remaining()):
            credential = self._rotator.current()
            try:
                translated = self._client.translate(text, credential)
            except QuotaExceededError as e:
                logger.info("Quota exceeded for credential %s: %s", credential.client_id, e)
                self._rotator.advance()
                continue

            self._cache.store(text, translated)
            return translated

        raise AllCredentialsExhaustedError(
            f"All {len(self._rotator)} credential(s) are exhausted"
        )
