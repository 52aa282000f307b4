"""HTTP client for the Papago n2mt translation API."""

import logging

import httpx

from chatlog_translator.credentials import Credential
from chatlog_translator.errors import (
    QuotaExceededError,
    TranslationProviderError,
    TransportError,
)

logger = logging.getLogger(__name__)

PAPAGO_ENDPOINT = "https://openapi.naver.com/v1/papago/n2mt"
DEFAULT_TIMEOUT = 10.0
QUOTA_MARKER = "exceeded"


def is_quota_error(message: str) -> bool:
    """Return True if a provider error message reports an exhausted quota."""
    return QUOTA_MARKER in message.lower()


def parse_response(payload, status_code: int | None = None) -> str:
    """Extract the translated text from a decoded response body.

    Success shape:
        {"message": {"result": {"translatedText": "..."}}}
    Error shape:
        {"errorMessage": "...", "errorCode": "..."}
    """
    if not isinstance(payload, dict):
        raise TranslationProviderError(
            f"Unexpected response body: {payload!r}", status_code=status_code
        )

    error_message = payload.get("errorMessage")
    if error_message:
        error_message = str(error_message)
        error_code = payload.get("errorCode")
        if is_quota_error(error_message):
            raise QuotaExceededError(f"papago quota error: {error_message} ({error_code})")
        raise TranslationProviderError(
            f"papago error: {error_message}", code=error_code, status_code=status_code
        )

    try:
        translated = payload["message"]["result"]["translatedText"]
    except (KeyError, TypeError) as e:
        raise TranslationProviderError(
            f"Unexpected response format: {payload!r}", status_code=status_code
        ) from e
    if not isinstance(translated, str):
        raise TranslationProviderError(
            f"translatedText is not a string: {translated!r}", status_code=status_code
        )
    return translated


class PapagoClient:
    """Sends one translation request per call using a given credential."""

    def __init__(
        self,
        source_language: str,
        target_language: str,
        endpoint: str = PAPAGO_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        self._source = source_language
        self._target = target_language
        self._endpoint = endpoint
        self._client = httpx.Client(timeout=httpx.Timeout(timeout), transport=transport)
        self._requests = 0

    @property
    def request_count(self) -> int:
        return self._requests

    def translate(self, text: str, credential: Credential) -> str:
        """POST ``text`` as form data and return the translated text.

        Raises QuotaExceededError, TranslationProviderError or TransportError.
        """
        headers = {
            "Content-Type": "application/x-www-form-urlencoded; charset=UTF-8",
            "X-Naver-Client-Id": credential.client_id,
            "X-Naver-Client-Secret": credential.client_secret,
        }
        data = {"source": self._source, "target": self._target, "text": text}

        self._requests += 1
        try:
            response = self._client.post(self._endpoint, data=data, headers=headers)
        except httpx.TimeoutException as e:
            raise TransportError(f"papago request timed out: {e}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"papago request failed: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            logger.debug("Non-JSON papago response (%d): %s", response.status_code, response.text[:200])
            raise TranslationProviderError(
                f"papago returned a non-JSON body (HTTP {response.status_code})",
                status_code=response.status_code,
            ) from e

        return parse_response(payload, response.status_code)

    def close(self):
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
