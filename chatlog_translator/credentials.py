"""API credentials: loading from the secret file and quota rotation."""

import json
import logging
import threading
from dataclasses import dataclass, field

from chatlog_translator.errors import AllCredentialsExhaustedError, CredentialLoadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credential:
    client_id: str
    client_secret: str = field(repr=False)


def load_credentials(path: str) -> tuple[Credential, ...]:
    """Load credentials from a JSON array of clientId/clientSecret objects.

    Expected format:
        [{"clientId": "abc", "clientSecret": "xyz"}, ...]
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise CredentialLoadError(f"Credential file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise CredentialLoadError(f"Credential file {path} is not valid JSON: {e}") from e
    except OSError as e:
        raise CredentialLoadError(f"Failed to read credential file {path}: {e}") from e

    if not isinstance(data, list):
        raise CredentialLoadError(
            f"Credential file {path} must hold a JSON array, got {type(data).__name__}"
        )

    credentials = []
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise CredentialLoadError(f"Credential #{i} in {path} is not an object")
        client_id = item.get("clientId")
        client_secret = item.get("clientSecret")
        if not isinstance(client_id, str) or not client_id:
            raise CredentialLoadError(f"Credential #{i} in {path} is missing 'clientId'")
        if not isinstance(client_secret, str) or not client_secret:
            raise CredentialLoadError(f"Credential #{i} in {path} is missing 'clientSecret'")
        credentials.append(Credential(client_id=client_id, client_secret=client_secret))

    if not credentials:
        raise CredentialLoadError(f"Credential file {path} contains no credentials")

    logger.info("Loaded %d credential(s) from %s", len(credentials), path)
    return tuple(credentials)


class CredentialRotator:
    """Cursor over an ordered credential sequence.

    The cursor only moves forward: a credential whose quota ran out is
    never used again. A cursor equal to the number of credentials means
    every credential is exhausted.
    """

    def __init__(self, credentials):
        self._credentials = tuple(credentials)
        if not self._credentials:
            raise CredentialLoadError("At least one credential is required")
        self._cursor = 0
        self._lock = threading.Lock()

    @property
    def cursor(self) -> int:
        with self._lock:
            return self._cursor

    @property
    def exhausted(self) -> bool:
        with self._lock:
            return self._cursor >= len(self._credentials)

    def __len__(self) -> int:
        return len(self._credentials)

    def remaining(self) -> int:
        """Number of credentials not yet skipped, including the active one."""
        with self._lock:
            return max(len(self._credentials) - self._cursor, 0)

    def current(self) -> Credential:
        with self._lock:
            if self._cursor >= len(self._credentials):
                raise AllCredentialsExhaustedError(
                    f"All {len(self._credentials)} credential(s) are exhausted"
                )
            return self._credentials[self._cursor]

    def advance(self) -> Credential:
        """Skip the active credential and return the next one.

        Raises AllCredentialsExhaustedError when the skipped credential was
        the last one.
        """
        with self._lock:
            if self._cursor < len(self._credentials):
                self._cursor += 1
            if self._cursor >= len(self._credentials):
                logger.error("All %d credential(s) exhausted", len(self._credentials))
                raise AllCredentialsExhaustedError(
                    f"All {len(self._credentials)} credential(s) are exhausted"
                )
            logger.info(
                "Query limit exceeded, rotating credential (idx %d of %d)",
                self._cursor, len(self._credentials),
            )
            return self._credentials[self._cursor]
