"""Tests for cached translation with credential rotation."""

import pytest

from chatlog_translator.cache import TranslationCache
from chatlog_translator.credentials import Credential, CredentialRotator
from chatlog_translator.errors import (
    AllCredentialsExhaustedError,
    QuotaExceededError,
    TranslationProviderError,
    TransportError,
)
from chatlog_translator.translator import Translator


class FakeClient:
    """Records calls; answers from a per-credential script of outcomes.

    ``outcomes`` maps client_id to "ok", "quota", "error" or "timeout".
    Unlisted credentials answer "ok".
    """

    def __init__(self, outcomes: dict | None = None):
        self.outcomes = outcomes or {}
        self.calls: list[tuple[str, str]] = []

    def translate(self, text: str, credential: Credential) -> str:
        self.calls.append((text, credential.client_id))
        outcome = self.outcomes.get(credential.client_id, "ok")
        if outcome == "quota":
            raise QuotaExceededError("Query limit exceeded.")
        if outcome == "error":
            raise TranslationProviderError("Authentication failed", code="024")
        if outcome == "timeout":
            raise TransportError("timed out")
        return f"<{text}>"


def _translator(client: FakeClient, n_creds: int = 3) -> Translator:
    creds = [Credential(f"id-{i}", f"secret-{i}") for i in range(n_creds)]
    return Translator(client, TranslationCache(), CredentialRotator(creds))


class TestEmptyText:
    def test_empty_short_circuits(self):
        client = FakeClient()
        translator = _translator(client)
        assert translator.translate("") == ""
        assert client.calls == []
        assert len(translator.cache) == 0
        assert translator.cache.misses == 0

    def test_empty_even_when_exhausted(self):
        client = FakeClient({"id-0": "quota"})
        translator = _translator(client, n_creds=1)
        with pytest.raises(AllCredentialsExhaustedError):
            translator.translate("a")
        assert translator.translate("") == ""


class TestCaching:
    def test_second_call_hits_cache(self):
        client = FakeClient()
        translator = _translator(client)
        assert translator.translate("Hello there.") == "<Hello there.>"
        assert translator.translate("Hello there.") == "<Hello there.>"
        assert client.calls == [("Hello there.", "id-0")]
        assert translator.cache.hits == 1

    def test_different_text_not_shared(self):
        client = FakeClient()
        translator = _translator(client)
        translator.translate("a")
        translator.translate("b")
        assert len(client.calls) == 2

    def test_failure_not_cached(self):
        client = FakeClient({"id-0": "error"})
        translator = _translator(client)
        with pytest.raises(TranslationProviderError):
            translator.translate("a")
        assert "a" not in translator.cache

    def test_cache_survives_exhaustion(self):
        client = FakeClient()
        translator = _translator(client, n_creds=1)
        translator.translate("known")
        client.outcomes["id-0"] = "quota"
        with pytest.raises(AllCredentialsExhaustedError):
            translator.translate("unknown")
        assert translator.translate("known") == "<known>"


class TestRotation:
    def test_quota_rotates_once_and_retries_once(self):
        client = FakeClient({"id-0": "quota"})
        translator = _translator(client)
        assert translator.translate("a") == "<a>"
        assert client.calls == [("a", "id-0"), ("a", "id-1")]
        assert translator.rotator.cursor == 1

    def test_rotated_credential_stays_active(self):
        client = FakeClient({"id-0": "quota"})
        translator = _translator(client)
        translator.translate("a")
        translator.translate("b")
        assert client.calls[-1] == ("b", "id-1")
        assert translator.rotator.cursor == 1

    def test_exhaustion_after_last_credential(self):
        client = FakeClient({"id-0": "quota", "id-1": "quota"})
        translator = _translator(client, n_creds=2)
        with pytest.raises(AllCredentialsExhaustedError):
            translator.translate("a")
        assert client.calls == [("a", "id-0"), ("a", "id-1")]
        assert translator.rotator.exhausted

    def test_no_requests_once_exhausted(self):
        client = FakeClient({"id-0": "quota"})
        translator = _translator(client, n_creds=1)
        with pytest.raises(AllCredentialsExhaustedError):
            translator.translate("a")
        calls_before = len(client.calls)
        with pytest.raises(AllCredentialsExhaustedError):
            translator.translate("b")
        assert len(client.calls) == calls_before

    def test_provider_error_not_retried(self):
        client = FakeClient({"id-0": "error"})
        translator = _translator(client)
        with pytest.raises(TranslationProviderError):
            translator.translate("a")
        assert client.calls == [("a", "id-0")]
        assert translator.rotator.cursor == 0

    def test_transport_error_not_retried(self):
        client = FakeClient({"id-0": "timeout"})
        translator = _translator(client)
        with pytest.raises(TransportError):
            translator.translate("a")
        assert len(client.calls) == 1
        assert translator.rotator.cursor == 0
