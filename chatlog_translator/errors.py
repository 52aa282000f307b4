"""Exception hierarchy for the chat log translator."""


class ChatlogTranslatorError(Exception):
    """Base class for every error raised by this package."""


class LineParseError(ChatlogTranslatorError):
    """Raised when a raw log line cannot be turned into a LogEvent."""

    def __init__(self, message: str, line: str = ""):
        super().__init__(message)
        self.line = line


class MalformedLineError(LineParseError):
    """Raised when a line has fewer fields than the format requires."""


class InvalidTimestampError(LineParseError):
    """Raised when the timestamp field does not match the log format."""


class TranslationError(ChatlogTranslatorError):
    """Base class for failures while translating a piece of text."""


class QuotaExceededError(TranslationError):
    """Raised when the active credential has used up its quota."""


class AllCredentialsExhaustedError(TranslationError):
    """Raised when no credential with remaining quota is left."""


class TranslationProviderError(TranslationError):
    """Raised when the provider answers with a non-quota error."""

    def __init__(self, message: str, code: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.code = code
        self.status_code = status_code


class TransportError(TranslationError):
    """Raised when the provider cannot be reached or times out."""


class TailSourceError(ChatlogTranslatorError):
    """Raised when the watched log file cannot be opened or read."""


class ConfigurationError(ChatlogTranslatorError):
    """Raised for invalid or incomplete configuration at startup."""


class CredentialLoadError(ChatlogTranslatorError):
    """Raised when the credential file is missing or malformed."""
