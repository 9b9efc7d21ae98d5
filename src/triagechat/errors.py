"""Application-level exception types for triagechat."""


class TriageChatError(Exception):
    """Base exception for triagechat."""


class ConfigurationError(TriageChatError):
    """Raised when startup configuration is invalid or incomplete."""


class MissingSecretError(ConfigurationError):
    """Raised when no credential source holds the requested secret."""


class SessionError(TriageChatError):
    """Base exception for fatal failures inside the session loop."""


class InputReadError(SessionError):
    """Raised when the input stream cannot be read."""


class BackendError(SessionError):
    """Raised when the model backend fails to produce the next turn."""


class TranscriptOrderError(TriageChatError):
    """Raised when a turn is appended out of alternation order."""


class OutputWriteError(SessionError):
    """Raised when a reply cannot be written to the output stream."""
