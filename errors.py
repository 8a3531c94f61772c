# errors.py


class ChatError(Exception):
    """Base class for failures raised while handling a user action."""


class TransportError(ChatError):
    """Network or HTTP failure talking to the model or the webhook."""

    def __init__(self, message, retryable=False):
        super().__init__(message)
        self.retryable = retryable


class ParseError(ChatError):
    """A model reply could not be unwrapped into a JSON document."""

    def __init__(self, message, raw_text=""):
        super().__init__(message)
        self.raw_text = raw_text


class UninitializedError(ChatError):
    """An action was attempted before its chat session exists."""


class SessionBusyError(ChatError):
    """A reply is still pending for this session."""
