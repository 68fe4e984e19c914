"""Exception hierarchy shared across netero."""


class NeteroError(Exception):
    """Raised for reportable runtime failures."""


class ConfigError(NeteroError):
    """Raised for invalid configuration (missing endpoint, bad API key, etc.)."""


class CompletionError(NeteroError):
    """Raised when the completion service cannot produce an answer.

    Fatal to the interactive session: the loop prints it and stops.
    """


class StreamDecodeError(CompletionError):
    """Raised when a streamed frame carries malformed JSON."""
