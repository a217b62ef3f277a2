"""Custom exceptions for the completion provider."""


class ProviderFailure(Exception):
    """Raised when the completion provider errors or returns unusable output."""

    pass


class MalformedReplyError(ProviderFailure):
    """Raised when the provider reply is not the expected JSON object."""

    pass


class ToolExecutionError(Exception):
    """Raised when a tool picked by the model fails to run."""

    pass
