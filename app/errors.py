"""
Error types raised by the document services.
"""


class PipewriterError(Exception):
    """Base class for errors reported back to the caller as a failed result."""


class InvalidInputError(PipewriterError):
    """Malformed operation options (unknown mode, empty content, ...)."""


class HostMutationError(PipewriterError):
    """The document rejected an insert, delete or style change."""


class CopywriterUnavailableError(PipewriterError):
    """No LLM client is configured for copy drafting."""
