"""Named failure kinds surfaced by the conversation and specification services.

Each maps to its own HTTP status in ``main.py`` so clients can tell a missing
row apart from a broken database or a misbehaving model.
"""


class SpecBuilderError(Exception):
    error_code = "error"
    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class NotFound(SpecBuilderError):
    """Row is absent or owned by someone else. Both cases look the same to the caller."""
    error_code = "not_found"
    status_code = 404


class StorageUnavailable(SpecBuilderError):
    error_code = "storage_unavailable"
    status_code = 503


class GenerationFailed(SpecBuilderError):
    """The text generation call errored, timed out or was rejected."""
    error_code = "generation_failed"
    status_code = 502


class InvalidGenerationOutput(SpecBuilderError):
    """Generation succeeded but the reply is not valid JSON of the expected shape."""
    error_code = "invalid_generation_output"
    status_code = 502
