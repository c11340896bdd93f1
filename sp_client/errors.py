from http_utils.http_utils import HttpStatusError

__all__ = ["CompositionError", "HttpStatusError", "BatchMisuseError", "BatchResponseError"]


class CompositionError(ValueError):
    """Malformed base url, path segment or property bag."""


class BatchMisuseError(RuntimeError):
    """Batch executed twice, or a request registered after execute()."""


class BatchResponseError(RuntimeError):
    """Combined batch response could not be matched to its requests."""
