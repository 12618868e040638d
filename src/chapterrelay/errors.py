"""Exception taxonomy and failure classification for ChapterRelay."""

from enum import Enum


class ErrorKind(str, Enum):
    """Classification of a failed backend call, used to pick the fallback policy."""

    QUOTA_EXCEEDED = "quota_exceeded"
    TRANSIENT_SERVER_ERROR = "transient_server_error"
    CONTENT_POLICY_REJECTED = "content_policy_rejected"
    MALFORMED_RESPONSE = "malformed_response"
    NETWORK_FAILURE = "network_failure"
    OTHER = "other"


class ChapterRelayError(Exception):
    """Base class for all errors raised by ChapterRelay."""


class BackendError(ChapterRelayError):
    """A translation backend call failed; `kind` tells the caller how."""

    kind: ErrorKind = ErrorKind.OTHER


class QuotaExceededError(BackendError):
    """The backend rejected the call because a rate or usage limit was hit."""

    kind = ErrorKind.QUOTA_EXCEEDED


class TransientServerError(BackendError):
    """The backend failed in a way that may succeed on a retry."""

    kind = ErrorKind.TRANSIENT_SERVER_ERROR


class ContentPolicyError(BackendError):
    """The backend refused the content itself (safety or policy block)."""

    kind = ErrorKind.CONTENT_POLICY_REJECTED


class MalformedResponseError(BackendError):
    """The backend answered, but the body could not be parsed or validated."""

    kind = ErrorKind.MALFORMED_RESPONSE


class NetworkFailureError(BackendError, ConnectionError):
    """The request to an external translation endpoint did not complete."""

    kind = ErrorKind.NETWORK_FAILURE


class SourceFetchError(ChapterRelayError):
    """The list of items to translate could not be fetched or decoded."""
