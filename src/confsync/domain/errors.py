"""Domain errors surfaced by the data repository."""

from enum import Enum

HTTP_NOT_ACCEPTABLE = 406
HTTP_VOTE_TOO_EARLY = 477
HTTP_VOTE_TOO_LATE = 478


class ErrorKind(str, Enum):
    """Classification of repository failures."""

    SYNC_FAILED = "sync_failed"
    UNAUTHORIZED = "unauthorized"
    INCORRECT_CODE = "incorrect_code"
    VERIFICATION_FAILED = "verification_failed"
    TOO_EARLY_VOTE = "too_early_vote"
    TOO_LATE_VOTE = "too_late_vote"
    CANNOT_POST_VOTE = "cannot_post_vote"
    CANNOT_DELETE_VOTE = "cannot_delete_vote"
    CANNOT_FAVORITE = "cannot_favorite"


class RepositoryError(Exception):
    """Base error raised by repository operations."""

    kind: ErrorKind
    default_message = "Repository operation failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class SyncFailed(RepositoryError):
    kind = ErrorKind.SYNC_FAILED
    default_message = "Failed to synchronize with the conference service"


class Unauthorized(RepositoryError):
    kind = ErrorKind.UNAUTHORIZED
    default_message = "No user id is set"


class SessionNotFound(Unauthorized):
    """Favorite target is missing from cached sessions.

    Keeps the ``UNAUTHORIZED`` kind that consumers already match on.
    """

    default_message = "Session is not present in the local cache"


class IncorrectCode(RepositoryError):
    kind = ErrorKind.INCORRECT_CODE
    default_message = "The code was rejected"


class VerificationFailed(RepositoryError):
    kind = ErrorKind.VERIFICATION_FAILED
    default_message = "Failed to verify the code"


class TooEarlyVote(RepositoryError):
    kind = ErrorKind.TOO_EARLY_VOTE
    default_message = "Voting has not opened for this session yet"


class TooLateVote(RepositoryError):
    kind = ErrorKind.TOO_LATE_VOTE
    default_message = "Voting has closed for this session"


class CannotPostVote(RepositoryError):
    kind = ErrorKind.CANNOT_POST_VOTE
    default_message = "Failed to post the vote"


class CannotDeleteVote(RepositoryError):
    kind = ErrorKind.CANNOT_DELETE_VOTE
    default_message = "Failed to delete the vote"


class CannotFavorite(RepositoryError):
    kind = ErrorKind.CANNOT_FAVORITE
    default_message = "Failed to update the favorite"


_ERRORS_BY_KIND: dict[ErrorKind, type[RepositoryError]] = {
    ErrorKind.SYNC_FAILED: SyncFailed,
    ErrorKind.UNAUTHORIZED: Unauthorized,
    ErrorKind.INCORRECT_CODE: IncorrectCode,
    ErrorKind.VERIFICATION_FAILED: VerificationFailed,
    ErrorKind.TOO_EARLY_VOTE: TooEarlyVote,
    ErrorKind.TOO_LATE_VOTE: TooLateVote,
    ErrorKind.CANNOT_POST_VOTE: CannotPostVote,
    ErrorKind.CANNOT_DELETE_VOTE: CannotDeleteVote,
    ErrorKind.CANNOT_FAVORITE: CannotFavorite,
}


def error_for_kind(kind: ErrorKind) -> RepositoryError:
    """Build the exception matching an error kind."""
    return _ERRORS_BY_KIND[kind]()


def status_code_from_exception(exc: BaseException) -> int | None:
    """Extract an HTTP status code from an exception or its cause."""
    current: BaseException | None = exc
    while current is not None:
        response = getattr(current, "response", None)
        status_code = getattr(response, "status_code", None)
        if isinstance(status_code, int):
            return status_code
        current = current.__cause__
    return None


def classify_verification_failure(status_code: int | None) -> ErrorKind:
    """Map a failed code verification to an error kind."""
    if status_code == HTTP_NOT_ACCEPTABLE:
        return ErrorKind.INCORRECT_CODE
    return ErrorKind.VERIFICATION_FAILED


def classify_vote_failure(status_code: int | None) -> ErrorKind:
    """Map a failed vote submission to an error kind."""
    if status_code == HTTP_VOTE_TOO_EARLY:
        return ErrorKind.TOO_EARLY_VOTE
    if status_code == HTTP_VOTE_TOO_LATE:
        return ErrorKind.TOO_LATE_VOTE
    return ErrorKind.CANNOT_POST_VOTE
