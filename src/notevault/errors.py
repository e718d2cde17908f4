"""Exceptions raised by :class:`notevault.store.NoteStore`.

All of them derive from :class:`Error`, so callers that don't care about the specific failure can catch that.
"""

from typing import Optional


class Error(Exception):
    """Base class for notevault errors.

    .. attribute:: message
       :type: str

    .. attribute:: name
       :type: Optional[str]

       The note the failed operation was targeting, if any.
    """
    def __init__(self, message: str, name: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.name = name


class InvalidArgumentError(Error, ValueError):
    """Raised when a required name, content, or list entry is missing or blank."""


class NotFoundError(Error):
    """Raised when an operation targets a note whose file does not exist."""


class AlreadyExistsError(Error):
    """Raised when a rename would overwrite an existing note."""


class IOFailure(Error):
    """Raised when the filesystem fails for a reason other than a note's (non)existence.

    The underlying exception is available as :attr:`cause` and is also chained as ``__cause__``.
    """
    def __init__(self, message: str, name: Optional[str] = None, cause: BaseException = None):
        super().__init__(message, name)
        self.cause = cause
