"""Domain exceptions raised by the synthesis pipeline.

Each carries the HTTP status the API layer reports for it; the message is
returned to the caller verbatim as ``{"error": message}``.
"""


class WriteFlowError(Exception):
    """Base class for errors with a user-facing message."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequestError(WriteFlowError):
    """Required input is missing or blank. No side effects were attempted."""

    status_code = 400


class BookNotFoundError(WriteFlowError):
    """The referenced book does not exist."""

    status_code = 404

    def __init__(self, book_id: str | None = None):
        super().__init__("Book not found")
        self.book_id = book_id


class InsufficientBooksError(InvalidRequestError):
    """Fewer than two books carry idea cards for a cross-book narrative."""

    def __init__(self):
        super().__init__("Need ideas from at least 2 books to generate a narrative")


class EmptyLibraryError(InvalidRequestError):
    """The library holds no books at all."""

    def __init__(self):
        super().__init__("No books in your library yet - add a book first.")


class NothingToDigestError(InvalidRequestError):
    """No idea card was created inside the digest window."""

    def __init__(self, window_days: int):
        super().__init__(
            f"No ideas found in the past {window_days} days - distil some notes first."
        )
        self.window_days = window_days


class SearchConfigError(WriteFlowError):
    """Web search is not configured."""

    def __init__(self):
        super().__init__("SERPER_API_KEY not configured")
