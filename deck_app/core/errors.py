"""Exception hierarchy shared by the deck, the answer store and the catalog."""

from __future__ import annotations


class DeckTalkError(Exception):
    """Base class for every recoverable DeckTalk error."""


class EmptyDeck(DeckTalkError):
    """Raised when navigating a deck that holds no questions."""


class ValidationError(DeckTalkError):
    """Raised when an answer is rejected before reaching the store."""


class CatalogImportError(DeckTalkError):
    """Raised when a question catalog cannot be parsed."""


class StoreError(DeckTalkError):
    """Base class for record store failures."""


class StoreUnavailable(StoreError):
    """The record store could not be reached or is not configured."""


class StoreRejected(StoreError):
    """The record store answered but refused the request."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NotFound(StoreError):
    """The targeted record does not exist or belongs to another session."""
