"""viewstate exception hierarchy.

Shared by the navigation manager, session storage, page host and the
page state controller so every module raises and catches the same types.
"""


class ViewStateError(Exception):
    """Base for all viewstate-specific errors."""


class ConfigurationError(ViewStateError):
    """Raised when configuration is invalid.

    Typically raised while building a navigation manager or a session
    storage from ``ViewStateConfig``.
    """


class NavigationError(ViewStateError):
    """A navigation target could not be resolved or left the base URI.

    Navigation failures are not retried.
    """


class StorageError(ViewStateError):
    """A session storage value could not be read or written.

    Raised for tampered or undecodable values on read and for values that
    cannot be serialized on write.
    """


class ViewModelNotSetError(ViewStateError):
    """The page's view model was not constructed before initialization."""

    def __init__(self, page: object) -> None:
        name = type(page).__name__
        super().__init__(
            f"{name}.view_model must be set before the view model is "
            "initialized from the query string."
        )
