"""viewstate — keep page state in the URL and in session storage.

A page's live view model, its snapshot in browser session storage and the
current URL are kept consistent by two shared operations.

Basic usage::

    from viewstate import NavigationManager, ProtectedSessionStorage
    from viewstate import after_view_model_changed, initialize_view_model

    nav = NavigationManager("https://dashboard.local/", "https://dashboard.local/Metrics")
    storage = ProtectedSessionStorage(session, secret_key="s3cr3t")

    page = MetricsPage(nav, storage)
    await initialize_view_model(page)      # restore or read the query
    page.view_model.duration = 15
    await after_view_model_changed(page)   # new URL + saved snapshot
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "NavigationError",
    "NavigationManager",
    "PageHost",
    "PageWithSessionAndUrlState",
    "ProtectedSessionStorage",
    "QueryParams",
    "StorageError",
    "StorageResult",
    "UrlState",
    "ViewModelNotSetError",
    "ViewStateConfig",
    "ViewStateError",
    "after_view_model_changed",
    "initialize_view_model",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import viewstate`` fast while providing a clean top-level API.
    """
    if name == "ViewStateConfig":
        from viewstate.config import ViewStateConfig

        return ViewStateConfig

    if name == "NavigationManager":
        from viewstate.navigation import NavigationManager

        return NavigationManager

    if name in ("ProtectedSessionStorage", "StorageResult"):
        from viewstate import storage as _storage

        return getattr(_storage, name)

    if name == "QueryParams":
        from viewstate.http.query import QueryParams

        return QueryParams

    if name in (
        "PageHost",
        "PageWithSessionAndUrlState",
        "UrlState",
        "after_view_model_changed",
        "initialize_view_model",
    ):
        from viewstate import pages as _pages

        return getattr(_pages, name)

    if name in (
        "ConfigurationError",
        "NavigationError",
        "StorageError",
        "ViewModelNotSetError",
        "ViewStateError",
    ):
        from viewstate import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
