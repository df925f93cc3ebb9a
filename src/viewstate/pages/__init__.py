"""Pages whose state is kept in the URL and in session storage.

A page implements ``PageWithSessionAndUrlState`` and calls the shared
controller functions from its lifecycle::

    async def initialize(self) -> None:
        await initialize_view_model(self)

    async def on_filter_changed(self) -> None:
        await after_view_model_changed(self)

``PageHost`` plays the hosting framework: it constructs pages, invokes
their lifecycle, and constructs them again when initialization redirected.
"""

from viewstate.pages.host import PageHost
from viewstate.pages.state import (
    after_view_model_changed,
    get_url_from_path_and_parameter_parts,
    initialize_view_model,
)
from viewstate.pages.types import LifecyclePage, PageWithSessionAndUrlState, SessionStore, UrlState

__all__ = [
    "LifecyclePage",
    "PageHost",
    "PageWithSessionAndUrlState",
    "SessionStore",
    "UrlState",
    "after_view_model_changed",
    "get_url_from_path_and_parameter_parts",
    "initialize_view_model",
]
