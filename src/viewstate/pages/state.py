"""Page state controller.

Reconciles a page's live view model, its snapshot in session storage and
the current URL.  Shared by every page implementing
``PageWithSessionAndUrlState``::

    class MetricsPage:
        async def initialize(self) -> None:
            await initialize_view_model(self)

        async def on_selection_changed(self) -> None:
            await after_view_model_changed(self)

Returning to a page at its bare base path restores the last state from
storage by redirecting to that state's URL.  The redirect re-enters
initialization at the new URL, which then differs from the base path and
populates the view model from the query.  Neither function loops or
retries on its own.
"""

import logging
from typing import Any

from viewstate.errors import ViewModelNotSetError
from viewstate.http.query import add_query_string
from viewstate.pages.types import PageWithSessionAndUrlState, UrlState

logger = logging.getLogger("viewstate.pages")


async def after_view_model_changed(page: PageWithSessionAndUrlState[Any, Any]) -> None:
    """Navigate to the URL of the new page state and save it to storage.

    Call after a view model change that affects the page's URL.  The
    storage write happens after navigation; if it fails the error
    propagates and the URL is already up to date.
    """
    serializable = page.convert_view_model_to_serializable()
    path_with_parameters = get_url_from_path_and_parameter_parts(
        page.get_url_from_serializable_view_model(serializable)
    )

    page.navigation_manager.navigate_to(path_with_parameters)
    await page.session_storage.set_async(page.session_storage_key, serializable)


async def initialize_view_model(page: PageWithSessionAndUrlState[Any, Any]) -> None:
    """Restore the page state from storage or populate it from the query.

    Storage is consulted only when the current URL is exactly the page's
    base path; a read that fails counts as nothing stored.  If the stored
    state maps to a different URL the page navigates there and returns
    without touching the view model.

    Raises:
        ViewModelNotSetError: If the page has no view model to populate.
    """
    nav = page.navigation_manager
    if page.base_path == nav.to_base_relative_path(nav.uri):
        try:
            result = await page.session_storage.get_async(
                page.session_storage_key, page.serializable_type
            )
        except Exception:
            logger.warning(
                "Ignoring unreadable session state for %s", page.session_storage_key, exc_info=True
            )
        else:
            if result.success and result.value is not None:
                new_url = get_url_from_path_and_parameter_parts(
                    page.get_url_from_serializable_view_model(result.value)
                )

                # Don't navigate if the URL redirects to itself.
                if new_url != "/" + page.base_path:
                    logger.debug("Restoring %s from session storage", new_url)
                    nav.navigate_to(new_url)
                    return

    if page.view_model is None:
        raise ViewModelNotSetError(page)
    page.update_view_model_from_query(page.view_model)


def get_url_from_path_and_parameter_parts(parts: UrlState) -> str:
    """Compose the relative URL string for *parts*.

    The path is returned unchanged when there are no query parameters.
    """
    if not parts.query_parameters:
        return parts.path
    return add_query_string(parts.path, parts.query_parameters)
