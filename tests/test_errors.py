"""Tests for viewstate.errors — exception hierarchy and error messages."""

from viewstate.errors import (
    ConfigurationError,
    NavigationError,
    StorageError,
    ViewModelNotSetError,
    ViewStateError,
)


class TestHierarchy:
    def test_configuration_error_is_viewstate_error(self) -> None:
        assert issubclass(ConfigurationError, ViewStateError)

    def test_navigation_error_is_viewstate_error(self) -> None:
        assert issubclass(NavigationError, ViewStateError)

    def test_storage_error_is_viewstate_error(self) -> None:
        assert issubclass(StorageError, ViewStateError)

    def test_view_model_not_set_is_viewstate_error(self) -> None:
        assert issubclass(ViewModelNotSetError, ViewStateError)


class TestViewModelNotSetError:
    def test_names_the_page(self) -> None:
        class MetricsPage:
            pass

        err = ViewModelNotSetError(MetricsPage())
        assert str(err).startswith("MetricsPage.view_model must be set")
