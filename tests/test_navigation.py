"""Tests for viewstate.navigation — base-relative paths and navigation."""

import pytest

from viewstate.errors import ConfigurationError, NavigationError
from viewstate.navigation import LocationChangedEvent, NavigationManager


class TestConstruction:
    def test_uri_defaults_to_base(self) -> None:
        nav = NavigationManager("http://localhost/")
        assert nav.uri == "http://localhost/"
        assert nav.history == ("http://localhost/",)

    def test_base_uri_gets_trailing_slash(self) -> None:
        nav = NavigationManager("http://localhost/dashboard")
        assert nav.base_uri == "http://localhost/dashboard/"

    def test_relative_base_uri_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="absolute URI"):
            NavigationManager("/dashboard/")

    def test_initial_uri_may_be_relative(self) -> None:
        nav = NavigationManager("http://localhost/", "Metrics")
        assert nav.uri == "http://localhost/Metrics"


class TestToBaseRelativePath:
    def test_strips_base(self) -> None:
        nav = NavigationManager("http://localhost/")
        assert nav.to_base_relative_path("http://localhost/Metrics") == "Metrics"

    def test_keeps_query_and_fragment(self) -> None:
        nav = NavigationManager("http://localhost/")
        assert nav.to_base_relative_path("http://localhost/Metrics?x=1#top") == "Metrics?x=1#top"

    def test_base_without_trailing_slash(self) -> None:
        nav = NavigationManager("http://localhost/app/")
        assert nav.to_base_relative_path("http://localhost/app") == ""

    def test_outside_base_raises(self) -> None:
        nav = NavigationManager("http://localhost/app/")
        with pytest.raises(NavigationError, match="not contained by the base URI"):
            nav.to_base_relative_path("http://localhost/other")


class TestNavigateTo:
    def test_relative_path(self) -> None:
        nav = NavigationManager("http://localhost/")
        nav.navigate_to("Metrics/frontend")
        assert nav.uri == "http://localhost/Metrics/frontend"
        assert nav.path == "Metrics/frontend"

    def test_absolute_path(self) -> None:
        nav = NavigationManager("http://localhost/", "Metrics/frontend")
        nav.navigate_to("/Metrics")
        assert nav.uri == "http://localhost/Metrics"

    def test_history_appends(self) -> None:
        nav = NavigationManager("http://localhost/")
        nav.navigate_to("Metrics")
        nav.navigate_to("Traces")
        assert nav.history == (
            "http://localhost/",
            "http://localhost/Metrics",
            "http://localhost/Traces",
        )

    def test_other_origin_raises(self) -> None:
        nav = NavigationManager("http://localhost/")
        with pytest.raises(NavigationError):
            nav.navigate_to("https://evil.example/Metrics")
        assert nav.uri == "http://localhost/"

    def test_protocol_relative_raises(self) -> None:
        nav = NavigationManager("http://localhost/")
        with pytest.raises(NavigationError):
            nav.navigate_to("//evil.example/Metrics")

    def test_query(self) -> None:
        nav = NavigationManager("http://localhost/")
        nav.navigate_to("Metrics?duration=15&meter=a%20b")
        assert nav.path == "Metrics"
        assert nav.query.get_int("duration") == 15
        assert nav.query["meter"] == "a b"


class TestLocationChangedListeners:
    def test_listener_notified(self) -> None:
        nav = NavigationManager("http://localhost/")
        events: list[LocationChangedEvent] = []
        nav.add_location_changed_listener(events.append)

        nav.navigate_to("Metrics")

        assert events == [LocationChangedEvent(location="http://localhost/Metrics")]

    def test_removed_listener_not_notified(self) -> None:
        nav = NavigationManager("http://localhost/")
        events: list[LocationChangedEvent] = []
        nav.add_location_changed_listener(events.append)
        nav.remove_location_changed_listener(events.append)

        nav.navigate_to("Metrics")

        assert events == []

    def test_remove_unknown_listener_is_ignored(self) -> None:
        nav = NavigationManager("http://localhost/")
        nav.remove_location_changed_listener(lambda event: None)
