"""Query string parsing and composition."""

from viewstate.http.query import QueryParams, add_query_string

__all__ = ["QueryParams", "add_query_string"]
